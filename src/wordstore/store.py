"""
Token store handle owning one open backend resource.
"""

from enum import Enum
from os import PathLike, fspath
from types import TracebackType
import logging
import weakref

from .backends.base import Backend, RawHandle
from .config import Settings, load_settings
from .exceptions import (
    BackendError,
    DisposedError,
    OpenError,
    StorePermissionError,
    TokenIndexError,
)
from .factory import resolve_backend
from .types import Token, TokenSequence

log = logging.getLogger(__name__)


class AccessMode(str, Enum):
    """Access modes a store can be opened with."""

    READ_ONLY = "r"
    READ_WRITE = "w"

    @property
    def read_only(self) -> bool:
        return self is AccessMode.READ_ONLY

    @classmethod
    def get(cls, mode: "AccessMode | str") -> "AccessMode":
        """Get access mode by value ("r", "w") or name ("read-only", "read-write")."""
        if isinstance(mode, AccessMode):
            return mode
        if isinstance(mode, str):
            try:
                return cls(mode)
            except ValueError:
                pass
            try:
                return cls[mode.upper().replace("-", "_")]
            except KeyError:
                pass
        raise OpenError(
            f"unknown access mode, expected one of "
            f"{', '.join(m.value for m in cls)}",
            mode=str(mode),
        )


def _describe(e: Exception) -> str:
    """Describe a backend failure without errno codes."""
    if isinstance(e, OSError) and e.strerror:
        return e.strerror.lower()
    return str(e) or type(e).__name__


def _release(backend: Backend, raw: RawHandle, path: str) -> None:
    """Last-resort release for handles that were never closed."""
    log.warning(f"token store {path} was not closed explicitly, releasing it")
    try:
        backend.close(raw)
    except Exception:
        # nothing can propagate out of a finalizer
        log.exception(f"failed to release token store {path}")


class TokenStore:
    """
    Handle owning exactly one open backend resource.

    A handle is either fully open or fully closed. Use ``TokenStore.open``
    to create one, preferably as a context manager:

    .. code-block:: python

        with TokenStore.open("words.txt") as store:
            first = store.read_at(1)
    """

    def __init__(
        self,
        backend: Backend,
        raw: RawHandle,
        path: str,
        mode: AccessMode,
        max_token_length: int,
    ) -> None:
        self._backend = backend
        self._raw: RawHandle | None = raw
        self.path = path
        self.mode = mode
        self.max_token_length = max_token_length
        self._finalizer = weakref.finalize(self, _release, backend, raw, path)

    @classmethod
    def open(
        cls,
        path: str | PathLike[str],
        mode: AccessMode | str = AccessMode.READ_ONLY,
        *,
        backend: Backend | str | None = None,
        max_token_length: int | None = None,
        settings: Settings | None = None,
    ) -> "TokenStore":
        """
        Open a store at ``path``.

        :param path: Store location understood by the backend.
        :param mode: ``AccessMode`` or its value/name.
        :param backend: Backend instance or registry name. Defaults to the
                        configured backend.
        :param max_token_length: Longest token ``read_at`` accepts. Defaults to
                                 the configured limit.
        :param settings: Settings to use instead of the environment.
        :returns: An open handle.
        :raises OpenError: If the mode is unknown or the backend cannot
                           establish the resource.
        """
        access = AccessMode.get(mode)
        path_str = fspath(path)
        if not path_str:
            raise OpenError("empty store path", path=path_str, mode=access.value)

        if settings is None:
            settings = load_settings()
        if max_token_length is None:
            max_token_length = settings.max_token_length
        if max_token_length <= 0:
            raise OpenError(
                f"max token length must be positive (got {max_token_length})",
                path=path_str,
                mode=access.value,
            )

        impl = resolve_backend(backend, settings)

        try:
            raw = impl.open(path_str, access.read_only)
        except Exception as e:
            raise OpenError(
                f"could not open store: {_describe(e)}",
                path=path_str,
                mode=access.value,
            ) from e

        if raw is None:
            raise OpenError(
                "backend could not open store", path=path_str, mode=access.value
            )

        log.info(f"opened token store {path_str} ({access.name.lower()})")
        return cls(impl, raw, path_str, access, max_token_length)

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def count(self) -> int:
        """
        Return the number of addressable tokens.

        :raises DisposedError: If the handle is closed.
        :raises BackendError: If the backend fails or reports a negative count.
        """
        raw = self._ensure_open("count")
        try:
            n = self._backend.count(raw)
        except Exception as e:
            raise BackendError(
                "failed to count tokens", operation="count", path=self.path
            ) from e
        if n < 0:
            raise BackendError(
                f"backend reported a negative token count ({n})",
                operation="count",
                path=self.path,
            )
        return n

    def read_at(self, index: int) -> Token:
        """
        Return the token at a 1-based position.

        :raises TokenIndexError: If ``index`` is outside ``[1, count()]``.
        :raises DisposedError: If the handle is closed.
        :raises BackendError: If the backend read fails or the token is longer
                              than ``max_token_length``.
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"token index must be an int, got {type(index).__name__}")
        raw = self._ensure_open("read_at")
        return self._read(raw, index, self.count())

    def tokens(self) -> TokenSequence:
        """Drain every token in ascending position order."""
        raw = self._ensure_open("tokens")
        n = self.count()
        tokens = [self._read(raw, i, n) for i in range(1, n + 1)]
        log.debug(f"drained {n} tokens from {self.path}")
        return tokens

    def write_all(self, text: str) -> None:
        """
        Replace the entire store content with ``text``.

        The new content is only guaranteed to be visible after the store is
        closed and reopened.

        :raises StorePermissionError: If the handle was opened read-only. The
                                      backend is not called in that case.
        :raises DisposedError: If the handle is closed.
        :raises BackendError: If the backend write fails.
        """
        raw = self._ensure_open("write_all")
        if self.mode.read_only:
            raise StorePermissionError(
                "store is opened read-only", operation="write_all", path=self.path
            )
        if not isinstance(text, str):
            raise TypeError(f"text must be a str, got {type(text).__name__}")
        try:
            self._backend.write_all(raw, text)
        except Exception as e:
            raise BackendError(
                "failed to write store content", operation="write_all", path=self.path
            ) from e
        log.info(f"wrote {len(text)} characters to {self.path}")

    def close(self) -> None:
        """Release the backend resource. Further calls are no-ops."""
        if self.closed:
            return
        raw, self._raw = self._raw, None
        self._finalizer.detach()
        try:
            self._backend.close(raw)
        except Exception as e:
            raise BackendError(
                "failed to release store", operation="close", path=self.path
            ) from e
        log.info(f"closed token store {self.path}")

    def _ensure_open(self, operation: str) -> RawHandle:
        if self.closed:
            raise DisposedError(
                "token store is closed", operation=operation, path=self.path
            )
        return self._raw

    def _read(self, raw: RawHandle, index: int, count: int) -> Token:
        if not 1 <= index <= count:
            raise TokenIndexError("token index out of range", index=index, count=count)
        try:
            # buffer capacity includes the terminator
            token = self._backend.read_token(raw, index, self.max_token_length + 1)
        except Exception as e:
            raise BackendError(
                f"failure reading token at index {index}",
                operation="read_at",
                path=self.path,
            ) from e
        if token is None:
            raise BackendError(
                f"failure reading token at index {index}",
                operation="read_at",
                path=self.path,
            )
        if len(token) > self.max_token_length:
            raise BackendError(
                f"token at index {index} exceeds maximum length {self.max_token_length}",
                operation="read_at",
                path=self.path,
            )
        return token

    def __enter__(self) -> "TokenStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"TokenStore(path={self.path!r}, mode={self.mode.value!r}, {state})"
