"""Command session owning at most one open token store."""

from functools import partial
from os import PathLike
from types import TracebackType
import logging

from .backends.base import Backend
from .config import Settings, load_settings
from .exceptions import NoStoreOpenError
from .factory import resolve_backend
from .pipeline import TransformResult, apply_transform
from .store import AccessMode, TokenStore
from .transform import (
    RenderStyle,
    Transform,
    TransformName,
    compact_sorted_by_length,
    compact_with_frequency,
    get_transform,
    sort_by_length_text,
)
from .types import TokenSequence

log = logging.getLogger(__name__)


class Session:
    """
    Owner of the store that commands operate on.

    Opening a new store closes the previous one. Commands that need a
    store raise ``NoStoreOpenError`` when none is open. Transformations
    leave the store reopened in the mode it had before.
    """

    def __init__(
        self,
        *,
        backend: Backend | str | None = None,
        max_token_length: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings if settings is not None else load_settings()
        self.backend = resolve_backend(backend, self.settings)
        self.max_token_length = max_token_length
        self._store: TokenStore | None = None

    @property
    def store(self) -> TokenStore | None:
        """The open store, if any."""
        if self._store is not None and self._store.closed:
            self._store = None
        return self._store

    def open(
        self, path: str | PathLike[str], mode: AccessMode | str = AccessMode.READ_ONLY
    ) -> TokenStore:
        """Close the current store, if any, and open ``path``."""
        self.close()
        self._store = TokenStore.open(
            path,
            mode,
            backend=self.backend,
            max_token_length=self.max_token_length,
            settings=self.settings,
        )
        return self._store

    def close(self) -> None:
        """Close the current store. Does nothing when none is open."""
        store, self._store = self._store, None
        if store is not None:
            store.close()

    def count(self) -> int:
        """Return the token count of the open store."""
        return self._require("count").count()

    def words(self, limit: int | None = None) -> TokenSequence:
        """Return the first ``limit`` tokens of the open store, or all of them."""
        store = self._require("words")
        if limit is None:
            return store.tokens()
        n = min(max(limit, 0), store.count())
        return [store.read_at(i) for i in range(1, n + 1)]

    def apply(self, transform: Transform | TransformName) -> TransformResult:
        """
        Rewrite the open store with ``transform``.

        The handle is closed for the rewrite and reopened afterwards. If the
        rewrite fails no store is left open.
        """
        if isinstance(transform, str):
            # fail before the store is closed
            get_transform(transform)
            name = transform
        else:
            name = "transform"
        store = self._require(name)
        path, mode = store.path, store.mode

        self.close()
        log.debug(f"running {name} on {path}")
        result = apply_transform(
            path,
            transform,
            backend=self.backend,
            max_token_length=store.max_token_length,
            settings=self.settings,
        )
        self.open(path, mode)
        return result

    def unique(
        self, *, style: RenderStyle | str = RenderStyle.PAREN, merge_counts: bool = False
    ) -> TransformResult:
        """Leave only unique tokens annotated with their counts."""
        self._require("unique")
        return self.apply(
            partial(compact_with_frequency, style=style, merge_counts=merge_counts)
        )

    def sort(self, *, unique: bool = False) -> TransformResult:
        """Sort tokens by length, optionally grouping duplicates first."""
        self._require("sort")
        return self.apply(compact_sorted_by_length if unique else sort_by_length_text)

    def _require(self, command: str) -> TokenStore:
        store = self.store
        if store is None:
            raise NoStoreOpenError(command=command)
        return store

    def __enter__(self) -> "Session":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Session(backend={self.backend!r}, store={self.store!r})"
