"""
Base backend interface for token store implementations.
"""

from abc import ABC, abstractmethod

from ..types import Token

type RawHandle = object


class Backend(ABC):
    """
    Abstract storage engine holding whitespace-delimited tokens.

    Backends expose raw primitives only. Idempotent closing, index validation,
    mode checks and error typing are the responsibility of ``TokenStore``.
    """

    BACKEND_TYPE: str = "base"

    @abstractmethod
    def open(self, path: str, read_only: bool) -> RawHandle | None:
        """Establish a resource for ``path``; ``None`` signals failure."""
        ...

    @abstractmethod
    def close(self, raw: RawHandle) -> None:
        """Release a resource returned by ``open``."""
        ...

    @abstractmethod
    def count(self, raw: RawHandle) -> int:
        """Return the number of tokens currently stored."""
        ...

    @abstractmethod
    def read_token(self, raw: RawHandle, index: int, capacity: int) -> Token | None:
        """
        Read the token at a 1-based position.

        :param raw: Resource returned by ``open``.
        :param index: 1-based token position.
        :param capacity: Buffer size available for the token, terminator included.
        :returns: The token, or ``None`` when the read fails.
        """
        ...

    @abstractmethod
    def write_all(self, raw: RawHandle, text: str) -> None:
        """Replace the whole stored content with ``text``."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
