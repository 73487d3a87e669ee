"""In-process backend keeping store contents in a dictionary."""

from dataclasses import dataclass
from typing import override
import logging

from ..types import Token
from .._text import split_tokens
from .base import Backend

log = logging.getLogger(__name__)


@dataclass
class _MemoryFile:
    path: str
    read_only: bool
    closed: bool = False


class MemoryBackend(Backend):
    """
    Backend holding each path's text in memory.

    Unlike ``TextFileBackend`` it reads live content on every call, so
    writes are visible to other open handles on the same path.
    """

    BACKEND_TYPE = "memory"

    def __init__(self, files: dict[str, str] | None = None) -> None:
        super().__init__()
        self.files: dict[str, str] = dict(files) if files else {}

    @override
    def open(self, path: str, read_only: bool) -> _MemoryFile | None:
        if read_only and path not in self.files:
            log.debug(f"no such path in memory backend: {path}")
            return None
        if not read_only:
            self.files.setdefault(path, "")
        return _MemoryFile(path=path, read_only=read_only)

    @override
    def close(self, raw: _MemoryFile) -> None:
        raw.closed = True

    @override
    def count(self, raw: _MemoryFile) -> int:
        return len(split_tokens(self.files[raw.path]))

    @override
    def read_token(self, raw: _MemoryFile, index: int, capacity: int) -> Token | None:
        tokens = split_tokens(self.files[raw.path])
        if raw.closed or not 1 <= index <= len(tokens):
            return None
        token = tokens[index - 1]
        # mimic a fixed-size buffer: tokens that do not fit are a failed read
        if len(token) >= capacity:
            return None
        return token

    @override
    def write_all(self, raw: _MemoryFile, text: str) -> None:
        self.files[raw.path] = text

    def read_text(self, path: str) -> str:
        """Return the raw text stored for ``path``."""
        return self.files[path]

    @override
    def __repr__(self) -> str:
        return f"MemoryBackend(paths={sorted(self.files)})"
