"""Plain text file backend."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import override
import logging
import os
import tempfile

from ..types import Token, TokenSequence
from .._text import split_tokens
from .base import Backend

log = logging.getLogger(__name__)


@dataclass
class _TextFile:
    """Open text file state: a token snapshot taken at open time."""

    path: Path
    read_only: bool
    tokens: TokenSequence = field(default_factory=list)
    closed: bool = False


class TextFileBackend(Backend):
    """
    Backend storing tokens in a text file.

    The file is read once when opened; writes replace the whole file
    atomically by writing a sibling temporary file and renaming it.
    """

    BACKEND_TYPE = "text"

    def __init__(self, encoding: str = "utf-8") -> None:
        super().__init__()
        self.encoding = encoding

    @override
    def open(self, path: str, read_only: bool) -> _TextFile:
        """
        Open ``path`` and snapshot its tokens.

        A missing path opened read-write is created empty.

        :raises FileNotFoundError: If a read-only path, or a read-write path's
            parent directory, does not exist.
        :raises IsADirectoryError: If ``path`` is a directory.
        :raises PermissionError: If a read-write path is not writable.
        """
        p = Path(path)

        if p.is_dir():
            raise IsADirectoryError(f"is a directory: {p}")

        if read_only:
            # raises FileNotFoundError for missing files
            text = p.read_text(encoding=self.encoding)
        else:
            if not p.parent.is_dir():
                raise FileNotFoundError(f"parent directory does not exist: {p.parent}")
            if p.exists():
                if not os.access(p, os.W_OK):
                    raise PermissionError(f"file is not writable: {p}")
                text = p.read_text(encoding=self.encoding)
            else:
                # a read-write open establishes the store on disk
                p.write_text("", encoding=self.encoding)
                text = ""

        tokens = split_tokens(text)
        log.debug(f"opened {p} with {len(tokens)} tokens (read_only={read_only})")
        return _TextFile(path=p, read_only=read_only, tokens=tokens)

    @override
    def close(self, raw: _TextFile) -> None:
        raw.tokens = []
        raw.closed = True

    @override
    def count(self, raw: _TextFile) -> int:
        return len(raw.tokens)

    @override
    def read_token(self, raw: _TextFile, index: int, capacity: int) -> Token | None:
        # the file is already in memory, so capacity is not a constraint here
        _ = capacity
        if raw.closed or not 1 <= index <= len(raw.tokens):
            return None
        return raw.tokens[index - 1]

    @override
    def write_all(self, raw: _TextFile, text: str) -> None:
        """Atomically replace the file content with ``text``."""
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{raw.path.name}.", suffix=".tmp", dir=raw.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding=self.encoding, newline="\n") as f:
                f.write(text)
            # mkstemp creates 0600 files, keep the original permissions
            if raw.path.exists():
                os.chmod(tmp_name, raw.path.stat().st_mode & 0o777)
            os.replace(tmp_name, raw.path)
        except BaseException:
            # leave no temporary file behind on failure
            Path(tmp_name).unlink(missing_ok=True)
            raise

        raw.tokens = split_tokens(text)
        log.debug(f"wrote {len(raw.tokens)} tokens to {raw.path}")

    @override
    def __repr__(self) -> str:
        return f"TextFileBackend(encoding={self.encoding!r})"
