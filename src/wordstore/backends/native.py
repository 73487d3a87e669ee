"""
Backend binding a native token store library through ctypes.

The library must export the C functions::

    void *open(const char *path, bool read);
    void close(void *file);
    bool read(void *file, int index, char *word);
    void write(void *file, const char *text);
    int length(void *file);

``read`` copies the 1-based token into a caller-owned buffer.
"""

import ctypes
import ctypes.util
import logging
from typing import Final, override

from ..exceptions import BackendLoadError
from ..types import Token
from .base import Backend

DEFAULT_LIBRARY_NAME: Final[str] = "file32"

log = logging.getLogger(__name__)


class NativeBackend(Backend):
    """Backend delegating every primitive to a shared library."""

    BACKEND_TYPE = "native"

    def __init__(self, library: str | None = None, encoding: str = "utf-8") -> None:
        """
        Load and bind the native library.

        :param library: Path or name of the shared library. Defaults to the
            ``file32`` library found on the system search path.
        :param encoding: Encoding used for paths, tokens and written text.
        :raises BackendLoadError: If the library cannot be found or loaded, or
            lacks one of the required symbols.
        """
        super().__init__()
        self.encoding = encoding

        if library is None:
            library = ctypes.util.find_library(DEFAULT_LIBRARY_NAME)
            if library is None:
                raise BackendLoadError(
                    "native token store library not found", name=DEFAULT_LIBRARY_NAME
                )

        try:
            lib = ctypes.CDLL(library)
        except OSError as e:
            raise BackendLoadError(
                "failed to load native token store library", name=library
            ) from e

        try:
            lib.open.argtypes = [ctypes.c_char_p, ctypes.c_bool]
            lib.open.restype = ctypes.c_void_p
            lib.close.argtypes = [ctypes.c_void_p]
            lib.close.restype = None
            lib.read.argtypes = [ctypes.c_void_p, ctypes.c_int, ctypes.c_char_p]
            lib.read.restype = ctypes.c_bool
            lib.write.argtypes = [ctypes.c_void_p, ctypes.c_char_p]
            lib.write.restype = None
            lib.length.argtypes = [ctypes.c_void_p]
            lib.length.restype = ctypes.c_int
        except AttributeError as e:
            raise BackendLoadError(
                "native library is missing a required symbol", name=library
            ) from e

        self.library = library
        self._lib = lib
        log.info(f"loaded native token store library {library}")

    @override
    def open(self, path: str, read_only: bool) -> int | None:
        # c_void_p restype maps a NULL pointer to None
        return self._lib.open(path.encode(self.encoding), read_only)

    @override
    def close(self, raw: int) -> None:
        self._lib.close(raw)

    @override
    def count(self, raw: int) -> int:
        return self._lib.length(raw)

    @override
    def read_token(self, raw: int, index: int, capacity: int) -> Token | None:
        buf = ctypes.create_string_buffer(capacity)
        if not self._lib.read(raw, index, buf):
            return None
        return buf.value.decode(self.encoding, errors="replace")

    @override
    def write_all(self, raw: int, text: str) -> None:
        self._lib.write(raw, text.encode(self.encoding))

    @override
    def __repr__(self) -> str:
        return f"NativeBackend(library={self.library!r})"
