"""Storage backends for token stores."""

from .base import Backend
from .memory import MemoryBackend
from .native import NativeBackend
from .text import TextFileBackend


__all__ = [
    "Backend",
    "MemoryBackend",
    "NativeBackend",
    "TextFileBackend",
]
