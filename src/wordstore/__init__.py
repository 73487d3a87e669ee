"""WordStore: persistent word stores with whole-store transformations."""

from .backends import Backend, MemoryBackend, NativeBackend, TextFileBackend
from .config import Settings, load_settings
from .exceptions import (
    BackendError,
    BackendLoadError,
    ConfigError,
    DisposedError,
    NoStoreOpenError,
    OpenError,
    StorePermissionError,
    TokenIndexError,
    TransformError,
    WordStoreError,
)
from .factory import get_backend, list_backends
from .pipeline import (
    TransformResult,
    apply_transform,
    leave_unique_words_with_count,
    sort_words_by_length,
)
from .session import Session
from .store import AccessMode, TokenStore
from .transform import (
    FrequencyTable,
    RenderStyle,
    build_frequency_table,
    compact_sorted_by_length,
    compact_with_frequency,
    deserialize,
    get_transform,
    list_transforms,
    parse_entry,
    serialize,
    stable_sort_by_length,
    unique_sorted_by_length,
)

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("wordstore")
except PackageNotFoundError:
    __version__ = "dev"

__all__ = [
    "AccessMode",
    "Backend",
    "BackendError",
    "BackendLoadError",
    "ConfigError",
    "DisposedError",
    "FrequencyTable",
    "MemoryBackend",
    "NativeBackend",
    "NoStoreOpenError",
    "OpenError",
    "RenderStyle",
    "Session",
    "Settings",
    "StorePermissionError",
    "TextFileBackend",
    "TokenIndexError",
    "TokenStore",
    "TransformError",
    "TransformResult",
    "WordStoreError",
    "apply_transform",
    "build_frequency_table",
    "compact_sorted_by_length",
    "compact_with_frequency",
    "deserialize",
    "get_backend",
    "get_transform",
    "leave_unique_words_with_count",
    "list_backends",
    "list_transforms",
    "load_settings",
    "parse_entry",
    "serialize",
    "sort_words_by_length",
    "stable_sort_by_length",
    "unique_sorted_by_length",
]
