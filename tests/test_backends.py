"""Unit tests for the text, memory and native backends and the backend factory."""

import ctypes.util
import os
import sys

import pytest

from wordstore import (
    BackendError,
    BackendLoadError,
    MemoryBackend,
    NativeBackend,
    OpenError,
    Settings,
    TextFileBackend,
    TokenStore,
    get_backend,
    list_backends,
)
from wordstore.factory import resolve_backend


# Text file backend
# ---------------------------------------------------------------------------


def test_text_backend_splits_on_any_whitespace(tmp_path):
    """Tokens are runs of non-whitespace regardless of separator."""
    path = tmp_path / "w.txt"
    path.write_text("  hello   world\nfoo\t bar  \n", encoding="utf-8")
    with TokenStore.open(path, backend=TextFileBackend()) as store:
        assert store.count() == 4
        assert store.tokens() == ["hello", "world", "foo", "bar"]


def test_text_backend_missing_file_read_only(tmp_path):
    """Opening a missing file read-only fails."""
    path = tmp_path / "missing.txt"
    with pytest.raises(OpenError) as exc:
        TokenStore.open(path, backend=TextFileBackend())
    assert exc.value.path == str(path)
    assert isinstance(exc.value.__cause__, FileNotFoundError)
    assert "Errno" not in str(exc.value)
    assert not path.exists()


def test_text_backend_missing_file_read_write(tmp_path):
    """Opening a missing file read-write creates it empty."""
    path = tmp_path / "new.txt"
    with TokenStore.open(path, "w", backend=TextFileBackend()) as store:
        assert store.count() == 0
        assert path.read_text(encoding="utf-8") == ""
        store.write_all("a b")
    assert path.read_text(encoding="utf-8") == "a b"


def test_text_backend_missing_parent(tmp_path):
    """A read-write path in a missing directory cannot be opened."""
    with pytest.raises(OpenError):
        TokenStore.open(tmp_path / "nope" / "w.txt", "w", backend=TextFileBackend())


@pytest.mark.parametrize("mode", ["r", "w"])
def test_text_backend_directory(tmp_path, mode):
    """A directory is not a store."""
    with pytest.raises(OpenError):
        TokenStore.open(tmp_path, mode, backend=TextFileBackend())


def test_text_backend_write_replaces_content(words_file):
    """Writing replaces the whole file and leaves no temporary files."""
    with TokenStore.open(words_file, "w", backend=TextFileBackend()) as store:
        store.write_all("x y")
    assert words_file.read_text(encoding="utf-8") == "x y"
    assert os.listdir(words_file.parent) == [words_file.name]


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions")
def test_text_backend_write_keeps_permissions(words_file):
    """Rewriting a file keeps its permission bits."""
    words_file.chmod(0o640)
    with TokenStore.open(words_file, "w", backend=TextFileBackend()) as store:
        store.write_all("x")
    assert words_file.stat().st_mode & 0o777 == 0o640


def test_text_backend_encoding(tmp_path):
    """The configured encoding is used for reading and writing."""
    path = tmp_path / "latin.txt"
    path.write_bytes("café thé".encode("latin-1"))
    backend = TextFileBackend(encoding="latin-1")
    with TokenStore.open(path, backend=backend) as store:
        assert store.tokens() == ["café", "thé"]
    with TokenStore.open(path, "w", backend=backend) as store:
        store.write_all("crème")
    assert path.read_bytes() == "crème".encode("latin-1")


def test_text_backend_snapshot_is_taken_at_open(words_file):
    """A read handle keeps the content it saw when opened."""
    backend = TextFileBackend()
    with TokenStore.open(words_file, backend=backend) as store:
        words_file.write_text("changed", encoding="utf-8")
        assert store.count() == 4


# Memory backend
# ---------------------------------------------------------------------------


def test_memory_backend_reads_live_content():
    """Writes are visible to other open handles on the same path."""
    backend = MemoryBackend({"w": "a b"})
    with TokenStore.open("w", backend=backend) as reader:
        with TokenStore.open("w", "w", backend=backend) as writer:
            writer.write_all("a b c")
        assert reader.count() == 3


def test_memory_backend_read_write_creates_path():
    """Opening an unknown path read-write creates an empty store."""
    backend = MemoryBackend()
    with TokenStore.open("fresh", "w", backend=backend) as store:
        assert store.count() == 0
    assert backend.read_text("fresh") == ""


def test_memory_backend_buffer_capacity():
    """Tokens that do not fit the read buffer are failed reads."""
    backend = MemoryBackend()
    assert backend.read_token(backend.open("w", False), 1, 4) is None
    backend.files["w"] = "abcd abc"
    raw = backend.open("w", True)
    assert backend.read_token(raw, 1, 4) is None
    assert backend.read_token(raw, 2, 4) == "abc"


# Native backend
# ---------------------------------------------------------------------------


def test_native_backend_missing_library(tmp_path):
    """A library that cannot be loaded raises BackendLoadError."""
    with pytest.raises(BackendLoadError) as exc:
        NativeBackend(library=str(tmp_path / "libfile32.so"))
    assert isinstance(exc.value.__cause__, OSError)


def test_native_backend_not_found(monkeypatch):
    """Without an explicit path the library is looked up by name."""
    monkeypatch.setattr(ctypes.util, "find_library", lambda name: None)
    with pytest.raises(BackendLoadError) as exc:
        NativeBackend()
    assert exc.value.name == "file32"


@pytest.mark.skipif(
    not sys.platform.startswith("linux") or ctypes.util.find_library("c") is None,
    reason="needs a Linux C library",
)
def test_native_backend_missing_symbol():
    """A library lacking the store functions is rejected."""
    # libc exports open/close/read/write but not length
    with pytest.raises(BackendLoadError, match="missing a required symbol"):
        NativeBackend(library=ctypes.util.find_library("c"))


def _plain(fn):
    """Wrap a bound method so attributes like argtypes can be set on it."""

    def call(*args):
        return fn(*args)

    return call


class FakeFile32:
    """In-process stand-in for the file32 library's C functions."""

    def __init__(self, files: dict[bytes, bytes]) -> None:
        self.files = files
        self.handles: dict[int, bytes] = {}
        self.closed: list[int] = []
        self._next = 1
        self.open = _plain(self._open)
        self.close = _plain(self._close)
        self.read = _plain(self._read)
        self.write = _plain(self._write)
        self.length = _plain(self._length)

    def _open(self, path: bytes, read: bool):
        if read and path not in self.files:
            return None
        self.files.setdefault(path, b"")
        handle, self._next = self._next, self._next + 1
        self.handles[handle] = path
        return handle

    def _close(self, handle: int) -> None:
        self.closed.append(handle)

    def _tokens(self, handle: int) -> list[bytes]:
        return self.files[self.handles[handle]].split()

    def _read(self, handle: int, index: int, buf) -> bool:
        tokens = self._tokens(handle)
        if not 1 <= index <= len(tokens):
            return False
        token = tokens[index - 1]
        if len(token) >= len(buf):
            return False
        buf.value = token
        return True

    def _write(self, handle: int, text: bytes) -> None:
        self.files[self.handles[handle]] = text

    def _length(self, handle: int) -> int:
        return len(self._tokens(handle))


@pytest.fixture
def fake_file32(monkeypatch):
    """Route ctypes.CDLL to a FakeFile32 and return the fake."""
    fake = FakeFile32({b"words": b"cat dog caf\xe9 longertoken"})
    monkeypatch.setattr(ctypes, "CDLL", lambda library: fake)
    return fake


def test_native_backend_reads_tokens(fake_file32):
    """Tokens are read through a fixed buffer and decoded."""
    backend = NativeBackend(library="file32")
    with TokenStore.open("words", backend=backend) as store:
        assert store.count() == 4
        assert store.read_at(1) == "cat"
        assert store.read_at(2) == "dog"
    assert fake_file32.closed == [1]


def test_native_backend_undecodable_bytes_are_replaced(fake_file32):
    """Bytes invalid in the encoding are replaced instead of failing."""
    with TokenStore.open("words", backend=NativeBackend(library="file32")) as store:
        assert store.read_at(3) == "caf\ufffd"


def test_native_backend_failed_read(fake_file32):
    """A read the library reports as failed is a BackendError."""
    backend = NativeBackend(library="file32")
    with TokenStore.open("words", backend=backend, max_token_length=8) as store:
        with pytest.raises(BackendError, match="failure reading token at index 4"):
            store.read_at(4)


def test_native_backend_null_handle(fake_file32):
    """A NULL handle from the library is an OpenError."""
    with pytest.raises(OpenError, match="backend could not open store"):
        TokenStore.open("missing", backend=NativeBackend(library="file32"))


def test_native_backend_write_and_reopen(fake_file32):
    """Written text is encoded and visible after reopening."""
    backend = NativeBackend(library="file32", encoding="latin-1")
    with TokenStore.open("new", "w", backend=backend) as store:
        assert store.count() == 0
        store.write_all("crème brûlée")
    assert fake_file32.files[b"new"] == "crème brûlée".encode("latin-1")
    with TokenStore.open("new", backend=backend) as store:
        assert store.tokens() == ["crème", "brûlée"]


# Factory
# ---------------------------------------------------------------------------


def test_list_backends():
    """All built-in backends are registered."""
    assert list_backends() == ["text", "memory", "native"]


def test_get_backend():
    """Backends are created by name with constructor options."""
    backend = get_backend("text", encoding="latin-1")
    assert isinstance(backend, TextFileBackend)
    assert backend.encoding == "latin-1"
    assert isinstance(get_backend("memory"), MemoryBackend)


def test_get_backend_unknown():
    """Unknown names list the available backends."""
    with pytest.raises(BackendLoadError) as exc:
        get_backend("sqlite")
    assert exc.value.available == list_backends()


def test_get_backend_bad_options():
    """Unsupported constructor options raise BackendLoadError."""
    with pytest.raises(BackendLoadError):
        get_backend("memory", encoding="utf-8")


def test_resolve_backend():
    """Instances pass through; names and settings select from the registry."""
    backend = MemoryBackend()
    assert resolve_backend(backend) is backend
    assert isinstance(resolve_backend("memory"), MemoryBackend)
    resolved = resolve_backend(None, Settings(backend="text", encoding="utf-16"))
    assert isinstance(resolved, TextFileBackend)
    assert resolved.encoding == "utf-16"
