"""Shared fixtures for the wordstore test suite."""

import pytest

from wordstore import MemoryBackend


class RecordingBackend(MemoryBackend):
    """MemoryBackend that records open and close calls."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        super().__init__(files)
        self.opened: list[tuple[str, bool]] = []
        self.closed_count = 0
        self.open_now = 0
        self.max_open = 0

    def open(self, path, read_only):
        raw = super().open(path, read_only)
        if raw is not None:
            self.opened.append((path, read_only))
            self.open_now += 1
            self.max_open = max(self.max_open, self.open_now)
        return raw

    def close(self, raw):
        super().close(raw)
        self.closed_count += 1
        self.open_now -= 1


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep WORDSTORE_* variables from the caller's environment out of tests."""
    for var in (
        "WORDSTORE_BACKEND",
        "WORDSTORE_MAX_TOKEN_LENGTH",
        "WORDSTORE_ENCODING",
        "WORDSTORE_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def memory_backend():
    """Return a MemoryBackend holding a small word store and an empty one."""
    return MemoryBackend({"words": "cat dog cat ant", "empty": ""})


@pytest.fixture
def recording_backend():
    """Return a RecordingBackend holding a small word store."""
    return RecordingBackend({"words": "cat dog cat ant", "empty": ""})


@pytest.fixture
def words_file(tmp_path):
    """Return a text file holding four words."""
    path = tmp_path / "words.txt"
    path.write_text("cat dog cat ant", encoding="utf-8")
    return path
