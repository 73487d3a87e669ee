"""Unit tests for environment-based settings."""

import pytest

from wordstore import ConfigError, Settings, load_settings
from wordstore.config import DEFAULT_MAX_TOKEN_LENGTH, parse_log_level


def test_defaults_from_empty_environment():
    """An empty environment yields the defaults."""
    settings = load_settings({})
    assert settings == Settings()
    assert settings.backend == "text"
    assert settings.max_token_length == DEFAULT_MAX_TOKEN_LENGTH == 254
    assert settings.encoding == "utf-8"
    assert settings.log_level == "WARNING"


def test_values_read_from_environment():
    """Each variable overrides its default."""
    settings = load_settings(
        {
            "WORDSTORE_BACKEND": "memory",
            "WORDSTORE_MAX_TOKEN_LENGTH": " 32 ",
            "WORDSTORE_ENCODING": "latin-1",
            "WORDSTORE_LOG_LEVEL": "debug",
        }
    )
    assert settings == Settings(
        backend="memory", max_token_length=32, encoding="latin-1", log_level="DEBUG"
    )


def test_blank_values_use_defaults():
    """Blank variables are treated as unset."""
    assert load_settings({"WORDSTORE_BACKEND": "  ", "WORDSTORE_LOG_LEVEL": ""}) == (
        Settings()
    )


def test_os_environ_is_default(monkeypatch):
    """Without a mapping the process environment is read."""
    monkeypatch.setenv("WORDSTORE_MAX_TOKEN_LENGTH", "10")
    assert load_settings().max_token_length == 10


@pytest.mark.parametrize("value", ["abc", "0", "-3", "1.5"])
def test_invalid_max_token_length(value):
    """Non-positive or non-integer limits are rejected."""
    with pytest.raises(ConfigError) as exc:
        load_settings({"WORDSTORE_MAX_TOKEN_LENGTH": value})
    assert exc.value.key == "WORDSTORE_MAX_TOKEN_LENGTH"
    assert exc.value.value == value


def test_invalid_log_level():
    """Unknown log levels are rejected."""
    with pytest.raises(ConfigError, match="log level must be one of"):
        parse_log_level("verbose")


def test_with_overrides():
    """Overrides replace values and skip None."""
    base = Settings()
    assert base.with_overrides(backend=None) is base
    changed = base.with_overrides(max_token_length=8, log_level="info", encoding=None)
    assert changed.max_token_length == 8
    assert changed.log_level == "INFO"
    assert changed.encoding == base.encoding


def test_with_overrides_validates():
    """Overrides go through the same validation as the environment."""
    with pytest.raises(ConfigError):
        Settings().with_overrides(max_token_length=0)
