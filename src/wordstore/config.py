"""Runtime settings resolved from environment variables."""

import logging
import os
from dataclasses import dataclass, replace
from typing import Final, Mapping

from .exceptions import ConfigError

DEFAULT_BACKEND: Final[str] = "text"
# native stores read into a 255 byte buffer including the terminator
DEFAULT_MAX_TOKEN_LENGTH: Final[int] = 254
DEFAULT_ENCODING: Final[str] = "utf-8"
DEFAULT_LOG_LEVEL: Final[str] = "WARNING"

ENV_BACKEND: Final[str] = "WORDSTORE_BACKEND"
ENV_MAX_TOKEN_LENGTH: Final[str] = "WORDSTORE_MAX_TOKEN_LENGTH"
ENV_ENCODING: Final[str] = "WORDSTORE_ENCODING"
ENV_LOG_LEVEL: Final[str] = "WORDSTORE_LOG_LEVEL"

_LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Resolved configuration shared by the store, session and CLI."""

    backend: str = DEFAULT_BACKEND
    max_token_length: int = DEFAULT_MAX_TOKEN_LENGTH
    encoding: str = DEFAULT_ENCODING
    log_level: str = DEFAULT_LOG_LEVEL

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with every non-``None`` override applied and validated."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        if "max_token_length" in changes:
            changes["max_token_length"] = parse_max_token_length(
                str(changes["max_token_length"])
            )
        if "log_level" in changes:
            changes["log_level"] = parse_log_level(str(changes["log_level"]))
        return replace(self, **changes)


def parse_max_token_length(raw: str) -> int:
    """
    Parse a maximum token length value.

    :param raw: Raw string value.
    :returns: Positive integer limit.
    :raises ConfigError: If the value is not a positive integer.
    """
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(
            "max token length must be an integer", key=ENV_MAX_TOKEN_LENGTH, value=raw
        )
    if value <= 0:
        raise ConfigError(
            "max token length must be positive", key=ENV_MAX_TOKEN_LENGTH, value=raw
        )
    return value


def parse_log_level(raw: str) -> str:
    """Normalise a log level name, rejecting unknown levels."""
    level = raw.strip().upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"log level must be one of {', '.join(_LOG_LEVELS)}",
            key=ENV_LOG_LEVEL,
            value=raw,
        )
    return level


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build settings from the environment, falling back to module defaults.

    :param environ: Mapping to read from; defaults to ``os.environ``.
    :raises ConfigError: If any variable holds an invalid value.
    """
    env = os.environ if environ is None else environ

    backend = env.get(ENV_BACKEND, "").strip() or DEFAULT_BACKEND
    encoding = env.get(ENV_ENCODING, "").strip() or DEFAULT_ENCODING

    raw_len = env.get(ENV_MAX_TOKEN_LENGTH, "")
    max_token_length = (
        parse_max_token_length(raw_len) if raw_len.strip() else DEFAULT_MAX_TOKEN_LENGTH
    )

    raw_level = env.get(ENV_LOG_LEVEL, "")
    log_level = parse_log_level(raw_level) if raw_level.strip() else DEFAULT_LOG_LEVEL

    settings = Settings(
        backend=backend,
        max_token_length=max_token_length,
        encoding=encoding,
        log_level=log_level,
    )
    log.debug(f"loaded settings: {settings}")
    return settings


__all__ = [
    "Settings",
    "load_settings",
    "parse_max_token_length",
    "parse_log_level",
]
