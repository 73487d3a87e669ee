"""Custom exception hierarchy for wordstore errors."""


class WordStoreError(Exception):
    """Base exception for all wordstore errors."""


class OpenError(WordStoreError):
    """Raised when a backend resource cannot be established."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        mode: str | None = None,
    ) -> None:
        """Initialize with optional path and mode that get appended to the message."""
        extra = " "
        if path is not None:
            extra += f"(path: {path}) "
        if mode is not None:
            extra += f"(mode: {mode}) "
        super().__init__(message + extra.rstrip())
        self.path = path
        self.mode = mode


class BackendError(WordStoreError):
    """Raised when the backend reports failure on an otherwise valid call."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        path: str | None = None,
    ) -> None:
        extra = " "
        if operation:
            extra += f"(operation: {operation}) "
        if path is not None:
            extra += f"(path: {path}) "
        super().__init__(message + extra.rstrip())
        self.operation = operation
        self.path = path


class DisposedError(BackendError):
    """Raised when an operation is attempted on a closed handle."""


class StorePermissionError(WordStoreError, PermissionError):
    """Raised when writing through a handle opened read-only."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        path: str | None = None,
    ) -> None:
        extra = " "
        if operation:
            extra += f"(operation: {operation}) "
        if path is not None:
            extra += f"(path: {path}) "
        super().__init__(message + extra.rstrip())
        self.operation = operation
        self.path = path


class TokenIndexError(WordStoreError, IndexError):
    """Raised when a read index falls outside ``[1, count]``."""

    def __init__(self, message: str, *, index: int, count: int) -> None:
        """Initialize with the offending index and the current token count."""
        super().__init__(f"{message} (index: {index}) (valid: 1..{count})")
        self.index = index
        self.count = count


class BackendLoadError(WordStoreError):
    """Raised when a backend cannot be resolved or loaded."""

    def __init__(
        self,
        message: str,
        *,
        name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if name:
            extra += f"(got: {name}) "
        if available is not None:
            extra += f"(available: {available}) "
        super().__init__(message + extra.rstrip())
        self.name = name
        self.available = available


class TransformError(WordStoreError):
    """Raised when transform lookups fail."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available}) (got {invalid_name}) "
        super().__init__(message + extra.rstrip())
        self.invalid_name = invalid_name
        self.available = available


class NoStoreOpenError(WordStoreError):
    """Raised when a session command needs an open store and none exists."""

    def __init__(
        self, message: str = "no file open", *, command: str | None = None
    ) -> None:
        if command:
            message = f"{message} (command: {command})"
        super().__init__(message)
        self.command = command


class ConfigError(WordStoreError):
    """Raised when a configuration value is invalid."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        value: str | None = None,
    ) -> None:
        extra = " "
        if key:
            extra += f"(key: {key}) "
        if value is not None:
            extra += f"(got {value!r}) "
        super().__init__(message + extra.rstrip())
        self.key = key
        self.value = value
