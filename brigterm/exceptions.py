"""Application-specific exceptions for brigterm.

This module provides a hierarchy of exceptions that enable more precise
error handling throughout the application. Using specific exception types
allows callers to catch and handle different error conditions appropriately.

Exception Hierarchy:
    BrigtermError (base)
    ├── ConfigurationError
    │   └── InvalidConfigError
    ├── APIError
    │   └── NotFoundError
    └── StreamError
"""

from pathlib import Path


class BrigtermError(Exception):
    """Base exception for all brigterm errors.

    All application-specific exceptions inherit from this class,
    allowing callers to catch all brigterm errors with a single handler.
    """


class ConfigurationError(BrigtermError):
    """Raised when there is a configuration error.

    Raised at startup for problems such as a missing API address or a page
    registered twice with the same identifier.

    Attributes:
        parameter: The configuration parameter that is invalid.
        message: Human-readable error description.
    """

    def __init__(self, parameter: str, message: str | None = None) -> None:
        self.parameter = parameter
        self.message = message or f"Invalid configuration for '{parameter}'"
        super().__init__(self.message)


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration file exists but cannot be parsed.

    Attributes:
        path: The configuration file that was invalid.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        path: Path,
        message: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.path = path
        self.cause = cause
        text = message or f"Invalid configuration file at {path}"
        if cause:
            text = f"{text}: {cause}"
        super().__init__(str(path), text)


class APIError(BrigtermError):
    """Raised when a call to the Brigade API fails.

    Attributes:
        message: Human-readable error description.
        status_code: HTTP status code, if a response was received.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.status_code = status_code
        self.cause = cause
        self.message = message
        if cause:
            self.message = f"{self.message}: {cause}"
        super().__init__(self.message)


class NotFoundError(APIError):
    """Raised when a requested object does not exist.

    Attributes:
        kind: The kind of object that was looked up (e.g. "project", "job").
        name: The identifier that was not found.
    """

    def __init__(self, kind: str, name: str, message: str | None = None) -> None:
        self.kind = kind
        self.name = name
        super().__init__(message or f"{kind} '{name}' not found", status_code=404)


class StreamError(BrigtermError):
    """Raised or reported when a log stream fails.

    Attributes:
        event_id: The event whose logs were being streamed.
        message: Human-readable error description.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        event_id: str,
        message: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.event_id = event_id
        self.cause = cause
        self.message = message or f"Log stream for event '{event_id}' failed"
        if cause:
            self.message = f"{self.message}: {cause}"
        super().__init__(self.message)
