"""Perch error hierarchy.

All perch-specific errors inherit from PerchError for easy catching.
"""

from pathlib import Path


class PerchError(Exception):
    """Base error for all perch operations."""


class ConfigError(PerchError):
    """Invalid or missing configuration."""


class RouteConflictError(ConfigError):
    """Two handler modules resolved to the same route name."""


class ModuleLoadError(PerchError):
    """A handler module failed to import or has an invalid shape.

    Attributes:
        path: Filesystem path of the offending module.

    """

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class RestError(PerchError):
    """Raised by a handler to produce a JSON error response.

    Attributes:
        status: HTTP status code of the response.
        message: Human-readable error message.

    """

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message
