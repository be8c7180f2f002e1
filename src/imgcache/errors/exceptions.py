"""Custom exception hierarchy for imgcache."""

from __future__ import annotations

from typing import Any


class ImgCacheError(Exception):
    """Base exception for all imgcache errors."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class BackendUnavailableError(ImgCacheError):
    """Storage backend failed a read, write or delete — fatal for the operation.

    Examples: disk full, permission denied, index database locked or corrupt.
    """

    def __init__(
        self,
        message: str = "",
        error_type: str = "write_failure",
        key: str | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.key = key
        self.original = original


class ConfigurationError(ImgCacheError):
    """Configuration rejected at construction — fail fast.

    Examples: negative max_days, unknown backend, missing backend setting.
    """

    def __init__(
        self,
        message: str = "",
        error_type: str = "invalid_value",
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_type = error_type
        self.field = field
