"""Error handling — exception hierarchy for cache backends and configuration."""

from imgcache.errors.exceptions import (
    BackendUnavailableError,
    ConfigurationError,
    ImgCacheError,
)

__all__ = [
    "ImgCacheError",
    "BackendUnavailableError",
    "ConfigurationError",
]
