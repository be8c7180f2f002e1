"""Pydantic models for cache configuration."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from imgcache.config.defaults import (
    DEFAULT_BROWSER_MAX_DAYS,
    DEFAULT_KEY_INCLUDES_QUERYSTRING,
    DEFAULT_MAX_DAYS,
    DEFAULT_PROBE_TIMEOUT,
)
from imgcache.errors.exceptions import ConfigurationError


class BackendKind(StrEnum):
    DISK = "disk"
    MEMORY = "memory"


class CacheConfig(BaseModel):
    """Construction-time configuration shared by every cache instance.

    Negative day counts are rejected here rather than given a degenerate
    meaning, so expiration never sees them from a validated config.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    max_days: int = Field(default=DEFAULT_MAX_DAYS, ge=0)
    browser_max_days: int = Field(default=DEFAULT_BROWSER_MAX_DAYS, ge=0)
    backend: BackendKind = BackendKind.DISK
    settings: dict[str, str] = Field(default_factory=dict)
    probe_timeout: float = Field(default=DEFAULT_PROBE_TIMEOUT, gt=0)
    key_includes_querystring: bool = DEFAULT_KEY_INCLUDES_QUERYSTRING

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> CacheConfig:
        """Validate a merged config dict, raising ConfigurationError on bad values."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or None
            raise ConfigurationError(
                f"Invalid cache configuration: {field}: {first['msg']}",
                error_type="invalid_value",
                field=field,
            ) from e
