"""Cache entry and statistics models."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(UTC)


class CacheEntry(BaseModel):
    """Backend-owned record of one stored artifact."""

    key: str
    created_at: datetime = Field(default_factory=utc_now)
    content_type: str = ""
    size_bytes: int = 0
    location: str = ""


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    size_mb: float = 0.0
    hits: int = 0
    misses: int = 0
    writes: int = 0
    write_failures: int = 0
    trimmed: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0
