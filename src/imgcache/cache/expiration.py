"""Age-based expiration policy for cached artifacts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta


def is_expired(created_at: datetime, max_days: int, now: datetime | None = None) -> bool:
    """Return True when ``created_at`` is older than ``max_days`` days.

    Naive datetimes are taken to be UTC. ``max_days == 0`` expires anything
    created before ``now``. A negative ``max_days`` never expires; validated
    configuration rejects such values before they get here.
    """
    if max_days < 0:
        return False
    now = now or datetime.now(UTC)
    return _as_utc(created_at) < _as_utc(now) - timedelta(days=max_days)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
