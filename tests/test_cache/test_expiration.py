"""Tests for the age-based expiration policy."""

from datetime import UTC, datetime, timedelta, timezone

from imgcache.cache.expiration import is_expired

NOW = datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


class TestIsExpired:
    def test_just_inside_window_not_expired(self):
        created = NOW - timedelta(days=30) + timedelta(seconds=1)
        assert is_expired(created, 30, now=NOW) is False

    def test_just_outside_window_expired(self):
        created = NOW - timedelta(days=30) - timedelta(seconds=1)
        assert is_expired(created, 30, now=NOW) is True

    def test_exact_boundary_not_expired(self):
        assert is_expired(NOW - timedelta(days=30), 30, now=NOW) is False

    def test_zero_days_expires_anything_older_than_now(self):
        assert is_expired(NOW - timedelta(microseconds=1), 0, now=NOW) is True
        assert is_expired(NOW, 0, now=NOW) is False

    def test_negative_days_never_expires(self):
        assert is_expired(NOW - timedelta(days=10_000), -1, now=NOW) is False

    def test_naive_datetime_treated_as_utc(self):
        created = (NOW - timedelta(days=31)).replace(tzinfo=None)
        assert is_expired(created, 30, now=NOW) is True

    def test_other_timezone_normalized(self):
        plus_two = timezone(timedelta(hours=2))
        # 13:00+02:00 is 11:00 UTC, one hour before NOW
        created = datetime(2024, 6, 1, 13, 0, 0, tzinfo=plus_two)
        assert is_expired(created, 0, now=NOW) is True

    def test_defaults_to_current_time(self):
        assert is_expired(datetime.now(UTC) - timedelta(days=2), 1) is True
        assert is_expired(datetime.now(UTC), 1) is False
