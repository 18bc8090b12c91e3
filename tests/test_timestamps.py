"""Unit tests for timestamp utilities."""

from datetime import datetime, timedelta, timezone

from internmatch.utils.timestamps import (
    EPOCH,
    ensure_utc,
    format_timestamp,
    parse_iso_datetime,
    utc_now,
)


class TestUtcNow:
    """Tests for utc_now."""

    def test_is_timezone_aware(self):
        """Test utc_now returns an aware UTC datetime."""
        now = utc_now()
        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)


class TestEnsureUtc:
    """Tests for ensure_utc."""

    def test_none_passes_through(self):
        assert ensure_utc(None) is None

    def test_naive_is_treated_as_utc(self):
        """Test naive datetimes are labelled UTC without shifting."""
        result = ensure_utc(datetime(2026, 3, 1, 9, 30))
        assert result == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_aware_is_converted(self):
        """Test aware datetimes in other zones are converted to UTC."""
        eastern = timezone(timedelta(hours=-5))
        result = ensure_utc(datetime(2026, 3, 1, 4, 30, tzinfo=eastern))
        assert result == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc


class TestParseIsoDatetime:
    """Tests for parse_iso_datetime."""

    def test_z_suffix(self):
        """Test a trailing Z parses as UTC."""
        result = parse_iso_datetime("2026-03-01T09:30:00Z")
        assert result == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)

    def test_date_only(self):
        """Test date-only strings parse as midnight UTC."""
        result = parse_iso_datetime("2026-12-31")
        assert result == datetime(2026, 12, 31, tzinfo=timezone.utc)

    def test_garbage_is_none(self):
        """Test unparseable input yields None instead of raising."""
        assert parse_iso_datetime("next tuesday") is None
        assert parse_iso_datetime("") is None
        assert parse_iso_datetime(None) is None

    def test_datetime_passes_through_as_utc(self):
        value = datetime(2026, 1, 1, 0, 0)
        assert parse_iso_datetime(value) == datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_storage_format(self):
        """Test timestamps are stored with microseconds and a Z suffix."""
        value = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert format_timestamp(value) == "2026-03-01T09:30:00.000000Z"

    def test_none(self):
        assert format_timestamp(None) is None

    def test_round_trip(self):
        """Test a formatted timestamp parses back to the same instant."""
        value = datetime(2026, 3, 1, 9, 30, 15, 123456, tzinfo=timezone.utc)
        assert parse_iso_datetime(format_timestamp(value)) == value

    def test_lexical_order_is_chronological(self):
        """Test stored strings sort in time order."""
        earlier = format_timestamp(datetime(2026, 1, 9, tzinfo=timezone.utc))
        later = format_timestamp(datetime(2026, 1, 10, tzinfo=timezone.utc))
        assert earlier < later


def test_epoch_is_oldest_sort_key():
    """Test EPOCH sorts before any real row timestamp."""
    assert EPOCH < datetime(2000, 1, 1, tzinfo=timezone.utc)
