"""Timestamp utilities for UTC handling.

Row timestamps (created_at, application deadlines) arrive as ISO strings or
datetimes from the host application; everything is kept timezone-aware UTC.
"""

from datetime import datetime, timezone
from typing import Optional, Union

# Sort key for rows without a created_at: older than anything real
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.

    Args:
        dt: Datetime to convert (can be None)

    Returns:
        Timezone-aware UTC datetime, or None if input is None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: Union[None, str, datetime]) -> Optional[datetime]:
    """Parse an ISO 8601 string (or pass through a datetime) as UTC.

    Accepts a trailing 'Z' and date-only strings. Unparseable input yields
    None instead of raising, since a bad timestamp on a source row must not
    abort scoring.

    Args:
        value: ISO string, datetime, or None

    Returns:
        Timezone-aware UTC datetime or None

    Example:
        >>> parse_iso_datetime("2026-03-01T09:30:00Z").isoformat()
        '2026-03-01T09:30:00+00:00'
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    text = str(value).strip()
    if not text:
        return None

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def format_timestamp(dt: Optional[datetime]) -> Optional[str]:
    """Format a datetime as an ISO 8601 UTC string with a 'Z' suffix.

    This is the storage format for timestamp columns.
    """
    if dt is None:
        return None

    return ensure_utc(dt).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
