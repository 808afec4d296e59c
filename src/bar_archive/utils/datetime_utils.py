"""Datetime utilities for timezone-aware UTC timestamps.

Usage:
    from bar_archive.utils.datetime_utils import utc_now, to_iso8601

    created_at = Column(DateTime, default=utc_now)
    meta = {"date": to_iso8601(utc_now())}
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def to_iso8601(value: datetime) -> str:
    """
    Format a datetime as ISO-8601 with millisecond precision and a Z suffix.

    Naive datetimes are assumed to already be UTC.

    Example:
        >>> to_iso8601(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc))
        '2024-05-01T12:30:00.000Z'
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
