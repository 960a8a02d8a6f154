"""Timezone utilities for UTC session timestamps"""
from datetime import datetime
import pytz


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(pytz.utc)


def to_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime read from the store to aware UTC.

    Args:
        dt: Aware datetime in any zone, naive datetime assumed to be UTC, or None

    Returns:
        Aware UTC datetime, or None if input is None
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt.astimezone(pytz.utc)


def isoformat_utc(dt: datetime) -> str:
    """Format as ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T10:00:00.000Z"""
    dt = to_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
