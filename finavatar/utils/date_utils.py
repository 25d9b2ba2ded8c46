"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC (SQLite drops tzinfo on the way back)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def window_start(now: datetime, days: int) -> datetime:
    """Start of a trailing window of `days` ending at `now`"""
    return now - timedelta(days=days)
