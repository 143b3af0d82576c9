# File: src/speednet/utils/datetime.py
"""UTC datetime utilities.

All timestamps are persisted as NAIVE UTC. Aware values coming from clients
are converted to UTC first and then stripped of tzinfo.
"""

from datetime import datetime, timedelta, timezone


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def now_utc_naive() -> datetime:
    """Alias for now_utc() - used as a column default."""
    return now_utc()


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Normalise a datetime to naive UTC. Naive inputs are assumed to be UTC."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def add_seconds(value: datetime | None, seconds: int) -> datetime | None:
    """Offset a datetime by whole seconds, passing None through."""
    if value is None:
        return None
    return value + timedelta(seconds=seconds)


def whole_minutes_between(start: datetime | None, end: datetime | None) -> int | None:
    """Rounded minutes between two datetimes, never negative. None if either is missing."""
    if start is None or end is None:
        return None
    seconds = max(0, round((end - start).total_seconds()))
    return round(seconds / 60)
