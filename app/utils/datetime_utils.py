"""
Datetime helpers.

All timestamps are stored and compared as UTC. SQLite (used in tests)
hands back naive datetimes, so anything that leaves the process goes
through ensure_utc first.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Get current UTC time as timezone-aware datetime.

    Use this instead of datetime.utcnow() to ensure timezone awareness.

    Returns:
        datetime: Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure datetime is UTC timezone-aware.

    Naive datetimes are assumed to already be UTC.

    Args:
        dt: Datetime object (naive or aware) or None

    Returns:
        datetime | None: UTC timezone-aware datetime or None

    Example:
        >>> ensure_utc(datetime(2026, 5, 1, 9, 30)).tzinfo
        datetime.timezone.utc
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def to_iso_utc(dt: datetime | None) -> str | None:
    """
    Convert datetime to ISO 8601 with a 'Z' suffix.

    Example:
        >>> to_iso_utc(datetime(2026, 5, 1, 9, 30, tzinfo=timezone.utc))
        '2026-05-01T09:30:00Z'
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat().replace('+00:00', 'Z')


def parse_iso_utc(value: str) -> datetime:
    """
    Parse an ISO 8601 string (with or without 'Z') into an aware UTC datetime.

    Raises:
        ValueError: If the string is not a valid ISO timestamp
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(value))
