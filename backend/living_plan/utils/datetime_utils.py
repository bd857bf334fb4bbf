"""
Date and datetime utilities.

The living plan works on calendar dates. "Today" is always supplied by the
caller; these helpers exist for the HTTP edge and for persistence timestamps.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def now_utc_naive() -> datetime:
    """Current UTC time without tzinfo, as stored in SQLite DateTime columns."""
    return now_utc().replace(tzinfo=None)


def get_user_today(user_timezone: str) -> date:
    """
    Calendar date it currently is in the given IANA timezone.

    Example:
        >>> get_user_today("Asia/Tokyo")  # at 2026-03-01 23:00 UTC
        date(2026, 3, 2)
    """
    return now_utc().astimezone(ZoneInfo(user_timezone)).date()
