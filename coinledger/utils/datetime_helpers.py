"""Datetime utility functions for timezone and calendar-day handling."""
from datetime import date, datetime, timedelta, UTC
from typing import Optional


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure datetime is timezone-aware in UTC.

    Datetimes read back from SQLite are timezone-naive but are stored as UTC.

    Example:
        >>> naive_dt = datetime(2025, 1, 1, 12, 0, 0)
        >>> ensure_utc(naive_dt).tzinfo == UTC
        True

        >>> ensure_utc(None) is None
        True
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_today() -> date:
    """Return the current UTC calendar day, the key for daily task progress."""
    return datetime.now(UTC).date()


def is_previous_day(earlier: Optional[date], later: date) -> bool:
    """True when ``earlier`` is exactly the calendar day before ``later``."""
    if earlier is None:
        return False
    return later - earlier == timedelta(days=1)


def streak_window_start(today: date, streak: int, interval_days: int = 7) -> date:
    """
    First day of the bonus window that ``today`` closes for the given streak.

    The streak is a run of consecutive days ending today, so the window is the
    last ``interval_days`` block of that run. For streak 7 the window is
    ``today - 6`` .. ``today``; for streak 10 it is ``today - 2`` .. ``today``
    (days 8-10 of the run).

    Example:
        >>> streak_window_start(date(2025, 1, 7), 7)
        datetime.date(2025, 1, 1)
        >>> streak_window_start(date(2025, 1, 10), 10)
        datetime.date(2025, 1, 8)
    """
    if streak < 1:
        raise ValueError("streak must be at least 1")
    if interval_days < 1:
        raise ValueError("interval_days must be at least 1")
    return today - timedelta(days=(streak - 1) % interval_days)
