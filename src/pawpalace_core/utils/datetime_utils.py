"""
DateTime utilities for vaccination scheduling.

This module provides timezone-aware "now" helpers, lenient calendar-date
parsing for stored vaccination entries, and the wall-clock arithmetic used by
the daily reminder trigger.

Vaccination dates are calendar dates with UTC-midnight semantics: a stored
``"2024-01-10"`` is the 10th of January regardless of the server timezone, and
adding N days never crosses a DST boundary.
"""

from datetime import date, datetime, time, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo


def get_current_utc() -> datetime:
    """Get the current UTC datetime."""
    return datetime.now(ZoneInfo("UTC"))


def get_current_utc_date() -> date:
    """Get today's calendar date in UTC."""
    return get_current_utc().date()


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Parse a stored vaccination date into a calendar date.

    Accepts ``date`` and ``datetime`` objects, ``YYYY-MM-DD`` strings and
    ISO-8601 datetime strings. Aware datetimes (including a trailing ``Z``)
    are converted to UTC before the date is taken; naive ones are used as-is.

    Args:
        value: Raw value from a vaccination entry

    Returns:
        The calendar date, or None if the value is missing or unparsable
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(ZoneInfo("UTC"))
        return value.date()

    if isinstance(value, date):
        return value

    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(ZoneInfo("UTC"))
    return parsed.date()


def format_calendar_date(value: date) -> str:
    """Format a calendar date as ``YYYY-MM-DD``."""
    return value.isoformat()


def add_days(value: date, days: int) -> date:
    """Add whole calendar days to a date."""
    return value + timedelta(days=days)


def next_daily_run(
    now: datetime, hour: int, minute: int = 0, timezone: str = "UTC"
) -> datetime:
    """
    Get the next occurrence of a fixed local wall-clock time.

    Args:
        now: Current moment (naive values are taken to be in ``timezone``)
        hour: Local hour of the daily trigger (0-23)
        minute: Local minute of the daily trigger (0-59)
        timezone: IANA timezone the wall-clock time is expressed in

    Returns:
        Timezone-aware datetime strictly after ``now``
    """
    tz = ZoneInfo(timezone)
    local_now = now.replace(tzinfo=tz) if now.tzinfo is None else now.astimezone(tz)

    candidate = datetime.combine(local_now.date(), time(hour, minute), tz)
    if candidate <= local_now:
        candidate = datetime.combine(
            local_now.date() + timedelta(days=1), time(hour, minute), tz
        )
    return candidate


def seconds_until(target: datetime, now: Optional[datetime] = None) -> float:
    """Seconds from ``now`` (default: current UTC time) until ``target``, never negative."""
    if now is None:
        now = get_current_utc()
    return max(0.0, (target - now).total_seconds())
