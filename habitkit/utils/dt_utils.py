# File: utils/dt_utils.py
"""Date and calendar-day utilities for HabitKit.

Pure Python date/time functions. Everything the engines compare is a
calendar day (`datetime.date`) produced by `normalize()`; raw instants are
never compared directly because two instants on the same local day can have
different times of day.

⚠️ UTILS PURITY: NO imports from engines, managers or const.py here.
   Uses standard library: datetime, zoneinfo.

Functions:
    - set_default_timezone / get_default_timezone: Configure the local zone
    - dt_today_local: Get today's date in local timezone
    - dt_today_iso: Get today's date as ISO string
    - dt_now_utc: Get current datetime in UTC
    - dt_now_iso: Get current datetime as ISO string
    - as_local: Convert a datetime to the local timezone
    - dt_parse_date: Parse date strings
    - normalize: Strip time-of-day in the local timezone
    - days_between: Signed whole-day difference
    - weekday_of: Weekday of a calendar day
    - date_range: Inclusive iterator over calendar days
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from enum import IntEnum
import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

if TYPE_CHECKING:
    from collections.abc import Iterator

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# Default timezone - can be overridden by caller
DEFAULT_TIME_ZONE: ZoneInfo = ZoneInfo("UTC")


class Weekday(IntEnum):
    """Day of week, numbered like `datetime.date.weekday()`."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


# ==============================================================================
# Timezone Configuration
# ==============================================================================


def set_default_timezone(tz: ZoneInfo) -> None:
    """Set the default timezone for all dt_utils functions.

    HabitManager calls this with the configured CONF_TIME_ZONE.

    Args:
        tz: ZoneInfo object representing the default timezone
    """
    global DEFAULT_TIME_ZONE  # noqa: PLW0603
    DEFAULT_TIME_ZONE = tz


def get_default_timezone() -> ZoneInfo:
    """Get the current default timezone.

    Returns:
        The configured default timezone (ZoneInfo object)
    """
    return DEFAULT_TIME_ZONE


# ==============================================================================
# Current Date/Time Functions
# ==============================================================================


def dt_today_local(tz: ZoneInfo | None = None) -> date:
    """Return today's date in local timezone as a `datetime.date`.

    Only presentation code should call this; engines take `today` as an
    explicit argument.

    Args:
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Today's date in the specified timezone.
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    return datetime.now(tz_info).date()


def dt_today_iso(tz: ZoneInfo | None = None) -> str:
    """Return today's date in local timezone as ISO string (YYYY-MM-DD)."""
    return dt_today_local(tz).isoformat()


def dt_now_utc() -> datetime:
    """Return the current datetime in UTC (timezone-aware)."""
    return datetime.now(UTC)


def dt_now_iso() -> str:
    """Return the current UTC datetime as an ISO 8601 string.

    Example:
        "2025-04-07T19:30:00.123456+00:00"
    """
    return dt_now_utc().isoformat()


# ==============================================================================
# Timezone Conversion
# ==============================================================================


def as_local(dt_obj: datetime, tz: ZoneInfo | None = None) -> datetime:
    """Convert a datetime to local timezone.

    Args:
        dt_obj: Datetime object. Naive values are taken as local wall-clock.
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        Datetime in local timezone
    """
    tz_info = tz or DEFAULT_TIME_ZONE
    if dt_obj.tzinfo is None:
        return dt_obj.replace(tzinfo=tz_info)
    return dt_obj.astimezone(tz_info)


# ==============================================================================
# Parsing
# ==============================================================================


def dt_parse_date(date_str: str | None) -> date | None:
    """Safely parse a date string into a `datetime.date`.

    Accepts formats:
    - "2025-04-07" (ISO format)
    - "04/07/2025" (US format)
    - "07/04/2025" (European format - attempted if US fails)
    - "2025/04/07"

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime.date or None if parsing fails.
    """
    if not date_str or not isinstance(date_str, str):
        return None

    try:
        return date.fromisoformat(date_str)
    except ValueError:
        pass

    for fmt in ("%m/%d/%Y", "%d/%m/%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue

    return None


# ==============================================================================
# Calendar-Day Functions
# ==============================================================================


def normalize(instant: date | datetime | str, tz: ZoneInfo | None = None) -> date:
    """Strip time-of-day in the local timezone and return the calendar day.

    - Aware datetimes are converted to the local zone before taking the date,
      so 2024-01-01T23:30-05:00 is Jan 2 in UTC but Jan 1 in New York.
    - Naive datetimes are taken as local wall-clock time.
    - `date` values pass through unchanged.
    - Strings are parsed as ISO datetimes first, then with dt_parse_date().

    Args:
        instant: Value to normalize
        tz: Optional timezone override. Uses DEFAULT_TIME_ZONE if not provided.

    Returns:
        The local calendar day.

    Raises:
        ValueError: If the input cannot be interpreted as a day.
    """
    if isinstance(instant, datetime):
        return as_local(instant, tz).date()
    if isinstance(instant, date):
        return instant
    if isinstance(instant, str):
        value = instant.strip()
        if len(value) > 10:
            try:
                return as_local(datetime.fromisoformat(value), tz).date()
            except ValueError:
                pass
        parsed = dt_parse_date(value)
        if parsed is not None:
            return parsed

    _LOGGER.debug("normalize: cannot interpret %r as a calendar day", instant)
    raise ValueError(f"Cannot interpret {instant!r} as a calendar day")


def days_between(a: date | datetime | str, b: date | datetime | str) -> int:
    """Return the signed whole-day difference `a - b`.

    Examples:
        days_between(date(2024, 1, 8), date(2024, 1, 3)) → 5
        days_between(date(2024, 1, 3), date(2024, 1, 8)) → -5
    """
    return (normalize(a) - normalize(b)).days


def weekday_of(day: date | datetime | str) -> Weekday:
    """Return the weekday of a calendar day.

    Example:
        weekday_of(date(2024, 1, 1)) → Weekday.MONDAY
    """
    return Weekday(normalize(day).weekday())


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, both inclusive.

    Yields nothing when end is before start.
    """
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
