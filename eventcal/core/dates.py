"""Calendar-field arithmetic shared by the recurrence, conflict and grid code.

Every instant is split into year/month/day in a single calendar zone ``tz``
that the caller passes in (UTC unless configured otherwise). Plain ``date``
values are already calendar days and are used as-is. Weekdays are numbered
Sunday = 0 .. Saturday = 6 and months are 1-based.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Iterator, Union

from dateutil.relativedelta import relativedelta

DayLike = Union[date, datetime]

UTC = timezone.utc


def calendar_date(value: DayLike, tz: tzinfo = UTC) -> date:
    """Return the calendar day ``value`` falls on in ``tz``."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


def same_calendar_day(a: DayLike, b: DayLike, tz: tzinfo = UTC) -> bool:
    return calendar_date(a, tz) == calendar_date(b, tz)


def day_of_week(value: DayLike, tz: tzinfo = UTC) -> int:
    """Weekday index with Sunday = 0."""
    return (calendar_date(value, tz).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    # the day before the first of next month
    last = date(year, month, 1) + relativedelta(months=1) - timedelta(days=1)
    return last.day


def first_weekday_of_month(year: int, month: int) -> int:
    return day_of_week(date(year, month, 1))


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Return ``(year, month)`` ``delta`` months away, crossing year boundaries."""
    shifted = date(year, month, 1) + relativedelta(months=delta)
    return shifted.year, shifted.month


def iter_days(start: DayLike, end: DayLike, tz: tzinfo = UTC) -> Iterator[date]:
    """Yield every calendar day from ``start`` to ``end`` inclusive."""
    day = calendar_date(start, tz)
    last = calendar_date(end, tz)
    while day <= last:
        yield day
        day += timedelta(days=1)


def make_instant(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    tz: tzinfo = UTC,
) -> datetime:
    """Build an absolute instant from calendar fields read in ``tz``."""
    return datetime(year, month, day, hour, minute, tzinfo=tz)


def iso_timestamp(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    tz: tzinfo = UTC,
) -> str:
    """Same as :func:`make_instant`, rendered as a UTC ISO-8601 string ending in ``Z``."""
    instant = make_instant(year, month, day, hour, minute, tz).astimezone(UTC)
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_date(value: DayLike, tz: tzinfo = UTC) -> str:
    """``Jan 1, 2023``"""
    day = calendar_date(value, tz)
    return f"{day:%b} {day.day}, {day.year}"


def format_time(value: datetime, tz: tzinfo = UTC) -> str:
    """``10:30 AM``"""
    if value.tzinfo is not None:
        value = value.astimezone(tz)
    hour = value.hour % 12 or 12
    return f"{hour}:{value.minute:02d} {'AM' if value.hour < 12 else 'PM'}"


def format_month_year(year: int, month: int) -> str:
    """``January 2023``"""
    return f"{date(year, month, 1):%B %Y}"
