"""Decide on which calendar days an event occurs.

The anchor of every rule is the event's ``start_date``; interval arithmetic
counts whole calendar days (daily, custom), 7-day blocks from the anchor day
(weekly) or calendar months (monthly). Rule values are not validated here:
an interval of 0 raises ``ZeroDivisionError`` and an empty ``days_of_week``
never matches.
"""

from __future__ import annotations

from datetime import date, tzinfo
from typing import Iterable, List

from eventcal.core.dates import UTC, DayLike, calendar_date, day_of_week, iter_days
from eventcal.schemas import Event


def occurs_on(event: Event, day: DayLike, tz: tzinfo = UTC) -> bool:
    """Return True if ``event`` has an occurrence on the calendar day of ``day``."""
    target = calendar_date(day, tz)
    anchor = calendar_date(event.start_date, tz)

    rule = event.recurrence
    if not event.is_recurring or rule is None:
        return target == anchor

    if rule.end_date is not None and target > calendar_date(rule.end_date, tz):
        return False
    if target < anchor:
        return False

    if rule.type in ("daily", "custom"):
        # custom has no vocabulary of its own yet and steps like daily
        return _day_offset(anchor, target) % rule.interval == 0
    if rule.type == "weekly":
        return _occurs_weekly(anchor, target, rule.interval, rule.days_of_week)
    if rule.type == "monthly":
        return _occurs_monthly(anchor, target, rule.interval, rule.day_of_month)
    return False


def _day_offset(anchor: date, target: date) -> int:
    return abs((target - anchor).days)


def _occurs_weekly(anchor: date, target: date, interval: int, days_of_week: Iterable[int]) -> bool:
    weeks = _day_offset(anchor, target) // 7
    if weeks % interval != 0:
        return False
    return day_of_week(target) in (days_of_week or ())


def _occurs_monthly(anchor: date, target: date, interval: int, day_of_month: int | None) -> bool:
    months = (target.year - anchor.year) * 12 + (target.month - anchor.month)
    if months % interval != 0:
        return False
    return target.day == (day_of_month or anchor.day)


def events_on(day: DayLike, events: Iterable[Event], tz: tzinfo = UTC) -> List[Event]:
    """Events occurring on ``day``, in input order."""
    return [event for event in events if occurs_on(event, day, tz)]


def occurrences_between(event: Event, start: DayLike, end: DayLike, tz: tzinfo = UTC) -> List[date]:
    """Calendar days in ``[start, end]`` on which ``event`` occurs."""
    return [day for day in iter_days(start, end, tz) if occurs_on(event, day, tz)]
