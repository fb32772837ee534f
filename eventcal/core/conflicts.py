from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Iterable, List, NamedTuple, Optional, Protocol

from eventcal.core.dates import UTC, DayLike, calendar_date, iter_days, same_calendar_day
from eventcal.core.recurrence import occurs_on
from eventcal.schemas import Event


class Span(Protocol):
    start_date: datetime
    end_date: datetime


class Instance(NamedTuple):
    """One concrete start/end pair of an event."""

    start_date: datetime
    end_date: datetime


def instance_on(event: Event, day: DayLike, tz: tzinfo = UTC) -> Instance:
    """Place ``event``'s time of day and duration on the calendar day of ``day``."""
    local_start = event.start_date.astimezone(tz)
    start = datetime.combine(calendar_date(day, tz), local_start.time(), tzinfo=tz)
    return Instance(start, start + event.duration)


def overlaps(a: Span, b: Span, tz: tzinfo = UTC) -> bool:
    """Closed-interval overlap, only for spans starting on the same calendar day."""
    if not same_calendar_day(a.start_date, b.start_date, tz):
        return False
    return a.start_date <= b.end_date and a.end_date >= b.start_date


def _conflicts_with(candidate: Event, existing: Event, tz: tzinfo) -> bool:
    if not existing.is_recurring or existing.recurrence is None:
        return overlaps(candidate, existing, tz)

    for day in iter_days(candidate.start_date, candidate.end_date, tz):
        if occurs_on(existing, day, tz) and overlaps(candidate, instance_on(existing, day, tz), tz):
            return True
    return False


def _others(events: Iterable[Event], exclude_id: Optional[str]) -> Iterable[Event]:
    return (event for event in events if exclude_id is None or event.id != exclude_id)


def has_conflict(
    candidate: Event,
    events: Iterable[Event],
    exclude_id: Optional[str] = None,
    tz: tzinfo = UTC,
) -> bool:
    """Return True if ``candidate`` overlaps any event or any occurrence of a series.

    ``exclude_id`` skips the stored version of the event being edited or moved.
    """
    return any(_conflicts_with(candidate, existing, tz) for existing in _others(events, exclude_id))


def find_conflicts(
    candidate: Event,
    events: Iterable[Event],
    exclude_id: Optional[str] = None,
    tz: tzinfo = UTC,
) -> List[Event]:
    return [existing for existing in _others(events, exclude_id) if _conflicts_with(candidate, existing, tz)]
