from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Sequence

from eventcal.core.dates import UTC, days_in_month, first_weekday_of_month
from eventcal.core.recurrence import events_on
from eventcal.schemas import CalendarDay, Event

GRID_CELLS = 42  # 6 weeks of 7 days


def month_grid(
    year: int,
    month: int,
    events: Sequence[Event],
    today: Optional[date] = None,
    tz: tzinfo = UTC,
) -> List[CalendarDay]:
    """Build the fixed 6x7 grid for ``month`` starting on a Sunday.

    Cells before the 1st and after the last day spill over from the
    neighbouring months. Every cell scans the whole event list.
    """
    if today is None:
        today = datetime.now(tz).date()

    first = date(year, month, 1)
    current_days = days_in_month(year, month)
    leading = first_weekday_of_month(year, month)
    trailing = GRID_CELLS - current_days - leading

    cells: List[CalendarDay] = []
    for offset in range(-leading, current_days + trailing):
        day = first + timedelta(days=offset)
        cells.append(
            CalendarDay(
                date=day,
                is_current_month=0 <= offset < current_days,
                is_today=day == today,
                events=events_on(day, events, tz),
            )
        )
    return cells
