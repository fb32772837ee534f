from eventcal.core.conflicts import Instance, find_conflicts, has_conflict, instance_on, overlaps
from eventcal.core.dates import (
    calendar_date,
    day_of_week,
    days_in_month,
    first_weekday_of_month,
    iso_timestamp,
    make_instant,
    same_calendar_day,
    shift_month,
)
from eventcal.core.grid import GRID_CELLS, month_grid
from eventcal.core.recurrence import events_on, occurrences_between, occurs_on

__all__ = [
    "GRID_CELLS",
    "Instance",
    "calendar_date",
    "day_of_week",
    "days_in_month",
    "events_on",
    "find_conflicts",
    "first_weekday_of_month",
    "has_conflict",
    "instance_on",
    "iso_timestamp",
    "make_instant",
    "month_grid",
    "occurrences_between",
    "occurs_on",
    "overlaps",
    "same_calendar_day",
    "shift_month",
]
