from __future__ import annotations

import uuid
from datetime import date as date_type, datetime, timedelta, timezone
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

EventCategory = Literal["work", "personal", "meeting", "other"]


def _ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("timestamps must be timezone aware")
    return value.astimezone(timezone.utc)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON keys (the stored event layout)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class _RecurrenceBase(CamelModel):
    interval: int = 1
    end_date: Optional[datetime] = None
    occurrences: Optional[int] = None

    @field_validator("end_date")
    @classmethod
    def ensure_timezone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _ensure_aware(value)


class DailyRecurrence(_RecurrenceBase):
    type: Literal["daily"] = "daily"


class WeeklyRecurrence(_RecurrenceBase):
    type: Literal["weekly"] = "weekly"
    days_of_week: List[int] = Field(default_factory=list)


class MonthlyRecurrence(_RecurrenceBase):
    type: Literal["monthly"] = "monthly"
    day_of_month: Optional[int] = None


class CustomRecurrence(_RecurrenceBase):
    type: Literal["custom"] = "custom"


RecurrencePattern = Annotated[
    Union[DailyRecurrence, WeeklyRecurrence, MonthlyRecurrence, CustomRecurrence],
    Field(discriminator="type"),
]


class Event(CamelModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    color: str = ""
    start_date: datetime
    end_date: datetime
    category: EventCategory = "other"
    is_recurring: bool = False
    recurrence: Optional[RecurrencePattern] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def ensure_timezone(cls, value: datetime) -> datetime:
        return _ensure_aware(value)

    @model_validator(mode="after")
    def check_recurrence_flag(self) -> "Event":
        if self.is_recurring != (self.recurrence is not None):
            raise ValueError("isRecurring must be true exactly when recurrence is set")
        return self

    @property
    def duration(self) -> timedelta:
        return self.end_date - self.start_date


class CalendarDay(CamelModel):
    date: date_type
    is_current_month: bool
    is_today: bool
    events: List[Event]


class MonthRef(CamelModel):
    year: int
    month: int


class MonthGridResponse(CamelModel):
    year: int
    month: int
    label: str
    previous: MonthRef
    next: MonthRef
    days: List[CalendarDay]


class EventMoveRequest(CamelModel):
    new_date: date_type
    move_entire_series: bool = False


class ConflictCheckRequest(CamelModel):
    event: Event
    exclude_id: Optional[str] = None


class ConflictCheckResponse(CamelModel):
    conflict: bool
    conflicting_ids: List[str]


class ImportResult(CamelModel):
    imported: int
