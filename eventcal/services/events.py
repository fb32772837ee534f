from __future__ import annotations

import json
import logging
import uuid
from datetime import date, datetime, time, tzinfo
from typing import Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from eventcal.core.conflicts import has_conflict
from eventcal.core.dates import UTC
from eventcal.schemas import Event
from eventcal.utils.logger import log_with_context

logger = logging.getLogger(__name__)

_events_adapter = TypeAdapter(List[Event])


class EventStoreError(Exception):
    """Base class for rejected store operations; ``str(exc)`` is user-facing."""


class EventNotFoundError(EventStoreError, LookupError):
    pass


class DuplicateEventError(EventStoreError):
    pass


class EventConflictError(EventStoreError):
    pass


class InvalidEventDataError(EventStoreError, ValueError):
    pass


class EventStore:
    """In-memory, insertion-ordered event collection.

    Every add, update and move is checked with :func:`has_conflict` against
    the events currently held and rejected with :class:`EventConflictError`.
    """

    def __init__(self, events: Iterable[Event] = (), *, tz: tzinfo = UTC, export_indent: int = 2) -> None:
        self.tz = tz
        self.export_indent = export_indent
        self._events: dict[str, Event] = {event.id: event for event in events}

    def __len__(self) -> int:
        return len(self._events)

    def list_events(self) -> List[Event]:
        return list(self._events.values())

    def get_event(self, event_id: str) -> Optional[Event]:
        return self._events.get(event_id)

    def _require(self, event_id: str) -> Event:
        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError("Event not found")
        return event

    def add_event(self, event: Event) -> Event:
        if event.id in self._events:
            raise DuplicateEventError(f"An event with id {event.id} already exists")
        if has_conflict(event, self.list_events(), tz=self.tz):
            log_with_context(logger, "info", "Rejected conflicting event", event_id=event.id)
            raise EventConflictError(
                "This event conflicts with an existing event. Please choose a different time."
            )
        self._events[event.id] = event
        log_with_context(logger, "info", "Added event", event_id=event.id, recurring=event.is_recurring)
        return event

    def update_event(self, event: Event) -> Event:
        self._require(event.id)
        if has_conflict(event, self.list_events(), exclude_id=event.id, tz=self.tz):
            log_with_context(logger, "info", "Rejected conflicting update", event_id=event.id)
            raise EventConflictError(
                "This update conflicts with an existing event. Please choose a different time."
            )
        self._events[event.id] = event
        log_with_context(logger, "info", "Updated event", event_id=event.id)
        return event

    def delete_event(self, event_id: str) -> None:
        self._require(event_id)
        del self._events[event_id]
        log_with_context(logger, "info", "Deleted event", event_id=event_id)

    def move_event(self, event_id: str, new_date: date, move_entire_series: bool = False) -> Event:
        """Move an event to ``new_date``, keeping its time of day and duration.

        Moving a single occurrence of a series detaches it: the result is a new
        one-off event with a fresh id, stored next to the unchanged series.
        """
        original = self._require(event_id)
        local_start = original.start_date.astimezone(self.tz)
        new_start = datetime.combine(
            new_date, time(local_start.hour, local_start.minute), tzinfo=self.tz
        )
        changes = {
            "start_date": new_start.astimezone(UTC),
            "end_date": (new_start + original.duration).astimezone(UTC),
        }
        detach = original.is_recurring and not move_entire_series
        if detach:
            changes.update(id=str(uuid.uuid4()), is_recurring=False, recurrence=None)
        moved = original.model_copy(update=changes)

        if has_conflict(moved, self.list_events(), exclude_id=original.id, tz=self.tz):
            log_with_context(logger, "info", "Rejected conflicting move", event_id=event_id, new_date=new_date)
            raise EventConflictError("This move would conflict with an existing event.")

        if detach:
            self._events[moved.id] = moved
        else:
            self._events[event_id] = moved
        log_with_context(
            logger,
            "info",
            "Moved event",
            event_id=event_id,
            new_id=moved.id if detach else None,
            new_date=new_date,
        )
        return moved

    def clear(self) -> None:
        self._events.clear()
        logger.info("Cleared all events")

    def filter_events(self, search: str = "", categories: Iterable[str] = ()) -> List[Event]:
        """Case-insensitive title/description search, optionally limited to categories."""
        needle = search.lower()
        wanted = set(categories)
        return [
            event
            for event in self._events.values()
            if (not needle or needle in event.title.lower() or needle in event.description.lower())
            and (not wanted or event.category in wanted)
        ]

    def export_json(self) -> str:
        return _events_adapter.dump_json(
            self.list_events(), indent=self.export_indent, by_alias=True
        ).decode("utf-8")

    def import_json(self, payload: str) -> int:
        """Replace every stored event with the events in ``payload``."""
        try:
            raw = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise InvalidEventDataError("Error importing events: Invalid JSON data") from exc
        try:
            events = _events_adapter.validate_python(raw)
        except ValidationError as exc:
            logger.warning("Rejected event import with %d validation errors", exc.error_count())
            raise InvalidEventDataError("Invalid event data format") from exc

        self._events = {event.id: event for event in events}
        log_with_context(logger, "info", "Imported events", count=len(self._events))
        return len(self._events)
