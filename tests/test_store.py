import json
import logging
from datetime import date, datetime, timedelta, timezone

import pytest
from dateutil import tz

from eventcal.schemas import DailyRecurrence, Event, WeeklyRecurrence
from eventcal.services.events import (
    DuplicateEventError,
    EventConflictError,
    EventNotFoundError,
    EventStore,
    InvalidEventDataError,
)


def utc(*fields) -> datetime:
    return datetime(*fields, tzinfo=timezone.utc)


def make_event(start: datetime, hours: float = 1, recurrence=None, **fields) -> Event:
    fields.setdefault("title", "Event")
    return Event(
        start_date=start,
        end_date=start + timedelta(hours=hours),
        is_recurring=recurrence is not None,
        recurrence=recurrence,
        **fields,
    )


@pytest.fixture
def store() -> EventStore:
    return EventStore()


@pytest.fixture
def series() -> Event:
    return make_event(
        utc(2024, 6, 3, 9, 0),
        recurrence=WeeklyRecurrence(days_of_week=[1]),
        id="series",
        title="Weekly sync",
        category="meeting",
    )


def test_add_rejects_conflicts(store, caplog):
    first = store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))
    clash = make_event(utc(2024, 6, 10, 9, 30), id="b")

    with caplog.at_level(logging.INFO, logger="eventcal.services.events"):
        with pytest.raises(EventConflictError) as excinfo:
            store.add_event(clash)

    assert "conflicts with an existing event" in str(excinfo.value)
    assert "Rejected conflicting event event_id=b" in caplog.text
    assert store.list_events() == [first]


def test_add_rejects_duplicate_ids(store):
    store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))
    with pytest.raises(DuplicateEventError):
        store.add_event(make_event(utc(2024, 6, 12, 9, 0), id="a"))


def test_add_rejects_occurrence_of_series(store, series):
    store.add_event(series)
    with pytest.raises(EventConflictError):
        store.add_event(make_event(utc(2024, 7, 1, 9, 15), hours=0.5))
    store.add_event(make_event(utc(2024, 7, 2, 9, 15), hours=0.5))
    assert len(store) == 2


def test_update_ignores_own_prior_state(store):
    original = store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))
    longer = original.model_copy(update={"end_date": utc(2024, 6, 10, 11, 0)})
    assert store.update_event(longer) == longer
    assert store.get_event("a").end_date == utc(2024, 6, 10, 11, 0)


def test_update_rejects_conflicts_and_unknown_ids(store):
    store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))
    other = store.add_event(make_event(utc(2024, 6, 10, 12, 0), id="b"))

    with pytest.raises(EventConflictError) as excinfo:
        store.update_event(other.model_copy(update={"start_date": utc(2024, 6, 10, 9, 30)}))
    assert str(excinfo.value).startswith("This update conflicts")
    assert store.get_event("b") == other

    with pytest.raises(EventNotFoundError):
        store.update_event(make_event(utc(2024, 6, 11, 9, 0), id="missing"))


def test_delete_and_clear(store):
    store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))
    store.add_event(make_event(utc(2024, 6, 11, 9, 0), id="b"))

    store.delete_event("a")
    assert [event.id for event in store.list_events()] == ["b"]
    with pytest.raises(EventNotFoundError):
        store.delete_event("a")

    store.clear()
    assert store.list_events() == []


def test_move_keeps_time_of_day_and_duration(store):
    store.add_event(make_event(utc(2024, 6, 10, 9, 30), hours=1.5, id="a"))
    moved = store.move_event("a", date(2024, 6, 14))

    assert moved.id == "a"
    assert moved.start_date == utc(2024, 6, 14, 9, 30)
    assert moved.end_date == utc(2024, 6, 14, 11, 0)
    assert store.list_events() == [moved]


def test_move_single_occurrence_detaches_it(store, series):
    store.add_event(series)
    moved = store.move_event("series", date(2024, 6, 12))

    assert moved.id != "series"
    assert not moved.is_recurring
    assert moved.recurrence is None
    assert moved.start_date == utc(2024, 6, 12, 9, 0)
    assert store.get_event("series") == series
    assert [event.id for event in store.list_events()] == ["series", moved.id]


def test_move_entire_series_moves_anchor(store, series):
    store.add_event(series)
    moved = store.move_event("series", date(2024, 6, 4), move_entire_series=True)

    assert moved.id == "series"
    assert moved.recurrence == series.recurrence
    assert moved.start_date == utc(2024, 6, 4, 9, 0)
    assert len(store) == 1


def test_move_rejects_conflicts(store):
    store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))
    blocker = store.add_event(make_event(utc(2024, 6, 11, 9, 0), id="b"))

    with pytest.raises(EventConflictError):
        store.move_event("a", date(2024, 6, 11))
    assert store.get_event("a").start_date == utc(2024, 6, 10, 9, 0)
    assert store.get_event("b") == blocker

    with pytest.raises(EventNotFoundError):
        store.move_event("missing", date(2024, 6, 11))


def test_move_reads_time_of_day_in_calendar_zone():
    store = EventStore(tz=tz.gettz("America/New_York"))
    # 09:00 EDT
    store.add_event(make_event(utc(2024, 6, 10, 13, 0), id="a"))
    moved = store.move_event("a", date(2024, 12, 10))
    # 09:00 EST
    assert moved.start_date == utc(2024, 12, 10, 14, 0)
    assert moved.end_date == utc(2024, 12, 10, 15, 0)


def test_filter_by_search_and_category(store, series):
    store.add_event(series)
    store.add_event(
        make_event(utc(2024, 6, 11, 14, 0), id="gym", title="Gym", description="Leg day", category="personal")
    )
    store.add_event(make_event(utc(2024, 6, 12, 14, 0), id="review", title="Code review", category="work"))

    assert [event.id for event in store.filter_events()] == ["series", "gym", "review"]
    assert [event.id for event in store.filter_events(search="LEG")] == ["gym"]
    assert [event.id for event in store.filter_events(categories=["work", "meeting"])] == ["series", "review"]
    assert store.filter_events(search="sync", categories=["work"]) == []


def test_export_then_import_restores_events(store, series):
    store.add_event(series)
    store.add_event(make_event(utc(2024, 6, 11, 14, 0), id="gym", title="Gym"))
    exported = store.export_json()

    records = json.loads(exported)
    assert records[0]["isRecurring"] is True
    assert records[0]["recurrence"]["daysOfWeek"] == [1]

    restored = EventStore()
    restored.add_event(make_event(utc(2024, 1, 1, 9, 0), id="stale"))
    assert restored.import_json(exported) == 2
    assert restored.list_events() == store.list_events()


def test_import_rejects_bad_payloads(store):
    store.add_event(make_event(utc(2024, 6, 10, 9, 0), id="a"))

    with pytest.raises(InvalidEventDataError) as excinfo:
        store.import_json("{not json")
    assert str(excinfo.value) == "Error importing events: Invalid JSON data"

    with pytest.raises(InvalidEventDataError) as excinfo:
        store.import_json(json.dumps({"events": []}))
    assert str(excinfo.value) == "Invalid event data format"

    with pytest.raises(InvalidEventDataError):
        store.import_json(json.dumps([{"id": "x", "title": "No dates"}]))

    assert [event.id for event in store.list_events()] == ["a"]


def test_preloaded_events_keep_order():
    daily = make_event(utc(2024, 6, 1, 7, 0), recurrence=DailyRecurrence(), id="daily")
    single = make_event(utc(2024, 6, 1, 9, 0), id="single")
    store = EventStore([daily, single])
    assert [event.id for event in store.list_events()] == ["daily", "single"]
