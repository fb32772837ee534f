from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from eventcal import schemas
from eventcal.core.conflicts import find_conflicts
from eventcal.services.events import (
    DuplicateEventError,
    EventConflictError,
    EventNotFoundError,
    EventStore,
    InvalidEventDataError,
)

router = APIRouter(prefix="/api/events", tags=["events"])


def get_store(request: Request) -> EventStore:
    return request.app.state.store


@router.get("", response_model=List[schemas.Event])
async def list_events(
    search: str = "",
    category: Optional[List[str]] = Query(default=None),
    store: EventStore = Depends(get_store),
) -> List[schemas.Event]:
    return store.filter_events(search=search, categories=category or ())


@router.post("", response_model=schemas.Event, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: schemas.Event,
    store: EventStore = Depends(get_store),
) -> schemas.Event:
    try:
        return store.add_event(payload)
    except (DuplicateEventError, EventConflictError) as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_events(store: EventStore = Depends(get_store)) -> Response:
    store.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/conflicts", response_model=schemas.ConflictCheckResponse)
async def check_conflicts(
    payload: schemas.ConflictCheckRequest,
    store: EventStore = Depends(get_store),
) -> schemas.ConflictCheckResponse:
    conflicting = find_conflicts(
        payload.event, store.list_events(), exclude_id=payload.exclude_id, tz=store.tz
    )
    return schemas.ConflictCheckResponse(
        conflict=bool(conflicting),
        conflicting_ids=[event.id for event in conflicting],
    )


@router.get("/export")
async def export_events(store: EventStore = Depends(get_store)) -> Response:
    return Response(
        content=store.export_json(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="calendar-events.json"'},
    )


@router.post("/import", response_model=schemas.ImportResult)
async def import_events(
    request: Request,
    store: EventStore = Depends(get_store),
) -> schemas.ImportResult:
    body = await request.body()
    try:
        imported = store.import_json(body.decode("utf-8"))
    except InvalidEventDataError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return schemas.ImportResult(imported=imported)


@router.get("/{event_id}", response_model=schemas.Event)
async def get_event(event_id: str, store: EventStore = Depends(get_store)) -> schemas.Event:
    event = store.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.put("/{event_id}", response_model=schemas.Event)
async def update_event(
    event_id: str,
    payload: schemas.Event,
    store: EventStore = Depends(get_store),
) -> schemas.Event:
    if payload.id != event_id:
        payload = payload.model_copy(update={"id": event_id})
    try:
        return store.update_event(payload)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except EventConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, store: EventStore = Depends(get_store)) -> Response:
    try:
        store.delete_event(event_id)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/move", response_model=schemas.Event)
async def move_event(
    event_id: str,
    payload: schemas.EventMoveRequest,
    store: EventStore = Depends(get_store),
) -> schemas.Event:
    try:
        return store.move_event(event_id, payload.new_date, payload.move_entire_series)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except EventConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
