from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from eventcal import schemas
from eventcal.core.dates import format_month_year, shift_month
from eventcal.core.grid import month_grid
from eventcal.routes.events import get_store
from eventcal.services.events import EventStore

router = APIRouter(prefix="/api/calendar", tags=["calendar"])


@router.get("/{year}/{month}", response_model=schemas.MonthGridResponse)
async def get_month(
    year: int = Path(ge=1900, le=2999),
    month: int = Path(ge=1, le=12),
    today: Optional[date] = None,
    search: str = "",
    category: Optional[List[str]] = Query(default=None),
    store: EventStore = Depends(get_store),
) -> schemas.MonthGridResponse:
    events = store.filter_events(search=search, categories=category or ())
    prev_year, prev_month = shift_month(year, month, -1)
    next_year, next_month = shift_month(year, month, 1)
    return schemas.MonthGridResponse(
        year=year,
        month=month,
        label=format_month_year(year, month),
        previous=schemas.MonthRef(year=prev_year, month=prev_month),
        next=schemas.MonthRef(year=next_year, month=next_month),
        days=month_grid(year, month, events, today=today, tz=store.tz),
    )
