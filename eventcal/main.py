from __future__ import annotations

import logging
import time
from typing import Iterable, Optional

from fastapi import FastAPI, Request

from eventcal import __version__
from eventcal.config import Settings, get_settings
from eventcal.routes import calendar as calendar_routes
from eventcal.routes import events as events_routes
from eventcal.schemas import Event
from eventcal.services.events import EventStore
from eventcal.utils.logger import setup_logger


def create_app(
    *,
    override_settings: Optional[Settings] = None,
    events: Iterable[Event] = (),
) -> FastAPI:
    settings = override_settings or get_settings()

    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
    logger = setup_logger("eventcal", settings.log_level)
    request_logger = logging.getLogger("eventcal.http")

    app = FastAPI(title=settings.app_name, version=__version__)
    app.state.settings = settings
    app.state.store = EventStore(
        events,
        tz=settings.resolve_timezone(),
        export_indent=settings.export_indent,
    )
    logger.info("Calendar zone %s, %d preloaded events", settings.calendar_timezone, len(app.state.store))

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration = (time.perf_counter() - start) * 1000
        request_logger.info(
            "%s %s -> %s (%.2f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration,
        )
        return response

    app.include_router(events_routes.router)
    app.include_router(calendar_routes.router)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "eventcal.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


app = create_app()
