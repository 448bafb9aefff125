"""FastAPI application — entry point for the calendar events service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from events_api.config import Settings, get_settings
from events_api.domain.models import (
    CreateEventRequest,
    Event,
    EventFilter,
    UpdateEventRequest,
)
from events_api.domain.results import (
    DateRangeError,
    EventResult,
    NotFound,
    OverlapConflict,
)
from events_api.repos.memory import EventRepository
from events_api.services.dates_range import parse_dates_range
from events_api.services.events import EventService

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ── Dependencies ──────────────────────────────────────────────────────


def get_event_service(request: Request) -> EventService:
    """Build the service around the repository opened at startup."""
    return EventService(request.app.state.event_repo)


def _to_response(result: EventResult):
    """Translate service outcomes into HTTP responses; events pass through."""
    if isinstance(result, NotFound):
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "Not Found", "message": result.message},
        )
    if isinstance(result, OverlapConflict):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": result.error, "message": result.message},
        )
    return result


# ── Exception handlers ────────────────────────────────────────────────


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report request validation failures as ``{"errors": {field: [messages]}}``."""
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        field = ".".join(loc) or "body"
        errors.setdefault(field, []).append(error.get("msg", "Invalid value"))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


async def dates_range_exception_handler(
    request: Request, exc: DateRangeError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.error, "message": exc.message},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "message": "An unexpected error occurred."},
    )


# ── Application factory ───────────────────────────────────────────────


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting %s in %s mode (store %r)",
            settings.APP_NAME,
            settings.ENVIRONMENT,
            settings.DATABASE_NAME,
        )
        app.state.event_repo = EventRepository(name=settings.DATABASE_NAME)
        try:
            yield
        finally:
            logger.info("Shutting down %s", settings.APP_NAME)
            app.state.event_repo.close()

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DateRangeError, dates_range_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    _register_routes(app)
    return app


# ── Routes ────────────────────────────────────────────────────────────


def _register_routes(app: FastAPI) -> None:
    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.post("/events", response_model=Event, status_code=status.HTTP_201_CREATED)
    def create_event(
        payload: CreateEventRequest,
        service: EventService = Depends(get_event_service),
    ):
        """Create an event unless it overlaps an existing one."""
        return _to_response(service.create(payload))

    @app.get("/events", response_model=list[Event])
    def list_events(
        dates_range: str | None = Query(default=None, alias="datesRange"),
        service: EventService = Depends(get_event_service),
    ) -> list[Event]:
        """Return all events, or those starting within ``datesRange``."""
        event_filter: EventFilter | None = None
        if dates_range is not None:
            event_filter = parse_dates_range(dates_range).to_filter()
        return service.find_all(event_filter)

    @app.get("/events/{event_id}", response_model=Event)
    def get_event(
        event_id: str,
        service: EventService = Depends(get_event_service),
    ):
        return _to_response(service.find_one(event_id))

    @app.patch("/events/{event_id}", response_model=Event)
    def update_event(
        event_id: str,
        payload: UpdateEventRequest,
        service: EventService = Depends(get_event_service),
    ):
        """Apply a partial update; the interval may not overlap other events."""
        return _to_response(service.update(event_id, payload))

    @app.delete("/events/{event_id}", response_model=Event)
    def delete_event(
        event_id: str,
        service: EventService = Depends(get_event_service),
    ):
        return _to_response(service.remove(event_id))


app = create_app()


def run() -> None:
    """Serve ``app`` with uvicorn on the configured host and port."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
