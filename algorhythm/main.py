"""FastAPI application entrypoint.

Application startup order:
1. Load settings (from environment)
2. Configure structured logging
3. Initialize database engine and create missing tables
4. Register middleware (request id, CORS, unhandled-error guard)
5. Include all routers (REST, health, live WebSocket, static front-end)

Shutdown order:
1. Close DB connection pool

uvicorn handles SIGTERM: it stops accepting connections, runs the lifespan
shutdown above, then exits.

Usage:
    algorhythm
    # or
    uvicorn algorhythm.main:app --port 3000
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from algorhythm.api.router import api_router, public_router
from algorhythm.config import Settings, get_settings
from algorhythm.database import close_db, create_tables, init_db
from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.realtime.live import ws_router
from algorhythm.telemetry.logging import (
    RequestIdMiddleware,
    UnhandledErrorMiddleware,
    configure_logging,
)

log = structlog.get_logger(__name__)

_ENDPOINTS = (
    "GET    /api/agents",
    "POST   /api/agents/register",
    "POST   /api/agents/{id}/generate-key",
    "GET    /api/conversations",
    "POST   /api/conversations/start",
    "GET    /api/conversations/{id}/messages",
    "POST   /api/messages/send",
    "GET    /api/stats",
    "WS     /",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown."""
    settings: Settings = app.state.settings

    configure_logging(
        json_logs=settings.is_prod,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    log.info(
        "app.starting",
        environment=settings.environment,
        db_url=settings.database_url.split("@")[-1],
    )

    init_db(settings)
    await create_tables()

    log.info(
        "app.ready",
        port=settings.port,
        websocket=f"ws://localhost:{settings.port}",
        endpoints=list(_ENDPOINTS),
    )
    yield

    log.info(
        "app.shutting_down",
        live_subscribers=app.state.broadcaster.subscriber_count(),
    )
    await close_db()
    log.info("app.shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Application factory.

    The LiveBroadcaster is built here, once per app, so every handler that
    publishes sees the same subscriber set.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="AlgoRhythm",
        description="Agent matchmaking demo: registrations, conversations and live updates.",
        version="0.1.0",
        docs_url="/docs" if settings.is_dev else None,
        redoc_url="/redoc" if settings.is_dev else None,
        openapi_url="/openapi.json" if settings.is_dev else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.broadcaster = LiveBroadcaster(viewer_baseline=settings.viewer_baseline)

    # ------------------------------------------------------------------ #
    # Middleware (added in reverse order - last added = first executed)
    # ------------------------------------------------------------------ #
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    # ------------------------------------------------------------------ #
    # Routers
    # ------------------------------------------------------------------ #
    app.include_router(public_router)
    app.include_router(api_router)
    app.include_router(ws_router)

    # Front-end bundle goes last so API and WebSocket routes match first
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        log.info("app.static_mounted", directory=str(static_dir))

    # ------------------------------------------------------------------ #
    # Exception handlers - every error body is {"error": "..."}
    # ------------------------------------------------------------------ #

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": _describe_validation_error(exc)},
        )

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        log.error(
            "app.database_error",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return app


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("algorhythm.main:app", host=settings.host, port=settings.port)


# Module-level app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    run()
