"""Structured logging for the HTTP API and the live channel.

structlog renders JSON lines in production and a colored console view in
development. Event names are dotted (``agent.registered``,
``live.subscribed``, ``live.send_failed``) and every HTTP request carries a
``request_id`` bound through contextvars.

Production line:
    {"event": "message.sent", "level": "info", "logger": "algorhythm.services.messages",
     "timestamp": "2026-03-01T18:04:11.532110Z", "request_id": "req_3f9a...",
     "conversation_id": "8c1e...", "sender_id": "b07d..."}
"""

from __future__ import annotations

import logging
import re
import secrets
import sys
from typing import Any

import structlog
from starlette.responses import JSONResponse
from structlog.types import Processor

log = structlog.get_logger(__name__)

_REQUEST_ID_HEADER = b"x-request-id"
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def _renderer(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.RichTracebackFormatter(),
        )
    ]


def configure_logging(*, json_logs: bool = False, log_level: str = "INFO") -> None:
    """Route stdlib logging and structlog to stdout at ``log_level``.

    Args:
        json_logs: One JSON object per line (production) instead of console output.
        log_level: Minimum level name, e.g. ``"DEBUG"``.
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            *_renderer(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class RequestIdMiddleware:
    """Pure ASGI middleware binding a request id to the log context.

    A well-formed inbound X-Request-ID is reused, otherwise a fresh
    ``req_<hex>`` id is minted. The id is echoed in the response header.
    WebSocket scopes pass through untouched: a live connection outlasts any
    single request.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _inbound_request_id(scope) or f"req_{secrets.token_hex(8)}"
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=scope["method"],
            path=scope["path"],
        )

        async def send_with_request_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (_REQUEST_ID_HEADER, request_id.encode()),
                ]
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            structlog.contextvars.clear_contextvars()


class UnhandledErrorMiddleware:
    """Pure ASGI middleware turning unexpected exceptions into a JSON 500.

    Installed innermost, so the response still passes back through CORS
    and RequestIdMiddleware and carries their headers. If the response had
    already started, the exception is re-raised for the server to handle.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: dict[str, Any]) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except Exception as exc:
            log.error(
                "app.unhandled_exception",
                path=scope["path"],
                method=scope["method"],
                error=str(exc),
                exc_info=True,
            )
            if response_started:
                raise
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})
            await response(scope, receive, send)


def _inbound_request_id(scope: dict[str, Any]) -> str | None:
    for name, value in scope.get("headers", []):
        if name == _REQUEST_ID_HEADER:
            candidate = value.decode("latin-1")
            return candidate if _VALID_REQUEST_ID.match(candidate) else None
    return None
