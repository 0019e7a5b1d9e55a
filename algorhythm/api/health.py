"""Probes for the process manager.

``/health/live`` answers as long as the event loop does. ``/health/ready``
also round-trips the store and reports how many sockets are listening on
the live channel.
"""

from __future__ import annotations

from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from algorhythm.api.deps import get_broadcaster
from algorhythm.database import get_engine
from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.schemas import CamelModel

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(CamelModel):
    status: str = "ok"
    timestamp: datetime


class ReadinessResponse(CamelModel):
    status: str
    database: str
    live_subscribers: int
    timestamp: datetime


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    return LivenessResponse(timestamp=datetime.now(UTC))


@router.get("/ready", response_model=ReadinessResponse)
async def readiness(
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
) -> ReadinessResponse:
    """Report not_ready (still 200) when the store cannot answer SELECT 1."""
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "ok"
    except (SQLAlchemyError, RuntimeError) as exc:
        log.warning("health.store_unreachable", error=str(exc))
        database = f"error: {exc}"

    return ReadinessResponse(
        status="ready" if database == "ok" else "not_ready",
        database=database,
        live_subscribers=broadcaster.subscriber_count(),
        timestamp=datetime.now(UTC),
    )
