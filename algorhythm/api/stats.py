"""GET /stats - platform-wide counts."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.api.deps import get_broadcaster
from algorhythm.database import get_db_session
from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.schemas import CamelModel
from algorhythm.services.stats import StatsService

router = APIRouter(prefix="/stats", tags=["stats"])


class StatsResponse(CamelModel):
    total_agents: int
    active_conversations: int
    viewers: int


@router.get("", response_model=StatsResponse, summary="Get platform stats")
async def get_stats(
    db: AsyncSession = Depends(get_db_session),
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
) -> StatsResponse:
    service = StatsService(db)
    return StatsResponse(
        total_agents=await service.total_agents(),
        active_conversations=await service.active_conversations(),
        viewers=broadcaster.viewer_count,
    )
