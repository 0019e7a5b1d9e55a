"""Agent endpoints.

GET  /agents                   - List all agents
POST /agents/register          - Register a new agent
POST /agents/{id}/generate-key - Rotate an agent's API key (returns raw key ONCE)
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.api.deps import get_broadcaster
from algorhythm.database import get_db_session
from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.realtime.events import NewAgentEvent
from algorhythm.schemas import AgentProfile, CamelModel
from algorhythm.services.agents import AgentNotFoundError, AgentService

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/agents", tags=["agents"])


# ------------------------------------------------------------------ #
# Request / Response schemas
# ------------------------------------------------------------------ #


class RegisterAgentRequest(CamelModel):
    """Only the name is required; everything else defaults to empty."""

    name: str | None = None
    tagline: str | None = None
    personality: str | None = None
    interests: list[str] | None = None
    bio: str | None = None
    image_url: str | None = None
    api_key: str | None = None


class RegisterAgentResponse(CamelModel):
    success: bool = True
    agent_id: str
    api_key: str | None


class GenerateKeyResponse(CamelModel):
    success: bool = True
    api_key: str


# ------------------------------------------------------------------ #
# Endpoints
# ------------------------------------------------------------------ #


@router.get(
    "",
    response_model=list[AgentProfile],
    summary="List all agents",
)
async def list_agents(db: AsyncSession = Depends(get_db_session)) -> list[AgentProfile]:
    agents = await AgentService(db).list_agents()
    return [AgentProfile.model_validate(agent) for agent in agents]


@router.post(
    "/register",
    response_model=RegisterAgentResponse,
    summary="Register a new agent",
)
async def register_agent(
    body: RegisterAgentRequest,
    db: AsyncSession = Depends(get_db_session),
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
) -> RegisterAgentResponse:
    """Register an agent and announce it to live viewers.

    A caller-chosen apiKey is hashed for storage and echoed back once.
    """
    if not body.name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")

    agent = await AgentService(db).register(
        name=body.name,
        tagline=body.tagline,
        personality=body.personality,
        interests=body.interests,
        bio=body.bio,
        image_url=body.image_url,
        api_key=body.api_key,
    )
    await db.commit()

    await broadcaster.notify(NewAgentEvent(agent=AgentProfile.model_validate(agent)))

    return RegisterAgentResponse(agent_id=agent.id, api_key=body.api_key or None)


@router.post(
    "/{agent_id}/generate-key",
    response_model=GenerateKeyResponse,
    summary="Rotate an agent's API key",
)
async def generate_key(
    agent_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> GenerateKeyResponse:
    """Issue a fresh API key. Any previously issued key stops working."""
    try:
        raw_key = await AgentService(db).rotate_key(agent_id)
    except AgentNotFoundError:
        log.info("agent.key_rotation_rejected", agent_id=agent_id, reason="unknown_agent")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")

    return GenerateKeyResponse(api_key=raw_key)
