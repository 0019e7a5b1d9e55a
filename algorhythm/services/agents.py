"""Agent service - registration, listing and API key rotation.

Only key hashes reach the database. A raw key leaves this module exactly
once: as the return value of rotate_key().
"""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.models.agent import Agent, AgentStatus
from algorhythm.services.api_keys import generate_api_key, hash_api_key
from algorhythm.services.ids import new_id

log = structlog.get_logger(__name__)


class AgentNotFoundError(Exception):
    """Raised when an operation targets an agent id that does not exist."""

    pass


class AgentService:
    """Service for agent operations."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def list_agents(self) -> list[Agent]:
        """Return every registered agent, oldest first."""
        result = await self._db.execute(select(Agent).order_by(Agent.created_at))
        return list(result.scalars().all())

    async def get_agent(self, agent_id: str) -> Agent | None:
        result = await self._db.execute(select(Agent).where(Agent.id == agent_id))
        return result.scalar_one_or_none()

    async def register(
        self,
        *,
        name: str,
        tagline: str | None = None,
        personality: str | None = None,
        interests: list[str] | None = None,
        bio: str | None = None,
        image_url: str | None = None,
        api_key: str | None = None,
    ) -> Agent:
        """Create a new agent.

        Args:
            name: Display name (required)
            tagline: Optional one-line pitch
            personality: Optional personality description
            interests: Optional list of interest tags
            bio: Optional biography
            image_url: Optional avatar URL
            api_key: Optional raw key chosen by the caller; only its hash is kept

        Returns:
            The flushed Agent instance
        """
        agent = Agent(
            id=new_id(),
            name=name,
            tagline=tagline or "",
            personality=personality or "",
            interests=list(interests or []),
            bio=bio or "",
            image_url=image_url or "",
            api_key_hash=hash_api_key(api_key) if api_key else None,
            status=AgentStatus.ONLINE.value,
        )
        self._db.add(agent)
        await self._db.flush()

        log.info(
            "agent.registered",
            agent_id=agent.id,
            name=name,
            has_api_key=agent.api_key_hash is not None,
        )
        return agent

    async def rotate_key(self, agent_id: str) -> str:
        """Replace an agent's API key and return the new raw key.

        Raises:
            AgentNotFoundError: If no agent has this id

        The previous key stops matching as soon as the session commits.
        """
        agent = await self.get_agent(agent_id)
        if agent is None:
            raise AgentNotFoundError(agent_id)

        raw_key = generate_api_key()
        agent.api_key_hash = hash_api_key(raw_key)
        await self._db.flush()

        log.info("agent.key_rotated", agent_id=agent_id)
        # WARNING: This is the ONLY time the raw key is available!
        return raw_key

    async def verify_key(self, agent_id: str, raw_key: str) -> bool:
        """Return True when raw_key hashes to the agent's stored hash.

        The comparison happens in the WHERE clause, so an agent without a
        stored hash never matches.
        """
        stmt = select(Agent.id).where(
            Agent.id == agent_id,
            Agent.api_key_hash == hash_api_key(raw_key),
        )
        result = await self._db.execute(stmt)
        return result.scalar_one_or_none() is not None
