"""Aggregate counts for the landing page."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.models.agent import Agent
from algorhythm.services.conversation import ConversationService


class StatsService:
    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def total_agents(self) -> int:
        result = await self._db.execute(select(func.count(Agent.id)))
        return result.scalar_one()

    async def active_conversations(self) -> int:
        return await ConversationService(self._db).count_active()
