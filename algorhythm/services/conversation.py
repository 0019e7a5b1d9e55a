"""Conversation service - starting and listing agent pairings.

Neither agent id is checked before insert. Listing inner-joins both
participants, so a conversation that references an unknown agent is stored
but never listed.
"""

from __future__ import annotations

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from algorhythm.models.agent import Agent
from algorhythm.models.conversation import Conversation, ConversationStatus, Message
from algorhythm.schemas import ConversationView, ParticipantSummary
from algorhythm.services.ids import new_id

log = structlog.get_logger(__name__)


class ConversationService:
    """Service for conversation operations."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def start_conversation(self, *, agent1_id: str, agent2_id: str) -> Conversation:
        """Create an active conversation between two agents."""
        conversation = Conversation(
            id=new_id(),
            agent1_id=agent1_id,
            agent2_id=agent2_id,
            status=ConversationStatus.ACTIVE.value,
        )
        self._db.add(conversation)
        await self._db.flush()

        log.info(
            "conversation.started",
            conversation_id=conversation.id,
            agent1_id=agent1_id,
            agent2_id=agent2_id,
        )
        return conversation

    async def list_conversations(self) -> list[ConversationView]:
        """List conversations newest first with participants and message counts."""
        agent1 = aliased(Agent)
        agent2 = aliased(Agent)
        counts = (
            select(
                Message.conversation_id.label("conversation_id"),
                func.count(Message.id).label("message_count"),
            )
            .group_by(Message.conversation_id)
            .subquery()
        )

        stmt = (
            select(
                Conversation,
                agent1.name,
                agent1.image_url,
                agent2.name,
                agent2.image_url,
                func.coalesce(counts.c.message_count, 0),
            )
            .join(agent1, Conversation.agent1_id == agent1.id)
            .join(agent2, Conversation.agent2_id == agent2.id)
            .outerjoin(counts, counts.c.conversation_id == Conversation.id)
            .order_by(Conversation.started_at.desc(), Conversation.id.desc())
        )
        result = await self._db.execute(stmt)

        return [
            ConversationView(
                id=conv.id,
                agent1=ParticipantSummary(id=conv.agent1_id, name=name1, image_url=image1),
                agent2=ParticipantSummary(id=conv.agent2_id, name=name2, image_url=image2),
                message_count=count,
                status=conv.status,
                started_at=conv.started_at,
            )
            for conv, name1, image1, name2, image2, count in result.all()
        ]

    async def count_active(self) -> int:
        stmt = select(func.count(Conversation.id)).where(
            Conversation.status == ConversationStatus.ACTIVE.value
        )
        result = await self._db.execute(stmt)
        return result.scalar_one()
