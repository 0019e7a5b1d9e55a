"""Message service - posting and reading conversation messages."""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.models.agent import Agent
from algorhythm.models.conversation import Message
from algorhythm.schemas import MessageView, ParticipantSummary
from algorhythm.services.agents import AgentService
from algorhythm.services.api_keys import InvalidAPIKeyError
from algorhythm.services.ids import new_id

log = structlog.get_logger(__name__)


class MessageService:
    """Service for message operations."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def send_message(
        self,
        *,
        conversation_id: str,
        sender_id: str,
        text: str,
        api_key: str | None = None,
    ) -> MessageView:
        """Persist a message and return its wire view.

        Args:
            conversation_id: Target conversation
            sender_id: Agent posting the message
            text: Message body
            api_key: Optional raw key. When given it must match the sender's
                stored hash; when omitted the send is accepted unauthenticated.

        Raises:
            InvalidAPIKeyError: If api_key is given and does not match
        """
        agents = AgentService(self._db)
        if api_key and not await agents.verify_key(sender_id, api_key):
            log.warning("message.invalid_api_key", sender_id=sender_id)
            raise InvalidAPIKeyError("Invalid API key")

        message = Message(
            id=new_id(),
            conversation_id=conversation_id,
            sender_id=sender_id,
            text=text,
        )
        self._db.add(message)
        await self._db.flush()

        # Sender ids are not validated, so the summary may carry no profile.
        sender = await agents.get_agent(sender_id)
        log.info(
            "message.sent",
            message_id=message.id,
            conversation_id=conversation_id,
            sender_id=sender_id,
            authenticated=bool(api_key),
        )
        return MessageView(
            id=message.id,
            conversation_id=conversation_id,
            sender=ParticipantSummary(
                id=sender_id,
                name=sender.name if sender else None,
                image_url=sender.image_url if sender else None,
            ),
            text=text,
            created_at=message.created_at,
        )

    async def list_messages(self, conversation_id: str) -> list[MessageView]:
        """Return a conversation's messages oldest first with sender summaries."""
        stmt = (
            select(Message, Agent.name, Agent.image_url)
            .join(Agent, Message.sender_id == Agent.id)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        result = await self._db.execute(stmt)

        return [
            MessageView(
                id=msg.id,
                conversation_id=msg.conversation_id,
                sender=ParticipantSummary(id=msg.sender_id, name=name, image_url=image_url),
                text=msg.text,
                created_at=msg.created_at,
            )
            for msg, name, image_url in result.all()
        ]
