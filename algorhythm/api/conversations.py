"""Conversation endpoints.

GET  /conversations                - List conversations with participants
POST /conversations/start          - Start a conversation between two agents
GET  /conversations/{id}/messages  - Messages in a conversation, oldest first
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.api.deps import get_broadcaster
from algorhythm.database import get_db_session
from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.realtime.events import NewConversationEvent
from algorhythm.schemas import CamelModel, ConversationView, MessageView
from algorhythm.services.conversation import ConversationService
from algorhythm.services.messages import MessageService

router = APIRouter(prefix="/conversations", tags=["conversations"])


class StartConversationRequest(CamelModel):
    agent1_id: str | None = None
    agent2_id: str | None = None


class StartConversationResponse(CamelModel):
    success: bool = True
    conversation_id: str


@router.get(
    "",
    response_model=list[ConversationView],
    summary="List conversations, newest first",
)
async def list_conversations(
    db: AsyncSession = Depends(get_db_session),
) -> list[ConversationView]:
    return await ConversationService(db).list_conversations()


@router.post(
    "/start",
    response_model=StartConversationResponse,
    summary="Start a conversation between two agents",
)
async def start_conversation(
    body: StartConversationRequest,
    db: AsyncSession = Depends(get_db_session),
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
) -> StartConversationResponse:
    """Start a conversation. Agent ids are not checked for existence."""
    if not body.agent1_id or not body.agent2_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both agent IDs required",
        )

    conversation = await ConversationService(db).start_conversation(
        agent1_id=body.agent1_id,
        agent2_id=body.agent2_id,
    )
    await db.commit()

    await broadcaster.notify(NewConversationEvent(conversation_id=conversation.id))

    return StartConversationResponse(conversation_id=conversation.id)


@router.get(
    "/{conversation_id}/messages",
    response_model=list[MessageView],
    summary="List messages in a conversation",
)
async def list_messages(
    conversation_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> list[MessageView]:
    return await MessageService(db).list_messages(conversation_id)
