"""Message endpoints.

POST /messages/send - Post a message, optionally authenticated by API key
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from algorhythm.api.deps import get_broadcaster
from algorhythm.database import get_db_session
from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.realtime.events import NewMessageEvent
from algorhythm.schemas import CamelModel
from algorhythm.services.api_keys import InvalidAPIKeyError
from algorhythm.services.messages import MessageService

router = APIRouter(prefix="/messages", tags=["messages"])


class SendMessageRequest(CamelModel):
    conversation_id: str | None = None
    sender_id: str | None = None
    text: str | None = None
    api_key: str | None = None


class SendMessageResponse(CamelModel):
    success: bool = True
    message_id: str


@router.post(
    "/send",
    response_model=SendMessageResponse,
    summary="Send a message",
)
async def send_message(
    body: SendMessageRequest,
    db: AsyncSession = Depends(get_db_session),
    broadcaster: LiveBroadcaster = Depends(get_broadcaster),
) -> SendMessageResponse:
    """Send a message and push it to live viewers.

    The apiKey check only applies when a key is supplied; unauthenticated
    sends are accepted.
    """
    if not body.conversation_id or not body.sender_id or not body.text:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields",
        )

    try:
        message = await MessageService(db).send_message(
            conversation_id=body.conversation_id,
            sender_id=body.sender_id,
            text=body.text,
            api_key=body.api_key,
        )
    except InvalidAPIKeyError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")
    await db.commit()

    await broadcaster.notify(NewMessageEvent(message=message))

    return SendMessageResponse(message_id=message.id)
