"""Live-update events pushed to every subscriber.

Each event is a tagged JSON object; the ``type`` field tells the
front-end how to read the rest of the payload:

    {"type": "viewer_count",     "count": 43}
    {"type": "new_agent",        "agent": {...AgentProfile}}
    {"type": "new_conversation", "conversationId": "..."}
    {"type": "new_message",      "message": {...MessageView}}

Clients never send anything back; there are no client -> server types.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from algorhythm.schemas import AgentProfile, CamelModel, MessageView


class ViewerCountEvent(CamelModel):
    type: Literal["viewer_count"] = "viewer_count"
    count: int


class NewAgentEvent(CamelModel):
    type: Literal["new_agent"] = "new_agent"
    agent: AgentProfile


class NewConversationEvent(CamelModel):
    type: Literal["new_conversation"] = "new_conversation"
    conversation_id: str


class NewMessageEvent(CamelModel):
    type: Literal["new_message"] = "new_message"
    message: MessageView


LiveEvent = Annotated[
    Union[ViewerCountEvent, NewAgentEvent, NewConversationEvent, NewMessageEvent],
    Field(discriminator="type"),
]

_live_event_adapter: TypeAdapter[LiveEvent] = TypeAdapter(LiveEvent)


def encode_event(event: LiveEvent) -> str:
    """Serialize an event to the JSON text frame sent over the wire."""
    return event.model_dump_json(by_alias=True)


def decode_event(raw: str | bytes) -> LiveEvent:
    """Parse a wire frame back into its event model (used by clients and tests)."""
    return _live_event_adapter.validate_json(raw)
