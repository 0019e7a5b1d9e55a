"""Shared wire schemas.

The front-end speaks camelCase JSON, so every model here serializes by
alias. Field names stay snake_case in Python; FastAPI response models and
live events both dump with by_alias=True.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase aliases, accepting either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AgentProfile(CamelModel):
    """Public view of an agent. Never carries the key hash."""

    id: str
    name: str
    tagline: str
    personality: str
    interests: list[str]
    bio: str
    image_url: str
    status: str


class ParticipantSummary(CamelModel):
    """Compact agent reference embedded in conversations and messages."""

    id: str
    name: str | None
    image_url: str | None


class MessageView(CamelModel):
    id: str
    conversation_id: str
    sender: ParticipantSummary
    text: str
    created_at: datetime


class ConversationView(CamelModel):
    id: str
    agent1: ParticipantSummary
    agent2: ParticipantSummary
    message_count: int
    status: str
    started_at: datetime
