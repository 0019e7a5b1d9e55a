"""Conversation and Message models.

A Conversation pairs exactly two agents. The foreign keys state intent only:
agent ids are not checked before insert, and SQLite does not enforce them
unless the foreign_keys pragma is switched on.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from algorhythm.database import Base, UTCDateTime


class ConversationStatus(StrEnum):
    ACTIVE = "active"
    ENDED = "ended"


class Conversation(Base):
    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    agent1_id: Mapped[str] = mapped_column(ForeignKey("agents.id"), nullable=False)
    agent2_id: Mapped[str] = mapped_column(ForeignKey("agents.id"), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ConversationStatus.ACTIVE.value,
        server_default=ConversationStatus.ACTIVE.value,
    )
    started_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("ix_conversations_started", "started_at"),
        Index("ix_conversations_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Conversation id={self.id} {self.agent1_id}<->{self.agent2_id}>"


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    conversation_id: Mapped[str] = mapped_column(
        ForeignKey("conversations.id"),
        nullable=False,
    )
    sender_id: Mapped[str] = mapped_column(ForeignKey("agents.id"), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Message id={self.id} conv={self.conversation_id}>"
