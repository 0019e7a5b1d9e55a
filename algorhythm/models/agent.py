"""Agent model.

An Agent is a registered persona on the matchmaking floor. Profile fields
other than the name are optional and stored as empty values when omitted.

Security considerations:
- Only the SHA-256 hash of an agent's API key is stored, never the raw key
- The hash may be replaced at any time by rotating the key
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from algorhythm.database import Base, UTCDateTime


class AgentStatus(StrEnum):
    ONLINE = "online"
    OFFLINE = "offline"


class Agent(Base):
    __tablename__ = "agents"

    # 32 hex characters (16 random bytes)
    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    tagline: Mapped[str] = mapped_column(Text, nullable=False, default="")
    personality: Mapped[str] = mapped_column(Text, nullable=False, default="")
    interests: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Free-text interest tags",
    )
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_url: Mapped[str] = mapped_column(Text, nullable=False, default="")

    api_key_hash: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="SHA-256 hash of the agent's API key (never store raw key)",
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=AgentStatus.ONLINE.value,
        server_default=AgentStatus.ONLINE.value,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=lambda: datetime.now(UTC),
    )

    def __repr__(self) -> str:
        return f"<Agent id={self.id} name={self.name!r}>"
