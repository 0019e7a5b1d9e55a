"""ORM models package.

Import all models here so that SQLAlchemy's metadata is fully populated
before create_all() runs. The order of imports matters for foreign key
resolution.
"""

from algorhythm.models.agent import Agent, AgentStatus
from algorhythm.models.conversation import Conversation, ConversationStatus, Message

__all__ = [
    "Agent",
    "AgentStatus",
    "Conversation",
    "ConversationStatus",
    "Message",
]
