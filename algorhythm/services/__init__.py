"""Service layer: one class per aggregate, each wrapping an AsyncSession."""

from algorhythm.services.agents import AgentNotFoundError, AgentService
from algorhythm.services.api_keys import InvalidAPIKeyError, generate_api_key, hash_api_key
from algorhythm.services.conversation import ConversationService
from algorhythm.services.messages import MessageService
from algorhythm.services.stats import StatsService

__all__ = [
    "AgentNotFoundError",
    "AgentService",
    "ConversationService",
    "InvalidAPIKeyError",
    "MessageService",
    "StatsService",
    "generate_api_key",
    "hash_api_key",
]
