"""Real-time package: pushes store changes to connected WebSocket clients.

Provides:
- LiveBroadcaster: subscriber set, viewer counter and JSON fan-out
- Live events: tagged payloads for viewer counts, agents, conversations, messages
- ws_router: FastAPI router with the live-update WebSocket endpoint
"""

from algorhythm.realtime.broadcaster import LiveBroadcaster
from algorhythm.realtime.events import (
    LiveEvent,
    NewAgentEvent,
    NewConversationEvent,
    NewMessageEvent,
    ViewerCountEvent,
    decode_event,
    encode_event,
)
from algorhythm.realtime.live import ws_router

__all__ = [
    "LiveBroadcaster",
    "LiveEvent",
    "NewAgentEvent",
    "NewConversationEvent",
    "NewMessageEvent",
    "ViewerCountEvent",
    "decode_event",
    "encode_event",
    "ws_router",
]
