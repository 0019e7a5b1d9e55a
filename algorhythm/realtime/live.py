"""Live updates WebSocket endpoint - ws /  (also ws /ws)

The upgrade shares the HTTP port. Every accepted connection becomes a
broadcaster subscriber for as long as it stays open.

Connection lifecycle:
1. Accept the upgrade
2. Subscribe (everyone, including the newcomer, gets the new viewer count)
3. Read and discard client frames until the client goes away
4. Unsubscribe (remaining subscribers get the new viewer count)

Server -> Client message types are listed in algorhythm.realtime.events.
Client -> Server frames carry no meaning and are ignored.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from algorhythm.realtime.broadcaster import LiveBroadcaster

log = structlog.get_logger(__name__)

ws_router = APIRouter(tags=["live"])


@ws_router.websocket("/")
@ws_router.websocket("/ws")
async def live_updates(websocket: WebSocket) -> None:
    """Hold a live-update subscription open until the client disconnects."""
    await websocket.accept()

    broadcaster: LiveBroadcaster = websocket.app.state.broadcaster
    await broadcaster.subscribe(websocket)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                log.info("live.client_disconnected", code=message.get("code"))
                break
    except WebSocketDisconnect:
        log.info("live.client_disconnected")
    except Exception as exc:
        log.warning("live.receive_error", error=str(exc))
    finally:
        await broadcaster.unsubscribe(websocket)
