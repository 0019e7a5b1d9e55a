"""LiveBroadcaster - fan-out of live updates to connected WebSockets.

Design:
- One instance per application, built in create_app() and stored on
  app.state. Handlers receive it through the get_broadcaster() dependency
  instead of reaching for a module global.
- Mutated only from the event loop thread, so no locking is needed.
- Delivery is at-most-once: no acknowledgement, no retry, no replay. A
  subscriber that joins late never sees earlier events, except the viewer
  count, which is pushed fresh on every membership change.

Usage:
    broadcaster = LiveBroadcaster(viewer_baseline=42)

    # When a client connects
    await broadcaster.subscribe(websocket)

    # After a successful mutation
    await broadcaster.notify(NewConversationEvent(conversation_id=cid))

    # When the client goes away (safe to call more than once)
    await broadcaster.unsubscribe(websocket)
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import structlog
from starlette.websockets import WebSocketState

from algorhythm.realtime.events import LiveEvent, ViewerCountEvent, encode_event

if TYPE_CHECKING:
    from starlette.websockets import WebSocket

log = structlog.get_logger(__name__)


class LiveBroadcaster:
    """Tracks live subscribers and a cosmetic viewer counter."""

    def __init__(self, *, viewer_baseline: int = 42) -> None:
        self._subscribers: set[Any] = set()
        self._viewer_count = viewer_baseline

    # ------------------------------------------------------------------ #
    # Membership
    # ------------------------------------------------------------------ #

    async def subscribe(self, websocket: WebSocket) -> None:
        """Register an accepted connection and push the new viewer count.

        The new subscriber receives the count too.
        """
        if websocket in self._subscribers:
            return
        self._subscribers.add(websocket)
        self._viewer_count += 1

        log.info(
            "live.subscribed",
            subscribers=len(self._subscribers),
            viewers=self._viewer_count,
        )
        await self.notify(ViewerCountEvent(count=self._viewer_count))

    async def unsubscribe(self, websocket: WebSocket) -> None:
        """Drop a connection and push the new viewer count to the rest.

        Safe to call even if websocket is not registered (no-op).
        """
        if websocket not in self._subscribers:
            return
        self._subscribers.discard(websocket)
        self._viewer_count -= 1

        log.info(
            "live.unsubscribed",
            subscribers=len(self._subscribers),
            viewers=self._viewer_count,
        )
        await self.notify(ViewerCountEvent(count=self._viewer_count))

    # ------------------------------------------------------------------ #
    # Fan-out
    # ------------------------------------------------------------------ #

    async def notify(self, event: LiveEvent) -> None:
        """Send an event to every open subscriber.

        The frame is encoded once. Subscribers that are not open are skipped
        and left for their own unsubscribe() call to reap. Sends run
        concurrently and a failure on one socket never reaches the caller
        or the other sockets.
        """
        targets = [ws for ws in list(self._subscribers) if _is_open(ws)]
        if not targets:
            return

        frame = encode_event(event)
        await asyncio.gather(
            *(_safe_send_text(ws, frame, event.type) for ws in targets),
            return_exceptions=True,
        )

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def viewer_count(self) -> int:
        return self._viewer_count

    def subscriber_count(self) -> int:
        """Return the number of currently registered subscribers."""
        return len(self._subscribers)


def _is_open(websocket: WebSocket) -> bool:
    return (
        websocket.client_state == WebSocketState.CONNECTED
        and websocket.application_state == WebSocketState.CONNECTED
    )


async def _safe_send_text(websocket: WebSocket, frame: str, event_type: str) -> None:
    """Send a text frame, logging but not re-raising on failure."""
    try:
        await websocket.send_text(frame)
    except Exception as exc:
        log.warning("live.send_failed", event_type=event_type, error=str(exc))
