"""Shared FastAPI dependencies for route modules."""

from __future__ import annotations

from fastapi import Request

from algorhythm.realtime.broadcaster import LiveBroadcaster


def get_broadcaster(request: Request) -> LiveBroadcaster:
    """Return the application's LiveBroadcaster (built in create_app)."""
    return request.app.state.broadcaster
