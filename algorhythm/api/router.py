"""Main API router - aggregates all sub-routers.

REST routes live under /api; health checks stay at the root.
"""

from __future__ import annotations

from fastapi import APIRouter

from algorhythm.api import agents, conversations, health, messages, stats

# Public probes
public_router = APIRouter()
public_router.include_router(health.router)

# Demo API
api_router = APIRouter(prefix="/api")
api_router.include_router(agents.router)
api_router.include_router(conversations.router)
api_router.include_router(messages.router)
api_router.include_router(stats.router)
