"""
Shared test fixtures for pytest.

Provides:
- fake_settings: Test configuration pointing at a throwaway SQLite file
- test_app: FastAPI app with tables created (no lifespan run)
- client: Async HTTP client for the app
- broadcaster: The app's LiveBroadcaster
- db_session: Real async session for service-level tests
- make_socket: Factory for in-memory WebSocket doubles
- register_agent: Helper that registers an agent over HTTP
"""

import json
from pathlib import Path
from typing import Any, AsyncGenerator, Awaitable, Callable

import httpx
import pytest
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from starlette.websockets import WebSocketState

from algorhythm.config import Environment, Settings, get_settings
from algorhythm.database import close_db, create_tables, get_engine, init_db
from algorhythm.main import create_app
from algorhythm.realtime.broadcaster import LiveBroadcaster


# ------------------------------------------------------------------ #
# Session-scoped: clear settings cache between test sessions
# ------------------------------------------------------------------ #

@pytest.fixture(autouse=True, scope="session")
def _clear_settings_cache():
    """Clear the lru_cache on get_settings so test overrides take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ------------------------------------------------------------------ #
# Settings & App Fixtures
# ------------------------------------------------------------------ #

@pytest.fixture
def fake_settings(tmp_path: Path) -> Settings:
    """Test environment settings backed by a per-test SQLite file."""
    return Settings(
        environment=Environment.TEST,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'algorhythm-test.db'}",
        db_echo_sql=False,
        viewer_baseline=42,
        static_dir=str(tmp_path / "no-static-bundle"),
        debug=True,
    )


@pytest.fixture
async def test_app(fake_settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Create the app with a real, empty database.

    httpx's ASGITransport does not run the lifespan, so the engine and
    tables are set up here instead.
    """
    init_db(fake_settings, for_test=True)
    await create_tables()

    yield create_app(fake_settings)

    await close_db()


@pytest.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Async HTTP client using ASGITransport (no real server)."""
    transport = httpx.ASGITransport(app=test_app)  # type: ignore[arg-type]
    async with httpx.AsyncClient(
        transport=transport,
        base_url="http://testserver",
    ) as ac:
        yield ac


@pytest.fixture
def broadcaster(test_app: FastAPI) -> LiveBroadcaster:
    return test_app.state.broadcaster


# ------------------------------------------------------------------ #
# Database Fixtures
# ------------------------------------------------------------------ #

@pytest.fixture
async def db_session(test_app: FastAPI) -> AsyncGenerator[AsyncSession, None]:
    """Real async session on the test database, for service tests."""
    session_factory = async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session


# ------------------------------------------------------------------ #
# WebSocket doubles
# ------------------------------------------------------------------ #

class FakeSocket:
    """Stands in for a starlette WebSocket inside the broadcaster.

    Records every decoded frame it is sent. ``open=False`` models a client
    that already went away; ``fail=True`` models a send that blows up.
    """

    def __init__(self, *, open: bool = True, fail: bool = False) -> None:
        self.client_state = WebSocketState.CONNECTED if open else WebSocketState.DISCONNECTED
        self.application_state = WebSocketState.CONNECTED
        self.fail = fail
        self.sent: list[dict[str, Any]] = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection reset by peer")
        self.sent.append(json.loads(data))

    def of_type(self, event_type: str) -> list[dict[str, Any]]:
        return [frame for frame in self.sent if frame["type"] == event_type]


@pytest.fixture
def make_socket() -> Callable[..., FakeSocket]:
    return FakeSocket


# ------------------------------------------------------------------ #
# HTTP helpers
# ------------------------------------------------------------------ #

@pytest.fixture
def register_agent(
    client: httpx.AsyncClient,
) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Register an agent and return the JSON body of the response."""

    async def _register(name: str = "Ada", **fields: Any) -> dict[str, Any]:
        resp = await client.post("/api/agents/register", json={"name": name, **fields})
        assert resp.status_code == 200, resp.text
        return resp.json()

    return _register


@pytest.fixture
def start_conversation(
    client: httpx.AsyncClient,
) -> Callable[[str, str], Awaitable[str]]:
    """Start a conversation and return its id."""

    async def _start(agent1_id: str, agent2_id: str) -> str:
        resp = await client.post(
            "/api/conversations/start",
            json={"agent1Id": agent1_id, "agent2Id": agent2_id},
        )
        assert resp.status_code == 200, resp.text
        return resp.json()["conversationId"]

    return _start
