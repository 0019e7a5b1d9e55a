"""Tests for agent endpoints.

GET  /api/agents
POST /api/agents/register
POST /api/agents/{id}/generate-key
"""

from __future__ import annotations

import hashlib

import pytest
from sqlalchemy import select

from algorhythm.models.agent import Agent


class TestRegisterAgent:

    @pytest.mark.asyncio
    async def test_register_returns_id_and_null_key(self, client) -> None:
        resp = await client.post("/api/agents/register", json={"name": "Ada"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert len(body["agentId"]) == 32
        assert body["apiKey"] is None

    @pytest.mark.asyncio
    async def test_register_echoes_supplied_key_and_stores_hash(self, client, db_session) -> None:
        resp = await client.post(
            "/api/agents/register",
            json={"name": "Grace", "bio": "Compiler pioneer", "apiKey": "s3cret"},
        )
        body = resp.json()

        assert body["apiKey"] == "s3cret"
        stored = (
            await db_session.execute(select(Agent).where(Agent.id == body["agentId"]))
        ).scalar_one()
        assert stored.api_key_hash == hashlib.sha256(b"s3cret").hexdigest()
        assert stored.api_key_hash != "s3cret"

    @pytest.mark.asyncio
    async def test_register_without_name_is_rejected(self, client, broadcaster, make_socket) -> None:
        watcher = make_socket()
        await broadcaster.subscribe(watcher)

        resp = await client.post("/api/agents/register", json={"bio": "nameless"})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Name is required"}
        assert watcher.of_type("new_agent") == []
        assert (await client.get("/api/agents")).json() == []

    @pytest.mark.asyncio
    async def test_register_with_empty_name_is_rejected(self, client) -> None:
        resp = await client.post("/api/agents/register", json={"name": ""})
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_malformed_body_is_a_client_error(self, client) -> None:
        resp = await client.post(
            "/api/agents/register",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert "error" in resp.json()

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, register_agent) -> None:
        ids = {(await register_agent(name=f"agent-{i}"))["agentId"] for i in range(20)}
        assert len(ids) == 20

    @pytest.mark.asyncio
    async def test_register_broadcasts_one_new_agent_event(
        self, client, broadcaster, make_socket
    ) -> None:
        watcher = make_socket()
        departed = make_socket()
        await broadcaster.subscribe(watcher)
        await broadcaster.subscribe(departed)
        await broadcaster.unsubscribe(departed)
        departed.sent.clear()

        resp = await client.post(
            "/api/agents/register",
            json={"name": "Linus", "interests": ["kernels"], "imageUrl": "http://img/l.png"},
        )

        events = watcher.of_type("new_agent")
        assert len(events) == 1
        agent = events[0]["agent"]
        assert agent["id"] == resp.json()["agentId"]
        assert agent["name"] == "Linus"
        assert agent["interests"] == ["kernels"]
        assert agent["imageUrl"] == "http://img/l.png"
        assert agent["status"] == "online"
        assert "apiKey" not in agent
        assert departed.sent == []


class TestListAgents:

    @pytest.mark.asyncio
    async def test_list_decodes_interests_and_hides_key(self, client, register_agent) -> None:
        await register_agent(
            name="Ada",
            tagline="First programmer",
            personality="analytical",
            interests=["engines", "poetry"],
            bio="Countess",
            imageUrl="http://img/ada.png",
            apiKey="hidden",
        )

        agents = (await client.get("/api/agents")).json()

        assert agents == [
            {
                "id": agents[0]["id"],
                "name": "Ada",
                "tagline": "First programmer",
                "personality": "analytical",
                "interests": ["engines", "poetry"],
                "bio": "Countess",
                "imageUrl": "http://img/ada.png",
                "status": "online",
            }
        ]

    @pytest.mark.asyncio
    async def test_optional_fields_default_to_empty(self, client, register_agent) -> None:
        await register_agent(name="Minimal")

        agent = (await client.get("/api/agents")).json()[0]

        assert agent["tagline"] == ""
        assert agent["interests"] == []
        assert agent["bio"] == ""
        assert agent["imageUrl"] == ""


class TestGenerateKey:

    @pytest.mark.asyncio
    async def test_generate_key_returns_fresh_plaintext(self, client, register_agent) -> None:
        agent_id = (await register_agent())["agentId"]

        first = (await client.post(f"/api/agents/{agent_id}/generate-key")).json()
        second = (await client.post(f"/api/agents/{agent_id}/generate-key")).json()

        assert first["success"] is True
        assert len(first["apiKey"]) == 64
        assert first["apiKey"] != second["apiKey"]

    @pytest.mark.asyncio
    async def test_generate_key_for_unknown_agent(self, client) -> None:
        resp = await client.post("/api/agents/does-not-exist/generate-key")

        assert resp.status_code == 404
        assert resp.json() == {"error": "Agent not found"}
