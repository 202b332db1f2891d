"""Unit tests for the Redis guest session store."""

import json

import pytest

from helpdesk.core import redis as redis_module
from helpdesk.core.redis import get_ticket_session, store_ticket_session, ticket_session_key


@pytest.mark.asyncio
async def test_store_ticket_session(redis_client):
    await store_ticket_session("abc", "300400", "secret", ttl_seconds=600)

    key, ttl, raw = redis_client.setex.await_args.args
    assert key == "ticket_session:abc"
    assert ttl == 600
    payload = json.loads(raw)
    assert payload["ticket_number"] == "300400"
    assert payload["token"] == "secret"
    assert "created_at" in payload


@pytest.mark.asyncio
async def test_get_ticket_session(redis_client):
    redis_client.get.return_value = json.dumps({"ticket_number": "300400", "token": "secret"})

    session = await get_ticket_session("abc")

    redis_client.get.assert_awaited_once_with(ticket_session_key("abc"))
    assert session == {"ticket_number": "300400", "token": "secret"}


@pytest.mark.asyncio
async def test_expired_ticket_session(redis_client):
    redis_client.get.return_value = None

    assert await get_ticket_session("abc") is None


@pytest.mark.asyncio
async def test_requires_initialized_client(monkeypatch):
    monkeypatch.setattr(redis_module, "redis_client", None)

    with pytest.raises(RuntimeError):
        await get_ticket_session("abc")
