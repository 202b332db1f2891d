"""Redis-backed guest ticket sessions.

A session binds one browser (the opaque id in the ``ticket_session`` cookie)
to exactly one ticket number and a csrf token. Sessions are written once by
the check-ticket flow and expire on their own; they are never updated.
"""

import json
from datetime import UTC, datetime
from typing import Any

from redis.asyncio import Redis

# Set by the application lifespan
redis_client: Redis | None = None

TICKET_SESSION_PREFIX = "ticket_session"


def ticket_session_key(session_id: str) -> str:
    return f"{TICKET_SESSION_PREFIX}:{session_id}"


def _client() -> Redis:
    if redis_client is None:
        raise RuntimeError("Redis client is not initialized")
    return redis_client


async def store_ticket_session(
    session_id: str, ticket_number: str, token: str, ttl_seconds: int
) -> None:
    payload = {
        "ticket_number": ticket_number,
        "token": token,
        "created_at": datetime.now(UTC).isoformat(),
    }
    await _client().setex(ticket_session_key(session_id), ttl_seconds, json.dumps(payload))


async def get_ticket_session(session_id: str) -> dict[str, Any] | None:
    """Return ``{ticket_number, token, created_at}`` or None once expired."""
    raw = await _client().get(ticket_session_key(session_id))
    if not raw:
        return None
    session: dict[str, Any] = json.loads(raw)
    return session
