"""
E2E tests for the guest check-ticket flow.
"""

import pytest
from httpx import AsyncClient

from tests.utils.helpers import assert_error_response, comment_form

CHECK_URL = "/api/v1/ticket/check"


@pytest.fixture
def session_store(redis_client):
    """Back the mocked Redis client with a dict so sessions round-trip."""
    store: dict[str, str] = {}

    async def setex(key, ttl, value):
        store[key] = value

    async def get(key):
        return store.get(key)

    redis_client.setex.side_effect = setex
    redis_client.get.side_effect = get
    return store


@pytest.mark.asyncio
async def test_check_ticket(test_client: AsyncClient, guest_system, guest_ticket, redis_client):
    """Test a guest can open a session with the ticket's email."""
    response = await test_client.post(
        CHECK_URL, json={"ticketNumber": "300400", "email": "Guest@Example.com"}
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["ticketNumber"] == "300400"
    assert data["token"]
    assert response.cookies.get("ticket_session")

    key, ttl, _ = redis_client.setex.await_args.args
    assert key == f"ticket_session:{response.cookies.get('ticket_session')}"
    assert ttl == 60 * 60


@pytest.mark.asyncio
async def test_check_ticket_wrong_email(test_client: AsyncClient, guest_system, guest_ticket):
    """Test a wrong email does not reveal the ticket."""
    response = await test_client.post(
        CHECK_URL, json={"ticketNumber": "300400", "email": "intruder@example.com"}
    )

    assert_error_response(response, "INVALID_TICKET")


@pytest.mark.asyncio
async def test_check_ticket_unknown_number(test_client: AsyncClient, guest_system, guest_ticket):
    response = await test_client.post(
        CHECK_URL, json={"ticketNumber": "000000", "email": "guest@example.com"}
    )

    assert_error_response(response, "INVALID_TICKET")


@pytest.mark.asyncio
async def test_check_ticket_with_user_system(test_client: AsyncClient, user_system, guest_ticket):
    """Test guest sessions are unavailable while the user system is enabled."""
    response = await test_client.post(
        CHECK_URL, json={"ticketNumber": "300400", "email": "guest@example.com"}
    )

    assert_error_response(response, "NO_PERMISSION")


@pytest.mark.asyncio
async def test_check_then_comment(
    test_client: AsyncClient, guest_system, guest_ticket, session_store, notification_delay
):
    """Test the token from check-ticket authorizes a guest comment."""
    check = await test_client.post(
        CHECK_URL, json={"ticketNumber": "300400", "email": "guest@example.com"}
    )
    token = check.json()["data"]["token"]
    session_id = check.cookies.get("ticket_session")

    response = await test_client.post(
        "/api/v1/ticket/comment",
        data=comment_form("300400", csrf_token=token),
        cookies={"ticket_session": session_id},
    )

    assert response.status_code == 200
    assert len(session_store) == 1


@pytest.mark.asyncio
async def test_check_ticket_malformed_body(test_client: AsyncClient, guest_system):
    response = await test_client.post(CHECK_URL, json={"ticketNumber": "300400"})

    assert_error_response(response, "INVALID_REQUEST", status_code=422)
    assert response.json()["error"]["details"]["fields"] == ["email"]
