from pathlib import Path

from dotenv import load_dotenv

env_file = Path(__file__).parent.parent / ".env.test"
load_dotenv(env_file)

from unittest.mock import AsyncMock, patch  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from helpdesk.core import redis as redis_module  # noqa: E402
from helpdesk.core.config import settings  # noqa: E402
from helpdesk.core.storage import LocalStorage  # noqa: E402
from helpdesk.db import base  # noqa: E402,F401
from helpdesk.db.session import Base, get_db  # noqa: E402
from helpdesk.main import app  # noqa: E402
from helpdesk.tickets.tasks import send_ticket_responded_notification  # noqa: E402
from tests.utils.factories import (  # noqa: E402
    create_department_factory,
    create_ticket_factory,
    create_user_factory,
)


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine):
    session = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.get.return_value = None
    previous = redis_module.redis_client
    redis_module.redis_client = client
    yield client
    redis_module.redis_client = previous


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path))


@pytest.fixture
def notification_delay():
    with patch.object(send_ticket_responded_notification, "delay") as mock_delay:
        yield mock_delay


@pytest.fixture
def user_system(monkeypatch):
    monkeypatch.setattr(settings, "USER_SYSTEM_ENABLED", True)


@pytest.fixture
def guest_system(monkeypatch):
    monkeypatch.setattr(settings, "USER_SYSTEM_ENABLED", False)


@pytest.fixture
async def test_app(db_session, redis_client, storage):
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with patch("helpdesk.tickets.services.comment_workflow.get_storage", return_value=storage):
        yield app

    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app):
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


@pytest.fixture
def department(db_session):
    return create_department_factory(db_session, name="Billing")


@pytest.fixture
def customer(db_session):
    return create_user_factory(db_session, email="customer@example.com", role="user")


@pytest.fixture
def other_customer(db_session):
    return create_user_factory(db_session, email="other@example.com", role="user")


@pytest.fixture
def owner(db_session, department):
    return create_user_factory(
        db_session, email="owner@example.com", role="staff", level=1, departments=[department]
    )


@pytest.fixture
def staff(db_session, department):
    return create_user_factory(
        db_session, email="agent@example.com", role="staff", level=1, departments=[department]
    )


@pytest.fixture
def outsider_staff(db_session):
    return create_user_factory(db_session, email="outsider@example.com", role="staff", level=1)


@pytest.fixture
def admin_staff(db_session):
    return create_user_factory(db_session, email="admin@example.com", role="staff", level=3)


@pytest.fixture
def ticket(db_session, customer, owner, department):
    return create_ticket_factory(
        db_session,
        ticket_number="100200",
        author=customer,
        owner=owner,
        department=department,
        title="Printer on fire",
    )


@pytest.fixture
def guest_ticket(db_session, department):
    return create_ticket_factory(
        db_session,
        ticket_number="300400",
        guest_email="guest@example.com",
        guest_name="Grace Guest",
        department=department,
        title="Cannot log in",
    )

