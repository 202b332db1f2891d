"""Tests for CommentRecorder: authorship, unread flags, ordering and conflicts."""

from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm.exc import StaleDataError

from helpdesk.auth.models.user import User
from helpdesk.core.exceptions import ConflictError
from helpdesk.db.session import Base
from helpdesk.tickets.actors import (
    ActorContext,
    Anonymous,
    GuestSession,
    RegisteredUser,
    SessionContext,
    StaffAgent,
    StaffAuthor,
    UserAuthor,
)
from helpdesk.tickets.models.event import TicketEventType
from helpdesk.tickets.models.ticket import Ticket
from helpdesk.tickets.services.comment_recorder import CommentRecorder
from tests.utils.factories import (
    create_department_factory,
    create_ticket_factory,
    create_user_factory,
)

CONTENT = "Thanks, we are looking into this issue now."


def staff_context(user, *, author=False, owner=False) -> ActorContext:
    return ActorContext(StaffAgent(user), is_author=author, is_owner=owner)


class TestAuthorship:
    def test_staff_comment(self, db_session, ticket, staff):
        event = CommentRecorder(db_session).record(ticket, staff_context(staff), CONTENT)

        assert event.type == TicketEventType.COMMENT.value
        assert event.author == StaffAuthor(staff.id)
        assert event.author_user_id is None

    def test_user_comment(self, db_session, ticket, customer):
        context = ActorContext(RegisteredUser(customer), is_author=True, is_owner=False)
        event = CommentRecorder(db_session).record(ticket, context, CONTENT)

        assert event.author == UserAuthor(customer.id)
        assert event.author_staff_id is None

    def test_guest_comment_is_anonymous(self, db_session, guest_ticket):
        guest = GuestSession(SessionContext(ticket_number="300400", token="t"))
        context = ActorContext(guest, is_author=True, is_owner=False)
        event = CommentRecorder(db_session).record(guest_ticket, context, CONTENT)

        assert event.author == Anonymous()
        assert event.author_staff_id is None
        assert event.author_user_id is None

    def test_file_and_content_stored(self, db_session, ticket, staff):
        event = CommentRecorder(db_session).record(
            ticket, staff_context(staff), CONTENT, file_path="tickets/100200/a.txt"
        )

        assert event.content == CONTENT
        assert event.file == "tickets/100200/a.txt"
        assert event.date is not None


class TestPrivateFlag:
    def test_staff_may_comment_privately(self, db_session, ticket, staff):
        event = CommentRecorder(db_session).record(
            ticket, staff_context(staff), CONTENT, private=True
        )
        assert event.private is True

    def test_private_ignored_for_users(self, db_session, ticket, customer):
        context = ActorContext(RegisteredUser(customer), is_author=True, is_owner=False)
        event = CommentRecorder(db_session).record(ticket, context, CONTENT, private=True)
        assert event.private is False


class TestUnreadFlags:
    def test_staff_non_author_non_owner(self, db_session, ticket, staff):
        CommentRecorder(db_session).record(ticket, staff_context(staff), CONTENT)

        assert ticket.unread is True
        assert ticket.unread_staff is True

    def test_owner_comment(self, db_session, ticket, owner):
        CommentRecorder(db_session).record(ticket, staff_context(owner, owner=True), CONTENT)

        assert ticket.unread is True
        assert ticket.unread_staff is False

    def test_staff_author_comment(self, db_session, staff, department):
        staff_ticket = create_ticket_factory(db_session, author=staff, department=department)

        CommentRecorder(db_session).record(
            staff_ticket, staff_context(staff, author=True), CONTENT
        )

        assert staff_ticket.unread is False
        assert staff_ticket.unread_staff is True

    def test_staff_comment_clears_stale_unread(self, db_session, staff, department):
        staff_ticket = create_ticket_factory(db_session, author=staff, department=department)
        staff_ticket.unread = True
        db_session.commit()

        CommentRecorder(db_session).record(
            staff_ticket, staff_context(staff, author=True), CONTENT
        )

        assert staff_ticket.unread is False

    def test_user_comment_leaves_author_flag(self, db_session, ticket, customer):
        ticket.unread = True
        db_session.commit()
        context = ActorContext(RegisteredUser(customer), is_author=True, is_owner=False)

        CommentRecorder(db_session).record(ticket, context, CONTENT)

        assert ticket.unread is True
        assert ticket.unread_staff is True

    def test_guest_comment_leaves_both_flags(self, db_session, guest_ticket):
        guest_ticket.unread = True
        guest_ticket.unread_staff = False
        db_session.commit()
        guest = GuestSession(SessionContext(ticket_number="300400", token="t"))
        context = ActorContext(guest, is_author=True, is_owner=False)

        CommentRecorder(db_session).record(guest_ticket, context, CONTENT)

        assert guest_ticket.unread is True
        assert guest_ticket.unread_staff is False


class TestOrdering:
    def test_sequential_comments_keep_submission_order(self, db_session, ticket, customer, owner):
        recorder = CommentRecorder(db_session)
        user_context = ActorContext(RegisteredUser(customer), is_author=True, is_owner=False)

        first = recorder.record(ticket, user_context, "first comment, long enough text")
        owner_context = staff_context(owner, owner=True)
        second = recorder.record(ticket, owner_context, "second, also long enough")

        assert (first.position, second.position) == (0, 1)
        db_session.expire_all()
        reloaded = db_session.query(Ticket).filter(Ticket.id == ticket.id).one()
        assert [event.content for event in reloaded.events] == [
            "first comment, long enough text",
            "second, also long enough",
        ]
        assert reloaded.event_count == 2
        # the later staff comment decides the flags
        assert reloaded.unread is True
        assert reloaded.unread_staff is False


class TestConflicts:
    def test_retries_after_stale_write(self, db_session, ticket, staff):
        real_commit = db_session.commit
        calls = {"count": 0}

        def flaky_commit():
            calls["count"] += 1
            if calls["count"] == 1:
                raise StaleDataError("ticket row changed")
            real_commit()

        with patch.object(db_session, "commit", side_effect=flaky_commit):
            event = CommentRecorder(db_session, max_retries=3).record(
                ticket, staff_context(staff), CONTENT
            )

        assert calls["count"] == 2
        assert event.position == 0
        assert len(ticket.events) == 1

    def test_gives_up_after_max_retries(self, db_session, ticket, staff):
        with patch.object(db_session, "commit", side_effect=StaleDataError("ticket row changed")):
            with pytest.raises(ConflictError):
                CommentRecorder(db_session, max_retries=2).record(
                    ticket, staff_context(staff), CONTENT
                )

        db_session.expire_all()
        assert db_session.query(Ticket).filter(Ticket.id == ticket.id).one().event_count == 0


class TestConcurrentWriters:
    """Two sessions commenting on the same ticket from the same starting state."""

    @pytest.fixture
    def session_factory(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'tickets.db'}", connect_args={"check_same_thread": False}
        )
        Base.metadata.create_all(engine)
        yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
        engine.dispose()

    def test_both_comments_survive(self, session_factory):
        setup = session_factory()
        department = create_department_factory(setup, name="Support")
        customer = create_user_factory(setup, role="user")
        agent = create_user_factory(setup, role="staff", departments=[department])
        ticket_id = create_ticket_factory(
            setup, author=customer, department=department, ticket_number="555000"
        ).id
        customer_id, agent_id = customer.id, agent.id
        setup.close()

        first, second = session_factory(), session_factory()
        first_ticket = first.get(Ticket, ticket_id)
        second_ticket = second.get(Ticket, ticket_id)
        first_context = ActorContext(
            RegisteredUser(first.get(User, customer_id)), is_author=True, is_owner=False
        )
        second_context = staff_context(second.get(User, agent_id))

        CommentRecorder(second).record(second_ticket, second_context, "agent reply, long enough")
        CommentRecorder(first).record(first_ticket, first_context, "customer reply, long enough")

        check = session_factory()
        stored = check.get(Ticket, ticket_id)
        assert [event.content for event in stored.events] == [
            "agent reply, long enough",
            "customer reply, long enough",
        ]
        assert [event.position for event in stored.events] == [0, 1]
        assert stored.unread is True
        assert stored.unread_staff is True

        for session in (first, second, check):
            session.close()
