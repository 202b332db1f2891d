import logging
from typing import cast

from sqlalchemy.orm import Session

from helpdesk.auth.models.user import User
from helpdesk.core.exceptions import ErrorKind, RequestError
from helpdesk.tickets.actors import (
    Actor,
    ActorContext,
    GuestSession,
    RegisteredUser,
    SessionContext,
    StaffAgent,
)
from helpdesk.tickets.models.ticket import Ticket

logger = logging.getLogger(__name__)


class ActorResolver:
    """Works out who is acting and how they relate to the target ticket."""

    def __init__(self, db: Session, *, user_system_enabled: bool) -> None:
        self.db = db
        self.user_system_enabled = user_system_enabled

    def classify(self, user: User | None, session: SessionContext | None) -> Actor | None:
        """Pick the actor variant from the caller's credentials.

        Staff are always staff. Registered users only exist while the user
        system is enabled, and guest sessions only while it is disabled; any
        other combination of credentials is anonymous (None).
        """
        if user is not None and user.is_staff:
            return StaffAgent(user)
        if self.user_system_enabled:
            return RegisteredUser(user) if user is not None else None
        if session is not None:
            return GuestSession(session)
        return None

    def resolve(self, actor: Actor, ticket_number: str) -> tuple[Ticket, ActorContext]:
        ticket = self.get_ticket(ticket_number)
        if isinstance(actor, GuestSession):
            context = ActorContext(actor=actor, is_author=True, is_owner=False)
        else:
            context = ActorContext(
                actor=actor,
                is_author=ticket.is_author(actor.user),
                is_owner=ticket.is_owner(actor.user),
            )
        return ticket, context

    def get_ticket(self, ticket_number: str) -> Ticket:
        ticket = self.db.query(Ticket).filter(Ticket.ticket_number == ticket_number).first()
        if ticket is None:
            logger.info("Ticket %s not found", ticket_number)
            raise RequestError(ErrorKind.INVALID_TICKET, field="ticketNumber")
        return cast(Ticket, ticket)
