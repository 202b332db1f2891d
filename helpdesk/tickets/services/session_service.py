import logging
from typing import cast

from sqlalchemy import func
from sqlalchemy.orm import Session

from helpdesk.core.config import settings
from helpdesk.core.exceptions import ErrorKind, RequestError
from helpdesk.core.redis import store_ticket_session
from helpdesk.core.security import generate_ticket_session
from helpdesk.tickets.models.ticket import Ticket

logger = logging.getLogger(__name__)


class TicketSessionService:
    """Opens guest sessions bound to a single ticket (check-ticket flow)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def open_session(self, ticket_number: str, email: str) -> tuple[str, str]:
        """Verify the guest's email against the ticket and start a session.

        Returns:
            (session_id, token): the cookie value and the csrf token the guest
            must send back with every comment
        """
        if settings.USER_SYSTEM_ENABLED:
            raise RequestError(ErrorKind.NO_PERMISSION)

        ticket = self._find_guest_ticket(ticket_number, email)
        if ticket is None:
            logger.info("Ticket check failed for %s", ticket_number)
            raise RequestError(ErrorKind.INVALID_TICKET, field="ticketNumber")

        session_id, token = generate_ticket_session()
        await store_ticket_session(
            session_id,
            ticket.ticket_number,
            token,
            ttl_seconds=settings.TICKET_SESSION_EXPIRE_MINUTES * 60,
        )
        logger.info("Opened guest session for ticket %s", ticket.ticket_number)
        return session_id, token

    def _find_guest_ticket(self, ticket_number: str, email: str) -> Ticket | None:
        ticket = (
            self.db.query(Ticket)
            .filter(
                Ticket.ticket_number == ticket_number,
                func.lower(Ticket.guest_email) == email.strip().lower(),
            )
            .first()
        )
        return cast(Ticket | None, ticket)
