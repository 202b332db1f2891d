import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from helpdesk.core.exceptions import ConflictError
from helpdesk.tickets.actors import (
    ActorContext,
    Anonymous,
    Authorship,
    RegisteredUser,
    StaffAgent,
    StaffAuthor,
    UserAuthor,
)
from helpdesk.tickets.models.event import TicketEvent, TicketEventType
from helpdesk.tickets.models.ticket import Ticket

logger = logging.getLogger(__name__)


def comment_authorship(context: ActorContext) -> Authorship:
    actor = context.actor
    if isinstance(actor, StaffAgent):
        return StaffAuthor(actor.user.id)
    if isinstance(actor, RegisteredUser):
        return UserAuthor(actor.user.id)
    return Anonymous()


def apply_unread_flags(ticket: Ticket, context: ActorContext) -> None:
    """Mark the comment unread for whichever side did not write it.

    Guest comments leave both flags untouched.
    """
    if isinstance(context.actor, StaffAgent):
        ticket.unread = not context.is_author
        ticket.unread_staff = not context.is_owner
    elif isinstance(context.actor, RegisteredUser):
        ticket.unread_staff = True


class CommentRecorder:
    """Appends a COMMENT event and the matching unread flags in one commit.

    The ticket row is version-checked on write; when another request got
    there first the whole append is rebuilt on the fresh ticket state and
    retried, so neither comment nor flag update is lost.
    """

    def __init__(self, db: Session, *, max_retries: int = 3) -> None:
        self.db = db
        self.max_retries = max_retries

    def record(
        self,
        ticket: Ticket,
        context: ActorContext,
        content: str,
        file_path: str | None = None,
        private: bool = False,
    ) -> TicketEvent:
        is_private = private and context.is_staff

        for attempt in range(1, self.max_retries + 1):
            comment = TicketEvent(
                type=TicketEventType.COMMENT.value,
                content=content,
                file=file_path,
                date=datetime.now(UTC),
                private=is_private,
            )
            comment.author = comment_authorship(context)

            apply_unread_flags(ticket, context)
            ticket.add_event(comment)

            try:
                self.db.commit()
            except StaleDataError:
                self.db.rollback()
                logger.warning(
                    "Concurrent update on ticket %s, retrying comment (attempt %d/%d)",
                    ticket.ticket_number,
                    attempt,
                    self.max_retries,
                )
                self.db.refresh(ticket)
                continue

            self.db.refresh(comment)
            return comment

        raise ConflictError("Ticket was modified concurrently", resource="ticket")
