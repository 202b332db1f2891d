import logging
from dataclasses import dataclass
from urllib.parse import quote

from helpdesk.core.constants import CHECK_TICKET_PATH
from helpdesk.tickets.actors import ActorContext
from helpdesk.tickets.models.ticket import Ticket
from helpdesk.tickets.tasks import send_ticket_responded_notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recipient:
    email: str | None
    name: str | None
    staff: bool = False


class NotificationDispatcher:
    """Decides who hears about a new comment and queues the email.

    Must only be called once the comment is committed. Queueing failures are
    logged and swallowed; the comment stands regardless.
    """

    def __init__(self, *, user_system_enabled: bool, base_url: str) -> None:
        self.user_system_enabled = user_system_enabled
        self.base_url = base_url.rstrip("/")

    def select_recipient(
        self, context: ActorContext, ticket: Ticket, private: bool
    ) -> Recipient | None:
        if context.is_author and ticket.owner is not None:
            return Recipient(email=ticket.owner.email, name=ticket.owner.name, staff=True)
        if context.is_owner and not private:
            return Recipient(email=ticket.author_email, name=ticket.author_name)
        return None

    def build_url(self, ticket: Ticket, recipient: Recipient) -> str:
        if not self.user_system_enabled and not recipient.staff:
            email = quote(recipient.email or "", safe="@")
            return f"{self.base_url}{CHECK_TICKET_PATH}/{ticket.ticket_number}/{email}"
        return self.base_url

    def dispatch(
        self, context: ActorContext, ticket: Ticket, content: str, private: bool
    ) -> Recipient | None:
        recipient = self.select_recipient(context, ticket, private)
        if recipient is None:
            return None
        if not recipient.email:
            logger.warning("No email address to notify for ticket %s", ticket.ticket_number)
            return None

        try:
            send_ticket_responded_notification.delay(
                to=recipient.email,
                name=recipient.name or recipient.email,
                title=ticket.title,
                ticket_number=ticket.ticket_number,
                content=content,
                url=self.build_url(ticket, recipient),
            )
        except Exception:
            logger.exception(
                "Failed to dispatch ticket responded notification for %s", ticket.ticket_number
            )
            return None

        return recipient
