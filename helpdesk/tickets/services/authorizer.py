"""Validation and authorization gates for comment submissions.

Validation runs first and only looks at the shape of the request and the
caller's credentials, so malformed requests never reach the ticket-level
authorization checks.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from helpdesk.auth.models.user import STAFF_ADMIN_LEVEL
from helpdesk.core.exceptions import ErrorKind, RequestError
from helpdesk.core.security import tokens_match
from helpdesk.tickets.actors import (
    Actor,
    ActorContext,
    GuestSession,
    RegisteredUser,
    StaffAgent,
)
from helpdesk.tickets.models.ticket import Ticket
from helpdesk.tickets.schemas.comment import CommentForm

logger = logging.getLogger(__name__)

# Checked in this order; the first failing field decides the reported error
_FIELD_ERRORS: dict[str, ErrorKind] = {
    "content": ErrorKind.INVALID_CONTENT,
    "ticketNumber": ErrorKind.INVALID_TICKET,
    "images": ErrorKind.INVALID_FILE,
    "csrf_token": ErrorKind.INVALID_TOKEN,
}


class CommentAuthorizer:
    def __init__(self, *, user_system_enabled: bool) -> None:
        self.user_system_enabled = user_system_enabled

    def validate_form(self, data: Mapping[str, Any]) -> CommentForm:
        try:
            return CommentForm.model_validate(dict(data))
        except ValidationError as exc:
            failed = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}
            for field, kind in _FIELD_ERRORS.items():
                if field in failed:
                    raise RequestError(kind, field=field) from exc
            # `private` coerces any value, so nothing else is left unmapped but a bad body shape
            raise RequestError(ErrorKind.INVALID_CONTENT) from exc

    def validate_credentials(self, actor: Actor | None, form: CommentForm) -> Actor:
        """Reject anonymous callers and guests acting outside their session.

        A guest naming any ticket other than the one its session is bound to
        gets INVALID_TICKET before the ticket is looked up, so the response
        does not reveal whether that other ticket exists.
        """
        if actor is None:
            if self.user_system_enabled:
                raise RequestError(ErrorKind.NO_PERMISSION)
            raise RequestError(ErrorKind.INVALID_TICKET, field="ticketNumber")

        if isinstance(actor, GuestSession):
            if form.ticket_number != actor.ticket_number:
                raise RequestError(ErrorKind.INVALID_TICKET, field="ticketNumber")
            if not tokens_match(form.csrf_token, actor.session.token):
                raise RequestError(ErrorKind.INVALID_TOKEN, field="csrf_token")

        return actor

    def authorize(self, context: ActorContext, ticket: Ticket) -> None:
        if self.user_system_enabled and not context.is_staff and not context.is_author:
            logger.info("Non-author %s denied comment on %s", context.kind, ticket.ticket_number)
            raise RequestError(ErrorKind.NO_PERMISSION)

        if not self.can_manage_ticket(context, ticket):
            logger.info("%s may not manage ticket %s", context.kind, ticket.ticket_number)
            raise RequestError(ErrorKind.NO_PERMISSION)

    @staticmethod
    def can_manage_ticket(context: ActorContext, ticket: Ticket) -> bool:
        actor = context.actor
        if isinstance(actor, GuestSession):
            return actor.ticket_number == ticket.ticket_number
        if isinstance(actor, RegisteredUser):
            return context.is_author
        if isinstance(actor, StaffAgent):
            if actor.user.level >= STAFF_ADMIN_LEVEL or context.is_owner or context.is_author:
                return True
            department_ids = {department.id for department in actor.user.departments}
            return ticket.department_id is not None and ticket.department_id in department_ids
        return False
