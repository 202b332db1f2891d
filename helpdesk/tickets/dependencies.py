import logging

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from helpdesk.core.config import settings
from helpdesk.core.redis import get_ticket_session
from helpdesk.db.session import get_db
from helpdesk.tickets.actors import SessionContext
from helpdesk.tickets.services.comment_workflow import CommentWorkflow, build_comment_workflow

logger = logging.getLogger(__name__)


async def get_session_context(request: Request) -> SessionContext | None:
    """Load the guest ticket session named by the session cookie, if any.

    Guest sessions only exist while the user system is disabled; with it
    enabled the cookie is ignored.
    """
    if settings.USER_SYSTEM_ENABLED:
        return None

    session_id = request.cookies.get(settings.TICKET_SESSION_COOKIE)
    if not session_id:
        return None

    data = await get_ticket_session(session_id)
    if data is None:
        logger.info("Unknown or expired ticket session")
        return None

    return SessionContext(ticket_number=str(data["ticket_number"]), token=str(data["token"]))


def get_comment_workflow(db: Session = Depends(get_db)) -> CommentWorkflow:
    return build_comment_workflow(db)
