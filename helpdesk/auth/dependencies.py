import logging
from typing import Annotated, cast

from fastapi import Cookie, Depends
from sqlalchemy.orm import Session

from helpdesk.auth.models.user import User
from helpdesk.core.security import access_token_subject
from helpdesk.db.session import get_db

logger = logging.getLogger(__name__)


async def get_optional_user(
    access_token: Annotated[str | None, Cookie()] = None,
    db: Session = Depends(get_db),
) -> User | None:
    """Return the logged-in staff member or user, or None for anonymous callers.

    Invalid or expired tokens and inactive accounts all count as anonymous;
    the comment workflow decides whether anonymous access is acceptable.
    """
    if not access_token:
        return None

    user_id = access_token_subject(access_token)
    if user_id is None:
        logger.info("Ignoring invalid access token")
        return None

    user = db.query(User).filter(User.id == user_id, User.is_active.is_(True)).first()
    return cast(User | None, user)
