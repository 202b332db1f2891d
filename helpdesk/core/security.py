import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import Any, Literal

from fastapi import Response
from jose import JWTError, jwt

from helpdesk.core.config import settings

ACCESS_TOKEN_TYPE = "access"


def create_access_token(data: dict[str, Any]) -> str:
    """Sign an access token; ``data["sub"]`` must be the user's id."""
    issued_at = datetime.now(UTC)
    claims = {
        **data,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        "type": ACCESS_TOKEN_TYPE,
    }
    token: str = jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token


def access_token_subject(token: str) -> uuid.UUID | None:
    """Return the user id an access token was issued for.

    Expired, tampered and non-access tokens, or a subject that is not a UUID,
    all yield None.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        return None
    try:
        return uuid.UUID(str(claims.get("sub")))
    except ValueError:
        return None


def generate_ticket_session() -> tuple[str, str]:
    """Return a fresh (session_id, csrf token) pair for a guest ticket session."""
    return secrets.token_urlsafe(32), secrets.token_hex(16)


def tokens_match(submitted: str | None, expected: str | None) -> bool:
    if not submitted or not expected:
        return False
    return secrets.compare_digest(submitted.encode(), expected.encode())


def set_ticket_session_cookie(response: Response, session_id: str) -> None:
    """Set the httpOnly cookie identifying a guest ticket session.

    SameSite=None and Secure in production, Lax over plain http with DEBUG.
    """
    samesite: Literal["lax", "none"] = "lax" if settings.DEBUG else "none"
    response.set_cookie(
        key=settings.TICKET_SESSION_COOKIE,
        value=session_id,
        httponly=True,
        secure=not settings.DEBUG,
        samesite=samesite,
        max_age=settings.TICKET_SESSION_EXPIRE_MINUTES * 60,
    )
