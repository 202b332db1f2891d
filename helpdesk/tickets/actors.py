"""Request-scoped views of who is acting and who authored an event.

Both are tagged unions of frozen dataclasses: the variant is decided once per
request and threaded through the workflow, so components never re-derive it
from credentials or deployment flags.
"""

import uuid
from dataclasses import dataclass

from helpdesk.auth.models.user import User


@dataclass(frozen=True)
class SessionContext:
    """Guest ticket session as read from the session store for one request."""

    ticket_number: str
    token: str


@dataclass(frozen=True)
class StaffAgent:
    user: User


@dataclass(frozen=True)
class RegisteredUser:
    user: User


@dataclass(frozen=True)
class GuestSession:
    session: SessionContext

    @property
    def ticket_number(self) -> str:
        return self.session.ticket_number


Actor = StaffAgent | RegisteredUser | GuestSession


@dataclass(frozen=True)
class ActorContext:
    actor: Actor
    is_author: bool
    is_owner: bool

    @property
    def is_staff(self) -> bool:
        return isinstance(self.actor, StaffAgent)

    @property
    def user(self) -> User | None:
        if isinstance(self.actor, GuestSession):
            return None
        return self.actor.user

    @property
    def kind(self) -> str:
        return type(self.actor).__name__


@dataclass(frozen=True)
class StaffAuthor:
    user_id: uuid.UUID


@dataclass(frozen=True)
class UserAuthor:
    user_id: uuid.UUID


@dataclass(frozen=True)
class Anonymous:
    pass


Authorship = StaffAuthor | UserAuthor | Anonymous
