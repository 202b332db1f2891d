import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpdesk.auth.models.user import Department, User
from helpdesk.db.session import Base
from helpdesk.tickets.models.event import TicketEvent


class Ticket(Base):
    """Support ticket aggregate.

    Events are only ever appended through ``add_event``; ``version`` guards the
    read-modify-write of the event sequence and the unread flags against
    concurrent writers.
    """

    __tablename__ = "tickets"
    __table_args__ = (
        Index("ix_tickets_author", "author_id"),
        Index("ix_tickets_owner", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    ticket_number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    content: Mapped[str] = mapped_column(Text)
    department_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("departments.id", ondelete="SET NULL"), nullable=True
    )

    # Registered (or staff) author; guest tickets only carry an email/name
    author_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    guest_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    guest_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    closed: Mapped[bool] = mapped_column(default=False)
    unread: Mapped[bool] = mapped_column(default=False)
    unread_staff: Mapped[bool] = mapped_column(default=True)

    event_count: Mapped[int] = mapped_column(default=0)
    version: Mapped[int] = mapped_column(nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    department: Mapped[Department | None] = relationship(lazy="joined")
    author: Mapped[User | None] = relationship(foreign_keys=[author_id], lazy="joined")
    owner: Mapped[User | None] = relationship(foreign_keys=[owner_id], lazy="joined")
    events: Mapped[list[TicketEvent]] = relationship(
        back_populates="ticket",
        order_by=TicketEvent.position,
        cascade="all, delete-orphan",
    )

    def is_author(self, user: User | None) -> bool:
        return user is not None and self.author_id is not None and self.author_id == user.id

    def is_owner(self, user: User | None) -> bool:
        return user is not None and self.owner_id is not None and self.owner_id == user.id

    @property
    def author_email(self) -> str | None:
        return self.author.email if self.author else self.guest_email

    @property
    def author_name(self) -> str | None:
        return self.author.name if self.author else self.guest_name

    def add_event(self, event: TicketEvent) -> None:
        event.position = self.event_count
        self.event_count = self.event_count + 1
        self.events.append(event)
