import enum
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpdesk.db.session import Base
from helpdesk.tickets.actors import Anonymous, Authorship, StaffAuthor, UserAuthor

if TYPE_CHECKING:
    from helpdesk.tickets.models.ticket import Ticket


class TicketEventType(str, enum.Enum):
    COMMENT = "COMMENT"
    ASSIGN = "ASSIGN"
    UN_ASSIGN = "UN_ASSIGN"
    CLOSE = "CLOSE"
    RE_OPEN = "RE_OPEN"
    DEPARTMENT_CHANGED = "DEPARTMENT_CHANGED"
    PRIORITY_CHANGED = "PRIORITY_CHANGED"


class TicketEvent(Base):
    __tablename__ = "ticket_events"
    __table_args__ = (
        UniqueConstraint("ticket_id", "position", name="uq_ticket_events_ticket_position"),
        CheckConstraint(
            "author_staff_id IS NULL OR author_user_id IS NULL",
            name="ck_ticket_events_single_author",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    ticket_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tickets.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column()
    type: Mapped[str] = mapped_column(String(30))
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    file: Mapped[str | None] = mapped_column(String(500), nullable=True)
    date: Mapped[datetime] = mapped_column(default=lambda: datetime.now(UTC))
    private: Mapped[bool] = mapped_column(default=False)

    author_staff_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    author_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    ticket: Mapped["Ticket"] = relationship(back_populates="events")

    @property
    def author(self) -> Authorship:
        if self.author_staff_id is not None:
            return StaffAuthor(self.author_staff_id)
        if self.author_user_id is not None:
            return UserAuthor(self.author_user_id)
        return Anonymous()

    @author.setter
    def author(self, value: Authorship) -> None:
        self.author_staff_id = value.user_id if isinstance(value, StaffAuthor) else None
        self.author_user_id = value.user_id if isinstance(value, UserAuthor) else None
