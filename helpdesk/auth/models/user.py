import enum
import uuid
from datetime import datetime

from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpdesk.db.session import Base


class UserRole(str, enum.Enum):
    STAFF = "staff"
    USER = "user"


# Staff level 3 may manage every ticket regardless of department
STAFF_ADMIN_LEVEL = 3

staff_departments = Table(
    "staff_departments",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("department_id", ForeignKey("departments.id", ondelete="CASCADE"), primary_key=True),
)


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)


class User(Base):
    """
    Account that can act on tickets.

    Attributes:
        id: Unique UUID primary key
        email: Unique email address (indexed for fast lookups)
        name: Display name, used in notification emails
        role: "staff" for agents, "user" for registered customers
        level: Staff level 1-3; ignored for customers
        is_active: Whether the account is active
        departments: Departments a staff member works in
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255))

    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value)
    level: Mapped[int] = mapped_column(default=1)
    is_active: Mapped[bool] = mapped_column(default=True)

    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)

    departments: Mapped[list[Department]] = relationship(
        secondary=staff_departments, lazy="selectin"
    )

    @property
    def is_staff(self) -> bool:
        return self.role == UserRole.STAFF.value

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
