"""The user table."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import DateTime, Index, String, event
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ..utils import hash_and_salt


class UserRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class Base(DeclarativeBase):
    """Declarative base for the user models."""


def _now() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A registered account; the password is stored as a bcrypt hash."""

    __tablename__ = "users"
    __table_args__ = (Index("idx_user_email", "email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), index=True
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), default="")
    role: Mapped[UserRole | None] = mapped_column(
        SAEnum(
            UserRole,
            native_enum=False,
            length=16,
            values_callable=lambda roles: [role.value for role in roles],
        )
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, role={self.role!r})"


@event.listens_for(User, "before_insert")
def _before_insert(mapper, connection, target: User) -> None:
    now = _now()
    target.id = str(uuid.uuid4())
    target.password = hash_and_salt(target.password or "")
    if not target.role:
        target.role = UserRole.CUSTOMER
    if target.created_at is None:
        target.created_at = now
    target.updated_at = now


@event.listens_for(User, "before_update")
def _before_update(mapper, connection, target: User) -> None:
    target.updated_at = _now()