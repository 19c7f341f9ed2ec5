"""SQLModel definitions for income/expense transactions."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .user import User


def utcnow() -> datetime:
    """Current UTC time without tzinfo; every timestamp column stores naive values."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


class Transaction(SQLModel, table=True):
    """A single income or expense entry owned by one user.

    ``amount`` is always non-negative; ``type`` carries the direction. ``category_id``
    references the static category catalog rather than a table.
    """

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    type: str = Field(nullable=False, max_length=16, index=True)
    amount: float = Field(nullable=False, ge=0)
    description: str = Field(default="", max_length=255)
    category_id: str = Field(nullable=False, max_length=64)
    occurred_at: datetime = Field(sa_type=DateTime(timezone=False), nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=False), nullable=False
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_type=DateTime(timezone=False), nullable=False
    )

    user: "User" = Relationship(
        sa_relationship=relationship("User", back_populates="transactions")
    )
