"""User model supporting email/password authentication."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .transaction import utcnow


class User(SQLModel, table=True):
    """Application user identified by email."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=254)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=False),
        nullable=False,
    )
    last_login: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=False))

    transactions = Relationship(
        back_populates="user",
        sa_relationship=relationship(
            "Transaction", back_populates="user", cascade="all, delete-orphan"
        ),
    )
