"""SQLModel table exports."""

from .transaction import Transaction
from .user import User

__all__ = [
    "Transaction",
    "User",
]
