"""SQLModel repository implementations."""

from .transaction import SQLModelTransactionRepository

__all__ = [
    "SQLModelTransactionRepository",
]
