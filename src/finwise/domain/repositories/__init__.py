"""Repository protocol definitions for domain layer."""

from .transaction import TransactionNotFoundError, TransactionStore

__all__ = [
    "TransactionNotFoundError",
    "TransactionStore",
]
