"""Transaction repository protocol."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from ...models.transaction import Transaction


class TransactionNotFoundError(LookupError):
    """Raised when a transaction does not exist or belongs to another user."""


class TransactionStore(Protocol):
    """Persistence operations for a user's transactions."""

    def list_for_user(self, user_id: int, *, txn_type: str = "all") -> list[Transaction]:
        """Return the user's transactions, most recent first."""
        ...

    def get(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve one of the user's transactions by ID."""
        ...

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Persist a new transaction for the user."""
        ...

    def update(self, transaction_id: int, *, user_id: int, **changes: Any) -> Transaction:
        """Apply field changes to an existing transaction."""
        ...

    def delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Delete a transaction; return False when nothing matched."""
        ...
