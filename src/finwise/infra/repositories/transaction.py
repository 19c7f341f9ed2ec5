"""SQLModel implementation of the transaction store."""

from __future__ import annotations

from typing import Any, Callable, Optional

from sqlmodel import Session, select

from ...domain.repositories.transaction import TransactionNotFoundError
from ...logging_config import get_logger
from ...models.transaction import Transaction, utcnow

logger = get_logger(__name__)

_UPDATABLE_FIELDS = frozenset({"type", "amount", "description", "category_id", "occurred_at"})
_TYPE_FILTERS = frozenset({"all", "income", "expense"})


class SQLModelTransactionRepository:
    """SQLModel-based transaction repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def list_for_user(self, user_id: int, *, txn_type: str = "all") -> list[Transaction]:
        """Return the user's transactions, most recent first."""
        if txn_type not in _TYPE_FILTERS:
            raise ValueError(f"Unknown transaction type filter: {txn_type}")
        with self.session_factory() as session:
            statement = select(Transaction).where(Transaction.user_id == user_id)
            if txn_type != "all":
                statement = statement.where(Transaction.type == txn_type)
            statement = statement.order_by(
                Transaction.occurred_at.desc(), Transaction.id.desc()  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get(self, transaction_id: int, *, user_id: int) -> Optional[Transaction]:
        """Retrieve a transaction by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create(self, transaction: Transaction, *, user_id: int) -> Transaction:
        """Create a new transaction."""
        with self.session_factory() as session:
            now = utcnow()
            transaction.user_id = user_id
            transaction.created_at = now
            transaction.updated_at = now
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
        logger.info(
            "Transaction created",
            extra={"transaction_id": transaction.id, "user_id": user_id, "type": transaction.type},
        )
        return transaction

    def update(self, transaction_id: int, *, user_id: int, **changes: Any) -> Transaction:
        """Apply ``changes`` to an existing transaction and bump ``updated_at``."""
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction is None:
                raise TransactionNotFoundError(f"Transaction {transaction_id} was not found")
            for field_name, value in changes.items():
                setattr(transaction, field_name, value)
            transaction.updated_at = utcnow()
            session.add(transaction)
            session.commit()
            session.refresh(transaction)
            session.expunge(transaction)
        logger.info(
            "Transaction updated",
            extra={"transaction_id": transaction_id, "user_id": user_id, "fields": sorted(changes)},
        )
        return transaction

    def delete(self, transaction_id: int, *, user_id: int) -> bool:
        """Delete a transaction by ID."""
        with self.session_factory() as session:
            transaction = session.exec(
                select(Transaction)
                .where(Transaction.id == transaction_id)
                .where(Transaction.user_id == user_id)
            ).first()
            if transaction is None:
                return False
            session.delete(transaction)
            session.commit()
        logger.info(
            "Transaction deleted", extra={"transaction_id": transaction_id, "user_id": user_id}
        )
        return True
