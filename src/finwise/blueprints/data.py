"""Request-scoped access to the transaction store for blueprint views."""

from __future__ import annotations

from flask import current_app, flash
from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories.transaction import TransactionStore
from ..models.transaction import Transaction


def transaction_store() -> TransactionStore:
    """Return the store registered on the app, defaulting to the SQLModel repository."""

    store = current_app.extensions.get("finwise_transaction_store")
    if store is not None:
        return store

    from ..extensions import session_factory
    from ..infra.repositories.transaction import SQLModelTransactionRepository

    return SQLModelTransactionRepository(session_factory)


def load_transactions(user_id: int, *, txn_type: str = "all") -> list[Transaction]:
    """Fetch the user's transactions, falling back to an empty list when storage fails."""

    try:
        return transaction_store().list_for_user(user_id, txn_type=txn_type)
    except SQLAlchemyError:
        current_app.logger.exception(
            "Failed to load transactions", extra={"user_id": user_id, "txn_type": txn_type}
        )
        flash("Your transactions could not be loaded right now. Please try again.", "danger")
        return []
