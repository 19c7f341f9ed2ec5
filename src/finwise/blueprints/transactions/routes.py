"""Transaction list and CRUD routes."""

from __future__ import annotations

from datetime import date, datetime, time

from flask import abort, current_app, flash, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from ...constants.categories import DEFAULT_CATALOG, TRANSACTION_TYPES
from ...domain.repositories.transaction import TransactionNotFoundError
from ...models.transaction import Transaction
from ..auth import current_user, login_required
from ..data import load_transactions, transaction_store
from . import bp
from .forms import TransactionForm

FILTERS = ("all",) + TRANSACTION_TYPES


def _selected_filter() -> str:
    value = (request.args.get("type") or "all").strip().lower()
    return value if value in FILTERS else "all"


def _render_form(form: TransactionForm, *, transaction_id: int | None = None, status: int = 200):
    if transaction_id is None:
        action = url_for("transactions.create_transaction")
    else:
        action = url_for("transactions.update_transaction", transaction_id=transaction_id)
    return (
        render_template(
            "transactions/form.html",
            form=form,
            form_values=form.html_values(),
            form_action=action,
            income_categories=DEFAULT_CATALOG.for_type("income"),
            expense_categories=DEFAULT_CATALOG.for_type("expense"),
            is_edit=transaction_id is not None,
            transaction_id=transaction_id,
        ),
        status,
    )


@bp.get("/")
@login_required
def list_transactions():
    """List the user's transactions, optionally limited to income or expenses."""

    selected = _selected_filter()
    transactions = load_transactions(current_user().id, txn_type=selected)
    return render_template(
        "transactions/index.html",
        transactions=transactions,
        selected_filter=selected,
        filters=FILTERS,
    )


@bp.get("/new")
@login_required
def new_transaction():
    """Render the form for a new transaction."""

    txn_type = request.args.get("type", "expense")
    form = TransactionForm(
        type=txn_type if txn_type in TRANSACTION_TYPES else "expense",
        occurred_at=datetime.combine(date.today(), time(12, 0)),
    )
    return _render_form(form)


@bp.post("/")
@login_required
def create_transaction():
    """Persist a new transaction from submitted form data."""

    form = TransactionForm.from_mapping(request.form)
    if not form.validate():
        return _render_form(form, status=400)

    user = current_user()
    try:
        transaction_store().create(Transaction(**form.values()), user_id=user.id)
    except SQLAlchemyError:
        current_app.logger.exception("Failed to create transaction", extra={"user_id": user.id})
        flash("An unexpected error occurred while saving the transaction.", "danger")
        return _render_form(form, status=500)

    flash("Transaction added.", "success")
    return redirect(url_for("dashboard.index"))


@bp.get("/<int:transaction_id>/edit")
@login_required
def edit_transaction(transaction_id: int):
    """Render the edit form for one of the user's transactions."""

    transaction = transaction_store().get(transaction_id, user_id=current_user().id)
    if transaction is None:
        abort(404)
    return _render_form(TransactionForm.from_transaction(transaction), transaction_id=transaction_id)


@bp.post("/<int:transaction_id>")
@login_required
def update_transaction(transaction_id: int):
    """Apply an edit submission."""

    form = TransactionForm.from_mapping(request.form)
    if not form.validate():
        return _render_form(form, transaction_id=transaction_id, status=400)

    user = current_user()
    try:
        transaction_store().update(transaction_id, user_id=user.id, **form.values())
    except TransactionNotFoundError:
        abort(404)
    except SQLAlchemyError:
        current_app.logger.exception(
            "Failed to update transaction %s", transaction_id, extra={"user_id": user.id}
        )
        flash("An unexpected error occurred while updating the transaction.", "danger")
        return _render_form(form, transaction_id=transaction_id, status=500)

    flash("Transaction updated.", "success")
    return redirect(url_for("transactions.list_transactions"))


@bp.post("/<int:transaction_id>/delete")
@login_required
def delete_transaction(transaction_id: int):
    """Delete one of the user's transactions."""

    if not transaction_store().delete(transaction_id, user_id=current_user().id):
        abort(404)
    flash("Transaction deleted.", "success")
    return redirect(url_for("transactions.list_transactions", type=_selected_filter()))
