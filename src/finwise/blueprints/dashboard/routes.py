"""Dashboard routes."""

from __future__ import annotations

from datetime import date

from flask import render_template

from ...services.analysis import compute_balance, compute_monthly_analysis, recent_transactions
from ..auth import current_user, login_required
from ..data import load_transactions
from . import bp

RECENT_LIMIT = 3


@bp.get("/")
@login_required
def index():
    """Show the running balance, this month's totals and the latest entries."""

    user = current_user()
    transactions = load_transactions(user.id)
    today = date.today()
    this_month = compute_monthly_analysis(transactions, today.month, today.year)

    return render_template(
        "dashboard/index.html",
        balance=compute_balance(transactions),
        monthly_income=this_month.total_income,
        monthly_expense=this_month.total_expense,
        recent=recent_transactions(transactions, limit=RECENT_LIMIT),
        today=today,
    )
