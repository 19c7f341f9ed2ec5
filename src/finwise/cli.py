"""Flask CLI commands for Finwise."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta

import click

from .constants.categories import DEFAULT_CATALOG


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("finwise-seed")
    @click.option("--email", required=True, help="Account that receives the demo data")
    @click.option("--months", default=3, show_default=True, help="Months of history to generate")
    @click.option("--seed", default=None, type=int, help="Random seed for repeatable data")
    def finwise_seed(email: str, months: int, seed: int | None) -> None:
        """Seed demo income/expense transactions for an existing user."""

        from .extensions import session_factory
        from .services.auth import get_user_by_email

        user = get_user_by_email(email, session_factory)
        if user is None:
            raise click.ClickException(f"No user registered with {email}")

        count = seed_demo_transactions(
            user_id=user.id,
            months=months,
            session_factory=session_factory,
            rng=random.Random(seed),
        )
        click.echo(f"Seeded {count} transactions for {user.email}.")

    @app.cli.command("finwise-report")
    @click.option("--email", required=True)
    @click.option("--month", type=int, default=None, help="1-12, defaults to the current month")
    @click.option("--year", type=int, default=None, help="Defaults to the current year")
    def finwise_report(email: str, month: int | None, year: int | None) -> None:
        """Print the monthly analysis for a user."""

        from .extensions import session_factory
        from .formatting import format_currency
        from .infra.repositories.transaction import SQLModelTransactionRepository
        from .services.analysis import compute_monthly_analysis
        from .services.auth import get_user_by_email
        from .services.periods import InvalidPeriodError, month_name

        user = get_user_by_email(email, session_factory)
        if user is None:
            raise click.ClickException(f"No user registered with {email}")

        today = date.today()
        month = today.month if month is None else month
        year = today.year if year is None else year
        config = app.config["FINWISE_CONFIG"]
        symbol = config.CURRENCY_SYMBOL

        transactions = SQLModelTransactionRepository(session_factory).list_for_user(user.id)
        try:
            result = compute_monthly_analysis(
                transactions,
                month,
                year,
                include_unknown=config.SURFACE_UNKNOWN_CATEGORIES,
            )
        except InvalidPeriodError as exc:
            raise click.BadParameter(str(exc)) from exc

        click.echo(f"{month_name(month)} {year}")
        click.echo(f"  Income:  {format_currency(result.total_income, symbol=symbol)}")
        click.echo(f"  Expense: {format_currency(result.total_expense, symbol=symbol)}")
        click.echo(f"  Balance: {format_currency(result.balance, symbol=symbol)}")
        for entry in result.category_breakdown:
            click.echo(
                f"  {entry.name:<16} {format_currency(entry.amount, symbol=symbol):>14}"
                f"  {entry.percentage:5.1f}%  ({entry.transaction_count})"
            )


def seed_demo_transactions(*, user_id: int, months: int, session_factory, rng: random.Random) -> int:
    """Insert a salary plus a handful of expenses for each of the last ``months`` months."""

    from .infra.repositories.transaction import SQLModelTransactionRepository
    from .models.transaction import Transaction
    from .services.periods import shift_month

    repo = SQLModelTransactionRepository(session_factory)
    expense_ids = [category.id for category in DEFAULT_CATALOG.for_type("expense")]
    today = date.today()
    created = 0
    for offset in range(max(months, 0)):
        month, year = shift_month(today.month, today.year, -offset)
        first = datetime(year, month, 1, 12, 0)
        repo.create(
            Transaction(
                type="income",
                amount=round(rng.uniform(3000, 5000), 2),
                description="Monthly salary",
                category_id="salary",
                occurred_at=first,
            ),
            user_id=user_id,
        )
        created += 1
        for _ in range(rng.randint(5, 12)):
            day_offset = rng.randint(0, 27)
            repo.create(
                Transaction(
                    type="expense",
                    amount=round(rng.uniform(5, 400), 2),
                    description="Demo expense",
                    category_id=rng.choice(expense_ids),
                    occurred_at=min(first + timedelta(days=day_offset), datetime.now()),
                ),
                user_id=user_id,
            )
            created += 1
    return created
