"""Display formatting helpers used by templates and the CLI."""

from __future__ import annotations

from datetime import date, datetime


def format_currency(value: float | None, *, symbol: str = "$") -> str:
    amount = float(value or 0.0)
    prefix = "-" if amount < 0 else ""
    return f"{prefix}{symbol} {abs(amount):,.2f}"


def format_date(value: date | datetime | None) -> str:
    if value is None:
        return ""
    return value.strftime("%Y-%m-%d")


def format_relative_day(value: datetime | None, *, now: datetime | None = None) -> str:
    """Describe a timestamp as today/yesterday or a number of days ago."""

    if value is None:
        return ""
    now = now or datetime.now()
    delta_days = (now.date() - value.date()).days
    if delta_days == 0:
        return f"Today, {value:%H:%M}"
    if delta_days == 1:
        return f"Yesterday, {value:%H:%M}"
    if delta_days < 0:
        return value.strftime("%Y-%m-%d")
    return f"{delta_days} days ago"
