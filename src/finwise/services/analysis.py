"""Monthly income/expense aggregation and category breakdown.

Everything here is a pure function over an in-memory snapshot of transactions:
callers fetch the user's transactions first and pass them in. Transactions are any
objects exposing ``type``, ``amount``, ``category_id`` and ``occurred_at``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Optional, Protocol, Sequence

from ..constants.categories import DEFAULT_CATALOG, FALLBACK_COLOR, FALLBACK_ICON, CategoryCatalog
from .periods import InvalidPeriodError, month_bounds

__all__ = [
    "CategoryBreakdownEntry",
    "InvalidPeriodError",
    "MonthlyAnalysisResult",
    "MonthlyInsights",
    "PieSegment",
    "UNKNOWN_CATEGORY_ID",
    "compute_balance",
    "compute_category_breakdown",
    "compute_monthly_analysis",
    "compute_pie_segments",
    "recent_transactions",
    "summarize_month",
]

INCOME = "income"
EXPENSE = "expense"

UNKNOWN_CATEGORY_ID = "unknown"
UNKNOWN_CATEGORY_NAME = "Uncategorized"

# Pie geometry shared with the SVG renderer in services.reports.
PIE_CENTER_X = 100
PIE_CENTER_Y = 100
PIE_RADIUS = 60


class TransactionLike(Protocol):
    type: str
    amount: float
    category_id: str
    occurred_at: datetime


@dataclass(frozen=True, slots=True)
class CategoryBreakdownEntry:
    """Expense total for one category within the analysed period."""

    category_id: str
    name: str
    icon: str
    color: str
    amount: float
    percentage: float
    transaction_count: int


@dataclass(frozen=True, slots=True)
class MonthlyAnalysisResult:
    month: int
    year: int
    total_income: float
    total_expense: float
    balance: float
    transactions: tuple[TransactionLike, ...]
    category_breakdown: tuple[CategoryBreakdownEntry, ...]


@dataclass(frozen=True, slots=True)
class PieSegment:
    """One filled wedge of the expense pie; angles are cumulative degrees."""

    path: str
    color: str
    start_angle: float
    end_angle: float


@dataclass(frozen=True, slots=True)
class MonthlyInsights:
    income_count: int
    expense_count: int
    expense_ratio: float
    savings_rate: float
    top_expense_category: Optional[CategoryBreakdownEntry]
    status: str


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        # Wall-clock comparison; the month window is naive.
        return value.replace(tzinfo=None) if value.tzinfo is not None else value
    return datetime.combine(value, time.min)


def _round_one_decimal(value: float) -> float:
    """Round half-up to one decimal place (``round`` would round half to even)."""

    return math.floor(value * 10 + 0.5) / 10


def _percentage(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return _round_one_decimal(part / whole * 100)


def _sum_amounts(transactions: Iterable[TransactionLike], txn_type: str) -> float:
    total = 0.0
    for txn in transactions:
        if txn.type == txn_type:
            total += float(txn.amount)
    return total


def compute_monthly_analysis(
    transactions: Iterable[TransactionLike],
    month: int,
    year: int,
    *,
    catalog: CategoryCatalog = DEFAULT_CATALOG,
    include_unknown: bool = False,
) -> MonthlyAnalysisResult:
    """Aggregate the transactions falling within ``month``/``year``.

    Raises:
        InvalidPeriodError: ``month`` is outside 1-12 or ``year`` outside 1-9999.
    """

    start, end = month_bounds(month, year)
    in_period = [
        txn for txn in transactions if start <= _as_datetime(txn.occurred_at) < end
    ]
    in_period.sort(key=lambda txn: _as_datetime(txn.occurred_at), reverse=True)

    total_income = _sum_amounts(in_period, INCOME)
    total_expense = _sum_amounts(in_period, EXPENSE)
    breakdown = compute_category_breakdown(
        in_period,
        total_expense=total_expense,
        catalog=catalog,
        include_unknown=include_unknown,
    )

    return MonthlyAnalysisResult(
        month=month,
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        transactions=tuple(in_period),
        category_breakdown=tuple(breakdown),
    )


def compute_category_breakdown(
    transactions: Iterable[TransactionLike],
    *,
    total_expense: float | None = None,
    catalog: CategoryCatalog = DEFAULT_CATALOG,
    include_unknown: bool = False,
) -> list[CategoryBreakdownEntry]:
    """Rank expense categories by total amount, largest first.

    Percentages are relative to every expense transaction, including those whose
    category is not in ``catalog``. Unknown categories are left out of the result
    unless ``include_unknown`` is set, in which case they are merged into a single
    "Uncategorized" entry. Equal amounts keep first-seen order.
    """

    # dict preserves first-seen order, which is the tie-break for equal amounts.
    groups: dict[str, list[float]] = {}
    expense_total = 0.0
    for txn in transactions:
        if txn.type != EXPENSE:
            continue
        amount = float(txn.amount)
        expense_total += amount
        key = txn.category_id
        if catalog.lookup(key) is None:
            if not include_unknown:
                continue
            key = UNKNOWN_CATEGORY_ID
        bucket = groups.setdefault(key, [0.0, 0])
        bucket[0] += amount
        bucket[1] += 1

    if total_expense is None:
        total_expense = expense_total

    entries: list[CategoryBreakdownEntry] = []
    for category_id, (amount, count) in groups.items():
        category = catalog.lookup(category_id)
        if category is None:
            name, icon, color = UNKNOWN_CATEGORY_NAME, FALLBACK_ICON, FALLBACK_COLOR
        else:
            name, icon, color = category.name, category.icon, category.color
        entries.append(
            CategoryBreakdownEntry(
                category_id=category_id,
                name=name,
                icon=icon,
                color=color,
                amount=amount,
                percentage=_percentage(amount, total_expense),
                transaction_count=int(count),
            )
        )

    return sorted(entries, key=lambda entry: entry.amount, reverse=True)


def _format_number(value: float) -> str:
    """Render a coordinate compactly for SVG path data."""

    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def compute_pie_segments(breakdown: Sequence[CategoryBreakdownEntry]) -> list[PieSegment]:
    """Turn a breakdown into SVG pie wedges, starting at 0 degrees.

    Each wedge spans ``percentage / 100 * 360`` degrees, so the spans add up to 360
    (up to rounding) whenever the breakdown covers all expenses.
    """

    segments: list[PieSegment] = []
    current_angle = 0.0
    for entry in breakdown:
        angle_size = entry.percentage / 100 * 360
        start_angle = current_angle
        end_angle = current_angle + angle_size

        start_rad = math.radians(start_angle)
        end_rad = math.radians(end_angle)
        x1 = PIE_CENTER_X + PIE_RADIUS * math.cos(start_rad)
        y1 = PIE_CENTER_Y + PIE_RADIUS * math.sin(start_rad)
        x2 = PIE_CENTER_X + PIE_RADIUS * math.cos(end_rad)
        y2 = PIE_CENTER_Y + PIE_RADIUS * math.sin(end_rad)
        large_arc = 1 if angle_size > 180 else 0

        path = " ".join(
            (
                f"M {PIE_CENTER_X} {PIE_CENTER_Y}",
                f"L {_format_number(x1)} {_format_number(y1)}",
                f"A {PIE_RADIUS} {PIE_RADIUS} 0 {large_arc} 1 "
                f"{_format_number(x2)} {_format_number(y2)}",
                "Z",
            )
        )
        segments.append(
            PieSegment(path=path, color=entry.color, start_angle=start_angle, end_angle=end_angle)
        )
        current_angle = end_angle

    return segments


def compute_balance(transactions: Iterable[TransactionLike]) -> float:
    """All-time income minus expense."""

    items = list(transactions)
    return _sum_amounts(items, INCOME) - _sum_amounts(items, EXPENSE)


def recent_transactions(
    transactions: Iterable[TransactionLike], limit: int = 5
) -> list[TransactionLike]:
    """Return the ``limit`` most recent transactions, newest first."""

    if limit <= 0:
        return []
    ordered = sorted(transactions, key=lambda txn: _as_datetime(txn.occurred_at), reverse=True)
    return ordered[:limit]


def summarize_month(result: MonthlyAnalysisResult) -> MonthlyInsights:
    """Derive the headline figures shown next to a monthly analysis."""

    income_count = sum(1 for txn in result.transactions if txn.type == INCOME)
    expense_count = sum(1 for txn in result.transactions if txn.type == EXPENSE)
    expense_ratio = _percentage(result.total_expense, result.total_income)
    savings_rate = _percentage(abs(result.balance), result.total_income)

    if result.balance < 0:
        status = "overspending"
    elif savings_rate >= 20:
        status = "excellent"
    elif savings_rate >= 10:
        status = "good"
    else:
        status = "keep_going"

    top = result.category_breakdown[0] if result.category_breakdown else None
    return MonthlyInsights(
        income_count=income_count,
        expense_count=expense_count,
        expense_ratio=expense_ratio,
        savings_rate=savings_rate,
        top_expense_category=top,
        status=status,
    )
