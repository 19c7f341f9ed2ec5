"""Tests for the monthly aggregation engine."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from finwise.constants.categories import Category, CategoryCatalog
from finwise.services import analysis
from finwise.services.analysis import (
    UNKNOWN_CATEGORY_ID,
    compute_balance,
    compute_category_breakdown,
    compute_monthly_analysis,
    recent_transactions,
    summarize_month,
)
from finwise.services.periods import InvalidPeriodError
from tests.conftest import make_txn


def _scenario_a():
    return [
        make_txn("income", 1000.0, "salary", datetime(2024, 3, 1, 9, 0)),
        make_txn("expense", 300.0, "food", datetime(2024, 3, 10, 12, 0)),
        make_txn("expense", 200.0, "transport", datetime(2024, 3, 20, 18, 0)),
    ]


def test_scenario_a_totals_and_breakdown():
    result = compute_monthly_analysis(_scenario_a(), 3, 2024)

    assert result.total_income == 1000.0
    assert result.total_expense == 500.0
    assert result.balance == 500.0
    assert [(e.category_id, e.amount, e.percentage) for e in result.category_breakdown] == [
        ("food", 300.0, 60.0),
        ("transport", 200.0, 40.0),
    ]
    food = result.category_breakdown[0]
    assert food.name == "Food"
    assert food.icon == "restaurant"
    assert food.color == "#ef4444"
    assert food.transaction_count == 1


def test_empty_transactions_produce_zero_result():
    result = compute_monthly_analysis([], 3, 2024)

    assert (result.total_income, result.total_expense, result.balance) == (0, 0, 0)
    assert result.category_breakdown == ()
    assert result.transactions == ()
    assert analysis.compute_pie_segments(result.category_breakdown) == []


def test_income_only_month_has_no_breakdown():
    result = compute_monthly_analysis([make_txn("income", 500.0, "salary")], 3, 2024)

    assert result.total_income == 500.0
    assert result.total_expense == 0
    assert result.balance == 500.0
    assert result.category_breakdown == ()
    assert analysis.compute_pie_segments(result.category_breakdown) == []


def test_unknown_category_counts_in_total_but_not_breakdown():
    txns = _scenario_a() + [make_txn("expense", 50.0, "unknown_xyz")]

    result = compute_monthly_analysis(txns, 3, 2024)

    assert result.total_expense == 550.0
    assert [e.category_id for e in result.category_breakdown] == ["food", "transport"]
    assert sum(e.amount for e in result.category_breakdown) < result.total_expense
    # Percentages stay relative to every expense, including the dropped one.
    assert result.category_breakdown[0].percentage == pytest.approx(54.5)


def test_unknown_categories_can_be_surfaced_as_one_entry():
    txns = _scenario_a() + [
        make_txn("expense", 50.0, "unknown_xyz"),
        make_txn("expense", 25.0, "legacy_cat"),
    ]

    result = compute_monthly_analysis(txns, 3, 2024, include_unknown=True)

    unknown = [e for e in result.category_breakdown if e.category_id == UNKNOWN_CATEGORY_ID]
    assert len(unknown) == 1
    assert unknown[0].amount == 75.0
    assert unknown[0].transaction_count == 2
    assert unknown[0].name == "Uncategorized"
    assert sum(e.amount for e in result.category_breakdown) == pytest.approx(result.total_expense)


def test_equal_amounts_keep_first_seen_order_and_percentages():
    txns = [
        make_txn("expense", 100.0, "health", datetime(2024, 3, 5)),
        make_txn("expense", 100.0, "bills", datetime(2024, 3, 4)),
    ]

    breakdown = compute_category_breakdown(txns)

    assert [e.category_id for e in breakdown] == ["health", "bills"]
    assert [e.percentage for e in breakdown] == [50.0, 50.0]


def test_monthly_tie_break_follows_most_recent_first():
    # The analysed list is newest-first, so bills (seen first there) leads the tie.
    txns = [
        make_txn("expense", 100.0, "health", datetime(2024, 3, 4)),
        make_txn("expense", 100.0, "bills", datetime(2024, 3, 5)),
    ]

    result = compute_monthly_analysis(txns, 3, 2024)

    assert [e.category_id for e in result.category_breakdown] == ["bills", "health"]


def test_breakdown_groups_sums_and_counts_per_category():
    txns = [
        make_txn("expense", 12.5, "food"),
        make_txn("expense", 40.0, "shopping"),
        make_txn("expense", 7.5, "food"),
        make_txn("income", 999.0, "food"),
    ]

    breakdown = compute_category_breakdown(txns)

    assert [(e.category_id, e.amount, e.transaction_count) for e in breakdown] == [
        ("shopping", 40.0, 1),
        ("food", 20.0, 2),
    ]
    assert [e.percentage for e in breakdown] == [66.7, 33.3]


def test_percentage_rounds_half_up():
    # 1/16 = 6.25% which half-even rounding would turn into 6.2.
    txns = [make_txn("expense", 1.0, "food"), make_txn("expense", 15.0, "bills")]

    breakdown = compute_category_breakdown(txns)

    assert [e.percentage for e in breakdown] == [93.8, 6.3]


def test_breakdown_uses_supplied_catalog():
    catalog = CategoryCatalog([Category("rent", "Rent", "home", "expense", "#123456")])

    breakdown = compute_category_breakdown(
        [make_txn("expense", 900.0, "rent"), make_txn("expense", 100.0, "food")],
        catalog=catalog,
    )

    assert [(e.category_id, e.name, e.percentage) for e in breakdown] == [("rent", "Rent", 90.0)]


def test_filters_to_requested_month_inclusive_bounds():
    txns = [
        make_txn("expense", 1.0, "food", datetime(2024, 2, 29, 23, 59, 59, 999999)),
        make_txn("expense", 2.0, "food", datetime(2024, 3, 1, 0, 0)),
        make_txn("expense", 4.0, "food", datetime(2024, 3, 31, 23, 59, 59, 999999)),
        make_txn("expense", 8.0, "food", datetime(2024, 4, 1, 0, 0)),
        make_txn("expense", 16.0, "food", datetime(2023, 3, 15)),
    ]

    result = compute_monthly_analysis(txns, 3, 2024)

    assert result.total_expense == 6.0
    assert len(result.transactions) == 2


def test_december_window_rolls_into_next_year():
    txns = [
        make_txn("income", 10.0, "salary", datetime(2023, 12, 31, 22, 0)),
        make_txn("income", 20.0, "salary", datetime(2024, 1, 1, 0, 0)),
    ]

    assert compute_monthly_analysis(txns, 12, 2023).total_income == 10.0
    assert compute_monthly_analysis(txns, 1, 2024).total_income == 20.0


def test_accepts_plain_dates_and_aware_datetimes():
    txns = [
        make_txn("expense", 5.0, "food", date(2024, 3, 31)),
        make_txn("expense", 7.0, "food", datetime(2024, 3, 2, 8, 0, tzinfo=timezone.utc)),
    ]

    result = compute_monthly_analysis(txns, 3, 2024)

    assert result.total_expense == 12.0


def test_transactions_are_returned_newest_first():
    txns = _scenario_a()

    result = compute_monthly_analysis(txns, 3, 2024)

    dates = [txn.occurred_at for txn in result.transactions]
    assert dates == sorted(dates, reverse=True)
    assert set(map(id, result.transactions)) == set(map(id, txns))


def test_balance_may_be_negative():
    txns = [make_txn("income", 100.0, "salary"), make_txn("expense", 250.0, "bills")]

    result = compute_monthly_analysis(txns, 3, 2024)

    assert result.balance == -150.0


@pytest.mark.parametrize("month", [0, 13, -1])
def test_out_of_range_month_is_rejected(month):
    with pytest.raises(InvalidPeriodError):
        compute_monthly_analysis(_scenario_a(), month, 2024)


def test_invalid_period_is_a_value_error():
    with pytest.raises(ValueError):
        compute_monthly_analysis([], 3, 0)


def test_analysis_is_idempotent():
    txns = _scenario_a() + [make_txn("expense", 33.3, "health")]

    first = compute_monthly_analysis(txns, 3, 2024)
    second = compute_monthly_analysis(txns, 3, 2024)

    assert first == second
    assert analysis.compute_pie_segments(first.category_breakdown) == analysis.compute_pie_segments(
        second.category_breakdown
    )


def test_breakdown_properties_hold_for_mixed_month():
    amounts = [19.99, 5.01, 120.0, 43.75, 0.5, 300.0, 12.34, 78.9]
    categories = ["food", "transport", "shopping", "bills", "health", "entertainment", "education"]
    txns = [
        make_txn("expense", amount, categories[i % len(categories)], datetime(2024, 3, 1) + timedelta(days=i))
        for i, amount in enumerate(amounts)
    ]
    txns.append(make_txn("income", 2500.0, "salary"))

    result = compute_monthly_analysis(txns, 3, 2024)
    breakdown = result.category_breakdown

    assert result.total_income - result.total_expense == result.balance
    assert sum(e.amount for e in breakdown) == pytest.approx(result.total_expense)
    assert sum(e.percentage for e in breakdown) == pytest.approx(100.0, abs=0.05 * len(breakdown))
    assert all(a.amount >= b.amount for a, b in zip(breakdown, breakdown[1:]))


def test_compute_balance_spans_all_time():
    txns = [
        make_txn("income", 1000.0, "salary", datetime(2023, 1, 1)),
        make_txn("expense", 400.0, "bills", datetime(2024, 6, 1)),
    ]

    assert compute_balance(txns) == 600.0
    assert compute_balance([]) == 0


def test_recent_transactions_limits_and_orders():
    txns = [make_txn("expense", float(i), "food", datetime(2024, 3, i + 1)) for i in range(6)]

    recent = recent_transactions(txns, limit=3)

    assert [t.amount for t in recent] == [5.0, 4.0, 3.0]
    assert recent_transactions(txns, limit=0) == []


class TestSummarizeMonth:
    def test_counts_and_ratios(self):
        result = compute_monthly_analysis(_scenario_a(), 3, 2024)

        insights = summarize_month(result)

        assert insights.income_count == 1
        assert insights.expense_count == 2
        assert insights.expense_ratio == 50.0
        assert insights.savings_rate == 50.0
        assert insights.top_expense_category.category_id == "food"
        assert insights.status == "excellent"

    @pytest.mark.parametrize(
        "expense, status",
        [(850.0, "good"), (950.0, "keep_going"), (1200.0, "overspending")],
    )
    def test_status_thresholds(self, expense, status):
        txns = [make_txn("income", 1000.0, "salary"), make_txn("expense", expense, "bills")]

        insights = summarize_month(compute_monthly_analysis(txns, 3, 2024))

        assert insights.status == status

    def test_no_income_yields_zero_ratios(self):
        txns = [make_txn("expense", 30.0, "food")]

        insights = summarize_month(compute_monthly_analysis(txns, 3, 2024))

        assert insights.expense_ratio == 0
        assert insights.savings_rate == 0
        assert insights.status == "overspending"

    def test_empty_month_has_no_top_category(self):
        insights = summarize_month(compute_monthly_analysis([], 3, 2024))

        assert insights.top_expense_category is None
        assert insights.status == "keep_going"
