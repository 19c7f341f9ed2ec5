"""Monthly analysis routes."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date

from flask import Response, current_app, jsonify, render_template, request, url_for

from ...services.analysis import (
    MonthlyAnalysisResult,
    compute_monthly_analysis,
    compute_pie_segments,
    summarize_month,
)
from ...services.periods import InvalidPeriodError, is_future_period, shift_month, validate_period
from ...services.reports import render_pie_svg, spending_png_bytes
from ..auth import current_user, login_required
from ..data import load_transactions
from . import bp


def _prefers_json_response() -> bool:
    accepts = request.accept_mimetypes
    return request.is_json or accepts["application/json"] > accepts["text/html"]


def _requested_period() -> tuple[int, int]:
    """Read ``month``/``year`` query args, defaulting to the current month."""

    today = date.today()
    try:
        month = int(request.args.get("month", today.month))
        year = int(request.args.get("year", today.year))
    except (TypeError, ValueError) as exc:
        raise InvalidPeriodError("Month and year must be whole numbers.") from exc
    validate_period(month, year)
    return month, year


def _analysis_for_current_user(month: int, year: int) -> MonthlyAnalysisResult:
    config = current_app.config["FINWISE_CONFIG"]
    transactions = load_transactions(current_user().id)
    return compute_monthly_analysis(
        transactions,
        month,
        year,
        include_unknown=config.SURFACE_UNKNOWN_CATEGORIES,
    )


def _serialize_transaction(txn) -> dict:
    return {
        "id": txn.id,
        "type": txn.type,
        "amount": txn.amount,
        "description": txn.description,
        "category_id": txn.category_id,
        "occurred_at": txn.occurred_at.isoformat(),
    }


def _bad_period(exc: InvalidPeriodError):
    if _prefers_json_response():
        return jsonify({"error": str(exc)}), 400
    return render_template("analysis/invalid.html", message=str(exc)), 400


def _neighbour_url(month: int, year: int, delta: int, *, today: date) -> str | None:
    """Link to the adjacent month, or None past the calendar edge or into the future."""

    try:
        target_month, target_year = shift_month(month, year, delta)
    except InvalidPeriodError:
        return None
    if is_future_period(target_month, target_year, today=today):
        return None
    return url_for("analysis.monthly", month=target_month, year=target_year)


@bp.get("/")
@login_required
def monthly():
    """Show income, expenses and the category breakdown for one month."""

    try:
        month, year = _requested_period()
    except InvalidPeriodError as exc:
        return _bad_period(exc)

    result = _analysis_for_current_user(month, year)
    segments = compute_pie_segments(result.category_breakdown)
    insights = summarize_month(result)

    if _prefers_json_response():
        return jsonify(
            {
                "month": result.month,
                "year": result.year,
                "total_income": result.total_income,
                "total_expense": result.total_expense,
                "balance": result.balance,
                "transactions": [_serialize_transaction(txn) for txn in result.transactions],
                "category_breakdown": [asdict(entry) for entry in result.category_breakdown],
                "pie_segments": [asdict(segment) for segment in segments],
                "insights": asdict(insights),
            }
        )

    today = date.today()
    return render_template(
        "analysis/monthly.html",
        analysis=result,
        insights=insights,
        pie_svg=render_pie_svg(segments),
        prev_url=_neighbour_url(month, year, -1, today=today),
        next_url=_neighbour_url(month, year, 1, today=today),
        is_current_month=(month, year) == (today.month, today.year),
        month_choices=[
            (value, is_future_period(value, year, today=today)) for value in range(1, 13)
        ],
    )


@bp.get("/chart.png")
@login_required
def chart_png():
    """Render the month's expense breakdown as a PNG donut chart."""

    try:
        month, year = _requested_period()
    except InvalidPeriodError as exc:
        return jsonify({"error": str(exc)}), 400

    result = _analysis_for_current_user(month, year)
    config = current_app.config["FINWISE_CONFIG"]
    png = spending_png_bytes(result.category_breakdown, currency_symbol=config.CURRENCY_SYMBOL)
    return Response(png, mimetype="image/png")
