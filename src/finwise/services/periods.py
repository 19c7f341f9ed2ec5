"""Calendar month helpers shared by the analysis engine and the month navigator."""

from __future__ import annotations

import calendar
from datetime import date, datetime


class InvalidPeriodError(ValueError):
    """Raised when a month/year pair does not name a calendar month."""


def validate_period(month: int, year: int) -> None:
    """Reject months outside 1-12 and years datetime cannot represent."""

    if isinstance(month, bool) or not isinstance(month, int):
        raise InvalidPeriodError(f"Month must be an integer, got {month!r}")
    if isinstance(year, bool) or not isinstance(year, int):
        raise InvalidPeriodError(f"Year must be an integer, got {year!r}")
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidPeriodError(f"Year must be between 1 and 9999, got {year}")


def month_bounds(month: int, year: int) -> tuple[datetime, datetime]:
    """Return ``[start, end)`` naive datetimes covering the whole month.

    The exclusive end is the first instant of the following month, so every
    timestamp up to the last instant of the month falls inside regardless of
    its resolution.
    """

    validate_period(month, year)
    start = datetime(year, month, 1)
    if month == 12:
        if year == 9999:
            return start, datetime.max
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)


def shift_month(month: int, year: int, delta: int) -> tuple[int, int]:
    """Move ``delta`` months forward (or backward when negative)."""

    validate_period(month, year)
    index = year * 12 + (month - 1) + delta
    new_year, new_month = divmod(index, 12)
    validate_period(new_month + 1, new_year)
    return new_month + 1, new_year


def is_future_period(month: int, year: int, *, today: date) -> bool:
    """Return True for months after the one containing ``today``."""

    return (year, month) > (today.year, today.month)


def month_name(month: int) -> str:
    validate_period(month, 2000)
    return calendar.month_name[month]
