"""
Centralized category definitions for transaction forms, listings and analysis.

Transactions reference these entries by ``id``; ids without an entry are treated as
unknown by the analysis engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

TRANSACTION_TYPES = ("income", "expense")

FALLBACK_ICON = "category"
FALLBACK_COLOR = "#64748b"


@dataclass(frozen=True, slots=True)
class Category:
    """Display metadata for one transaction category."""

    id: str
    name: str
    icon: str
    type: str
    color: str


# Income categories
INCOME_CATEGORIES = (
    Category("salary", "Salary", "work", "income", "#10b981"),
    Category("freelance", "Freelance", "computer", "income", "#3b82f6"),
    Category("investment", "Investments", "trending_up", "income", "#8b5cf6"),
    Category("other_income", "Other", "attach_money", "income", "#06b6d4"),
)

# Expense categories
EXPENSE_CATEGORIES = (
    Category("food", "Food", "restaurant", "expense", "#ef4444"),
    Category("transport", "Transport", "directions_car", "expense", "#f97316"),
    Category("shopping", "Shopping", "shopping_bag", "expense", "#ec4899"),
    Category("bills", "Bills", "receipt", "expense", "#8b5cf6"),
    Category("health", "Health", "local_hospital", "expense", "#06b6d4"),
    Category("entertainment", "Entertainment", "movie", "expense", "#f59e0b"),
    Category("education", "Education", "school", "expense", "#10b981"),
    Category("other_expense", "Other", "more_horiz", "expense", "#6b7280"),
)


class CategoryCatalog:
    """Read-only mapping from category id to display metadata."""

    def __init__(self, categories: Iterable[Category]):
        self._by_id: dict[str, Category] = {}
        for category in categories:
            if category.type not in TRANSACTION_TYPES:
                raise ValueError(f"Invalid category type: {category.type}")
            if category.id in self._by_id:
                raise ValueError(f"Duplicate category id: {category.id}")
            self._by_id[category.id] = category

    def __iter__(self) -> Iterator[Category]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def lookup(self, category_id: str | None) -> Optional[Category]:
        """Return the category for ``category_id`` or None when it is not catalogued."""

        if category_id is None:
            return None
        return self._by_id.get(category_id)

    def describe(self, category_id: str | None) -> Category:
        """Return display metadata, falling back to a neutral placeholder for unknown ids."""

        found = self.lookup(category_id)
        if found is not None:
            return found
        return Category(
            id=category_id or "",
            name=(category_id or "Uncategorized").replace("_", " ").title(),
            icon=FALLBACK_ICON,
            type="expense",
            color=FALLBACK_COLOR,
        )

    def for_type(self, txn_type: str | None = None) -> list[Category]:
        """Return categories of one type, or all of them when ``txn_type`` is None."""

        if txn_type is None:
            return list(self._by_id.values())
        return [category for category in self._by_id.values() if category.type == txn_type]

    def ids(self) -> list[str]:
        return list(self._by_id)


DEFAULT_CATALOG = CategoryCatalog(INCOME_CATEGORIES + EXPENSE_CATEGORIES)
