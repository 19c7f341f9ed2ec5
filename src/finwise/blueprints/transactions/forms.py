"""Transaction form validation helpers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Any

from ...constants.categories import DEFAULT_CATALOG, TRANSACTION_TYPES, CategoryCatalog

MIN_AMOUNT = 0.01
MIN_DESCRIPTION_LENGTH = 3
MAX_DESCRIPTION_LENGTH = 255

# Date-only input is stored at midday so no timezone shift moves it to another day.
_DATE_ONLY_TIME = time(12, 0)


@dataclass(slots=True)
class TransactionForm:
    """Represents transaction input prior to validation."""

    type: str = "expense"
    amount: float | None = None
    description: str = ""
    category_id: str = ""
    occurred_at: datetime | None = None
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionForm:
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    @classmethod
    def from_transaction(cls, transaction) -> TransactionForm:
        return cls(
            type=transaction.type,
            amount=transaction.amount,
            description=transaction.description or "",
            category_id=transaction.category_id,
            occurred_at=transaction.occurred_at,
        )

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind incoming mapping data to the form state."""

        keys = ("type", "amount", "description", "category_id", "occurred_at")
        self.raw_data = {}
        for key in keys:
            value = data.get(key)  # type: ignore[arg-type]
            if value is None:
                value_str = ""
            elif isinstance(value, str):
                value_str = value
            else:
                value_str = str(value)
            self.raw_data[key] = value_str.strip()

        self.type = self.raw_data["type"] or "expense"
        self.description = self.raw_data["description"]
        self.category_id = self.raw_data["category_id"]

    def validate(self, catalog: CategoryCatalog = DEFAULT_CATALOG) -> bool:
        """Validate the bound data and populate typed attributes."""

        self.errors.clear()

        if self.type not in TRANSACTION_TYPES:
            self._add_error("type", "Choose income or expense.")

        amount_raw = self.raw_data.get("amount", "")
        self.amount = None
        if not amount_raw:
            self._add_error("amount", "Amount is required.")
        else:
            try:
                parsed_amount = float(amount_raw.replace(",", "."))
            except ValueError:
                self._add_error("amount", "Enter a valid number for the amount.")
            else:
                if parsed_amount != parsed_amount or parsed_amount in (float("inf"), float("-inf")):
                    self._add_error("amount", "Enter a valid number for the amount.")
                elif parsed_amount < MIN_AMOUNT:
                    self._add_error("amount", f"Amount must be at least {MIN_AMOUNT:.2f}.")
                else:
                    self.amount = round(parsed_amount, 2)

        if len(self.description) < MIN_DESCRIPTION_LENGTH:
            self._add_error(
                "description",
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters.",
            )
        elif len(self.description) > MAX_DESCRIPTION_LENGTH:
            self._add_error(
                "description",
                f"Description must be {MAX_DESCRIPTION_LENGTH} characters or fewer.",
            )

        category = catalog.lookup(self.category_id or None)
        if category is None:
            self._add_error("category_id", "Choose a category.")
        elif self.type in TRANSACTION_TYPES and category.type != self.type:
            self._add_error("category_id", f"Choose an {self.type} category.")

        occurred_raw = self.raw_data.get("occurred_at", "")
        self.occurred_at = None
        if not occurred_raw:
            self._add_error("occurred_at", "Date is required.")
        else:
            try:
                if len(occurred_raw) == 10:
                    parsed = datetime.strptime(occurred_raw, "%Y-%m-%d")
                    self.occurred_at = datetime.combine(parsed.date(), _DATE_ONLY_TIME)
                else:
                    # Offsets are dropped; the wall-clock time is what gets stored.
                    self.occurred_at = datetime.fromisoformat(occurred_raw).replace(tzinfo=None)
            except ValueError:
                self._add_error("occurred_at", "Enter a valid date (YYYY-MM-DD).")

        return not self.errors

    def values(self) -> dict[str, Any]:
        """Return validated fields ready for the store."""

        return {
            "type": self.type,
            "amount": self.amount,
            "description": self.description,
            "category_id": self.category_id,
            "occurred_at": self.occurred_at,
        }

    def html_values(self) -> dict[str, str]:
        """Convert the form into HTML-friendly string values, preferring what was typed."""

        if self.raw_data:
            return dict(self.raw_data, type=self.type)
        return {
            "type": self.type,
            "amount": f"{self.amount:.2f}" if self.amount is not None else "",
            "description": self.description,
            "category_id": self.category_id,
            "occurred_at": self.occurred_at.strftime("%Y-%m-%d") if self.occurred_at else "",
        }

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)
