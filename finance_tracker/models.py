"""Domain models for the Personal Finance Tracker.

Transactions and categories are plain dataclasses held in memory by the
transaction store. Amounts are ``Decimal`` so that sums stay exact.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional, Union

INCOME = "income"
EXPENSE = "expense"
BOTH = "both"

TRANSACTION_TYPES = (INCOME, EXPENSE)
CATEGORY_TYPES = (INCOME, EXPENSE, BOTH)

Number = Union[int, float, str, Decimal]

CENT = Decimal("0.01")
# Exclusive upper bound for one amount; sums must fit the 28-digit decimal context
MAX_AMOUNT = Decimal("1e15")


def to_decimal(value: Number) -> Decimal:
    """Convert a raw amount into a finite ``Decimal``.

    Floats go through ``str`` so ``52.99`` stays ``Decimal("52.99")``.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount


def normalize_amount(amount: Decimal) -> Decimal:
    """Drop exponents and extra zero cents: ``1E+2`` -> ``100``, ``1.000`` -> ``1.00``.

    Raises ``ValueError`` when the amount has sub-cent digits. Callers bound the
    magnitude first (see ``MAX_AMOUNT``) so the quantize stays exact.
    """
    exponent = amount.as_tuple().exponent
    if exponent > 0:
        return amount.quantize(Decimal(1))
    if exponent < -2:
        cents = amount.quantize(CENT)
        if cents != amount:
            raise ValueError(f"Amount has more than two decimal places: {amount}")
        return cents
    return amount


def parse_date(value: Union[str, dt.date]) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    try:
        return dt.datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValueError(f"Unrecognized date format: {value}") from exc


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
    type: str = BOTH

    def accepts(self, txn_type: str) -> bool:
        return self.type == txn_type or self.type == BOTH

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "color": self.color, "type": self.type}


@dataclass(frozen=True)
class Transaction:
    id: str
    title: str
    amount: Decimal  # always positive, direction comes from ``type``
    date: dt.date
    category: str
    type: str
    description: str = ""

    @property
    def iso_date(self) -> str:
        return self.date.isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "amount": self.amount,
            "date": self.iso_date,
            "category": self.category,
            "type": self.type,
            "description": self.description,
        }


@dataclass
class TransactionInput:
    """Unvalidated payload for a new transaction, as collected by a form."""

    title: Any = ""
    amount: Any = None
    date: Any = None
    category: Any = ""
    type: Any = EXPENSE
    description: Optional[str] = field(default="")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TransactionInput":
        return cls(
            title=data.get("title", ""),
            amount=data.get("amount"),
            date=data.get("date"),
            category=data.get("category", ""),
            type=data.get("type", EXPENSE),
            description=data.get("description") or "",
        )
