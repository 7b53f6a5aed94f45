"""Search, filter, sort and period scoping over transaction lists.

Query state (search term, filters, selected period) belongs to the caller and
is passed in explicitly. The current date is injected as ``today`` so period
scoping stays deterministic.
"""

from __future__ import annotations

import calendar
import datetime as dt
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .analytics import monthly_totals
from .models import Transaction

ALL = "all"

PERIOD_ALL = "all"
PERIOD_CURRENT_MONTH = "current-month"
PERIOD_CURRENT_YEAR = "current-year"
PERIOD_SPECIFIC_YEAR = "specific-year"
PERIODS = (PERIOD_ALL, PERIOD_CURRENT_MONTH, PERIOD_CURRENT_YEAR, PERIOD_SPECIFIC_YEAR)

SORT_FIELDS = ("date", "amount", "title")
SORT_ORDERS = ("asc", "desc")

_SORT_KEYS = {
    "date": lambda t: t.date,
    "amount": lambda t: t.amount,
    "title": lambda t: t.title.lower(),
}


@dataclass(frozen=True)
class TransactionFilter:
    search_term: str = ""
    category: str = ALL
    type: str = ALL


def _matches(txn: Transaction, criteria: TransactionFilter) -> bool:
    term = (criteria.search_term or "").lower()
    if term and term not in txn.title.lower() and term not in (txn.description or "").lower():
        return False
    if criteria.category not in (ALL, "", None) and txn.category != criteria.category:
        return False
    if criteria.type not in (ALL, "", None) and txn.type != criteria.type:
        return False
    return True


def filter_transactions(txns: Iterable[Transaction], criteria: Optional[TransactionFilter] = None) -> List[Transaction]:
    criteria = criteria or TransactionFilter()
    return [t for t in txns if _matches(t, criteria)]


def sort_transactions(txns: Iterable[Transaction], field: str = "date", order: str = "desc") -> List[Transaction]:
    """Stable sort by ``date``, ``amount`` or ``title`` (case-insensitive)."""
    if field not in _SORT_KEYS:
        raise ValueError(f"Unknown sort field: {field}")
    if order not in SORT_ORDERS:
        raise ValueError(f"Unknown sort order: {order}")
    return sorted(txns, key=_SORT_KEYS[field], reverse=order == "desc")


def query_transactions(
    txns: Iterable[Transaction],
    criteria: Optional[TransactionFilter] = None,
    field: str = "date",
    order: str = "desc",
) -> List[Transaction]:
    return sort_transactions(filter_transactions(txns, criteria), field, order)


def _normalize_year(year: Union[int, str, None]) -> int:
    if year is None or str(year).strip() == "":
        raise ValueError("A year is required for the specific-year period.")
    text = str(year).strip()
    if not text.isdigit() or len(text) != 4:
        raise ValueError(f"Invalid year: {year}")
    return int(text)


def scope_to_period(
    txns: Iterable[Transaction],
    period: str,
    today: dt.date,
    year: Union[int, str, None] = None,
) -> List[Transaction]:
    if period == PERIOD_ALL:
        return list(txns)
    if period == PERIOD_CURRENT_MONTH:
        prefix = f"{today.year:04d}-{today.month:02d}"
    elif period == PERIOD_CURRENT_YEAR:
        prefix = f"{today.year:04d}"
    elif period == PERIOD_SPECIFIC_YEAR:
        prefix = f"{_normalize_year(year):04d}"
    else:
        raise ValueError(f"Unknown period: {period}")
    return [t for t in txns if t.iso_date.startswith(prefix)]


def monthly_series(txns: Sequence[Transaction], year: Union[int, str]) -> List[Dict]:
    """Twelve rows, January through December, zero-filled for quiet months."""
    year = _normalize_year(year)
    txns = list(txns)
    series: List[Dict] = []
    for month in range(1, 13):
        ym = f"{year:04d}-{month:02d}"
        sums = monthly_totals(txns, ym)
        series.append(
            {
                "month": calendar.month_abbr[month],
                "year_month": ym,
                "income": sums["income"],
                "expense": sums["expense"],
                "net": sums["income"] - sums["expense"],
            }
        )
    return series


def available_years(txns: Iterable[Transaction]) -> List[str]:
    return sorted({t.iso_date[:4] for t in txns}, reverse=True)
