"""Aggregation calculations.

Functions that compute totals and breakdowns from a sequence of transactions.
All of them are pure: the same input always yields the same output, and an
empty input yields zero totals or empty lists.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Union

from .models import EXPENSE, INCOME, Category, Transaction

ZERO = Decimal("0")


def month_key(d: dt.date) -> str:
    return f"{d.year:04d}-{d.month:02d}"


def _sum(txns: Iterable[Transaction], txn_type: str) -> Decimal:
    return sum((t.amount for t in txns if t.type == txn_type), ZERO)


def totals(txns: Iterable[Transaction]) -> Dict[str, Decimal]:
    txns = list(txns)
    income = _sum(txns, INCOME)
    expense = _sum(txns, EXPENSE)
    return {"total_income": income, "total_expenses": expense, "balance": income - expense}


def monthly_totals(txns: Iterable[Transaction], year_month: Union[str, dt.date]) -> Dict[str, Decimal]:
    """Income and expense for one calendar month, matched on the ``YYYY-MM`` date prefix."""
    prefix = month_key(year_month) if isinstance(year_month, dt.date) else str(year_month)
    in_month = [t for t in txns if t.iso_date.startswith(prefix)]
    return {"income": _sum(in_month, INCOME), "expense": _sum(in_month, EXPENSE)}


def category_breakdown(
    txns: Iterable[Transaction],
    catalog: Optional[Sequence[Category]] = None,
    sort_by_total: bool = False,
) -> List[Dict]:
    """Group by category name and sum income and expense per group.

    Rows come out in first-appearance order. Names missing from ``catalog``
    still get a row, with ``color`` set to ``None``.
    """

    colors = {c.name: c.color for c in catalog or ()}
    groups: Dict[str, Dict[str, Decimal]] = {}
    for t in txns:
        sums = groups.setdefault(t.category, {INCOME: ZERO, EXPENSE: ZERO})
        sums[t.type] += t.amount

    rows = [
        {
            "category": name,
            "income": sums[INCOME],
            "expense": sums[EXPENSE],
            "total": sums[INCOME] + sums[EXPENSE],
            "color": colors.get(name),
        }
        for name, sums in groups.items()
    ]
    if sort_by_total:
        rows.sort(key=lambda row: row["total"], reverse=True)
    return rows


def recent(txns: Iterable[Transaction], n: int = 5) -> List[Transaction]:
    """Latest ``n`` transactions by date; equal dates keep their store order."""
    if n <= 0:
        return []
    return sorted(txns, key=lambda t: t.date, reverse=True)[:n]


def dashboard_summary(
    txns: Sequence[Transaction],
    today: dt.date,
    catalog: Optional[Sequence[Category]] = None,
    recent_limit: int = 5,
) -> Dict:
    overall = totals(txns)
    this_month = monthly_totals(txns, today)
    return {
        **overall,
        "monthly_income": this_month["income"],
        "monthly_expenses": this_month["expense"],
        "current_month": month_key(today),
        "category_breakdown": category_breakdown(txns, catalog),
        "recent": recent(txns, recent_limit),
    }
