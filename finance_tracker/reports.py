"""Reporting utilities.

Builds period reports from transactions, formats them as human-readable text
and JSON-serializable dicts, and exports transaction lists as CSV.
"""

from __future__ import annotations

import csv
import datetime as dt
import io
import json
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, IO, Iterable, List, Optional, Sequence, Union

from . import analytics as an
from . import queries as q
from .models import Category, Transaction


DEFAULT_COLUMNS = ("Title", "Amount", "Date", "Category", "Type", "Description")

_COLUMN_VALUES: Dict[str, Callable[[Transaction], str]] = {
    "Id": lambda t: t.id,
    "Title": lambda t: t.title,
    "Amount": lambda t: format(t.amount, "f"),
    "Date": lambda t: t.iso_date,
    "Category": lambda t: t.category,
    "Type": lambda t: t.type,
    "Description": lambda t: t.description or "",
}


def to_delimited_text(
    txns: Iterable[Transaction],
    columns: Sequence[str] = DEFAULT_COLUMNS,
    delimiter: str = ",",
) -> str:
    """Render a header row plus one row per transaction, in the given order.

    Fields holding the delimiter, a quote or a line break are quoted and
    inner quotes doubled. Rows are joined by ``\\n`` with no trailing newline.
    """

    unknown = [c for c in columns if c not in _COLUMN_VALUES]
    if unknown:
        raise ValueError(f"Unknown export column(s): {', '.join(unknown)}")

    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(columns)
    for t in txns:
        writer.writerow([_COLUMN_VALUES[c](t) for c in columns])
    return buf.getvalue()[:-1]


def export_filename(period: str, now: Optional[dt.datetime] = None) -> str:
    now = now or dt.datetime.now(dt.timezone.utc)
    return f"report-{period}-{int(now.timestamp() * 1000)}.csv"


def _ensure_text_writer(target: str | Path | IO[str]):
    if hasattr(target, "write"):
        return target, None
    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = path.open("w", newline="", encoding="utf-8")
    return handle, handle


def write_report(text: str, target: str | Path | IO[str]) -> None:
    writer_target, to_close = _ensure_text_writer(target)
    try:
        writer_target.write(text)
    finally:
        if to_close is not None:
            to_close.close()


def build_report(
    txns: Iterable[Transaction],
    period: str,
    today: dt.date,
    year: Union[int, str, None] = None,
    catalog: Optional[Sequence[Category]] = None,
    all_txns: Optional[Iterable[Transaction]] = None,
) -> Dict:
    """Assemble the reports view for one period.

    The monthly series is only filled for yearly periods. ``available_years``
    comes from ``all_txns`` when given, so a pre-filtered ``txns`` still lists
    every year in the store.
    """

    txns = list(txns)
    scoped = q.scope_to_period(txns, period, today, year)
    overall = an.totals(scoped)

    series: List[Dict] = []
    if period == q.PERIOD_CURRENT_YEAR:
        series = q.monthly_series(scoped, today.year)
    elif period == q.PERIOD_SPECIFIC_YEAR:
        series = q.monthly_series(scoped, year)

    return {
        "period": period,
        "year": str(year) if period == q.PERIOD_SPECIFIC_YEAR else None,
        "transactions": scoped,
        "summary": {
            "total_income": overall["total_income"],
            "total_expenses": overall["total_expenses"],
            "net_income": overall["balance"],
            "transaction_count": len(scoped),
        },
        "category_breakdown": an.category_breakdown(scoped, catalog, sort_by_total=True),
        "monthly": series,
        "available_years": q.available_years(txns if all_txns is None else all_txns),
    }


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def format_text_report(report: Dict) -> str:
    lines: List[str] = []
    s = report["summary"]
    title = report["period"] if not report.get("year") else f"{report['period']} {report['year']}"
    lines.append(f"=== Finance Report ({title}) ===")
    lines.append(f"Income:       {_money(s['total_income'])}")
    lines.append(f"Expenses:     {_money(s['total_expenses'])}")
    lines.append(f"Net:          {_money(s['net_income'])}")
    lines.append(f"Transactions: {s['transaction_count']}")
    lines.append("")

    lines.append("-- By Category --")
    for row in report["category_breakdown"]:
        lines.append(
            f"{row['category'][:20]:20} Inc {_money(row['income'])}  Exp {_money(row['expense'])}"
        )
    lines.append("")

    if report["monthly"]:
        lines.append("-- Monthly Trend --")
        for m in report["monthly"]:
            lines.append(
                f"{m['month']} | Inc {_money(m['income'])}  Exp {_money(m['expense'])}  Net {_money(m['net'])}"
            )
        lines.append("")

    lines.append("-- Transactions --")
    for t in report["transactions"]:
        sign = "+" if t.type == "income" else "-"
        lines.append(f"{t.iso_date}  {t.title[:40]:40} {sign}{_money(t.amount)}")
    return "\n".join(lines)


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Transaction):
        return value.to_dict()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def save_json(report: Dict, path: str | Path | IO[str]) -> None:
    writer_target, to_close = _ensure_text_writer(path)
    try:
        json.dump(report, writer_target, indent=2, default=_json_default)
        writer_target.write("\n")
    finally:
        if to_close is not None:
            to_close.close()
