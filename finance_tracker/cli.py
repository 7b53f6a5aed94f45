"""Command-line interface for the Personal Finance Tracker.

Usage:
  python -m finance_tracker.cli --period current-year --export out/report.csv

The store is in-memory and seeded from the configuration, so the CLI reports
on the configured sample data.
"""

from __future__ import annotations

import argparse
import datetime as dt
from typing import List, Optional

from . import queries as q
from .config import AppConfig
from .logging_setup import configure_logging, get_logger
from .reports import build_report, format_text_report, save_json, to_delimited_text, write_report
from .store import TransactionStore

log = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Personal Finance Tracker")
    p.add_argument("--config", "-c", help="Path to JSON config with categories/settings")
    p.add_argument("--period", "-p", choices=q.PERIODS, default=q.PERIOD_ALL, help="Report period")
    p.add_argument("--year", "-y", help="Year for the specific-year period (YYYY)")
    p.add_argument("--today", type=_parse_date, help="Override today's date (YYYY-MM-DD)")
    p.add_argument("--search", "-s", default="", help="Only include titles/descriptions containing this text")
    p.add_argument("--category", default=q.ALL, help="Only include this category")
    p.add_argument("--type", dest="txn_type", choices=(q.ALL, "income", "expense"), default=q.ALL)
    p.add_argument("--export", dest="csv_out", help="Write the report transactions as CSV to path")
    p.add_argument("--json", dest="json_out", help="Write report JSON to path")
    return p.parse_args(argv)


def _parse_date(d: str) -> dt.date:
    try:
        return dt.date.fromisoformat(d)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid date (expected YYYY-MM-DD): {d}") from exc


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    cfg = AppConfig.load(args.config)
    configure_logging(cfg.log_level)
    store = TransactionStore.from_config(cfg)
    today = args.today or dt.date.today()

    criteria = q.TransactionFilter(search_term=args.search, category=args.category, type=args.txn_type)
    txns = q.filter_transactions(store.list(), criteria)

    try:
        report = build_report(
            txns, args.period, today, args.year, catalog=store.categories(), all_txns=store.list()
        )
    except ValueError as exc:
        print(f"error: {exc}")
        return 2
    print(format_text_report(report))

    if args.csv_out:
        write_report(to_delimited_text(report["transactions"]), args.csv_out)
        log.info("report_exported", path=args.csv_out, rows=len(report["transactions"]))
        print(f"\nSaved CSV report to: {args.csv_out}")
    if args.json_out:
        save_json(report, args.json_out)
        print(f"\nSaved JSON report to: {args.json_out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
