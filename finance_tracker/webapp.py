"""Flask JSON API for the Personal Finance Tracker."""

from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Callable, Dict, Optional

from flask import Flask, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from . import analytics as an
from . import queries as q
from .config import AppConfig
from .logging_setup import configure_logging, get_logger
from .models import TRANSACTION_TYPES
from .reports import build_report, export_filename, to_delimited_text
from .store import TransactionStore, TransactionValidationError

PACKAGE_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_ROOT.parent

STORE_KEY = "transaction_store"

log = get_logger(__name__)


def _store() -> TransactionStore:
    return current_app.extensions[STORE_KEY]


def _today() -> dt.date:
    return current_app.config["TODAY"]()


def _parse_filters(data) -> q.TransactionFilter:
    return q.TransactionFilter(
        search_term=(data.get("search") or "").strip(),
        category=data.get("category") or q.ALL,
        type=data.get("type") or q.ALL,
    )


def _parse_period(data) -> Dict[str, Optional[str]]:
    period = data.get("period") or q.PERIOD_ALL
    year = data.get("year") or None
    if period == q.PERIOD_SPECIFIC_YEAR and year is None:
        year = str(_today().year)
    return {"period": period, "year": year}


def _serialize_report(report: Dict) -> Dict:
    payload = dict(report)
    payload["transactions"] = [t.to_dict() for t in report["transactions"]]
    return payload


def _resolve_config_path(config_path: Optional[str]) -> Optional[Path]:
    if not config_path:
        return None
    path = Path(config_path)
    if path.is_absolute():
        return path
    return PROJECT_ROOT / path


def create_app(
    config_path: Optional[str] = None,
    store: Optional[TransactionStore] = None,
    today: Optional[Callable[[], dt.date]] = None,
) -> Flask:
    cfg = AppConfig.load(_resolve_config_path(config_path))
    configure_logging(cfg.log_level)

    app = Flask(__name__)
    app.config["TODAY"] = today or dt.date.today
    app.config["RECENT_LIMIT"] = cfg.recent_limit
    app.extensions[STORE_KEY] = store if store is not None else TransactionStore.from_config(cfg)

    @app.errorhandler(TransactionValidationError)
    def handle_validation_error(exc: TransactionValidationError):
        return jsonify({"errors": exc.errors}), 400

    @app.errorhandler(ValueError)
    def handle_bad_value(exc: ValueError):
        log.info("bad_request", path=request.path, error=str(exc))
        return jsonify({"errors": [str(exc)]}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"errors": [exc.description]}), exc.code

    @app.route("/api/categories")
    def api_categories():
        txn_type = request.args.get("type")
        if txn_type in TRANSACTION_TYPES:
            categories = _store().categories_for(txn_type)
        else:
            categories = _store().categories()
        return jsonify({"categories": [c.to_dict() for c in categories]})

    @app.route("/api/transactions", methods=["GET"])
    def api_list_transactions():
        transactions = _store().list()
        shown = q.query_transactions(
            transactions,
            _parse_filters(request.args),
            field=request.args.get("sort") or "date",
            order=request.args.get("order") or "desc",
        )
        return jsonify(
            {
                "transactions": [t.to_dict() for t in shown],
                "shown": len(shown),
                "total": len(transactions),
            }
        )

    @app.route("/api/transactions", methods=["POST"])
    def api_add_transaction():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"errors": ["Request body must be a JSON object."]}), 400
        txn = _store().add(data)
        return jsonify(txn.to_dict()), 201

    @app.route("/api/transactions/<txn_id>", methods=["DELETE"])
    def api_delete_transaction(txn_id: str):
        return jsonify({"removed": _store().remove(txn_id)})

    @app.route("/api/dashboard")
    def api_dashboard():
        store = _store()
        summary = an.dashboard_summary(
            store.list(),
            _today(),
            catalog=store.categories(),
            recent_limit=app.config["RECENT_LIMIT"],
        )
        summary["recent"] = [t.to_dict() for t in summary["recent"]]
        return jsonify(summary)

    @app.route("/api/reports")
    def api_reports():
        store = _store()
        params = _parse_period(request.args)
        report = build_report(
            store.list(), params["period"], _today(), params["year"], catalog=store.categories()
        )
        return jsonify(_serialize_report(report))

    @app.route("/api/reports/export")
    def api_export_report():
        params = _parse_period(request.args)
        scoped = q.scope_to_period(_store().list(), params["period"], _today(), params["year"])
        filename = export_filename(params["period"])
        log.info("report_exported", period=params["period"], rows=len(scoped))
        return Response(
            to_delimited_text(scoped),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
