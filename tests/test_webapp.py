import datetime as dt
import itertools

import pytest

from finance_tracker.config import AppConfig
from finance_tracker.store import TransactionStore
from finance_tracker.webapp import STORE_KEY, create_app


@pytest.fixture
def app():
    counter = itertools.count(1)
    store = TransactionStore(
        AppConfig().categories,
        TransactionStore.from_config(AppConfig()).list(),
        id_factory=lambda: f"new{next(counter)}",
    )
    return create_app(store=store, today=lambda: dt.date(2024, 6, 15))


@pytest.fixture
def client(app):
    return app.test_client()


def test_default_app_is_seeded():
    app = create_app(today=lambda: dt.date(2024, 6, 15))
    assert len(app.extensions[STORE_KEY]) == 6


def test_list_categories(client):
    data = client.get("/api/categories").get_json()
    assert len(data["categories"]) == 8
    income = client.get("/api/categories?type=income").get_json()["categories"]
    assert [c["name"] for c in income] == ["Freelance Work", "Consulting", "Product Sales"]


def test_list_transactions_default_sort(client):
    data = client.get("/api/transactions").get_json()
    assert data["total"] == 6
    assert data["shown"] == 6
    assert [t["id"] for t in data["transactions"]] == ["1", "2", "3", "4", "5", "6"]
    assert data["transactions"][1]["amount"] == "52.99"


def test_list_transactions_filter_and_sort(client):
    resp = client.get("/api/transactions?type=expense&sort=amount&order=asc")
    data = resp.get_json()
    assert [t["title"] for t in data["transactions"]] == [
        "Adobe Creative Suite",
        "Google Ads",
        "Office Chair",
    ]
    assert data["total"] == 6
    search = client.get("/api/transactions?search=WEB").get_json()
    assert [t["id"] for t in search["transactions"]] == ["1"]


def test_list_transactions_bad_sort(client):
    resp = client.get("/api/transactions?sort=color")
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["Unknown sort field: color"]


def test_add_and_delete_transaction(client):
    resp = client.post(
        "/api/transactions",
        json={"title": "B", "amount": 50, "date": "2024-06-02", "category": "Software", "type": "expense"},
    )
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["id"] == "new1"
    assert created["amount"] == "50"

    listing = client.get("/api/transactions").get_json()
    assert listing["total"] == 7

    assert client.delete("/api/transactions/new1").get_json() == {"removed": True}
    assert client.delete("/api/transactions/new1").get_json() == {"removed": False}
    assert client.get("/api/transactions").get_json()["total"] == 6


def test_add_transaction_validation_errors(client):
    resp = client.post(
        "/api/transactions",
        json={"title": "", "amount": "-3", "date": "2024-06-02", "category": "Software", "type": "expense"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["Title is required.", "Amount must be greater than zero."]
    assert client.get("/api/transactions").get_json()["total"] == 6


def test_add_transaction_requires_json_object(client):
    resp = client.post("/api/transactions", data="nope", content_type="text/plain")
    assert resp.status_code == 400


def test_dashboard(client):
    data = client.get("/api/dashboard").get_json()
    assert data["total_income"] == "4500"
    assert data["total_expenses"] == "501.99"
    assert data["balance"] == "3998.01"
    assert data["monthly_income"] == "2500"
    assert data["monthly_expenses"] == "52.99"
    assert len(data["recent"]) == 5
    assert data["recent"][0]["title"] == "Website Development Project"


def test_reports(client):
    data = client.get("/api/reports?period=specific-year&year=2024").get_json()
    assert data["summary"]["transaction_count"] == 6
    assert len(data["monthly"]) == 12
    assert data["available_years"] == ["2024"]

    empty = client.get("/api/reports?period=specific-year&year=2023").get_json()
    assert empty["transactions"] == []

    month = client.get("/api/reports?period=current-month").get_json()
    assert month["summary"]["transaction_count"] == 2
    assert month["monthly"] == []


def test_reports_bad_period(client):
    resp = client.get("/api/reports?period=fortnight")
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["Unknown period: fortnight"]


def test_export(client):
    resp = client.get("/api/reports/export?period=current-month")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment; filename=report-current-month-" in resp.headers["Content-Disposition"]
    lines = resp.get_data(as_text=True).split("\n")
    assert lines[0] == "Title,Amount,Date,Category,Type,Description"
    assert len(lines) == 3


def test_unknown_route_returns_json(client):
    resp = client.get("/api/nothing")
    assert resp.status_code == 404
    assert "errors" in resp.get_json()


def test_add_transaction_normalizes_exponent_amount(client):
    resp = client.post(
        "/api/transactions",
        json={"title": "B", "amount": "1e2", "date": "2024-06-02", "category": "Software", "type": "expense"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["amount"] == "100"


def test_add_transaction_rejects_huge_amount(client):
    resp = client.post(
        "/api/transactions",
        json={"title": "B", "amount": "1e999999999", "date": "2024-06-02", "category": "Software", "type": "expense"},
    )
    assert resp.status_code == 400
    assert resp.get_json()["errors"] == ["Amount must be less than 1,000,000,000,000,000."]
    export = client.get("/api/reports/export").get_data(as_text=True)
    assert len(export.split("\n")) == 7
