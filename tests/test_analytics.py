import datetime as dt
from decimal import Decimal

from conftest import make_txn
from finance_tracker import analytics as an
from finance_tracker.config import DEFAULT_CATEGORIES


def test_totals_single_income():
    txns = [make_txn(1, "A", 100, "2024-06-01", "Freelance Work", "income")]
    assert an.totals(txns) == {
        "total_income": Decimal("100"),
        "total_expenses": Decimal("0"),
        "balance": Decimal("100"),
    }


def test_totals_sample_data(sample_txns):
    result = an.totals(sample_txns)
    assert result["total_income"] == Decimal("4500")
    assert result["total_expenses"] == Decimal("501.99")
    assert result["balance"] == result["total_income"] - result["total_expenses"]
    assert result["balance"] == Decimal("3998.01")


def test_totals_empty():
    assert an.totals([]) == {"total_income": 0, "total_expenses": 0, "balance": 0}


def test_monthly_totals_by_prefix(sample_txns):
    assert an.monthly_totals(sample_txns, "2024-06") == {
        "income": Decimal("2500"),
        "expense": Decimal("52.99"),
    }
    assert an.monthly_totals(sample_txns, dt.date(2024, 5, 31)) == {
        "income": Decimal("2000"),
        "expense": Decimal("449"),
    }
    assert an.monthly_totals(sample_txns, "2023-06") == {"income": 0, "expense": 0}


def test_category_breakdown_is_partition(sample_txns):
    rows = an.category_breakdown(sample_txns)
    overall = an.totals(sample_txns)
    assert sum(r["total"] for r in rows) == overall["total_income"] + overall["total_expenses"]
    for row in rows:
        assert row["total"] == row["income"] + row["expense"]


def test_category_breakdown_groups_in_first_appearance_order():
    txns = [
        make_txn(1, "a", 10, "2024-01-01", "Meals", "expense"),
        make_txn(2, "b", 5, "2024-01-02", "Consulting", "income"),
        make_txn(3, "c", 7, "2024-01-03", "Meals", "expense"),
    ]
    rows = an.category_breakdown(txns)
    assert [r["category"] for r in rows] == ["Meals", "Consulting"]
    assert rows[0]["expense"] == Decimal("17")
    assert rows[0]["income"] == 0


def test_category_breakdown_keeps_orphaned_names():
    txns = [
        make_txn(1, "a", 10, "2024-01-01", "Meals", "expense"),
        make_txn(2, "b", 3, "2024-01-01", "Retired Category", "expense"),
    ]
    rows = an.category_breakdown(txns, DEFAULT_CATEGORIES)
    by_name = {r["category"]: r for r in rows}
    assert by_name["Meals"]["color"] == "bg-orange-500"
    assert by_name["Retired Category"]["color"] is None
    assert by_name["Retired Category"]["total"] == Decimal("3")


def test_category_breakdown_sorted_by_total(sample_txns):
    rows = an.category_breakdown(sample_txns, sort_by_total=True)
    totals = [r["total"] for r in rows]
    assert totals == sorted(totals, reverse=True)
    assert rows[0]["category"] == "Freelance Work"


def test_category_breakdown_empty():
    assert an.category_breakdown([]) == []


def test_recent_orders_by_date_with_stable_ties(sample_txns):
    latest = an.recent(sample_txns, 3)
    # ids 1 and 2 share 2024-06-01 and keep store order
    assert [t.id for t in latest] == ["1", "2", "3"]


def test_recent_limits():
    txns = [make_txn(i, "t", 1, "2024-01-0%d" % i, "Meals", "expense") for i in range(1, 4)]
    assert [t.id for t in an.recent(txns, 10)] == ["3", "2", "1"]
    assert an.recent(txns, 0) == []
    assert an.recent([], 5) == []


def test_dashboard_summary(sample_txns):
    summary = an.dashboard_summary(sample_txns, dt.date(2024, 6, 15), DEFAULT_CATEGORIES, recent_limit=2)
    assert summary["balance"] == Decimal("3998.01")
    assert summary["monthly_income"] == Decimal("2500")
    assert summary["monthly_expenses"] == Decimal("52.99")
    assert summary["current_month"] == "2024-06"
    assert len(summary["recent"]) == 2
    assert len(summary["category_breakdown"]) == 6
