import datetime as dt
import itertools
from decimal import Decimal

import pytest

from finance_tracker.config import DEFAULT_CATEGORIES, AppConfig
from finance_tracker.models import Transaction
from finance_tracker.store import TransactionStore


def make_txn(id, title, amount, date, category, type, description=""):
    return Transaction(
        id=str(id),
        title=title,
        amount=Decimal(str(amount)),
        date=dt.date.fromisoformat(date),
        category=category,
        type=type,
        description=description,
    )


@pytest.fixture
def sample_txns():
    return TransactionStore.from_config(AppConfig()).list()


@pytest.fixture
def store():
    counter = itertools.count(100)
    return TransactionStore(DEFAULT_CATEGORIES, id_factory=lambda: f"t{next(counter)}")


@pytest.fixture
def seeded_store():
    counter = itertools.count(100)
    return TransactionStore(
        DEFAULT_CATEGORIES,
        TransactionStore.from_config(AppConfig()).list(),
        id_factory=lambda: f"t{next(counter)}",
    )
