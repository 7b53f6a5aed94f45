"""In-memory transaction store.

The store is the single owner of the transaction list and the category
catalog. Every derived view (totals, breakdowns, reports) is recomputed from
``TransactionStore.list()``; nothing derived is cached here.
"""

from __future__ import annotations

import uuid
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from .config import SAMPLE_TRANSACTIONS, AppConfig
from .logging_setup import get_logger
from .models import (
    MAX_AMOUNT,
    TRANSACTION_TYPES,
    Category,
    Transaction,
    TransactionInput,
    normalize_amount,
    parse_date,
    to_decimal,
)

log = get_logger(__name__)


class TransactionValidationError(ValueError):
    """Raised when a new transaction is rejected. ``errors`` lists every problem."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _new_id() -> str:
    return uuid.uuid4().hex


class TransactionStore:
    def __init__(
        self,
        categories: Iterable[Category],
        transactions: Iterable[Transaction] = (),
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self._categories = tuple(categories)
        self._by_name: Dict[str, Category] = {c.name: c for c in self._categories}
        self._transactions: List[Transaction] = list(transactions)
        # Every id handed out so far, removed ones included
        self._issued = {t.id for t in self._transactions}
        self._id_factory = id_factory or _new_id

    @classmethod
    def from_config(cls, cfg: AppConfig) -> "TransactionStore":
        seed: List[Transaction] = []
        if cfg.seed_sample_data:
            seed = [_sample_to_transaction(row) for row in SAMPLE_TRANSACTIONS]
        return cls(cfg.categories, seed)

    def __len__(self) -> int:
        return len(self._transactions)

    def list(self) -> List[Transaction]:
        return list(self._transactions)

    def categories(self) -> List[Category]:
        return list(self._categories)

    def categories_for(self, txn_type: str) -> List[Category]:
        return [c for c in self._categories if c.accepts(txn_type)]

    def category(self, name: str) -> Optional[Category]:
        return self._by_name.get(name)

    def get(self, txn_id: str) -> Optional[Transaction]:
        for txn in self._transactions:
            if txn.id == txn_id:
                return txn
        return None

    def add(self, data: Union[TransactionInput, Mapping]) -> Transaction:
        """Validate ``data`` and insert the new transaction at the head of the list."""
        if not isinstance(data, TransactionInput):
            data = TransactionInput.from_mapping(data)
        try:
            txn = self._build(data)
        except TransactionValidationError as exc:
            log.info("transaction_rejected", errors=exc.errors)
            raise
        self._transactions.insert(0, txn)
        log.info(
            "transaction_added",
            id=txn.id,
            type=txn.type,
            category=txn.category,
            amount=str(txn.amount),
        )
        return txn

    def remove(self, txn_id: str) -> bool:
        for idx, txn in enumerate(self._transactions):
            if txn.id == txn_id:
                del self._transactions[idx]
                log.info("transaction_removed", id=txn_id)
                return True
        log.debug("transaction_remove_missed", id=txn_id)
        return False

    def _build(self, data: TransactionInput) -> Transaction:
        errors: List[str] = []

        title = str(data.title or "").strip()
        if not title:
            errors.append("Title is required.")

        amount = None
        if data.amount is None or str(data.amount).strip() == "":
            errors.append("Amount is required.")
        else:
            try:
                amount = to_decimal(data.amount)
            except ValueError:
                errors.append("Amount must be a valid number.")
            else:
                if amount <= 0:
                    errors.append("Amount must be greater than zero.")
                    amount = None
                elif amount >= MAX_AMOUNT:
                    errors.append("Amount must be less than 1,000,000,000,000,000.")
                    amount = None
                else:
                    try:
                        amount = normalize_amount(amount)
                    except ValueError:
                        errors.append("Amount must have at most two decimal places.")
                        amount = None

        date_value = None
        if data.date in (None, ""):
            errors.append("Date is required.")
        else:
            try:
                date_value = parse_date(data.date)
            except ValueError:
                errors.append("Date must be in YYYY-MM-DD format.")

        txn_type = str(data.type or "").strip().lower()
        if txn_type not in TRANSACTION_TYPES:
            errors.append("Type must be 'income' or 'expense'.")

        category_name = str(data.category or "").strip()
        if not category_name:
            errors.append("Category is required.")
        else:
            category = self._by_name.get(category_name)
            if category is None:
                errors.append(f"Unknown category: {category_name}.")
            elif txn_type in TRANSACTION_TYPES and not category.accepts(txn_type):
                errors.append(f"Category {category_name} cannot be used for {txn_type} transactions.")

        if errors:
            raise TransactionValidationError(errors)

        return Transaction(
            id=self._unique_id(),
            title=title,
            amount=amount,
            date=date_value,
            category=category_name,
            type=txn_type,
            description=str(data.description or "").strip(),
        )

    def _unique_id(self) -> str:
        txn_id = self._id_factory()
        while txn_id in self._issued:
            txn_id = self._id_factory()
        self._issued.add(txn_id)
        return txn_id


def _sample_to_transaction(row: Mapping[str, str]) -> Transaction:
    return Transaction(
        id=row["id"],
        title=row["title"],
        amount=to_decimal(row["amount"]),
        date=parse_date(row["date"]),
        category=row["category"],
        type=row["type"],
        description=row.get("description", ""),
    )
