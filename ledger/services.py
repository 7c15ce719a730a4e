"""Framework-agnostic ledger service: the in-memory transaction collection."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import uuid4

from .exceptions import PersistenceError, RecordNotFoundError
from .models import LedgerSummary, MonthlyTotals, Transaction, TransactionFields, TransactionType
from .storage import TransactionRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
RECENT_DEFAULT = 5


class LedgerStore:
    """Owns the ordered transaction list and mirrors it to a repository.

    Every successful mutation is followed by a best-effort save. A rejected
    write is logged and kept in ``last_save_error``; the in-memory list stays
    authoritative for the session.
    """

    def __init__(self, repository: Optional[TransactionRepository] = None) -> None:
        self._repository = repository
        self._transactions: List[Transaction] = []
        self.last_save_error: Optional[PersistenceError] = None

    @classmethod
    def open(cls, repository: TransactionRepository) -> "LedgerStore":
        """Build a store seeded from whatever the repository holds."""
        store = cls(repository)
        store.init(repository.load())
        return store

    # Public API -----------------------------------------------------------
    def init(self, transactions: Iterable[Transaction]) -> None:
        """Seed the store with loaded transactions, replacing current state."""
        seeded: List[Transaction] = []
        ids = set()
        for transaction in transactions:
            if transaction.id in ids:
                raise ValueError(f"Transaction {transaction.id} already exists")
            ids.add(transaction.id)
            seeded.append(transaction)
        self._transactions = seeded
        logger.debug("Ledger initialised with %d transactions", len(seeded))

    def add(self, fields: TransactionFields) -> Transaction:
        transaction = Transaction.create(self._next_id(), fields)
        self._transactions.append(transaction)
        logger.info("Added %s %s (%s)", transaction.type.value, transaction.id, transaction.amount)
        self._persist()
        return transaction

    def update(self, transaction_id: str, fields: TransactionFields) -> Transaction:
        index = self._index_or_raise(transaction_id)
        updated = Transaction.create(transaction_id, fields)
        self._transactions[index] = updated
        logger.info("Updated transaction %s", transaction_id)
        self._persist()
        return updated

    def remove(self, transaction_id: str) -> None:
        index = self._index_or_raise(transaction_id)
        del self._transactions[index]
        logger.info("Removed transaction %s", transaction_id)
        self._persist()

    def get(self, transaction_id: str) -> Transaction:
        return self._transactions[self._index_or_raise(transaction_id)]

    def list(self) -> Tuple[Transaction, ...]:
        return tuple(self._transactions)

    def recent(self, n: int = RECENT_DEFAULT) -> Tuple[Transaction, ...]:
        """Return the last ``n`` transactions in insertion order."""
        if n < 0:
            raise ValueError("n must not be negative")
        if n == 0:
            return ()
        return tuple(self._transactions[-n:])

    def count(self) -> int:
        return len(self._transactions)

    def net_balance(self) -> Decimal:
        return sum((transaction.signed_amount for transaction in self._transactions), start=ZERO)

    def total_income(self) -> Decimal:
        return self._total(TransactionType.INCOME)

    def total_expense(self) -> Decimal:
        return self._total(TransactionType.EXPENSE)

    def summary(self) -> LedgerSummary:
        return LedgerSummary(
            total_income=self.total_income(),
            total_expense=self.total_expense(),
            net_balance=self.net_balance(),
            count=self.count(),
        )

    def monthly_breakdown(self) -> Dict[Tuple[int, int], MonthlyTotals]:
        """Income and expense totals per calendar (year, month), oldest first."""
        income: Dict[Tuple[int, int], Decimal] = {}
        expense: Dict[Tuple[int, int], Decimal] = {}
        for transaction in self._transactions:
            key = (transaction.date.year, transaction.date.month)
            bucket = income if transaction.type is TransactionType.INCOME else expense
            bucket[key] = bucket.get(key, ZERO) + transaction.amount
        return {
            key: MonthlyTotals(income_total=income.get(key, ZERO), expense_total=expense.get(key, ZERO))
            for key in sorted(set(income) | set(expense))
        }

    # Internal helpers -----------------------------------------------------
    def _next_id(self) -> str:
        existing = {transaction.id for transaction in self._transactions}
        while True:
            candidate = uuid4().hex
            if candidate not in existing:
                return candidate

    def _total(self, kind: TransactionType) -> Decimal:
        return sum(
            (transaction.amount for transaction in self._transactions if transaction.type is kind),
            start=ZERO,
        )

    def _index_or_raise(self, transaction_id: str) -> int:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        raise RecordNotFoundError(f"Transaction {transaction_id} not found")

    def _persist(self) -> None:
        if self._repository is None:
            return
        try:
            self._repository.save(self._transactions)
        except PersistenceError as exc:
            logger.warning("Could not persist ledger; keeping in-memory state: %s", exc)
            self.last_save_error = exc
        else:
            self.last_save_error = None
