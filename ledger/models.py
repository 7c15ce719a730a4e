"""Data models for the transaction ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Dict

__all__ = [
    "LedgerSummary",
    "MAX_AMOUNT",
    "MonthlyTotals",
    "Transaction",
    "TransactionFields",
    "TransactionType",
    "parse_date",
    "quantize_amount",
]

CENTS = Decimal("0.01")
# Largest amount whose JSON number survives a round trip through a double.
MAX_AMOUNT = Decimal("9999999999999.99")


def quantize_amount(amount: Decimal) -> Decimal:
    """Round an amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_date(value: str) -> date:
    """Parse an ISO 8601 calendar date.

    Full timestamps (``2024-01-05T00:00:00.000Z``) are accepted and reduced to
    the calendar date of their UTC rendering; the local date of the original
    entry may differ by a day.
    """
    value = value.strip()
    if "T" not in value:
        return date.fromisoformat(value)
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value).date()


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


def _check_fields(amount: Decimal, description: str, when: date, kind: TransactionType) -> None:
    if not isinstance(amount, Decimal) or not amount.is_finite() or amount <= 0:
        raise ValueError(f"amount must be a positive Decimal, got {amount!r}")
    if amount > MAX_AMOUNT:
        raise ValueError(f"amount must not exceed {MAX_AMOUNT}, got {amount!r}")
    if not isinstance(description, str) or not description.strip():
        raise ValueError("description cannot be empty")
    # datetime is a date subclass; only plain calendar dates are stored.
    if not isinstance(when, date) or isinstance(when, datetime):
        raise ValueError(f"date must be a calendar date, got {when!r}")
    if not isinstance(kind, TransactionType):
        raise ValueError(f"type must be a TransactionType, got {kind!r}")


@dataclass(frozen=True)
class TransactionFields:
    """Validated, id-less transaction fields accepted by the ledger."""

    amount: Decimal
    description: str
    date: date
    type: TransactionType

    def __post_init__(self) -> None:
        _check_fields(self.amount, self.description, self.date, self.type)


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: Decimal
    description: str
    date: date
    type: TransactionType

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("id cannot be empty")
        _check_fields(self.amount, self.description, self.date, self.type)

    @classmethod
    def create(cls, id: str, fields: TransactionFields) -> "Transaction":
        return cls(
            id=id,
            amount=fields.amount,
            description=fields.description,
            date=fields.date,
            type=fields.type,
        )

    @property
    def signed_amount(self) -> Decimal:
        """Contribution of this transaction to the net balance."""
        return self.amount if self.type is TransactionType.INCOME else -self.amount

    def fields(self) -> TransactionFields:
        return TransactionFields(
            amount=self.amount, description=self.description, date=self.date, type=self.type
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the transaction to JSON-friendly natives."""
        return {
            "id": self.id,
            "amount": float(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Transaction":
        """Hydrate a Transaction from JSON-native data.

        Raises ``KeyError``, ``TypeError``, ``ValueError`` or
        ``decimal.InvalidOperation`` for malformed data.
        """
        raw_amount = data["amount"]
        if isinstance(raw_amount, bool):
            raise ValueError("amount must be numeric")
        if not isinstance(data["id"], str):
            raise TypeError("id must be a string")
        if not isinstance(data["date"], str):
            raise TypeError("date must be an ISO 8601 string")
        return cls(
            id=data["id"],
            amount=quantize_amount(Decimal(str(raw_amount))),
            description=data["description"],
            date=parse_date(data["date"]),
            type=TransactionType(data["type"]),
        )


@dataclass(frozen=True)
class MonthlyTotals:
    income_total: Decimal = Decimal("0.00")
    expense_total: Decimal = Decimal("0.00")

    @property
    def net(self) -> Decimal:
        return self.income_total - self.expense_total


@dataclass(frozen=True)
class LedgerSummary:
    total_income: Decimal
    total_expense: Decimal
    net_balance: Decimal
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_income": f"{self.total_income:.2f}",
            "total_expense": f"{self.total_expense:.2f}",
            "net_balance": f"{self.net_balance:.2f}",
            "count": self.count,
        }
