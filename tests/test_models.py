from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledger.models import MAX_AMOUNT, Transaction, TransactionType, parse_date


def test_signed_amount_follows_type() -> None:
    income = Transaction("1", Decimal("5.00"), "in", date(2024, 1, 1), TransactionType.INCOME)
    expense = Transaction("2", Decimal("5.00"), "out", date(2024, 1, 1), TransactionType.EXPENSE)

    assert income.signed_amount == Decimal("5.00")
    assert expense.signed_amount == Decimal("-5.00")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"amount": Decimal("0")},
        {"amount": Decimal("-1")},
        {"amount": 5.0},
        {"description": "   "},
        {"date": "2024-01-01"},
        {"date": datetime(2024, 1, 1, 12)},
        {"type": "income"},
        {"id": ""},
    ],
)
def test_invariants_are_enforced(kwargs: dict) -> None:
    base = {
        "id": "x",
        "amount": Decimal("1.00"),
        "description": "ok",
        "date": date(2024, 1, 1),
        "type": TransactionType.EXPENSE,
    }
    base.update(kwargs)

    with pytest.raises(ValueError):
        Transaction(**base)


def test_to_dict_layout() -> None:
    transaction = Transaction("abc", Decimal("42.50"), "Groceries", date(2024, 1, 10), TransactionType.EXPENSE)

    assert transaction.to_dict() == {
        "id": "abc",
        "amount": 42.5,
        "description": "Groceries",
        "date": "2024-01-10",
        "type": "expense",
    }


def test_from_dict_accepts_browser_timestamps_and_string_amounts() -> None:
    transaction = Transaction.from_dict(
        {"id": "17", "amount": "12.5", "description": "Tea", "date": "2024-01-05T00:00:00.000Z", "type": "income"}
    )

    assert transaction.id == "17"
    assert transaction.amount == Decimal("12.50")
    assert transaction.date == date(2024, 1, 5)
    assert transaction.type is TransactionType.INCOME


def test_parse_date() -> None:
    assert parse_date(" 2024-02-29 ") == date(2024, 2, 29)
    assert parse_date("2024-02-29T23:15:00+00:00") == date(2024, 2, 29)
    with pytest.raises(ValueError):
        parse_date("2024-02-30")


@pytest.mark.parametrize("stored_id", [None, 17, ["a"]])
def test_from_dict_rejects_non_string_ids(stored_id: object) -> None:
    with pytest.raises(TypeError):
        Transaction.from_dict(
            {"id": stored_id, "amount": 5, "description": "x", "date": "2024-01-01", "type": "expense"}
        )


def test_amount_above_maximum_is_rejected() -> None:
    with pytest.raises(ValueError):
        Transaction("x", MAX_AMOUNT + Decimal("0.01"), "Too much", date(2024, 1, 1), TransactionType.INCOME)
