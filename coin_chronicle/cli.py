"""Console interface for the Coin Chronicle finance tracker."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Iterable, List, Optional

from ledger.config import default_data_dir, storage_key
from ledger.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from ledger.models import Transaction, TransactionType
from ledger.services import LedgerStore
from ledger.storage import JSONFileStorage, TransactionRepository
from ledger.validators import merge_candidate, validate


def _load_store(data_dir: Path) -> LedgerStore:
    repository = TransactionRepository(JSONFileStorage(data_dir), key=storage_key())
    return LedgerStore.open(repository)


def _format_transaction(transaction: Transaction) -> str:
    sign = "+" if transaction.signed_amount > 0 else "-"
    return (
        f"[{transaction.id}] {transaction.date.isoformat()} "
        f"{sign}{transaction.amount:.2f} {transaction.type.value:<7} {transaction.description}"
    )


def _print_transactions(transactions: Iterable[Transaction]) -> None:
    for transaction in transactions:
        print(_format_transaction(transaction))


def _warn_if_unsaved(store: LedgerStore) -> None:
    if store.last_save_error is not None:
        print(f"Warning: changes kept in memory only ({store.last_save_error})", file=sys.stderr)


def handle_add(args: argparse.Namespace, store: LedgerStore) -> None:
    fields = validate(
        {
            "type": args.type,
            "amount": args.amount,
            "description": args.description,
            "date": args.date or date.today(),
        }
    )
    transaction = store.add(fields)
    label = "Income" if transaction.type is TransactionType.INCOME else "Expense"
    print(f"{label} of {transaction.amount:.2f} has been added.")
    print(_format_transaction(transaction))
    _warn_if_unsaved(store)


def handle_edit(args: argparse.Namespace, store: LedgerStore) -> None:
    current = store.get(args.id)
    changes = {
        "type": args.type,
        "amount": args.amount,
        "description": args.description,
        "date": args.date,
    }
    fields = validate(merge_candidate(current.fields(), changes))
    transaction = store.update(args.id, fields)
    print("Transaction has been successfully updated.")
    print(_format_transaction(transaction))
    _warn_if_unsaved(store)


def handle_delete(args: argparse.Namespace, store: LedgerStore) -> None:
    store.remove(args.id)
    print(f"Transaction {args.id} deleted.")
    _warn_if_unsaved(store)


def handle_list(args: argparse.Namespace, store: LedgerStore) -> None:
    transactions = store.list() if args.recent is None else store.recent(args.recent)
    if not transactions:
        print("No transactions found.")
        return
    print(f"Showing {len(transactions)} of {store.count()} transactions:")
    _print_transactions(transactions)


def handle_summary(args: argparse.Namespace, store: LedgerStore) -> None:
    summary = store.summary()
    print(f"Total income:  {summary.total_income:.2f}")
    print(f"Total expense: {summary.total_expense:.2f}")
    print(f"Net balance:   {summary.net_balance:.2f}")
    print(f"Transactions:  {summary.count}")


def handle_monthly(args: argparse.Namespace, store: LedgerStore) -> None:
    breakdown = store.monthly_breakdown()
    if not breakdown:
        print("No transactions found.")
        return
    print(f"{'Month':<8} {'Income':>12} {'Expense':>12} {'Net':>12}")
    for (year, month), totals in breakdown.items():
        print(
            f"{year:04d}-{month:02d}  {totals.income_total:>12.2f} "
            f"{totals.expense_total:>12.2f} {totals.net:>12.2f}"
        )


def _non_negative(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Expected a whole number") from exc
    if number < 0:
        raise argparse.ArgumentTypeError("Must not be negative")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Coin Chronicle personal finance tracker")
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help="Directory to store JSON data (default: $COIN_CHRONICLE_DATA_DIR or ./data)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    add_parser = subparsers.add_parser("add", help="Record a new transaction")
    add_parser.add_argument("type", choices=["income", "expense"])
    add_parser.add_argument("amount")
    add_parser.add_argument("description")
    add_parser.add_argument("--date", help="Calendar date YYYY-MM-DD (default: today)")

    edit_parser = subparsers.add_parser("edit", help="Edit an existing transaction")
    edit_parser.add_argument("id")
    edit_parser.add_argument("--type", choices=["income", "expense"])
    edit_parser.add_argument("--amount")
    edit_parser.add_argument("--description")
    edit_parser.add_argument("--date")

    delete_parser = subparsers.add_parser("delete", help="Delete a transaction")
    delete_parser.add_argument("id")

    list_parser = subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument("--recent", type=_non_negative, help="Only show the last N transactions")

    subparsers.add_parser("summary", help="Show totals and net balance")
    subparsers.add_parser("monthly", help="Show income and expense totals per month")

    return parser


HANDLERS = {
    "add": handle_add,
    "edit": handle_edit,
    "delete": handle_delete,
    "list": handle_list,
    "summary": handle_summary,
    "monthly": handle_monthly,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    store = _load_store(args.data_dir or default_data_dir())

    try:
        HANDLERS[args.command](args, store)
    except ValidationError as exc:
        print("Validation error:", file=sys.stderr)
        for field, message in exc.errors.items():
            print(f"  {field}: {message}", file=sys.stderr)
        return 1
    except RecordNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
