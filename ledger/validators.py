"""Validation of raw transaction input before it reaches the ledger."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, Optional

from .exceptions import ErrorCode, ValidationError
from .models import MAX_AMOUNT, TransactionFields, TransactionType, parse_date, quantize_amount

__all__ = [
    "MESSAGES",
    "merge_candidate",
    "parse_amount",
    "parse_type",
    "validate",
    "validate_date",
    "validate_description",
]

MESSAGES = {
    ErrorCode.INVALID_AMOUNT: "Please enter a valid amount greater than 0",
    ErrorCode.EMPTY_DESCRIPTION: "Please enter a description",
    ErrorCode.MISSING_DATE: "Please select a date",
    ErrorCode.INVALID_DATE: "Please enter a valid date (YYYY-MM-DD)",
    ErrorCode.INVALID_TYPE: "Type must be one of: expense, income",
}


class _FieldError(Exception):
    def __init__(self, code: ErrorCode) -> None:
        super().__init__(code.value)
        self.code = code


def parse_amount(raw: object) -> Decimal:
    """Convert raw input to a positive Decimal with exactly two fraction digits."""
    if raw is None or isinstance(raw, bool):
        raise _FieldError(ErrorCode.INVALID_AMOUNT)
    try:
        amount = Decimal(str(raw).strip())
        if not amount.is_finite():
            raise _FieldError(ErrorCode.INVALID_AMOUNT)
        amount = quantize_amount(amount)
    except (InvalidOperation, ValueError) as exc:
        raise _FieldError(ErrorCode.INVALID_AMOUNT) from exc
    # Amounts that round to zero cents are not positive.
    if amount <= 0 or amount > MAX_AMOUNT:
        raise _FieldError(ErrorCode.INVALID_AMOUNT)
    return amount


def validate_description(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise _FieldError(ErrorCode.EMPTY_DESCRIPTION)
    return value.strip()


def validate_date(value: object) -> date:
    if value is None:
        raise _FieldError(ErrorCode.MISSING_DATE)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise _FieldError(ErrorCode.MISSING_DATE)
        try:
            return parse_date(value)
        except ValueError as exc:
            raise _FieldError(ErrorCode.INVALID_DATE) from exc
    raise _FieldError(ErrorCode.INVALID_DATE)


def parse_type(value: object) -> TransactionType:
    if isinstance(value, TransactionType):
        return value
    if not isinstance(value, str):
        raise _FieldError(ErrorCode.INVALID_TYPE)
    try:
        return TransactionType(value.strip().lower())
    except ValueError as exc:
        raise _FieldError(ErrorCode.INVALID_TYPE) from exc


def validate(candidate: Mapping[str, object]) -> TransactionFields:
    """Check every field of ``candidate`` and return normalised fields.

    All rules run independently; a :class:`ValidationError` lists every
    failing field at once. ``type`` defaults to ``expense`` when omitted.
    """
    checks = {
        "amount": (parse_amount, candidate.get("amount")),
        "description": (validate_description, candidate.get("description")),
        "date": (validate_date, candidate.get("date")),
        "type": (parse_type, _default(candidate.get("type"), TransactionType.EXPENSE)),
    }
    values: Dict[str, object] = {}
    codes: Dict[str, ErrorCode] = {}
    for field, (check, raw) in checks.items():
        try:
            values[field] = check(raw)
        except _FieldError as exc:
            codes[field] = exc.code

    if codes:
        raise ValidationError({field: MESSAGES[code] for field, code in codes.items()}, codes)
    return TransactionFields(**values)  # type: ignore[arg-type]


def merge_candidate(current: TransactionFields, changes: Mapping[str, Optional[object]]) -> Dict[str, object]:
    """Overlay non-None ``changes`` on the current fields, ready for :func:`validate`."""
    merged: Dict[str, object] = {
        "amount": current.amount,
        "description": current.description,
        "date": current.date,
        "type": current.type,
    }
    merged.update({key: value for key, value in changes.items() if value is not None})
    return merged


def _default(value: object, fallback: object) -> object:
    return fallback if value is None else value
