"""Domain-specific exceptions for the ledger core services."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Mapping


class ErrorCode(str, Enum):
    INVALID_AMOUNT = "InvalidAmount"
    EMPTY_DESCRIPTION = "EmptyDescription"
    MISSING_DATE = "MissingDate"
    INVALID_DATE = "InvalidDate"
    INVALID_TYPE = "InvalidType"


class ValidationError(ValueError):
    """Raised when candidate transaction fields fail one or more checks.

    ``errors`` maps each failing field to a human-readable message and
    ``codes`` maps the same fields to their :class:`ErrorCode`.
    """

    def __init__(self, errors: Mapping[str, str], codes: Mapping[str, ErrorCode]) -> None:
        self.errors: Dict[str, str] = dict(errors)
        self.codes: Dict[str, ErrorCode] = dict(codes)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))


class RecordNotFoundError(LookupError):
    """Raised when a transaction cannot be located."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
