"""Core business logic package for the Coin Chronicle finance tracker."""

from .exceptions import ErrorCode, PersistenceError, RecordNotFoundError, ValidationError
from .models import LedgerSummary, MonthlyTotals, Transaction, TransactionFields, TransactionType
from .services import LedgerStore
from .storage import DEFAULT_KEY, JSONFileStorage, KeyValueStorage, MemoryStorage, TransactionRepository
from .validators import validate

__all__ = [
    "DEFAULT_KEY",
    "ErrorCode",
    "JSONFileStorage",
    "KeyValueStorage",
    "LedgerStore",
    "LedgerSummary",
    "MemoryStorage",
    "MonthlyTotals",
    "PersistenceError",
    "RecordNotFoundError",
    "Transaction",
    "TransactionFields",
    "TransactionRepository",
    "TransactionType",
    "ValidationError",
    "validate",
]
