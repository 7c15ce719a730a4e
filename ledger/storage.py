"""Persistence utilities for the ledger core services."""

from __future__ import annotations

import json
import logging
import re
from decimal import Decimal
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, Set

from .exceptions import PersistenceError
from .models import Transaction

logger = logging.getLogger(__name__)

DEFAULT_KEY = "financeTransactions"
KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{1,100}$")


class KeyValueStorage(Protocol):
    """A durable slot store holding text values under string keys."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage, useful for embedding and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._slots: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    def set(self, key: str, value: str) -> None:
        self._slots[key] = value


class JSONFileStorage:
    """File-based storage keeping one ``<key>.json`` file per slot with crash-safe writes."""

    def __init__(self, base_path: Path) -> None:
        self._base_path = Path(base_path)
        self._base_path.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not KEY_PATTERN.fullmatch(key) or key.startswith("."):
            raise PersistenceError(f"Invalid storage key {key!r}")
        return self._base_path / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Unable to read from {path}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                handle.write(value)
                handle.flush()
            # Atomic on POSIX; readers never see a half-written slot.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc


class TransactionRepository:
    """Serialises the ledger to a single named slot of a :class:`KeyValueStorage`."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_KEY) -> None:
        self._storage = storage
        self._key = key

    def save(self, transactions: Iterable[Transaction]) -> None:
        """Write the full ordered collection; raises :class:`PersistenceError` if rejected."""
        payload = json.dumps([transaction.to_dict() for transaction in transactions], indent=2)
        try:
            self._storage.set(self._key, payload)
        except PersistenceError:
            raise
        except Exception as exc:
            # Custom backends may raise their own error types.
            raise PersistenceError(f"Unable to save transactions to {self._key!r}") from exc

    def load(self) -> List[Transaction]:
        """Read the slot, returning an empty list when it is missing or unreadable."""
        try:
            raw = self._storage.get(self._key)
        except PersistenceError:
            logger.exception("Unable to read transactions from %r; starting empty", self._key)
            return []
        if raw is None or not raw.strip():
            return []

        try:
            payload = json.loads(raw, parse_float=Decimal)
        except json.JSONDecodeError:
            logger.error("Corrupted JSON in slot %r; starting with an empty ledger", self._key)
            return []
        if not isinstance(payload, list):
            logger.error("Expected a list payload in slot %r; starting with an empty ledger", self._key)
            return []

        transactions: List[Transaction] = []
        seen: Set[str] = set()
        for index, record in enumerate(payload):
            try:
                transaction = Transaction.from_dict(record)
            except (KeyError, TypeError, ValueError, ArithmeticError) as exc:
                logger.warning("Skipping malformed record %d in %r: %s", index, self._key, exc)
                continue
            if transaction.id in seen:
                logger.warning("Skipping duplicate transaction id %s in %r", transaction.id, self._key)
                continue
            seen.add(transaction.id)
            transactions.append(transaction)
        logger.debug("Loaded %d transactions from %r", len(transactions), self._key)
        return transactions
