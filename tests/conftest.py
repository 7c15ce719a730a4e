"""Shared fixtures for the ledger test suite."""

from __future__ import annotations

import pytest

from ledger.services import LedgerStore
from ledger.storage import MemoryStorage, TransactionRepository


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def repository(memory_storage: MemoryStorage) -> TransactionRepository:
    return TransactionRepository(memory_storage)


@pytest.fixture
def store(repository: TransactionRepository) -> LedgerStore:
    return LedgerStore.open(repository)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "COIN_CHRONICLE_DATA_DIR",
        "COIN_CHRONICLE_STORAGE_KEY",
        "COIN_CHRONICLE_ENV",
        "COIN_CHRONICLE_ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
