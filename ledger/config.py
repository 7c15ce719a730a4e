"""Environment-driven settings shared by the CLI and the HTTP API."""

from __future__ import annotations

import os
from pathlib import Path

from .storage import DEFAULT_KEY

DATA_DIR_ENV = "COIN_CHRONICLE_DATA_DIR"
STORAGE_KEY_ENV = "COIN_CHRONICLE_STORAGE_KEY"


def default_data_dir() -> Path:
    return Path(os.getenv(DATA_DIR_ENV) or "data")


def storage_key() -> str:
    return os.getenv(STORAGE_KEY_ENV) or DEFAULT_KEY
