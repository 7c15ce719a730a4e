"""Flask REST API exposing the ledger services."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from ledger.config import default_data_dir, storage_key
from ledger.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from ledger.models import Transaction
from ledger.services import LedgerStore
from ledger.storage import JSONFileStorage, KeyValueStorage, TransactionRepository
from ledger.validators import validate


def _transaction_payload(transaction: Transaction) -> Dict[str, Any]:
    payload = transaction.to_dict()
    payload["amount"] = f"{transaction.amount:.2f}"
    return payload


def _configure_cors(app: Flask) -> None:
    env_name = os.getenv("COIN_CHRONICLE_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
        return
    allowed_origins = os.getenv("COIN_CHRONICLE_ALLOWED_ORIGINS")
    if allowed_origins:
        origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
        CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
    else:
        CORS(app)


def create_app(data_dir: Optional[Path] = None, storage: Optional[KeyValueStorage] = None) -> Flask:
    app = Flask(__name__)
    _configure_cors(app)

    if storage is None:
        storage = JSONFileStorage(Path(data_dir or default_data_dir()))
    store = LedgerStore.open(TransactionRepository(storage, key=storage_key()))

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _mutation_result(payload: Dict[str, Any], status: int = 200):
        if store.last_save_error is not None:
            app.logger.warning("Ledger change not persisted: %s", store.last_save_error)
            payload = {**payload, "warning": "Change kept in memory only; storage write failed"}
        return _success(payload, status)

    def _handle_error(exc: Exception, status: int, message: str, details: Any = None):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": details if details is not None else str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error", exc.errors)

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError({"body": "Request body must be a JSON object"}, {})
        return data

    @app.get("/transactions")
    def list_transactions():
        recent = request.args.get("recent")
        if recent in (None, ""):
            transactions = store.list()
        else:
            try:
                transactions = store.recent(int(recent))
            except ValueError as exc:
                raise ValidationError({"recent": "recent must be a non-negative integer"}, {}) from exc
        return _success({"items": [_transaction_payload(t) for t in transactions]})

    @app.post("/transactions")
    def create_transaction():
        fields = validate(_json_body())
        transaction = store.add(fields)
        return _mutation_result(_transaction_payload(transaction), 201)

    @app.get("/transactions/<transaction_id>")
    def get_transaction(transaction_id: str):
        return _success(_transaction_payload(store.get(transaction_id)))

    @app.put("/transactions/<transaction_id>")
    def update_transaction(transaction_id: str):
        store.get(transaction_id)
        fields = validate(_json_body())
        transaction = store.update(transaction_id, fields)
        return _mutation_result(_transaction_payload(transaction))

    @app.delete("/transactions/<transaction_id>")
    def delete_transaction(transaction_id: str):
        store.remove(transaction_id)
        if store.last_save_error is not None:
            return _mutation_result({"deleted": transaction_id})
        return _success({}, 204)

    @app.get("/summary")
    def summary():
        return _success(store.summary().to_dict())

    @app.get("/monthly")
    def monthly():
        items = [
            {
                "year": year,
                "month": month,
                "income_total": f"{totals.income_total:.2f}",
                "expense_total": f"{totals.expense_total:.2f}",
                "net": f"{totals.net:.2f}",
            }
            for (year, month), totals in store.monthly_breakdown().items()
        ]
        return _success({"items": items})

    return app


if __name__ == "__main__":
    create_app().run(threaded=False)
