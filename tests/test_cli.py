"""End-to-end tests for the console interface against a temporary data directory."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from coin_chronicle.cli import main


def _run(data_dir: Path, *argv: str) -> int:
    return main(["--data-dir", str(data_dir), *argv])


def _stored(data_dir: Path) -> list:
    return json.loads((data_dir / "financeTransactions.json").read_text(encoding="utf-8"))


def test_add_list_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "add", "income", "1500", "Salary", "--date", "2024-01-05") == 0
    assert _run(tmp_path, "add", "expense", "42.5", "Groceries", "--date", "2024-01-10") == 0
    capsys.readouterr()

    assert _run(tmp_path, "list") == 0
    listing = capsys.readouterr().out
    assert listing.index("Salary") < listing.index("Groceries")
    assert "+1500.00" in listing
    assert "-42.50" in listing

    assert _run(tmp_path, "summary") == 0
    summary = capsys.readouterr().out
    assert "Net balance:   1457.50" in summary
    assert "Transactions:  2" in summary


def test_add_defaults_to_today(tmp_path: Path) -> None:
    assert _run(tmp_path, "add", "expense", "3", "Bus") == 0

    assert _stored(tmp_path)[0]["date"] == date.today().isoformat()


def test_add_reports_every_invalid_field(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "add", "expense", "-5", "   ", "--date", "2024-01-01") == 1

    err = capsys.readouterr().err
    assert "amount: Please enter a valid amount greater than 0" in err
    assert "description: Please enter a description" in err
    assert not (tmp_path / "financeTransactions.json").exists()


def test_edit_keeps_unspecified_fields(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _run(tmp_path, "add", "expense", "10", "Lunch", "--date", "2024-02-01")
    transaction_id = _stored(tmp_path)[0]["id"]

    assert _run(tmp_path, "edit", transaction_id, "--amount", "12.75") == 0

    record = _stored(tmp_path)[0]
    assert record == {
        "id": transaction_id,
        "amount": 12.75,
        "description": "Lunch",
        "date": "2024-02-01",
        "type": "expense",
    }


def test_edit_and_delete_unknown_id(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "edit", "nope", "--amount", "1") == 1
    assert _run(tmp_path, "delete", "nope") == 1

    assert "Transaction nope not found" in capsys.readouterr().err


def test_delete(tmp_path: Path) -> None:
    _run(tmp_path, "add", "expense", "10", "Lunch", "--date", "2024-02-01")
    _run(tmp_path, "add", "income", "20", "Refund", "--date", "2024-02-02")
    first_id = _stored(tmp_path)[0]["id"]

    assert _run(tmp_path, "delete", first_id) == 0

    assert [record["description"] for record in _stored(tmp_path)] == ["Refund"]


def test_list_recent_and_monthly(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    for day, description in enumerate(["a", "b", "c"], start=1):
        _run(tmp_path, "add", "expense", "1", description, "--date", f"2024-03-0{day}")
    _run(tmp_path, "add", "income", "50", "gift", "--date", "2024-04-15")
    capsys.readouterr()

    assert _run(tmp_path, "list", "--recent", "2") == 0
    out = capsys.readouterr().out
    assert "Showing 2 of 4 transactions" in out
    assert " c" in out and "gift" in out
    assert " a\n" not in out

    assert _run(tmp_path, "monthly") == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[1].split() == ["2024-03", "0.00", "3.00", "-3.00"]
    assert lines[2].split() == ["2024-04", "50.00", "0.00", "50.00"]


def test_empty_ledger_messages(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(tmp_path, "list") == 0
    assert _run(tmp_path, "monthly") == 0

    assert capsys.readouterr().out.count("No transactions found.") == 2


def test_data_dir_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COIN_CHRONICLE_DATA_DIR", str(tmp_path / "env-data"))

    assert main(["add", "income", "5", "Tip", "--date", "2024-01-01"]) == 0

    assert (tmp_path / "env-data" / "financeTransactions.json").exists()


def test_corrupted_data_file_does_not_block_startup(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "financeTransactions.json").write_text("not json", encoding="utf-8")

    assert _run(tmp_path, "list") == 0
    assert "No transactions found." in capsys.readouterr().out
