"""
Tests for JSON Schema Contract Validators

Тестирование контракта ledger_snapshot:
- Валидность самой схемы
- Валидация снапшотов реального леджера
- Детекция нарушений required полей, типов и constraints
"""

import copy

import pytest
from jsonschema import ValidationError

from src.core.contracts import (
    SNAPSHOT_SCHEMA_PATH,
    LedgerSnapshotValidator,
    load_schema,
    validate_ledger_snapshot,
)
from src.ledger import ManualClock, TokenLedger


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def snapshot_data():
    """Снапшот леджера с цепочкой потоков в JSON-режиме."""
    clock = ManualClock(1_700_000_000)
    ledger = TokenLedger(clock=clock)
    ledger.mint("bob", 100)
    ledger.transfer("bob", "alice", 10)
    ledger.update_flow("bob", "alice", 10 / 3600)
    clock.advance(7200)
    ledger.update_flow("alice", "carol", 5 / 3600)
    return ledger.snapshot().model_dump(mode="json")


# =============================================================================
# SCHEMA LOADING
# =============================================================================


class TestLoadSchema:
    """Тесты загрузки схемы."""

    def test_load_schema(self):
        schema = load_schema()
        assert schema["title"] == "ledger_snapshot"

    def test_schema_cached(self):
        assert load_schema(SNAPSHOT_SCHEMA_PATH) is load_schema(SNAPSHOT_SCHEMA_PATH)

    def test_missing_schema(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_schema(tmp_path / "does_not_exist.json")

    def test_invalid_schema(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"type": 42}', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            LedgerSnapshotValidator(path)


# =============================================================================
# LEDGER SNAPSHOT
# =============================================================================


class TestLedgerSnapshotContract:
    """Валидация снапшотов."""

    def test_valid_snapshot(self, snapshot_data):
        validate_ledger_snapshot(snapshot_data)
        assert LedgerSnapshotValidator().is_valid(snapshot_data)

    def test_snapshot_content(self, snapshot_data):
        accounts = {a["account_id"]: a for a in snapshot_data["accounts"]}
        assert set(accounts) == {"bob", "alice", "carol"}
        assert accounts["carol"]["critical_time"] == {"time": None}
        assert accounts["carol"]["net_flow_changes"][0]["flow_id"] == "alice:carol"
        assert accounts["bob"]["flow_receivers"] == ["alice"]
        assert len(snapshot_data["agreements"]) == 2

    def test_empty_ledger_snapshot(self):
        data = TokenLedger(clock=ManualClock(0)).snapshot().model_dump(mode="json")
        validate_ledger_snapshot(data)

    def test_missing_required_field(self, snapshot_data):
        data = copy.deepcopy(snapshot_data)
        del data["accounts"][0]["settled_time"]
        with pytest.raises(ValidationError):
            validate_ledger_snapshot(data)

    def test_negative_flow_rate(self, snapshot_data):
        data = copy.deepcopy(snapshot_data)
        data["agreements"][0]["flow_rate"] = -1.0
        with pytest.raises(ValidationError):
            validate_ledger_snapshot(data)

    def test_duplicate_receivers(self, snapshot_data):
        data = copy.deepcopy(snapshot_data)
        data["accounts"][0]["flow_receivers"] = ["alice", "alice"]
        assert not LedgerSnapshotValidator().is_valid(data)

    def test_wrong_schema_version(self, snapshot_data):
        data = copy.deepcopy(snapshot_data)
        data["schema_version"] = "2"
        errors = list(LedgerSnapshotValidator().iter_errors(data))
        assert len(errors) == 1

    def test_snapshot_is_deep_copy(self):
        ledger = TokenLedger(clock=ManualClock(0))
        ledger.mint("a", 1)
        snapshot = ledger.snapshot()

        ledger.mint("a", 1)

        assert snapshot.account("a").settled_balance == 1
        assert snapshot.account("ghost") is None
