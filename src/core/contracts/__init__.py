"""
Contract Validation Module

Модуль для валидации JSON контрактов леджера.
"""

from .validators import (
    SNAPSHOT_SCHEMA_PATH,
    LedgerSnapshotValidator,
    load_schema,
    validate_ledger_snapshot,
)

__all__ = [
    "SNAPSHOT_SCHEMA_PATH",
    "LedgerSnapshotValidator",
    "load_schema",
    "validate_ledger_snapshot",
]
