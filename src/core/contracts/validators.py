"""
JSON Schema Contract Validators

Валидация JSON-представления снапшота леджера
(LedgerSnapshot.model_dump(mode="json")) против контракта
schema/ledger_snapshot.json (JSON Schema Draft 2020-12).
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator

SNAPSHOT_SCHEMA_PATH = Path(__file__).parent / "schema" / "ledger_snapshot.json"


@lru_cache(maxsize=None)
def load_schema(schema_path: Path = SNAPSHOT_SCHEMA_PATH) -> Dict[str, Any]:
    """
    Загрузка и meta-валидация схемы (кэшируется по пути).

    Raises:
        FileNotFoundError: Если файл схемы не найден
        ValueError: Если файл не является валидной JSON Schema
    """
    with open(schema_path, "r", encoding="utf-8") as f:
        schema = json.load(f)

    try:
        Draft202012Validator.check_schema(schema)
    except jsonschema.SchemaError as e:
        raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e}") from e

    return schema


class LedgerSnapshotValidator:
    """Валидатор снапшотов леджера."""

    def __init__(self, schema_path: Path = SNAPSHOT_SCHEMA_PATH):
        self.schema = load_schema(schema_path)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[jsonschema.ValidationError]:
        return self.validator.iter_errors(data)


def validate_ledger_snapshot(data: Dict[str, Any]) -> None:
    """
    Валидация ledger_snapshot данных.

    Args:
        data: Данные для валидации (model_dump(mode="json") снапшота)

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    LedgerSnapshotValidator().validate(data)
