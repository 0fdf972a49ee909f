"""Конфигурация леджера."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerConfig:
    """Конфигурация TokenLedger.

    - flow_id_separator: разделитель sender/receiver в flow_id; не может
      встречаться в идентификаторах аккаунтов
    - max_propagation_accounts: верхняя граница числа аккаунтов, которые
      обходит одна пропагация
    """
    flow_id_separator: str = ":"
    max_propagation_accounts: int = 100_000

    def __post_init__(self) -> None:
        if not self.flow_id_separator:
            raise ValueError("flow_id_separator must be non-empty")
        if self.max_propagation_accounts < 1:
            raise ValueError(
                f"max_propagation_accounts must be >= 1, got {self.max_propagation_accounts}"
            )
