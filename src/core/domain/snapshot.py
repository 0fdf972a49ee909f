"""
LedgerSnapshot — снапшот состояния леджера

Immutable модель с глубокими копиями аккаунтов и agreements на момент
taken_at. Совместима с JSON Schema (src/core/contracts/schema/ledger_snapshot.json)
в режиме model_dump(mode="json").
"""

from pydantic import BaseModel, Field

from .account import Account
from .agreement import FlowAgreement


class LedgerSnapshot(BaseModel):
    """Снапшот леджера (accounts + agreements)."""

    schema_version: str = Field("1", pattern="^1$", description="Версия схемы снапшота")
    taken_at: int = Field(..., ge=0, description="Момент снапшота (секунды)")

    accounts: list[Account] = Field(default_factory=list, description="Аккаунты")
    agreements: list[FlowAgreement] = Field(
        default_factory=list, description="Constant-Flow-Agreements"
    )

    model_config = {"frozen": True}

    def account(self, account_id: str) -> Account | None:
        for account in self.accounts:
            if account.account_id == account_id:
                return account
        return None
