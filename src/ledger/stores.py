"""
AccountStore / AgreementStore — key-value хранилища леджера.

Без производной логики: числовые инварианты и порядок событий
обеспечивают вызывающие движки. Записи создаются лениво и никогда не
удаляются.
"""

from typing import Dict, Iterator, Optional

from src.core.domain import Account, FlowAgreement

from .config import LedgerConfig
from .errors import InvalidIdentity, LedgerInvariantViolation, UnknownAgreement


def validate_identity(account_id: str, separator: str) -> str:
    """
    Проверка корректности идентификатора аккаунта.

    Raises:
        InvalidIdentity: Если id не строка, пустой или содержит separator
    """
    if not isinstance(account_id, str) or not account_id:
        raise InvalidIdentity(f"account id must be a non-empty string, got {account_id!r}")
    if separator in account_id:
        raise InvalidIdentity(
            f"account id {account_id!r} must not contain separator {separator!r}"
        )
    return account_id


# =============================================================================
# ACCOUNT STORE
# =============================================================================


class AccountStore:
    """Один Account на идентификатор, создаётся при первом обращении."""

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or LedgerConfig()
        self._accounts: Dict[str, Account] = {}

    def get(self, account_id: str) -> Optional[Account]:
        return self._accounts.get(account_id)

    def require(self, account_id: str) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise LedgerInvariantViolation(f"Account {account_id!r} is referenced but missing")
        return account

    def get_or_create(self, account_id: str, now: float) -> Account:
        """
        Существующий аккаунт или новый: settled_balance=0, settled_time=now,
        net_flow_rate=0, critical_time=never, пустые очереди.
        """
        account = self._accounts.get(account_id)
        if account is None:
            validate_identity(account_id, self.config.flow_id_separator)
            account = Account(account_id=account_id, settled_time=now)
            self._accounts[account_id] = account
        return account

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)


# =============================================================================
# AGREEMENT STORE
# =============================================================================


class AgreementStore:
    """Одна FlowAgreement на упорядоченную пару (sender, receiver)."""

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or LedgerConfig()
        self._agreements: Dict[str, FlowAgreement] = {}

    def flow_id(self, sender: str, receiver: str) -> str:
        return f"{sender}{self.config.flow_id_separator}{receiver}"

    def get(self, flow_id: str) -> Optional[FlowAgreement]:
        return self._agreements.get(flow_id)

    def require(self, flow_id: str) -> FlowAgreement:
        """
        Raises:
            UnknownAgreement: Если записи нет (нарушенный инвариант)
        """
        agreement = self._agreements.get(flow_id)
        if agreement is None:
            raise UnknownAgreement(flow_id)
        return agreement

    def get_or_create(self, sender: str, receiver: str, now: float) -> FlowAgreement:
        flow_id = self.flow_id(sender, receiver)
        agreement = self._agreements.get(flow_id)
        if agreement is None:
            agreement = FlowAgreement(
                flow_id=flow_id,
                sender=sender,
                receiver=receiver,
                flow_rate=0.0,
                created_at=now,
                updated_at=now,
            )
            self._agreements[flow_id] = agreement
        return agreement

    def __iter__(self) -> Iterator[FlowAgreement]:
        return iter(self._agreements.values())

    def __len__(self) -> int:
        return len(self._agreements)
