"""Ledger — движок леджера непрерывных потоков.

- Lazy settlement и real-time баланс (BalanceEngine)
- Прогноз критического момента (CriticalTimeEngine)
- Инкрементальная пропагация по графу потоков (FlowGraphPropagator)
- Фасад TokenLedger: mint / transfer / update_flow / balance_of
"""

from .balance_engine import real_time_balance, settle, unclamped_balance
from .clock import Clock, ManualClock, SystemClock
from .config import LedgerConfig
from .critical_time_engine import compute_critical_time
from .errors import (
    ClockRegression,
    FlowCycleError,
    InsufficientBalance,
    InvalidAmount,
    InvalidIdentity,
    LedgerError,
    LedgerInvariantViolation,
    UnknownAgreement,
)
from .propagation import FlowGraphPropagator
from .stores import AccountStore, AgreementStore
from .token_ledger import TokenLedger

__all__ = [
    # Facade
    "TokenLedger",
    "LedgerConfig",
    # Clock
    "Clock",
    "ManualClock",
    "SystemClock",
    # Stores
    "AccountStore",
    "AgreementStore",
    # Engines
    "real_time_balance",
    "unclamped_balance",
    "settle",
    "compute_critical_time",
    "FlowGraphPropagator",
    # Errors
    "LedgerError",
    "InsufficientBalance",
    "InvalidIdentity",
    "InvalidAmount",
    "FlowCycleError",
    "ClockRegression",
    "LedgerInvariantViolation",
    "UnknownAgreement",
]
