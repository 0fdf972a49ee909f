"""
Domain models and value objects.

Contains the ledger entities: Account, FlowAgreement, FlowChangeEvent,
CriticalTime, LedgerSnapshot.
"""

from src.core.domain.critical_time import NEVER_CRITICAL, CriticalTime
from src.core.domain.account import Account, FlowChangeEvent
from src.core.domain.agreement import FlowAgreement
from src.core.domain.snapshot import LedgerSnapshot

__all__ = [
    # Critical time
    "CriticalTime",
    "NEVER_CRITICAL",
    # Account model
    "Account",
    "FlowChangeEvent",
    # Agreement model
    "FlowAgreement",
    # Snapshot
    "LedgerSnapshot",
]
