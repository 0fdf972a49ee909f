"""
Ledger exceptions.

Все ошибки поднимаются синхронно, до любой записи состояния.
LedgerInvariantViolation и её подклассы — ошибки программирования
(нарушенный инвариант), а не восстановимые runtime-ошибки.
"""


class LedgerError(Exception):
    """Базовое исключение леджера."""


class InsufficientBalance(LedgerError):
    """
    Real-time баланс отправителя строго меньше суммы перевода.

    Не ретраится без внешнего изменения баланса.
    """

    def __init__(self, account_id: str, available: float, requested: float):
        self.account_id = account_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient balance on {account_id!r}: "
            f"available={available}, requested={requested}"
        )


class InvalidIdentity(LedgerError, ValueError):
    """Идентификатор аккаунта пустой, не строка или содержит разделитель flow_id."""


class InvalidAmount(LedgerError, ValueError):
    """Сумма или ставка NaN/Inf, либо отрицательная там, где это запрещено."""


class FlowCycleError(LedgerError):
    """updateFlow замкнул бы цикл в графе потоков."""

    def __init__(self, sender: str, receiver: str):
        self.sender = sender
        self.receiver = receiver
        super().__init__(
            f"Flow {sender!r} -> {receiver!r} would close a cycle in the flow graph"
        )


class ClockRegression(LedgerError):
    """Часы вернули момент раньше уже наблюдавшегося."""


class LedgerInvariantViolation(LedgerError):
    """Нарушен внутренний инвариант леджера (fatal)."""


class UnknownAgreement(LedgerInvariantViolation):
    """Событие ссылается на flow_id без записи agreement."""

    def __init__(self, flow_id: str):
        self.flow_id = flow_id
        super().__init__(f"No agreement recorded for flow {flow_id!r}")
