"""
TokenLedger — фасад леджера непрерывных потоков.

Публичные операции: balance_of, mint, transfer, update_flow (+ запросы
состояния и снапшот). Часы читаются ровно один раз на вызов, все
вычисления внутри вызова видят один и тот же момент now.

Все проверки выполняются до записи состояния: операция либо полностью
применяет изменения аккаунтов/agreements, либо поднимает исключение
без побочных эффектов.
"""

from typing import List, Optional

from loguru import logger

from src.core.domain import CriticalTime, FlowAgreement, LedgerSnapshot, NEVER_CRITICAL
from src.core.math import apply_rate_change, validate_finite, validate_non_negative

from .balance_engine import real_time_balance, settle
from .clock import Clock, SystemClock
from .config import LedgerConfig
from .errors import ClockRegression, FlowCycleError, InsufficientBalance, InvalidAmount
from .propagation import FlowGraphPropagator
from .stores import AccountStore, AgreementStore, validate_identity

log = logger.bind(component="token_ledger")


class TokenLedger:
    """
    Леджер с дискретными переводами и постоянными потоками между аккаунтами.

    Однопоточная модель: все мутирующие вызовы должны быть сериализованы.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        config: Optional[LedgerConfig] = None,
    ):
        """
        Args:
            clock: источник времени (default SystemClock)
            config: конфигурация леджера
        """
        self.config = config or LedgerConfig()
        self.clock = clock or SystemClock()

        self.accounts = AccountStore(self.config)
        self.agreements = AgreementStore(self.config)
        self.propagator = FlowGraphPropagator(self.accounts, self.agreements, self.config)

        self._last_now: Optional[int] = None

    # =========================================================================
    # ЗАПРОСЫ
    # =========================================================================

    def balance_of(self, account_id: str) -> float:
        """
        Real-time баланс аккаунта на текущий момент.

        Returns:
            Баланс >= 0; 0.0 для аккаунта, к которому не обращались
        """
        return self._balance(account_id, self._now())

    def net_flow_rate(self, account_id: str) -> float:
        account = self.accounts.get(account_id)
        return account.net_flow_rate if account is not None else 0.0

    def critical_time(self, account_id: str) -> CriticalTime:
        account = self.accounts.get(account_id)
        return account.critical_time if account is not None else NEVER_CRITICAL

    def get_flow(self, sender: str, receiver: str) -> Optional[FlowAgreement]:
        agreement = self.agreements.get(self.agreements.flow_id(sender, receiver))
        return agreement.model_copy() if agreement is not None else None

    def account_ids(self) -> List[str]:
        return [account.account_id for account in self.accounts]

    def snapshot(self) -> LedgerSnapshot:
        """Снапшот всех аккаунтов и agreements (глубокие копии)."""
        return LedgerSnapshot(
            taken_at=self._now(),
            accounts=[account.model_copy(deep=True) for account in self.accounts],
            agreements=[agreement.model_copy() for agreement in self.agreements],
        )

    # =========================================================================
    # МУТАЦИИ
    # =========================================================================

    def mint(self, account_id: str, amount: float) -> None:
        """
        Зачисление amount на аккаунт.

        Зачисление датируется текущей точкой settlement аккаунта:
        settled_balance увеличивается без предварительного settlement.

        Raises:
            InvalidAmount: Если amount NaN/Inf или баланс переполнится
            InvalidIdentity: Если account_id некорректен
            LedgerInvariantViolation: Если пропагация превысит
                max_propagation_accounts
        """
        amount = self._checked(validate_finite, amount, "amount")
        now = self._now()
        self._validate_ids(account_id)

        existing = self.accounts.get(account_id)
        balance = self._checked(
            validate_finite,
            (existing.settled_balance if existing is not None else 0.0) + amount,
            "settled_balance",
        )
        order = self.propagator.downstream_order([account_id])

        account = self.accounts.get_or_create(account_id, now)
        account.settled_balance = balance

        self.propagator.propagate(account_id, order=order)
        log.info("mint {} to {} at {}", amount, account_id, now)

    def transfer(self, sender: str, receiver: str, amount: float) -> None:
        """
        Дискретный перевод amount от sender к receiver.

        Raises:
            InsufficientBalance: Если real-time баланс sender < amount
            InvalidAmount: Если amount отрицательный, NaN/Inf или баланс
                receiver переполнится
            InvalidIdentity: Если идентификатор некорректен
            LedgerInvariantViolation: Если пропагация превысит
                max_propagation_accounts
        """
        amount = self._checked(validate_non_negative, amount, "amount")
        now = self._now()
        self._validate_ids(sender, receiver)

        available = self._balance(sender, now)
        if available < amount:
            log.warning(
                "transfer {} -> {} rejected: available={} requested={}",
                sender, receiver, available, amount,
            )
            raise InsufficientBalance(sender, available, amount)

        existing = self.accounts.get(receiver)
        self._checked(
            validate_finite,
            (existing.settled_balance if existing is not None else 0.0) + amount,
            "settled_balance",
        )
        order = self.propagator.downstream_order([sender, receiver])

        sender_account = self.accounts.get_or_create(sender, now)
        receiver_account = self.accounts.get_or_create(receiver, now)
        sender_account.settled_balance -= amount
        receiver_account.settled_balance += amount

        self.propagator.propagate(sender, receiver, order=order)
        log.info("transfer {} from {} to {} at {}", amount, sender, receiver, now)

    def update_flow(self, sender: str, receiver: str, flow_rate: float) -> None:
        """
        Создание, изменение или остановка (flow_rate=0) потока sender -> receiver.

        Оба аккаунта проходят settlement до изменения ставок: вклад старой
        ставки до now фиксируется в settled_balance.

        Raises:
            FlowCycleError: Если поток замкнул бы цикл (в том числе sender == receiver)
            InvalidAmount: Если flow_rate отрицательная, NaN/Inf или
                суммарная ставка переполнится
            InvalidIdentity: Если идентификатор некорректен
            LedgerInvariantViolation: Если пропагация превысит
                max_propagation_accounts
        """
        flow_rate = self._checked(validate_non_negative, flow_rate, "flow_rate")
        now = self._now()
        self._validate_ids(sender, receiver)

        existing = self.agreements.get(self.agreements.flow_id(sender, receiver))
        old_rate = existing.flow_rate if existing is not None else 0.0

        if sender == receiver or (
            flow_rate != 0 and old_rate == 0 and self.propagator.reaches(receiver, sender)
        ):
            log.warning("flow {} -> {} rejected: closes a cycle", sender, receiver)
            raise FlowCycleError(sender, receiver)

        delta = flow_rate - old_rate
        sender_rate = self._checked(
            validate_finite, apply_rate_change(self.net_flow_rate(sender), -delta), "net_flow_rate"
        )
        receiver_rate = self._checked(
            validate_finite, apply_rate_change(self.net_flow_rate(receiver), delta), "net_flow_rate"
        )
        # receiver уже корень обхода, новое ребро не расширяет достижимое множество
        self.propagator.downstream_order([sender, receiver])

        sender_account = self.accounts.get_or_create(sender, now)
        receiver_account = self.accounts.get_or_create(receiver, now)
        agreement = self.agreements.get_or_create(sender, receiver, now)

        settle(sender_account, self.agreements, now)
        settle(receiver_account, self.agreements, now)

        agreement.flow_rate = flow_rate
        agreement.updated_at = now
        sender_account.net_flow_rate = sender_rate
        receiver_account.net_flow_rate = receiver_rate

        if flow_rate != 0:
            sender_account.add_receiver(receiver)
        else:
            sender_account.remove_receiver(receiver)

        self.propagator.sync_flow_event(sender_account, receiver)
        self.propagator.propagate(sender, receiver)
        log.info("flow {} -> {} rate {} -> {} at {}", sender, receiver, old_rate, flow_rate, now)

    # =========================================================================
    # ВНУТРЕННИЕ
    # =========================================================================

    def _now(self) -> int:
        now = self.clock.now()
        if self._last_now is not None and now < self._last_now:
            raise ClockRegression(f"Clock moved back from {self._last_now} to {now}")
        self._last_now = now
        return now

    def _balance(self, account_id: str, now: int) -> float:
        account = self.accounts.get(account_id)
        if account is None:
            return 0.0
        return real_time_balance(account, self.agreements, now)

    def _validate_ids(self, *account_ids: str) -> None:
        for account_id in account_ids:
            validate_identity(account_id, self.config.flow_id_separator)

    @staticmethod
    def _checked(validator, value: float, name: str) -> float:
        try:
            return validator(value, name)
        except ValueError as e:
            raise InvalidAmount(str(e)) from e
