"""
FlowGraphPropagator — инкрементальная пропагация критических моментов.

Изменение критического момента отправителя меняет ожидаемый момент
остановки каждого исходящего потока, поэтому каждый получатель должен
обновить своё событие для этого потока и пересчитать свой критический
момент.

АЛГОРИТМ:
1. Достижимый из корней подграф (через flow_receivers) упорядочивается
   топологически (Kahn, work-queue на deque). Каждый аккаунт обходится
   не более одного раза за прогон (visited-set).
2. Аккаунт пересчитывается, только если он корень или за прогон
   изменилось одно из его входящих событий.
3. Критический момент не изменился → fixed point, получатели не трогаются.
4. Иначе для каждого получателя событие потока вставляется, переносится
   или удаляется (insert / update / delete).

Граф потоков ацикличен: TokenLedger отклоняет updateFlow, замыкающий цикл.
"""

from collections import deque
from typing import Iterable, List, Optional, Set

from loguru import logger

from src.core.domain import Account

from .config import LedgerConfig
from .critical_time_engine import compute_critical_time
from .errors import LedgerInvariantViolation
from .stores import AccountStore, AgreementStore

log = logger.bind(component="flow_graph")


class FlowGraphPropagator:
    """Пропагация критических моментов по графу потоков."""

    def __init__(
        self,
        accounts: AccountStore,
        agreements: AgreementStore,
        config: Optional[LedgerConfig] = None,
    ):
        self.accounts = accounts
        self.agreements = agreements
        self.config = config or LedgerConfig()

    # -------------------------------------------------------------------------
    # События получателей
    # -------------------------------------------------------------------------

    def sync_flow_event(self, sender: Account, receiver_id: str) -> bool:
        """
        Приведение события потока sender -> receiver в очереди получателя
        к текущему состоянию.

        Событие существует тогда и только тогда, когда ставка потока
        ненулевая и критический момент отправителя конечен.

        Returns:
            True если очередь получателя изменилась

        Raises:
            UnknownAgreement: Если agreement для пары не записан
        """
        flow_id = self.agreements.flow_id(sender.account_id, receiver_id)
        agreement = self.agreements.require(flow_id)
        receiver = self.accounts.require(receiver_id)

        if agreement.is_active and sender.critical_time.is_finite:
            return receiver.schedule_event(flow_id, sender.critical_time.time)
        return receiver.cancel_event(flow_id)

    # -------------------------------------------------------------------------
    # Пропагация
    # -------------------------------------------------------------------------

    def propagate(self, *roots: str, order: Optional[List[str]] = None) -> List[str]:
        """
        Пересчёт критических моментов начиная с roots.

        Args:
            roots: Аккаунты, чьё состояние изменилось
            order: downstream_order(roots), посчитанный до записи состояния

        Returns:
            Идентификаторы аккаунтов, чей критический момент изменился
            (в порядке обработки)
        """
        if order is None:
            order = self.downstream_order(roots)
        dirty: Set[str] = set(roots)
        changed: List[str] = []

        for account_id in order:
            if account_id not in dirty:
                continue

            account = self.accounts.require(account_id)
            critical_time = compute_critical_time(account, self.agreements)

            if critical_time == account.critical_time:
                log.debug("{}: critical time unchanged ({})", account_id, critical_time)
                continue

            log.debug(
                "{}: critical time {} -> {}", account_id, account.critical_time, critical_time
            )
            account.critical_time = critical_time
            changed.append(account_id)

            for receiver_id in account.flow_receivers:
                if self.sync_flow_event(account, receiver_id):
                    dirty.add(receiver_id)

        return changed

    def downstream_order(self, roots: Iterable[str]) -> List[str]:
        """
        Топологический порядок подграфа, достижимого из roots.

        Ещё не созданные аккаунты считаются листьями, поэтому порядок
        можно проверить до записи состояния.

        Raises:
            LedgerInvariantViolation: Если подграф содержит цикл или
                превышает max_propagation_accounts
        """
        reachable: List[str] = []
        seen: Set[str] = set()
        queue = deque()

        for root in roots:
            if root not in seen:
                seen.add(root)
                queue.append(root)

        while queue:
            account_id = queue.popleft()
            reachable.append(account_id)
            if len(reachable) > self.config.max_propagation_accounts:
                raise LedgerInvariantViolation(
                    f"Propagation exceeds {self.config.max_propagation_accounts} accounts"
                )
            for receiver_id in self._receivers(account_id):
                if receiver_id not in seen:
                    seen.add(receiver_id)
                    queue.append(receiver_id)

        indegree = {account_id: 0 for account_id in reachable}
        for account_id in reachable:
            for receiver_id in self._receivers(account_id):
                indegree[receiver_id] += 1

        queue = deque(account_id for account_id in reachable if indegree[account_id] == 0)
        order: List[str] = []

        while queue:
            account_id = queue.popleft()
            order.append(account_id)
            for receiver_id in self._receivers(account_id):
                indegree[receiver_id] -= 1
                if indegree[receiver_id] == 0:
                    queue.append(receiver_id)

        if len(order) != len(reachable):
            raise LedgerInvariantViolation(
                f"Flow graph reachable from {sorted(set(roots))} contains a cycle"
            )
        return order

    def reaches(self, source: str, target: str) -> bool:
        """True если target достижим из source по активным потокам."""
        if source == target:
            return True
        seen = {source}
        queue = deque([source])
        while queue:
            account = self.accounts.get(queue.popleft())
            if account is None:
                continue
            for receiver_id in account.flow_receivers:
                if receiver_id == target:
                    return True
                if receiver_id not in seen:
                    seen.add(receiver_id)
                    queue.append(receiver_id)
        return False

    def _receivers(self, account_id: str) -> List[str]:
        account = self.accounts.get(account_id)
        return account.flow_receivers if account is not None else []
