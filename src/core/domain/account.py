"""
Account — состояние аккаунта леджера

Аккаунт хранит settled-снапшот баланса, чистую ставку потоков и очередь
будущих событий изменения входящей ставки (net flow changes).

ИНВАРИАНТЫ:
1. net_flow_changes отсортированы по time (неубывающе)
2. Не более одного события на flow_id
3. flow_receivers — упорядоченное множество без повторов
"""

from bisect import bisect_right

from pydantic import BaseModel, Field

from .critical_time import NEVER_CRITICAL, CriticalTime


# =============================================================================
# EVENTS
# =============================================================================


class FlowChangeEvent(BaseModel):
    """
    Событие: в момент time входящий поток flow_id остановится,
    потому что его отправитель станет критическим.
    """

    flow_id: str = Field(..., min_length=1, description="Ключ входящего потока")
    time: float = Field(..., description="Ожидаемый момент остановки потока")

    model_config = {"frozen": True}


# =============================================================================
# ACCOUNT MODEL
# =============================================================================


class Account(BaseModel):
    """
    Аккаунт с ленивым settlement.

    Баланс на произвольный момент вычисляется из (settled_balance,
    settled_time, net_flow_rate) и очереди net_flow_changes без
    пересчёта истории.
    """

    account_id: str = Field(..., min_length=1, description="Идентификатор аккаунта")

    settled_balance: float = Field(0.0, description="Баланс на момент settled_time")
    settled_time: float = Field(..., description="Момент последнего settlement")
    net_flow_rate: float = Field(
        0.0, description="Входящие минус исходящие ставки (amount/second)"
    )
    critical_time: CriticalTime = Field(
        default=NEVER_CRITICAL, description="Кэш прогноза неплатёжеспособности"
    )

    net_flow_changes: list[FlowChangeEvent] = Field(
        default_factory=list, description="Будущие остановки входящих потоков"
    )
    flow_receivers: list[str] = Field(
        default_factory=list, description="Получатели активных исходящих потоков"
    )

    # -------------------------------------------------------------------------
    # Очередь событий
    # -------------------------------------------------------------------------

    def event_index(self, flow_id: str) -> int | None:
        for index, event in enumerate(self.net_flow_changes):
            if event.flow_id == flow_id:
                return index
        return None

    def schedule_event(self, flow_id: str, time: float) -> bool:
        """
        Вставка или перенос события flow_id на момент time.

        Позиция — после всех событий с time <= нового (равные времена
        упорядочены по порядку вставки).

        Returns:
            True если очередь изменилась
        """
        event = FlowChangeEvent(flow_id=flow_id, time=time)
        current = self.event_index(flow_id)

        if current is not None:
            if self.net_flow_changes[current] == event:
                return False
            del self.net_flow_changes[current]

        position = bisect_right(self.net_flow_changes, time, key=lambda e: e.time)
        self.net_flow_changes.insert(position, event)
        return True

    def cancel_event(self, flow_id: str) -> bool:
        """Удаление события flow_id. Returns: True если событие было."""
        current = self.event_index(flow_id)
        if current is None:
            return False
        del self.net_flow_changes[current]
        return True

    # -------------------------------------------------------------------------
    # Получатели исходящих потоков
    # -------------------------------------------------------------------------

    def add_receiver(self, receiver_id: str) -> None:
        if receiver_id not in self.flow_receivers:
            self.flow_receivers.append(receiver_id)

    def remove_receiver(self, receiver_id: str) -> None:
        if receiver_id in self.flow_receivers:
            self.flow_receivers.remove(receiver_id)
