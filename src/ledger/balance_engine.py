"""
BalanceEngine — real-time баланс аккаунта с ленивым settlement.

Баланс на момент now = settled-снапшот + интеграл чистой ставки,
скорректированной в моменты запланированных остановок входящих потоков.

АЛГОРИТМ:
    (balance, time, rate) = (settled_balance, settled_time, net_flow_rate)
    для каждого события с event.time < now (в порядке очереди):
        balance += rate * (event.time - time)
        time = event.time
        rate -= flow_rate(event.flow_id)
    balance += rate * (now - time)

События с event.time <= settled_time уже свёрнуты в settled_balance
предыдущим settlement: они корректируют ставку без начисления.
Внешне видимый баланс клампится снизу нулём; прогнозы критического
момента работают с несклампленной траекторией.
"""

from typing import Tuple

from src.core.domain import Account
from src.core.math import apply_rate_change, clamp_balance, segment_accrual

from .errors import LedgerInvariantViolation
from .stores import AgreementStore


def folded_rate(account: Account, agreements: AgreementStore) -> Tuple[float, int]:
    """
    Ставка на момент settled_time с учётом уже свёрнутых событий.

    Returns:
        (rate, index первого события позже settled_time)

    Raises:
        UnknownAgreement: Если событие ссылается на отсутствующий agreement
    """
    rate = account.net_flow_rate
    index = 0
    events = account.net_flow_changes
    while index < len(events) and events[index].time <= account.settled_time:
        rate = apply_rate_change(rate, -agreements.require(events[index].flow_id).flow_rate)
        index += 1
    return rate, index


def unclamped_balance(account: Account, agreements: AgreementStore, now: float) -> float:
    """
    Несклампленный баланс на момент now.

    Raises:
        LedgerInvariantViolation: Если now раньше settled_time
        UnknownAgreement: Если событие ссылается на отсутствующий agreement
    """
    if now < account.settled_time:
        raise LedgerInvariantViolation(
            f"Balance of {account.account_id!r} queried at {now}, "
            f"before its settlement at {account.settled_time}"
        )

    balance = account.settled_balance
    time = account.settled_time
    rate, index = folded_rate(account, agreements)

    for event in account.net_flow_changes[index:]:
        if event.time >= now:
            break
        balance += segment_accrual(rate, time, event.time)
        time = event.time
        rate = apply_rate_change(rate, -agreements.require(event.flow_id).flow_rate)

    return balance + segment_accrual(rate, time, now)


def real_time_balance(account: Account, agreements: AgreementStore, now: float) -> float:
    """Внешне видимый баланс на момент now (никогда не отрицательный)."""
    return clamp_balance(unclamped_balance(account, agreements, now))


def settle(account: Account, agreements: AgreementStore, now: float) -> None:
    """
    Settlement: свёртка всех изменений баланса до now в settled_balance.

    net_flow_rate остаётся суммой ставок agreements, очередь событий не
    меняется. Без прошедших событий эквивалентно
    settled_balance += net_flow_rate * (now - settled_time).
    """
    account.settled_balance = unclamped_balance(account, agreements, now)
    account.settled_time = now
