"""
CriticalTimeEngine — прогноз момента, когда несклампленный баланс
аккаунта впервые достигнет нуля.

Однопроходный forward scan по отсортированной очереди событий:
кандидат пересчитывается после каждого события не позже кандидата.
Событие позже текущего кандидата (и все следующие) уже не может
сдвинуть кандидата раньше, поэтому скан останавливается.
"""

from src.core.domain import Account, CriticalTime
from src.core.math import apply_rate_change, project_zero_crossing, segment_accrual

from .balance_engine import folded_rate
from .stores import AgreementStore


def compute_critical_time(account: Account, agreements: AgreementStore) -> CriticalTime:
    """
    Критический момент аккаунта при отсутствии дальнейших изменений.

    Args:
        account: Аккаунт (settled-снапшот, ставка, очередь событий)
        agreements: Хранилище agreements для ставок остановки

    Returns:
        CriticalTime.at(t) или CriticalTime.never()

    Raises:
        UnknownAgreement: Если событие ссылается на отсутствующий agreement
    """
    balance = account.settled_balance
    time = account.settled_time
    rate, index = folded_rate(account, agreements)

    candidate = project_zero_crossing(balance, rate, time)

    for event in account.net_flow_changes[index:]:
        if candidate.precedes(event.time):
            break
        balance += segment_accrual(rate, time, event.time)
        time = event.time
        rate = apply_rate_change(rate, -agreements.require(event.flow_id).flow_rate)
        candidate = project_zero_crossing(balance, rate, time)

    return candidate
