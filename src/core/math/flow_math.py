"""
Flow Math — арифметика непрерывных потоков

Примитивы, из которых собираются BalanceEngine и CriticalTimeEngine:
- Начисление за отрезок времени при постоянной ставке
- Изменение суммарной ставки с подавлением остатков округления
- Проекция момента пересечения нуля для линейной траектории баланса

ФОРМУЛЫ:
    balance(t) = balance_0 + rate * (t - t_0)
    t_zero     = t_0 - balance_0 / rate,   только при rate < 0

При rate >= 0 баланс не убывает, проекция — CriticalTime.never(),
деление не выполняется. Если t_zero выходит за диапазон float,
пересечение в будущем трактуется как never, а в прошлом — как
наименьший представимый момент.
"""

import math
import sys

from src.core.domain.critical_time import CriticalTime
from src.core.math.numerical_safeguards import snap_to_zero

# Наименьший конечный момент: пересечение, ушедшее в -inf
EARLIEST_TIME = -sys.float_info.max


def segment_accrual(rate: float, start_time: float, end_time: float) -> float:
    """
    Изменение баланса за отрезок [start_time, end_time] при постоянной ставке.

    Отрезок, заканчивающийся раньше start_time, имеет нулевую длину: событие,
    уже свёрнутое в settlement, не начисляется повторно.

    Examples:
        >>> segment_accrual(2.0, 10.0, 15.0)
        10.0
        >>> segment_accrual(2.0, 10.0, 5.0)
        0.0
    """
    if end_time <= start_time:
        return 0.0
    return rate * (end_time - start_time)


def apply_rate_change(rate: float, delta: float) -> float:
    """
    rate + delta, где остаток округления относительно слагаемых равен нулю.

    Examples:
        >>> apply_rate_change(-0.1 - 0.2, 0.3)
        0.0
    """
    return snap_to_zero(rate + delta, max(abs(rate), abs(delta)))


def project_zero_crossing(balance: float, rate: float, time: float) -> CriticalTime:
    """
    Момент, когда balance + rate * (t - time) обращается в ноль.

    Args:
        balance: Несклампленный баланс на момент time
        rate: Чистая ставка потока (amount/second)
        time: Момент, к которому относится balance

    Returns:
        CriticalTime.at(t_zero) при rate < 0, иначе CriticalTime.never().
        Переполнение t_zero вверх даёт never, вниз — EARLIEST_TIME.
    """
    if rate >= 0:
        return CriticalTime.never()

    crossing = time - balance / rate
    if math.isfinite(crossing):
        return CriticalTime.at(crossing)
    if crossing < 0:
        return CriticalTime.at(EARLIEST_TIME)
    return CriticalTime.never()
