"""
Clock — источник логического времени леджера (секунды).

Леджер читает часы ровно один раз на внешний вызов и передаёт `now`
явным параметром во все вычисления.
"""

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    """Wall-clock время в целых секундах Unix epoch."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Управляемые часы для симуляций и тестов. Время не идёт назад."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        self._now = int(start)

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Сдвиг часов вперёд. Returns: новое значение времени."""
        if seconds < 0:
            raise ValueError(f"cannot advance clock by negative {seconds}s")
        self._now += int(seconds)
        return self._now

    def set(self, now: int) -> None:
        if now < self._now:
            raise ValueError(f"cannot move clock back from {self._now} to {now}")
        self._now = int(now)
