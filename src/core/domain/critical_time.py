"""
CriticalTime — прогнозируемый момент неплатёжеспособности аккаунта

Tagged value вместо «магического» максимума float:
- CriticalTime.at(t)   — баланс достигнет нуля в момент t
- CriticalTime.never() — при текущих условиях баланс никогда не обнулится

Арифметика никогда не касается never-значения: сравнения с моментами
времени выполняются через is_after / precedes.
"""

import math

from pydantic import BaseModel, Field


class CriticalTime(BaseModel):
    """
    Критический момент аккаунта.

    Immutable модель (frozen=True), сравнивается по значению.
    """

    time: float | None = Field(
        None, description="Момент обнуления баланса (None — никогда)"
    )

    model_config = {"frozen": True}

    @classmethod
    def at(cls, time: float) -> "CriticalTime":
        if not math.isfinite(time):
            raise ValueError(f"critical time must be finite, got {time!r}")
        return cls(time=float(time))

    @classmethod
    def never(cls) -> "CriticalTime":
        return cls(time=None)

    @property
    def is_finite(self) -> bool:
        return self.time is not None

    def is_after(self, time: float) -> bool:
        """True если критический момент строго позже time (never позже всего)."""
        return self.time is None or self.time > time

    def precedes(self, time: float) -> bool:
        """True если критический момент конечен и строго раньше time."""
        return self.time is not None and self.time < time

    def __str__(self) -> str:
        return "never" if self.time is None else f"{self.time:.6f}"


NEVER_CRITICAL = CriticalTime.never()
