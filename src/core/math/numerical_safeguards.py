"""
Numerical Safeguards — проверки числового домена леджера

Все суммы, ставки потока и моменты времени леджера живут в одном числовом
домене (float). Модуль обеспечивает:
- Валидацию входных значений (не NaN, не Inf)
- Валидацию знака для сумм и ставок
- Clamp для внешне видимого баланса

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не попадают в состояние аккаунтов
2. Проверки выполняются до любой записи состояния
"""

import math
from typing import Final

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Нижняя граница внешне видимого баланса
BALANCE_FLOOR: Final[float] = 0.0

# Относительный допуск остатка округления в суммах ставок
RATE_REL_TOLERANCE: Final[float] = 1e-12


# =============================================================================
# ПРОВЕРКИ FLOAT
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли значение валидным числом домена (не NaN, не Inf).

    bool и нечисловые типы не считаются валидными.

    Examples:
        >>> is_valid_float(10.0)
        True
        >>> is_valid_float(float('nan'))
        False
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_finite(value: float, name: str) -> float:
    """
    Валидация, что значение конечное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value, приведённое к float

    Raises:
        ValueError: Если value NaN/Inf или не число
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a finite number (not NaN/Inf), got {value!r}")
    return float(value)


def validate_non_negative(value: float, name: str) -> float:
    """
    Валидация, что значение конечное и неотрицательное.

    Raises:
        ValueError: Если value < 0 или NaN/Inf
    """
    value = validate_finite(value, name)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """
    Ограничение значения в заданном диапазоне.

    Examples:
        >>> clamp(-1.0, 0.0)
        0.0
        >>> clamp(15.0, 0.0, 10.0)
        10.0
    """
    result = value

    if min_value is not None:
        result = max(result, min_value)

    if max_value is not None:
        result = min(result, max_value)

    return result


def clamp_balance(balance: float) -> float:
    """Внешне видимый баланс никогда не бывает отрицательным."""
    return clamp(balance, min_value=BALANCE_FLOOR)


def snap_to_zero(value: float, scale: float, rel_tol: float = RATE_REL_TOLERANCE) -> float:
    """
    Приравнивание к нулю значения, неотличимого от нуля на масштабе scale.

    Examples:
        >>> snap_to_zero(-5.5e-17, 0.3)
        0.0
        >>> snap_to_zero(0.1, 0.3)
        0.1
    """
    if abs(value) <= rel_tol * abs(scale):
        return 0.0
    return value
