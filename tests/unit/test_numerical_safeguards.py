"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Проверку валидности float (NaN/Inf, не-числа)
2. Валидацию конечных и неотрицательных значений
3. Clamp внешне видимого баланса
4. Подавление остатка округления
"""

import pytest

from src.core.math.numerical_safeguards import (
    BALANCE_FLOOR,
    clamp,
    clamp_balance,
    is_valid_float,
    snap_to_zero,
    validate_finite,
    validate_non_negative,
)

# =============================================================================
# ТЕСТЫ ВАЛИДНОСТИ FLOAT
# =============================================================================


class TestIsValidFloat:
    """Тесты для is_valid_float"""

    def test_finite_values_valid(self) -> None:
        """Конечные числа валидны"""
        assert is_valid_float(0.0)
        assert is_valid_float(-1.5)
        assert is_valid_float(10)

    def test_nan_inf_invalid(self) -> None:
        """NaN и Inf невалидны"""
        assert not is_valid_float(float("nan"))
        assert not is_valid_float(float("inf"))
        assert not is_valid_float(float("-inf"))

    def test_non_numeric_invalid(self) -> None:
        """bool и строки не являются числами домена"""
        assert not is_valid_float(True)
        assert not is_valid_float("10")
        assert not is_valid_float(None)


# =============================================================================
# ТЕСТЫ ВАЛИДАЦИИ
# =============================================================================


class TestValidation:
    """Тесты для validate_finite / validate_non_negative"""

    def test_validate_finite_returns_float(self) -> None:
        result = validate_finite(5, "amount")
        assert result == 5.0
        assert isinstance(result, float)

    def test_validate_finite_allows_negative(self) -> None:
        assert validate_finite(-3.0, "amount") == -3.0

    def test_validate_finite_rejects_nan(self) -> None:
        with pytest.raises(ValueError, match="amount"):
            validate_finite(float("nan"), "amount")

    def test_validate_non_negative_accepts_zero(self) -> None:
        assert validate_non_negative(0.0, "rate") == 0.0

    def test_validate_non_negative_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            validate_non_negative(-0.1, "rate")

    def test_validate_non_negative_rejects_inf(self) -> None:
        with pytest.raises(ValueError, match="finite"):
            validate_non_negative(float("inf"), "rate")


# =============================================================================
# ТЕСТЫ CLAMP
# =============================================================================


class TestClamp:
    """Тесты для clamp / clamp_balance"""

    def test_clamp_within_range(self) -> None:
        assert clamp(5.0, 0.0, 10.0) == 5.0

    def test_clamp_bounds(self) -> None:
        assert clamp(-1.0, 0.0, 10.0) == 0.0
        assert clamp(15.0, 0.0, 10.0) == 10.0

    def test_clamp_open_bounds(self) -> None:
        assert clamp(-100.0) == -100.0
        assert clamp(-100.0, min_value=-5.0) == -5.0

    def test_clamp_balance_floor(self) -> None:
        """Отрицательный баланс отображается как ноль"""
        assert clamp_balance(-42.0) == BALANCE_FLOOR
        assert clamp_balance(42.0) == 42.0


class TestSnapToZero:
    """Тесты для snap_to_zero"""

    def test_residue_snapped(self) -> None:
        assert snap_to_zero(-5.5e-17, 0.3) == 0.0

    def test_significant_value_kept(self) -> None:
        assert snap_to_zero(0.1, 0.3) == 0.1

    def test_zero_scale_keeps_non_zero(self) -> None:
        assert snap_to_zero(1e-300, 0.0) == 1e-300

    @pytest.mark.parametrize("value", [1e-9, -1e-9])
    def test_custom_tolerance(self, value: float) -> None:
        assert snap_to_zero(value, 1.0, rel_tol=1e-6) == 0.0
