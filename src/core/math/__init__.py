"""
Core math modules

Числовой домен леджера и арифметика непрерывных потоков.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    BALANCE_FLOOR,
    RATE_REL_TOLERANCE,
    clamp,
    clamp_balance,
    is_valid_float,
    snap_to_zero,
    validate_finite,
    validate_non_negative,
)

# Flow Math
from src.core.math.flow_math import (
    EARLIEST_TIME,
    apply_rate_change,
    project_zero_crossing,
    segment_accrual,
)

__all__ = [
    # Numerical Safeguards — Constants
    "BALANCE_FLOOR",
    "RATE_REL_TOLERANCE",
    # Numerical Safeguards — Validation
    "is_valid_float",
    "validate_finite",
    "validate_non_negative",
    # Numerical Safeguards — Utilities
    "clamp",
    "clamp_balance",
    "snap_to_zero",
    # Flow Math
    "EARLIEST_TIME",
    "apply_rate_change",
    "project_zero_crossing",
    "segment_accrual",
]
