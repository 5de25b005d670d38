# File: utils/math_utils.py
"""Math and calculation utilities for HabitKit.

Pure Python math functions with no imports from engines, managers or const.py.

Functions:
    - round_half_up: Integer rounding that rounds .5 away from zero
    - round_rate: Consistent rounding to configured precision
    - calculate_percentage: Whole-number percentage with division guard
    - clamp: Bound a value to a range
    - mean: Arithmetic mean with empty-input guard
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

# Module-level logger
_LOGGER = logging.getLogger(__name__)

# ==============================================================================
# Constants (local copies to avoid circular imports)
# ==============================================================================

# Default float precision for averaged rates
DATA_FLOAT_PRECISION = 2


# ==============================================================================
# Rounding
# ==============================================================================


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded away from zero.

    Python's built-in round() uses banker's rounding (round(12.5) == 12);
    completion rates are shown to users who expect 12.5% to read as 13%.

    Examples:
        round_half_up(12.5) → 13
        round_half_up(71.428) → 71
        round_half_up(-2.5) → -3
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_rate(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a rate to the configured precision.

    Examples:
        round_rate(66.666) → 66.67
        round_rate(50.0) → 50.0
    """
    return round(value, precision)


# ==============================================================================
# Percentages and Aggregates
# ==============================================================================


def calculate_percentage(current: float, target: float) -> int:
    """Calculate a whole-number percentage.

    Args:
        current: Achieved count
        target: Possible count

    Returns:
        round_half_up(100 * current / target), or 0 if target is 0

    Examples:
        calculate_percentage(5, 7) → 71
        calculate_percentage(1, 8) → 13
        calculate_percentage(5, 0) → 0  # Division by zero protection
    """
    if target <= 0:
        return 0
    return round_half_up((current / target) * 100)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def mean(values: Iterable[float], precision: int = DATA_FLOAT_PRECISION) -> float:
    """Return the rounded arithmetic mean, or 0.0 for no values.

    Examples:
        mean([50, 100]) → 75.0
        mean([1, 2, 2]) → 1.67
        mean([]) → 0.0
    """
    items = list(values)
    if not items:
        return 0.0
    return round_rate(sum(items) / len(items), precision)
