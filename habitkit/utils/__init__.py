# File: utils/__init__.py
"""Pure Python utilities for HabitKit.

Submodules:
    - dt_utils: Calendar-day normalization, comparison and clock helpers
    - math_utils: Percentage, rounding and averaging helpers

Usage:
    from . import dt_utils
    from .math_utils import calculate_percentage
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
