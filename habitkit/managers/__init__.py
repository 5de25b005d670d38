"""Manager modules for HabitKit.

Managers orchestrate workflows and coordinate between engines and the store.
They are stateful and async, and own the in-memory snapshot.
"""

from .base_manager import BaseManager
from .habit_manager import HabitManager

__all__ = [
    "BaseManager",
    "HabitManager",
]
