"""HabitKit: habit scheduling and adherence engine.

Pure engines (habitkit.engines) answer "is this habit due today?" and
"how well has it been kept?"; HabitManager (habitkit.managers) wraps them with
an async store for embedders that need persistence.
"""

from .exceptions import (
    HabitKitError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationError,
)
from .managers import HabitManager
from .store import HabitStore, MemoryHabitStore

__all__ = [
    "HabitKitError",
    "HabitManager",
    "HabitStore",
    "MemoryHabitStore",
    "NotFoundError",
    "PermissionDeniedError",
    "PersistenceError",
    "ValidationError",
]
