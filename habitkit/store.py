"""Persistence contract for HabitKit.

HabitManager talks to storage only through the HabitStore interface below.
Every method is async and raises PersistenceError on failure; the manager
never retries. Records go in and come out as the plain dicts described in
type_defs.py, keyed by internal_id.

MemoryHabitStore is a dict-backed implementation used by the test suite and
by embedders that keep data in process.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import copy
from typing import TYPE_CHECKING, Any

from . import const
from .exceptions import PersistenceError

if TYPE_CHECKING:
    from .type_defs import GoalData, HabitData, HabitId, OwnerId


class HabitStore(ABC):
    """Abstract async store for habits and goals."""

    @abstractmethod
    async def async_load_habits(self, owner_id: OwnerId) -> list[HabitData]:
        """Return every habit created by the owner."""

    @abstractmethod
    async def async_save_habit(self, habit: HabitData) -> None:
        """Insert or replace a habit (last write wins)."""

    @abstractmethod
    async def async_delete_habit(self, habit_id: HabitId) -> None:
        """Delete a habit and its entries."""

    @abstractmethod
    async def async_load_goals(self, owner_id: OwnerId) -> list[GoalData]:
        """Return every goal created by the owner."""

    @abstractmethod
    async def async_save_goal(self, goal: GoalData) -> None:
        """Insert or replace a goal (last write wins)."""


class MemoryHabitStore(HabitStore):
    """Handles in-process storage of HabitKit data.

    Records are deep-copied on the way in and out, so callers can never
    mutate stored state through a reference they hold.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            data: Optional initial structure as returned by
                  get_default_structure(); copied, not referenced.
        """
        self._data: dict[str, Any] = (
            copy.deepcopy(data) if data is not None else self.get_default_structure()
        )

    @staticmethod
    def get_default_structure() -> dict[str, Any]:
        """Return canonical empty data structure.

        Returns:
            dict: Habit and goal buckets keyed by internal_id.
        """
        return {
            const.STORAGE_HABITS: {},
            const.STORAGE_GOALS: {},
        }

    @property
    def data(self) -> dict[str, Any]:
        """Return a copy of the stored data."""
        return copy.deepcopy(self._data)

    async def async_load_habits(self, owner_id: OwnerId) -> list[HabitData]:
        """Return deep copies of the owner's habits in insertion order."""
        habits = [
            copy.deepcopy(habit)
            for habit in self._data[const.STORAGE_HABITS].values()
            if habit.get(const.DATA_HABIT_CREATED_BY) == owner_id
        ]
        const.LOGGER.debug(
            "MemoryHabitStore: Loaded %d habits for owner %s", len(habits), owner_id
        )
        return habits

    async def async_save_habit(self, habit: HabitData) -> None:
        """Insert or replace a habit."""
        habit_id = habit.get(const.DATA_HABIT_INTERNAL_ID)
        if not habit_id:
            raise PersistenceError("Cannot save a habit without internal_id")
        self._data[const.STORAGE_HABITS][habit_id] = copy.deepcopy(habit)
        const.LOGGER.debug("MemoryHabitStore: Saved habit %s", habit_id)

    async def async_delete_habit(self, habit_id: HabitId) -> None:
        """Delete a habit; deleting an unknown id is a no-op."""
        self._data[const.STORAGE_HABITS].pop(habit_id, None)
        const.LOGGER.debug("MemoryHabitStore: Deleted habit %s", habit_id)

    async def async_load_goals(self, owner_id: OwnerId) -> list[GoalData]:
        """Return deep copies of the owner's goals in insertion order."""
        return [
            copy.deepcopy(goal)
            for goal in self._data[const.STORAGE_GOALS].values()
            if goal.get(const.DATA_GOAL_CREATED_BY) == owner_id
        ]

    async def async_save_goal(self, goal: GoalData) -> None:
        """Insert or replace a goal."""
        goal_id = goal.get(const.DATA_GOAL_INTERNAL_ID)
        if not goal_id:
            raise PersistenceError("Cannot save a goal without internal_id")
        self._data[const.STORAGE_GOALS][goal_id] = copy.deepcopy(goal)
        const.LOGGER.debug("MemoryHabitStore: Saved goal %s", goal_id)
