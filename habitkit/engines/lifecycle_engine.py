"""Lifecycle Engine - Pure logic for habit state transitions and guards.

Each habit has two independent state axes:
- Active/Archived: reversible, no preconditions
- Lock: one-way (unlocked -> locked). Locking twice is a caller error, and a
  locked habit cannot be deleted.

Field edits and creation are validated in data_builders.build_habit(); this
engine guards the transitions and deletion.

ARCHITECTURE: This is a pure logic engine. All methods are static and return
updated copies; the caller persists and swaps them into its snapshot.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any, cast

from .. import const
from ..exceptions import NotFoundError, PermissionDeniedError, ValidationError
from ..utils.dt_utils import dt_now_utc

if TYPE_CHECKING:
    from ..type_defs import GoalData, HabitData, HabitId


def _stamp(now: datetime | None) -> str:
    """Return the ISO timestamp for updated_at (engine-internal helper)."""
    return (now or dt_now_utc()).isoformat()


class LifecycleEngine:
    """Pure logic engine for archive/lock/delete transitions.

    All methods are static - no instance state.
    """

    # =========================================================================
    # Bookkeeping
    # =========================================================================

    @staticmethod
    def touch(habit: HabitData, now: datetime | None = None) -> HabitData:
        """Return a copy of the habit with updated_at set.

        Args:
            habit: Habit data (not mutated)
            now: Optional current time override for deterministic tests
        """
        return cast("HabitData", {**habit, const.DATA_HABIT_UPDATED_AT: _stamp(now)})

    # =========================================================================
    # Archive axis
    # =========================================================================

    @staticmethod
    def archive(habit: HabitData, now: datetime | None = None) -> HabitData:
        """Return a copy of the habit marked archived. History is kept."""
        return cast(
            "HabitData",
            {
                **habit,
                const.DATA_HABIT_ARCHIVED: True,
                const.DATA_HABIT_UPDATED_AT: _stamp(now),
            },
        )

    @staticmethod
    def unarchive(habit: HabitData, now: datetime | None = None) -> HabitData:
        """Return a copy of the habit with the archived flag cleared."""
        return cast(
            "HabitData",
            {
                **habit,
                const.DATA_HABIT_ARCHIVED: False,
                const.DATA_HABIT_UPDATED_AT: _stamp(now),
            },
        )

    # =========================================================================
    # Lock axis
    # =========================================================================

    @staticmethod
    def lock(habit: HabitData, now: datetime | None = None) -> HabitData:
        """Return a copy of the habit marked locked.

        Raises:
            ValidationError: If the habit is already locked.
        """
        if habit.get(const.DATA_HABIT_LOCKED, False):
            raise ValidationError(
                field=const.DATA_HABIT_LOCKED,
                translation_key=const.TRANS_KEY_HABIT_ALREADY_LOCKED,
                placeholders={"habit_id": habit.get(const.DATA_HABIT_INTERNAL_ID, "")},
            )
        return cast(
            "HabitData",
            {
                **habit,
                const.DATA_HABIT_LOCKED: True,
                const.DATA_HABIT_UPDATED_AT: _stamp(now),
            },
        )

    # =========================================================================
    # Guards
    # =========================================================================

    @staticmethod
    def can_delete(habit: HabitData | Mapping[str, Any]) -> bool:
        """Return True if the habit may be deleted (it is not locked)."""
        return not habit.get(const.DATA_HABIT_LOCKED, False)

    @staticmethod
    def ensure_deletable(habit: HabitData | Mapping[str, Any]) -> None:
        """Raise if the habit may not be deleted.

        Raises:
            ValidationError: If the habit is locked.
        """
        if not LifecycleEngine.can_delete(habit):
            raise ValidationError(
                field=const.DATA_HABIT_LOCKED,
                translation_key=const.TRANS_KEY_HABIT_LOCKED,
                placeholders={"habit_id": habit.get(const.DATA_HABIT_INTERNAL_ID, "")},
            )

    @staticmethod
    def ensure_owner(habit: HabitData | Mapping[str, Any], owner_id: str) -> None:
        """Raise if the habit does not belong to the owner.

        Raises:
            PermissionDeniedError: If created_by differs from owner_id.
        """
        if habit.get(const.DATA_HABIT_CREATED_BY) != owner_id:
            raise PermissionDeniedError(
                owner_id, str(habit.get(const.DATA_HABIT_INTERNAL_ID, ""))
            )

    # =========================================================================
    # Deletion
    # =========================================================================

    @staticmethod
    def delete(
        habits: Mapping[HabitId, HabitData], habit_id: HabitId
    ) -> dict[HabitId, HabitData]:
        """Return a new collection without the habit (its entries go with it).

        The input collection is never modified, so a failed guard leaves the
        caller's collection exactly as it was.

        Raises:
            NotFoundError: If the id is not in the collection.
            ValidationError: If the habit is locked.
        """
        habit = habits.get(habit_id)
        if habit is None:
            raise NotFoundError(const.ITEM_TYPE_HABIT, habit_id)
        LifecycleEngine.ensure_deletable(habit)
        return {key: value for key, value in habits.items() if key != habit_id}

    @staticmethod
    def unlink_habit_from_goals(
        goals: Iterable[GoalData], habit_id: HabitId, now: datetime | None = None
    ) -> list[GoalData]:
        """Return updated copies of the goals that referenced the habit.

        Goals that do not reference the habit are not returned, so the caller
        only saves what changed.
        """
        stamp = _stamp(now)
        changed: list[GoalData] = []
        for goal in goals:
            related = list(goal.get(const.DATA_GOAL_RELATED_HABITS, []))
            if habit_id not in related:
                continue
            changed.append(
                cast(
                    "GoalData",
                    {
                        **goal,
                        const.DATA_GOAL_RELATED_HABITS: [
                            item for item in related if item != habit_id
                        ],
                        const.DATA_GOAL_UPDATED_AT: stamp,
                    },
                )
            )
        return changed
