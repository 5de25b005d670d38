"""Habit Manager - Stateful orchestration of habit workflows.

This manager handles every operation that changes a habit:
- Create / update (validated by data_builders)
- Archive, unarchive and lock transitions (LifecycleEngine)
- Completion recording (LedgerEngine.set_completion)
- Deletion, including unlinking the habit from goals
- Dashboard statistics over the owner's collection (AnalyticsEngine)

ARCHITECTURE:
- HabitManager = STATEFUL snapshot of one owner's habits and goals
- Engines = Pure logic (STATELESS), never touch the store

Every mutation validates locally, awaits the store and only then swaps the
new record into the snapshot (confirm-then-update). A store failure
propagates unchanged and leaves the snapshot as it was. There is no locking:
one writer per habit is assumed and the store is last-write-wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .. import const, data_builders as db
from ..engines.adherence_engine import AdherenceEngine
from ..engines.analytics_engine import AnalyticsEngine
from ..engines.ledger_engine import UNSET, LedgerEngine, _Unset
from ..engines.lifecycle_engine import LifecycleEngine
from ..exceptions import NotFoundError, ValidationError
from ..utils.dt_utils import (
    dt_today_local,
    get_default_timezone,
    normalize,
)
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..store import HabitStore
    from ..type_defs import (
        GoalData,
        GoalId,
        HabitAdherence,
        HabitData,
        HabitDayStatus,
        HabitId,
        HabitOptions,
        HabitStatsSummary,
        OwnerId,
    )


class HabitManager(BaseManager):
    """Manager for one owner's habits, their ledgers and related goals.

    Responsibilities:
    - Keep an in-memory snapshot consistent with what the store confirmed
    - Enforce ownership and lifecycle guards before any store call
    - Emit SIGNAL_SUFFIX_* events after successful mutations

    NOT responsible for:
    - Retrying failed store calls
    - Caching analytics (recomputed on every call)
    """

    def __init__(
        self,
        store: HabitStore,
        owner_id: OwnerId,
        options: HabitOptions | None = None,
    ) -> None:
        """Initialize the HabitManager.

        Args:
            store: Persistence collaborator
            owner_id: Identity of the caller
            options: CONF_* keyed options (time zone, stats window, top count)
        """
        super().__init__(store, owner_id, options)
        self._habits: dict[HabitId, HabitData] = {}
        self._goals: dict[GoalId, GoalData] = {}
        self.time_zone: ZoneInfo | None = self._resolve_time_zone()

    # =========================================================================
    # Setup and configuration
    # =========================================================================

    def _resolve_time_zone(self) -> ZoneInfo | None:
        """Return the CONF_TIME_ZONE zone, or None to use the dt_utils default.

        The zone is kept on this manager and passed to dt_utils explicitly, so
        managers with different zones do not affect each other.
        """
        zone_name = self.get_option(const.CONF_TIME_ZONE, const.DEFAULT_TIME_ZONE_NAME)
        try:
            zone = ZoneInfo(str(zone_name))
        except (ZoneInfoNotFoundError, ValueError):
            const.LOGGER.warning(
                "HabitManager: Invalid time zone %r, keeping %s",
                zone_name,
                get_default_timezone(),
            )
            return None
        return zone

    async def async_setup(self) -> None:
        """Load the owner's habits and goals from the store."""
        await self.async_load()

    async def async_load(self) -> None:
        """Replace the snapshot with the owner's records from the store.

        Raises:
            PersistenceError: Propagated from the store; snapshot unchanged.
        """
        habits = await self.store.async_load_habits(self.owner_id)
        goals = await self.store.async_load_goals(self.owner_id)
        self._habits = {habit[const.DATA_HABIT_INTERNAL_ID]: habit for habit in habits}
        self._goals = {goal[const.DATA_GOAL_INTERNAL_ID]: goal for goal in goals}
        const.LOGGER.debug(
            "HabitManager: Loaded %d habits and %d goals for owner %s",
            len(self._habits),
            len(self._goals),
            self.owner_id,
        )

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def habits(self) -> list[HabitData]:
        """Return the owner's habits in load/creation order."""
        return list(self._habits.values())

    @property
    def goals(self) -> list[GoalData]:
        """Return the owner's goals in load/creation order."""
        return list(self._goals.values())

    def get_habit(self, habit_id: HabitId) -> HabitData:
        """Return a habit from the snapshot.

        Raises:
            NotFoundError: If the habit is not loaded.
        """
        habit = self._habits.get(habit_id)
        if habit is None:
            raise NotFoundError(const.ITEM_TYPE_HABIT, habit_id)
        return habit

    def list_habits(self, mode: str = const.HABIT_FILTER_ALL) -> list[HabitData]:
        """Return habits filtered by "all", "active" or "archived"."""
        return AnalyticsEngine.filter_habits(self._habits.values(), mode)

    def _get_owned_habit(self, habit_id: HabitId) -> HabitData:
        """Return a habit the current owner may mutate."""
        habit = self.get_habit(habit_id)
        LifecycleEngine.ensure_owner(habit, self.owner_id)
        return habit

    # =========================================================================
    # Habit CRUD
    # =========================================================================

    async def async_create_habit(self, user_input: Mapping[str, Any]) -> HabitData:
        """Validate, persist and add a new habit.

        Raises:
            ValidationError: From build_habit(); nothing is persisted.
            PersistenceError: From the store; snapshot unchanged.
        """
        if not user_input.get(const.DATA_HABIT_START_DATE):
            user_input = {
                **user_input,
                const.DATA_HABIT_START_DATE: dt_today_local(self.time_zone).isoformat(),
            }
        habit = db.build_habit(user_input, owner_id=self.owner_id)
        await self.store.async_save_habit(habit)

        habit_id = habit[const.DATA_HABIT_INTERNAL_ID]
        self._habits[habit_id] = habit
        const.LOGGER.info(
            "HabitManager: Created habit '%s' (%s)",
            habit[const.DATA_HABIT_NAME],
            habit_id,
        )
        await self.async_emit(const.SIGNAL_SUFFIX_HABIT_CREATED, habit_id=habit_id)
        return habit

    async def async_update_habit(
        self, habit_id: HabitId, user_input: Mapping[str, Any]
    ) -> HabitData:
        """Apply a partial update to a habit.

        Raises:
            NotFoundError, PermissionDeniedError, ValidationError: Before any
                store call.
            PersistenceError: From the store; snapshot unchanged.
        """
        existing = self._get_owned_habit(habit_id)
        habit = db.build_habit(user_input, existing=existing)
        return await self._async_commit(
            habit, const.SIGNAL_SUFFIX_HABIT_UPDATED, "Updated"
        )

    async def async_archive_habit(self, habit_id: HabitId) -> HabitData:
        """Archive a habit; it stops being due but keeps its history."""
        habit = LifecycleEngine.archive(self._get_owned_habit(habit_id))
        return await self._async_commit(
            habit, const.SIGNAL_SUFFIX_HABIT_UPDATED, "Archived"
        )

    async def async_unarchive_habit(self, habit_id: HabitId) -> HabitData:
        """Return an archived habit to the active list."""
        habit = LifecycleEngine.unarchive(self._get_owned_habit(habit_id))
        return await self._async_commit(
            habit, const.SIGNAL_SUFFIX_HABIT_UPDATED, "Unarchived"
        )

    async def async_lock_habit(self, habit_id: HabitId) -> HabitData:
        """Lock a habit. Locking is permanent and blocks deletion.

        Raises:
            ValidationError: If the habit is already locked.
        """
        existing = self._get_owned_habit(habit_id)
        try:
            habit = LifecycleEngine.lock(existing)
        except ValidationError:
            const.LOGGER.warning("HabitManager: Habit %s is already locked", habit_id)
            raise
        return await self._async_commit(
            habit, const.SIGNAL_SUFFIX_HABIT_UPDATED, "Locked"
        )

    async def async_delete_habit(self, habit_id: HabitId) -> None:
        """Unlink a habit from goals, then delete it and its entries.

        Goals are saved first, so a failure there propagates with the habit
        still stored and never leaves a goal pointing at a deleted habit.

        Raises:
            NotFoundError, PermissionDeniedError: Unknown or foreign habit.
            ValidationError: If the habit is locked.
            PersistenceError: From the store.
        """
        self._get_owned_habit(habit_id)
        try:
            remaining = LifecycleEngine.delete(self._habits, habit_id)
        except ValidationError:
            const.LOGGER.warning("HabitManager: Refused to delete habit %s", habit_id)
            raise

        for goal in LifecycleEngine.unlink_habit_from_goals(
            self._goals.values(), habit_id
        ):
            await self.store.async_save_goal(goal)
            self._goals[goal[const.DATA_GOAL_INTERNAL_ID]] = goal

        await self.store.async_delete_habit(habit_id)
        self._habits = remaining

        const.LOGGER.info("HabitManager: Deleted habit %s", habit_id)
        await self.async_emit(const.SIGNAL_SUFFIX_HABIT_DELETED, habit_id=habit_id)

    # =========================================================================
    # Completion ledger
    # =========================================================================

    async def async_set_completion(
        self,
        habit_id: HabitId,
        day: date | datetime | str,
        completed: bool,
        note: str | None | _Unset = UNSET,
    ) -> HabitData:
        """Set a day's completion state (idempotent).

        Args:
            habit_id: Habit to record against
            day: Day of the entry; time-of-day is stripped
            completed: State to store
            note: New note; omitted keeps the existing note

        Raises:
            NotFoundError, PermissionDeniedError: Unknown or foreign habit.
            PersistenceError: From the store; snapshot unchanged.
        """
        existing = self._get_owned_habit(habit_id)
        day = normalize(day, self.time_zone)
        habit = LifecycleEngine.touch(
            LedgerEngine.set_completion(existing, day, completed, note)
        )
        await self.store.async_save_habit(habit)
        self._habits[habit_id] = habit

        const.LOGGER.debug(
            "HabitManager: Set %s on %s to completed=%s",
            habit_id,
            day.isoformat(),
            completed,
        )
        await self.async_emit(
            const.SIGNAL_SUFFIX_COMPLETION_CHANGED,
            habit_id=habit_id,
            date=day.isoformat(),
            completed=bool(completed),
        )
        return habit

    async def async_toggle_completion(
        self, habit_id: HabitId, day: date | datetime | str
    ) -> HabitData:
        """Flip a day's completion state.

        Reads the current state once and calls async_set_completion() with
        the negation, so the stored operation stays idempotent.
        """
        day = normalize(day, self.time_zone)
        current = LedgerEngine.completed_on(self.get_habit(habit_id), day)
        return await self.async_set_completion(habit_id, day, not current)

    async def async_clear_completion(
        self, habit_id: HabitId, day: date | datetime | str
    ) -> HabitData:
        """Remove a day's entry entirely (the day reads as never recorded)."""
        existing = self._get_owned_habit(habit_id)
        day = normalize(day, self.time_zone)
        habit = LifecycleEngine.touch(LedgerEngine.remove_entry(existing, day))
        await self.store.async_save_habit(habit)
        self._habits[habit_id] = habit
        await self.async_emit(
            const.SIGNAL_SUFFIX_COMPLETION_CHANGED,
            habit_id=habit_id,
            date=day.isoformat(),
            completed=False,
        )
        return habit

    # =========================================================================
    # Goals
    # =========================================================================

    async def async_save_goal(
        self, user_input: Mapping[str, Any], goal_id: GoalId | None = None
    ) -> GoalData:
        """Create a goal, or update it when goal_id is given.

        Raises:
            NotFoundError: If goal_id is not loaded.
            ValidationError: From build_goal().
            PersistenceError: From the store; snapshot unchanged.
        """
        existing = None
        if goal_id is not None:
            existing = self._goals.get(goal_id)
            if existing is None:
                raise NotFoundError(const.ITEM_TYPE_GOAL, goal_id)
        goal = db.build_goal(user_input, existing, owner_id=self.owner_id)
        await self.store.async_save_goal(goal)
        self._goals[goal[const.DATA_GOAL_INTERNAL_ID]] = goal
        return goal

    # =========================================================================
    # Statistics
    # =========================================================================

    def _resolve_today(self, today: date | datetime | str | None) -> date:
        """Return the reference day, defaulting to today in the configured zone."""
        if today is None:
            return dt_today_local(self.time_zone)
        return normalize(today, self.time_zone)

    def get_adherence(
        self, habit_id: HabitId, today: date | datetime | str | None = None
    ) -> HabitAdherence:
        """Return streaks and completion rate for one habit."""
        return AdherenceEngine.summarize(
            self.get_habit(habit_id),
            self.get_option(const.CONF_DEFAULT_WINDOW_DAYS, const.DEFAULT_WINDOW_DAYS),
            self._resolve_today(today),
        )

    def get_recent_days(
        self, habit_id: HabitId, today: date | datetime | str | None = None
    ) -> list[HabitDayStatus]:
        """Return the 7-day due/completed grid for one habit."""
        return AdherenceEngine.recent_days(
            self.get_habit(habit_id), self._resolve_today(today)
        )

    async def async_get_stats(
        self, today: date | datetime | str | None = None
    ) -> HabitStatsSummary:
        """Return dashboard figures for the owner's habits using the options."""
        reference = self._resolve_today(today)
        summary = AnalyticsEngine.build_summary(
            self._habits.values(),
            self.get_option(const.CONF_DEFAULT_WINDOW_DAYS, const.DEFAULT_WINDOW_DAYS),
            reference,
            self.get_option(const.CONF_TOP_HABITS_COUNT, const.DEFAULT_TOP_HABITS_COUNT),
            include_archived=self.get_option(
                const.CONF_INCLUDE_ARCHIVED_IN_STATS,
                const.DEFAULT_INCLUDE_ARCHIVED_IN_STATS,
            ),
        )
        const.LOGGER.debug(
            "HabitManager: Computed stats for %d habits as of %s",
            summary["habit_count"],
            reference.isoformat(),
        )
        return summary

    # =========================================================================
    # Private helpers
    # =========================================================================

    async def _async_commit(self, habit: HabitData, signal: str, verb: str) -> HabitData:
        """Persist a habit, then swap it into the snapshot and emit the signal."""
        await self.store.async_save_habit(habit)
        habit_id = habit[const.DATA_HABIT_INTERNAL_ID]
        self._habits[habit_id] = habit
        const.LOGGER.info("HabitManager: %s habit %s", verb, habit_id)
        await self.async_emit(signal, habit_id=habit_id)
        return habit
