"""Analytics Engine - Cross-habit rankings, averages and totals.

Builds dashboard and leaderboard figures by running the per-habit
AdherenceEngine calculations over one owner's habit collection. Results are
recomputed on every call; callers that re-render often should memoize.

Archived habits are excluded unless `include_archived=True` is passed.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from .. import const
from ..exceptions import ValidationError
from ..utils.math_utils import mean
from .adherence_engine import AdherenceEngine
from .ledger_engine import LedgerEngine
from .schedule_engine import ScheduleEngine

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..type_defs import (
        CompletionBreakdown,
        HabitData,
        HabitRankEntry,
        HabitStatsSummary,
    )


class AnalyticsEngine:
    """Pure logic engine for aggregate habit statistics.

    All methods are static and accept any iterable of habits (a list, or the
    values of an id-keyed dict). Original order is preserved for ties.
    """

    # ────────────────────────────────────────────────────────────────
    # Selection
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def filter_habits(
        habits: Iterable[HabitData], mode: str = const.HABIT_FILTER_ALL
    ) -> list[HabitData]:
        """Return habits matching a list filter ("all", "active", "archived").

        Unknown modes behave like "all".
        """
        if mode == const.HABIT_FILTER_ACTIVE:
            return [h for h in habits if not h.get(const.DATA_HABIT_ARCHIVED, False)]
        if mode == const.HABIT_FILTER_ARCHIVED:
            return [h for h in habits if h.get(const.DATA_HABIT_ARCHIVED, False)]
        return list(habits)

    @staticmethod
    def _select(habits: Iterable[HabitData], include_archived: bool) -> list[HabitData]:
        """Return the habits an aggregate should cover."""
        if include_archived:
            return list(habits)
        return AnalyticsEngine.filter_habits(habits, const.HABIT_FILTER_ACTIVE)

    @staticmethod
    def habits_due_on(
        habits: Iterable[HabitData], day: date | datetime | str
    ) -> list[HabitData]:
        """Return habits due on the day, not-yet-completed first, then by name."""
        due = [habit for habit in habits if ScheduleEngine.is_due(habit, day)]
        return sorted(
            due,
            key=lambda habit: (
                LedgerEngine.completed_on(habit, day),
                str(habit.get(const.DATA_HABIT_NAME, "")).casefold(),
            ),
        )

    # ────────────────────────────────────────────────────────────────
    # Rankings
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def _top(
        habits: list[HabitData],
        metric: Callable[[HabitData], int],
        n: int,
    ) -> list[HabitRankEntry]:
        """Rank habits by a metric, descending, keeping original order on ties."""
        if n <= 0:
            return []
        scored: list[HabitRankEntry] = [
            {"habit": habit, "value": metric(habit)} for habit in habits
        ]
        # sorted() is stable, so equal values keep collection order
        scored.sort(key=lambda entry: entry["value"], reverse=True)
        return scored[:n]

    @staticmethod
    def top_by_streak(
        habits: Iterable[HabitData],
        today: date | datetime | str,
        n: int = const.DEFAULT_TOP_HABITS_COUNT,
        *,
        include_archived: bool = False,
    ) -> list[HabitRankEntry]:
        """Return the `n` habits with the highest current streak."""
        return AnalyticsEngine._top(
            AnalyticsEngine._select(habits, include_archived),
            lambda habit: AdherenceEngine.current_streak(habit, today),
            n,
        )

    @staticmethod
    def top_by_completion_rate(
        habits: Iterable[HabitData],
        window_days: int,
        today: date | datetime | str,
        n: int = const.DEFAULT_TOP_HABITS_COUNT,
        *,
        include_archived: bool = False,
    ) -> list[HabitRankEntry]:
        """Return the `n` habits with the highest completion rate in the window."""
        return AnalyticsEngine._top(
            AnalyticsEngine._select(habits, include_archived),
            lambda habit: AdherenceEngine.completion_rate(habit, window_days, today),
            n,
        )

    # ────────────────────────────────────────────────────────────────
    # Aggregates
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def average_completion_rate(
        habits: Iterable[HabitData],
        window_days: int,
        today: date | datetime | str,
        *,
        include_archived: bool = False,
    ) -> float:
        """Return the mean per-habit completion rate; 0.0 for no habits."""
        return mean(
            AdherenceEngine.completion_rate(habit, window_days, today)
            for habit in AnalyticsEngine._select(habits, include_archived)
        )

    @staticmethod
    def total_completions(
        habits: Iterable[HabitData], *, include_archived: bool = False
    ) -> int:
        """Return the number of completed entries across all habits."""
        return sum(
            AdherenceEngine.total_completions(habit)
            for habit in AnalyticsEngine._select(habits, include_archived)
        )

    @staticmethod
    def longest_streak_across_all(
        habits: Iterable[HabitData],
        today: date | datetime | str,
        *,
        include_archived: bool = False,
    ) -> int:
        """Return the highest *current* streak among the habits; 0 for none."""
        return max(
            (
                AdherenceEngine.current_streak(habit, today)
                for habit in AnalyticsEngine._select(habits, include_archived)
            ),
            default=0,
        )

    @staticmethod
    def completion_breakdown(
        habits: Iterable[HabitData], *, include_archived: bool = False
    ) -> CompletionBreakdown:
        """Return completed vs missed entry counts across the habits.

        "Missed" counts entries recorded with completed=False; days without
        any entry are not counted.
        """
        completed = 0
        recorded = 0
        for habit in AnalyticsEngine._select(habits, include_archived):
            entries: list[Mapping[str, Any]] = list(
                habit.get(const.DATA_HABIT_ENTRIES, [])
            )
            recorded += len(entries)
            completed += sum(
                1 for entry in entries if entry.get(const.DATA_ENTRY_COMPLETED, False)
            )
        return {"completed": completed, "missed": recorded - completed}

    # ────────────────────────────────────────────────────────────────
    # Dashboard
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def window_days_for_range(stats_range: str) -> int:
        """Return the window length for a named range ("week", "month", "year").

        Raises:
            ValidationError: For an unknown range name.
        """
        try:
            return const.STATS_RANGE_WINDOW_DAYS[stats_range]
        except KeyError:
            raise ValidationError(
                field="stats_range",
                translation_key=const.TRANS_KEY_INVALID_STATS_RANGE,
                placeholders={"value": str(stats_range)},
            ) from None

    @staticmethod
    def build_summary(
        habits: Iterable[HabitData],
        window_days: int,
        today: date | datetime | str,
        top_n: int = const.DEFAULT_TOP_HABITS_COUNT,
        *,
        include_archived: bool = False,
    ) -> HabitStatsSummary:
        """Return every dashboard figure for a habit collection in one structure."""
        selected = AnalyticsEngine._select(habits, include_archived)
        # Selection already applied; pass include_archived=True to avoid re-filtering
        return {
            "window_days": window_days,
            "habit_count": len(selected),
            "average_completion_rate": AnalyticsEngine.average_completion_rate(
                selected, window_days, today, include_archived=True
            ),
            "longest_current_streak": AnalyticsEngine.longest_streak_across_all(
                selected, today, include_archived=True
            ),
            "total_completions": AnalyticsEngine.total_completions(
                selected, include_archived=True
            ),
            "top_by_streak": AnalyticsEngine.top_by_streak(
                selected, today, top_n, include_archived=True
            ),
            "top_by_completion_rate": AnalyticsEngine.top_by_completion_rate(
                selected, window_days, today, top_n, include_archived=True
            ),
            "breakdown": AnalyticsEngine.completion_breakdown(
                selected, include_archived=True
            ),
            "due_today": AnalyticsEngine.habits_due_on(selected, today),
        }
