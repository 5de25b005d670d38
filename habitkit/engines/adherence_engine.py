"""Adherence Engine - Streaks and completion rates for a single habit.

This engine consolidates the per-habit calculations used by streak badges,
detail views and charts:
- Current streak (consecutive completed days ending today or yesterday)
- Longest streak ever recorded
- Completion rate over a trailing window of scheduled days
- Recent-days grid (due / completed per day)

Design Principles:
    - Stateless: operates on passed habit data, never caches
    - Deterministic: "today" is always an explicit argument
    - Total: empty ledgers and windows without scheduled days return 0

Streaks count consecutive *calendar* days with completed entries, not
consecutive *scheduled* days. A Mon/Wed/Fri habit completed on all three days
therefore has streaks of 1. This matches the behavior users have seen so far;
changing it is a product decision.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import date_range, days_between, normalize
from ..utils.math_utils import calculate_percentage, clamp
from .ledger_engine import LedgerEngine
from .schedule_engine import ScheduleEngine

if TYPE_CHECKING:
    from ..type_defs import HabitAdherence, HabitData, HabitDayStatus


class AdherenceEngine:
    """Pure logic engine for per-habit adherence figures.

    All methods are static - no instance state.

    Example:
        today = dt_today_local()
        streak = AdherenceEngine.current_streak(habit, today)
        best = AdherenceEngine.longest_streak(habit)
        rate = AdherenceEngine.completion_rate(habit, 30, today)
    """

    # ────────────────────────────────────────────────────────────────
    # Streaks
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def current_streak(
        habit: HabitData | Mapping[str, Any], today: date | datetime | str
    ) -> int:
        """Return the number of consecutive completed days ending today or yesterday.

        Streak logic:
        - No completed entries: 0
        - Most recent completion older than yesterday: 0 (streak broken)
        - Otherwise count back from the most recent completion while each
          completed day is exactly one day before the previous one

        A completion dated after `today` is the most recent one and anchors the
        count like any other day; only a gap of more than one day before
        `today` breaks the streak.

        Args:
            habit: Habit data
            today: Reference day supplied by the caller

        Returns:
            Streak length (>= 0)

        Example:
            # completed Jan 1, Jan 2, Jan 3; today = Jan 4
            current_streak(habit, date(2024, 1, 4)) → 3
        """
        reference = normalize(today)
        days = list(reversed(LedgerEngine.completed_days(habit)))
        if not days:
            return 0

        most_recent = days[0]
        if days_between(reference, most_recent) > 1:
            return 0

        streak = 1
        previous = most_recent
        for day in days[1:]:
            if days_between(previous, day) != 1:
                break
            streak += 1
            previous = day
        return streak

    @staticmethod
    def longest_streak(habit: HabitData | Mapping[str, Any]) -> int:
        """Return the longest run of consecutive completed days ever recorded.

        Always >= current_streak(habit, today) for any today.

        Returns:
            Longest streak length (>= 0)
        """
        days = LedgerEngine.completed_days(habit)
        if not days:
            return 0

        run = 1
        best = 1
        for previous, day in zip(days, days[1:], strict=False):
            if days_between(day, previous) == 1:
                run += 1
                best = max(best, run)
            else:
                run = 1
        return best

    # ────────────────────────────────────────────────────────────────
    # Completion Rate
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def window_bounds(window_days: int, today: date | datetime | str) -> tuple[date, date]:
        """Return (first_day, last_day) of a trailing window ending at today.

        Example:
            window_bounds(7, date(2024, 1, 7)) → (date(2024, 1, 1), date(2024, 1, 7))
        """
        last = normalize(today)
        return last - timedelta(days=max(window_days, 1) - 1), last

    @staticmethod
    def completion_rate(
        habit: HabitData | Mapping[str, Any],
        window_days: int,
        today: date | datetime | str,
    ) -> int:
        """Return the percentage of scheduled days in the window that were completed.

        - Window: the `window_days` calendar days ending at `today` inclusive
        - Scheduled days: weekday mask and active range (archived flag ignored)
        - Completed days: completed entries dated inside the window

        Args:
            habit: Habit data
            window_days: Window length in days (<= 0 yields 0)
            today: Reference day supplied by the caller

        Returns:
            Whole-number percentage in [0, 100]; 0 when nothing was scheduled.

        Example:
            # daily habit, 5 of the 7 days ending Jan 7 completed
            completion_rate(habit, 7, date(2024, 1, 7)) → 71
        """
        if window_days <= 0:
            return 0

        first, last = AdherenceEngine.window_bounds(window_days, today)
        scheduled_count = len(ScheduleEngine.scheduled_days(habit, first, last))
        if scheduled_count == 0:
            return 0

        completed_count = sum(
            1 for day in LedgerEngine.completed_days(habit) if first <= day <= last
        )
        # Completions on unscheduled days can push the raw ratio past 100
        return int(clamp(calculate_percentage(completed_count, scheduled_count), 0, 100))

    # ────────────────────────────────────────────────────────────────
    # Totals and Views
    # ────────────────────────────────────────────────────────────────

    @staticmethod
    def total_completions(habit: HabitData | Mapping[str, Any]) -> int:
        """Return the number of completed days in the habit's ledger."""
        return len(LedgerEngine.completed_days(habit))

    @staticmethod
    def recent_days(
        habit: HabitData | Mapping[str, Any],
        today: date | datetime | str,
        days: int = const.DEFAULT_RECENT_DAYS,
    ) -> list[HabitDayStatus]:
        """Return due/completed status for the last `days` days, oldest first.

        Feeds the weekday grid shown on habit cards.
        """
        if days <= 0:
            return []
        first, last = AdherenceEngine.window_bounds(days, today)
        completed = set(LedgerEngine.completed_days(habit))
        return [
            {
                "date": day.isoformat(),
                "due": ScheduleEngine.is_due(habit, day),
                "completed": day in completed,
            }
            for day in date_range(first, last)
        ]

    @staticmethod
    def summarize(
        habit: HabitData | Mapping[str, Any],
        window_days: int,
        today: date | datetime | str,
    ) -> HabitAdherence:
        """Return all per-habit figures in one structure."""
        return {
            "habit_id": habit.get(const.DATA_HABIT_INTERNAL_ID, const.SENTINEL_EMPTY),
            "current_streak": AdherenceEngine.current_streak(habit, today),
            "longest_streak": AdherenceEngine.longest_streak(habit),
            "completion_rate": AdherenceEngine.completion_rate(habit, window_days, today),
            "total_completions": AdherenceEngine.total_completions(habit),
        }
