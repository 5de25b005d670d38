"""Type definitions for HabitKit data structures.

Entities are plain dicts described by TypedDicts. Keys match the DATA_*
constants in const.py, and every field holds a JSON-friendly value (dates are
ISO strings) so a store can persist them without conversion.

TypedDict is STATIC ANALYSIS ONLY. The engines still normalize every date
they read through dt_utils.normalize() and use .get() defaults where a stored
record may predate a field.

IMPORTANT: This file must NOT import from managers or engines to avoid
circular dependencies. Only import from typing (type machinery).
"""

from typing import Any, Literal, NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitId = str  # UUID string
EntryId = str  # UUID string
GoalId = str  # UUID string
OwnerId = str  # Identity collaborator user id
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"

# Seven booleans indexed by Weekday (Monday=0 ... Sunday=6)
FrequencyMask = list[bool]

HabitFilterMode = Literal["all", "active", "archived"]


# =============================================================================
# Habit Entities
# =============================================================================


class HabitEntryData(TypedDict):
    """One calendar day's completion record for a habit.

    At most one entry exists per (habit, date). Entries are only created
    through LedgerEngine.set_completion().
    """

    internal_id: EntryId
    date: ISODate
    completed: bool
    note: str | None


class HabitData(TypedDict):
    """Type definition for a habit entity.

    All fields are present once built via data_builders.build_habit().
    """

    internal_id: HabitId
    name: str
    description: str
    color: str
    icon: str
    time_of_day: str  # morning | afternoon | evening | anytime
    frequency: FrequencyMask
    start_date: ISODate
    end_date: ISODate | None
    archived: bool
    locked: bool  # One-way flag: false -> true only
    entries: list[HabitEntryData]  # Sorted ascending by date
    created_by: OwnerId
    created_at: ISODatetime
    updated_at: ISODatetime


class GoalData(TypedDict):
    """Type definition for a goal that references habits by id.

    HabitKit only rewrites related_habits (on habit deletion); the rest is
    owned by whichever collaborator manages goals.
    """

    internal_id: GoalId
    name: str
    description: str
    target_date: ISODate | None
    progress: float
    target: float
    unit: str
    category: str
    color: str
    related_habits: list[HabitId]
    locked: bool
    completed: bool
    created_by: OwnerId
    created_at: ISODatetime
    updated_at: ISODatetime


# =============================================================================
# Derived Structures (computed, never stored)
# =============================================================================


class HabitDayStatus(TypedDict):
    """Due/completed state of a habit on one day (weekday grid cell)."""

    date: ISODate
    due: bool
    completed: bool


class HabitAdherence(TypedDict):
    """Per-habit adherence figures for streak badges and detail views."""

    habit_id: HabitId
    current_streak: int
    longest_streak: int
    completion_rate: int
    total_completions: int


class HabitRankEntry(TypedDict):
    """One row of a leaderboard (top habits by streak or rate)."""

    habit: HabitData
    value: int


class CompletionBreakdown(TypedDict):
    """Completed vs missed entry counts (doughnut chart data)."""

    completed: int
    missed: int


class HabitStatsSummary(TypedDict):
    """Dashboard bundle produced by AnalyticsEngine.build_summary()."""

    window_days: int
    habit_count: int
    average_completion_rate: float
    longest_current_streak: int
    total_completions: int
    top_by_streak: list[HabitRankEntry]
    top_by_completion_rate: list[HabitRankEntry]
    breakdown: CompletionBreakdown
    due_today: NotRequired[list[HabitData]]


# Options mapping accepted by HabitManager (CONF_* keys)
HabitOptions = dict[str, Any]
