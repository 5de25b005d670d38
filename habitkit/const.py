# File: const.py
"""Constants for HabitKit.

This file centralizes storage keys, defaults, configuration keys, error
translation keys and the package logger for consistency across the library.
"""

import logging
from typing import Final

# Logger
LOGGER = logging.getLogger(__package__)

# ------------------------------------------------------------------------------------------------
# Configuration Keys (options mapping passed to HabitManager)
# ------------------------------------------------------------------------------------------------
CONF_TIME_ZONE = "time_zone"
CONF_DEFAULT_WINDOW_DAYS = "default_window_days"
CONF_TOP_HABITS_COUNT = "top_habits_count"
CONF_INCLUDE_ARCHIVED_IN_STATS = "include_archived_in_stats"

# ------------------------------------------------------------------------------------------------
# Manager Event Signals (BaseManager.async_emit / listen)
# ------------------------------------------------------------------------------------------------
SIGNAL_SUFFIX_HABIT_CREATED = "habit_created"
SIGNAL_SUFFIX_HABIT_UPDATED = "habit_updated"
SIGNAL_SUFFIX_HABIT_DELETED = "habit_deleted"
SIGNAL_SUFFIX_COMPLETION_CHANGED = "completion_changed"

# ------------------------------------------------------------------------------------------------
# Storage buckets (MemoryHabitStore)
# ------------------------------------------------------------------------------------------------
STORAGE_HABITS = "habits"
STORAGE_GOALS = "goals"

# ------------------------------------------------------------------------------------------------
# Defaults
# ------------------------------------------------------------------------------------------------
DEFAULT_TIME_ZONE_NAME = "UTC"
DEFAULT_WINDOW_DAYS = 30
DEFAULT_TOP_HABITS_COUNT = 5
DEFAULT_INCLUDE_ARCHIVED_IN_STATS = False
DEFAULT_RECENT_DAYS = 7

DEFAULT_HABIT_COLOR = "#4f46e5"  # Indigo
DEFAULT_GOAL_COLOR = "#4f46e5"
DEFAULT_GOAL_TARGET = 100.0
DEFAULT_GOAL_UNIT = "%"
DEFAULT_GOAL_CATEGORY = "Personal"

SENTINEL_EMPTY = ""

# ------------------------------------------------------------------------------------------------
# Weekdays (index order matches datetime.date.weekday(): Monday=0 ... Sunday=6)
# ------------------------------------------------------------------------------------------------
WEEKDAY_MONDAY = "monday"
WEEKDAY_TUESDAY = "tuesday"
WEEKDAY_WEDNESDAY = "wednesday"
WEEKDAY_THURSDAY = "thursday"
WEEKDAY_FRIDAY = "friday"
WEEKDAY_SATURDAY = "saturday"
WEEKDAY_SUNDAY = "sunday"

WEEKDAY_KEYS: Final[tuple[str, ...]] = (
    WEEKDAY_MONDAY,
    WEEKDAY_TUESDAY,
    WEEKDAY_WEDNESDAY,
    WEEKDAY_THURSDAY,
    WEEKDAY_FRIDAY,
    WEEKDAY_SATURDAY,
    WEEKDAY_SUNDAY,
)

DAYS_PER_WEEK = 7

# ------------------------------------------------------------------------------------------------
# Time of Day (display metadata)
# ------------------------------------------------------------------------------------------------
TIME_OF_DAY_MORNING = "morning"
TIME_OF_DAY_AFTERNOON = "afternoon"
TIME_OF_DAY_EVENING = "evening"
TIME_OF_DAY_ANYTIME = "anytime"

TIME_OF_DAY_OPTIONS: Final[frozenset[str]] = frozenset(
    {
        TIME_OF_DAY_MORNING,
        TIME_OF_DAY_AFTERNOON,
        TIME_OF_DAY_EVENING,
        TIME_OF_DAY_ANYTIME,
    }
)

DEFAULT_TIME_OF_DAY = TIME_OF_DAY_ANYTIME

# ------------------------------------------------------------------------------------------------
# Stats Windows
# ------------------------------------------------------------------------------------------------
STATS_RANGE_WEEK = "week"
STATS_RANGE_MONTH = "month"
STATS_RANGE_YEAR = "year"

STATS_RANGE_WINDOW_DAYS: Final[dict[str, int]] = {
    STATS_RANGE_WEEK: 7,
    STATS_RANGE_MONTH: 30,
    STATS_RANGE_YEAR: 365,
}

# Habit list filters
HABIT_FILTER_ALL = "all"
HABIT_FILTER_ACTIVE = "active"
HABIT_FILTER_ARCHIVED = "archived"

# ------------------------------------------------------------------------------------------------
# Data Keys - Habits
# ------------------------------------------------------------------------------------------------
DATA_HABIT_INTERNAL_ID = "internal_id"
DATA_HABIT_NAME = "name"
DATA_HABIT_DESCRIPTION = "description"
DATA_HABIT_COLOR = "color"
DATA_HABIT_ICON = "icon"
DATA_HABIT_TIME_OF_DAY = "time_of_day"
DATA_HABIT_FREQUENCY = "frequency"
DATA_HABIT_START_DATE = "start_date"
DATA_HABIT_END_DATE = "end_date"
DATA_HABIT_ARCHIVED = "archived"
DATA_HABIT_LOCKED = "locked"
DATA_HABIT_ENTRIES = "entries"
DATA_HABIT_CREATED_BY = "created_by"
DATA_HABIT_CREATED_AT = "created_at"
DATA_HABIT_UPDATED_AT = "updated_at"

# Data Keys - Habit Entries
DATA_ENTRY_INTERNAL_ID = "internal_id"
DATA_ENTRY_DATE = "date"
DATA_ENTRY_COMPLETED = "completed"
DATA_ENTRY_NOTE = "note"

# Data Keys - Goals
DATA_GOAL_INTERNAL_ID = "internal_id"
DATA_GOAL_NAME = "name"
DATA_GOAL_DESCRIPTION = "description"
DATA_GOAL_TARGET_DATE = "target_date"
DATA_GOAL_PROGRESS = "progress"
DATA_GOAL_TARGET = "target"
DATA_GOAL_UNIT = "unit"
DATA_GOAL_CATEGORY = "category"
DATA_GOAL_COLOR = "color"
DATA_GOAL_RELATED_HABITS = "related_habits"
DATA_GOAL_LOCKED = "locked"
DATA_GOAL_COMPLETED = "completed"
DATA_GOAL_CREATED_BY = "created_by"
DATA_GOAL_CREATED_AT = "created_at"
DATA_GOAL_UPDATED_AT = "updated_at"

# Item types (error reporting)
ITEM_TYPE_HABIT = "habit"
ITEM_TYPE_GOAL = "goal"

# ------------------------------------------------------------------------------------------------
# Error Translation Keys
# ------------------------------------------------------------------------------------------------
TRANS_KEY_INVALID_HABIT_NAME = "invalid_habit_name"
TRANS_KEY_INVALID_FREQUENCY = "invalid_frequency"
TRANS_KEY_EMPTY_FREQUENCY = "empty_frequency"
TRANS_KEY_INVALID_START_DATE = "invalid_start_date"
TRANS_KEY_INVALID_END_DATE = "invalid_end_date"
TRANS_KEY_END_DATE_BEFORE_START = "end_date_before_start_date"
TRANS_KEY_INVALID_TIME_OF_DAY = "invalid_time_of_day"
TRANS_KEY_HABIT_LOCKED = "habit_locked"
TRANS_KEY_HABIT_ALREADY_LOCKED = "habit_already_locked"
TRANS_KEY_CANNOT_UNLOCK_HABIT = "cannot_unlock_habit"
TRANS_KEY_INVALID_ENTRY_DATE = "invalid_entry_date"
TRANS_KEY_DUPLICATE_ENTRY_DATE = "duplicate_entry_date"
TRANS_KEY_INVALID_GOAL_NAME = "invalid_goal_name"
TRANS_KEY_INVALID_GOAL_TARGET = "invalid_goal_target"
TRANS_KEY_INVALID_STATS_RANGE = "invalid_stats_range"
