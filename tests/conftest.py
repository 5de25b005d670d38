"""Shared fixtures for HabitKit tests."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from typing import Any
from zoneinfo import ZoneInfo

import pytest

from habitkit import const
from habitkit.store import MemoryHabitStore
from habitkit.type_defs import HabitData, HabitEntryData
from habitkit.utils import dt_utils

OWNER_ID = "user-1"
OTHER_OWNER_ID = "user-2"

# Mon/Wed/Fri
MWF_MASK = [True, False, True, False, True, False, False]
DAILY_MASK = [True] * 7


def make_entry(day: str, completed: bool = True, note: str | None = None) -> HabitEntryData:
    """Build a raw ledger entry with a predictable id."""
    return {
        const.DATA_ENTRY_INTERNAL_ID: f"entry-{day}",
        const.DATA_ENTRY_DATE: day,
        const.DATA_ENTRY_COMPLETED: completed,
        const.DATA_ENTRY_NOTE: note,
    }


def make_habit(
    habit_id: str = "habit-1",
    *,
    name: str = "Read",
    frequency: list[bool] | None = None,
    start_date: str = "2024-01-01",
    end_date: str | None = None,
    archived: bool = False,
    locked: bool = False,
    completed_days: list[str] | None = None,
    entries: list[HabitEntryData] | None = None,
    owner_id: str = OWNER_ID,
) -> HabitData:
    """Build a complete habit record without going through the builders."""
    if entries is None:
        entries = [make_entry(day) for day in completed_days or []]
    return {
        const.DATA_HABIT_INTERNAL_ID: habit_id,
        const.DATA_HABIT_NAME: name,
        const.DATA_HABIT_DESCRIPTION: "",
        const.DATA_HABIT_COLOR: const.DEFAULT_HABIT_COLOR,
        const.DATA_HABIT_ICON: "",
        const.DATA_HABIT_TIME_OF_DAY: const.DEFAULT_TIME_OF_DAY,
        const.DATA_HABIT_FREQUENCY: list(frequency or DAILY_MASK),
        const.DATA_HABIT_START_DATE: start_date,
        const.DATA_HABIT_END_DATE: end_date,
        const.DATA_HABIT_ARCHIVED: archived,
        const.DATA_HABIT_LOCKED: locked,
        const.DATA_HABIT_ENTRIES: entries,
        const.DATA_HABIT_CREATED_BY: owner_id,
        const.DATA_HABIT_CREATED_AT: "2024-01-01T00:00:00+00:00",
        const.DATA_HABIT_UPDATED_AT: "2024-01-01T00:00:00+00:00",
    }


def make_goal(goal_id: str = "goal-1", related: list[str] | None = None) -> dict[str, Any]:
    """Build a complete goal record."""
    return {
        const.DATA_GOAL_INTERNAL_ID: goal_id,
        const.DATA_GOAL_NAME: "Get fit",
        const.DATA_GOAL_DESCRIPTION: "",
        const.DATA_GOAL_TARGET_DATE: None,
        const.DATA_GOAL_PROGRESS: 0.0,
        const.DATA_GOAL_TARGET: 100.0,
        const.DATA_GOAL_UNIT: "%",
        const.DATA_GOAL_CATEGORY: "Personal",
        const.DATA_GOAL_COLOR: const.DEFAULT_GOAL_COLOR,
        const.DATA_GOAL_RELATED_HABITS: list(related or []),
        const.DATA_GOAL_LOCKED: False,
        const.DATA_GOAL_COMPLETED: False,
        const.DATA_GOAL_CREATED_BY: OWNER_ID,
        const.DATA_GOAL_CREATED_AT: "2024-01-01T00:00:00+00:00",
        const.DATA_GOAL_UPDATED_AT: "2024-01-01T00:00:00+00:00",
    }


@pytest.fixture(autouse=True)
def reset_default_timezone() -> Iterator[None]:
    """Keep every test on UTC, whatever a manager under test configured."""
    dt_utils.set_default_timezone(ZoneInfo("UTC"))
    yield
    dt_utils.set_default_timezone(ZoneInfo("UTC"))


@pytest.fixture
def today() -> date:
    """Reference day used by engine tests (a Sunday)."""
    return date(2024, 1, 7)


@pytest.fixture
def mwf_habit() -> HabitData:
    """Mon/Wed/Fri habit starting Monday 2024-01-01 with Mon and Wed done."""
    return make_habit(
        frequency=MWF_MASK, completed_days=["2024-01-01", "2024-01-03"]
    )


@pytest.fixture
def memory_store() -> MemoryHabitStore:
    """Empty in-memory store."""
    return MemoryHabitStore()
