"""Ledger Engine - Pure logic for a habit's date-keyed completion entries.

This engine provides stateless, pure Python functions for:
- Idempotent upsert-by-day (set_completion)
- Entry lookup by calendar day
- Completed-day extraction for the adherence calculators

The ledger's only mutation primitive is "set the state of this day". There is
deliberately no toggle here: a toggle flips on every call, so a retried
request would undo itself. HabitManager offers a toggle convenience that
reads the current state once and calls set_completion() with the negation.

ARCHITECTURE: This is a pure logic engine. All methods are static and never
mutate their inputs; they return updated copies. State management belongs in
HabitManager.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Final, cast
import uuid

from .. import const
from ..utils.dt_utils import normalize

if TYPE_CHECKING:
    from ..type_defs import HabitData, HabitEntryData


class _Unset:
    """Marker type for "argument not supplied"."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


class LedgerEngine:
    """Pure logic engine for habit entry ledgers.

    Entries are kept sorted ascending by date with at most one entry per
    calendar day. Lookups are linear scans over the (small) entry list.
    """

    @staticmethod
    def create_entry(
        day: date | datetime | str,
        completed: bool,
        note: str | None = None,
    ) -> HabitEntryData:
        """Create a new ledger entry for a calendar day.

        Args:
            day: Day of the entry; time-of-day is stripped
            completed: Completion state
            note: Optional free text

        Returns:
            HabitEntryData TypedDict with a fresh internal_id
        """
        entry: HabitEntryData = {
            const.DATA_ENTRY_INTERNAL_ID: str(uuid.uuid4()),
            const.DATA_ENTRY_DATE: normalize(day).isoformat(),
            const.DATA_ENTRY_COMPLETED: bool(completed),
            const.DATA_ENTRY_NOTE: note,
        }
        return entry

    @staticmethod
    def entry_on(
        habit: HabitData | Mapping[str, Any], day: date | datetime | str
    ) -> HabitEntryData | None:
        """Return the habit's entry for a calendar day, or None."""
        target = normalize(day)
        for entry in habit.get(const.DATA_HABIT_ENTRIES, []):
            if normalize(entry[const.DATA_ENTRY_DATE]) == target:
                return cast("HabitEntryData", entry)
        return None

    @staticmethod
    def completed_on(
        habit: HabitData | Mapping[str, Any], day: date | datetime | str
    ) -> bool:
        """Return True if the habit has a completed entry on the day."""
        entry = LedgerEngine.entry_on(habit, day)
        return bool(entry and entry.get(const.DATA_ENTRY_COMPLETED, False))

    @staticmethod
    def set_completion(
        habit: HabitData,
        day: date | datetime | str,
        completed: bool,
        note: str | None | _Unset = UNSET,
    ) -> HabitData:
        """Set the completion state of one calendar day (toggle-or-create).

        Calling this twice with the same arguments yields the same ledger.
        Setting False keeps the entry (completed=False); it is not removed.

        Args:
            habit: Habit data (not mutated)
            day: Day to record; time-of-day is stripped
            completed: Completion state to store
            note: New note. When not supplied, an existing note is preserved.
                  Passing None explicitly clears it.

        Returns:
            Copy of the habit with exactly one entry for the day.
        """
        target = normalize(day)
        entries: list[HabitEntryData] = []
        found = False

        for entry in habit.get(const.DATA_HABIT_ENTRIES, []):
            if normalize(entry[const.DATA_ENTRY_DATE]) != target:
                entries.append(entry)
                continue
            if found:
                # Duplicate day in a loaded ledger; fold it into the first one
                const.LOGGER.warning(
                    "LedgerEngine: Dropping duplicate entry %s for %s on habit %s",
                    entry.get(const.DATA_ENTRY_INTERNAL_ID),
                    target.isoformat(),
                    habit.get(const.DATA_HABIT_INTERNAL_ID),
                )
                continue
            found = True
            updated: HabitEntryData = {
                **entry,
                const.DATA_ENTRY_DATE: target.isoformat(),
                const.DATA_ENTRY_COMPLETED: bool(completed),
            }
            if not isinstance(note, _Unset):
                updated[const.DATA_ENTRY_NOTE] = note
            entries.append(updated)

        if not found:
            entries.append(
                LedgerEngine.create_entry(
                    target, completed, None if isinstance(note, _Unset) else note
                )
            )

        return cast(
            "HabitData",
            {**habit, const.DATA_HABIT_ENTRIES: LedgerEngine.sort_entries(entries)},
        )

    @staticmethod
    def remove_entry(habit: HabitData, day: date | datetime | str) -> HabitData:
        """Return a copy of the habit without any entry for the day.

        Removing a day that has no entry returns an equal copy.
        """
        target = normalize(day)
        entries = [
            entry
            for entry in habit.get(const.DATA_HABIT_ENTRIES, [])
            if normalize(entry[const.DATA_ENTRY_DATE]) != target
        ]
        return cast("HabitData", {**habit, const.DATA_HABIT_ENTRIES: entries})

    @staticmethod
    def sort_entries(entries: list[HabitEntryData]) -> list[HabitEntryData]:
        """Return entries sorted ascending by calendar day (stable)."""
        return sorted(entries, key=lambda entry: normalize(entry[const.DATA_ENTRY_DATE]))

    @staticmethod
    def completed_days(habit: HabitData | Mapping[str, Any]) -> list[date]:
        """Return the sorted unique days that have a completed entry."""
        return sorted(
            {
                normalize(entry[const.DATA_ENTRY_DATE])
                for entry in habit.get(const.DATA_HABIT_ENTRIES, [])
                if entry.get(const.DATA_ENTRY_COMPLETED, False)
            }
        )
