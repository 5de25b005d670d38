"""Schedule Engine for HabitKit.

Decides whether a habit is due on a calendar day and enumerates scheduled
days, using `dateutil.rrule` with native `byweekday` filtering for the
weekly recurrence mask.

ARCHITECTURE: This is a pure logic engine. All methods are static and operate
on passed-in habit data. It must NOT import from managers.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from typing import TYPE_CHECKING, Any, ClassVar

from dateutil.rrule import FR, MO, SA, SU, TH, TU, WE, WEEKLY, rrule, weekday

from .. import const
from ..utils.dt_utils import normalize, weekday_of

if TYPE_CHECKING:
    from ..type_defs import HabitData


class ScheduleEngine:
    """Pure logic engine for habit recurrence.

    A habit is *scheduled* on a day when the day lies inside its active range
    and the weekday mask is set for that weekday. It is *due* when it is
    scheduled and not archived.
    """

    # rrule weekday constants indexed by Weekday (Monday=0)
    RRULE_WEEKDAYS: ClassVar[tuple[weekday, ...]] = (MO, TU, WE, TH, FR, SA, SU)

    # RFC 5545 BYDAY codes indexed by Weekday
    BYDAY_CODES: ClassVar[tuple[str, ...]] = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

    # =========================================================================
    # Mask and range accessors
    # =========================================================================

    @staticmethod
    def frequency_mask(habit: HabitData | Mapping[str, Any]) -> tuple[bool, ...]:
        """Return the habit's weekday mask as seven booleans (Monday first).

        Accepts the stored list form and, for records written by older
        clients, the weekday-name mapping form. Missing positions are False.
        """
        raw = habit.get(const.DATA_HABIT_FREQUENCY) or []
        if isinstance(raw, Mapping):
            return tuple(bool(raw.get(key, False)) for key in const.WEEKDAY_KEYS)
        values = [bool(flag) for flag in list(raw)[: const.DAYS_PER_WEEK]]
        values.extend([False] * (const.DAYS_PER_WEEK - len(values)))
        return tuple(values)

    @staticmethod
    def active_range(
        habit: HabitData | Mapping[str, Any],
    ) -> tuple[date, date | None]:
        """Return (start_date, end_date) as calendar days; end may be None."""
        start = normalize(habit[const.DATA_HABIT_START_DATE])
        raw_end = habit.get(const.DATA_HABIT_END_DATE)
        end = normalize(raw_end) if raw_end else None
        return start, end

    # =========================================================================
    # Evaluation
    # =========================================================================

    @staticmethod
    def is_scheduled(
        habit: HabitData | Mapping[str, Any], day: date | datetime | str
    ) -> bool:
        """Return True if the habit's range and weekday mask cover the day.

        Ignores the archived flag; completion_rate() counts scheduled days of
        archived habits too.
        """
        target = normalize(day)
        start, end = ScheduleEngine.active_range(habit)
        if target < start:
            return False
        if end is not None and target > end:
            return False
        return ScheduleEngine.frequency_mask(habit)[weekday_of(target)]

    @staticmethod
    def is_due(habit: HabitData | Mapping[str, Any], day: date | datetime | str) -> bool:
        """Return True if the habit should be done on the given day.

        Fails closed for archived habits and for days outside the active
        range; otherwise follows the weekday mask.
        """
        if habit.get(const.DATA_HABIT_ARCHIVED, False):
            return False
        return ScheduleEngine.is_scheduled(habit, day)

    @staticmethod
    def scheduled_days(
        habit: HabitData | Mapping[str, Any],
        start: date | datetime | str,
        end: date | datetime | str,
    ) -> list[date]:
        """Return every scheduled day in [start, end], clipped to the active range.

        Args:
            habit: Habit data
            start: First day of the range (inclusive)
            end: Last day of the range (inclusive)

        Returns:
            Sorted list of calendar days. Empty when the mask is empty or the
            ranges do not overlap.
        """
        rule = ScheduleEngine._build_rule(habit, normalize(start), normalize(end))
        if rule is None:
            return []
        return [occurrence.date() for occurrence in rule]

    @staticmethod
    def next_due_date(
        habit: HabitData | Mapping[str, Any], after: date | datetime | str
    ) -> date | None:
        """Return the first due day strictly after the given day.

        Returns:
            The next due day, or None for archived habits, empty masks and
            habits whose end_date has passed.
        """
        if habit.get(const.DATA_HABIT_ARCHIVED, False):
            return None
        rule = ScheduleEngine._build_rule(habit, None, None)
        if rule is None:
            return None
        reference = datetime.combine(normalize(after), time.min)
        occurrence = rule.after(reference, inc=False)
        return occurrence.date() if occurrence else None

    @staticmethod
    def to_rrule_string(habit: HabitData | Mapping[str, Any]) -> str:
        """Generate an RFC 5545 RRULE string for calendar export.

        Returns:
            RRULE string (e.g., "FREQ=WEEKLY;INTERVAL=1;BYDAY=MO,WE,FR"),
            "FREQ=DAILY;INTERVAL=1" when every day is set, or empty string
            for an empty mask.
        """
        mask = ScheduleEngine.frequency_mask(habit)
        if not any(mask):
            return ""
        if all(mask):
            base = "FREQ=DAILY;INTERVAL=1"
        else:
            days = ",".join(
                code
                for code, enabled in zip(ScheduleEngine.BYDAY_CODES, mask, strict=True)
                if enabled
            )
            base = f"FREQ=WEEKLY;INTERVAL=1;BYDAY={days}"

        _, end = ScheduleEngine.active_range(habit)
        if end is not None:
            return f"{base};UNTIL={end.strftime('%Y%m%d')}"
        return base

    # =========================================================================
    # Private helpers
    # =========================================================================

    @staticmethod
    def _build_rule(
        habit: HabitData | Mapping[str, Any],
        range_start: date | None,
        range_end: date | None,
    ) -> rrule | None:
        """Build the weekly rrule for a habit, clipped to an optional range.

        Returns None when nothing can occur (empty mask or empty overlap).
        rrule treats an empty byweekday as "no filter", so the empty mask
        must be caught here.
        """
        mask = ScheduleEngine.frequency_mask(habit)
        byweekday = [
            ScheduleEngine.RRULE_WEEKDAYS[index]
            for index, enabled in enumerate(mask)
            if enabled
        ]
        if not byweekday:
            return None

        start, end = ScheduleEngine.active_range(habit)
        first = max(start, range_start) if range_start else start
        last = end
        if range_end is not None:
            last = min(end, range_end) if end is not None else range_end
        if last is not None and last < first:
            return None

        # Type stubs expect Literal weekdays, rrule accepts the constants at runtime
        return rrule(
            WEEKLY,
            dtstart=datetime.combine(first, time.min),
            until=datetime.combine(last, time.min) if last is not None else None,
            byweekday=byweekday,  # type: ignore[arg-type]
        )
