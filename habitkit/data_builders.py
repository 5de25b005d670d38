"""Entity lifecycle management helpers.

This module is the SINGLE SOURCE OF TRUTH for:
- Entity field defaults
- Business logic validation (frequency mask, date range, lock direction)
- Complete entity structure building

### Build Functions
Each entity type has a `build_<entity>()` function that:
- Takes user_input with DATA_* keys
- Generates internal_id (UUID) for new entities; a caller-supplied id is ignored
- Sets timestamps (created_at, updated_at)
- Applies field defaults
- Returns complete entity dict ready for storage
- Raises ValidationError on the first broken rule (nothing is clamped)

### Validation Functions
Each entity type has a `validate_<entity>_data()` function that:
- Takes data with DATA_* keys
- Performs business rule validation
- Returns dict of errors (empty if valid), for form layers that want to
  highlight every bad field at once
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any
import uuid

from . import const
from .engines.ledger_engine import LedgerEngine
from .exceptions import ValidationError
from .type_defs import FrequencyMask, GoalData, HabitData, HabitEntryData
from .utils.dt_utils import dt_now_utc, dt_today_local, normalize

# ==============================================================================
# HELPER FUNCTIONS FOR FIELD NORMALIZATION
# ==============================================================================


def normalize_frequency(value: Any) -> FrequencyMask:
    """Convert a frequency input into seven booleans (Monday first).

    Accepts:
    - A weekday-name mapping: {"monday": True, "tuesday": False, ...}
      (missing days are False)
    - A sequence of exactly seven booleans

    Raises:
        ValueError: For unknown weekday names, wrong lengths or other types.

    Note: an all-False mask is returned as-is; rejecting it is validation's job.
    """
    if isinstance(value, Mapping):
        unknown = set(value) - set(const.WEEKDAY_KEYS)
        if unknown:
            raise ValueError(f"Unknown weekday keys: {sorted(unknown)}")
        return [bool(value.get(key, False)) for key in const.WEEKDAY_KEYS]

    # Strings are sequences too; "1010101" must not slip through
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        if len(value) != const.DAYS_PER_WEEK:
            raise ValueError(
                f"Frequency must have {const.DAYS_PER_WEEK} entries, got {len(value)}"
            )
        return [bool(flag) for flag in value]

    raise ValueError(f"Unsupported frequency value: {value!r}")


def _parse_day(value: Any) -> date | None:
    """Normalize an optional day input; None/empty stays None."""
    if value is None or value == const.SENTINEL_EMPTY:
        return None
    if not isinstance(value, (date, datetime, str)):
        raise ValueError(f"Unsupported date value: {value!r}")
    return normalize(value)


def _now_iso(now: datetime | None) -> str:
    """Return the ISO timestamp for bookkeeping fields."""
    return (now or dt_now_utc()).isoformat()


# ==============================================================================
# HABIT ENTRIES
# ==============================================================================


def build_habit_entry(raw: Mapping[str, Any]) -> HabitEntryData:
    """Build a ledger entry from loose input, preserving its id when present.

    Raises:
        ValidationError: If the entry date cannot be parsed.
    """
    try:
        day = _parse_day(raw.get(const.DATA_ENTRY_DATE))
    except ValueError:
        day = None
    if day is None:
        raise ValidationError(
            field=const.DATA_HABIT_ENTRIES,
            translation_key=const.TRANS_KEY_INVALID_ENTRY_DATE,
            placeholders={"value": str(raw.get(const.DATA_ENTRY_DATE))},
        )

    entry = LedgerEngine.create_entry(
        day,
        bool(raw.get(const.DATA_ENTRY_COMPLETED, False)),
        raw.get(const.DATA_ENTRY_NOTE),
    )
    if raw.get(const.DATA_ENTRY_INTERNAL_ID):
        entry[const.DATA_ENTRY_INTERNAL_ID] = str(raw[const.DATA_ENTRY_INTERNAL_ID])
    return entry


def build_habit_entries(raw_entries: Any) -> list[HabitEntryData]:
    """Build a sorted ledger, rejecting two entries for the same day.

    Raises:
        ValidationError: On an unparseable date or a duplicate day.
    """
    entries: list[HabitEntryData] = []
    seen: set[str] = set()
    for raw in raw_entries or []:
        entry = build_habit_entry(raw)
        if entry[const.DATA_ENTRY_DATE] in seen:
            raise ValidationError(
                field=const.DATA_HABIT_ENTRIES,
                translation_key=const.TRANS_KEY_DUPLICATE_ENTRY_DATE,
                placeholders={"date": entry[const.DATA_ENTRY_DATE]},
            )
        seen.add(entry[const.DATA_ENTRY_DATE])
        entries.append(entry)
    return LedgerEngine.sort_entries(entries)


# ==============================================================================
# HABITS
# ==============================================================================


def validate_habit_data(
    data: Mapping[str, Any],
    existing: HabitData | None = None,
    *,
    is_update: bool = False,
) -> dict[str, str]:
    """Validate habit business rules - SINGLE SOURCE OF TRUTH.

    Args:
        data: Habit data dict with DATA_* keys (partial on update)
        existing: Current habit when updating; supplies the other end of the
                  date range and the current lock state
        is_update: True if updating existing habit (some validations skip)

    Returns:
        Dict of errors: {field: translation_key}
        Empty dict means validation passed.

    Validation Rules:
        1. Name not empty (create) or not blank (update if provided)
        2. Frequency well-formed with at least one weekday set
        3. start_date / end_date parseable
        4. end_date >= start_date (using existing values for the missing side)
        5. time_of_day is a known option
        6. locked never goes from True back to False
    """
    errors: dict[str, str] = {}

    # === 1. Name validation ===
    name = data.get(const.DATA_HABIT_NAME, "")
    name = name.strip() if isinstance(name, str) else ""
    if (not is_update or const.DATA_HABIT_NAME in data) and not name:
        errors[const.DATA_HABIT_NAME] = const.TRANS_KEY_INVALID_HABIT_NAME

    # === 2. Frequency mask ===
    if const.DATA_HABIT_FREQUENCY in data:
        try:
            mask = normalize_frequency(data[const.DATA_HABIT_FREQUENCY])
        except ValueError:
            errors[const.DATA_HABIT_FREQUENCY] = const.TRANS_KEY_INVALID_FREQUENCY
        else:
            if not any(mask):
                errors[const.DATA_HABIT_FREQUENCY] = const.TRANS_KEY_EMPTY_FREQUENCY

    # === 3. Date parsing ===
    start: date | None = None
    end: date | None = None
    start_ok = end_ok = True
    if const.DATA_HABIT_START_DATE in data:
        try:
            start = _parse_day(data[const.DATA_HABIT_START_DATE])
        except ValueError:
            start_ok = False
        # Blank start falls back to today on create; an update cannot clear it
        if not start_ok or (start is None and is_update):
            start_ok = False
            errors[const.DATA_HABIT_START_DATE] = const.TRANS_KEY_INVALID_START_DATE
    elif existing is not None:
        start = normalize(existing[const.DATA_HABIT_START_DATE])

    if const.DATA_HABIT_END_DATE in data:
        try:
            end = _parse_day(data[const.DATA_HABIT_END_DATE])
        except ValueError:
            end_ok = False
            errors[const.DATA_HABIT_END_DATE] = const.TRANS_KEY_INVALID_END_DATE
    elif existing is not None and existing.get(const.DATA_HABIT_END_DATE):
        end = normalize(existing[const.DATA_HABIT_END_DATE])

    # === 4. Range order ===
    if start_ok and end_ok:
        effective_start = start if start is not None else dt_today_local()
        if end is not None and end < effective_start:
            errors[const.DATA_HABIT_END_DATE] = const.TRANS_KEY_END_DATE_BEFORE_START

    # === 5. Time of day ===
    if const.DATA_HABIT_TIME_OF_DAY in data:
        if data[const.DATA_HABIT_TIME_OF_DAY] not in const.TIME_OF_DAY_OPTIONS:
            errors[const.DATA_HABIT_TIME_OF_DAY] = const.TRANS_KEY_INVALID_TIME_OF_DAY

    # === 6. Lock direction ===
    if (
        existing is not None
        and existing.get(const.DATA_HABIT_LOCKED, False)
        and const.DATA_HABIT_LOCKED in data
        and not data[const.DATA_HABIT_LOCKED]
    ):
        errors[const.DATA_HABIT_LOCKED] = const.TRANS_KEY_CANNOT_UNLOCK_HABIT

    return errors


def build_habit(
    user_input: Mapping[str, Any],
    existing: HabitData | None = None,
    *,
    owner_id: str | None = None,
    now: datetime | None = None,
) -> HabitData:
    """Build habit data for create or update operations.

    One function handles both create (existing=None) and update
    (existing=HabitData). Validation runs before anything is built, so a
    rejected update leaves no partial result behind.

    Args:
        user_input: Data with DATA_* keys (may have missing fields)
        existing: None for create, existing HabitData for update
        owner_id: Owner to record in created_by (create mode)
        now: Optional current time override for deterministic tests

    Returns:
        Complete HabitData TypedDict ready for storage

    Raises:
        ValidationError: On the first broken rule from validate_habit_data()
                         or a malformed entry in the supplied ledger

    Examples:
        # CREATE mode - generates UUID, applies const.DEFAULT_* for missing fields
        habit = build_habit({DATA_HABIT_NAME: "Read"}, owner_id="user-1")

        # UPDATE mode - preserves existing fields not in user_input
        habit = build_habit({DATA_HABIT_COLOR: "#10b981"}, existing=old_habit)
    """
    is_create = existing is None

    errors = validate_habit_data(user_input, existing, is_update=not is_create)
    if errors:
        field, translation_key = next(iter(errors.items()))
        const.LOGGER.warning(
            "build_habit: Rejected %s (%s)",
            "create" if is_create else "update",
            ", ".join(f"{key}={value}" for key, value in errors.items()),
        )
        raise ValidationError(field=field, translation_key=translation_key)

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    stamp = _now_iso(now)

    if existing is None:
        internal_id = str(uuid.uuid4())
        created_by = owner_id or const.SENTINEL_EMPTY
        created_at = stamp
        frequency = normalize_frequency(
            user_input.get(const.DATA_HABIT_FREQUENCY, [True] * const.DAYS_PER_WEEK)
        )
        start = _parse_day(user_input.get(const.DATA_HABIT_START_DATE)) or dt_today_local()
    else:
        internal_id = existing[const.DATA_HABIT_INTERNAL_ID]
        created_by = existing.get(const.DATA_HABIT_CREATED_BY, const.SENTINEL_EMPTY)
        created_at = existing.get(const.DATA_HABIT_CREATED_AT, stamp)
        frequency = normalize_frequency(get_field(const.DATA_HABIT_FREQUENCY, []))
        start = normalize(get_field(const.DATA_HABIT_START_DATE, None))

    end = _parse_day(get_field(const.DATA_HABIT_END_DATE, None))

    if const.DATA_HABIT_ENTRIES in user_input:
        entries = build_habit_entries(user_input[const.DATA_HABIT_ENTRIES])
    elif existing is not None:
        entries = list(existing.get(const.DATA_HABIT_ENTRIES, []))
    else:
        entries = []

    return HabitData(
        internal_id=internal_id,
        name=str(get_field(const.DATA_HABIT_NAME, "")).strip(),
        description=str(get_field(const.DATA_HABIT_DESCRIPTION, None) or const.SENTINEL_EMPTY),
        color=str(get_field(const.DATA_HABIT_COLOR, None) or const.DEFAULT_HABIT_COLOR),
        icon=str(get_field(const.DATA_HABIT_ICON, None) or const.SENTINEL_EMPTY),
        time_of_day=str(get_field(const.DATA_HABIT_TIME_OF_DAY, const.DEFAULT_TIME_OF_DAY)),
        frequency=frequency,
        start_date=start.isoformat(),
        end_date=end.isoformat() if end else None,
        archived=bool(get_field(const.DATA_HABIT_ARCHIVED, False)),
        locked=bool(get_field(const.DATA_HABIT_LOCKED, False)),
        entries=entries,
        created_by=created_by,
        created_at=created_at,
        updated_at=stamp,
    )


# ==============================================================================
# GOALS
# ==============================================================================


def build_goal(
    user_input: Mapping[str, Any],
    existing: GoalData | None = None,
    *,
    owner_id: str | None = None,
    now: datetime | None = None,
) -> GoalData:
    """Build goal data for create or update operations.

    `completed` is derived from progress >= target.

    Raises:
        ValidationError: If the name is blank or the target is not positive.
    """

    def get_field(data_key: str, default: Any) -> Any:
        """Get field value: user_input > existing > default."""
        if data_key in user_input:
            return user_input[data_key]
        if existing is not None:
            return existing.get(data_key, default)
        return default

    raw_name = get_field(const.DATA_GOAL_NAME, "")
    name = str(raw_name).strip() if raw_name else ""
    if not name:
        raise ValidationError(
            field=const.DATA_GOAL_NAME,
            translation_key=const.TRANS_KEY_INVALID_GOAL_NAME,
        )

    try:
        target = float(get_field(const.DATA_GOAL_TARGET, const.DEFAULT_GOAL_TARGET))
        progress = float(get_field(const.DATA_GOAL_PROGRESS, 0.0))
    except (TypeError, ValueError):
        target = 0.0
        progress = 0.0
    if target <= 0:
        raise ValidationError(
            field=const.DATA_GOAL_TARGET,
            translation_key=const.TRANS_KEY_INVALID_GOAL_TARGET,
        )

    stamp = _now_iso(now)
    target_date = _parse_day(get_field(const.DATA_GOAL_TARGET_DATE, None))

    if existing is None:
        internal_id = str(uuid.uuid4())
        created_by = owner_id or const.SENTINEL_EMPTY
        created_at = stamp
    else:
        internal_id = existing[const.DATA_GOAL_INTERNAL_ID]
        created_by = existing.get(const.DATA_GOAL_CREATED_BY, const.SENTINEL_EMPTY)
        created_at = existing.get(const.DATA_GOAL_CREATED_AT, stamp)

    return GoalData(
        internal_id=internal_id,
        name=name,
        description=str(get_field(const.DATA_GOAL_DESCRIPTION, None) or const.SENTINEL_EMPTY),
        target_date=target_date.isoformat() if target_date else None,
        progress=progress,
        target=target,
        unit=str(get_field(const.DATA_GOAL_UNIT, const.DEFAULT_GOAL_UNIT)),
        category=str(get_field(const.DATA_GOAL_CATEGORY, const.DEFAULT_GOAL_CATEGORY)),
        color=str(get_field(const.DATA_GOAL_COLOR, None) or const.DEFAULT_GOAL_COLOR),
        related_habits=list(get_field(const.DATA_GOAL_RELATED_HABITS, [])),
        locked=bool(get_field(const.DATA_GOAL_LOCKED, False)),
        completed=progress >= target,
        created_by=created_by,
        created_at=created_at,
        updated_at=stamp,
    )
