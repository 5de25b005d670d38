"""Tests for data_builders - habit/goal construction and validation.

Includes the invalid-frequency case: a habit with all seven weekday flags
false must be rejected before anything is created.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from freezegun import freeze_time
import pytest

from habitkit import const, data_builders as db
from habitkit.exceptions import ValidationError
from tests.conftest import MWF_MASK, make_entry, make_goal, make_habit

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=UTC)


def _input(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {const.DATA_HABIT_NAME: "Read"}
    data.update(overrides)
    return data


# =============================================================================
# normalize_frequency
# =============================================================================


class TestNormalizeFrequency:
    """Tests for normalize_frequency()."""

    def test_list(self) -> None:
        """Test that seven truthy/falsy values become booleans."""
        assert db.normalize_frequency([1, 0, 1, 0, 1, 0, 0]) == MWF_MASK

    def test_weekday_mapping(self) -> None:
        """Test the weekday-name mapping form; missing days are False."""
        mask = db.normalize_frequency({"monday": True, "wednesday": True, "friday": True})

        assert mask == MWF_MASK

    @pytest.mark.parametrize(
        "value",
        [[True] * 6, [True] * 8, "1010100", {"someday": True}, None, 7],
    )
    def test_malformed(self, value: Any) -> None:
        """Test that malformed masks raise ValueError."""
        with pytest.raises(ValueError):
            db.normalize_frequency(value)


# =============================================================================
# build_habit - create
# =============================================================================


class TestBuildHabitCreate:
    """Tests for build_habit() in create mode."""

    def test_supplied_id_ignored(self) -> None:
        """Test that create always generates a fresh id."""
        habit = db.build_habit({**_input(), const.DATA_HABIT_INTERNAL_ID: "habit-1"})

        assert habit[const.DATA_HABIT_INTERNAL_ID] != "habit-1"

    @freeze_time("2024-03-10 12:00:00")
    def test_defaults(self) -> None:
        """Test that a name alone yields a complete habit."""
        habit = db.build_habit(_input(), owner_id="user-1")

        assert habit[const.DATA_HABIT_INTERNAL_ID]
        assert habit[const.DATA_HABIT_NAME] == "Read"
        assert habit[const.DATA_HABIT_COLOR] == const.DEFAULT_HABIT_COLOR
        assert habit[const.DATA_HABIT_FREQUENCY] == [True] * 7
        assert habit[const.DATA_HABIT_START_DATE] == "2024-03-10"
        assert habit[const.DATA_HABIT_END_DATE] is None
        assert habit[const.DATA_HABIT_TIME_OF_DAY] == const.TIME_OF_DAY_ANYTIME
        assert habit[const.DATA_HABIT_ARCHIVED] is False
        assert habit[const.DATA_HABIT_LOCKED] is False
        assert habit[const.DATA_HABIT_ENTRIES] == []
        assert habit[const.DATA_HABIT_CREATED_BY] == "user-1"
        assert habit[const.DATA_HABIT_CREATED_AT] == "2024-03-10T12:00:00+00:00"

    def test_explicit_fields(self) -> None:
        """Test that supplied values are normalized and kept."""
        habit = db.build_habit(
            _input(
                **{
                    const.DATA_HABIT_NAME: "  Stretch  ",
                    const.DATA_HABIT_FREQUENCY: {"monday": True, "wednesday": True, "friday": True},
                    const.DATA_HABIT_START_DATE: datetime(2024, 1, 1, 9, 30),
                    const.DATA_HABIT_END_DATE: "2024-06-30",
                    const.DATA_HABIT_TIME_OF_DAY: const.TIME_OF_DAY_MORNING,
                }
            ),
            owner_id="user-1",
            now=NOW,
        )

        assert habit[const.DATA_HABIT_NAME] == "Stretch"
        assert habit[const.DATA_HABIT_FREQUENCY] == MWF_MASK
        assert habit[const.DATA_HABIT_START_DATE] == "2024-01-01"
        assert habit[const.DATA_HABIT_END_DATE] == "2024-06-30"
        assert habit[const.DATA_HABIT_TIME_OF_DAY] == const.TIME_OF_DAY_MORNING

    def test_all_weekdays_false_rejected(self) -> None:
        """Test that an empty mask raises and builds nothing."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit(_input(**{const.DATA_HABIT_FREQUENCY: [False] * 7}))

        assert exc_info.value.field == const.DATA_HABIT_FREQUENCY
        assert exc_info.value.translation_key == const.TRANS_KEY_EMPTY_FREQUENCY

    def test_malformed_mask_rejected(self) -> None:
        """Test that a six-day mask is a distinct error."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit(_input(**{const.DATA_HABIT_FREQUENCY: [True] * 6}))

        assert exc_info.value.translation_key == const.TRANS_KEY_INVALID_FREQUENCY

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, name: Any) -> None:
        """Test that a habit needs a name."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit({const.DATA_HABIT_NAME: name})

        assert exc_info.value.field == const.DATA_HABIT_NAME

    def test_end_before_start_rejected(self) -> None:
        """Test the date-range invariant; nothing is clamped."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit(
                _input(
                    **{
                        const.DATA_HABIT_START_DATE: "2024-02-01",
                        const.DATA_HABIT_END_DATE: "2024-01-31",
                    }
                )
            )

        assert exc_info.value.field == const.DATA_HABIT_END_DATE
        assert exc_info.value.translation_key == const.TRANS_KEY_END_DATE_BEFORE_START

    def test_single_day_range_allowed(self) -> None:
        """Test that end_date == start_date is valid."""
        habit = db.build_habit(
            _input(
                **{
                    const.DATA_HABIT_START_DATE: "2024-02-01",
                    const.DATA_HABIT_END_DATE: "2024-02-01",
                }
            )
        )

        assert habit[const.DATA_HABIT_END_DATE] == "2024-02-01"

    @pytest.mark.parametrize(
        ("field", "value", "translation_key"),
        [
            (const.DATA_HABIT_START_DATE, "someday", const.TRANS_KEY_INVALID_START_DATE),
            (const.DATA_HABIT_END_DATE, "2024-99-99", const.TRANS_KEY_INVALID_END_DATE),
            (const.DATA_HABIT_TIME_OF_DAY, "midnight", const.TRANS_KEY_INVALID_TIME_OF_DAY),
        ],
    )
    def test_bad_field_values(self, field: str, value: str, translation_key: str) -> None:
        """Test unparseable dates and unknown time-of-day values."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit(_input(**{field: value}))

        assert exc_info.value.field == field
        assert exc_info.value.translation_key == translation_key

    def test_entries_sorted_with_ids_kept(self) -> None:
        """Test that a supplied ledger is normalized and sorted."""
        habit = db.build_habit(
            _input(
                **{
                    const.DATA_HABIT_START_DATE: "2024-01-01",
                    const.DATA_HABIT_ENTRIES: [make_entry("2024-01-03"), make_entry("2024-01-01")],
                }
            )
        )

        entries = habit[const.DATA_HABIT_ENTRIES]
        assert [entry[const.DATA_ENTRY_DATE] for entry in entries] == ["2024-01-01", "2024-01-03"]
        assert entries[0][const.DATA_ENTRY_INTERNAL_ID] == "entry-2024-01-01"

    def test_duplicate_entry_days_rejected(self) -> None:
        """Test that two entries for one day are refused."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit(
                _input(
                    **{
                        const.DATA_HABIT_ENTRIES: [
                            make_entry("2024-01-01"),
                            {**make_entry("2024-01-01T08:00:00"), const.DATA_ENTRY_INTERNAL_ID: "x"},
                        ]
                    }
                )
            )

        assert exc_info.value.translation_key == const.TRANS_KEY_DUPLICATE_ENTRY_DATE

    def test_bad_entry_date_rejected(self) -> None:
        """Test that an entry without a usable date is refused."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit(_input(**{const.DATA_HABIT_ENTRIES: [make_entry("yesterday")]}))

        assert exc_info.value.translation_key == const.TRANS_KEY_INVALID_ENTRY_DATE


# =============================================================================
# build_habit - update
# =============================================================================


class TestBuildHabitUpdate:
    """Tests for build_habit() in update mode."""

    def test_partial_update_preserves_fields(self) -> None:
        """Test that omitted fields keep their existing values."""
        existing = make_habit(frequency=MWF_MASK, completed_days=["2024-01-01"])

        habit = db.build_habit({const.DATA_HABIT_COLOR: "#10b981"}, existing=existing, now=NOW)

        assert habit[const.DATA_HABIT_COLOR] == "#10b981"
        assert habit[const.DATA_HABIT_NAME] == existing[const.DATA_HABIT_NAME]
        assert habit[const.DATA_HABIT_FREQUENCY] == MWF_MASK
        assert habit[const.DATA_HABIT_ENTRIES] == existing[const.DATA_HABIT_ENTRIES]
        assert habit[const.DATA_HABIT_INTERNAL_ID] == existing[const.DATA_HABIT_INTERNAL_ID]
        assert habit[const.DATA_HABIT_CREATED_AT] == existing[const.DATA_HABIT_CREATED_AT]
        assert habit[const.DATA_HABIT_UPDATED_AT] == NOW.isoformat()

    def test_end_date_checked_against_existing_start(self) -> None:
        """Test that the stored start_date bounds a new end_date."""
        existing = make_habit(start_date="2024-01-10")

        with pytest.raises(ValidationError) as exc_info:
            db.build_habit({const.DATA_HABIT_END_DATE: "2024-01-09"}, existing=existing)

        assert exc_info.value.translation_key == const.TRANS_KEY_END_DATE_BEFORE_START

    def test_clearing_end_date(self) -> None:
        """Test that None removes the end date."""
        existing = make_habit(end_date="2024-02-01")

        habit = db.build_habit({const.DATA_HABIT_END_DATE: None}, existing=existing)

        assert habit[const.DATA_HABIT_END_DATE] is None

    def test_cannot_clear_start_date(self) -> None:
        """Test that an update cannot blank the start date."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_habit({const.DATA_HABIT_START_DATE: ""}, existing=make_habit())

        assert exc_info.value.translation_key == const.TRANS_KEY_INVALID_START_DATE

    def test_cannot_unlock(self) -> None:
        """Test that the lock is one-way."""
        existing = make_habit(locked=True)

        with pytest.raises(ValidationError) as exc_info:
            db.build_habit({const.DATA_HABIT_LOCKED: False}, existing=existing)

        assert exc_info.value.translation_key == const.TRANS_KEY_CANNOT_UNLOCK_HABIT

    def test_update_empty_mask_rejected(self) -> None:
        """Test that the mask invariant also holds on update."""
        with pytest.raises(ValidationError):
            db.build_habit({const.DATA_HABIT_FREQUENCY: [False] * 7}, existing=make_habit())


# =============================================================================
# validate_habit_data
# =============================================================================


class TestValidateHabitData:
    """Tests for validate_habit_data()."""

    def test_valid(self) -> None:
        """Test that valid data has no errors."""
        assert db.validate_habit_data(_input(**{const.DATA_HABIT_FREQUENCY: MWF_MASK})) == {}

    def test_collects_every_error(self) -> None:
        """Test that all broken fields are reported at once."""
        errors = db.validate_habit_data(
            {
                const.DATA_HABIT_NAME: "",
                const.DATA_HABIT_FREQUENCY: [False] * 7,
                const.DATA_HABIT_TIME_OF_DAY: "noon",
            }
        )

        assert errors == {
            const.DATA_HABIT_NAME: const.TRANS_KEY_INVALID_HABIT_NAME,
            const.DATA_HABIT_FREQUENCY: const.TRANS_KEY_EMPTY_FREQUENCY,
            const.DATA_HABIT_TIME_OF_DAY: const.TRANS_KEY_INVALID_TIME_OF_DAY,
        }

    def test_update_without_name(self) -> None:
        """Test that updates do not require a name."""
        assert db.validate_habit_data({const.DATA_HABIT_COLOR: "#000"}, is_update=True) == {}


# =============================================================================
# build_goal
# =============================================================================


class TestBuildGoal:
    """Tests for build_goal()."""

    def test_create_defaults(self) -> None:
        """Test a goal built from a name alone."""
        goal = db.build_goal({const.DATA_GOAL_NAME: "Run a 10k"}, owner_id="user-1", now=NOW)

        assert goal[const.DATA_GOAL_TARGET] == const.DEFAULT_GOAL_TARGET
        assert goal[const.DATA_GOAL_UNIT] == const.DEFAULT_GOAL_UNIT
        assert goal[const.DATA_GOAL_CATEGORY] == const.DEFAULT_GOAL_CATEGORY
        assert goal[const.DATA_GOAL_RELATED_HABITS] == []
        assert goal[const.DATA_GOAL_COMPLETED] is False
        assert goal[const.DATA_GOAL_CREATED_BY] == "user-1"

    def test_completed_from_progress(self) -> None:
        """Test that reaching the target marks the goal completed."""
        goal = db.build_goal(
            {const.DATA_GOAL_NAME: "Books", const.DATA_GOAL_TARGET: 12, const.DATA_GOAL_PROGRESS: 12}
        )

        assert goal[const.DATA_GOAL_COMPLETED] is True

    def test_update_keeps_identity(self) -> None:
        """Test that an update keeps id and created_at."""
        existing = make_goal(related=["habit-1"])

        goal = db.build_goal({const.DATA_GOAL_PROGRESS: 50}, existing, now=NOW)

        assert goal[const.DATA_GOAL_INTERNAL_ID] == "goal-1"
        assert goal[const.DATA_GOAL_RELATED_HABITS] == ["habit-1"]
        assert goal[const.DATA_GOAL_PROGRESS] == 50.0
        assert goal[const.DATA_GOAL_CREATED_AT] == existing[const.DATA_GOAL_CREATED_AT]

    @pytest.mark.parametrize(
        ("user_input", "field"),
        [
            ({const.DATA_GOAL_NAME: " "}, const.DATA_GOAL_NAME),
            ({const.DATA_GOAL_NAME: "X", const.DATA_GOAL_TARGET: 0}, const.DATA_GOAL_TARGET),
            ({const.DATA_GOAL_NAME: "X", const.DATA_GOAL_TARGET: "lots"}, const.DATA_GOAL_TARGET),
        ],
    )
    def test_invalid(self, user_input: dict[str, Any], field: str) -> None:
        """Test the goal validation errors."""
        with pytest.raises(ValidationError) as exc_info:
            db.build_goal(user_input)

        assert exc_info.value.field == field
