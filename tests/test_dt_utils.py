"""Tests for dt_utils - calendar-day normalization and clock helpers."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from freezegun import freeze_time
import pytest

from habitkit.utils import dt_utils
from habitkit.utils.dt_utils import (
    Weekday,
    date_range,
    days_between,
    dt_now_iso,
    dt_parse_date,
    dt_today_iso,
    dt_today_local,
    normalize,
    weekday_of,
)

NEW_YORK = ZoneInfo("America/New_York")
TOKYO = ZoneInfo("Asia/Tokyo")

# =============================================================================
# normalize
# =============================================================================


class TestNormalize:
    """Tests for normalize()."""

    def test_date_passes_through(self) -> None:
        """Test that a date is returned unchanged."""
        assert normalize(date(2024, 1, 5)) == date(2024, 1, 5)

    def test_naive_datetime_strips_time(self) -> None:
        """Test that naive datetimes are taken as local wall-clock time."""
        assert normalize(datetime(2024, 1, 5, 23, 59)) == date(2024, 1, 5)

    def test_aware_datetime_uses_local_zone(self) -> None:
        """Test that an instant maps to the calendar day of the local zone."""
        instant = datetime(2024, 1, 2, 4, 30, tzinfo=UTC)

        assert normalize(instant) == date(2024, 1, 2)
        assert normalize(instant, NEW_YORK) == date(2024, 1, 1)

    def test_default_timezone_is_used(self) -> None:
        """Test that set_default_timezone() changes the day boundary."""
        instant = datetime(2024, 1, 1, 20, 0, tzinfo=UTC)
        dt_utils.set_default_timezone(TOKYO)

        assert normalize(instant) == date(2024, 1, 2)
        assert dt_utils.get_default_timezone() is TOKYO

    def test_iso_date_string(self) -> None:
        """Test parsing of a plain ISO date."""
        assert normalize("2024-01-05") == date(2024, 1, 5)

    def test_iso_datetime_string(self) -> None:
        """Test parsing of an ISO datetime with offset."""
        value = "2024-01-05T23:30:00-05:00"

        assert normalize(value) == date(2024, 1, 6)
        assert normalize(value, NEW_YORK) == date(2024, 1, 5)

    def test_us_format_string(self) -> None:
        """Test fallback to the US date format."""
        assert normalize("01/05/2024") == date(2024, 1, 5)

    def test_same_local_day_compares_equal(self) -> None:
        """Test that two instants on one local day normalize equally."""
        morning = datetime(2024, 3, 4, 6, 0, tzinfo=timezone(timedelta(hours=-5)))
        night = datetime(2024, 3, 4, 23, 0, tzinfo=timezone(timedelta(hours=-5)))

        assert normalize(morning, NEW_YORK) == normalize(night, NEW_YORK)

    @pytest.mark.parametrize("value", ["not-a-date", "", "2024-13-45"])
    def test_invalid_string_raises(self, value: str) -> None:
        """Test that unparseable strings raise ValueError."""
        with pytest.raises(ValueError):
            normalize(value)

    def test_unsupported_type_raises(self) -> None:
        """Test that non-date values raise ValueError."""
        with pytest.raises(ValueError):
            normalize(20240105)  # type: ignore[arg-type]


# =============================================================================
# dt_parse_date
# =============================================================================


class TestParseDate:
    """Tests for dt_parse_date()."""

    def test_none_and_empty(self) -> None:
        """Test that empty input returns None."""
        assert dt_parse_date(None) is None
        assert dt_parse_date("") is None

    def test_slash_formats(self) -> None:
        """Test the accepted non-ISO formats."""
        assert dt_parse_date("2024/01/05") == date(2024, 1, 5)
        # 25 cannot be a month, so the European reading applies
        assert dt_parse_date("25/12/2024") == date(2024, 12, 25)

    def test_garbage(self) -> None:
        """Test that garbage returns None instead of raising."""
        assert dt_parse_date("soon") is None


# =============================================================================
# Day arithmetic
# =============================================================================


class TestDayArithmetic:
    """Tests for days_between(), weekday_of() and date_range()."""

    def test_days_between_is_signed(self) -> None:
        """Test the sign of days_between()."""
        assert days_between(date(2024, 1, 8), date(2024, 1, 3)) == 5
        assert days_between(date(2024, 1, 3), date(2024, 1, 8)) == -5
        assert days_between("2024-01-03", "2024-01-03") == 0

    def test_days_between_ignores_time_of_day(self) -> None:
        """Test that late and early instants one day apart differ by 1."""
        late = datetime(2024, 1, 1, 23, 59)
        early = datetime(2024, 1, 2, 0, 1)

        assert days_between(early, late) == 1

    def test_days_between_across_month_and_leap_day(self) -> None:
        """Test arithmetic across February in a leap year."""
        assert days_between(date(2024, 3, 1), date(2024, 2, 28)) == 2

    def test_weekday_of(self) -> None:
        """Test that 2024-01-01 was a Monday and 2024-01-07 a Sunday."""
        assert weekday_of(date(2024, 1, 1)) is Weekday.MONDAY
        assert weekday_of("2024-01-07") is Weekday.SUNDAY
        assert int(Weekday.SUNDAY) == 6

    def test_date_range_inclusive(self) -> None:
        """Test that both bounds are yielded."""
        days = list(date_range(date(2024, 1, 1), date(2024, 1, 3)))

        assert days == [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)]

    def test_date_range_empty_when_reversed(self) -> None:
        """Test that an inverted range yields nothing."""
        assert list(date_range(date(2024, 1, 3), date(2024, 1, 1))) == []


# =============================================================================
# Clock helpers
# =============================================================================


class TestClock:
    """Tests for the clock helpers (the only functions that read the clock)."""

    @freeze_time("2024-01-01 23:30:00")
    def test_today_depends_on_zone(self) -> None:
        """Test that today differs between zones near midnight UTC."""
        assert dt_today_local() == date(2024, 1, 1)
        assert dt_today_local(NEW_YORK) == date(2024, 1, 1)
        assert dt_today_local(TOKYO) == date(2024, 1, 2)
        assert dt_today_iso(TOKYO) == "2024-01-02"

    @freeze_time("2024-01-01 23:30:00")
    def test_now_iso_is_utc(self) -> None:
        """Test the UTC ISO timestamp."""
        assert dt_now_iso() == "2024-01-01T23:30:00+00:00"
