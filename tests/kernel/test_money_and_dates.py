"""
Tests for Decimal money helpers and day/range helpers.

Covers:
- to_decimal conversion and rejection of non-finite input
- ROUND_HALF_UP cent rounding
- day_key normalisation
- DateRange inclusivity and presets (Sunday-start weeks)
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from salon_kernel.domain.dates import (
    DateRange,
    RangePreset,
    date_range_for,
    day_key,
    end_of_day,
    start_of_day,
)
from salon_kernel.domain.money import is_multiple_of, round_money, to_decimal
from salon_kernel.exceptions import InvalidAmountError, InvalidDateRangeError, ValidationError


class TestToDecimal:

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_int_and_string(self):
        assert to_decimal(5) == Decimal("5")
        assert to_decimal(" 12.50 ") == Decimal("12.50")

    @pytest.mark.parametrize("value", ["abc", "", None, True, "NaN", "Infinity", float("inf")])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(InvalidAmountError) as exc_info:
            to_decimal(value, "voucher")
        assert exc_info.value.field == "voucher"
        assert exc_info.value.code == "INVALID_AMOUNT"


class TestRoundMoney:

    @pytest.mark.parametrize("raw,expected", [
        ("2.345", "2.35"),
        ("2.344", "2.34"),
        ("0.005", "0.01"),
        ("24.84", "24.84"),
    ])
    def test_half_up(self, raw, expected):
        assert round_money(Decimal(raw)) == Decimal(expected)

    def test_is_multiple_of(self):
        assert is_multiple_of(Decimal("7.5"), Decimal("0.5"))
        assert not is_multiple_of(Decimal("7.25"), Decimal("0.5"))


class TestDayKey:

    def test_from_date_and_datetime(self):
        assert day_key(date(2024, 3, 5)) == "2024-03-05"
        assert day_key(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"

    def test_from_iso_string(self):
        assert day_key("2024-03-05T10:00:00") == "2024-03-05"

    def test_bad_string(self):
        with pytest.raises(ValidationError):
            day_key("05/03/2024")


class TestDateRange:

    def test_bounds_are_inclusive(self):
        rng = DateRange.from_dates(date(2024, 3, 1), date(2024, 3, 31))
        assert rng.contains(datetime(2024, 3, 1, 0, 0))
        assert rng.contains(datetime(2024, 3, 31, 23, 59, 59, 999999))
        assert not rng.contains(datetime(2024, 4, 1, 0, 0))

    def test_start_after_end(self):
        with pytest.raises(InvalidDateRangeError):
            DateRange.from_dates(date(2024, 3, 2), date(2024, 3, 1))

    def test_coerce_keeps_datetimes(self):
        rng = DateRange.coerce(datetime(2024, 3, 1, 9, 0), date(2024, 3, 1))
        assert rng.start == datetime(2024, 3, 1, 9, 0)
        assert rng.end == end_of_day(date(2024, 3, 1))
        assert not rng.contains(datetime(2024, 3, 1, 8, 59))

    def test_keys(self):
        rng = DateRange.from_dates(date(2024, 3, 1), date(2024, 3, 31))
        assert (rng.start_key, rng.end_key) == ("2024-03-01", "2024-03-31")

    def test_start_of_day_keeps_tz(self):
        moment = datetime(2024, 3, 1, 15, 30, tzinfo=timezone.utc)
        assert start_of_day(moment).tzinfo is timezone.utc
        assert start_of_day(moment).hour == 0


class TestPresets:

    def test_week_starts_on_sunday(self):
        # 2024-03-13 is a Wednesday
        rng = date_range_for(RangePreset.WEEK, date(2024, 3, 13))
        assert rng.start_key == "2024-03-10"
        assert rng.end_key == "2024-03-16"

    def test_sunday_anchor_is_first_day(self):
        rng = date_range_for("week", date(2024, 3, 10))
        assert rng.start_key == "2024-03-10"

    def test_month_handles_leap_february(self):
        rng = date_range_for(RangePreset.MONTH, date(2024, 2, 10))
        assert rng.end_key == "2024-02-29"

    def test_year_and_day(self):
        assert date_range_for("year", date(2024, 6, 1)).start_key == "2024-01-01"
        day = date_range_for("day", datetime(2024, 6, 1, 14, 0))
        assert day.start == datetime(2024, 6, 1, 0, 0)

    def test_aware_anchor_gives_aware_range(self):
        rng = date_range_for("day", datetime(2024, 6, 1, 14, 0, tzinfo=timezone.utc))
        assert rng.start.tzinfo is timezone.utc
        assert rng.contains(datetime(2024, 6, 1, 23, 0, tzinfo=timezone.utc))
