"""
Unit tests for the date-window helpers. No DB.
"""
from datetime import date

import pytest

from standupsync.core.errors import InvalidDateRangeError, InvalidMonthError
from standupsync.services.date_ranges import (
    DateRange,
    current_week_range,
    last_days_range,
    month_range,
    month_token_from_text,
    parse_iso_date,
    resolve_range,
)


class TestCurrentWeek:
    def test_midweek_starts_on_sunday(self):
        # 2024-04-10 is a Wednesday
        r = current_week_range(date(2024, 4, 10))
        assert r.start_date == date(2024, 4, 7)
        assert r.end_date == date(2024, 4, 13)

    def test_sunday_is_its_own_start(self):
        r = current_week_range(date(2024, 4, 7))
        assert r.start_date == date(2024, 4, 7)

    def test_saturday_closes_the_week(self):
        r = current_week_range(date(2024, 4, 13))
        assert r.start_date == date(2024, 4, 7)
        assert r.end_date == date(2024, 4, 13)

    def test_week_can_span_months(self):
        r = current_week_range(date(2024, 5, 1))
        assert r.start_date == date(2024, 4, 28)
        assert r.end_date == date(2024, 5, 4)


class TestMonthRange:
    def test_regular_month(self):
        r = month_range("2024-04")
        assert r == DateRange(date(2024, 4, 1), date(2024, 4, 30))

    def test_leap_february(self):
        assert month_range("2024-02").end_date == date(2024, 2, 29)

    def test_non_leap_february(self):
        assert month_range("2023-02").end_date == date(2023, 2, 28)

    def test_december(self):
        assert month_range("2023-12").end_date == date(2023, 12, 31)

    @pytest.mark.parametrize("bad", ["2024-4", "April", "2024/04", "", "2024-13", "2024-00"])
    def test_invalid_tokens(self, bad):
        with pytest.raises(InvalidMonthError) as exc:
            month_range(bad)
        assert exc.value.message == "Invalid month format. Use YYYY-MM"
        assert exc.value.http_status == 400


class TestMonthTokenFromText:
    TODAY = date(2024, 6, 15)

    def test_full_name(self):
        assert month_token_from_text("what was my focus in april?", self.TODAY) == "2024-04"

    def test_abbreviation(self):
        assert month_token_from_text("what happened in feb", self.TODAY) == "2024-02"

    def test_no_month_uses_current(self):
        assert month_token_from_text("summarize this month", self.TODAY) == "2024-06"

    def test_word_containing_abbreviation_is_ignored(self):
        # "summary" contains "mar" but is not a month
        assert month_token_from_text("summary for this month", self.TODAY) == "2024-06"


class TestOtherWindows:
    def test_last_days(self):
        r = last_days_range(30, date(2024, 4, 30))
        assert r.start_date == date(2024, 3, 31)
        assert r.end_date == date(2024, 4, 30)

    def test_parse_iso_date(self):
        assert parse_iso_date("2024-04-01") == date(2024, 4, 1)

    def test_parse_iso_date_rejects_other_formats(self):
        with pytest.raises(ValueError):
            parse_iso_date("04/01/2024")

    def test_resolve_uses_default_unless_both_given(self):
        default = DateRange(date(2024, 1, 1), date(2024, 1, 7))
        assert resolve_range(date(2024, 2, 1), None, default) == default
        assert resolve_range(None, date(2024, 2, 1), default) == default

    def test_resolve_uses_given_bounds(self):
        default = DateRange(date(2024, 1, 1), date(2024, 1, 7))
        r = resolve_range(date(2024, 2, 1), date(2024, 2, 3), default)
        assert r == DateRange(date(2024, 2, 1), date(2024, 2, 3))

    def test_resolve_rejects_reversed_window(self):
        default = DateRange(date(2024, 1, 1), date(2024, 1, 7))
        with pytest.raises(InvalidDateRangeError) as exc:
            resolve_range(date(2024, 2, 3), date(2024, 2, 1), default)
        assert exc.value.details == {"start_date": "2024-02-03", "end_date": "2024-02-01"}
