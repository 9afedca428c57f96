from datetime import date

import pytest

from fintrack.errors import ValidationError
from fintrack.periods import (
    current_period,
    financial_year_bounds,
    financial_year_for,
    financial_year_months,
    month_name,
    normalize_month_name,
    parse_financial_year,
    parse_month_day,
    resolve_period,
)


class TestFinancialYear:
    def test_april_starts_new_financial_year(self):
        assert financial_year_for(date(2024, 4, 1)) == "2024"

    def test_march_belongs_to_previous_financial_year(self):
        assert financial_year_for(date(2024, 3, 31)) == "2023"

    def test_boundary_across_calendar_year_rollover(self):
        # Dec 2024 and Jan-Mar 2025 are all FY 2024; April 2025 opens FY 2025
        assert financial_year_for(date(2024, 12, 31)) == "2024"
        assert financial_year_for(date(2025, 1, 1)) == "2024"
        assert financial_year_for(date(2025, 3, 31)) == "2024"
        assert financial_year_for(date(2025, 4, 1)) == "2025"

    def test_resolve_period_uses_english_month_name(self):
        period = resolve_period(date(2025, 3, 15))
        assert period.financial_year == "2024"
        assert period.month == "March"
        assert month_name(date(2024, 4, 30)) == "April"

    def test_current_period_accepts_explicit_today(self):
        period = current_period(date(2025, 1, 15))
        assert (period.financial_year, period.month) == ("2024", "January")

    def test_months_in_financial_year_order(self):
        months = financial_year_months()
        assert len(months) == 12
        assert months[0] == "April"
        assert months[-1] == "March"
        assert months.index("January") == 9


class TestMonthNames:
    @pytest.mark.parametrize("value", ["April", "april", "APRIL", "Apr", " apr "])
    def test_normalize_accepts_names_and_abbreviations(self, value):
        assert normalize_month_name(value) == "April"

    @pytest.mark.parametrize("value", ["", "Aprl", "13"])
    def test_normalize_rejects_unknown_months(self, value):
        with pytest.raises(ValidationError):
            normalize_month_name(value)


class TestFinancialYearLabels:
    def test_parse_accepts_stored_and_display_forms(self):
        assert parse_financial_year("2024") == "2024"
        assert parse_financial_year("2024-2025") == "2024"

    @pytest.mark.parametrize("value", ["24", "2024-2026", "FY2024", ""])
    def test_parse_rejects_malformed_labels(self, value):
        with pytest.raises(ValidationError):
            parse_financial_year(value)


class TestFinancialYearBounds:
    def test_default_bounds_span_april_to_march(self):
        assert financial_year_bounds("2024") == (date(2024, 4, 1), date(2025, 3, 31))

    def test_calendar_year_bounds_stay_in_one_year(self):
        assert financial_year_bounds("2024", "01-01", "12-31") == (date(2024, 1, 1), date(2024, 12, 31))

    def test_leap_day_boundary_is_clamped(self):
        start, end = financial_year_bounds("2022", "03-01", "02-29")
        assert start == date(2022, 3, 1)
        assert end == date(2023, 2, 28)

    def test_parse_month_day(self):
        assert parse_month_day("07-01") == (7, 1)
        assert parse_month_day("02-29") == (2, 29)

    @pytest.mark.parametrize("value", ["7-1", "13-01", "04-31", "0401", ""])
    def test_parse_month_day_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_month_day(value)
