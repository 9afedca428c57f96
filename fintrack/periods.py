"""
Financial-Period Resolver

Maps calendar dates to the financial-year/month labels stored on every
income and expense row. A financial year runs April 1 - March 31 and is
labelled by the calendar year it starts in, so 2024-03-31 belongs to FY
"2023" and 2024-04-01 to FY "2024".

The same rule is applied on every write path; the dashboard queries by
these stored labels, so they must never be computed differently.
"""

import calendar
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from fintrack.errors import ValidationError

FINANCIAL_YEAR_START_MONTH = 4  # April

MONTH_NAMES = [calendar.month_name[i] for i in range(1, 13)]


@dataclass(frozen=True)
class FinancialPeriod:
    """Financial year label ("2024") and English month name ("April")"""
    financial_year: str
    month: str


def financial_year_for(d: date) -> str:
    """Financial year label for a date: month >= April -> same year, else previous year."""
    if d.month >= FINANCIAL_YEAR_START_MONTH:
        return str(d.year)
    return str(d.year - 1)


def month_name(d: date) -> str:
    return MONTH_NAMES[d.month - 1]


def resolve_period(d: date) -> FinancialPeriod:
    """Derive the stored period labels for a transaction date."""
    return FinancialPeriod(financial_year=financial_year_for(d), month=month_name(d))


def current_period(today: Optional[date] = None) -> FinancialPeriod:
    return resolve_period(today or date.today())


def financial_year_months() -> List[str]:
    """Month names in financial-year order (April ... March)."""
    start = FINANCIAL_YEAR_START_MONTH - 1
    return MONTH_NAMES[start:] + MONTH_NAMES[:start]


def normalize_month_name(value: str) -> str:
    """Accept "april", "APRIL" or "Apr" and return the canonical "April"."""
    cleaned = (value or "").strip().lower()
    if not cleaned:
        raise ValidationError("Month is required")
    for name in MONTH_NAMES:
        if cleaned == name.lower() or cleaned == name[:3].lower():
            return name
    raise ValidationError(f"Invalid month: {value}")


def parse_financial_year(value: str) -> str:
    """
    Validate a financial year label.

    Accepts the stored form ("2024") and the display form the dashboard
    uses ("2024-2025"), returning the stored form.
    """
    cleaned = (value or "").strip()
    start, sep, end = cleaned.partition("-")
    if not (len(start) == 4 and start.isdigit()):
        raise ValidationError(f"Invalid financial year: {value}")
    if sep and not (end.isdigit() and int(end) == int(start) + 1):
        raise ValidationError(f"Invalid financial year: {value}")
    return start


def parse_month_day(value: str) -> Tuple[int, int]:
    """Parse an "MM-DD" boundary into (month, day)."""
    try:
        month_str, day_str = (value or "").split("-")
        if len(month_str) != 2 or len(day_str) != 2:
            raise ValueError(value)
        month, day = int(month_str), int(day_str)
        # Validate against a leap year so "02-29" is accepted
        date(2000, month, day)
    except ValueError:
        raise ValidationError(f"Invalid month-day boundary: {value} (expected MM-DD)")
    return month, day


def financial_year_bounds(
    financial_year: str,
    start: str = "04-01",
    end: str = "03-31",
) -> Tuple[date, date]:
    """
    Calendar date range covered by a user's configured financial year.

    The year starts on `start` in the labelled year. An `end` that falls
    on or before `start` within the year belongs to the next calendar year.
    """
    year = int(parse_financial_year(financial_year))
    start_month, start_day = parse_month_day(start)
    end_month, end_day = parse_month_day(end)

    start_date = _safe_date(year, start_month, start_day)
    end_year = year if (end_month, end_day) > (start_month, start_day) else year + 1
    end_date = _safe_date(end_year, end_month, end_day)
    return start_date, end_date


def _safe_date(year: int, month: int, day: int) -> date:
    # "02-29" in a non-leap year clamps to the 28th
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))
