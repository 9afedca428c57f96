"""
Summary Aggregator

Pure functions over already-persisted rows: no session, no I/O. The
dashboard handler loads the rows for a user/period and hands them here.

Sums are accumulated as Decimal and only converted to float when the
response schema is built.
"""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from fintrack.periods import financial_year_months
from fintrack.schemas.dashboard import (
    CategoryShare,
    DashboardSummary,
    MonthlyOverview,
    MonthlyTotal,
)

UNKNOWN_CATEGORY = "Unknown"
DEFAULT_TOP_CATEGORIES = 5

ZERO = Decimal("0")


def _to_decimal(value: Decimal | float | int | str | None) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 stays 0.1 rather than its binary expansion
    return Decimal(str(value))


def _decimal_to_float(value: Decimal) -> float:
    """Convert Decimal to float for JSON serialization."""
    return float(value)


def sum_amounts(amounts: Iterable[Decimal | float | int | None]) -> Decimal:
    total = ZERO
    for amount in amounts:
        total += _to_decimal(amount)
    return total


def percentage_of(amount: Decimal, total: Decimal) -> int:
    """Share of `total`, rounded half-up to a whole percent. 0 when total is 0."""
    if total <= 0:
        return 0
    share = (_to_decimal(amount) / total) * 100
    return int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def rank_categories(
    expense_rows: Iterable[Tuple[Optional[str], Decimal | float | int]],
    total_expenses: Decimal,
    top_n: int = DEFAULT_TOP_CATEGORIES,
) -> List[CategoryShare]:
    """
    Group expenses by category name and return the `top_n` largest.

    Ties on amount are broken by category name (ascending) so the order
    never depends on row order.
    """
    totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    for category_name, amount in expense_rows:
        totals[category_name or UNKNOWN_CATEGORY] += _to_decimal(amount)

    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))

    return [
        CategoryShare(
            category_name=name,
            amount=_decimal_to_float(amount),
            percentage=percentage_of(amount, total_expenses),
        )
        for name, amount in ranked[:top_n]
    ]


def summarize_period(
    month: str,
    financial_year: str,
    income_amounts: Iterable[Decimal | float | int],
    expense_rows: Iterable[Tuple[Optional[str], Decimal | float | int]],
    top_n: int = DEFAULT_TOP_CATEGORIES,
    currency: Optional[str] = None,
) -> DashboardSummary:
    """
    Build the dashboard summary for one month of one financial year.

    Args:
        month: Month name the rows were selected by ("April")
        financial_year: Financial year label the rows were selected by ("2024")
        income_amounts: Amounts of the matching income rows
        expense_rows: (category name, amount) for the matching expense rows
        top_n: How many categories to keep in the breakdown
        currency: Display currency from the user's settings

    Returns:
        DashboardSummary with totals, net savings and the category breakdown
    """
    expense_rows = list(expense_rows)

    total_income = sum_amounts(income_amounts)
    total_expenses = sum_amounts(amount for _, amount in expense_rows)

    return DashboardSummary(
        month=month,
        financial_year=financial_year,
        total_income=_decimal_to_float(total_income),
        total_expenses=_decimal_to_float(total_expenses),
        net_savings=_decimal_to_float(total_income - total_expenses),
        top_expense_categories=rank_categories(expense_rows, total_expenses, top_n),
        currency=currency,
    )


def monthly_totals(
    financial_year: str,
    income_rows: Iterable[Tuple[str, Decimal | float | int]],
    expense_rows: Iterable[Tuple[str, Decimal | float | int]],
) -> MonthlyOverview:
    """
    Income vs expenses per month for a financial year.

    Rows are (month name, amount). Every month appears, in financial-year
    order, zero-filled when nothing was recorded.
    """
    income_by_month: Dict[str, Decimal] = defaultdict(lambda: ZERO)
    expenses_by_month: Dict[str, Decimal] = defaultdict(lambda: ZERO)

    for month, amount in income_rows:
        income_by_month[month] += _to_decimal(amount)
    for month, amount in expense_rows:
        expenses_by_month[month] += _to_decimal(amount)

    months = []
    for month in financial_year_months():
        income = income_by_month[month]
        expenses = expenses_by_month[month]
        months.append(MonthlyTotal(
            month=month,
            income=_decimal_to_float(income),
            expenses=_decimal_to_float(expenses),
            net=_decimal_to_float(income - expenses),
        ))

    total_income = sum(income_by_month.values(), ZERO)
    total_expenses = sum(expenses_by_month.values(), ZERO)

    return MonthlyOverview(
        financial_year=financial_year,
        months=months,
        total_income=_decimal_to_float(total_income),
        total_expenses=_decimal_to_float(total_expenses),
        net_savings=_decimal_to_float(total_income - total_expenses),
    )
