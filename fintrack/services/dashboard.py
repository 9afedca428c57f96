"""
Dashboard Handlers - summaries computed on read

Loads a user's rows for the requested period and delegates the math to
the aggregation module. Nothing is cached or precomputed.
"""

from typing import Optional

from sqlalchemy.orm import Session

from fintrack.config import settings
from fintrack.database import Expense, ExpenseCategory, Income, UserSettings
from fintrack.logger import create_logger, classify_error
from fintrack.periods import (
    current_period,
    financial_year_bounds,
    normalize_month_name,
    parse_financial_year,
)
from fintrack.schemas.dashboard import DashboardSummary, FinancialYearReport, MonthlyOverview
from fintrack.services.aggregation import monthly_totals, sum_amounts, summarize_period
from fintrack.services.records import expenses_by_date_range, income_by_date_range

# Create logger for this module
logger = create_logger("dashboard")


def _user_settings(db: Session, user_id: str) -> Optional[UserSettings]:
    return db.query(UserSettings).filter(UserSettings.user_id == user_id).first()


def get_dashboard_summary(
    db: Session,
    user_id: str,
    month: Optional[str] = None,
    financial_year: Optional[str] = None,
) -> DashboardSummary:
    """
    Totals and top expense categories for one month of a financial year.

    Args:
        db: Open session
        user_id: Whose records to aggregate
        month: Month name ("April", "apr"); defaults to the current month
        financial_year: FY label ("2024" or "2024-2025"); defaults to the current FY

    Returns:
        DashboardSummary (all zeros when nothing was recorded)
    """
    today = current_period()
    target_month = normalize_month_name(month) if month else today.month
    target_year = parse_financial_year(financial_year) if financial_year else today.financial_year

    started_at = logger.operation_start("get_dashboard_summary", {
        "user_id": user_id,
        "month": target_month,
        "financial_year": target_year,
    })
    try:
        income_amounts = [
            amount for (amount,) in db.query(Income.amount).filter(
                Income.user_id == user_id,
                Income.month == target_month,
                Income.financial_year == target_year,
            )
        ]

        # Outer join so an expense whose category vanished still counts (as "Unknown")
        expense_rows = (
            db.query(ExpenseCategory.name, Expense.amount)
            .select_from(Expense)
            .outerjoin(ExpenseCategory, Expense.category_id == ExpenseCategory.id)
            .filter(
                Expense.user_id == user_id,
                Expense.month == target_month,
                Expense.financial_year == target_year,
            )
            .all()
        )

        user_settings = _user_settings(db, user_id)
        summary = summarize_period(
            month=target_month,
            financial_year=target_year,
            income_amounts=income_amounts,
            expense_rows=[(name, amount) for name, amount in expense_rows],
            top_n=settings.dashboard_top_categories,
            currency=user_settings.currency if user_settings else settings.default_currency,
        )

        logger.operation_end("get_dashboard_summary", started_at, {
            "income_rows": len(income_amounts),
            "expense_rows": len(expense_rows),
        })
        return summary

    except Exception as e:
        logger.operation_error("get_dashboard_summary", started_at, e, classify_error(e))
        raise


def get_monthly_overview(
    db: Session,
    user_id: str,
    financial_year: Optional[str] = None,
) -> MonthlyOverview:
    """Income vs expenses for each month of a financial year (April first)."""
    target_year = parse_financial_year(financial_year) if financial_year else current_period().financial_year

    with logger.operation("get_monthly_overview", {"user_id": user_id, "financial_year": target_year}):
        income_rows = db.query(Income.month, Income.amount).filter(
            Income.user_id == user_id,
            Income.financial_year == target_year,
        ).all()
        expense_rows = db.query(Expense.month, Expense.amount).filter(
            Expense.user_id == user_id,
            Expense.financial_year == target_year,
        ).all()

        return monthly_totals(
            target_year,
            [(month, amount) for month, amount in income_rows],
            [(month, amount) for month, amount in expense_rows],
        )


def get_financial_year_report(
    db: Session,
    user_id: str,
    financial_year: Optional[str] = None,
) -> FinancialYearReport:
    """
    Every transaction inside the user's configured financial-year window.

    Unlike the dashboard, which groups by the stored labels, this selects
    by date using the boundaries saved in the user's settings.
    """
    target_year = parse_financial_year(financial_year) if financial_year else current_period().financial_year
    user_settings = _user_settings(db, user_id)
    start = user_settings.financial_year_start if user_settings else settings.default_financial_year_start
    end = user_settings.financial_year_end if user_settings else settings.default_financial_year_end
    start_date, end_date = financial_year_bounds(target_year, start, end)

    income = income_by_date_range(db, user_id, start_date, end_date)
    expenses = expenses_by_date_range(db, user_id, start_date, end_date)

    total_income = sum_amounts(row.amount for row in income)
    total_expenses = sum_amounts(row.amount for row in expenses)

    logger.info("Financial year report built", {
        "user_id": user_id,
        "financial_year": target_year,
        "start_date": start_date,
        "end_date": end_date,
        "income_rows": len(income),
        "expense_rows": len(expenses),
    })

    return FinancialYearReport(
        financial_year=target_year,
        start_date=start_date,
        end_date=end_date,
        income=income,
        expenses=expenses,
        total_income=float(total_income),
        total_expenses=float(total_expenses),
        net_savings=float(total_income - total_expenses),
        currency=user_settings.currency if user_settings else settings.default_currency,
    )
