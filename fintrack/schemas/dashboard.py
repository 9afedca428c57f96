"""
Dashboard Data Schema - Pydantic Models

Response contracts for the dashboard summary, the monthly overview and
the financial-year report. Amounts are summed as Decimal by the
aggregator and serialized as floats here.
"""

from datetime import date, datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field

from fintrack.schemas.records import ExpenseRead, IncomeRead


# ============================================================================
# SUMMARY SCHEMA
# ============================================================================

class CategoryShare(BaseModel):
    """Spending for one expense category within the selected period"""
    category_name: str
    amount: float
    percentage: int  # Rounded % of total expenses, 0 when there are none


class DashboardSummary(BaseModel):
    """Totals for one user/month/financial-year"""
    month: str  # e.g. "April"
    financial_year: str  # e.g. "2024" (FY 2024-2025)
    total_income: float
    total_expenses: float
    net_savings: float
    top_expense_categories: List[CategoryShare] = Field(default_factory=list)
    currency: Optional[str] = None
    generated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    )


# ============================================================================
# MONTHLY OVERVIEW SCHEMA
# ============================================================================

class MonthlyTotal(BaseModel):
    """Income vs expenses for a single month of a financial year"""
    month: str
    income: float
    expenses: float
    net: float


class MonthlyOverview(BaseModel):
    """Twelve months of a financial year, April first"""
    financial_year: str
    months: List[MonthlyTotal]
    total_income: float
    total_expenses: float
    net_savings: float


# ============================================================================
# FINANCIAL YEAR REPORT SCHEMA
# ============================================================================

class FinancialYearReport(BaseModel):
    """Transactions inside a user's configured financial-year boundaries"""
    financial_year: str
    start_date: date
    end_date: date
    income: List[IncomeRead] = Field(default_factory=list)
    expenses: List[ExpenseRead] = Field(default_factory=list)
    total_income: float
    total_expenses: float
    net_savings: float
    currency: Optional[str] = None
