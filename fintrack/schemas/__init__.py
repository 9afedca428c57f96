"""
Schemas module for the finance tracker

Provides Pydantic models for request validation and response serialization.
"""

from fintrack.schemas.catalog import (
    ExpenseCategoryCreate,
    ExpenseCategoryRead,
    ExpenseSubcategoryCreate,
    ExpenseSubcategoryRead,
    IncomeCategoryCreate,
    IncomeCategoryRead,
    PaymentMethodCreate,
    PaymentMethodRead,
)
from fintrack.schemas.records import (
    ExpenseCreate,
    ExpenseRead,
    IncomeCreate,
    IncomeRead,
)
from fintrack.schemas.dashboard import (
    CategoryShare,
    DashboardSummary,
    FinancialYearReport,
    MonthlyOverview,
    MonthlyTotal,
)
from fintrack.schemas.users import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserRead,
    UserSettingsRead,
    UserSettingsUpdate,
)

__all__ = [
    'CategoryShare',
    'DashboardSummary',
    'ExpenseCategoryCreate',
    'ExpenseCategoryRead',
    'ExpenseCreate',
    'ExpenseRead',
    'ExpenseSubcategoryCreate',
    'ExpenseSubcategoryRead',
    'FinancialYearReport',
    'IncomeCategoryCreate',
    'IncomeCategoryRead',
    'IncomeCreate',
    'IncomeRead',
    'LoginRequest',
    'MonthlyOverview',
    'MonthlyTotal',
    'PaymentMethodCreate',
    'PaymentMethodRead',
    'RegisterRequest',
    'TokenResponse',
    'UserRead',
    'UserSettingsRead',
    'UserSettingsUpdate',
]
