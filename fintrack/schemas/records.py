"""
Income / expense record schemas

Create payloads never carry financial_year or month: both are derived
from `date` on write, and any client-supplied values are dropped.
"""

from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from fintrack.schemas.catalog import (
    ExpenseCategoryRead,
    ExpenseSubcategoryRead,
    IncomeCategoryRead,
    PaymentMethodRead,
)


# ============================================================================
# CREATE PAYLOADS
# ============================================================================

class IncomeCreate(BaseModel):
    """Income record as submitted by the client"""
    model_config = ConfigDict(extra="ignore")

    category_id: int
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    date: date_type
    payment_method_id: int


class ExpenseCreate(BaseModel):
    """Expense record as submitted by the client"""
    model_config = ConfigDict(extra="ignore")

    category_id: int
    subcategory_id: Optional[int] = None
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    description: Optional[str] = None
    date: date_type
    payment_method_id: int


# ============================================================================
# READ MODELS
# ============================================================================

class _RecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    amount: float
    description: Optional[str] = None
    date: date_type
    financial_year: str
    month: str
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, value):
        # PostgreSQL hands back uuid.UUID instances
        return str(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_to_float(cls, value):
        return float(value)


class IncomeRead(_RecordRead):
    """Income record with its category and payment method"""
    category_id: int
    payment_method_id: int
    category: Optional[IncomeCategoryRead] = None
    payment_method: Optional[PaymentMethodRead] = None


class ExpenseRead(_RecordRead):
    """Expense record with its category, subcategory and payment method"""
    category_id: int
    subcategory_id: Optional[int] = None
    payment_method_id: int
    category: Optional[ExpenseCategoryRead] = None
    subcategory: Optional[ExpenseSubcategoryRead] = None
    payment_method: Optional[PaymentMethodRead] = None
