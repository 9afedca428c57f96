"""Category taxonomy and payment method schemas"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class IncomeCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None
    income_earner_name: Optional[str] = Field(default=None, max_length=100)


class IncomeCategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    income_earner_name: Optional[str] = None
    created_at: Optional[datetime] = None


class ExpenseCategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: Optional[str] = None


class ExpenseCategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None


class ExpenseSubcategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category_id: int


class ExpenseSubcategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    category_id: int
    created_at: Optional[datetime] = None


class PaymentMethodCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None


class PaymentMethodRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
