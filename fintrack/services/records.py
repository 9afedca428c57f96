"""
Record Handlers - income and expense transactions

Every write validates the referenced category / subcategory / payment
method and stamps the row with the financial year and month derived
from its date. Records are created and read, never updated or deleted.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from fintrack.config import settings
from fintrack.database import (
    Expense,
    ExpenseCategory,
    ExpenseSubcategory,
    Income,
    IncomeCategory,
    PaymentMethod,
    User,
)
from fintrack.errors import RecordNotFoundError, ValidationError
from fintrack.logger import create_logger, classify_error
from fintrack.periods import resolve_period
from fintrack.schemas.records import ExpenseCreate, ExpenseRead, IncomeCreate, IncomeRead

# Create logger for this module
logger = create_logger("records")

MAX_LIST_LIMIT = 500


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def _require_user(db: Session, user_id: str) -> None:
    if db.get(User, user_id) is None:
        raise RecordNotFoundError(f"User {user_id} not found")


def _require_reference(db: Session, model, record_id: int, label: str):
    row = db.get(model, record_id)
    if row is None:
        raise ValidationError(f"{label} {record_id} does not exist")
    return row


def _validate_limit(limit: Optional[int]) -> int:
    if limit is None:
        return settings.default_list_limit
    if not 1 <= limit <= MAX_LIST_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
    return limit


def _validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise ValidationError("start_date must not be after end_date")


# ============================================================================
# INCOME
# ============================================================================

def create_income(db: Session, user_id: str, payload: IncomeCreate) -> IncomeRead:
    """
    Record an income transaction.

    Args:
        db: Open session
        user_id: Owner of the record
        payload: Validated create payload (amount > 0, at most 2 decimals)

    Returns:
        The stored record with category and payment method embedded

    Raises:
        ValidationError: unknown category or payment method
        RecordNotFoundError: unknown user
    """
    started_at = logger.operation_start("create_income", {
        "user_id": user_id,
        "category_id": payload.category_id,
        "date": payload.date,
    })
    try:
        _require_user(db, user_id)
        _require_reference(db, IncomeCategory, payload.category_id, "Income category")
        _require_reference(db, PaymentMethod, payload.payment_method_id, "Payment method")

        period = resolve_period(payload.date)
        income = Income(
            user_id=user_id,
            category_id=payload.category_id,
            amount=payload.amount,
            description=payload.description,
            date=payload.date,
            payment_method_id=payload.payment_method_id,
            financial_year=period.financial_year,
            month=period.month,
        )
        db.add(income)
        db.commit()
        db.refresh(income)

        logger.operation_end("create_income", started_at, {
            "financial_year": period.financial_year,
            "month": period.month,
        })
        return IncomeRead.model_validate(income)

    except Exception as e:
        db.rollback()
        logger.operation_error("create_income", started_at, e, classify_error(e))
        raise


def list_income(db: Session, user_id: str, limit: Optional[int] = None) -> List[IncomeRead]:
    """Most recent income first (date, then creation time)."""
    limit = _validate_limit(limit)
    rows = (
        _income_query(db, user_id)
        .order_by(Income.date.desc(), Income.created_at.desc())
        .limit(limit)
        .all()
    )
    return [IncomeRead.model_validate(row) for row in rows]


def income_by_date_range(db: Session, user_id: str, start_date: date, end_date: date) -> List[IncomeRead]:
    """Income with start_date <= date <= end_date, newest first."""
    _validate_range(start_date, end_date)
    rows = (
        _income_query(db, user_id)
        .filter(Income.date >= start_date, Income.date <= end_date)
        .order_by(Income.date.desc(), Income.created_at.desc())
        .all()
    )
    return [IncomeRead.model_validate(row) for row in rows]


def _income_query(db: Session, user_id: str):
    return (
        db.query(Income)
        .options(joinedload(Income.category), joinedload(Income.payment_method))
        .filter(Income.user_id == user_id)
    )


# ============================================================================
# EXPENSES
# ============================================================================

def create_expense(db: Session, user_id: str, payload: ExpenseCreate) -> ExpenseRead:
    """
    Record an expense transaction.

    The optional subcategory must belong to the expense's category.

    Raises:
        ValidationError: unknown category / subcategory / payment method,
            or a subcategory of a different category
        RecordNotFoundError: unknown user
    """
    started_at = logger.operation_start("create_expense", {
        "user_id": user_id,
        "category_id": payload.category_id,
        "subcategory_id": payload.subcategory_id,
        "date": payload.date,
    })
    try:
        _require_user(db, user_id)
        _require_reference(db, ExpenseCategory, payload.category_id, "Expense category")
        if payload.subcategory_id is not None:
            subcategory = _require_reference(db, ExpenseSubcategory, payload.subcategory_id, "Expense subcategory")
            if subcategory.category_id != payload.category_id:
                raise ValidationError(
                    f"Expense subcategory {payload.subcategory_id} does not belong to "
                    f"category {payload.category_id}"
                )
        _require_reference(db, PaymentMethod, payload.payment_method_id, "Payment method")

        period = resolve_period(payload.date)
        expense = Expense(
            user_id=user_id,
            category_id=payload.category_id,
            subcategory_id=payload.subcategory_id,
            amount=payload.amount,
            description=payload.description,
            date=payload.date,
            payment_method_id=payload.payment_method_id,
            financial_year=period.financial_year,
            month=period.month,
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)

        logger.operation_end("create_expense", started_at, {
            "financial_year": period.financial_year,
            "month": period.month,
        })
        return ExpenseRead.model_validate(expense)

    except Exception as e:
        db.rollback()
        logger.operation_error("create_expense", started_at, e, classify_error(e))
        raise


def list_expenses(db: Session, user_id: str, limit: Optional[int] = None) -> List[ExpenseRead]:
    limit = _validate_limit(limit)
    rows = (
        _expense_query(db, user_id)
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .limit(limit)
        .all()
    )
    return [ExpenseRead.model_validate(row) for row in rows]


def expenses_by_date_range(db: Session, user_id: str, start_date: date, end_date: date) -> List[ExpenseRead]:
    _validate_range(start_date, end_date)
    rows = (
        _expense_query(db, user_id)
        .filter(Expense.date >= start_date, Expense.date <= end_date)
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .all()
    )
    return [ExpenseRead.model_validate(row) for row in rows]


def _expense_query(db: Session, user_id: str):
    return (
        db.query(Expense)
        .options(
            joinedload(Expense.category),
            joinedload(Expense.subcategory),
            joinedload(Expense.payment_method),
        )
        .filter(Expense.user_id == user_id)
    )
