"""
Catalog Handlers - Category taxonomy and payment methods

Income categories (single level), expense categories with their
subcategories, and payment methods. The catalog is shared by all users,
created once and rarely mutated.
"""

from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fintrack.database import ExpenseCategory, ExpenseSubcategory, IncomeCategory, PaymentMethod
from fintrack.errors import RecordNotFoundError, ValidationError
from fintrack.logger import create_logger, classify_error
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
from fintrack.services.category_defaults import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    DEFAULT_PAYMENT_METHODS,
    normalize_name,
)

# Create logger for this module
logger = create_logger("catalog")


def _require_name(name: str, kind: str) -> str:
    cleaned = normalize_name(name)
    if not cleaned:
        raise ValidationError(f"{kind} name is required")
    return cleaned


def _name_taken(db: Session, model, name: str, **filters) -> bool:
    query = db.query(model).filter(func.lower(model.name) == name.lower())
    for column, value in filters.items():
        query = query.filter(getattr(model, column) == value)
    return db.query(query.exists()).scalar()


def _create(db: Session, operation: str, instance):
    """Insert a catalog row, logging and rolling back on failure"""
    name = instance.name
    started_at = logger.operation_start(operation, {"name": name})
    try:
        db.add(instance)
        db.commit()
        db.refresh(instance)
        logger.operation_end(operation, started_at, {"id": instance.id})
        return instance
    except IntegrityError as e:
        # A concurrent insert took the name between the check and the commit
        db.rollback()
        error = ValidationError(f"Name already exists: {name}")
        logger.operation_error(operation, started_at, error, classify_error(error))
        raise error from e
    except Exception as e:
        db.rollback()
        logger.operation_error(operation, started_at, e, classify_error(e))
        raise


# ============================================================================
# INCOME CATEGORIES
# ============================================================================

def list_income_categories(db: Session) -> List[IncomeCategoryRead]:
    rows = db.query(IncomeCategory).order_by(IncomeCategory.name).all()
    return [IncomeCategoryRead.model_validate(row) for row in rows]


def create_income_category(db: Session, payload: IncomeCategoryCreate) -> IncomeCategoryRead:
    name = _require_name(payload.name, "Income category")
    if _name_taken(db, IncomeCategory, name):
        raise ValidationError(f"Income category already exists: {name}")

    category = _create(db, "create_income_category", IncomeCategory(
        name=name,
        description=payload.description,
        income_earner_name=normalize_name(payload.income_earner_name or ""),
    ))
    return IncomeCategoryRead.model_validate(category)


# ============================================================================
# EXPENSE CATEGORIES / SUBCATEGORIES
# ============================================================================

def list_expense_categories(db: Session) -> List[ExpenseCategoryRead]:
    rows = db.query(ExpenseCategory).order_by(ExpenseCategory.name).all()
    return [ExpenseCategoryRead.model_validate(row) for row in rows]


def create_expense_category(db: Session, payload: ExpenseCategoryCreate) -> ExpenseCategoryRead:
    name = _require_name(payload.name, "Expense category")
    if _name_taken(db, ExpenseCategory, name):
        raise ValidationError(f"Expense category already exists: {name}")

    category = _create(db, "create_expense_category", ExpenseCategory(
        name=name,
        description=payload.description,
    ))
    return ExpenseCategoryRead.model_validate(category)


def list_expense_subcategories(
    db: Session,
    category_id: Optional[int] = None,
) -> List[ExpenseSubcategoryRead]:
    """All subcategories, or only those of `category_id` (which must exist)."""
    query = db.query(ExpenseSubcategory)
    if category_id is not None:
        if db.get(ExpenseCategory, category_id) is None:
            raise RecordNotFoundError(f"Expense category {category_id} not found")
        query = query.filter(ExpenseSubcategory.category_id == category_id)
    rows = query.order_by(ExpenseSubcategory.name, ExpenseSubcategory.id).all()
    return [ExpenseSubcategoryRead.model_validate(row) for row in rows]


def create_expense_subcategory(db: Session, payload: ExpenseSubcategoryCreate) -> ExpenseSubcategoryRead:
    name = _require_name(payload.name, "Expense subcategory")
    if db.get(ExpenseCategory, payload.category_id) is None:
        raise ValidationError(f"Expense category {payload.category_id} does not exist")
    # Names only need to be unique within their parent category
    if _name_taken(db, ExpenseSubcategory, name, category_id=payload.category_id):
        raise ValidationError(f"Expense subcategory already exists: {name}")

    subcategory = _create(db, "create_expense_subcategory", ExpenseSubcategory(
        name=name,
        category_id=payload.category_id,
    ))
    return ExpenseSubcategoryRead.model_validate(subcategory)


# ============================================================================
# PAYMENT METHODS
# ============================================================================

def list_payment_methods(db: Session) -> List[PaymentMethodRead]:
    rows = db.query(PaymentMethod).order_by(PaymentMethod.name).all()
    return [PaymentMethodRead.model_validate(row) for row in rows]


def create_payment_method(db: Session, payload: PaymentMethodCreate) -> PaymentMethodRead:
    name = _require_name(payload.name, "Payment method")
    if _name_taken(db, PaymentMethod, name):
        raise ValidationError(f"Payment method already exists: {name}")

    method = _create(db, "create_payment_method", PaymentMethod(
        name=name,
        description=payload.description,
    ))
    return PaymentMethodRead.model_validate(method)


# ============================================================================
# SEEDING
# ============================================================================

def seed_default_catalog(db: Session) -> bool:
    """
    Insert the default catalog on first startup.

    Returns:
        True if the defaults were inserted, False if a catalog already exists
    """
    if db.query(IncomeCategory.id).first() is not None:
        return False

    with logger.operation("seed_default_catalog"):
        try:
            for category in DEFAULT_INCOME_CATEGORIES:
                db.add(IncomeCategory(**category))

            for category in DEFAULT_EXPENSE_CATEGORIES:
                db.add(ExpenseCategory(
                    name=category["name"],
                    description=category["description"],
                    subcategories=[ExpenseSubcategory(name=sub) for sub in category["subcategories"]],
                ))

            for method in DEFAULT_PAYMENT_METHODS:
                db.add(PaymentMethod(**method))

            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Default catalog seeded", {
        "income_categories": len(DEFAULT_INCOME_CATEGORIES),
        "expense_categories": len(DEFAULT_EXPENSE_CATEGORIES),
        "payment_methods": len(DEFAULT_PAYMENT_METHODS),
    })
    return True
