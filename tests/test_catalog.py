import pytest

from fintrack.database import ExpenseCategory, IncomeCategory
from fintrack.errors import RecordNotFoundError, ValidationError
from fintrack.schemas import (
    ExpenseCategoryCreate,
    ExpenseSubcategoryCreate,
    IncomeCategoryCreate,
    PaymentMethodCreate,
)
from fintrack.services import catalog
from fintrack.services.category_defaults import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    DEFAULT_PAYMENT_METHODS,
)


def test_default_catalog_is_seeded(db):
    assert len(catalog.list_income_categories(db)) == len(DEFAULT_INCOME_CATEGORIES)
    assert len(catalog.list_expense_categories(db)) == len(DEFAULT_EXPENSE_CATEGORIES)
    assert len(catalog.list_payment_methods(db)) == len(DEFAULT_PAYMENT_METHODS)


def test_seeding_twice_is_a_no_op(db):
    assert catalog.seed_default_catalog(db) is False
    assert db.query(IncomeCategory).count() == len(DEFAULT_INCOME_CATEGORIES)


def test_listings_are_sorted_by_name(db):
    names = [c.name for c in catalog.list_expense_categories(db)]
    assert names == sorted(names)


def test_create_income_category(db):
    created = catalog.create_income_category(
        db, IncomeCategoryCreate(name="  Side   Project ", income_earner_name="Alex")
    )
    assert created.name == "Side Project"
    assert created.income_earner_name == "Alex"


def test_duplicate_names_are_rejected_case_insensitively(db):
    with pytest.raises(ValidationError):
        catalog.create_expense_category(db, ExpenseCategoryCreate(name="housing"))
    with pytest.raises(ValidationError):
        catalog.create_payment_method(db, PaymentMethodCreate(name="CASH"))


def test_blank_name_is_rejected(db):
    with pytest.raises(ValidationError):
        catalog.create_income_category(db, IncomeCategoryCreate(name="   "))


def test_subcategory_names_are_unique_per_category(db):
    housing = db.query(ExpenseCategory).filter(ExpenseCategory.name == "Housing").one()
    transport = db.query(ExpenseCategory).filter(ExpenseCategory.name == "Transportation").one()

    # "Rent" exists under Housing only
    created = catalog.create_expense_subcategory(
        db, ExpenseSubcategoryCreate(name="Rent", category_id=transport.id)
    )
    assert created.category_id == transport.id

    with pytest.raises(ValidationError):
        catalog.create_expense_subcategory(db, ExpenseSubcategoryCreate(name="rent", category_id=housing.id))


def test_subcategory_requires_existing_parent(db):
    with pytest.raises(ValidationError):
        catalog.create_expense_subcategory(db, ExpenseSubcategoryCreate(name="Orphan", category_id=9999))


def test_list_subcategories_by_category(db):
    housing = db.query(ExpenseCategory).filter(ExpenseCategory.name == "Housing").one()
    subcategories = catalog.list_expense_subcategories(db, housing.id)
    assert {s.name for s in subcategories} == {
        "Rent", "Mortgage", "Property Tax", "Home Maintenance", "Furniture",
    }
    assert all(s.category_id == housing.id for s in subcategories)


def test_list_subcategories_for_unknown_category(db):
    with pytest.raises(RecordNotFoundError):
        catalog.list_expense_subcategories(db, 9999)


def test_concurrent_duplicate_is_rejected(db, monkeypatch):
    # Another writer inserted the same name after the duplicate check ran
    monkeypatch.setattr(catalog, "_name_taken", lambda *args, **kwargs: False)
    with pytest.raises(ValidationError):
        catalog.create_expense_category(db, ExpenseCategoryCreate(name="Housing"))

    assert db.query(ExpenseCategory).filter(ExpenseCategory.name == "Housing").count() == 1
