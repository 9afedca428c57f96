from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from fintrack.database import ExpenseCategory, ExpenseSubcategory, IncomeCategory, PaymentMethod
from fintrack.errors import RecordNotFoundError, ValidationError
from fintrack.schemas import ExpenseCreate, IncomeCreate
from fintrack.services import records


def _id(db, model, name):
    return db.query(model).filter(model.name == name).one().id


def _subcategory_id(db, category_name, name):
    return (
        db.query(ExpenseSubcategory)
        .join(ExpenseCategory)
        .filter(ExpenseCategory.name == category_name, ExpenseSubcategory.name == name)
        .one()
        .id
    )


def income_payload(db, when, amount="1000.00", **overrides):
    data = {
        "category_id": _id(db, IncomeCategory, "Salary"),
        "amount": amount,
        "date": when,
        "payment_method_id": _id(db, PaymentMethod, "Bank Transfer"),
    }
    data.update(overrides)
    return IncomeCreate(**data)


def expense_payload(db, when, amount="50.00", category="Food & Dining", **overrides):
    data = {
        "category_id": _id(db, ExpenseCategory, category),
        "amount": amount,
        "date": when,
        "payment_method_id": _id(db, PaymentMethod, "Cash"),
    }
    data.update(overrides)
    return ExpenseCreate(**data)


class TestPeriodDerivation:
    def test_income_period_is_derived_from_date(self, db, user_id):
        income = records.create_income(db, user_id, income_payload(db, date(2025, 3, 31)))
        assert income.financial_year == "2024"
        assert income.month == "March"
        assert income.amount == 1000.0
        assert income.category.name == "Salary"

    def test_expense_period_is_derived_from_date(self, db, user_id):
        expense = records.create_expense(db, user_id, expense_payload(db, date(2025, 4, 1)))
        assert expense.financial_year == "2025"
        assert expense.month == "April"

    def test_client_supplied_period_is_ignored(self, db, user_id):
        payload = income_payload(db, date(2024, 1, 10), financial_year="2030", month="June")
        income = records.create_income(db, user_id, payload)
        assert (income.financial_year, income.month) == ("2023", "January")


class TestValidation:
    def test_amount_must_be_positive(self, db):
        with pytest.raises(PydanticValidationError):
            income_payload(db, date(2024, 5, 1), amount="0")

    def test_amount_allows_two_decimals_only(self, db):
        with pytest.raises(PydanticValidationError):
            expense_payload(db, date(2024, 5, 1), amount="12.345")

    def test_unknown_category_is_rejected(self, db, user_id):
        with pytest.raises(ValidationError):
            records.create_income(db, user_id, income_payload(db, date(2024, 5, 1), category_id=9999))

    def test_unknown_payment_method_is_rejected(self, db, user_id):
        with pytest.raises(ValidationError):
            records.create_expense(db, user_id, expense_payload(db, date(2024, 5, 1), payment_method_id=9999))

    def test_subcategory_must_belong_to_category(self, db, user_id):
        fuel = _subcategory_id(db, "Transportation", "Fuel")
        payload = expense_payload(db, date(2024, 5, 1), category="Food & Dining", subcategory_id=fuel)
        with pytest.raises(ValidationError):
            records.create_expense(db, user_id, payload)

    def test_matching_subcategory_is_stored(self, db, user_id):
        grocery = _subcategory_id(db, "Food & Dining", "Grocery")
        expense = records.create_expense(
            db, user_id, expense_payload(db, date(2024, 5, 1), subcategory_id=grocery)
        )
        assert expense.subcategory.name == "Grocery"

    def test_unknown_user_is_not_found(self, db):
        with pytest.raises(RecordNotFoundError):
            records.create_income(db, "nobody", income_payload(db, date(2024, 5, 1)))

    @pytest.mark.parametrize("limit", [0, 501])
    def test_limit_out_of_range(self, db, user_id, limit):
        with pytest.raises(ValidationError):
            records.list_income(db, user_id, limit)


class TestListing:
    def test_newest_first_with_limit(self, db, user_id):
        for day in (1, 15, 8):
            records.create_expense(db, user_id, expense_payload(db, date(2024, 6, day)))

        latest_two = records.list_expenses(db, user_id, limit=2)
        assert [e.date for e in latest_two] == [date(2024, 6, 15), date(2024, 6, 8)]

    def test_records_are_scoped_to_user(self, db, user_id):
        records.create_income(db, user_id, income_payload(db, date(2024, 6, 1)))
        assert len(records.list_income(db, user_id)) == 1

        other = records.list_income(db, "someone-else")
        assert other == []

    def test_date_range_is_inclusive(self, db, user_id):
        for when in (date(2024, 3, 31), date(2024, 4, 1), date(2024, 4, 30), date(2024, 5, 1)):
            records.create_income(db, user_id, income_payload(db, when, amount=Decimal("10")))

        april = records.income_by_date_range(db, user_id, date(2024, 4, 1), date(2024, 4, 30))
        assert [i.date for i in april] == [date(2024, 4, 30), date(2024, 4, 1)]

    def test_reversed_date_range_is_rejected(self, db, user_id):
        with pytest.raises(ValidationError):
            records.expenses_by_date_range(db, user_id, date(2024, 5, 1), date(2024, 4, 1))
