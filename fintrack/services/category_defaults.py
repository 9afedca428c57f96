"""
Category Defaults - Catalog seed data

Default income categories, expense categories (with subcategories) and
payment methods inserted on first startup.

Used by:
- catalog.seed_default_catalog - startup seeding
"""

DEFAULT_INCOME_CATEGORIES = [
    {"name": "Salary", "description": "Regular employment salary"},
    {"name": "Rental Income", "description": "Income from property rent"},
    {"name": "Dividend Income", "description": "Dividends from investments"},
    {"name": "Interest Income", "description": "Interest from savings and deposits"},
    {"name": "Business Income", "description": "Income from business activities"},
    {"name": "Freelance Income", "description": "Income from freelance work"},
    {"name": "Bonus", "description": "Performance bonus and incentives"},
    {"name": "Other Income", "description": "Other miscellaneous income"},
]

DEFAULT_EXPENSE_CATEGORIES = [
    {
        "name": "Food & Dining",
        "description": "All food related expenses",
        "subcategories": ["Grocery", "Vegetables", "Restaurants", "Fast Food", "Coffee Shops"],
    },
    {
        "name": "Transportation",
        "description": "Travel and transportation expenses",
        "subcategories": ["Fuel", "Public Transport", "Taxi/Uber", "Vehicle Maintenance", "Parking"],
    },
    {
        "name": "Housing",
        "description": "Housing and accommodation expenses",
        "subcategories": ["Rent", "Mortgage", "Property Tax", "Home Maintenance", "Furniture"],
    },
    {
        "name": "Healthcare",
        "description": "Medical and health expenses",
        "subcategories": ["Doctor Visits", "Medicines", "Health Insurance", "Dental", "Vision"],
    },
    {
        "name": "Entertainment",
        "description": "Entertainment and leisure expenses",
        "subcategories": ["Movies", "Games", "Books", "Streaming Services", "Events"],
    },
    {
        "name": "Utilities",
        "description": "Utility bills and services",
        "subcategories": ["Electricity", "Water", "Gas", "Internet", "Mobile Bill", "Domestic Help"],
    },
    {
        "name": "Insurance",
        "description": "Insurance premiums and policies",
        "subcategories": ["Life Insurance", "Health Insurance", "Vehicle Insurance", "Home Insurance"],
    },
    {
        "name": "Education",
        "description": "Education and learning expenses",
        "subcategories": ["School Fees", "Books", "Online Courses", "Tuition", "Supplies"],
    },
    {
        "name": "Personal Care",
        "description": "Personal care and grooming",
        "subcategories": ["Haircut", "Cosmetics", "Clothing", "Gym", "Spa"],
    },
    {
        "name": "Kids Expenses",
        "description": "Children related expenses",
        "subcategories": ["Toys", "Clothes", "School Activities", "Sports", "Healthcare"],
    },
]

DEFAULT_PAYMENT_METHODS = [
    {"name": "Cash", "description": "Cash payments"},
    {"name": "Credit Card", "description": "Credit card payments"},
    {"name": "Debit Card", "description": "Debit card payments"},
    {"name": "UPI", "description": "UPI and digital wallet payments"},
    {"name": "Net Banking", "description": "Online banking transfers"},
    {"name": "Bank Transfer", "description": "Direct bank transfers"},
    {"name": "Cheque", "description": "Cheque payments"},
    {"name": "Other", "description": "Other payment methods"},
]


def normalize_name(name: str) -> str | None:
    """Collapse whitespace in a catalog name; None when nothing is left."""
    if not name or not isinstance(name, str):
        return None
    cleaned = " ".join(name.split())
    return cleaned or None
