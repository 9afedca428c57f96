"""Household finance tracker: income/expense records and financial-year dashboards."""

__version__ = "0.1.0"
