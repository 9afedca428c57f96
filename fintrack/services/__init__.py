"""Database-backed handlers called by the API, plus the pure aggregation helpers"""
from . import aggregation, catalog, dashboard, records, users

__all__ = [
    "aggregation",
    "catalog",
    "dashboard",
    "records",
    "users",
]
