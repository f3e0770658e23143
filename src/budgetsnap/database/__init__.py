"""Database layer for budgetsnap application."""

from budgetsnap.database.base import Database
from budgetsnap.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
