"""Database layer for payguard application."""

from payguard.database.base import Database
from payguard.database.memory import InMemoryDatabase
from payguard.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "InMemoryDatabase", "create_database", "create_sqlite_database"]
