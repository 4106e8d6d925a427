"""Database factory functions for creating database instances."""

from pathlib import Path

from payguard.config import Settings
from payguard.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: str) -> SQLAlchemyDatabase:
    """Create a SQLite database instance, creating its directory if needed.

    Args:
        database_path: Resolved path to the SQLite file (see ``config.load_settings``)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = Path(database_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")


def create_database(settings: Settings) -> SQLAlchemyDatabase:
    """Create the database configured by ``settings``."""
    return create_sqlite_database(settings.db_path)
