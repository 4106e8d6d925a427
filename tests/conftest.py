"""Shared pytest fixtures for payguard tests."""

import logging
import tempfile
import os
from datetime import datetime, timedelta
from decimal import Decimal
import pytest

from payguard.database.factories import create_sqlite_database
from payguard.database.memory import InMemoryDatabase
from payguard.domain.entities import Category, Frequency, Subscription
from payguard.domain.extraction import ExtractionEngine
from payguard.domain.ledger import LedgerService
from payguard.services.calendar import LocalCalendar
from payguard.services.dispatcher import InlineDispatcher
from payguard.services.notifications import ReminderScheduler

NOW = datetime(2024, 3, 10, 9, 0, 0)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI runs so they do not outlive the test."""
    yield
    logger = logging.getLogger("payguard")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def now():
    """Fixed clock value used by ledger and engine fixtures."""
    return NOW


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an empty in-memory database."""
    return InMemoryDatabase()


@pytest.fixture
def engine(now):
    """Create an ExtractionEngine with a fixed clock."""
    return ExtractionEngine(now=lambda: now)


@pytest.fixture
def notifier(now):
    return ReminderScheduler(now=lambda: now)


@pytest.fixture
def calendar():
    return LocalCalendar()


@pytest.fixture
def dispatcher():
    return InlineDispatcher()


@pytest.fixture
def ledger(memory_db, notifier, calendar, dispatcher, now):
    """Create a LedgerService over an in-memory database with a fixed clock."""
    return LedgerService(
        memory_db,
        notifier=notifier,
        calendar=calendar,
        dispatcher=dispatcher,
        now=lambda: now,
    )


@pytest.fixture
def make_subscription(now):
    """Factory for subscriptions with sensible defaults."""

    def _make(name="Netflix", amount="499", frequency=Frequency.MONTHLY, days_until=5, **kwargs):
        kwargs.setdefault("category", Category.OTT)
        kwargs.setdefault("created_at", now - timedelta(days=60))
        return Subscription(
            name=name,
            amount=Decimal(amount),
            frequency=frequency,
            next_debit_date=now + timedelta(days=days_until),
            **kwargs,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
