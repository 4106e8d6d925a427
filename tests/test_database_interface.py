"""Tests for the SQLite-backed Database implementation."""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from payguard.config import Settings
from payguard.database.factories import create_database, create_sqlite_database
from payguard.domain import entities
from payguard.domain.ledger import LedgerService


class TestDatabaseInterface:
    """Tests to verify the Database interface returns domain models."""

    def test_empty_database(self, temp_db):
        assert temp_db.load_subscriptions() == []
        assert temp_db.load_transactions() == []

    def test_subscriptions_round_trip(self, temp_db, make_subscription, now):
        """Test that every subscription field survives a save and load."""
        sub = make_subscription(
            merchant="Netflix",
            last_debit_date=now - timedelta(days=25),
            cancelled_at=now,
            is_active=False,
            sync_to_calendar=True,
            calendar_event_id="evt-1",
        )

        temp_db.save_subscriptions([sub])
        loaded = temp_db.load_subscriptions()

        assert len(loaded) == 1
        assert isinstance(loaded[0], entities.Subscription)
        assert loaded[0] == sub

    def test_subscriptions_ordered_by_creation(self, temp_db, make_subscription, now):
        newer = make_subscription(name="Newer", created_at=now - timedelta(days=1))
        older = make_subscription(name="Older", created_at=now - timedelta(days=30))

        temp_db.save_subscriptions([newer, older])

        assert [sub.name for sub in temp_db.load_subscriptions()] == ["Older", "Newer"]

    def test_save_replaces_collection(self, temp_db, make_subscription):
        """Test that a save replaces everything stored before."""
        first = make_subscription(name="First")
        second = make_subscription(name="Second")
        temp_db.save_subscriptions([first, second])

        temp_db.save_subscriptions([second])

        assert [sub.id for sub in temp_db.load_subscriptions()] == [second.id]

    def test_transactions_round_trip(self, temp_db):
        txn = entities.Transaction(
            amount=Decimal("119.00"),
            date=datetime(2024, 3, 5, 10, 30),
            description="Spotify receipt",
            merchant="Spotify",
            subscription_id="dangling",
            is_subscription=True,
        )
        earlier = entities.Transaction(amount=Decimal("10"), date=datetime(2024, 3, 1), description="Coffee")

        temp_db.save_transactions([txn, earlier])
        loaded = temp_db.load_transactions()

        assert [t.id for t in loaded] == [earlier.id, txn.id]
        assert loaded[1] == txn

    def test_state_survives_reopen(self, temp_db, engine, now):
        """Test that a new ledger over the same file sees earlier ingestion."""
        ledger = LedgerService(temp_db, now=lambda: now)
        ledger.ingest_parsed_transaction(
            engine.extract_transaction("Netflix subscription renewed. ₹499 debited from your account.")
        )

        reopened = create_sqlite_database(database_path=temp_db.database_path)
        try:
            restored = LedgerService(reopened, now=lambda: now)
        finally:
            reopened.disconnect()

        assert [sub.name for sub in restored.list_subscriptions()] == ["Netflix"]
        assert len(restored.list_transactions()) == 1
        assert restored.list_subscriptions()[0].next_debit_date == now + timedelta(days=30)


class TestFactories:
    """Tests for database factory functions."""

    def test_creates_missing_directory(self, tmp_path):
        path = tmp_path / "nested" / "payguard.db"

        db = create_sqlite_database(str(path))
        try:
            db.save_subscriptions([])
        finally:
            db.disconnect()

        assert path.parent.is_dir()
        assert db.database_url == f"sqlite:///{path}"

    def test_uses_settings_path_only(self, tmp_path, monkeypatch):
        """Test that the environment is read by load_settings, not the factory."""
        monkeypatch.setenv("PAYGUARD_DB_PATH", str(tmp_path / "from-env.db"))
        path = tmp_path / "from-settings.db"

        db = create_database(Settings(db_path=str(path)))
        db.disconnect()

        assert db.database_url == f"sqlite:///{path}"
