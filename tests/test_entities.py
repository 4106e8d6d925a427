"""Tests for domain entities."""

import pytest
from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timedelta
from decimal import Decimal

from payguard.domain.category import infer_category, parse_category
from payguard.domain.entities import (
    Category,
    Frequency,
    Subscription,
    Transaction,
    days_between,
)
from payguard.domain.errors import ValidationError
from payguard.domain.matching import find_matching_subscription


class TestSubscription:
    """Tests for Subscription entity."""

    def test_create_subscription(self, make_subscription):
        """Test creating a Subscription entity with defaults."""
        sub = make_subscription()

        assert sub.currency == "₹"
        assert sub.is_active is True
        assert sub.is_cancelled is False
        assert sub.sync_to_calendar is False
        assert sub.calendar_event_id is None
        assert isinstance(sub.id, str) and len(sub.id) == 36

    def test_subscription_immutability(self, make_subscription):
        """Test that Subscription entities are immutable."""
        sub = make_subscription()
        with pytest.raises(FrozenInstanceError):
            sub.name = "New Name"

    def test_replace_keeps_identity(self, make_subscription):
        sub = make_subscription()

        updated = replace(sub, amount=Decimal("649"))

        assert updated.id == sub.id
        assert updated != sub

    def test_unique_ids(self, make_subscription):
        assert make_subscription().id != make_subscription().id

    def test_negative_amount(self, make_subscription):
        with pytest.raises(ValidationError, match="negative"):
            make_subscription(amount="-0.01")

    def test_zero_amount_allowed(self, make_subscription):
        assert make_subscription(amount="0").amount == Decimal("0")

    def test_is_cancelled_follows_timestamp(self, make_subscription, now):
        assert make_subscription(cancelled_at=now).is_cancelled is True

    def test_formatted_amount(self, make_subscription):
        assert make_subscription(amount="499").formatted_amount == "₹499.00"
        assert make_subscription(amount="12.5", currency="$").formatted_amount == "$12.50"

    def test_days_until_debit(self):
        sub = Subscription(
            name="Netflix",
            amount=Decimal("499"),
            frequency=Frequency.MONTHLY,
            next_debit_date=datetime.now() + timedelta(days=5, hours=1),
            category=Category.OTT,
        )

        assert sub.days_until_debit == 5


class TestFrequency:
    """Tests for billing frequencies."""

    @pytest.mark.parametrize(
        "frequency,days",
        [
            (Frequency.WEEKLY, 7),
            (Frequency.BI_WEEKLY, 14),
            (Frequency.MONTHLY, 30),
            (Frequency.QUARTERLY, 90),
            (Frequency.YEARLY, 365),
            (Frequency.CUSTOM, 30),
        ],
    )
    def test_day_count(self, frequency, days):
        assert frequency.day_count == days

    def test_lookup_by_value(self):
        assert Frequency("Bi-Weekly") is Frequency.BI_WEEKLY


def test_transaction_defaults():
    txn = Transaction(amount=Decimal("10"), date=datetime(2024, 3, 1), description="Coffee")

    assert txn.currency == "₹"
    assert txn.subscription_id is None
    assert txn.is_subscription is False
    assert txn.formatted_amount == "₹10.00"


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (datetime(2024, 3, 1), datetime(2024, 3, 4), 3),
        (datetime(2024, 3, 1), datetime(2024, 3, 1, 23), 0),
        (datetime(2024, 3, 4), datetime(2024, 3, 2, 12), -1),
    ],
)
def test_days_between_truncates(start, end, expected):
    assert days_between(start, end) == expected


class TestCategories:
    """Tests for category parsing and inference."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Netflix", Category.OTT),
            ("Prime Video", Category.OTT),
            ("Cult Fitness", Category.GYM),
            ("Spotify", Category.MUSIC),
            ("Dropbox", Category.CLOUD),
            ("Notion", Category.OTHER),
        ],
    )
    def test_infer_category(self, name, expected):
        assert infer_category(name) == expected

    def test_parse_by_value_or_name(self):
        assert parse_category("OTT/Streaming") is Category.OTT
        assert parse_category("gym") is Category.GYM

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown category"):
            parse_category("groceries")


class TestMatching:
    """Tests for subscription matching by name."""

    def test_case_insensitive(self, make_subscription):
        sub = make_subscription(name="Netflix")

        assert find_matching_subscription([sub], "NETFLIX") is sub

    def test_skips_inactive_and_cancelled(self, make_subscription, now):
        paused = make_subscription(is_active=False)
        cancelled = make_subscription(cancelled_at=now)
        active = make_subscription()

        assert find_matching_subscription([paused, cancelled, active], "netflix") is active

    def test_first_match_wins(self, make_subscription):
        first = make_subscription()
        second = make_subscription()

        assert find_matching_subscription([first, second], "Netflix") is first

    @pytest.mark.parametrize("name", [None, ""])
    def test_empty_name_matches_nothing(self, make_subscription, name):
        assert find_matching_subscription([make_subscription()], name) is None
