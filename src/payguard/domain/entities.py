"""Domain model entities for payguard.

These are pure data classes representing business concepts, independent of
database schema. Entities are immutable: the ledger produces updated copies
with ``dataclasses.replace`` and writes them back by identity.
"""

import enum
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from payguard.domain.errors import ValidationError, negative_amount

DEFAULT_CURRENCY = "₹"


def new_id() -> str:
    """Return a new opaque entity identifier."""
    return str(uuid.uuid4())


class Frequency(str, enum.Enum):
    """Billing frequency of a subscription."""

    WEEKLY = "Weekly"
    BI_WEEKLY = "Bi-Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    YEARLY = "Yearly"
    CUSTOM = "Custom"

    @property
    def day_count(self) -> int:
        """Canonical number of days between two debits."""
        return _DAY_COUNTS[self]


_DAY_COUNTS = {
    Frequency.WEEKLY: 7,
    Frequency.BI_WEEKLY: 14,
    Frequency.MONTHLY: 30,
    Frequency.QUARTERLY: 90,
    Frequency.YEARLY: 365,
    Frequency.CUSTOM: 30,
}


class Category(str, enum.Enum):
    """Subscription category tag."""

    OTT = "OTT/Streaming"
    GYM = "Gym/Fitness"
    APP = "App Subscription"
    UTILITY = "Utility"
    MUSIC = "Music"
    CLOUD = "Cloud Storage"
    NEWS = "News/Magazine"
    SOFTWARE = "Software"
    OTHER = "Other"


def format_amount(currency: str, amount: Decimal) -> str:
    return f"{currency}{amount:.2f}"


@dataclass(frozen=True)
class Subscription:
    """Recurring obligation domain entity."""

    name: str
    amount: Decimal
    frequency: Frequency
    next_debit_date: datetime
    category: Category
    currency: str = DEFAULT_CURRENCY
    is_active: bool = True
    merchant: Optional[str] = None
    last_debit_date: Optional[datetime] = None
    bank_account: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    cancelled_at: Optional[datetime] = None
    sync_to_calendar: bool = False
    calendar_event_id: Optional[str] = None
    id: str = field(default_factory=new_id)

    def __post_init__(self):
        if self.amount < 0:
            raise ValidationError(negative_amount(self.amount))

    @property
    def is_cancelled(self) -> bool:
        return self.cancelled_at is not None

    @property
    def days_until_debit(self) -> int:
        """Whole days until the next debit, negative when overdue."""
        return days_between(datetime.now(), self.next_debit_date)

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.currency, self.amount)


@dataclass(frozen=True)
class Transaction:
    """Observed monetary event."""

    amount: Decimal
    date: datetime
    description: str
    currency: str = DEFAULT_CURRENCY
    merchant: Optional[str] = None
    bank_account: Optional[str] = None
    subscription_id: Optional[str] = None
    is_subscription: bool = False
    id: str = field(default_factory=new_id)

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.currency, self.amount)


@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction extracted from an SMS, not yet committed to the ledger."""

    amount: Decimal
    currency: str
    merchant: Optional[str]
    description: str
    is_subscription: bool
    date: datetime


@dataclass(frozen=True)
class ParsedSubscriptionCandidate:
    """Subscription extracted from a billing email, not yet committed."""

    service_name: str
    amount: Decimal
    currency: str
    date: datetime
    frequency: Frequency
    next_debit_date: datetime
    email_subject: Optional[str]
    email_content: str

    @property
    def formatted_amount(self) -> str:
        return format_amount(self.currency, self.amount)


@dataclass(frozen=True)
class IngestResult:
    """Outcome of committing an extraction result to the ledger."""

    transaction: Transaction
    subscription: Optional[Subscription] = None
    created: bool = False


def days_between(start: datetime, end: datetime) -> int:
    """Whole days from ``start`` to ``end``, truncated toward zero."""
    return int((end - start).total_seconds() / 86400)
