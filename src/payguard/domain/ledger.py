"""Subscription and transaction ledger."""

import logging
import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from payguard.database.base import Database
from payguard.domain.category import infer_category
from payguard.domain.entities import (
    Category,
    Frequency,
    IngestResult,
    ParsedSubscriptionCandidate,
    ParsedTransaction,
    Subscription,
    Transaction,
)
from payguard.domain.keywords import UNKNOWN_SUBSCRIPTION
from payguard.domain.matching import find_matching_subscription
from payguard.services.calendar import CalendarClient
from payguard.services.dispatcher import Dispatcher, InlineDispatcher
from payguard.services.notifications import Notifier
from payguard.utils.date_parser import month_bounds

logger = logging.getLogger(__name__)

# Average occurrences per month; quarterly, yearly and custom all divide by 12
MONTHLY_FACTORS = {
    Frequency.WEEKLY: Decimal("4.33"),
    Frequency.BI_WEEKLY: Decimal("2.17"),
    Frequency.MONTHLY: Decimal("1"),
}
OTHER_FREQUENCY_DIVISOR = Decimal("12")

EMAIL_IMPORT_DESCRIPTION = "Email import"

# Used when a parsed date is too close to datetime.max to move forward
FALLBACK_DAYS = 30


def _next_debit(start: datetime, frequency: Frequency, fallback: datetime) -> datetime:
    """Return ``start`` plus one billing period, or ``fallback`` if that overflows."""
    try:
        return start + timedelta(days=frequency.day_count)
    except OverflowError:
        logger.warning("Next debit after %s is out of range, using %s", start, fallback)
        return fallback


class LedgerService:
    """Owns subscriptions and transactions and keeps them consistent.

    Mutations are synchronous and serialized with a lock. Persistence,
    reminders and calendar sync are handed to the dispatcher; their failures
    are reported there and never undo or interrupt the in-memory change.
    Unknown identities on update, cancel or delete are silent no-ops.
    """

    def __init__(
        self,
        db: Database,
        notifier: Optional[Notifier] = None,
        calendar: Optional[CalendarClient] = None,
        dispatcher: Optional[Dispatcher] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize ledger service.

        Args:
            db: Database instance used to load and save both collections
            notifier: Optional reminder collaborator
            calendar: Optional calendar collaborator
            dispatcher: Runs side effects (defaults to InlineDispatcher)
            now: Clock (defaults to datetime.now)
        """
        self.db = db
        self.notifier = notifier
        self.calendar = calendar
        self.dispatcher = dispatcher or InlineDispatcher()
        self.now = now or datetime.now
        self._lock = threading.RLock()

        self.subscriptions: list[Subscription] = self._load("subscriptions", db.load_subscriptions)
        self.transactions: list[Transaction] = self._load("transactions", db.load_transactions)
        self.reschedule_notifications()

    @staticmethod
    def _load(what: str, loader: Callable[[], list]) -> list:
        try:
            return list(loader())
        except Exception:
            logger.exception("Failed to load %s, starting with none", what)
            return []

    # Subscription management
    def add_subscription(self, subscription: Subscription) -> Subscription:
        """Add a subscription and schedule its reminder and calendar event."""
        with self._lock:
            self.subscriptions.append(subscription)
            self._save_subscriptions()
            self._after_change(subscription)
            stored = self.get_subscription(subscription.id)
        logger.info("Added subscription %s (%s)", subscription.name, subscription.id)
        return stored

    def update_subscription(self, subscription: Subscription) -> Optional[Subscription]:
        """Replace a subscription by identity.

        Returns:
            The stored subscription, or None if the identity is unknown
        """
        with self._lock:
            index = self._index_of(subscription.id)
            if index is None:
                return None
            # The calendar event id is written back by the ledger, not by callers
            if subscription.calendar_event_id is None:
                subscription = replace(
                    subscription, calendar_event_id=self.subscriptions[index].calendar_event_id
                )
            self.subscriptions[index] = subscription
            self._save_subscriptions()
            self._after_change(subscription)
            stored = self.get_subscription(subscription.id)
        logger.debug("Updated subscription %s", subscription.id)
        return stored

    def delete_subscription(self, subscription: Subscription) -> None:
        """Remove a subscription and clean up its reminder and calendar event."""
        with self._lock:
            stored = self.get_subscription(subscription.id) or subscription
            if stored.calendar_event_id and self.calendar is not None:
                self.dispatcher.submit(
                    "Calendar event removal", self.calendar.delete, stored.calendar_event_id
                )
            self.subscriptions = [sub for sub in self.subscriptions if sub.id != subscription.id]
            self._save_subscriptions()
            if self.notifier is not None:
                self.dispatcher.submit("Reminder cancellation", self.notifier.cancel, subscription.id)
        logger.info("Deleted subscription %s", subscription.id)

    def cancel_subscription(self, subscription: Subscription) -> Optional[Subscription]:
        """Mark a subscription cancelled as of now.

        Cancelling an already cancelled subscription keeps the original
        cancellation time.

        Returns:
            The cancelled subscription, or None if the identity is unknown
        """
        with self._lock:
            index = self._index_of(subscription.id)
            if index is None:
                return None
            original = self.subscriptions[index]
            if original.is_cancelled:
                return original

            cancelled = replace(original, is_active=False, cancelled_at=self.now())
            self.subscriptions[index] = cancelled
            self._save_subscriptions()
            if self.notifier is not None:
                self.dispatcher.submit("Reminder cancellation", self.notifier.cancel, cancelled.id)
            self._submit_calendar_sync(cancelled)
        logger.info("Cancelled subscription %s", cancelled.name)
        return cancelled

    def get_subscription(self, subscription_id: str) -> Optional[Subscription]:
        with self._lock:
            index = self._index_of(subscription_id)
            return None if index is None else self.subscriptions[index]

    def list_subscriptions(self, include_cancelled: bool = True) -> list[Subscription]:
        with self._lock:
            if include_cancelled:
                return list(self.subscriptions)
            return self.active_subscriptions()

    # Transaction management
    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Append a transaction.

        A transaction linked to a known subscription moves that subscription's
        last debit to the transaction date and its next debit one billing
        period later.
        """
        with self._lock:
            self.transactions.append(transaction)
            self._save_transactions()

            if transaction.subscription_id is not None:
                index = self._index_of(transaction.subscription_id)
                if index is not None:
                    subscription = self.subscriptions[index]
                    self.update_subscription(
                        replace(
                            subscription,
                            last_debit_date=transaction.date,
                            next_debit_date=_next_debit(
                                transaction.date,
                                subscription.frequency,
                                subscription.next_debit_date,
                            ),
                        )
                    )
        return transaction

    def list_transactions(self, subscription_id: Optional[str] = None) -> list[Transaction]:
        with self._lock:
            if subscription_id is None:
                return list(self.transactions)
            return [txn for txn in self.transactions if txn.subscription_id == subscription_id]

    # Ingestion
    def ingest_parsed_transaction(
        self, parsed: ParsedTransaction, category: Category = Category.OTHER
    ) -> IngestResult:
        """Commit a parsed SMS transaction.

        The transaction is always recorded. When it looks like a subscription
        charge, the matching active subscription is advanced or, if none
        matches, a monthly subscription is created.

        Args:
            parsed: Extraction result
            category: Category for a newly created subscription
        """
        with self._lock:
            transaction = self.add_transaction(
                Transaction(
                    amount=parsed.amount,
                    currency=parsed.currency,
                    merchant=parsed.merchant,
                    date=parsed.date,
                    description=parsed.description,
                    is_subscription=parsed.is_subscription,
                )
            )
            if not parsed.is_subscription:
                return IngestResult(transaction=transaction)

            fallback = self.now() + timedelta(days=FALLBACK_DAYS)

            existing = find_matching_subscription(self.subscriptions, parsed.merchant)
            if existing is not None:
                updated = self.update_subscription(
                    replace(
                        existing,
                        last_debit_date=parsed.date,
                        next_debit_date=_next_debit(parsed.date, existing.frequency, fallback),
                    )
                )
                logger.info("SMS charge matched subscription %s", existing.name)
                return IngestResult(transaction=transaction, subscription=updated)

            created = self.add_subscription(
                Subscription(
                    name=parsed.merchant or UNKNOWN_SUBSCRIPTION,
                    amount=parsed.amount,
                    currency=parsed.currency,
                    frequency=Frequency.MONTHLY,
                    next_debit_date=_next_debit(parsed.date, Frequency.MONTHLY, fallback),
                    category=category,
                    merchant=parsed.merchant,
                    last_debit_date=parsed.date,
                    created_at=self.now(),
                )
            )
            return IngestResult(transaction=transaction, subscription=created, created=True)

    def ingest_email_candidate(
        self, candidate: ParsedSubscriptionCandidate, category: Optional[Category] = None
    ) -> IngestResult:
        """Commit a subscription candidate parsed from a billing email.

        The matching active subscription takes over the candidate's details,
        or a new subscription is created. A linked subscription transaction is
        always recorded.

        Args:
            candidate: Extraction result
            category: Category to assign; inferred from the service name if None
        """
        category = category or infer_category(candidate.service_name)
        with self._lock:
            existing = find_matching_subscription(self.subscriptions, candidate.service_name)
            if existing is not None:
                subscription = replace(
                    existing,
                    name=candidate.service_name,
                    amount=candidate.amount,
                    currency=candidate.currency,
                    frequency=candidate.frequency,
                    next_debit_date=candidate.next_debit_date,
                    category=category,
                    merchant=candidate.service_name,
                    last_debit_date=candidate.date,
                )
                self.update_subscription(subscription)
                created = False
                logger.info("Email matched subscription %s", existing.name)
            else:
                subscription = self.add_subscription(
                    Subscription(
                        name=candidate.service_name,
                        amount=candidate.amount,
                        currency=candidate.currency,
                        frequency=candidate.frequency,
                        next_debit_date=candidate.next_debit_date,
                        category=category,
                        merchant=candidate.service_name,
                        last_debit_date=candidate.date,
                        created_at=self.now(),
                    )
                )
                created = True

            transaction = self.add_transaction(
                Transaction(
                    amount=candidate.amount,
                    currency=candidate.currency,
                    merchant=candidate.service_name,
                    date=candidate.date,
                    description=candidate.email_subject or EMAIL_IMPORT_DESCRIPTION,
                    subscription_id=subscription.id,
                    is_subscription=True,
                )
            )
            return IngestResult(
                transaction=transaction,
                subscription=self.get_subscription(subscription.id),
                created=created,
            )

    # Reports
    def active_subscriptions(self) -> list[Subscription]:
        """Subscriptions that are active and not cancelled."""
        with self._lock:
            return [sub for sub in self.subscriptions if sub.is_active and not sub.is_cancelled]

    def total_monthly_recurring(self) -> Decimal:
        """Sum of active subscriptions normalized to a monthly amount.

        Weekly and bi-weekly amounts are scaled by average occurrences per
        month; quarterly, yearly and custom amounts are divided by 12.
        """
        total = Decimal("0")
        for sub in self.active_subscriptions():
            factor = MONTHLY_FACTORS.get(sub.frequency)
            if factor is not None:
                total += sub.amount * factor
            else:
                total += sub.amount / OTHER_FREQUENCY_DIVISOR
        return total

    def monthly_waste(self, month: Optional[date] = None) -> Decimal:
        """Sum of amounts of subscriptions cancelled within the given month."""
        start, end = month_bounds(month or self.now())
        with self._lock:
            return sum(
                (
                    sub.amount
                    for sub in self.subscriptions
                    if sub.cancelled_at is not None and start <= sub.cancelled_at < end
                ),
                Decimal("0"),
            )

    def upcoming_debits(self, days_ahead: int = 7) -> list[Subscription]:
        """Active subscriptions debiting between now and ``days_ahead`` days, soonest first."""
        now = self.now()
        cutoff = now + timedelta(days=days_ahead)
        upcoming = [sub for sub in self.active_subscriptions() if now <= sub.next_debit_date <= cutoff]
        return sorted(upcoming, key=lambda sub: sub.next_debit_date)

    # Side effects
    def reschedule_notifications(self) -> None:
        """Rebuild all pending reminders from the active subscriptions."""
        if self.notifier is not None:
            self.dispatcher.submit(
                "Reminder scheduling", self.notifier.schedule_all, self.active_subscriptions()
            )

    def _index_of(self, subscription_id: str) -> Optional[int]:
        for index, sub in enumerate(self.subscriptions):
            if sub.id == subscription_id:
                return index
        return None

    def _save_subscriptions(self) -> None:
        self.dispatcher.submit(
            "Saving subscriptions", self.db.save_subscriptions, list(self.subscriptions)
        )

    def _save_transactions(self) -> None:
        self.dispatcher.submit(
            "Saving transactions", self.db.save_transactions, list(self.transactions)
        )

    def _after_change(self, subscription: Subscription) -> None:
        if self.notifier is not None:
            self.dispatcher.submit("Reminder scheduling", self.notifier.schedule, subscription)
        self._submit_calendar_sync(subscription)

    def _submit_calendar_sync(self, subscription: Subscription) -> None:
        if self.calendar is not None:
            self.dispatcher.submit("Calendar sync", self._sync_calendar, subscription.id)

    def _sync_calendar(self, subscription_id: str) -> None:
        # Decide from the stored row; it may have changed since the task was queued
        current = self.get_subscription(subscription_id)
        if current is None:
            return
        if current.sync_to_calendar and current.is_active and not current.is_cancelled:
            event_id = self.calendar.sync(current)
        else:
            if current.calendar_event_id is None:
                return
            self.calendar.delete(current.calendar_event_id)
            event_id = None

        with self._lock:
            index = self._index_of(subscription_id)
            if index is None or self.subscriptions[index].calendar_event_id == event_id:
                return
            self.subscriptions[index] = replace(self.subscriptions[index], calendar_event_id=event_id)
            self._save_subscriptions()
