"""Upcoming-debit reminders."""

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from payguard.domain.entities import Subscription

logger = logging.getLogger(__name__)

DEFAULT_NOTIFY_DAYS_BEFORE = 2


class Notifier(ABC):
    """Notification collaborator interface."""

    @abstractmethod
    def schedule(self, subscription: Subscription) -> None:
        """Schedule (or reschedule) the reminder for a subscription."""
        pass

    @abstractmethod
    def cancel(self, subscription_id: str) -> None:
        """Cancel any pending reminder for a subscription."""
        pass

    def schedule_all(self, subscriptions: Iterable[Subscription]) -> None:
        """Replace all pending reminders with ones for ``subscriptions``."""
        for subscription in subscriptions:
            self.schedule(subscription)


@dataclass(frozen=True)
class Reminder:
    """Pending reminder for one subscription."""

    subscription_id: str
    fire_at: datetime
    title: str
    body: str


class ReminderScheduler(Notifier):
    """In-process notifier that keeps pending reminders keyed by subscription.

    The ledger may call it from a dispatcher worker while another thread
    collects due reminders, so every access to the pending map holds a lock.
    """

    def __init__(
        self,
        days_before: int = DEFAULT_NOTIFY_DAYS_BEFORE,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.days_before = days_before
        self.now = now or datetime.now
        self._lock = threading.RLock()
        self._pending: dict[str, Reminder] = {}

    @property
    def pending(self) -> dict[str, Reminder]:
        """Snapshot of pending reminders keyed by subscription id."""
        with self._lock:
            return dict(self._pending)

    def schedule(self, subscription: Subscription) -> None:
        with self._lock:
            if not subscription.is_active or subscription.is_cancelled:
                self._pending.pop(subscription.id, None)
                return

            fire_at = subscription.next_debit_date - timedelta(days=self.days_before)
            if fire_at <= self.now():
                logger.debug("Reminder for %s would be in the past, not scheduled", subscription.name)
                self._pending.pop(subscription.id, None)
                return

            self._pending[subscription.id] = Reminder(
                subscription_id=subscription.id,
                fire_at=fire_at,
                title="Upcoming Debit Alert",
                body=(
                    f"{subscription.currency}{subscription.amount:.0f} will be debited for "
                    f"{subscription.name} in {self.days_before} days. "
                    "You can cancel to avoid this charge."
                ),
            )
        logger.debug("Reminder for %s scheduled at %s", subscription.name, fire_at)

    def cancel(self, subscription_id: str) -> None:
        with self._lock:
            self._pending.pop(subscription_id, None)

    def schedule_all(self, subscriptions: Iterable[Subscription]) -> None:
        with self._lock:
            self._pending.clear()
            super().schedule_all(subscriptions)

    def due(self, now: Optional[datetime] = None) -> list[Reminder]:
        """Remove and return reminders whose fire time has passed."""
        now = now or self.now()
        with self._lock:
            fired = sorted(
                (reminder for reminder in self._pending.values() if reminder.fire_at <= now),
                key=lambda reminder: reminder.fire_at,
            )
            for reminder in fired:
                del self._pending[reminder.subscription_id]
        return fired
