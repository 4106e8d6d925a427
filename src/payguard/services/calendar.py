"""Calendar events for upcoming debits."""

import json
import logging
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

from payguard.domain.entities import Subscription
from payguard.domain.errors import (
    DeleteFailedError,
    NotAuthorizedError,
    SaveFailedError,
    delete_failed,
    save_failed,
)

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_DAYS = 3
MIN_REMINDER_DAYS = 1
MAX_REMINDER_DAYS = 30


class CalendarClient(ABC):
    """Calendar collaborator interface."""

    @abstractmethod
    def sync(self, subscription: Subscription) -> Optional[str]:
        """Create or update the event for a subscription. Returns the event ID."""
        pass

    @abstractmethod
    def delete(self, event_id: str) -> None:
        """Delete an event. Unknown event IDs are ignored."""
        pass


@dataclass(frozen=True)
class CalendarEvent:
    """Calendar event describing one upcoming debit."""

    id: str
    title: str
    start: datetime
    end: datetime
    notes: str
    alarm_offset: timedelta

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "notes": self.notes,
            "alarm_offset": self.alarm_offset.total_seconds(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CalendarEvent":
        return cls(
            id=data["id"],
            title=data["title"],
            start=datetime.fromisoformat(data["start"]),
            end=datetime.fromisoformat(data["end"]),
            notes=data["notes"],
            alarm_offset=timedelta(seconds=data["alarm_offset"]),
        )


def clamp_reminder_days(days: int) -> int:
    return max(MIN_REMINDER_DAYS, min(MAX_REMINDER_DAYS, days))


def event_for(subscription: Subscription, event_id: str, reminder_days: int) -> CalendarEvent:
    """Build the calendar event for a subscription's next debit."""
    return CalendarEvent(
        id=event_id,
        title=f"{subscription.name} - {subscription.currency}{subscription.amount:.0f}",
        start=subscription.next_debit_date,
        end=subscription.next_debit_date + timedelta(hours=1),
        notes=(
            f"Subscription renewal for {subscription.name}\n"
            f"Amount: {subscription.formatted_amount}\n"
            f"Frequency: {subscription.frequency.value}"
        ),
        alarm_offset=-timedelta(days=reminder_days),
    )


class LocalCalendar(CalendarClient):
    """Local calendar, used for the CLI and tests.

    Events live in memory. When a path is given they are also written to a
    JSON file after every change, so event IDs stay valid between runs.
    """

    def __init__(
        self,
        authorized: bool = True,
        reminder_days_before: int = DEFAULT_REMINDER_DAYS,
        path: Optional[str] = None,
    ):
        self.authorized = authorized
        self._reminder_days_before = clamp_reminder_days(reminder_days_before)
        self.path = Path(path) if path else None
        self.events: dict[str, CalendarEvent] = self._read()

    @property
    def reminder_days_before(self) -> int:
        return self._reminder_days_before

    @reminder_days_before.setter
    def reminder_days_before(self, days: int) -> None:
        self._reminder_days_before = clamp_reminder_days(days)

    def sync(self, subscription: Subscription) -> Optional[str]:
        if not self.authorized:
            raise NotAuthorizedError()

        event_id = subscription.calendar_event_id
        if event_id is None or event_id not in self.events:
            event_id = str(uuid.uuid4())
            logger.debug("Creating calendar event for %s", subscription.name)

        self.events[event_id] = event_for(subscription, event_id, self._reminder_days_before)
        try:
            self._write()
        except OSError as e:
            raise SaveFailedError(save_failed("calendar event", e), cause=e)
        return event_id

    def delete(self, event_id: str) -> None:
        if not self.authorized:
            raise NotAuthorizedError()

        if self.events.pop(event_id, None) is None:
            return
        try:
            self._write()
        except OSError as e:
            raise DeleteFailedError(delete_failed("calendar event", e), cause=e)
        logger.debug("Deleted calendar event %s", event_id)

    def _read(self) -> dict[str, CalendarEvent]:
        if self.path is None or not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return {item["id"]: CalendarEvent.from_dict(item) for item in data}
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Could not read calendar file %s, starting empty: %s", self.path, e)
            return {}

    def _write(self) -> None:
        if self.path is None:
            return
        data = [event.to_dict() for event in self.events.values()]
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
