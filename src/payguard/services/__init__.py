"""Side-effect collaborators used by the ledger."""

from payguard.services.dispatcher import BackgroundDispatcher, InlineDispatcher
from payguard.services.notifications import Notifier, ReminderScheduler
from payguard.services.calendar import CalendarClient, LocalCalendar
from payguard.services.mailbox import Mailbox, MboxMailbox, scan_mailbox

__all__ = [
    "BackgroundDispatcher",
    "InlineDispatcher",
    "Notifier",
    "ReminderScheduler",
    "CalendarClient",
    "LocalCalendar",
    "Mailbox",
    "MboxMailbox",
    "scan_mailbox",
]
