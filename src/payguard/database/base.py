"""Abstract database interface."""

from abc import ABC, abstractmethod

# Import entities directly to avoid circular import through domain/__init__.py
from payguard.domain.entities import Subscription, Transaction


class Database(ABC):
    """Abstract persistence interface for payguard.

    Loads are best effort: an implementation that cannot read its store
    returns an empty list. Saves replace the stored collection and raise
    SaveFailedError on failure.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Subscription operations
    @abstractmethod
    def load_subscriptions(self) -> list[Subscription]:
        """Load all subscriptions."""
        pass

    @abstractmethod
    def save_subscriptions(self, subscriptions: list[Subscription]) -> None:
        """Replace the stored subscriptions."""
        pass

    # Transaction operations
    @abstractmethod
    def load_transactions(self) -> list[Transaction]:
        """Load all transactions."""
        pass

    @abstractmethod
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """Replace the stored transactions."""
        pass
