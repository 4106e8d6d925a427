"""In-memory database implementation."""

from payguard.database.base import Database
from payguard.domain.entities import Subscription, Transaction


class InMemoryDatabase(Database):
    """Database that keeps saved collections in memory."""

    def __init__(self, subscriptions=None, transactions=None):
        self.subscriptions: list[Subscription] = list(subscriptions or [])
        self.transactions: list[Transaction] = list(transactions or [])
        self.save_count = 0

    def connect(self) -> None:
        pass

    def disconnect(self) -> None:
        pass

    def initialize_schema(self) -> None:
        pass

    def load_subscriptions(self) -> list[Subscription]:
        return list(self.subscriptions)

    def save_subscriptions(self, subscriptions: list[Subscription]) -> None:
        self.subscriptions = list(subscriptions)
        self.save_count += 1

    def load_transactions(self) -> list[Transaction]:
        return list(self.transactions)

    def save_transactions(self, transactions: list[Transaction]) -> None:
        self.transactions = list(transactions)
        self.save_count += 1
