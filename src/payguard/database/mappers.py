"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum values and column types can
change without touching the domain entities.
"""

from payguard.domain import entities as domain
from payguard.database.models import (
    Subscription as ORMSubscription,
    Transaction as ORMTransaction,
)


def subscription_to_domain(orm_subscription: ORMSubscription) -> domain.Subscription:
    """Convert SQLAlchemy Subscription model to domain Subscription entity."""
    return domain.Subscription(
        id=orm_subscription.id,
        name=orm_subscription.name,
        amount=orm_subscription.amount,
        currency=orm_subscription.currency,
        frequency=domain.Frequency(orm_subscription.frequency),
        next_debit_date=orm_subscription.next_debit_date,
        category=domain.Category(orm_subscription.category),
        is_active=orm_subscription.is_active,
        merchant=orm_subscription.merchant,
        last_debit_date=orm_subscription.last_debit_date,
        bank_account=orm_subscription.bank_account,
        created_at=orm_subscription.created_at,
        cancelled_at=orm_subscription.cancelled_at,
        sync_to_calendar=orm_subscription.sync_to_calendar,
        calendar_event_id=orm_subscription.calendar_event_id,
    )


def subscription_to_orm(subscription: domain.Subscription) -> ORMSubscription:
    """Convert domain Subscription entity to SQLAlchemy Subscription model."""
    return ORMSubscription(
        id=subscription.id,
        name=subscription.name,
        amount=subscription.amount,
        currency=subscription.currency,
        frequency=subscription.frequency.value,
        next_debit_date=subscription.next_debit_date,
        category=subscription.category.value,
        is_active=subscription.is_active,
        merchant=subscription.merchant,
        last_debit_date=subscription.last_debit_date,
        bank_account=subscription.bank_account,
        created_at=subscription.created_at,
        cancelled_at=subscription.cancelled_at,
        sync_to_calendar=subscription.sync_to_calendar,
        calendar_event_id=subscription.calendar_event_id,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=orm_transaction.amount,
        currency=orm_transaction.currency,
        merchant=orm_transaction.merchant,
        date=orm_transaction.date,
        description=orm_transaction.description,
        bank_account=orm_transaction.bank_account,
        subscription_id=orm_transaction.subscription_id,
        is_subscription=orm_transaction.is_subscription,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    """Convert domain Transaction entity to SQLAlchemy Transaction model."""
    return ORMTransaction(
        id=transaction.id,
        amount=transaction.amount,
        currency=transaction.currency,
        merchant=transaction.merchant,
        date=transaction.date,
        description=transaction.description,
        bank_account=transaction.bank_account,
        subscription_id=transaction.subscription_id,
        is_subscription=transaction.is_subscription,
    )
