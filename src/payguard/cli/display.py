"""Shared CLI rendering helpers."""

import click

from payguard.domain.entities import Subscription, Transaction

SHORT_ID_LENGTH = 8


def short_id(entity_id: str) -> str:
    return entity_id[:SHORT_ID_LENGTH]


def echo_subscription_table(subscriptions: list[Subscription]) -> None:
    """Print subscriptions as a compact table."""
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<10} {'Name':<24} {'Amount':<12} {'Frequency':<10} {'Next Debit':<12} {'Category':<18} {'Status':<10}"
    )
    click.echo("-" * 100)
    for sub in subscriptions:
        status = "Cancelled" if sub.is_cancelled else ("Active" if sub.is_active else "Paused")
        click.echo(
            f"{short_id(sub.id):<10} {sub.name[:24]:<24} {sub.formatted_amount:<12} "
            f"{sub.frequency.value:<10} {sub.next_debit_date:%Y-%m-%d}   "
            f"{sub.category.value:<18} {status:<10}"
        )


def echo_subscription(subscription: Subscription) -> None:
    """Print one subscription's details."""
    click.echo(f"  Name: {subscription.name}")
    click.echo(f"  Amount: {subscription.formatted_amount} ({subscription.frequency.value})")
    click.echo(f"  Next debit: {subscription.next_debit_date:%Y-%m-%d}")
    click.echo(f"  Category: {subscription.category.value}")


def echo_transaction_table(transactions: list[Transaction]) -> None:
    """Print transactions as a compact table."""
    click.echo("-" * 100)
    click.echo(f"{'ID':<10} {'Date':<12} {'Amount':<12} {'Merchant':<24} {'Sub':<4} {'Description':<30}")
    click.echo("-" * 100)
    for txn in transactions:
        description = " ".join(txn.description.split())[:30]
        click.echo(
            f"{short_id(txn.id):<10} {txn.date:%Y-%m-%d}   {txn.formatted_amount:<12} "
            f"{(txn.merchant or '')[:24]:<24} {'yes' if txn.is_subscription else '':<4} {description:<30}"
        )
