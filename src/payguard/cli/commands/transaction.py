"""Transaction management commands."""

from datetime import datetime

import click
from payguard.cli.display import echo_transaction_table, short_id
from payguard.cli.error_handling import (
    handle_domain_error,
    parse_datetime_or_exit,
    resolve_subscription_or_exit,
)
from payguard.domain.entities import DEFAULT_CURRENCY, Transaction
from payguard.utils.amount_parser import parse_amount


@click.group("transaction")
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--amount", required=True, help="Transaction amount (e.g., 499 or ₹499.00)")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today'); defaults to now")
@click.option("--description", default="Manual entry", show_default=True)
@click.option("--merchant", help="Merchant name")
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True)
@click.option("--subscription", help="Subscription ID, ID prefix or name this debit belongs to")
@click.pass_context
def add_transaction(
    ctx,
    amount: str,
    date: str | None,
    description: str,
    merchant: str | None,
    currency: str,
    subscription: str | None,
):
    """Add a transaction manually.

    Linking a transaction to a subscription moves the subscription's next
    debit date one billing period past the transaction date.

    Examples:
        payguard transaction add --amount 499 --merchant Netflix --subscription Netflix
        payguard transaction add --amount 150 --date yesterday --description "Coffee"
    """
    ledger = ctx.obj["ledger"]

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn_date = parse_datetime_or_exit(ctx, date, "date") if date else datetime.now()

    linked = None
    if subscription is not None:
        linked = resolve_subscription_or_exit(ctx, ledger, subscription)

    transaction = ledger.add_transaction(
        Transaction(
            amount=txn_amount,
            currency=currency,
            merchant=merchant or (linked.name if linked else None),
            date=txn_date,
            description=description,
            subscription_id=linked.id if linked else None,
            is_subscription=linked is not None,
        )
    )
    click.echo(f"Created transaction {short_id(transaction.id)}")
    click.echo(f"  Date: {transaction.date:%Y-%m-%d}")
    click.echo(f"  Amount: {transaction.formatted_amount}")
    if linked is not None:
        refreshed = ledger.get_subscription(linked.id)
        click.echo(f"  Subscription: {refreshed.name} (next debit {refreshed.next_debit_date:%Y-%m-%d})")


@transaction_group.command("list")
@click.option("--subscription", help="Only transactions linked to this subscription")
@click.pass_context
def list_transactions(ctx, subscription: str | None):
    """List transactions, oldest first."""
    ledger = ctx.obj["ledger"]

    subscription_id = None
    if subscription is not None:
        subscription_id = resolve_subscription_or_exit(ctx, ledger, subscription).id

    transactions = ledger.list_transactions(subscription_id=subscription_id)
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    echo_transaction_table(transactions)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group)
