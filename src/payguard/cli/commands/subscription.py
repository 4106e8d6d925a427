"""Subscription management commands."""

from dataclasses import replace

import click
from payguard.cli.display import echo_subscription, echo_subscription_table, short_id
from payguard.cli.error_handling import (
    handle_domain_error,
    parse_datetime_or_exit,
    resolve_subscription_or_exit,
)
from payguard.domain.category import infer_category, parse_category
from payguard.domain.entities import DEFAULT_CURRENCY, Frequency, Subscription
from payguard.domain.errors import DomainError
from payguard.utils.amount_parser import parse_amount

FREQUENCY_CHOICES = [frequency.value for frequency in Frequency]


@click.group("subscription")
def subscription_group():
    """Manage subscriptions."""
    pass


@subscription_group.command("add")
@click.argument("name")
@click.option("--amount", required=True, help="Amount per billing period (e.g., 499 or ₹499.00)")
@click.option(
    "--next-debit",
    required=True,
    help="Next debit date (YYYY-MM-DD, DD/MM/YYYY or relative like 'tomorrow')",
)
@click.option(
    "--frequency",
    type=click.Choice(FREQUENCY_CHOICES, case_sensitive=False),
    default=Frequency.MONTHLY.value,
    show_default=True,
)
@click.option("--category", help="Category (inferred from the name if omitted)")
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True)
@click.option("--merchant", help="Merchant name as it appears on statements")
@click.option("--calendar/--no-calendar", "sync_to_calendar", default=False, help="Sync to calendar")
@click.pass_context
def add_subscription(
    ctx,
    name: str,
    amount: str,
    next_debit: str,
    frequency: str,
    category: str | None,
    currency: str,
    merchant: str | None,
    sync_to_calendar: bool,
):
    """Add a subscription manually.

    Examples:
        payguard subscription add Netflix --amount 499 --next-debit 2024-04-05
        payguard subscription add "Cult Gym" --amount 1200 --next-debit tomorrow --category gym
    """
    ledger = ctx.obj["ledger"]

    try:
        sub_amount = parse_amount(amount)
        sub_category = parse_category(category) if category else infer_category(name)
        subscription = Subscription(
            name=name,
            amount=sub_amount,
            currency=currency,
            frequency=_frequency(frequency),
            next_debit_date=parse_datetime_or_exit(ctx, next_debit, "next debit date"),
            category=sub_category,
            merchant=merchant,
            sync_to_calendar=sync_to_calendar,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    ledger.add_subscription(subscription)
    click.echo(f"Created subscription {short_id(subscription.id)}")
    echo_subscription(subscription)


@subscription_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include cancelled subscriptions")
@click.pass_context
def list_subscriptions(ctx, show_all: bool):
    """List subscriptions."""
    ledger = ctx.obj["ledger"]

    subscriptions = ledger.list_subscriptions(include_cancelled=show_all)
    if not subscriptions:
        click.echo("No subscriptions found.")
        return

    click.echo(f"\nFound {len(subscriptions)} subscription(s):")
    echo_subscription_table(subscriptions)


@subscription_group.command("edit")
@click.argument("subscription")
@click.option("--name", help="New name")
@click.option("--amount", help="New amount")
@click.option("--next-debit", help="New next debit date")
@click.option("--frequency", type=click.Choice(FREQUENCY_CHOICES, case_sensitive=False))
@click.option("--category", help="New category")
@click.option("--calendar/--no-calendar", "sync_to_calendar", default=None, help="Sync to calendar")
@click.pass_context
def edit_subscription(
    ctx,
    subscription: str,
    name: str | None,
    amount: str | None,
    next_debit: str | None,
    frequency: str | None,
    category: str | None,
    sync_to_calendar: bool | None,
):
    """Edit a subscription.

    SUBSCRIPTION can be an ID, an ID prefix or a name. Only the provided
    fields change.

    Examples:
        payguard subscription edit Netflix --amount 649
        payguard subscription edit 3f2a --frequency Yearly
    """
    ledger = ctx.obj["ledger"]
    existing = resolve_subscription_or_exit(ctx, ledger, subscription)

    changes = {}
    if name is not None:
        changes["name"] = name
    if frequency is not None:
        changes["frequency"] = _frequency(frequency)
    if sync_to_calendar is not None:
        changes["sync_to_calendar"] = sync_to_calendar
    if next_debit is not None:
        changes["next_debit_date"] = parse_datetime_or_exit(ctx, next_debit, "next debit date")
    try:
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        if category is not None:
            changes["category"] = parse_category(category)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not changes:
        click.echo("Nothing to update.")
        return

    updated = ledger.update_subscription(replace(existing, **changes))
    click.echo(f"Updated subscription {short_id(updated.id)}")
    echo_subscription(updated)


@subscription_group.command("cancel")
@click.argument("subscription")
@click.pass_context
def cancel_subscription(ctx, subscription: str):
    """Mark a subscription as cancelled.

    Cancelled subscriptions stop counting towards recurring totals and show
    up in the monthly waste report.
    """
    ledger = ctx.obj["ledger"]
    existing = resolve_subscription_or_exit(ctx, ledger, subscription)

    if existing.is_cancelled:
        click.echo(f"Subscription '{existing.name}' was already cancelled on {existing.cancelled_at:%Y-%m-%d}")
        return

    cancelled = ledger.cancel_subscription(existing)
    click.echo(f"Cancelled subscription '{cancelled.name}'")
    click.echo(f"  You will save {cancelled.formatted_amount} ({cancelled.frequency.value})")


@subscription_group.command("delete")
@click.argument("subscription")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_subscription(ctx, subscription: str, yes: bool):
    """Delete a subscription permanently."""
    ledger = ctx.obj["ledger"]
    existing = resolve_subscription_or_exit(ctx, ledger, subscription)

    if not yes:
        click.confirm(f"Delete subscription '{existing.name}'?", abort=True)

    ledger.delete_subscription(existing)
    click.echo(f"Deleted subscription '{existing.name}'")


def _frequency(value: str) -> Frequency:
    for frequency in Frequency:
        if frequency.value.lower() == value.lower():
            return frequency
    raise DomainError(f"Unknown frequency '{value}'")


def register_commands(cli):
    """Register subscription commands with main CLI."""
    cli.add_command(subscription_group)
