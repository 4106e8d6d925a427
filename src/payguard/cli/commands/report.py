"""Reporting commands."""

from datetime import date

import click
from payguard.cli.display import echo_subscription_table
from payguard.domain.entities import DEFAULT_CURRENCY
from payguard.utils.date_parser import parse_month


@click.group("report")
def report_group():
    """Show recurring totals, upcoming debits and waste."""
    pass


def _money(amount) -> str:
    return f"{DEFAULT_CURRENCY}{amount:,.2f}"


@report_group.command("summary")
@click.option("--days", default=7, show_default=True, help="Upcoming-debit window in days")
@click.pass_context
def summary(ctx, days: int):
    """Show the dashboard overview."""
    ledger = ctx.obj["ledger"]

    active = ledger.active_subscriptions()
    upcoming = ledger.upcoming_debits(days)

    click.echo(f"Active subscriptions: {len(active)}")
    click.echo(f"Monthly recurring: {_money(ledger.total_monthly_recurring())}")
    click.echo(f"Cancelled this month: {_money(ledger.monthly_waste(date.today()))}")
    click.echo(f"Debits in the next {days} days: {len(upcoming)}")
    for sub in upcoming:
        click.echo(f"  {sub.next_debit_date:%Y-%m-%d}  {sub.name} {sub.formatted_amount} (in {sub.days_until_debit} days)")


@report_group.command("upcoming")
@click.option("--days", default=7, show_default=True, help="How many days ahead to look")
@click.pass_context
def upcoming(ctx, days: int):
    """List debits due in the next few days, soonest first."""
    ledger = ctx.obj["ledger"]

    subscriptions = ledger.upcoming_debits(days)
    if not subscriptions:
        click.echo(f"No debits in the next {days} days.")
        return

    click.echo(f"\n{len(subscriptions)} debit(s) in the next {days} days:")
    echo_subscription_table(subscriptions)


@report_group.command("waste")
@click.option("--month", default="this month", show_default=True, help="Month (YYYY-MM, 'march 2024', 'last month')")
@click.pass_context
def waste(ctx, month: str):
    """Show the amount of subscriptions cancelled in a month."""
    ledger = ctx.obj["ledger"]

    try:
        month_start = parse_month(month)
    except ValueError as e:
        click.echo(f"Error: Invalid month: {e}", err=True)
        ctx.exit(1)

    cancelled = [
        sub
        for sub in ledger.list_subscriptions()
        if sub.cancelled_at is not None
        and (sub.cancelled_at.year, sub.cancelled_at.month) == (month_start.year, month_start.month)
    ]
    click.echo(f"Waste for {month_start:%B %Y}: {_money(ledger.monthly_waste(month_start))}")
    for sub in cancelled:
        click.echo(f"  {sub.name}: {sub.formatted_amount} (cancelled {sub.cancelled_at:%Y-%m-%d})")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group)
