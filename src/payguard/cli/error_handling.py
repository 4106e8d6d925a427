"""CLI error handling helpers."""

from datetime import datetime

import click

from payguard.domain.entities import Subscription
from payguard.domain.errors import DomainError
from payguard.domain.ledger import LedgerService
from payguard.utils.date_parser import parse_date, start_of_day
from payguard.utils.subscription_resolver import resolve_subscription


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_subscription_or_exit(
    ctx: click.Context, ledger: LedgerService, reference: str
) -> Subscription:
    """Resolve a subscription reference, or exit with a CLI error."""
    try:
        return resolve_subscription(ledger, reference)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def parse_datetime_or_exit(ctx: click.Context, value: str, label: str) -> datetime:
    """Parse a CLI date option to midnight of that day, or exit with a CLI error."""
    try:
        return start_of_day(parse_date(value))
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)
