"""Commands that import bank SMS and billing emails."""

import click
from payguard.cli.display import short_id
from payguard.cli.error_handling import handle_domain_error
from payguard.domain.category import parse_category
from payguard.domain.entities import Category
from payguard.domain.errors import CollaboratorError
from payguard.domain.extraction import ExtractionEngine
from payguard.services.mailbox import MboxMailbox, scan_mailbox


@click.group("ingest")
def ingest_group():
    """Import transactions and subscriptions from messages."""
    pass


def _category_or_exit(ctx, category: str | None) -> Category | None:
    if category is None:
        return None
    try:
        return parse_category(category)
    except ValueError as e:
        handle_domain_error(ctx, e)


def _echo_result(result) -> None:
    click.echo(f"Recorded transaction {short_id(result.transaction.id)} ({result.transaction.formatted_amount})")
    if result.subscription is not None:
        verb = "Created" if result.created else "Updated"
        click.echo(
            f"{verb} subscription '{result.subscription.name}' "
            f"(next debit {result.subscription.next_debit_date:%Y-%m-%d})"
        )


@ingest_group.command("sms")
@click.argument("text")
@click.option("--category", help="Category for a newly detected subscription (default: Other)")
@click.option("--dry-run", is_flag=True, help="Show what was extracted without saving")
@click.pass_context
def ingest_sms(ctx, text: str, category: str | None, dry_run: bool):
    """Import a bank SMS.

    Examples:
        payguard ingest sms "Netflix subscription renewed. ₹499 debited from your account."
    """
    ledger = ctx.obj["ledger"]
    parsed = ExtractionEngine().extract_transaction(text)
    if parsed is None:
        click.echo("Could not find a transaction in this message. Please add it manually.", err=True)
        ctx.exit(1)

    click.echo(f"Amount: {parsed.currency}{parsed.amount:.2f}")
    click.echo(f"Merchant: {parsed.merchant or 'Unknown'}")
    click.echo(f"Date: {parsed.date:%Y-%m-%d}")
    click.echo(f"Subscription: {'yes' if parsed.is_subscription else 'no'}")
    if dry_run:
        return

    result = ledger.ingest_parsed_transaction(parsed, category=_category_or_exit(ctx, category) or Category.OTHER)
    _echo_result(result)


@ingest_group.command("email")
@click.option("--subject", help="Email subject line")
@click.option("--body", help="Email body text")
@click.option("--body-file", type=click.File("r", encoding="utf-8"), help="Read the body from a file ('-' for stdin)")
@click.option("--category", help="Category (inferred from the service name if omitted)")
@click.option("--dry-run", is_flag=True, help="Show what was extracted without saving")
@click.pass_context
def ingest_email(ctx, subject: str | None, body: str | None, body_file, category: str | None, dry_run: bool):
    """Import a billing email.

    Examples:
        payguard ingest email --subject "Your Spotify receipt" --body "Payment of ₹119 received"
    """
    ledger = ctx.obj["ledger"]
    if body_file is not None:
        body = body_file.read()
    if not body:
        click.echo("Error: Provide --body or --body-file", err=True)
        ctx.exit(1)

    candidate = ExtractionEngine().extract_subscription(body, subject)
    if candidate is None:
        click.echo("This email does not look like a subscription charge. Please add it manually.", err=True)
        ctx.exit(1)

    click.echo(f"Service: {candidate.service_name}")
    click.echo(f"Amount: {candidate.formatted_amount} ({candidate.frequency.value})")
    click.echo(f"Next debit: {candidate.next_debit_date:%Y-%m-%d}")
    if dry_run:
        return

    result = ledger.ingest_email_candidate(candidate, category=_category_or_exit(ctx, category))
    _echo_result(result)


@ingest_group.command("mbox")
@click.argument("path", type=click.Path())
@click.option("--limit", default=20, show_default=True, help="Maximum number of emails to read")
@click.option("--dry-run", is_flag=True, help="Show what was found without saving")
@click.pass_context
def ingest_mbox(ctx, path: str, limit: int, dry_run: bool):
    """Import billing emails from a local mbox file."""
    ledger = ctx.obj["ledger"]
    try:
        candidates = scan_mailbox(MboxMailbox(path, limit=limit))
    except CollaboratorError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if not candidates:
        click.echo("No subscription emails found.")
        return

    click.echo(f"Found {len(candidates)} subscription email(s):")
    for candidate in candidates:
        click.echo(f"  {candidate.service_name}: {candidate.formatted_amount} ({candidate.frequency.value})")
        if not dry_run:
            ledger.ingest_email_candidate(candidate)
    if not dry_run:
        click.echo(f"Imported {len(candidates)} subscription email(s)")


def register_commands(cli):
    """Register ingest commands with main CLI."""
    cli.add_command(ingest_group)
