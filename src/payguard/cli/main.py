"""Main CLI entry point."""

import click
from payguard.config import load_settings
from payguard.cli.error_handling import handle_domain_error
from payguard.database.factories import create_database
from payguard.domain.ledger import LedgerService
from payguard.logging_config import setup_logging
from payguard.services.calendar import LocalCalendar
from payguard.services.dispatcher import InlineDispatcher
from payguard.services.notifications import ReminderScheduler

# Import and register all commands at module level
from payguard.cli.commands import (
    subscription,
    transaction,
    ingest,
    report,
)


def _advise(description: str, error: Exception) -> None:
    click.echo(f"Warning: {description} failed: {error}", err=True)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides PAYGUARD_DB_PATH environment variable)",
    envvar="PAYGUARD_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """PayGuard - Subscription tracking application.

    Track recurring charges, get warned before renewals, and see how much
    cancelled services were costing you. Bank SMS and billing emails can be
    imported directly.
    """
    ctx.ensure_object(dict)
    try:
        settings = load_settings(db_path=db_path)
    except ValueError as e:
        handle_domain_error(ctx, e)
    setup_logging(settings.log_level, verbose=verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(settings)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings
        ctx.obj["ledger"] = LedgerService(
            db,
            notifier=ReminderScheduler(days_before=settings.notify_days_before),
            calendar=LocalCalendar(
                reminder_days_before=settings.calendar_reminder_days,
                path=settings.calendar_path,
            ),
            dispatcher=InlineDispatcher(on_error=_advise),
        )


# Register all commands
subscription.register_commands(cli)
transaction.register_commands(cli)
ingest.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
