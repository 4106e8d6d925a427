"""Tests for the command line interface."""

import pytest
from datetime import date, timedelta

from payguard.cli.main import cli

NETFLIX_SMS = "Netflix subscription renewed. ₹499 debited from your account."


@pytest.fixture
def run(cli_runner, temp_db):
    """Invoke the CLI against the temporary database."""

    def _run(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return _run


def _add_netflix(run, *extra):
    next_debit = (date.today() + timedelta(days=3)).isoformat()
    return run("subscription", "add", "Netflix", "--amount", "499", "--next-debit", next_debit, *extra)


def test_help_needs_no_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "Subscription tracking" in result.output


class TestSubscriptionCommands:
    """Tests for subscription commands."""

    def test_add_and_list(self, run):
        result = _add_netflix(run)

        assert result.exit_code == 0, result.output
        assert "Created subscription" in result.output
        assert "Category: OTT/Streaming" in result.output

        result = run("subscription", "list")
        assert result.exit_code == 0
        assert "Found 1 subscription(s)" in result.output
        assert "Netflix" in result.output
        assert "₹499.00" in result.output

    def test_add_persists(self, run, temp_db):
        _add_netflix(run)

        assert [sub.name for sub in temp_db.load_subscriptions()] == ["Netflix"]

    def test_add_negative_amount(self, run):
        result = run("subscription", "add", "Netflix", "--amount", "-5", "--next-debit", "tomorrow")

        assert result.exit_code == 1
        assert "negative" in result.output

    def test_add_bad_date(self, run):
        result = run("subscription", "add", "Netflix", "--amount", "499", "--next-debit", "someday")

        assert result.exit_code == 1
        assert "Invalid next debit date" in result.output

    def test_add_unknown_category(self, run):
        result = _add_netflix(run, "--category", "groceries")

        assert result.exit_code == 1
        assert "Unknown category" in result.output

    def test_edit(self, run, temp_db):
        _add_netflix(run)

        result = run("subscription", "edit", "netflix", "--amount", "649", "--frequency", "yearly")

        assert result.exit_code == 0, result.output
        assert "₹649.00 (Yearly)" in result.output
        sub = temp_db.load_subscriptions()[0]
        assert sub.frequency.value == "Yearly"

    def test_edit_nothing(self, run):
        _add_netflix(run)

        result = run("subscription", "edit", "Netflix")

        assert "Nothing to update." in result.output

    def test_cancel_twice(self, run):
        _add_netflix(run)

        result = run("subscription", "cancel", "Netflix")
        assert result.exit_code == 0
        assert "Cancelled subscription 'Netflix'" in result.output

        result = run("subscription", "cancel", "Netflix")
        assert result.exit_code == 0
        assert "already cancelled" in result.output

    def test_cancelled_hidden_from_list(self, run):
        _add_netflix(run)
        run("subscription", "cancel", "Netflix")

        assert "No subscriptions found." in run("subscription", "list").output
        assert "Cancelled" in run("subscription", "list", "--all").output

    def test_delete_by_id_prefix(self, run, temp_db):
        _add_netflix(run)
        prefix = temp_db.load_subscriptions()[0].id[:8]

        result = run("subscription", "delete", prefix, "--yes")

        assert result.exit_code == 0
        assert "Deleted subscription 'Netflix'" in result.output
        assert temp_db.load_subscriptions() == []

    def test_delete_requires_confirmation(self, run, temp_db):
        _add_netflix(run)

        result = run("subscription", "delete", "Netflix", input="n\n")

        assert result.exit_code == 1
        assert len(temp_db.load_subscriptions()) == 1

    def test_unknown_subscription(self, run):
        result = run("subscription", "cancel", "Hulu")

        assert result.exit_code == 1
        assert "Subscription 'Hulu' not found" in result.output


class TestTransactionCommands:
    """Tests for transaction commands."""

    def test_linked_transaction_advances_subscription(self, run):
        _add_netflix(run)
        paid = date.today().isoformat()

        result = run("transaction", "add", "--amount", "499", "--date", paid, "--subscription", "Netflix")

        assert result.exit_code == 0, result.output
        expected_next = (date.today() + timedelta(days=30)).isoformat()
        assert f"next debit {expected_next}" in result.output

        result = run("transaction", "list", "--subscription", "Netflix")
        assert "Found 1 transaction(s)" in result.output

    def test_list_empty(self, run):
        assert "No transactions found." in run("transaction", "list").output


class TestIngestCommands:
    """Tests for SMS and email import."""

    def test_sms_twice_creates_one_subscription(self, run, temp_db):
        first = run("ingest", "sms", NETFLIX_SMS)
        second = run("ingest", "sms", NETFLIX_SMS)

        assert first.exit_code == 0, first.output
        assert "Created subscription 'Netflix'" in first.output
        assert "Updated subscription 'Netflix'" in second.output
        assert len(temp_db.load_subscriptions()) == 1
        assert len(temp_db.load_transactions()) == 2

    def test_sms_dry_run(self, run, temp_db):
        result = run("ingest", "sms", NETFLIX_SMS, "--dry-run")

        assert "Merchant: Netflix" in result.output
        assert "Subscription: yes" in result.output
        assert temp_db.load_transactions() == []

    def test_sms_unparseable(self, run):
        result = run("ingest", "sms", "Your OTP is 123456")

        assert result.exit_code == 1
        assert "Could not find a transaction" in result.output

    def test_email(self, run, temp_db):
        result = run(
            "ingest",
            "email",
            "--subject",
            "Your Spotify receipt",
            "--body",
            "Your subscription was renewed. ₹119 charged on 05/03/2024.",
        )

        assert result.exit_code == 0, result.output
        assert "Service: Spotify" in result.output
        assert "Created subscription 'Spotify' (next debit 2024-04-04)" in result.output
        sub = temp_db.load_subscriptions()[0]
        assert sub.category.value == "Music"
        assert temp_db.load_transactions()[0].subscription_id == sub.id

    def test_email_from_file(self, run, tmp_path):
        body = tmp_path / "body.txt"
        body.write_text("Invoice: $96.00 charged for your annual plan on 01/15/2024", encoding="utf-8")

        result = run("ingest", "email", "--subject", "Notion invoice", "--body-file", str(body), "--dry-run")

        assert result.exit_code == 0, result.output
        assert "Service: Notion" in result.output
        assert "$96.00 (Yearly)" in result.output

    def test_email_not_billing(self, run):
        result = run("ingest", "email", "--body", "See you at lunch")

        assert result.exit_code == 1
        assert "does not look like a subscription charge" in result.output

    def test_email_requires_body(self, run):
        result = run("ingest", "email", "--subject", "Receipt")

        assert result.exit_code == 1
        assert "Provide --body" in result.output

    def test_mbox_missing(self, run, tmp_path):
        result = run("ingest", "mbox", str(tmp_path / "missing.mbox"))

        assert result.exit_code == 1
        assert "not found" in result.output


class TestReportCommands:
    """Tests for reports."""

    def test_summary(self, run):
        _add_netflix(run)
        next_debit = (date.today() + timedelta(days=20)).isoformat()
        run("subscription", "add", "Gym", "--amount", "50", "--next-debit", next_debit, "--frequency", "Weekly")

        result = run("report", "summary")

        assert result.exit_code == 0, result.output
        assert "Active subscriptions: 2" in result.output
        assert "Monthly recurring: ₹715.50" in result.output
        assert "Debits in the next 7 days: 1" in result.output

    def test_waste(self, run):
        _add_netflix(run)
        run("subscription", "cancel", "Netflix")

        result = run("report", "waste")

        assert result.exit_code == 0
        assert f"Waste for {date.today():%B %Y}: ₹499.00" in result.output
        assert "Netflix: ₹499.00" in result.output

    def test_waste_bad_month(self, run):
        result = run("report", "waste", "--month", "2024-13")

        assert result.exit_code == 1
        assert "Invalid month" in result.output

    def test_upcoming_empty(self, run):
        assert "No debits in the next 7 days." in run("report", "upcoming").output


def test_invalid_log_level_exits_cleanly(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "report", "summary"],
        env={"PAYGUARD_LOG_LEVEL": "LOUD"},
    )

    assert result.exit_code == 1
    assert "PAYGUARD_LOG_LEVEL must be one of" in result.output
