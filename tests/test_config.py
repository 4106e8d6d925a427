"""Tests for settings and logging setup."""

import logging
import pytest

from payguard.config import Settings, default_db_path, load_settings
from payguard.logging_config import setup_logging

ENV_VARS = (
    "PAYGUARD_DB_PATH",
    "PAYGUARD_LOG_LEVEL",
    "PAYGUARD_CALENDAR_REMINDER_DAYS",
    "PAYGUARD_NOTIFY_DAYS_BEFORE",
    "PAYGUARD_CALENDAR_PATH",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))

    settings = load_settings()

    assert settings == Settings()
    assert settings.db_path == str(tmp_path / ".payguard" / "payguard.db")
    assert settings.db_path == default_db_path()


def test_environment(monkeypatch):
    monkeypatch.setenv("PAYGUARD_DB_PATH", "/tmp/env.db")
    monkeypatch.setenv("PAYGUARD_LOG_LEVEL", "debug")
    monkeypatch.setenv("PAYGUARD_CALENDAR_REMINDER_DAYS", "90")
    monkeypatch.setenv("PAYGUARD_NOTIFY_DAYS_BEFORE", "5")
    monkeypatch.setenv("PAYGUARD_CALENDAR_PATH", "/tmp/calendar.json")

    settings = load_settings()

    assert settings.db_path == "/tmp/env.db"
    assert settings.log_level == "DEBUG"
    assert settings.calendar_reminder_days == 30
    assert settings.notify_days_before == 5
    assert settings.calendar_path == "/tmp/calendar.json"


def test_db_path_argument_overrides_environment(monkeypatch):
    monkeypatch.setenv("PAYGUARD_DB_PATH", "/tmp/env.db")

    assert load_settings(db_path="/tmp/cli.db").db_path == "/tmp/cli.db"


def test_log_level_is_case_insensitive(monkeypatch):
    monkeypatch.setenv("PAYGUARD_LOG_LEVEL", " info ")

    assert load_settings().log_level == "INFO"


def test_invalid_log_level(monkeypatch):
    monkeypatch.setenv("PAYGUARD_LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError, match="PAYGUARD_LOG_LEVEL must be one of"):
        load_settings()


def test_invalid_integer(monkeypatch):
    monkeypatch.setenv("PAYGUARD_NOTIFY_DAYS_BEFORE", "soon")

    with pytest.raises(ValueError, match="PAYGUARD_NOTIFY_DAYS_BEFORE must be an integer"):
        load_settings()


class TestSetupLogging:
    """Tests for logging setup."""

    def test_level(self):
        logger = setup_logging("INFO")

        assert logger.name == "payguard"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_verbose_and_no_duplicate_handlers(self):
        setup_logging()
        logger = setup_logging(verbose=True)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
