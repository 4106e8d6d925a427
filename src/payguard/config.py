"""Application configuration from PAYGUARD_* environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from payguard.services.calendar import DEFAULT_REMINDER_DAYS, clamp_reminder_days
from payguard.services.notifications import DEFAULT_NOTIFY_DAYS_BEFORE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"


def default_db_path() -> str:
    """Return ~/.payguard/payguard.db."""
    return str(Path.home() / ".payguard" / "payguard.db")


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, falling back to the default."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got '{value}')")


def _env_log_level(name: str, default: str) -> str:
    """Read a logging level name from the environment, falling back to the default."""
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"{name} must be one of {', '.join(LOG_LEVELS)} (got '{value}')")
    return level


@dataclass(frozen=True)
class Settings:
    """Runtime settings."""

    db_path: str = field(default_factory=default_db_path)
    log_level: str = DEFAULT_LOG_LEVEL
    calendar_reminder_days: int = DEFAULT_REMINDER_DAYS
    notify_days_before: int = DEFAULT_NOTIFY_DAYS_BEFORE
    calendar_path: Optional[str] = None


def load_settings(db_path: Optional[str] = None) -> Settings:
    """Build settings from the environment.

    Args:
        db_path: Database path that overrides PAYGUARD_DB_PATH (e.g. from --db-path)

    Raises:
        ValueError: If an environment variable holds an invalid value
    """
    return Settings(
        db_path=db_path or os.environ.get("PAYGUARD_DB_PATH") or default_db_path(),
        log_level=_env_log_level("PAYGUARD_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        calendar_reminder_days=clamp_reminder_days(
            _env_int("PAYGUARD_CALENDAR_REMINDER_DAYS", DEFAULT_REMINDER_DAYS)
        ),
        notify_days_before=_env_int("PAYGUARD_NOTIFY_DAYS_BEFORE", DEFAULT_NOTIFY_DAYS_BEFORE),
        calendar_path=os.environ.get("PAYGUARD_CALENDAR_PATH") or None,
    )
