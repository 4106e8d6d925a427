"""Date parsing utilities."""

from datetime import date, datetime, timedelta
from typing import Optional, Sequence
import re

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

NUMERIC_DATE_PATTERN = re.compile(r"\d{1,2}[/-]\d{1,2}[/-]\d{4}")


def find_date(text: str, layouts: Sequence[str]) -> Optional[datetime]:
    """Find a numeric date such as 05/03/2024 in free text.

    The first match is tried against each layout in order and the first
    layout that parses wins.

    Args:
        text: Message text
        layouts: strptime layouts in priority order

    Returns:
        Parsed datetime, or None if no date is present or none of the layouts fit
    """
    match = NUMERIC_DATE_PATTERN.search(text)
    if match is None:
        return None

    date_str = match.group(0)
    for layout in layouts:
        try:
            return datetime.strptime(date_str, layout)
        except ValueError:
            continue
    return None


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "tomorrow", "next month", etc.

    Numeric dates are read day first.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    # Handle relative dates
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("next "):
        period = date_str[5:]
        if period == "week":
            return today + timedelta(days=7)
        elif period == "month":
            return today + relativedelta(months=1)
        elif period == "year":
            return today + relativedelta(years=1)

    # Try parsing as absolute date; ISO input is unaffected by dayfirst
    try:
        dt = date_parser.parse(date_str, dayfirst=not re.match(r"\d{4}-", date_str))
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str) -> date:
    """Parse a month string ("2024-03", "march 2024", "this month") to its first day."""
    month_str = month_str.strip().lower()
    today = date.today()
    if month_str == "this month":
        return today.replace(day=1)
    if month_str == "last month":
        return (today - relativedelta(months=1)).replace(day=1)

    match = re.fullmatch(r"(\d{4})-(\d{1,2})", month_str)
    if match:
        try:
            return date(int(match.group(1)), int(match.group(2)), 1)
        except ValueError as e:
            raise ValueError(f"Could not parse month '{month_str}': {e}")

    try:
        return date_parser.parse(month_str, default=datetime(today.year, 1, 1)).date().replace(day=1)
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse month '{month_str}': {e}")


def month_bounds(month: date) -> tuple[datetime, datetime]:
    """Return the half-open window [start of month, start of next month)."""
    start = datetime(month.year, month.month, 1)
    return start, start + relativedelta(months=1)


def start_of_day(day: date) -> datetime:
    return datetime(day.year, day.month, day.day)
