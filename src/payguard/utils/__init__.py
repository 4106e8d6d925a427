"""Utility functions for payguard."""

from payguard.utils.date_parser import parse_date
from payguard.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
