"""Amount and currency parsing utilities."""

from decimal import Decimal, InvalidOperation
from typing import Optional
import re

RUPEE = "₹"
DOLLAR = "$"

# Currency marker immediately followed by a number, optionally comma grouped
# ("1,200" or "1,00,000") and with an optional two-digit fraction.
AMOUNT_PATTERN = re.compile(
    r"(?:₹|\$|\b(?:rs\.?|inr|usd))\s*(\d{1,3}(?:,\d{2,3})+|\d+)(\.\d{2})?",
    re.IGNORECASE,
)

_RUPEE_TOKEN = re.compile(r"₹|\b(?:rs|inr)(?![a-z])", re.IGNORECASE)
_DOLLAR_TOKEN = re.compile(r"\$|\busd(?![a-z])", re.IGNORECASE)


def find_amount(text: str) -> Optional[Decimal]:
    """Find the first currency-anchored amount in free text.

    Args:
        text: Message text

    Returns:
        Positive Decimal amount, or None if no usable amount is present
    """
    match = AMOUNT_PATTERN.search(text)
    if match is None:
        return None

    digits = match.group(1).replace(",", "") + (match.group(2) or "")
    try:
        amount = Decimal(digits)
    except InvalidOperation:
        return None
    if amount <= 0:
        return None
    return amount


def detect_currency(text: str, default: str = RUPEE) -> str:
    """Determine the currency symbol mentioned anywhere in the text.

    Rupee markers take precedence over dollar markers.
    """
    if _RUPEE_TOKEN.search(text):
        return RUPEE
    if _DOLLAR_TOKEN.search(text):
        return DOLLAR
    return default


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-entered amount string into a Decimal.

    Handles various formats:
    - "499"
    - "₹499.00"
    - "Rs. 1,200"
    - "$12.99"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()

    # Remove currency markers
    cleaned = re.sub(r"^(?:rs\.?|inr|usd)", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"[₹$€£¥]", "", cleaned)

    # Remove commas
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount
