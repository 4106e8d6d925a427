"""Heuristic extraction of transactions and subscriptions from message text.

Bank SMS notifications become ``ParsedTransaction`` records and billing emails
become ``ParsedSubscriptionCandidate`` records. Extraction is best effort: any
message the heuristics cannot use yields None, and callers route it to manual
entry. Nothing here raises on bad input.
"""

import logging
import re
import string
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

from payguard.domain import keywords
from payguard.domain.entities import (
    Frequency,
    ParsedSubscriptionCandidate,
    ParsedTransaction,
)
from payguard.utils.amount_parser import detect_currency, find_amount
from payguard.utils.date_parser import find_date

logger = logging.getLogger(__name__)

RECURRING_AMOUNT_TOLERANCE = Decimal("1.0")

# "paid ₹150 to ravi kumar on 12/03/2024" -> "ravi kumar"
_PAYEE_PATTERN = re.compile(
    r"\bto\s+([a-z0-9 ]+?)(?=\s+(?:on|for|via)\b|[^a-z0-9 ]|$)"
)


def _word_pattern(name: str) -> re.Pattern:
    return re.compile(r"(?<![a-z0-9])" + re.escape(name) + r"(?![a-z0-9])")


_STREAMING_PATTERNS = tuple((name, _word_pattern(name)) for name in keywords.STREAMING_SERVICES)
_APP_PATTERNS = tuple((name, _word_pattern(name)) for name in keywords.APP_SERVICES)


def contains_any(text: str, words) -> bool:
    return any(word in text for word in words)


def _first_known_service(text: str, patterns) -> Optional[str]:
    for name, pattern in patterns:
        if pattern.search(text):
            return string.capwords(name)
    return None


def _acceptable_name(name: str) -> bool:
    return bool(name) and len(name) < keywords.MAX_MERCHANT_LENGTH


def known_merchant(text: str) -> Optional[str]:
    """Match the curated tiers: streaming services, apps, then fitness."""
    merchant = _first_known_service(text, _STREAMING_PATTERNS)
    if merchant is None:
        merchant = _first_known_service(text, _APP_PATTERNS)
    if merchant is None and contains_any(text, keywords.FITNESS_KEYWORDS):
        merchant = keywords.FITNESS_MERCHANT
    return merchant


def payee_from_text(text: str) -> Optional[str]:
    """Extract the name following "to" in a payment message."""
    match = _PAYEE_PATTERN.search(text)
    if match is None:
        return None
    name = " ".join(match.group(1).split())
    if not _acceptable_name(name):
        return None
    return string.capwords(name)


def service_from_subject(subject: Optional[str]) -> Optional[str]:
    """Clean an email subject line into a service name."""
    if not subject:
        return None
    cleaned = subject
    for noise in keywords.SUBJECT_NOISE:
        cleaned = re.sub(re.escape(noise), "", cleaned, flags=re.IGNORECASE)
    cleaned = " ".join(cleaned.split())
    if not _acceptable_name(cleaned):
        return None
    return string.capwords(cleaned)


def infer_frequency(text: str) -> Frequency:
    """Infer billing frequency from keywords, defaulting to monthly."""
    for words, value in keywords.FREQUENCY_KEYWORDS:
        if contains_any(text, words):
            return Frequency(value)
    return Frequency.MONTHLY


def is_subscription_text(text: str) -> bool:
    return contains_any(text, keywords.SUBSCRIPTION_KEYWORDS)


class ExtractionEngine:
    """Turns SMS and email text into extraction results."""

    def __init__(self, now: Optional[Callable[[], datetime]] = None):
        """Initialize extraction engine.

        Args:
            now: Clock used when a message carries no date (defaults to datetime.now)
        """
        self.now = now or datetime.now

    def extract_transaction(self, text: str) -> Optional[ParsedTransaction]:
        """Parse a bank SMS into a transaction.

        Args:
            text: Raw SMS text

        Returns:
            ParsedTransaction, or None if no amount could be found
        """
        normalized = text.lower()

        amount = find_amount(normalized)
        if amount is None:
            logger.debug("No amount in SMS, skipping: %r", text[:80])
            return None

        merchant = known_merchant(normalized)
        if merchant is None:
            merchant = payee_from_text(normalized)

        parsed = ParsedTransaction(
            amount=amount,
            currency=detect_currency(normalized),
            merchant=merchant,
            description=text,
            is_subscription=is_subscription_text(normalized),
            date=find_date(normalized, keywords.DATE_LAYOUTS) or self.now(),
        )
        logger.debug(
            "Parsed SMS transaction: merchant=%s amount=%s subscription=%s",
            parsed.merchant,
            parsed.amount,
            parsed.is_subscription,
        )
        return parsed

    def extract_subscription(
        self, body: str, subject: Optional[str] = None
    ) -> Optional[ParsedSubscriptionCandidate]:
        """Parse a billing email into a subscription candidate.

        Args:
            body: Email body text
            subject: Optional email subject line

        Returns:
            ParsedSubscriptionCandidate, or None if the email is not billing
            related or carries no amount
        """
        normalized = f"{subject or ''} {body}".lower()

        if not contains_any(normalized, keywords.BILLING_KEYWORDS):
            logger.debug("Email is not billing related: %r", subject)
            return None

        amount = find_amount(normalized)
        if amount is None:
            logger.debug("No amount in billing email: %r", subject)
            return None

        service_name = known_merchant(normalized)
        if service_name is None:
            service_name = service_from_subject(subject) or keywords.UNKNOWN_SERVICE

        date = find_date(normalized, keywords.DATE_LAYOUTS) or self.now()
        frequency = infer_frequency(normalized)
        try:
            next_debit_date = date + timedelta(days=frequency.day_count)
        except OverflowError:
            next_debit_date = self.now() + timedelta(days=30)

        candidate = ParsedSubscriptionCandidate(
            service_name=service_name,
            amount=amount,
            currency=detect_currency(normalized),
            date=date,
            frequency=frequency,
            next_debit_date=next_debit_date,
            email_subject=subject,
            email_content=body,
        )
        logger.debug(
            "Parsed email candidate: service=%s amount=%s frequency=%s",
            candidate.service_name,
            candidate.amount,
            candidate.frequency.value,
        )
        return candidate

    def is_recurring(
        self,
        text: str,
        previous_amount=None,
        previous_merchant: Optional[str] = None,
    ) -> bool:
        """Judge whether an SMS belongs to a repeating series of charges.

        Subscription keywords decide immediately. Otherwise, with history
        available, the charge is recurring when the merchant matches the
        previous one and the amount is within one unit of the previous amount
        (inclusive, so a 299 -> 300 drift still counts).

        Args:
            text: Raw SMS text
            previous_amount: Amount of the previous charge, if known
            previous_merchant: Merchant of the previous charge, if known
        """
        if is_subscription_text(text.lower()):
            return True

        if previous_amount is None or previous_merchant is None:
            return False

        parsed = self.extract_transaction(text)
        if parsed is None or parsed.merchant is None:
            return False

        previous = Decimal(str(previous_amount))
        return (
            parsed.merchant.lower() == previous_merchant.lower()
            and abs(parsed.amount - previous) <= RECURRING_AMOUNT_TOLERANCE
        )
