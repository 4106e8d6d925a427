"""Mailbox collaborator: supplies (subject, body) pairs to the extraction engine."""

import logging
import mailbox
from abc import ABC, abstractmethod
from email.message import Message
from pathlib import Path
from typing import Optional

from payguard.domain.entities import ParsedSubscriptionCandidate
from payguard.domain.errors import ApiError
from payguard.domain.extraction import ExtractionEngine

logger = logging.getLogger(__name__)

SUBJECT_FILTER = ("receipt", "subscription", "renewal")
DEFAULT_LIMIT = 20


class Mailbox(ABC):
    """Mailbox collaborator interface."""

    @abstractmethod
    def fetch(self) -> list[tuple[str, str]]:
        """Return (subject, body) pairs for candidate billing emails."""
        pass


def _message_body(message: Message) -> str:
    if message.is_multipart():
        parts = []
        for part in message.walk():
            if part.get_content_type() == "text/plain" and not part.get_filename():
                parts.append(_decode_payload(part))
        return "\n".join(parts)
    return _decode_payload(message)


def _decode_payload(part: Message) -> str:
    payload = part.get_payload(decode=True)
    if payload is None:
        return ""
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        return payload.decode("utf-8", errors="replace")


class MboxMailbox(Mailbox):
    """Reads billing emails from a local mbox file."""

    def __init__(self, path: str, limit: int = DEFAULT_LIMIT):
        self.path = Path(path)
        self.limit = limit

    def fetch(self) -> list[tuple[str, str]]:
        if not self.path.is_file():
            raise ApiError(f"Mailbox file '{self.path}' not found")

        try:
            box = mailbox.mbox(str(self.path), create=False)
        except (OSError, mailbox.Error) as e:
            raise ApiError(f"Could not open mailbox '{self.path}': {e}", cause=e)

        messages = []
        try:
            for message in box:
                subject = str(message.get("Subject", ""))
                if not any(word in subject.lower() for word in SUBJECT_FILTER):
                    continue
                messages.append((subject, _message_body(message)))
                if len(messages) >= self.limit:
                    break
        finally:
            box.close()

        logger.info("Fetched %d billing emails from %s", len(messages), self.path)
        return messages


def scan_mailbox(
    source: Mailbox, engine: Optional[ExtractionEngine] = None
) -> list[ParsedSubscriptionCandidate]:
    """Fetch emails and return the ones the engine recognizes as subscriptions."""
    engine = engine or ExtractionEngine()
    candidates = []
    for subject, body in source.fetch():
        candidate = engine.extract_subscription(body, subject)
        if candidate is not None:
            candidates.append(candidate)
    return candidates
