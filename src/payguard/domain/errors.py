"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class CollaboratorError(Exception):
    """Failure reported by an external collaborator.

    Persistence, calendar, notification and mailbox failures are raised by the
    collaborator itself and caught at the dispatcher boundary, so they never
    propagate out of a ledger mutation.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class NotAuthorizedError(CollaboratorError):
    """Collaborator access has not been granted."""

    def __init__(self, message: str = "Calendar access not authorized. Please enable calendar access in Settings."):
        super().__init__(message)


class SaveFailedError(CollaboratorError):
    """Writing to a collaborator failed."""


class DeleteFailedError(CollaboratorError):
    """Removing from a collaborator failed."""


class ApiError(CollaboratorError):
    """Collaborator returned an error or could not be reached."""


def subscription_not_found(subscription: str) -> str:
    """Return message for missing subscription."""
    return f"Subscription '{subscription}' not found"


def ambiguous_subscription(subscription: str, count: int) -> str:
    """Return message when a lookup matches more than one subscription."""
    return f"'{subscription}' matches {count} subscriptions. Use the full ID instead."


def negative_amount(amount) -> str:
    """Return message for a negative subscription amount."""
    return f"Amount must not be negative (got {amount})"


def save_failed(what: str, error: BaseException) -> str:
    """Return message for a failed save."""
    return f"Failed to save {what}: {error}"


def delete_failed(what: str, error: BaseException) -> str:
    """Return message for a failed delete."""
    return f"Failed to delete {what}: {error}"
