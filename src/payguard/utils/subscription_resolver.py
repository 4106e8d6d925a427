"""Utility for resolving subscription references to entities."""

from payguard.domain.entities import Subscription
from payguard.domain.errors import NotFoundError, ambiguous_subscription, subscription_not_found
from payguard.domain.ledger import LedgerService


def resolve_subscription(ledger: LedgerService, reference: str) -> Subscription:
    """Resolve a subscription by full ID, unique ID prefix or name.

    Args:
        ledger: LedgerService instance
        reference: Subscription ID, ID prefix (as shown by ``subscription list``) or name

    Returns:
        Subscription entity

    Raises:
        NotFoundError: If nothing or more than one subscription matches
    """
    subscription = ledger.get_subscription(reference)
    if subscription is not None:
        return subscription

    subscriptions = ledger.list_subscriptions()

    # Try ID prefix
    matches = [sub for sub in subscriptions if sub.id.startswith(reference)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise NotFoundError(ambiguous_subscription(reference, len(matches)))

    # Try name, preferring active subscriptions
    wanted = reference.lower()
    matches = [sub for sub in subscriptions if sub.name.lower() == wanted]
    active = [sub for sub in matches if sub.is_active and not sub.is_cancelled]
    if len(active) == 1:
        return active[0]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise NotFoundError(ambiguous_subscription(reference, len(matches)))

    raise NotFoundError(subscription_not_found(reference))
