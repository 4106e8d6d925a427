"""Merge-or-create matching policy for ingestion.

Ingestion decides whether an extraction result updates an existing
subscription by calling ``find_matching_subscription``. A stricter matcher
(merchant plus amount range, for instance) replaces this function without
touching the ledger's control flow.
"""

from typing import Iterable, Optional

from payguard.domain.entities import Subscription


def find_matching_subscription(
    subscriptions: Iterable[Subscription], name: Optional[str]
) -> Optional[Subscription]:
    """Return the first active subscription whose name equals ``name``, ignoring case."""
    if not name:
        return None
    wanted = name.lower()
    for subscription in subscriptions:
        if subscription.is_active and not subscription.is_cancelled and subscription.name.lower() == wanted:
            return subscription
    return None
