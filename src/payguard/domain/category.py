"""Category inference for imported subscriptions."""

from payguard.domain.entities import Category

# (name fragments, category) checked in order
CATEGORY_HINTS = (
    (("netflix", "prime", "disney", "hotstar", "ott"), Category.OTT),
    (("gym", "fitness"), Category.GYM),
    (("spotify", "music"), Category.MUSIC),
    (("dropbox", "icloud", "cloud"), Category.CLOUD),
    (("app", "software"), Category.APP),
)


def infer_category(service_name: str) -> Category:
    """Guess a category from a service name, falling back to Other."""
    name = service_name.lower()
    for fragments, category in CATEGORY_HINTS:
        if any(fragment in name for fragment in fragments):
            return category
    return Category.OTHER


def parse_category(value: str) -> Category:
    """Resolve a category from its value ("OTT/Streaming") or member name ("ott").

    Raises:
        ValueError: If no category matches
    """
    wanted = value.strip().lower()
    for category in Category:
        if wanted in (category.value.lower(), category.name.lower()):
            return category
    choices = ", ".join(category.value for category in Category)
    raise ValueError(f"Unknown category '{value}'. Choose one of: {choices}")
