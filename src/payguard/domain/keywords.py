"""Curated lookup tables used by the extraction engine.

Every table is an ordered tuple and is scanned front to back; the first hit
wins. Longer names come before names they contain.
"""

# Email relevance gate
BILLING_KEYWORDS = (
    "subscription",
    "renewal",
    "renewed",
    "auto-debit",
    "recurring",
    "invoice",
    "receipt",
    "payment",
    "billing",
    "charge",
    "debited",
)

# SMS subscription-likelihood
SUBSCRIPTION_KEYWORDS = (
    "subscription",
    "auto-debit",
    "renewed",
    "renewal",
    "recurring",
    "mandate",
    "auto pay",
)

STREAMING_SERVICES = (
    "netflix",
    "prime video",
    "amazon prime",
    "disney+",
    "hotstar",
    "disney",
    "zee5",
    "sonyliv",
    "jiocinema",
    "youtube premium",
    "spotify",
    "apple music",
    "apple tv",
    "hulu",
    "hbo",
    "max",
)

APP_SERVICES = (
    "swiggy",
    "zomato",
    "uber eats",
    "uber",
    "dropbox",
    "onedrive",
    "icloud",
    "adobe",
    "office 365",
    "microsoft",
    "google workspace",
    "notion",
    "figma",
    "slack",
    "zoom",
    "linkedin premium",
    "medium",
)

FITNESS_KEYWORDS = ("gym", "fitness")
FITNESS_MERCHANT = "Gym/Fitness"

# Stripped from an email subject before it is used as a service name
SUBJECT_NOISE = ("invoice", "receipt", "payment", "subscription")

UNKNOWN_SERVICE = "Unknown Service"
UNKNOWN_SUBSCRIPTION = "Unknown Subscription"

# (keywords, frequency value) in priority order; monthly is the fallback
FREQUENCY_KEYWORDS = (
    (("yearly", "annual"), "Yearly"),
    (("quarterly",), "Quarterly"),
    (("weekly", "week"), "Weekly"),
    (("bi-weekly", "biweekly"), "Bi-Weekly"),
)

# Layouts tried against a numeric date match, first success wins
DATE_LAYOUTS = (
    "%d/%m/%Y",
    "%m/%d/%Y",
    "%Y-%m-%d",
    "%d-%m-%Y",
    "%m-%d-%Y",
)

MAX_MERCHANT_LENGTH = 50
