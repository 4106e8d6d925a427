"""Domain layer for payguard application."""


# Services are imported lazily: the database layer imports domain entities,
# and the ledger imports the database layer.
def __getattr__(name):
    if name == "ExtractionEngine":
        from payguard.domain.extraction import ExtractionEngine
        return ExtractionEngine
    if name == "LedgerService":
        from payguard.domain.ledger import LedgerService
        return LedgerService
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
