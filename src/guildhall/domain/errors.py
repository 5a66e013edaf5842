"""Domain-level exceptions shared by the registry and the services."""


class DataIntegrityError(LookupError):
    """Raised when a referenced hero or quest id has no authoritative record."""
