"""Service-layer exceptions."""

from guildhall.domain.errors import DataIntegrityError


class FactoryError(Exception):
    """Raised when a hero or quest cannot be created."""


class ValidationError(Exception):
    """Raised when a command does not apply to the current state.

    Command entry points catch it and hand the message back as ``(False, reason)``.
    """


class InvalidTransitionError(ValidationError):
    """Raised when a quest is asked to move to a phase it cannot reach."""


__all__ = [
    "DataIntegrityError",
    "FactoryError",
    "InvalidTransitionError",
    "ValidationError",
]
