"""Exceptions raised while loading guild definition files."""


class DataError(Exception):
    """Base exception for the definitions layer."""


class DataLoadError(DataError):
    """A definition file is missing, unreadable or not valid JSON."""


class DataValidationError(DataError):
    """A definition entry has the wrong shape or an out-of-range value."""


class DataReferenceError(DataError):
    """A definition points at another definition that does not exist."""
