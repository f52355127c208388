"""Exceptions raised while reading scenario, space and card definitions."""


class DataError(Exception):
    """Base exception for the definitions layer."""


class DataLoadError(DataError):
    """A definition file is missing, unreadable, or not valid JSON."""


class DataValidationError(DataError):
    """A definition entry has the wrong shape or an unknown label."""


class DataReferenceError(DataError):
    """A scenario names a space or card that is not defined."""
