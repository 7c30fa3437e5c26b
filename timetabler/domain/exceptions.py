"""
Domain-specific exception hierarchy for the timetabler application.
"""


class TimetableError(Exception):
    """Base class for all application-level errors."""


class InvalidTimezone(TimetableError, ValueError):
    """Raised when a timezone identifier cannot be resolved."""


class InvalidDateIdentifier(TimetableError, ValueError):
    """Raised when a YYYYMMDD day identifier cannot be parsed."""


class DataSourceUnavailable(TimetableError):
    """Raised when events or work hours cannot be loaded or parsed."""
