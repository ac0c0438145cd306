"""
Errors raised by the time-spent report.

Permission failures are reported with django.core.exceptions.PermissionDenied;
an empty result is not an error.
"""


class TimestatError(Exception):
    """Base class for report errors"""


class InvalidArgument(TimestatError, ValueError):
    """A value outside the domain of an operation, e.g. a negative duration"""


class InvalidFilter(TimestatError):
    """A malformed filter value; the resolver clamps it to its default"""

    def __init__(self, name, value, message=None):
        self.name = name
        self.value = value
        super().__init__(message or f"Invalid value for {name}: {value!r}")


class StorageUnavailable(TimestatError):
    """The log store could not be reached"""
