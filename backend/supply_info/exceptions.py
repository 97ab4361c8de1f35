"""
Domain exceptions for supply recording.

Fetchers and the calculator raise these; the recording cycle catches them
at its boundary and turns them into error state, so none of them ever reach
the HTTP layer.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    FETCH = "fetch"
    VALIDATION = "validation"
    CALCULATION = "calculation"
    DEPENDENCY = "dependency"
    SKIPPED = "skipped"
    UNEXPECTED = "unexpected"


class SupplyError(Exception):
    """Base supply error tagged with the stage that produced it."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, source: Optional[str] = None):
        self.message = message
        self.source = source
        super().__init__(message)


class FetchError(SupplyError):
    """Network failure, timeout or non-2xx response from an upstream source."""

    kind = ErrorKind.FETCH


class ValidationError(SupplyError):
    """Fetched payload is missing fields or has the wrong shape."""

    kind = ErrorKind.VALIDATION


class CalculationError(SupplyError):
    """Combined result is NaN or negative."""

    kind = ErrorKind.CALCULATION


class DependencyError(SupplyError):
    """Circulating supply requested before any total supply was recorded."""

    kind = ErrorKind.DEPENDENCY


class SkippedError(SupplyError):
    """Circulating supply not attempted because the last total supply attempt failed."""

    kind = ErrorKind.SKIPPED
