"""Custom exceptions for probdist."""

from __future__ import annotations

from typing import Any


class ProbDistError(Exception):
    """Base exception for all probdist errors."""

    code: str = "UNKNOWN_ERROR"

    def __init__(
        self,
        message: str,
        distribution: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.distribution = distribution
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict, e.g. for structured logging."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.distribution:
            error["distribution"] = self.distribution
        if self.details:
            error["details"] = self.details
        return {"error": error}


class InvalidParameterError(ProbDistError, ValueError):
    """Parameters violate the distribution's validity predicate."""

    code = "INVALID_PARAMETERS"


class DimensionMismatchError(InvalidParameterError):
    """Array input has the wrong shape for the distribution."""

    code = "DIMENSION_MISMATCH"


class UnsupportedMomentError(ProbDistError, NotImplementedError):
    """A statistic is undefined for this distribution or parameter range."""

    code = "UNSUPPORTED_MOMENT"
