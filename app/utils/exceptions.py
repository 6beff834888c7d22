"""
Custom Exception Hierarchy

Error types raised by the priority core, carrying structured details
so the HTTP layer can serialise them without string parsing.
"""
from typing import Optional, Dict, Any


class HomeCareError(Exception):
    """Base exception for all home-care tracker errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidDateError(HomeCareError):
    """A date input could not be interpreted as a valid instant."""

    def __init__(
        self,
        message: str,
        field: str = "unknown",
        value: Any = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INVALID_DATE",
            details={"field": field, "value": repr(value), **(details or {})}
        )
        self.field = field
        self.value = value
