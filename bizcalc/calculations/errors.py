"""
Calculation Errors

A single error kind, invalid_input, is raised when a caller supplies input
of the wrong shape or range. Numerically degenerate but well-formed input
never raises.
"""

from typing import Optional

INVALID_INPUT = "invalid_input"


class CalculationError(Exception):
    """Base class for calculation engine errors."""

    kind = "calculation_error"


class ValidationError(CalculationError, ValueError):
    """Raised on the first input field that fails validation."""

    kind = INVALID_INPUT

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"message": self.message, "field": self.field, "kind": self.kind}
