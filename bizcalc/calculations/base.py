"""
Calculator Contract

Every calculator exposes a name plus validate() and calculate(). Calculators
share validation and rounding through the numeric module rather than a base
class, and hold no per-call state.
"""

import logging
from typing import Any, Protocol, TypeVar, runtime_checkable

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", contravariant=True)
ResultT = TypeVar("ResultT", covariant=True)


@runtime_checkable
class Calculator(Protocol[InputT, ResultT]):
    """Contract implemented by every calculator."""

    name: str

    def validate(self, data: InputT) -> None:
        """Raise ValidationError on the first invalid field."""
        ...

    def calculate(self, data: InputT) -> ResultT:
        """Validate, compute and return a new, rounded result."""
        ...


def log_calculation(calculator: str, metric: str, value: float, **details: Any) -> None:
    """Emit a debug record for a calculated metric. Has no effect on results."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    extra = "".join(f" {key}={val}" for key, val in details.items())
    logger.debug(f"[{calculator}] {metric}={value}{extra}")
