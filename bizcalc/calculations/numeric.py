"""
Numeric Utilities

Safe division, fixed-decimal rounding and input assertions shared by every
calculator.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from numbers import Real

from bizcalc.calculations.errors import ValidationError


def safe_divide(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """
    Divide, returning a fallback instead of failing.

    Args:
        numerator: Dividend
        denominator: Divisor
        fallback: Value returned when the divisor is zero or not finite,
            or when the quotient itself is not finite

    Returns:
        numerator / denominator, or fallback
    """
    if denominator == 0 or not math.isfinite(denominator):
        return fallback

    result = numerator / denominator
    if not math.isfinite(result):
        return fallback
    return result


def round_to(value: float, decimals: int = 2) -> float:
    """
    Round half away from zero to a fixed number of decimal places.

    Works on the shortest decimal representation of the float, so 2.675
    rounds to 2.68 rather than to the binary neighbour 2.67.
    """
    if not math.isfinite(value):
        return value
    # Floats this large carry no fractional digits worth rounding
    if abs(value) >= 1e15:
        return float(value)

    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    result = float(rounded)
    # Normalise -0.0
    return result + 0.0


def assert_finite(value, field: str) -> None:
    """Require a real, finite number (booleans are rejected)."""
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ValidationError(f"{field} must be a number", field)
    if not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number", field)


def assert_positive(value, field: str) -> None:
    """Require a finite number strictly greater than zero."""
    assert_finite(value, field)
    if value <= 0:
        raise ValidationError(f"{field} must be positive", field)


def assert_non_negative(value, field: str) -> None:
    """Require a finite number greater than or equal to zero."""
    assert_finite(value, field)
    if value < 0:
        raise ValidationError(f"{field} must not be negative", field)


def assert_range(
    value,
    minimum: float,
    maximum: float,
    field: str,
    inclusive_max: bool = True,
) -> None:
    """
    Require a finite number within [minimum, maximum].

    With inclusive_max=False the upper bound is excluded: [minimum, maximum).
    """
    assert_finite(value, field)
    if inclusive_max:
        if value < minimum or value > maximum:
            raise ValidationError(
                f"{field} must be between {minimum} and {maximum}", field
            )
    elif value < minimum or value >= maximum:
        raise ValidationError(
            f"{field} must be at least {minimum} and less than {maximum}", field
        )


def assert_integer(value, field: str) -> None:
    """Require a whole number (month counts, unit counts)."""
    assert_finite(value, field)
    if int(value) != value:
        raise ValidationError(f"{field} must be a whole number", field)
