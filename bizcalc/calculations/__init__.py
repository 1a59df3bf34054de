"""
Financial Calculation Engine

Deterministic calculators for small-business decision making.
Every calculator validates its input, then maps it to an immutable result.
"""

from bizcalc.calculations import (
    break_even,
    cohort,
    efficiency,
    employee,
    forecast,
    irr,
    loan,
    marketing,
    pricing,
    risk,
    saas,
    standard,
)

__all__ = [
    "break_even",
    "cohort",
    "efficiency",
    "employee",
    "forecast",
    "irr",
    "loan",
    "marketing",
    "pricing",
    "risk",
    "saas",
    "standard",
]
