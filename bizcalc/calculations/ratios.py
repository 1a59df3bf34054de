"""
Ratio Calculator Helpers

The employee ROI, marketing ROI, SaaS, cohort, risk and efficiency
calculators share one shape: validate, compute a primary ratio with
safe_divide, derive secondary ratios, classify the primary ratio against
named bands and optionally compute a payback time. This module holds the
shared pieces.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from bizcalc.calculations.numeric import round_to, safe_divide


@dataclass(frozen=True)
class Band:
    """
    A label that applies when a value is at or above threshold, or strictly
    above it when inclusive is False.
    """

    threshold: float
    label: str
    inclusive: bool = True


def classify(value: float, bands: Sequence[Band], default: str) -> str:
    """
    Label a value using bands ordered from highest threshold to lowest.

    Returns the label of the first band the value reaches, else default.
    """
    for band in bands:
        if value > band.threshold or (band.inclusive and value == band.threshold):
            return band.label
    return default


def compare_to_benchmark(
    value: float,
    benchmark: float,
    lower_factor: float,
    upper_factor: float,
    labels: Sequence[str],
) -> str:
    """
    Position a value against a benchmark band.

    Args:
        labels: (below_label, within_label, above_label)

    Returns:
        below_label when value < benchmark * lower_factor, above_label when
        value > benchmark * upper_factor, within_label otherwise
    """
    below, within, above = labels
    if value < benchmark * lower_factor:
        return below
    if value > benchmark * upper_factor:
        return above
    return within


def payback_months(
    cost: float, monthly_benefit: float, fallback: Optional[float] = None, decimals: int = 1
) -> Optional[float]:
    """Months for a monthly benefit to repay a cost; fallback when the benefit is not positive."""
    if monthly_benefit <= 0:
        return fallback
    return round_to(safe_divide(cost, monthly_benefit, 0.0), decimals)
