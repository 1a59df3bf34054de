"""
IRR and NPV Calculations

Implements monthly NPV and a bounded Newton-Raphson IRR for project cash
flows. IRR is a best-effort estimate: it never raises, and returns the
current estimate when it cannot converge.
"""

import logging
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

IRR_SEED = 0.10 / 12
IRR_TOLERANCE = 1e-4
IRR_MAX_ITERATIONS = 100
DERIVATIVE_EPSILON = 1e-10
RATE_FLOOR = -0.99
RATE_CEILING = 10.0


def build_cash_flows(initial_investment: float, monthly_cash_flows: Sequence[float]) -> np.ndarray:
    """Prepend the initial outlay (period 0) to the monthly flows (periods 1..n)."""
    flows = np.empty(len(monthly_cash_flows) + 1, dtype=float)
    flows[0] = -initial_investment
    flows[1:] = monthly_cash_flows
    return flows


def calculate_npv(cash_flows: Sequence[float], rate: float) -> float:
    """
    Calculate NPV of periodic cash flows.

    Args:
        cash_flows: Cash flows by period, period 0 undiscounted
        rate: Discount rate per period as decimal (e.g., 0.01 for 1% a month)

    Returns:
        NPV value (may be non-finite for extreme rates)
    """
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(np.sum(flows / (1 + rate) ** periods))


def _npv_derivative(cash_flows: Sequence[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(len(flows))
    with np.errstate(over="ignore", divide="ignore", invalid="ignore"):
        return float(-np.sum(periods * flows / (1 + rate) ** (periods + 1)))


def project_npv(
    initial_investment: float, monthly_cash_flows: Sequence[float], annual_discount_rate: float
) -> float:
    """
    NPV of a project discounted monthly.

    Args:
        initial_investment: Outlay at month 0 (positive number)
        monthly_cash_flows: Net cash flow for months 1..n
        annual_discount_rate: Annual rate as decimal, applied as rate / 12 per month
    """
    flows = build_cash_flows(initial_investment, monthly_cash_flows)
    return calculate_npv(flows, annual_discount_rate / 12)


def calculate_irr(cash_flows: Sequence[float], guess: float = IRR_SEED) -> float:
    """
    Find the per-period IRR using Newton-Raphson.

    Stops on |NPV| < IRR_TOLERANCE, on a near-zero derivative, after
    IRR_MAX_ITERATIONS, or when the rate leaves [RATE_FLOOR, RATE_CEILING]
    (in which case the seed is returned).

    Args:
        cash_flows: Periodic cash flows, period 0 first
        guess: Starting per-period rate

    Returns:
        Per-period rate as decimal
    """
    rate = guess

    for iteration in range(IRR_MAX_ITERATIONS):
        npv = calculate_npv(cash_flows, rate)
        dnpv = _npv_derivative(cash_flows, rate)

        if not (np.isfinite(npv) and np.isfinite(dnpv)):
            logger.debug(f"IRR: non-finite NPV at rate {rate}, resetting to seed")
            return guess

        if abs(npv) < IRR_TOLERANCE:
            return rate

        if abs(dnpv) < DERIVATIVE_EPSILON:
            logger.debug(f"IRR: derivative vanished after {iteration} iterations")
            return rate

        rate = rate - npv / dnpv

        if rate < RATE_FLOOR or rate > RATE_CEILING:
            logger.debug(f"IRR: rate {rate} out of bounds, resetting to seed")
            return guess

    logger.debug(f"IRR did not converge in {IRR_MAX_ITERATIONS} iterations")
    return rate


def monthly_to_annual_irr(monthly_irr: float) -> float:
    """Convert monthly IRR to annual IRR."""
    return ((1 + monthly_irr) ** 12) - 1


def project_irr(initial_investment: float, monthly_cash_flows: Sequence[float]) -> float:
    """Annual IRR, as a percentage, of an outlay followed by monthly flows."""
    flows = build_cash_flows(initial_investment, monthly_cash_flows)
    return monthly_to_annual_irr(calculate_irr(flows)) * 100
