"""
Standard Project Metrics

Builds a monthly cash flow projection from project parameters and derives
ROI, NPV, IRR and payback period. Also runs best/worst case scenarios and
sensitivity adjustments on top of the same calculator.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Tuple

from bizcalc.calculations import irr
from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.numeric import (
    assert_integer,
    assert_positive,
    assert_range,
    round_to,
    safe_divide,
)

MAX_PROJECT_MONTHS = 600


@dataclass(frozen=True)
class StandardMetricsInput:
    """Project parameters. Rates are percentages, duration is in months."""

    initial_investment: float
    discount_rate: float
    project_duration: int
    yearly_revenue: float
    revenue_growth: float
    operating_costs: float
    maintenance_costs: float
    multiplier: float = 1.0  # Revenue scaling for best/worst case scenarios


@dataclass(frozen=True)
class StandardMetricsResult:
    roi: float
    npv: float
    irr: float
    payback_period: float
    monthly_cash_flow: List[float]
    cumulative_cash_flow: List[float]


@dataclass(frozen=True)
class ScenarioResults:
    expected: StandardMetricsResult
    best: StandardMetricsResult
    worst: StandardMetricsResult


def calculate_escalation_factor(annual_rate: float, period: int) -> float:
    """
    Annual step-up factor for a given month.

    Args:
        annual_rate: Annual growth rate as decimal
        period: Month number (0-based); growth steps up every 12 months
    """
    years = period // 12
    return (1 + annual_rate) ** years


def generate_monthly_cash_flows(data: StandardMetricsInput) -> Tuple[List[float], List[float]]:
    """
    Project monthly net cash flows and the running cumulative position.

    The cumulative series starts from -initial_investment.

    Returns:
        (monthly net cash flows, cumulative cash flows)
    """
    monthly: List[float] = []
    cumulative: List[float] = []
    running = -data.initial_investment

    monthly_costs = (data.operating_costs + data.maintenance_costs) / 12

    for period in range(int(data.project_duration)):
        growth_factor = calculate_escalation_factor(data.revenue_growth / 100, period)
        monthly_revenue = data.yearly_revenue * growth_factor * data.multiplier / 12

        net_cash_flow = monthly_revenue - monthly_costs
        monthly.append(net_cash_flow)

        running += net_cash_flow
        cumulative.append(running)

    return monthly, cumulative


def calculate_roi(initial_investment: float, cash_flows: List[float]) -> float:
    """ROI as a percentage: (sum of cash flows - investment) / investment."""
    total = sum(cash_flows)
    return safe_divide(total - initial_investment, initial_investment, 0.0) * 100


def calculate_payback_period(initial_investment: float, cash_flows: List[float]) -> float:
    """
    Months needed to recover the initial investment.

    Interpolates linearly within the month where the cumulative position
    turns non-negative. Returns the horizon length when it never does.
    """
    cumulative = -initial_investment

    for month, cash_flow in enumerate(cash_flows):
        previous = cumulative
        cumulative += cash_flow

        if cumulative >= 0:
            fraction = safe_divide(-previous, cash_flow, 0.0)
            return month + fraction

    return float(len(cash_flows))


class StandardMetricsCalculator:
    """ROI, NPV, IRR and payback period for a project."""

    name = "StandardMetricsCalculator"

    def validate(self, data: StandardMetricsInput) -> None:
        assert_positive(data.initial_investment, "initial_investment")
        assert_range(data.discount_rate, 0, 100, "discount_rate")
        assert_range(data.project_duration, 1, MAX_PROJECT_MONTHS, "project_duration")
        assert_integer(data.project_duration, "project_duration")
        assert_positive(data.yearly_revenue, "yearly_revenue")
        assert_range(data.revenue_growth, -100, 1000, "revenue_growth")
        assert_positive(data.operating_costs, "operating_costs")
        assert_positive(data.maintenance_costs, "maintenance_costs")
        assert_positive(data.multiplier, "multiplier")

    def calculate(self, data: StandardMetricsInput) -> StandardMetricsResult:
        self.validate(data)

        monthly, cumulative = generate_monthly_cash_flows(data)

        roi = calculate_roi(data.initial_investment, monthly)
        npv = irr.project_npv(data.initial_investment, monthly, data.discount_rate / 100)
        payback = calculate_payback_period(data.initial_investment, monthly)
        irr_value = irr.project_irr(data.initial_investment, monthly)

        log_calculation(self.name, "ROI", roi)
        log_calculation(self.name, "NPV", npv)
        log_calculation(self.name, "IRR", irr_value)
        log_calculation(self.name, "PaybackPeriod", payback)

        return StandardMetricsResult(
            roi=round_to(roi, 2),
            npv=round_to(npv, 2),
            irr=round_to(irr_value, 2),
            payback_period=round_to(payback, 2),
            monthly_cash_flow=[round_to(cf, 2) for cf in monthly],
            cumulative_cash_flow=[round_to(cf, 2) for cf in cumulative],
        )


def calculate_all_scenarios(
    data: StandardMetricsInput,
    best_multiplier: float = 1.3,
    worst_multiplier: float = 0.7,
) -> ScenarioResults:
    """Run the expected case (multiplier 1.0) plus best and worst revenue cases."""
    calculator = StandardMetricsCalculator()
    return ScenarioResults(
        expected=calculator.calculate(replace(data, multiplier=1.0)),
        best=calculator.calculate(replace(data, multiplier=best_multiplier)),
        worst=calculator.calculate(replace(data, multiplier=worst_multiplier)),
    )


def apply_adjustments(
    data: StandardMetricsInput,
    sales_adjustment: float = 0.0,
    costs_adjustment: float = 0.0,
    discount_adjustment: float = 0.0,
) -> StandardMetricsInput:
    """
    Return a sensitivity-adjusted copy of the input.

    Args:
        sales_adjustment: Percent change to yearly revenue (-50 to +50)
        costs_adjustment: Percent change to operating and maintenance costs (-50 to +50)
        discount_adjustment: Absolute change to the discount rate in points (-5 to +5)
    """
    assert_range(sales_adjustment, -50, 50, "sales_adjustment")
    assert_range(costs_adjustment, -50, 50, "costs_adjustment")
    assert_range(discount_adjustment, -5, 5, "discount_adjustment")

    cost_factor = 1 + costs_adjustment / 100
    return replace(
        data,
        yearly_revenue=data.yearly_revenue * (1 + sales_adjustment / 100),
        operating_costs=data.operating_costs * cost_factor,
        maintenance_costs=data.maintenance_costs * cost_factor,
        discount_rate=data.discount_rate + discount_adjustment,
    )


def scenario_differences(
    base: StandardMetricsResult, adjusted: StandardMetricsResult
) -> Dict[str, float]:
    """Metric deltas between an adjusted scenario and the base case."""
    return {
        "roi_diff": round_to(adjusted.roi - base.roi, 2),
        "npv_diff": round_to(adjusted.npv - base.npv, 2),
        "payback_diff": round_to(adjusted.payback_period - base.payback_period, 2),
        "irr_diff": round_to(adjusted.irr - base.irr, 2),
    }
