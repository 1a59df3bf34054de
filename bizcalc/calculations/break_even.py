"""
Break-Even Analysis

Units and revenue needed to cover fixed costs, contribution margin and
margin of safety against current sales.
"""

from dataclasses import dataclass
from typing import List, Optional

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import (
    assert_integer,
    assert_positive,
    round_to,
    safe_divide,
)

MARGIN_OF_SAFETY_BENCHMARKS = {
    "healthy": 25.0,
    "acceptable": 10.0,
    "critical": 0.0,
}
LOW_CONTRIBUTION_MARGIN = 30.0
STRONG_CONTRIBUTION_MARGIN = 60.0


@dataclass(frozen=True)
class BreakEvenInput:
    fixed_costs: float
    price_per_unit: float
    variable_cost_per_unit: float
    current_sales_units: Optional[float] = None
    period_months: int = 12


@dataclass(frozen=True)
class BreakEvenResult:
    break_even_units: float
    break_even_revenue: float
    contribution_margin_per_unit: float
    contribution_margin_ratio: float  # Percent of price
    units_per_month: float
    revenue_per_month: float
    margin_of_safety: Optional[float] = None  # Percent of current sales
    margin_of_safety_units: Optional[float] = None
    is_above_break_even: Optional[bool] = None


class BreakEvenCalculator:
    """Break-even point for a single product or service."""

    name = "BreakEvenCalculator"

    def validate(self, data: BreakEvenInput) -> None:
        assert_positive(data.fixed_costs, "fixed_costs")
        assert_positive(data.price_per_unit, "price_per_unit")
        assert_positive(data.variable_cost_per_unit, "variable_cost_per_unit")

        if data.price_per_unit <= data.variable_cost_per_unit:
            raise ValidationError(
                "price_per_unit must be greater than variable_cost_per_unit",
                "price_per_unit",
            )

        if data.current_sales_units is not None:
            assert_positive(data.current_sales_units, "current_sales_units")

        assert_positive(data.period_months, "period_months")
        assert_integer(data.period_months, "period_months")

    def calculate(self, data: BreakEvenInput) -> BreakEvenResult:
        self.validate(data)

        contribution_margin = data.price_per_unit - data.variable_cost_per_unit
        contribution_margin_ratio = safe_divide(contribution_margin, data.price_per_unit, 0.0)

        break_even_units = safe_divide(data.fixed_costs, contribution_margin, 0.0)
        break_even_revenue = break_even_units * data.price_per_unit

        margin_of_safety = None
        margin_of_safety_units = None
        is_above_break_even = None

        if data.current_sales_units is not None:
            units = data.current_sales_units - break_even_units
            margin_of_safety_units = round_to(units, 0)
            margin_of_safety = round_to(safe_divide(units, data.current_sales_units, 0.0) * 100, 2)
            is_above_break_even = data.current_sales_units >= break_even_units

        log_calculation(self.name, "Break-even Units", break_even_units)
        log_calculation(self.name, "Break-even Revenue", break_even_revenue)
        log_calculation(self.name, "Contribution Margin Ratio", contribution_margin_ratio)

        return BreakEvenResult(
            break_even_units=round_to(break_even_units, 0),
            break_even_revenue=round_to(break_even_revenue, 2),
            contribution_margin_per_unit=round_to(contribution_margin, 2),
            contribution_margin_ratio=round_to(contribution_margin_ratio * 100, 2),
            units_per_month=round_to(break_even_units / data.period_months, 0),
            revenue_per_month=round_to(break_even_revenue / data.period_months, 2),
            margin_of_safety=margin_of_safety,
            margin_of_safety_units=margin_of_safety_units,
            is_above_break_even=is_above_break_even,
        )

    def generate_recommendations(self, result: BreakEvenResult) -> List[str]:
        """Ordered advice from the margin of safety and contribution margin bands."""
        recommendations = []

        if result.margin_of_safety is not None:
            if result.margin_of_safety < MARGIN_OF_SAFETY_BENCHMARKS["critical"]:
                recommendations.append(
                    f"CRITICAL: You are {abs(result.margin_of_safety_units):.0f} units BELOW break-even."
                )
                recommendations.append("Immediate actions needed: Reduce costs or increase prices.")
            elif result.margin_of_safety < MARGIN_OF_SAFETY_BENCHMARKS["acceptable"]:
                recommendations.append(
                    "Low margin of safety. Small sales decrease could cause losses."
                )
                recommendations.append("Consider building a cash reserve for slow periods.")
            elif result.margin_of_safety < MARGIN_OF_SAFETY_BENCHMARKS["healthy"]:
                recommendations.append(
                    "Acceptable margin of safety. Monitor sales trends closely."
                )
            else:
                recommendations.append(
                    "Healthy margin of safety. Business is resilient to sales fluctuations."
                )

        if result.contribution_margin_ratio < LOW_CONTRIBUTION_MARGIN:
            recommendations.append(
                "Low contribution margin. Consider reducing variable costs or increasing prices."
            )
        elif result.contribution_margin_ratio > STRONG_CONTRIBUTION_MARGIN:
            recommendations.append("Strong contribution margin. Focus on increasing sales volume.")

        recommendations.append(
            f"Target: Sell at least {result.units_per_month:.0f} units/month to break even."
        )

        return recommendations
