"""
Cost-Plus Pricing

Price from unit cost and target gross margin, with strategy variants and an
optional comparison against a competitor's price.
"""

from dataclasses import dataclass
from typing import List, Optional

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.numeric import (
    assert_positive,
    assert_range,
    round_to,
    safe_divide,
)

PREMIUM_MULTIPLIER = 1.15
PENETRATION_MULTIPLIER = 0.85
PRICE_RANGE_LOW = 0.90
PRICE_RANGE_HIGH = 1.10
LOW_MARGIN_TARGET = 20.0
HIGH_MARGIN_TARGET = 60.0


@dataclass(frozen=True)
class PricingInput:
    """desired_margin is a gross margin percentage in [0, 100)."""

    cost_per_unit: float
    desired_margin: float
    competitor_price: Optional[float] = None
    fixed_costs_per_period: Optional[float] = None
    target_volume: Optional[float] = None


@dataclass(frozen=True)
class PriceStrategies:
    premium: float
    competitive: float
    penetration: float


@dataclass(frozen=True)
class PriceRange:
    low: float
    high: float


@dataclass(frozen=True)
class CompetitorComparison:
    difference: float
    percentage_diff: float
    position: str  # "above" or "below"


@dataclass(frozen=True)
class PricingResult:
    recommended_price: float
    minimum_price: float
    gross_profit_per_unit: float
    markup_percentage: float
    price_strategies: PriceStrategies
    recommended_price_range: PriceRange
    competitor_comparison: Optional[CompetitorComparison] = None
    break_even_price: Optional[float] = None


class PricingCalculator:
    """Cost-plus price recommendation."""

    name = "PricingCalculator"

    def validate(self, data: PricingInput) -> None:
        assert_positive(data.cost_per_unit, "cost_per_unit")
        assert_range(data.desired_margin, 0, 100, "desired_margin", inclusive_max=False)

        if data.competitor_price is not None:
            assert_positive(data.competitor_price, "competitor_price")
        if data.fixed_costs_per_period is not None:
            assert_positive(data.fixed_costs_per_period, "fixed_costs_per_period")
        if data.target_volume is not None:
            assert_positive(data.target_volume, "target_volume")

    def calculate(self, data: PricingInput) -> PricingResult:
        self.validate(data)

        cost = data.cost_per_unit
        recommended_price = safe_divide(cost, 1 - data.desired_margin / 100, cost)
        gross_profit = recommended_price - cost
        markup = safe_divide(gross_profit, cost, 0.0) * 100

        comparison = None
        if data.competitor_price is not None:
            difference = recommended_price - data.competitor_price
            comparison = CompetitorComparison(
                difference=round_to(difference, 2),
                percentage_diff=round_to(safe_divide(difference, data.competitor_price, 0.0) * 100, 2),
                position="above" if difference > 0 else "below",
            )

        break_even_price = None
        if data.fixed_costs_per_period is not None and data.target_volume is not None:
            break_even_price = round_to(cost + data.fixed_costs_per_period / data.target_volume, 2)

        log_calculation(self.name, "Recommended Price", recommended_price)
        log_calculation(self.name, "Markup", markup)

        return PricingResult(
            recommended_price=round_to(recommended_price, 2),
            minimum_price=round_to(cost, 2),
            gross_profit_per_unit=round_to(gross_profit, 2),
            markup_percentage=round_to(markup, 2),
            price_strategies=PriceStrategies(
                premium=round_to(recommended_price * PREMIUM_MULTIPLIER, 2),
                competitive=round_to(recommended_price, 2),
                penetration=round_to(recommended_price * PENETRATION_MULTIPLIER, 2),
            ),
            recommended_price_range=PriceRange(
                low=round_to(recommended_price * PRICE_RANGE_LOW, 2),
                high=round_to(recommended_price * PRICE_RANGE_HIGH, 2),
            ),
            competitor_comparison=comparison,
            break_even_price=break_even_price,
        )

    def generate_recommendations(self, result: PricingResult, data: PricingInput) -> List[str]:
        recommendations = []

        if data.desired_margin < LOW_MARGIN_TARGET:
            recommendations.append(
                "Low margin target (< 20%). Consider if this is sustainable long-term."
            )
        elif data.desired_margin > HIGH_MARGIN_TARGET:
            recommendations.append(
                "High margin target (> 60%). Ensure value proposition justifies premium pricing."
            )

        comparison = result.competitor_comparison
        if comparison is not None:
            gap = abs(comparison.percentage_diff)
            if comparison.position == "above":
                recommendations.append(f"Your price is {gap:.1f}% above competitors.")
                recommendations.append("Ensure your product/service has clear differentiators.")
            else:
                recommendations.append(f"Your price is {gap:.1f}% below competitors.")
                recommendations.append("You may have room to increase prices.")

        price_range = result.recommended_price_range
        recommendations.append(
            f"Recommended price range: ${price_range.low:,.2f} - ${price_range.high:,.2f}"
        )
        recommendations.append(
            f"At recommended price, you earn ${result.gross_profit_per_unit:,.2f} per unit."
        )

        if result.break_even_price is not None and result.recommended_price < result.break_even_price:
            recommendations.append(
                f"Recommended price does not cover fixed costs at target volume "
                f"(break-even price ${result.break_even_price:,.2f})."
            )

        return recommendations
