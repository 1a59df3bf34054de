"""
Cohort Profitability

Contribution margin by customer cohort, used to separate profitable
segments from loss-making ones.
"""

from dataclasses import dataclass
from typing import List, Optional

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import assert_positive, round_to, safe_divide
from bizcalc.calculations.ratios import Band, classify, payback_months

# Contribution margin %: > 40 high value, 20-40 acceptable, 0-20 below average
MARGIN_BANDS = (
    Band(40.0, "high_value"),
    Band(20.0, "acceptable"),
    Band(0.0, "below_average"),
)
# Profitability index: > 2 excellent, 1-2 good, 0-1 marginal
PROFITABILITY_BANDS = (
    Band(2.0, "excellent"),
    Band(1.0, "good"),
    Band(0.0, "marginal"),
)


@dataclass(frozen=True)
class CohortInput:
    cohort_name: str
    cohort_revenue: float
    direct_costs: float
    customer_count: float
    acquisition_cost: float
    servicing_cost_per_customer: float


@dataclass(frozen=True)
class CohortResult:
    cohort_name: str
    contribution_margin: float
    margin_per_customer: float
    profitability_index: float
    is_losing_money: bool
    margin_rating: str
    profitability_rating: str
    acquisition_payback_periods: Optional[float]


class CohortMetricsCalculator:
    """Profitability of a customer cohort."""

    name = "CohortMetricsCalculator"

    def validate(self, data: CohortInput) -> None:
        if not isinstance(data.cohort_name, str) or not data.cohort_name.strip():
            raise ValidationError("cohort_name is required", "cohort_name")

        assert_positive(data.cohort_revenue, "cohort_revenue")
        assert_positive(data.direct_costs, "direct_costs")
        assert_positive(data.customer_count, "customer_count")
        assert_positive(data.acquisition_cost, "acquisition_cost")
        assert_positive(data.servicing_cost_per_customer, "servicing_cost_per_customer")

    def calculate(self, data: CohortInput) -> CohortResult:
        self.validate(data)

        total_margin = data.cohort_revenue - data.direct_costs
        contribution_margin = safe_divide(total_margin, data.cohort_revenue, 0.0) * 100
        margin_per_customer = safe_divide(total_margin, data.customer_count, 0.0)

        # Servicing periods the margin covers once acquisition cost is recovered
        profitability_index = safe_divide(
            margin_per_customer - data.acquisition_cost,
            data.servicing_cost_per_customer,
            0.0,
        )

        log_calculation(self.name, "Contribution Margin", contribution_margin, cohort=data.cohort_name)
        log_calculation(self.name, "Margin per Customer", margin_per_customer)
        log_calculation(self.name, "Profitability Index", profitability_index)

        return CohortResult(
            cohort_name=data.cohort_name,
            contribution_margin=round_to(contribution_margin, 2),
            margin_per_customer=round_to(margin_per_customer, 2),
            profitability_index=round_to(profitability_index, 2),
            is_losing_money=contribution_margin < 0,
            margin_rating=classify(contribution_margin, MARGIN_BANDS, "loss_making"),
            profitability_rating=classify(profitability_index, PROFITABILITY_BANDS, "unprofitable"),
            acquisition_payback_periods=payback_months(data.acquisition_cost, margin_per_customer),
        )

    def generate_recommendations(self, result: CohortResult) -> List[str]:
        recommendations = []

        if result.margin_rating == "loss_making":
            recommendations.append(
                "CRITICAL: This cohort is losing money. Consider discontinuing service "
                "or restructuring pricing immediately."
            )
            recommendations.append(
                "Analyze which cost components are driving losses and explore cost "
                "reduction opportunities."
            )
        elif result.margin_rating == "below_average":
            recommendations.append(
                "Contribution margin is below industry average (20%). Review pricing "
                "strategy for this segment."
            )
            recommendations.append(
                "Consider upselling higher-margin products/services to this cohort."
            )
        elif result.margin_rating == "high_value":
            recommendations.append(
                "High-value cohort identified. Consider investing in expansion and "
                "customer acquisition for this segment."
            )
            recommendations.append(
                "Analyze what makes this cohort profitable and replicate success "
                "factors in other segments."
            )

        if result.profitability_rating == "unprofitable":
            recommendations.append(
                "Acquisition costs exceed lifetime contribution. Reduce CAC or increase "
                "customer value."
            )
        elif result.profitability_rating == "marginal":
            recommendations.append(
                "Marginal profitability. Focus on retention to extend customer lifetime value."
            )

        return recommendations
