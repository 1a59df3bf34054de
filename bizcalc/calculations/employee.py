"""
Employee ROI

Return on a hiring decision: first-year ROI, hourly productivity and
payback of onboarding costs, compared against role benchmarks.
"""

from dataclasses import dataclass
from typing import List, Optional

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import (
    assert_positive,
    assert_range,
    round_to,
    safe_divide,
)
from bizcalc.calculations.ratios import Band, classify, compare_to_benchmark, payback_months

WEEKS_PER_YEAR = 52
ASSUMED_BENEFITS_RATIO = 0.20

ROI_BANDS = (
    Band(100.0, "excellent", inclusive=False),
    Band(50.0, "good", inclusive=False),
    Band(0.0, "moderate", inclusive=False),
)

# Average fully-loaded cost per hour and revenue/cost productivity by role
ROLE_BENCHMARKS = {
    "sales": {"avg_cost_per_hour": 35.0, "avg_productivity": 3.0},
    "operations": {"avg_cost_per_hour": 28.0, "avg_productivity": 2.0},
    "technical": {"avg_cost_per_hour": 45.0, "avg_productivity": 2.5},
    "administrative": {"avg_cost_per_hour": 22.0, "avg_productivity": 1.5},
}


@dataclass(frozen=True)
class EmployeeROIInput:
    annual_salary: float
    annual_benefits: float
    onboarding_costs: float
    revenue_generated: float
    hours_per_week: float
    role_type: str = "operations"


@dataclass(frozen=True)
class EmployeeBenchmarkComparison:
    cost_efficiency: str  # "above", "average" or "below"
    productivity_level: str  # "high", "average" or "low"


@dataclass(frozen=True)
class EmployeeROIResult:
    total_cost: float
    roi_percentage: float
    roi_rating: str
    net_contribution: float
    revenue_per_dollar_spent: float
    cost_per_hour: float
    revenue_per_hour: float
    break_even_revenue: float
    productivity_ratio: float
    is_worth_hiring: bool
    payback_months: Optional[float]
    benchmark_comparison: EmployeeBenchmarkComparison


@dataclass(frozen=True)
class SalaryRange:
    max_total_cost: float
    min_salary: float
    max_salary: float
    assumed_benefits_ratio: float


class EmployeeROICalculator:
    """First-year return on a new hire."""

    name = "EmployeeROICalculator"

    def validate(self, data: EmployeeROIInput) -> None:
        assert_positive(data.annual_salary, "annual_salary")
        assert_positive(data.annual_benefits, "annual_benefits")
        assert_positive(data.onboarding_costs, "onboarding_costs")
        assert_positive(data.revenue_generated, "revenue_generated")
        assert_range(data.hours_per_week, 1, 80, "hours_per_week")

        if data.role_type not in ROLE_BENCHMARKS:
            raise ValidationError(
                f"role_type must be one of {', '.join(sorted(ROLE_BENCHMARKS))}", "role_type"
            )

    def calculate(self, data: EmployeeROIInput) -> EmployeeROIResult:
        self.validate(data)

        recurring_cost = data.annual_salary + data.annual_benefits
        total_cost = recurring_cost + data.onboarding_costs

        net_contribution = data.revenue_generated - total_cost
        roi = safe_divide(net_contribution, total_cost, 0.0) * 100
        revenue_per_dollar = safe_divide(data.revenue_generated, total_cost, 0.0)

        annual_hours = data.hours_per_week * WEEKS_PER_YEAR
        cost_per_hour = safe_divide(recurring_cost, annual_hours, 0.0)
        revenue_per_hour = safe_divide(data.revenue_generated, annual_hours, 0.0)
        productivity_ratio = safe_divide(revenue_per_hour, cost_per_hour, 0.0)

        benchmark = ROLE_BENCHMARKS[data.role_type]
        comparison = EmployeeBenchmarkComparison(
            # Cheaper than the benchmark is better cost efficiency
            cost_efficiency=compare_to_benchmark(
                cost_per_hour, benchmark["avg_cost_per_hour"], 0.9, 1.1,
                ("above", "average", "below"),
            ),
            productivity_level=compare_to_benchmark(
                productivity_ratio, benchmark["avg_productivity"], 0.8, 1.2,
                ("low", "average", "high"),
            ),
        )

        log_calculation(self.name, "Employee ROI", roi, role=data.role_type)
        log_calculation(self.name, "Productivity Ratio", productivity_ratio)
        log_calculation(self.name, "Net Contribution", net_contribution)

        return EmployeeROIResult(
            total_cost=round_to(total_cost, 2),
            roi_percentage=round_to(roi, 2),
            roi_rating=classify(roi, ROI_BANDS, "negative"),
            net_contribution=round_to(net_contribution, 2),
            revenue_per_dollar_spent=round_to(revenue_per_dollar, 2),
            cost_per_hour=round_to(cost_per_hour, 2),
            revenue_per_hour=round_to(revenue_per_hour, 2),
            break_even_revenue=round_to(total_cost, 2),
            productivity_ratio=round_to(productivity_ratio, 2),
            is_worth_hiring=roi > 0 and productivity_ratio > 1,
            payback_months=payback_months(data.onboarding_costs, net_contribution / 12),
            benchmark_comparison=comparison,
        )

    def generate_recommendations(self, result: EmployeeROIResult) -> List[str]:
        recommendations = []

        if not result.is_worth_hiring:
            recommendations.append(
                "This hire may not generate positive ROI based on projected revenue."
            )
            recommendations.append(
                "Consider: Can this role generate more revenue with better tools/training?"
            )
        else:
            recommendations.append(
                f"Positive ROI: Employee generates ${result.revenue_per_dollar_spent:.2f} "
                "for every $1 spent."
            )

        if result.roi_rating == "excellent":
            recommendations.append("Excellent ROI! Consider hiring additional similar roles.")
        elif result.roi_rating == "good":
            recommendations.append("Good ROI. This is a valuable team member.")
        elif result.roi_rating == "moderate":
            recommendations.append(
                "Moderate ROI. Look for ways to increase productivity or reduce costs."
            )

        level = result.benchmark_comparison.productivity_level
        if level == "high":
            recommendations.append("Productivity is ABOVE industry average. Great performer!")
        elif level == "low":
            recommendations.append(
                "Productivity is BELOW industry average. Consider training or process improvements."
            )

        if result.payback_months is not None:
            recommendations.append(
                f"Onboarding investment recovered in {result.payback_months} months."
            )

        return recommendations

    def calculate_optimal_salary_range(
        self, expected_revenue: float, target_roi: float = 50.0
    ) -> SalaryRange:
        """
        Salary band that still reaches a target ROI on expected revenue.

        Assumes benefits cost about 20% of salary.
        """
        assert_positive(expected_revenue, "expected_revenue")
        assert_range(target_roi, 0, 1000, "target_roi")

        max_total_cost = expected_revenue / (1 + target_roi / 100)
        salary_portion = max_total_cost / (1 + ASSUMED_BENEFITS_RATIO)

        return SalaryRange(
            max_total_cost=round_to(max_total_cost, 0),
            min_salary=round_to(salary_portion * 0.85, 0),
            max_salary=round_to(salary_portion, 0),
            assumed_benefits_ratio=ASSUMED_BENEFITS_RATIO,
        )
