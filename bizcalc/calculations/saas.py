"""
SaaS Unit Economics

LTV, LTV/CAC, CAC payback, net revenue retention and the Rule of 40.

Benchmarks:
- LTV/CAC >= 3 is healthy, below 1 is unsustainable
- CAC payback under 12 months is excellent, over 18 is concerning
- NRR above 120% is excellent, below 90% signals a churn problem
- Rule of 40 >= 40 is healthy
"""

from dataclasses import dataclass

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.numeric import (
    assert_non_negative,
    assert_positive,
    assert_range,
    round_to,
    safe_divide,
)
from bizcalc.calculations.ratios import Band, classify

LTV_CAC_BANDS = (
    Band(3.0, "healthy"),
    Band(1.0, "acceptable"),
)
NRR_BANDS = (
    Band(120.0, "excellent"),
    Band(100.0, "good"),
    Band(90.0, "acceptable"),
)
RULE_OF_40_BANDS = (
    Band(40.0, "healthy"),
    Band(20.0, "acceptable"),
)
# Payback is better when shorter, so bands are checked against the negated value
PAYBACK_BANDS = (
    Band(-12.0, "excellent", inclusive=False),
    Band(-18.0, "acceptable"),
)


@dataclass(frozen=True)
class SaaSInput:
    """Monthly figures; churn, margins and growth are percentages."""

    average_revenue_per_user: float
    churn_rate: float
    cac_cost: float
    gross_margin: float
    starting_mrr: float
    expansion_mrr: float
    churned_mrr: float
    contracted_mrr: float
    revenue_growth_rate: float
    profit_margin: float


@dataclass(frozen=True)
class SaaSResult:
    ltv: float
    cac: float
    ltv_cac_ratio: float
    ltv_cac_health: str
    payback_months: float
    payback_rating: str
    nrr: float
    nrr_rating: str
    rule_of_40: float
    rule_of_40_health: str


class SaaSMetricsCalculator:
    name = "SaaSMetricsCalculator"

    def validate(self, data: SaaSInput) -> None:
        assert_positive(data.average_revenue_per_user, "average_revenue_per_user")
        assert_range(data.churn_rate, 0, 100, "churn_rate")
        assert_positive(data.cac_cost, "cac_cost")
        assert_range(data.gross_margin, 0, 100, "gross_margin")
        assert_positive(data.starting_mrr, "starting_mrr")
        assert_non_negative(data.expansion_mrr, "expansion_mrr")
        assert_non_negative(data.churned_mrr, "churned_mrr")
        assert_non_negative(data.contracted_mrr, "contracted_mrr")
        assert_range(data.revenue_growth_rate, -100, 1000, "revenue_growth_rate")
        assert_range(data.profit_margin, -100, 100, "profit_margin")

    def calculate(self, data: SaaSInput) -> SaaSResult:
        self.validate(data)

        monthly_gross_profit = data.average_revenue_per_user * data.gross_margin / 100

        # Zero churn has no finite lifetime; reported as 0
        ltv = safe_divide(monthly_gross_profit, data.churn_rate / 100, 0.0)
        ltv_cac_ratio = safe_divide(ltv, data.cac_cost, 0.0)
        payback = safe_divide(data.cac_cost, monthly_gross_profit, 0.0)

        ending_mrr = (
            data.starting_mrr + data.expansion_mrr - data.churned_mrr - data.contracted_mrr
        )
        nrr = safe_divide(ending_mrr, data.starting_mrr, 0.0) * 100
        rule_of_40 = data.revenue_growth_rate + data.profit_margin

        log_calculation(self.name, "LTV", ltv)
        log_calculation(self.name, "LTV/CAC", ltv_cac_ratio)
        log_calculation(self.name, "Payback Period", payback)
        log_calculation(self.name, "NRR", nrr)
        log_calculation(self.name, "Rule of 40", rule_of_40)

        if monthly_gross_profit > 0:
            payback_rating = classify(-payback, PAYBACK_BANDS, "concerning")
        else:
            payback_rating = "concerning"

        return SaaSResult(
            ltv=round_to(ltv, 2),
            cac=round_to(data.cac_cost, 2),
            ltv_cac_ratio=round_to(ltv_cac_ratio, 2),
            ltv_cac_health=classify(ltv_cac_ratio, LTV_CAC_BANDS, "unsustainable"),
            payback_months=round_to(payback, 2),
            payback_rating=payback_rating,
            nrr=round_to(nrr, 2),
            nrr_rating=classify(nrr, NRR_BANDS, "concerning"),
            rule_of_40=round_to(rule_of_40, 2),
            rule_of_40_health=classify(rule_of_40, RULE_OF_40_BANDS, "needs_attention"),
        )
