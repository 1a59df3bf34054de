"""
Risk Metrics

Cash runway, the date cash runs out at the current burn, and the share of
recurring revenue lost to churn over six months.

Benchmarks:
- Runway under 6 months is critical, 6-12 is a warning, over 12 is healthy
- 6-month churn impact under 10% is low risk, over 20% is high risk
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.numeric import assert_positive, assert_range, round_to, safe_divide
from bizcalc.calculations.ratios import Band, classify

CHURN_HORIZON_MONTHS = 6

RUNWAY_BANDS = (
    Band(12.0, "healthy", inclusive=False),
    Band(6.0, "warning"),
)
# Churn impact is better when lower, so bands are checked against the negated value
CHURN_IMPACT_BANDS = (
    Band(-10.0, "low", inclusive=False),
    Band(-20.0, "moderate"),
)


@dataclass(frozen=True)
class RiskInput:
    """Monthly figures; monthly_churn_rate is a percentage."""

    current_cash: float
    monthly_burn_rate: float
    monthly_churn_rate: float
    current_mrr: float
    average_contract_value: float
    planned_fundraising: Optional[float] = None
    as_of: Optional[date] = None  # Defaults to today


@dataclass(frozen=True)
class RiskResult:
    runway_months: float
    runway_rating: str
    zero_cash_date: date
    churn_impact_6mo: float
    churn_risk: str
    mrr_at_risk_6mo: float
    contracts_at_risk_6mo: float


class RiskMetricsCalculator:
    """Runway and churn exposure."""

    name = "RiskMetricsCalculator"

    def validate(self, data: RiskInput) -> None:
        assert_positive(data.current_cash, "current_cash")
        assert_positive(data.monthly_burn_rate, "monthly_burn_rate")
        if data.planned_fundraising is not None:
            assert_positive(data.planned_fundraising, "planned_fundraising")
        assert_range(data.monthly_churn_rate, 0, 100, "monthly_churn_rate")
        assert_positive(data.current_mrr, "current_mrr")
        assert_positive(data.average_contract_value, "average_contract_value")

    def calculate(self, data: RiskInput) -> RiskResult:
        self.validate(data)

        available_cash = data.current_cash + (data.planned_fundraising or 0.0)
        runway = round_to(safe_divide(available_cash, data.monthly_burn_rate, 0.0), 2)

        as_of = data.as_of or date.today()
        zero_cash_date = as_of + relativedelta(months=math.floor(runway))

        # Compound probability of losing a customer within the horizon
        retention = (1 - data.monthly_churn_rate / 100) ** CHURN_HORIZON_MONTHS
        churn_impact = (1 - retention) * 100
        mrr_at_risk = data.current_mrr * churn_impact / 100
        contracts_at_risk = safe_divide(mrr_at_risk * 12, data.average_contract_value, 0.0)

        log_calculation(self.name, "Runway (months)", runway)
        log_calculation(self.name, "Churn Impact (6mo)", churn_impact)

        return RiskResult(
            runway_months=runway,
            runway_rating=classify(runway, RUNWAY_BANDS, "critical"),
            zero_cash_date=zero_cash_date,
            churn_impact_6mo=round_to(churn_impact, 2),
            churn_risk=classify(-churn_impact, CHURN_IMPACT_BANDS, "high"),
            mrr_at_risk_6mo=round_to(mrr_at_risk, 2),
            contracts_at_risk_6mo=round_to(contracts_at_risk, 1),
        )

    def generate_recommendations(self, result: RiskResult) -> List[str]:
        recommendations = []

        if result.runway_rating == "critical":
            recommendations.append(
                f"CRITICAL: Only {result.runway_months} months of runway. Cut burn or "
                "secure financing immediately."
            )
        elif result.runway_rating == "warning":
            recommendations.append(
                f"WARNING: {result.runway_months} months of runway. Start the fundraising "
                "process now."
            )
        else:
            recommendations.append(
                f"Healthy runway of {result.runway_months} months. Plan the next funding "
                "round ahead of need."
            )
        recommendations.append(f"Cash runs out around {result.zero_cash_date.isoformat()}.")

        if result.churn_risk == "high":
            recommendations.append(
                f"High churn risk: {result.churn_impact_6mo}% of MRR "
                f"(${result.mrr_at_risk_6mo:,.2f}) at risk over 6 months. Make retention a priority."
            )
        elif result.churn_risk == "moderate":
            recommendations.append(
                f"Moderate churn risk: {result.churn_impact_6mo}% of MRR at risk over "
                "6 months. Monitor closely."
            )

        return recommendations
