"""
Operational Efficiency

Three indices for where money leaks out of operations:

- OFI (Operational Friction Index): annual cost of manual process hours as a
  share of revenue. Under 0.03 is optimal, over 0.08 calls for automation.
- TFDI (Tech-Debt Financial Drag Index): maintenance share of the
  engineering budget plus annual incident cost, normalized by that budget.
  Under 0.15 is optimal, over 0.25 makes refactoring a priority.
- SER (Strategic Efficiency Ratio): revenue growth relative to burn growth.
  Above 1.5 is excellent, below 0.8 calls for cost optimization. A falling
  burn rate earns a 1.5x bonus.
"""

from dataclasses import dataclass
from typing import List

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import assert_positive, assert_range, round_to, safe_divide
from bizcalc.calculations.ratios import Band, classify

WEEKS_PER_YEAR = 52
BURN_DECREASE_BONUS = 1.5
# Burn change assumed when the burn rate is flat
FLAT_BURN_CHANGE = 0.01

# OFI and TFDI are better when lower, so bands are checked against the negated value
OFI_BANDS = (
    Band(-0.03, "optimal", inclusive=False),
    Band(-0.08, "acceptable"),
)
TFDI_BANDS = (
    Band(-0.15, "optimal", inclusive=False),
    Band(-0.25, "acceptable"),
)
SER_BANDS = (
    Band(1.5, "excellent", inclusive=False),
    Band(1.0, "good"),
    Band(0.8, "acceptable"),
)


@dataclass(frozen=True)
class EfficiencyInput:
    """
    Operational, engineering and growth figures.

    automation_potential is the percentage of manual hours that could be
    automated. Burn rates are monthly; revenues are for comparable periods.
    """

    manual_process_hours_per_week: float
    average_hourly_cost: float
    automation_potential: float
    maintenance_hours_per_sprint: float
    total_dev_hours_per_sprint: float
    dev_team_annual_cost: float
    incident_cost_per_month: float
    current_revenue: float
    previous_revenue: float
    current_burn_rate: float
    previous_burn_rate: float


@dataclass(frozen=True)
class EfficiencyResult:
    ofi: float
    ofi_rating: str  # "optimal", "acceptable" or "high_friction"
    annual_manual_cost: float
    automation_savings: float
    tfdi: float
    tfdi_rating: str  # "optimal", "acceptable" or "high_drag"
    annual_tech_debt_cost: float
    ser: float
    ser_rating: str  # "excellent", "good", "acceptable" or "concerning"


class OperationalEfficiencyCalculator:
    """Operational friction, tech-debt drag and growth efficiency."""

    name = "OperationalEfficiencyCalculator"

    def validate(self, data: EfficiencyInput) -> None:
        assert_positive(data.manual_process_hours_per_week, "manual_process_hours_per_week")
        assert_positive(data.average_hourly_cost, "average_hourly_cost")
        assert_range(data.automation_potential, 0, 100, "automation_potential")

        assert_positive(data.maintenance_hours_per_sprint, "maintenance_hours_per_sprint")
        assert_positive(data.total_dev_hours_per_sprint, "total_dev_hours_per_sprint")
        assert_positive(data.dev_team_annual_cost, "dev_team_annual_cost")
        assert_positive(data.incident_cost_per_month, "incident_cost_per_month")

        assert_positive(data.current_revenue, "current_revenue")
        assert_positive(data.previous_revenue, "previous_revenue")
        assert_positive(data.current_burn_rate, "current_burn_rate")
        assert_positive(data.previous_burn_rate, "previous_burn_rate")

        if data.maintenance_hours_per_sprint > data.total_dev_hours_per_sprint:
            raise ValidationError(
                "maintenance_hours_per_sprint cannot exceed total_dev_hours_per_sprint",
                "maintenance_hours_per_sprint",
            )

    def calculate(self, data: EfficiencyInput) -> EfficiencyResult:
        self.validate(data)

        annual_manual_cost = (
            data.manual_process_hours_per_week * data.average_hourly_cost * WEEKS_PER_YEAR
        )
        ofi = safe_divide(annual_manual_cost, data.current_revenue, 0.0)
        automation_savings = annual_manual_cost * data.automation_potential / 100

        maintenance_ratio = safe_divide(
            data.maintenance_hours_per_sprint, data.total_dev_hours_per_sprint, 0.0
        )
        tech_debt_cost = (
            maintenance_ratio * data.dev_team_annual_cost + data.incident_cost_per_month * 12
        )
        tfdi = safe_divide(tech_debt_cost, data.dev_team_annual_cost, 0.0)

        ser = self._strategic_efficiency(data)

        log_calculation(self.name, "OFI", ofi)
        log_calculation(self.name, "TFDI", tfdi)
        log_calculation(self.name, "SER", ser)

        return EfficiencyResult(
            ofi=round_to(ofi, 4),
            ofi_rating=classify(-ofi, OFI_BANDS, "high_friction"),
            annual_manual_cost=round_to(annual_manual_cost, 2),
            automation_savings=round_to(automation_savings, 2),
            tfdi=round_to(tfdi, 4),
            tfdi_rating=classify(-tfdi, TFDI_BANDS, "high_drag"),
            annual_tech_debt_cost=round_to(tech_debt_cost, 2),
            ser=round_to(ser, 4),
            ser_rating=classify(ser, SER_BANDS, "concerning"),
        )

    def _strategic_efficiency(self, data: EfficiencyInput) -> float:
        revenue_growth = safe_divide(
            data.current_revenue - data.previous_revenue, data.previous_revenue, 0.0
        )
        burn_change = safe_divide(
            data.current_burn_rate - data.previous_burn_rate,
            data.previous_burn_rate,
            0.0,
        )

        ser = safe_divide(revenue_growth, abs(burn_change) or FLAT_BURN_CHANGE, 0.0)
        if burn_change < 0:
            ser *= BURN_DECREASE_BONUS
        return ser

    def generate_recommendations(self, result: EfficiencyResult) -> List[str]:
        recommendations = []

        if result.ofi_rating == "high_friction":
            recommendations.append(
                f"High operational friction: manual processes cost "
                f"${result.annual_manual_cost:,.2f} per year. Automation is strongly recommended."
            )
        elif result.ofi_rating == "acceptable":
            recommendations.append(
                "Operational friction is acceptable, but automation opportunities exist."
            )
        if result.automation_savings > 0 and result.ofi_rating != "optimal":
            recommendations.append(
                f"Automating eligible work could save ${result.automation_savings:,.2f} per year."
            )

        if result.tfdi_rating == "high_drag":
            recommendations.append(
                f"Tech debt drags ${result.annual_tech_debt_cost:,.2f} per year from engineering. "
                "Prioritize refactoring."
            )
        elif result.tfdi_rating == "acceptable":
            recommendations.append("Tech-debt drag is acceptable. Monitor maintenance load.")

        if result.ser_rating == "concerning":
            recommendations.append(
                "Burn is growing faster than revenue. Cost optimization needed."
            )
        elif result.ser_rating == "excellent":
            recommendations.append("Excellent growth efficiency. Growth is sustainable.")

        return recommendations
