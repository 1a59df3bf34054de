"""
Tests for IRR/NPV and the standard project metrics calculator.
"""

import pytest
from dataclasses import replace

from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.irr import (
    IRR_SEED,
    build_cash_flows,
    calculate_irr,
    calculate_npv,
    monthly_to_annual_irr,
)
from bizcalc.calculations.standard import (
    StandardMetricsCalculator,
    StandardMetricsInput,
    apply_adjustments,
    calculate_all_scenarios,
    calculate_escalation_factor,
    calculate_payback_period,
    generate_monthly_cash_flows,
    scenario_differences,
)


@pytest.fixture
def project():
    """Project netting 1,000 per month against a 10,000 outlay."""
    return StandardMetricsInput(
        initial_investment=10000,
        discount_rate=0,
        project_duration=24,
        yearly_revenue=24000,
        revenue_growth=0,
        operating_costs=6000,
        maintenance_costs=6000,
    )


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Test IRR calculation with simple cash flows."""
        # Investment of 100, returns of 110 after 1 period = 10% return
        irr = calculate_irr([-100, 110])
        assert abs(irr - 0.10) < 0.001

    def test_calculate_irr_multi_period(self):
        """Test IRR with multiple periods."""
        irr = calculate_irr([-100, 20, 20, 20, 20, 120])
        assert abs(irr - 0.20) < 0.01

    def test_irr_negative_returns(self):
        """Test IRR with negative return scenario."""
        irr = calculate_irr([-100, 40, 40, 10])
        assert irr < 0

    def test_irr_without_sign_change_returns_seed(self):
        """Test a series with no root falls back to the seed rate."""
        assert calculate_irr([100, 100]) == IRR_SEED

    def test_npv_is_zero_at_irr(self):
        """Test NPV at the computed IRR is approximately zero."""
        flows = build_cash_flows(5000, [400, 600, 800, 1000, 1200, 1400, 1600])
        irr = calculate_irr(flows)
        assert abs(calculate_npv(flows, irr)) < 1e-2

    def test_calculate_npv(self):
        """Test NPV discounts period n by (1 + r)^n."""
        npv = calculate_npv([-100, 110], 0.10)
        assert abs(npv) < 1e-9

    def test_build_cash_flows(self):
        """Test the outlay is prepended as a negative flow."""
        flows = build_cash_flows(1000, [100, 200])
        assert list(flows) == [-1000, 100, 200]

    def test_monthly_to_annual(self):
        """Test monthly compounding to an annual rate."""
        assert abs(monthly_to_annual_irr(0.01) - 0.126825) < 1e-6


class TestCashFlowProjection:
    """Test monthly series generation."""

    def test_escalation_factor_steps_annually(self):
        """Test growth applies once per completed year."""
        assert calculate_escalation_factor(0.10, 0) == 1.0
        assert calculate_escalation_factor(0.10, 11) == 1.0
        assert abs(calculate_escalation_factor(0.10, 12) - 1.10) < 1e-12
        assert abs(calculate_escalation_factor(0.10, 24) - 1.21) < 1e-12

    def test_series_length_and_values(self, project):
        """Test one entry per month with revenue less costs."""
        monthly, cumulative = generate_monthly_cash_flows(project)
        assert len(monthly) == 24
        assert len(cumulative) == 24
        assert monthly[0] == 1000
        assert cumulative[0] == -9000
        assert cumulative[-1] == 14000

    def test_revenue_growth_applies_in_second_year(self, project):
        """Test year-two revenue is scaled by the growth rate."""
        monthly, _ = generate_monthly_cash_flows(replace(project, revenue_growth=10))
        assert abs(monthly[11] - 1000) < 1e-9
        assert abs(monthly[12] - 1200) < 1e-9

    def test_payback_interpolates(self):
        """Test fractional payback month."""
        assert calculate_payback_period(1500, [1000, 1000, 1000]) == 1.5

    def test_payback_unrecovered_returns_horizon(self):
        """Test an unrecovered investment reports the horizon length."""
        assert calculate_payback_period(10000, [100, 100, 100]) == 3.0


class TestStandardMetricsCalculator:
    """Test the calculator end to end."""

    def test_metrics(self, project):
        """Test ROI, NPV and payback for a flat project."""
        result = StandardMetricsCalculator().calculate(project)
        assert result.roi == 140.0
        assert result.payback_period == 10.0
        assert result.irr > 0
        assert len(result.monthly_cash_flow) == 24

    def test_zero_discount_npv_equals_roi_numerator(self, project):
        """Test undiscounted NPV equals total cash flow less the outlay."""
        result = StandardMetricsCalculator().calculate(project)
        assert result.npv == 14000.0

    def test_discounting_lowers_npv(self, project):
        """Test a positive discount rate reduces NPV."""
        discounted = StandardMetricsCalculator().calculate(replace(project, discount_rate=12))
        assert discounted.npv < 14000.0

    def test_irr_consistent_with_npv(self, project):
        """Test the monthly IRR zeroes the unrounded cash flow NPV."""
        monthly, _ = generate_monthly_cash_flows(project)
        flows = build_cash_flows(project.initial_investment, monthly)
        rate = calculate_irr(flows)
        assert abs(calculate_npv(flows, rate)) < 1e-2

        result = StandardMetricsCalculator().calculate(project)
        assert abs(result.irr - round(monthly_to_annual_irr(rate) * 100, 2)) < 0.011

    def test_idempotent(self, project):
        """Test identical input yields identical output."""
        calculator = StandardMetricsCalculator()
        assert calculator.calculate(project) == calculator.calculate(project)

    def test_invalid_inputs(self, project):
        """Test range validation on every constrained field."""
        calculator = StandardMetricsCalculator()
        invalid = [
            ("initial_investment", 0),
            ("discount_rate", 101),
            ("project_duration", 601),
            ("project_duration", 0),
            ("yearly_revenue", -1),
            ("revenue_growth", -101),
            ("operating_costs", 0),
            ("maintenance_costs", 0),
        ]
        for field, value in invalid:
            with pytest.raises(ValidationError) as exc_info:
                calculator.calculate(replace(project, **{field: value}))
            assert exc_info.value.field == field


class TestScenarios:
    """Test scenario and sensitivity analysis."""

    def test_all_scenarios_ordering(self, project):
        """Test best case beats expected which beats worst."""
        scenarios = calculate_all_scenarios(project)
        assert scenarios.best.npv > scenarios.expected.npv > scenarios.worst.npv
        assert scenarios.expected == StandardMetricsCalculator().calculate(project)

    def test_apply_adjustments(self, project):
        """Test revenue, costs and discount rate adjustments."""
        adjusted = apply_adjustments(
            project, sales_adjustment=10, costs_adjustment=-20, discount_adjustment=2
        )
        assert abs(adjusted.yearly_revenue - 26400) < 1e-9
        assert abs(adjusted.operating_costs - 4800) < 1e-9
        assert abs(adjusted.maintenance_costs - 4800) < 1e-9
        assert adjusted.discount_rate == 2

    def test_adjustment_out_of_range(self, project):
        """Test adjustments outside their bounds are rejected."""
        with pytest.raises(ValidationError):
            apply_adjustments(project, sales_adjustment=60)
        with pytest.raises(ValidationError):
            apply_adjustments(project, discount_adjustment=-6)

    def test_scenario_differences(self, project):
        """Test deltas between an adjusted and base case."""
        calculator = StandardMetricsCalculator()
        base = calculator.calculate(project)
        adjusted = calculator.calculate(apply_adjustments(project, sales_adjustment=10))
        diffs = scenario_differences(base, adjusted)
        assert set(diffs) == {"roi_diff", "npv_diff", "payback_diff", "irr_diff"}
        assert diffs["roi_diff"] > 0
        assert diffs["payback_diff"] < 0
