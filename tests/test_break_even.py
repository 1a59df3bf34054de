"""
Tests for break-even analysis.
"""

import pytest
from dataclasses import replace

from bizcalc.calculations.break_even import BreakEvenCalculator, BreakEvenInput
from bizcalc.calculations.errors import ValidationError


@pytest.fixture
def product():
    return BreakEvenInput(fixed_costs=10000, price_per_unit=50, variable_cost_per_unit=25)


class TestBreakEvenCalculator:
    """Test break-even units, revenue and margins."""

    def test_break_even_point(self, product):
        """Test 10,000 fixed costs at a 25 contribution margin."""
        result = BreakEvenCalculator().calculate(product)
        assert result.break_even_units == 400
        assert result.break_even_revenue == 20000
        assert result.contribution_margin_per_unit == 25
        assert result.contribution_margin_ratio == 50.0

    def test_units_round_to_whole_numbers(self):
        """Test fractional break-even units round to a count."""
        result = BreakEvenCalculator().calculate(
            BreakEvenInput(fixed_costs=50000, price_per_unit=25, variable_cost_per_unit=10)
        )
        assert result.break_even_units == 3333
        assert result.break_even_revenue == 83333.33

    def test_break_even_identity(self):
        """Test costs equal revenue at break-even, within one unit of margin."""
        for fixed, price, variable in [(10000, 50, 25), (50000, 25, 10), (1234.5, 19.99, 7.25)]:
            result = BreakEvenCalculator().calculate(
                BreakEvenInput(fixed_costs=fixed, price_per_unit=price, variable_cost_per_unit=variable)
            )
            units = result.break_even_units
            assert abs((units * variable + fixed) - units * price) <= price - variable

    def test_monthly_figures(self, product):
        """Test totals are spread over the period."""
        result = BreakEvenCalculator().calculate(product)
        assert result.units_per_month == 33
        assert result.revenue_per_month == 1666.67

        quarterly = BreakEvenCalculator().calculate(replace(product, period_months=4))
        assert quarterly.units_per_month == 100

    def test_margin_of_safety_absent_without_sales(self, product):
        """Test margin of safety fields are not computed against zero."""
        result = BreakEvenCalculator().calculate(product)
        assert result.margin_of_safety is None
        assert result.margin_of_safety_units is None
        assert result.is_above_break_even is None

    def test_margin_of_safety(self, product):
        """Test margin of safety with current sales above break-even."""
        result = BreakEvenCalculator().calculate(replace(product, current_sales_units=500))
        assert result.margin_of_safety_units == 100
        assert result.margin_of_safety == 20.0
        assert result.is_above_break_even is True

    def test_below_break_even(self, product):
        """Test negative margin of safety."""
        result = BreakEvenCalculator().calculate(replace(product, current_sales_units=300))
        assert result.margin_of_safety_units == -100
        assert result.is_above_break_even is False

    def test_price_must_exceed_variable_cost(self, product):
        """Test a non-positive contribution margin is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BreakEvenCalculator().calculate(replace(product, variable_cost_per_unit=50))
        assert exc_info.value.field == "price_per_unit"

    def test_invalid_inputs(self, product):
        """Test positivity checks."""
        calculator = BreakEvenCalculator()
        for field in ("fixed_costs", "price_per_unit", "variable_cost_per_unit", "current_sales_units"):
            with pytest.raises(ValidationError) as exc_info:
                calculator.calculate(replace(product, **{field: 0}))
            assert exc_info.value.field == field

    def test_idempotent(self, product):
        """Test identical input yields identical output."""
        calculator = BreakEvenCalculator()
        assert calculator.calculate(product) == calculator.calculate(product)


class TestBreakEvenRecommendations:
    """Test advisory text bands."""

    def test_critical_when_below_break_even(self, product):
        """Test the critical band leads the list."""
        calculator = BreakEvenCalculator()
        result = calculator.calculate(replace(product, current_sales_units=300))
        recommendations = calculator.generate_recommendations(result)
        assert recommendations[0] == "CRITICAL: You are 100 units BELOW break-even."

    def test_healthy_margin(self, product):
        """Test the healthy band."""
        calculator = BreakEvenCalculator()
        result = calculator.calculate(replace(product, current_sales_units=1000))
        recommendations = calculator.generate_recommendations(result)
        assert recommendations[0].startswith("Healthy margin of safety")

    def test_low_contribution_margin(self):
        """Test the low contribution margin band."""
        calculator = BreakEvenCalculator()
        result = calculator.calculate(
            BreakEvenInput(fixed_costs=1000, price_per_unit=10, variable_cost_per_unit=8)
        )
        recommendations = calculator.generate_recommendations(result)
        assert recommendations[0].startswith("Low contribution margin")
        assert recommendations[-1] == "Target: Sell at least 42 units/month to break even."
