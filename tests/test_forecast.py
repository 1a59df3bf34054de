"""
Tests for the cash flow forecast.
"""

import pytest
from dataclasses import replace
from datetime import date

from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.forecast import (
    CashFlowForecastCalculator,
    CashFlowForecastInput,
    OneTimeExpense,
    OneTimeReceivable,
)


@pytest.fixture
def burning():
    """Business losing 1,000 per month from 10,000 in the bank."""
    return CashFlowForecastInput(starting_cash=10000, monthly_revenue=5000, monthly_expenses=6000)


@pytest.fixture
def growing():
    return CashFlowForecastInput(starting_cash=10000, monthly_revenue=6000, monthly_expenses=5000)


class TestForecast:
    """Test monthly projection."""

    def test_twelve_months_by_default(self, burning):
        """Test default horizon."""
        result = CashFlowForecastCalculator().calculate(burning)
        assert len(result.monthly_forecasts) == 12
        assert [m.month for m in result.monthly_forecasts] == list(range(1, 13))

    def test_balance_identity(self, growing):
        """Test each balance is the previous balance plus net cash."""
        result = CashFlowForecastCalculator().calculate(replace(growing, expected_growth_rate=3))
        previous = growing.starting_cash
        for month in result.monthly_forecasts:
            assert abs(month.balance - (previous + month.net_cash)) < 0.02
            previous = month.balance
        assert result.ending_cash == result.monthly_forecasts[-1].balance

    def test_deficit_detection(self, burning):
        """Test the first negative balance month."""
        result = CashFlowForecastCalculator().calculate(burning)
        assert result.months_until_deficit == 11
        assert result.deficit_months == [11, 12]
        assert result.is_healthy is False
        assert result.ending_cash == -2000
        assert result.minimum_cash_reserve == -2000
        assert result.lowest_cash_month == 12

    def test_healthy_forecast(self, growing):
        """Test no deficit means infinite runway."""
        result = CashFlowForecastCalculator().calculate(growing)
        assert result.months_until_deficit is None
        assert result.is_healthy is True
        assert result.minimum_cash_reserve == 11000
        assert result.lowest_cash_month == 1
        assert result.total_net_cash_flow == 12000
        assert result.average_monthly_net_flow == 1000

    def test_zero_balance_is_not_deficit(self):
        """Test a balance of exactly zero does not count as a deficit."""
        result = CashFlowForecastCalculator().calculate(
            CashFlowForecastInput(starting_cash=1000, monthly_revenue=1000, monthly_expenses=2000)
        )
        assert result.monthly_forecasts[0].balance == 0
        assert result.monthly_forecasts[0].is_deficit is False
        assert result.months_until_deficit == 2

    def test_revenue_growth(self, growing):
        """Test monthly compounding of revenue growth."""
        result = CashFlowForecastCalculator().calculate(replace(growing, expected_growth_rate=10))
        assert result.monthly_forecasts[0].revenue == 6000
        assert result.monthly_forecasts[2].revenue == 7260

    def test_negative_growth(self, growing):
        """Test shrinking revenue."""
        result = CashFlowForecastCalculator().calculate(replace(growing, expected_growth_rate=-10))
        assert result.monthly_forecasts[1].revenue == 5400

    def test_seasonal_factors(self, growing):
        """Test seasonality scales revenue cyclically."""
        factors = [1.0] * 12
        factors[1] = 0.5
        result = CashFlowForecastCalculator().calculate(
            replace(growing, seasonal_factors=factors, forecast_months=24)
        )
        assert result.monthly_forecasts[1].revenue == 3000
        assert result.monthly_forecasts[13].revenue == 3000
        assert result.monthly_forecasts[2].revenue == 6000

    def test_one_time_expense(self, growing):
        """Test a one-off expense lands in its month."""
        result = CashFlowForecastCalculator().calculate(
            replace(growing, one_time_expenses=[OneTimeExpense(month=3, amount=500)])
        )
        assert result.monthly_forecasts[2].expenses == 5500
        assert result.monthly_forecasts[3].expenses == 5000

    def test_expected_receivable(self, growing):
        """Test a receivable adds to revenue in its month only."""
        result = CashFlowForecastCalculator().calculate(
            replace(growing, expected_receivables=[OneTimeReceivable(month=2, amount=1500)])
        )
        assert result.monthly_forecasts[1].revenue == 7500
        assert result.monthly_forecasts[1].net_cash == 2500
        assert result.monthly_forecasts[2].revenue == 6000
        assert result.total_revenue == 73500
        assert result.ending_cash == 23500

    def test_receivable_month_outside_horizon(self, growing):
        """Test receivables are validated like one-time expenses."""
        with pytest.raises(ValidationError) as exc_info:
            CashFlowForecastCalculator().calculate(
                replace(growing, expected_receivables=[OneTimeReceivable(month=13, amount=100)])
            )
        assert exc_info.value.field == "expected_receivables[0].month"

    def test_month_names_follow_start_date(self, growing):
        """Test month names and dates follow the start date."""
        result = CashFlowForecastCalculator().calculate(replace(growing, start_date=date(2025, 11, 1)))
        names = [m.month_name for m in result.monthly_forecasts[:3]]
        assert names == ["Nov", "Dec", "Jan"]
        assert result.monthly_forecasts[2].period_date == date(2026, 1, 1)

    def test_invalid_inputs(self, growing):
        """Test validation of cash, seasonality and horizon."""
        calculator = CashFlowForecastCalculator()
        with pytest.raises(ValidationError) as exc_info:
            calculator.calculate(replace(growing, starting_cash=0))
        assert exc_info.value.field == "starting_cash"
        with pytest.raises(ValidationError):
            calculator.calculate(replace(growing, seasonal_factors=[1.0] * 11))
        with pytest.raises(ValidationError):
            calculator.calculate(replace(growing, seasonal_factors=[5.0] * 12))
        with pytest.raises(ValidationError):
            calculator.calculate(replace(growing, forecast_months=61))
        with pytest.raises(ValidationError):
            calculator.calculate(
                replace(growing, one_time_expenses=[OneTimeExpense(month=13, amount=100)])
            )

    def test_idempotent(self, burning):
        """Test identical input yields identical output."""
        calculator = CashFlowForecastCalculator()
        assert calculator.calculate(burning) == calculator.calculate(burning)


class TestForecastAlerts:
    """Test alert generation."""

    def test_no_alerts_when_healthy(self, growing):
        """Test an empty list for a clean forecast."""
        calculator = CashFlowForecastCalculator()
        assert calculator.generate_alerts(calculator.calculate(growing)) == []

    def test_warning_for_later_deficit(self, burning):
        """Test a deficit beyond three months is a warning."""
        calculator = CashFlowForecastCalculator()
        alerts = calculator.generate_alerts(calculator.calculate(burning))
        assert alerts[0] == "WARNING: Cash will go negative in month 11."
        assert alerts[1] == "Lowest point: $-2,000.00 in month 12"
        assert any("shrinking" in alert for alert in alerts)
        assert alerts[-1].startswith("Average monthly cash burn: $1,000.00")

    def test_critical_for_imminent_deficit(self):
        """Test a deficit within three months is critical."""
        calculator = CashFlowForecastCalculator()
        result = calculator.calculate(
            CashFlowForecastInput(starting_cash=1000, monthly_revenue=1000, monthly_expenses=2000)
        )
        alerts = calculator.generate_alerts(result)
        assert alerts[0] == "CRITICAL: Cash will go negative in month 2!"
        assert alerts[1].startswith("Immediate action required")
