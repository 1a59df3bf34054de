"""
Cash Flow Forecast

Rolling monthly cash projection (12 months by default) with growth,
seasonality, one-time expenses and expected receivables. Flags the first deficit month and the
lowest cash point.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import (
    assert_integer,
    assert_positive,
    assert_range,
    round_to,
)

DEFAULT_FORECAST_MONTHS = 12
MAX_FORECAST_MONTHS = 60
CRITICAL_DEFICIT_MONTHS = 3
SHRINKING_TREND_MONTHS = 3
MONTH_NAMES = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class OneTimeExpense:
    month: int
    amount: float


@dataclass(frozen=True)
class OneTimeReceivable:
    """Cash expected in a given month on top of regular revenue."""

    month: int
    amount: float


@dataclass(frozen=True)
class CashFlowForecastInput:
    """
    Forecast parameters. Growth rates are monthly percentages.

    seasonal_factors, when given, holds 12 revenue multipliers applied
    cyclically (factor 0 to month 1, 13, 25, ...).
    """

    starting_cash: float
    monthly_revenue: float
    monthly_expenses: float
    expected_growth_rate: float = 0.0
    expense_growth_rate: float = 0.0
    forecast_months: int = DEFAULT_FORECAST_MONTHS
    seasonal_factors: Optional[List[float]] = None
    one_time_expenses: List[OneTimeExpense] = field(default_factory=list)
    expected_receivables: List[OneTimeReceivable] = field(default_factory=list)
    start_date: Optional[date] = None


@dataclass(frozen=True)
class MonthlyForecast:
    month: int
    month_name: str
    revenue: float
    expenses: float
    net_cash: float
    balance: float
    is_deficit: bool
    period_date: Optional[date] = None


@dataclass(frozen=True)
class CashFlowForecastResult:
    monthly_forecasts: List[MonthlyForecast]
    starting_cash: float
    ending_cash: float
    total_revenue: float
    total_expenses: float
    total_net_cash_flow: float
    average_monthly_net_flow: float
    minimum_cash_reserve: float  # Lowest balance over the horizon
    lowest_cash_month: int
    deficit_months: List[int]
    months_until_deficit: Optional[int]
    is_healthy: bool


class CashFlowForecastCalculator:
    """Monthly cash runway projection."""

    name = "CashFlowForecastCalculator"

    def validate(self, data: CashFlowForecastInput) -> None:
        assert_positive(data.starting_cash, "starting_cash")
        assert_positive(data.monthly_revenue, "monthly_revenue")
        assert_positive(data.monthly_expenses, "monthly_expenses")
        assert_range(data.expected_growth_rate, -100, 1000, "expected_growth_rate")
        assert_range(data.expense_growth_rate, -100, 1000, "expense_growth_rate")
        assert_range(data.forecast_months, 1, MAX_FORECAST_MONTHS, "forecast_months")
        assert_integer(data.forecast_months, "forecast_months")

        if data.seasonal_factors is not None:
            if len(data.seasonal_factors) != 12:
                raise ValidationError(
                    "seasonal_factors must contain 12 monthly factors", "seasonal_factors"
                )
            for index, factor in enumerate(data.seasonal_factors):
                assert_range(factor, 0.1, 3.0, f"seasonal_factors[{index}]")

        for index, expense in enumerate(data.one_time_expenses):
            assert_range(expense.month, 1, data.forecast_months, f"one_time_expenses[{index}].month")
            assert_integer(expense.month, f"one_time_expenses[{index}].month")
            assert_positive(expense.amount, f"one_time_expenses[{index}].amount")

        for index, receivable in enumerate(data.expected_receivables):
            assert_range(
                receivable.month, 1, data.forecast_months, f"expected_receivables[{index}].month"
            )
            assert_integer(receivable.month, f"expected_receivables[{index}].month")
            assert_positive(receivable.amount, f"expected_receivables[{index}].amount")

    def calculate(self, data: CashFlowForecastInput) -> CashFlowForecastResult:
        self.validate(data)

        forecast_months = int(data.forecast_months)
        forecasts = []
        balance = data.starting_cash
        total_revenue = 0.0
        total_expenses = 0.0
        lowest_cash = None
        lowest_cash_month = 0
        deficit_months = []

        for month in range(1, forecast_months + 1):
            revenue = data.monthly_revenue * (1 + data.expected_growth_rate / 100) ** (month - 1)
            if data.seasonal_factors is not None:
                revenue *= data.seasonal_factors[(month - 1) % 12]
            revenue += sum(r.amount for r in data.expected_receivables if r.month == month)

            expenses = data.monthly_expenses * (1 + data.expense_growth_rate / 100) ** (month - 1)
            expenses += sum(e.amount for e in data.one_time_expenses if e.month == month)

            net_cash = revenue - expenses
            balance += net_cash
            total_revenue += revenue
            total_expenses += expenses

            is_deficit = balance < 0
            if is_deficit:
                deficit_months.append(month)

            if lowest_cash is None or balance < lowest_cash:
                lowest_cash = balance
                lowest_cash_month = month

            if data.start_date is not None:
                period_date = data.start_date + relativedelta(months=month - 1)
                month_name = MONTH_NAMES[period_date.month - 1]
            else:
                period_date = None
                month_name = MONTH_NAMES[(month - 1) % 12]

            forecasts.append(
                MonthlyForecast(
                    month=month,
                    month_name=month_name,
                    revenue=round_to(revenue, 2),
                    expenses=round_to(expenses, 2),
                    net_cash=round_to(net_cash, 2),
                    balance=round_to(balance, 2),
                    is_deficit=is_deficit,
                    period_date=period_date,
                )
            )

        total_net = total_revenue - total_expenses
        months_until_deficit = deficit_months[0] if deficit_months else None

        log_calculation(self.name, "Total Revenue", total_revenue)
        log_calculation(self.name, "Total Expenses", total_expenses)
        log_calculation(self.name, "Ending Cash", balance)

        return CashFlowForecastResult(
            monthly_forecasts=forecasts,
            starting_cash=round_to(data.starting_cash, 2),
            ending_cash=round_to(balance, 2),
            total_revenue=round_to(total_revenue, 2),
            total_expenses=round_to(total_expenses, 2),
            total_net_cash_flow=round_to(total_net, 2),
            average_monthly_net_flow=round_to(total_net / forecast_months, 2),
            minimum_cash_reserve=round_to(lowest_cash, 2),
            lowest_cash_month=lowest_cash_month,
            deficit_months=deficit_months,
            months_until_deficit=months_until_deficit,
            is_healthy=months_until_deficit is None,
        )

    def generate_alerts(self, result: CashFlowForecastResult) -> List[str]:
        """
        Ordered alerts for the forecast. An empty list means nothing to flag.
        """
        alerts = []

        if result.months_until_deficit is not None:
            if result.months_until_deficit <= CRITICAL_DEFICIT_MONTHS:
                alerts.append(
                    f"CRITICAL: Cash will go negative in month {result.months_until_deficit}!"
                )
                alerts.append(
                    "Immediate action required: Reduce expenses, increase sales, or secure financing."
                )
            else:
                alerts.append(
                    f"WARNING: Cash will go negative in month {result.months_until_deficit}."
                )
            alerts.append(
                f"Lowest point: ${result.minimum_cash_reserve:,.2f} in month {result.lowest_cash_month}"
            )

        recent = result.monthly_forecasts[-SHRINKING_TREND_MONTHS:]
        if len(recent) == SHRINKING_TREND_MONTHS and all(m.net_cash < 0 for m in recent):
            alerts.append(
                f"WARNING: Cash balance is shrinking over the last {SHRINKING_TREND_MONTHS} months."
            )

        if result.average_monthly_net_flow < 0:
            alerts.append(
                f"Average monthly cash burn: ${abs(result.average_monthly_net_flow):,.2f}. "
                "Review cost structure."
            )

        return alerts
