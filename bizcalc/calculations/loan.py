"""
Loan Amortization Calculations

Fixed-rate amortizing loan: monthly payment, full amortization schedule,
effective annual rate and affordability against business cash flow.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import (
    assert_finite,
    assert_integer,
    assert_non_negative,
    assert_positive,
    assert_range,
    round_to,
    safe_divide,
)

MAX_TERM_MONTHS = 360
AFFORDABILITY_THRESHOLD = 40.0  # Max debt service as % of disposable income
HIGH_RATE_THRESHOLD = 15.0
LOW_RATE_THRESHOLD = 5.0
LONG_TERM_MONTHS = 84


@dataclass(frozen=True)
class LoanInput:
    """Loan terms. annual_interest_rate and origination_fee are percentages."""

    principal: float
    annual_interest_rate: float
    term_months: int
    monthly_revenue: Optional[float] = None
    monthly_expenses: Optional[float] = None
    origination_fee: Optional[float] = None
    start_date: Optional[date] = None


@dataclass(frozen=True)
class AmortizationRow:
    month: int
    payment: float
    principal: float
    interest: float
    balance: float
    payment_date: Optional[date] = None


@dataclass(frozen=True)
class Affordability:
    debt_service_ratio: Optional[float] = None
    is_affordable: Optional[bool] = None
    max_affordable_payment: Optional[float] = None
    cushion_after_payment: Optional[float] = None


@dataclass(frozen=True)
class PayoffSummary:
    halfway_point: int
    balance_at_halfway: float


@dataclass(frozen=True)
class LoanResult:
    monthly_payment: float
    total_payment: float
    total_interest: float
    effective_annual_rate: float
    total_cost_with_fees: float
    amortization_schedule: List[AmortizationRow]
    first_year_principal: float
    first_year_interest: float
    affordability: Affordability
    payoff_summary: PayoffSummary


@dataclass(frozen=True)
class LoanOptionSummary:
    principal: float
    annual_interest_rate: float
    term_months: int
    monthly_payment: float
    total_cost: float


@dataclass(frozen=True)
class LoanComparison:
    options: List[LoanOptionSummary]
    best_option: int
    savings: float


def calculate_payment(principal: float, monthly_rate: float, term_months: int) -> float:
    """
    Calculate the level monthly payment.

    Matches Excel's PMT() function. A zero rate is handled explicitly as
    principal / term_months.

    Args:
        principal: Loan principal amount
        monthly_rate: Monthly interest rate as decimal
        term_months: Number of monthly payments

    Returns:
        Monthly payment amount (positive number)
    """
    if monthly_rate == 0:
        return principal / term_months

    growth = (1 + monthly_rate) ** term_months
    return principal * monthly_rate * growth / (growth - 1)


def generate_amortization_schedule(
    principal: float,
    monthly_rate: float,
    term_months: int,
    payment: float,
    start_date: Optional[date] = None,
) -> List[AmortizationRow]:
    """
    Generate a full amortization schedule, one row per month.

    The balance never goes below zero. The final row repays whatever balance
    remains, so the principal column sums to the loan amount and the
    schedule closes at exactly zero.

    Args:
        principal: Loan principal amount
        monthly_rate: Monthly interest rate as decimal
        term_months: Number of monthly payments
        payment: Level monthly payment
        start_date: Date of first payment; rows carry no date when omitted
    """
    schedule = []
    balance = principal

    for month in range(1, term_months + 1):
        interest = balance * monthly_rate
        principal_pmt = payment - interest
        row_payment = payment

        if month == term_months or principal_pmt > balance:
            principal_pmt = balance
            row_payment = balance + interest

        balance -= principal_pmt

        period_date = None
        if start_date is not None:
            period_date = start_date + relativedelta(months=month - 1)

        schedule.append(
            AmortizationRow(
                month=month,
                payment=round_to(row_payment, 2),
                principal=round_to(principal_pmt, 2),
                interest=round_to(interest, 2),
                balance=round_to(balance, 2),
                payment_date=period_date,
            )
        )

    return schedule


def calculate_effective_annual_rate(monthly_rate: float) -> float:
    """Effective annual rate with monthly compounding, as a percentage."""
    return ((1 + monthly_rate) ** 12 - 1) * 100


def calculate_affordability(data: LoanInput, payment: float) -> Affordability:
    """Debt service against disposable monthly income. Empty without revenue and expenses."""
    if data.monthly_revenue is None or data.monthly_expenses is None:
        return Affordability()

    disposable = data.monthly_revenue - data.monthly_expenses
    debt_service_ratio = safe_divide(payment, disposable, 0.0) * 100
    is_affordable = disposable > 0 and debt_service_ratio < AFFORDABILITY_THRESHOLD

    return Affordability(
        debt_service_ratio=round_to(debt_service_ratio, 2),
        is_affordable=is_affordable,
        max_affordable_payment=round_to(max(0.0, disposable) * AFFORDABILITY_THRESHOLD / 100, 2),
        cushion_after_payment=round_to(disposable - payment, 2),
    )


class LoanCalculator:
    """Loan payment, amortization and affordability."""

    name = "LoanCalculator"

    def validate(self, data: LoanInput) -> None:
        assert_positive(data.principal, "principal")
        assert_range(data.annual_interest_rate, 0, 100, "annual_interest_rate")
        assert_range(data.term_months, 1, MAX_TERM_MONTHS, "term_months")
        assert_integer(data.term_months, "term_months")

        if data.monthly_revenue is not None:
            assert_finite(data.monthly_revenue, "monthly_revenue")
        if data.monthly_expenses is not None:
            assert_non_negative(data.monthly_expenses, "monthly_expenses")
        if data.origination_fee is not None:
            assert_range(data.origination_fee, 0, 10, "origination_fee")

    def calculate(self, data: LoanInput) -> LoanResult:
        self.validate(data)

        term_months = int(data.term_months)
        monthly_rate = data.annual_interest_rate / 100 / 12

        payment = calculate_payment(data.principal, monthly_rate, term_months)
        schedule = generate_amortization_schedule(
            data.principal, monthly_rate, term_months, payment, data.start_date
        )

        total_payment = payment * term_months
        total_interest = total_payment - data.principal

        fees = data.principal * data.origination_fee / 100 if data.origination_fee else 0.0
        total_cost_with_fees = total_payment + fees

        effective_rate = calculate_effective_annual_rate(monthly_rate)

        first_year = schedule[: min(12, term_months)]
        first_year_principal = sum(row.principal for row in first_year)
        first_year_interest = sum(row.interest for row in first_year)

        halfway_point = term_months // 2
        balance_at_halfway = schedule[halfway_point - 1].balance if halfway_point > 0 else data.principal

        log_calculation(self.name, "Monthly Payment", payment)
        log_calculation(self.name, "Total Interest", total_interest)
        log_calculation(self.name, "Effective Rate", effective_rate)

        return LoanResult(
            monthly_payment=round_to(payment, 2),
            total_payment=round_to(total_payment, 2),
            total_interest=round_to(total_interest, 2),
            effective_annual_rate=round_to(effective_rate, 2),
            total_cost_with_fees=round_to(total_cost_with_fees, 2),
            amortization_schedule=schedule,
            first_year_principal=round_to(first_year_principal, 2),
            first_year_interest=round_to(first_year_interest, 2),
            affordability=calculate_affordability(data, payment),
            payoff_summary=PayoffSummary(
                halfway_point=halfway_point,
                balance_at_halfway=round_to(balance_at_halfway, 2),
            ),
        )

    def generate_recommendations(self, result: LoanResult, data: LoanInput) -> List[str]:
        """Advisory notes on interest cost, affordability, rate and term."""
        recommendations = []

        interest_ratio = safe_divide(result.total_interest, data.principal, 0.0) * 100
        recommendations.append(
            f"Total interest cost: {interest_ratio:.1f}% of principal (${result.total_interest:,.2f})"
        )

        affordability = result.affordability
        if affordability.is_affordable is False:
            recommendations.append("WARNING: This loan may stretch your cash flow too thin.")
            recommendations.append(
                f"Maximum affordable payment: ${affordability.max_affordable_payment:,.2f}/month"
            )
            recommendations.append("Consider: longer term, smaller amount, or lower rate.")
        elif affordability.is_affordable is True:
            recommendations.append(
                f"Loan is affordable. Cash cushion after payment: "
                f"${affordability.cushion_after_payment:,.2f}/month"
            )

        if data.annual_interest_rate > HIGH_RATE_THRESHOLD:
            recommendations.append(
                "High interest rate. Explore SBA loans or credit unions for better rates."
            )
        elif data.annual_interest_rate < LOW_RATE_THRESHOLD:
            recommendations.append("Excellent interest rate! This is a competitive offer.")

        if data.term_months > LONG_TERM_MONTHS:
            recommendations.append(
                "Long term means more interest paid. Consider shorter term if affordable."
            )

        return recommendations

    def compare_loan_options(self, options: List[LoanInput]) -> LoanComparison:
        """
        Compare loan offers by total cost including fees.

        Returns:
            Per-option summaries, the index of the cheapest option and the
            savings against the most expensive one
        """
        if not options:
            raise ValidationError("options must contain at least one loan", "options")

        summaries = []
        for option in options:
            result = self.calculate(option)
            summaries.append(
                LoanOptionSummary(
                    principal=option.principal,
                    annual_interest_rate=option.annual_interest_rate,
                    term_months=option.term_months,
                    monthly_payment=result.monthly_payment,
                    total_cost=result.total_cost_with_fees,
                )
            )

        costs = [summary.total_cost for summary in summaries]
        best_option = costs.index(min(costs))

        return LoanComparison(
            options=summaries,
            best_option=best_option,
            savings=round_to(max(costs) - min(costs), 2),
        )
