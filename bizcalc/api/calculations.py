"""
Financial calculation API endpoints.

These endpoints accept calculator inputs and return calculated results
together with the calculator's recommendations or alerts.
"""

import logging
from typing import Any, Callable, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from bizcalc.calculations.base import Calculator
from bizcalc.calculations.break_even import BreakEvenCalculator, BreakEvenInput, BreakEvenResult
from bizcalc.calculations.cohort import CohortInput, CohortMetricsCalculator, CohortResult
from bizcalc.calculations.efficiency import (
    EfficiencyInput,
    EfficiencyResult,
    OperationalEfficiencyCalculator,
)
from bizcalc.calculations.employee import (
    EmployeeROICalculator,
    EmployeeROIInput,
    EmployeeROIResult,
    SalaryRange,
)
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.forecast import (
    CashFlowForecastCalculator,
    CashFlowForecastInput,
    CashFlowForecastResult,
)
from bizcalc.calculations.loan import LoanCalculator, LoanComparison, LoanInput, LoanResult
from bizcalc.calculations.marketing import (
    ChannelComparison,
    MarketingROICalculator,
    MarketingROIInput,
    MarketingROIResult,
)
from bizcalc.calculations.pricing import PricingCalculator, PricingInput, PricingResult
from bizcalc.calculations.risk import RiskInput, RiskMetricsCalculator, RiskResult
from bizcalc.calculations.saas import SaaSInput, SaaSMetricsCalculator, SaaSResult
from bizcalc.calculations.standard import (
    ScenarioResults,
    StandardMetricsCalculator,
    StandardMetricsInput,
    StandardMetricsResult,
    apply_adjustments,
    calculate_all_scenarios,
    scenario_differences,
)
from bizcalc.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _invoke(func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call into the engine, mapping invalid input to a 400 response."""
    try:
        return func(*args, **kwargs)
    except ValidationError as e:
        logger.info(f"Rejected input for {getattr(func, '__qualname__', func)}: {e.message}")
        raise HTTPException(status_code=400, detail=e.to_dict())


def _calculate(calculator: Calculator, data: Any) -> Any:
    return _invoke(calculator.calculate, data)


# Standard project metrics


class StandardCompareInput(BaseModel):
    """Base project plus sensitivity adjustments."""

    base: StandardMetricsInput
    sales_adjustment: float = 0.0
    costs_adjustment: float = 0.0
    discount_adjustment: float = 0.0


class StandardCompareResponse(BaseModel):
    base: StandardMetricsResult
    adjusted: StandardMetricsResult
    differences: Dict[str, float]


@router.post("/standard", response_model=StandardMetricsResult)
async def calculate_standard_metrics(inputs: StandardMetricsInput):
    """Calculate ROI, NPV, IRR and payback period for a project."""
    return _calculate(StandardMetricsCalculator(), inputs)


@router.post("/standard/scenarios", response_model=ScenarioResults)
async def calculate_standard_scenarios(inputs: StandardMetricsInput):
    """Calculate expected, best and worst case project metrics."""
    settings = get_settings()
    return _invoke(
        calculate_all_scenarios,
        inputs,
        best_multiplier=settings.best_case_multiplier,
        worst_multiplier=settings.worst_case_multiplier,
    )


@router.post("/standard/compare", response_model=StandardCompareResponse)
async def compare_standard_scenario(inputs: StandardCompareInput):
    """Compare a sensitivity-adjusted project against its base case."""
    calculator = StandardMetricsCalculator()
    base = _calculate(calculator, inputs.base)
    adjusted_inputs = _invoke(
        apply_adjustments,
        inputs.base,
        sales_adjustment=inputs.sales_adjustment,
        costs_adjustment=inputs.costs_adjustment,
        discount_adjustment=inputs.discount_adjustment,
    )
    adjusted = _calculate(calculator, adjusted_inputs)

    return StandardCompareResponse(
        base=base,
        adjusted=adjusted,
        differences=scenario_differences(base, adjusted),
    )


# Break-even


class BreakEvenResponse(BaseModel):
    result: BreakEvenResult
    recommendations: List[str]


@router.post("/break-even", response_model=BreakEvenResponse)
async def calculate_break_even(inputs: BreakEvenInput):
    """Calculate break-even units and revenue."""
    calculator = BreakEvenCalculator()
    result = _calculate(calculator, inputs)
    return BreakEvenResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result),
    )


# Loans


class LoanResponse(BaseModel):
    result: LoanResult
    recommendations: List[str]


@router.post("/loan", response_model=LoanResponse)
async def calculate_loan(inputs: LoanInput):
    """Calculate loan payment, amortization schedule and affordability."""
    calculator = LoanCalculator()
    result = _calculate(calculator, inputs)
    return LoanResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result, inputs),
    )


@router.post("/loan/compare", response_model=LoanComparison)
async def compare_loans(options: List[LoanInput]):
    """Compare loan options by total cost including fees."""
    return _invoke(LoanCalculator().compare_loan_options, options)


# Cash flow forecast


class CashFlowForecastResponse(BaseModel):
    result: CashFlowForecastResult
    alerts: List[str]


@router.post("/cash-flow", response_model=CashFlowForecastResponse)
async def calculate_cash_flow(inputs: CashFlowForecastInput):
    """Project monthly cash balances and flag upcoming deficits."""
    calculator = CashFlowForecastCalculator()
    result = _calculate(calculator, inputs)
    return CashFlowForecastResponse(result=result, alerts=calculator.generate_alerts(result))


# Pricing


class PricingResponse(BaseModel):
    result: PricingResult
    recommendations: List[str]


@router.post("/pricing", response_model=PricingResponse)
async def calculate_pricing(inputs: PricingInput):
    """Calculate a price for a target margin, with strategy alternatives."""
    calculator = PricingCalculator()
    result = _calculate(calculator, inputs)
    return PricingResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result, inputs),
    )


# Ratio calculators


class EmployeeROIResponse(BaseModel):
    result: EmployeeROIResult
    recommendations: List[str]


class SalaryRangeInput(BaseModel):
    expected_revenue: float
    target_roi: float = 50.0


@router.post("/employee-roi", response_model=EmployeeROIResponse)
async def calculate_employee_roi(inputs: EmployeeROIInput):
    """Calculate first-year ROI of a hire."""
    calculator = EmployeeROICalculator()
    result = _calculate(calculator, inputs)
    return EmployeeROIResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result),
    )


@router.post("/employee-roi/salary-range", response_model=SalaryRange)
async def calculate_salary_range(inputs: SalaryRangeInput):
    """Salary band that reaches a target ROI on expected revenue."""
    return _invoke(
        EmployeeROICalculator().calculate_optimal_salary_range,
        inputs.expected_revenue,
        target_roi=inputs.target_roi,
    )


class MarketingROIResponse(BaseModel):
    result: MarketingROIResult
    recommendations: List[str]


@router.post("/marketing-roi", response_model=MarketingROIResponse)
async def calculate_marketing_roi(inputs: MarketingROIInput):
    """Calculate campaign ROI, ROAS and acquisition cost."""
    calculator = MarketingROICalculator()
    result = _calculate(calculator, inputs)
    return MarketingROIResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result, inputs),
    )


@router.post("/marketing-roi/compare", response_model=ChannelComparison)
async def compare_marketing_channels(campaigns: List[MarketingROIInput]):
    """Rank campaigns across channels by ROI."""
    return _invoke(MarketingROICalculator().compare_channels, campaigns)


@router.post("/saas", response_model=SaaSResult)
async def calculate_saas_metrics(inputs: SaaSInput):
    """Calculate SaaS unit economics."""
    return _calculate(SaaSMetricsCalculator(), inputs)


class CohortResponse(BaseModel):
    result: CohortResult
    recommendations: List[str]


@router.post("/cohort", response_model=CohortResponse)
async def calculate_cohort(inputs: CohortInput):
    """Calculate profitability of a customer cohort."""
    calculator = CohortMetricsCalculator()
    result = _calculate(calculator, inputs)
    return CohortResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result),
    )


class RiskResponse(BaseModel):
    result: RiskResult
    recommendations: List[str]


@router.post("/risk", response_model=RiskResponse)
async def calculate_risk(inputs: RiskInput):
    """Calculate cash runway and churn exposure."""
    calculator = RiskMetricsCalculator()
    result = _calculate(calculator, inputs)
    return RiskResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result),
    )


class EfficiencyResponse(BaseModel):
    result: EfficiencyResult
    recommendations: List[str]


@router.post("/efficiency", response_model=EfficiencyResponse)
async def calculate_efficiency(inputs: EfficiencyInput):
    """Calculate operational friction, tech-debt drag and growth efficiency."""
    calculator = OperationalEfficiencyCalculator()
    result = _calculate(calculator, inputs)
    return EfficiencyResponse(
        result=result,
        recommendations=calculator.generate_recommendations(result),
    )
