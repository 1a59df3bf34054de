"""
Marketing ROI

Campaign return by channel: ROI, ROAS, acquisition cost, optional click
funnel metrics and a comparison against channel benchmarks.
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from bizcalc.calculations.base import log_calculation
from bizcalc.calculations.errors import ValidationError
from bizcalc.calculations.numeric import assert_positive, round_to, safe_divide
from bizcalc.calculations.ratios import Band, classify, compare_to_benchmark

LTV_MULTIPLIER = 3.0  # Estimated lifetime value as a multiple of first purchase
HEALTHY_LTV_CAC = 3.0
CONCERNING_LTV_CAC = 1.5
LOW_FUNNEL_RATE = 1.0

ROAS_BANDS = (
    Band(4.0, "excellent"),
    Band(2.0, "good"),
    Band(1.0, "break_even"),
)

CHANNEL_BENCHMARKS = {
    "facebook": {"avg_cac": 50.0, "avg_conversion_rate": 2.5},
    "google": {"avg_cac": 45.0, "avg_conversion_rate": 3.0},
    "instagram": {"avg_cac": 55.0, "avg_conversion_rate": 2.0},
    "email": {"avg_cac": 15.0, "avg_conversion_rate": 5.0},
    "referral": {"avg_cac": 25.0, "avg_conversion_rate": 8.0},
    "other": {"avg_cac": 40.0, "avg_conversion_rate": 2.5},
}


@dataclass(frozen=True)
class MarketingROIInput:
    total_spend: float
    conversions: float
    revenue_per_conversion: float
    channel: str = "other"
    impressions: Optional[float] = None
    clicks: Optional[float] = None


@dataclass(frozen=True)
class MarketingBenchmarkComparison:
    cac_vs_benchmark: str  # "better", "same" or "worse"
    conversion_vs_benchmark: str


@dataclass(frozen=True)
class MarketingROIResult:
    roi_percentage: float
    roas: float
    roas_rating: str
    total_revenue: float
    net_profit: float
    cost_per_acquisition: float
    lifetime_value_to_cac: float
    channel_efficiency: str
    benchmark_comparison: MarketingBenchmarkComparison
    is_profitable: bool
    break_even_conversions: int
    cost_per_click: Optional[float] = None
    click_through_rate: Optional[float] = None
    conversion_rate: Optional[float] = None
    revenue_per_click: Optional[float] = None


@dataclass(frozen=True)
class ChannelSummary:
    channel: str
    roi: float
    roas: float
    cac: float


@dataclass(frozen=True)
class ChannelComparison:
    results: List[ChannelSummary]
    best_channel: str
    worst_channel: str
    recommendations: List[str]


def rate_channel_efficiency(roi: float, cac: float, channel: str) -> str:
    """Rate a campaign from its ROI and how its CAC compares to the channel average."""
    avg_cac = CHANNEL_BENCHMARKS[channel]["avg_cac"]

    if roi > 200 and cac < avg_cac * 0.7:
        return "excellent"
    if roi > 100 and cac < avg_cac:
        return "good"
    if roi > 0:
        return "average"
    return "poor"


class MarketingROICalculator:
    """Return on a marketing campaign."""

    name = "MarketingROICalculator"

    def validate(self, data: MarketingROIInput) -> None:
        assert_positive(data.total_spend, "total_spend")
        assert_positive(data.conversions, "conversions")
        assert_positive(data.revenue_per_conversion, "revenue_per_conversion")

        if data.channel not in CHANNEL_BENCHMARKS:
            raise ValidationError(
                f"channel must be one of {', '.join(sorted(CHANNEL_BENCHMARKS))}", "channel"
            )
        if data.impressions is not None:
            assert_positive(data.impressions, "impressions")
        if data.clicks is not None:
            assert_positive(data.clicks, "clicks")

    def calculate(self, data: MarketingROIInput) -> MarketingROIResult:
        self.validate(data)

        total_revenue = data.conversions * data.revenue_per_conversion
        net_profit = total_revenue - data.total_spend
        roi = safe_divide(net_profit, data.total_spend, 0.0) * 100
        roas = safe_divide(total_revenue, data.total_spend, 0.0)
        cac = safe_divide(data.total_spend, data.conversions, 0.0)

        cost_per_click = None
        conversion_rate = None
        revenue_per_click = None
        click_through_rate = None

        if data.clicks is not None:
            cost_per_click = round_to(safe_divide(data.total_spend, data.clicks, 0.0), 2)
            conversion_rate = round_to(safe_divide(data.conversions, data.clicks, 0.0) * 100, 2)
            revenue_per_click = round_to(safe_divide(total_revenue, data.clicks, 0.0), 2)
            if data.impressions is not None:
                click_through_rate = round_to(
                    safe_divide(data.clicks, data.impressions, 0.0) * 100, 2
                )

        benchmark = CHANNEL_BENCHMARKS[data.channel]
        conversion_vs_benchmark = "same"
        if conversion_rate is not None:
            conversion_vs_benchmark = compare_to_benchmark(
                conversion_rate, benchmark["avg_conversion_rate"], 0.8, 1.2,
                ("worse", "same", "better"),
            )
        comparison = MarketingBenchmarkComparison(
            cac_vs_benchmark=compare_to_benchmark(
                cac, benchmark["avg_cac"], 0.9, 1.1, ("better", "same", "worse")
            ),
            conversion_vs_benchmark=conversion_vs_benchmark,
        )

        estimated_ltv = data.revenue_per_conversion * LTV_MULTIPLIER
        ltv_to_cac = safe_divide(estimated_ltv, cac, 0.0)

        log_calculation(self.name, "Marketing ROI", roi, channel=data.channel)
        log_calculation(self.name, "ROAS", roas)
        log_calculation(self.name, "CAC", cac)

        return MarketingROIResult(
            roi_percentage=round_to(roi, 2),
            roas=round_to(roas, 2),
            roas_rating=classify(roas, ROAS_BANDS, "losing"),
            total_revenue=round_to(total_revenue, 2),
            net_profit=round_to(net_profit, 2),
            cost_per_acquisition=round_to(cac, 2),
            lifetime_value_to_cac=round_to(ltv_to_cac, 2),
            channel_efficiency=rate_channel_efficiency(roi, cac, data.channel),
            benchmark_comparison=comparison,
            is_profitable=net_profit > 0,
            break_even_conversions=math.ceil(
                safe_divide(data.total_spend, data.revenue_per_conversion, 0.0)
            ),
            cost_per_click=cost_per_click,
            click_through_rate=click_through_rate,
            conversion_rate=conversion_rate,
            revenue_per_click=revenue_per_click,
        )

    def generate_recommendations(
        self, result: MarketingROIResult, data: MarketingROIInput
    ) -> List[str]:
        recommendations = []

        if not result.is_profitable:
            shortfall = max(0, result.break_even_conversions - math.ceil(data.conversions))
            recommendations.append(
                f"Campaign is LOSING money. Net loss: ${abs(result.net_profit):,.2f}"
            )
            recommendations.append(f"Need {shortfall} more conversions to break even.")
        else:
            recommendations.append(f"Campaign is profitable! Net profit: ${result.net_profit:,.2f}")

        if result.roas_rating == "excellent":
            recommendations.append(
                f"Excellent ROAS of {result.roas:.1f}x. Consider increasing budget."
            )
        elif result.roas_rating == "good":
            recommendations.append(f"Good ROAS of {result.roas:.1f}x. Campaign is healthy.")
        elif result.roas_rating == "break_even":
            recommendations.append(
                f"ROAS of {result.roas:.1f}x is break-even territory. Optimize targeting."
            )

        cac_position = result.benchmark_comparison.cac_vs_benchmark
        if cac_position == "better":
            recommendations.append(
                f"CAC of ${result.cost_per_acquisition:,.2f} is BELOW industry average "
                f"for {data.channel}. Great efficiency!"
            )
        elif cac_position == "worse":
            recommendations.append(
                f"CAC of ${result.cost_per_acquisition:,.2f} is ABOVE industry average. "
                "Review targeting and creative."
            )

        if result.click_through_rate is not None and result.click_through_rate < LOW_FUNNEL_RATE:
            recommendations.append("Low click-through rate. Test new ad creative and copy.")
        if result.conversion_rate is not None and result.conversion_rate < LOW_FUNNEL_RATE:
            recommendations.append("Low conversion rate. Review landing page experience.")

        if result.lifetime_value_to_cac >= HEALTHY_LTV_CAC:
            recommendations.append(
                f"Strong LTV/CAC ratio of {result.lifetime_value_to_cac:.1f}x. "
                "Sustainable acquisition."
            )
        elif result.lifetime_value_to_cac < CONCERNING_LTV_CAC:
            recommendations.append(
                f"LTV/CAC of {result.lifetime_value_to_cac:.1f}x is concerning. "
                "Reduce CAC or improve retention."
            )

        return recommendations

    def compare_channels(self, campaigns: List[MarketingROIInput]) -> ChannelComparison:
        """Rank campaigns by ROI and suggest where to move budget."""
        if not campaigns:
            raise ValidationError("campaigns must contain at least one campaign", "campaigns")

        results = []
        for campaign in campaigns:
            result = self.calculate(campaign)
            results.append(
                ChannelSummary(
                    channel=campaign.channel,
                    roi=result.roi_percentage,
                    roas=result.roas,
                    cac=result.cost_per_acquisition,
                )
            )

        # Stable sort keeps input order among equal ROIs
        ranked = sorted(results, key=lambda summary: summary.roi, reverse=True)
        best, worst = ranked[0], ranked[-1]

        recommendations = [
            f"Best performing channel: {best.channel.upper()} ({best.roi:.1f}% ROI)",
            f"Worst performing channel: {worst.channel.upper()} ({worst.roi:.1f}% ROI)",
        ]
        if best.roi > 0 and worst.roi < 0:
            recommendations.append(
                f"Consider shifting budget from {worst.channel} to {best.channel}."
            )

        return ChannelComparison(
            results=results,
            best_channel=best.channel,
            worst_channel=worst.channel,
            recommendations=recommendations,
        )
