"""
Rule-based pricing insights and the recommendations attached to every report.
"""

from __future__ import annotations

from typing import Optional

from pricing_calculator.models.enums import (
    CompetitivePosition,
    PricePosition,
    RiskLevel,
)
from pricing_calculator.models.schemas import PricingInput, PricingInsights
from pricing_calculator.utils.rounding import round_half_away, round_int

MAX_RECOMMENDATIONS = 5
COMPETITOR_PARITY_BAND = 10.0  # percent either side of the competitor price


def suggest_price(inputs: PricingInput) -> float:
    """Price the market would bear given competitor pricing and churn."""
    suggested = inputs.current_price

    if inputs.competitor_price:
        factor = 1.1 if inputs.competitor_price > inputs.current_price else 0.95
        suggested = inputs.current_price * factor

    if inputs.churn_rate < 5:
        suggested *= 1.15  # low churn = pricing power
    elif inputs.churn_rate > 10:
        suggested *= 0.9  # high churn = price sensitive

    return round_half_away(suggested, 2)


def _price_position(diff_percent: float) -> PricePosition:
    if diff_percent > 20:
        return PricePosition.SIGNIFICANTLY_UNDERPRICED
    if diff_percent > 10:
        return PricePosition.MODERATELY_UNDERPRICED
    if diff_percent < -10:
        return PricePosition.POTENTIALLY_OVERPRICED
    return PricePosition.OPTIMALLY_PRICED


def _risk_level(diff_percent: float, churn_rate: float) -> RiskLevel:
    if diff_percent > 30 or churn_rate > 15:
        return RiskLevel.HIGH
    if diff_percent > 20 or churn_rate > 10:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _competitive_position(inputs: PricingInput) -> tuple[Optional[CompetitivePosition], Optional[int]]:
    if not inputs.competitor_price:
        return None, None
    gap = (inputs.current_price - inputs.competitor_price) / inputs.competitor_price * 100
    if gap > COMPETITOR_PARITY_BAND:
        position = CompetitivePosition.PREMIUM
    elif gap < -COMPETITOR_PARITY_BAND:
        position = CompetitivePosition.VALUE
    else:
        position = CompetitivePosition.PARITY
    return position, round_int(gap)


def build_insights(inputs: PricingInput) -> PricingInsights:
    suggested = suggest_price(inputs)
    if inputs.current_price > 0:
        # two decimals keeps float noise off the 10/20/30 % thresholds
        diff = round_half_away((suggested - inputs.current_price) / inputs.current_price * 100, 2)
    else:
        diff = 0.0
    position, gap = _competitive_position(inputs)
    return PricingInsights(
        suggested_price=suggested,
        price_position=_price_position(diff),
        optimization_potential=round_int(abs(diff)),
        risk_level=_risk_level(diff, inputs.churn_rate),
        competitive_position=position,
        competitor_gap_percent=gap,
    )


def build_recommendations(
    inputs: PricingInput,
    insights: PricingInsights,
    ltv_cac_ratio: Optional[float],
) -> tuple[str, ...]:
    """Ordered, de-duplicated advice; at most MAX_RECOMMENDATIONS entries."""
    recs: list[str] = []

    if insights.price_position == PricePosition.SIGNIFICANTLY_UNDERPRICED:
        recs.append("Consider gradual price increases over 3-6 months")
    elif insights.price_position == PricePosition.MODERATELY_UNDERPRICED:
        recs.append("Implement price increase with grandfathering for existing customers")
    elif insights.price_position == PricePosition.POTENTIALLY_OVERPRICED:
        recs.append("Review value proposition and consider promotional pricing")

    if inputs.churn_rate > 10:
        recs.append("High churn rate detected - focus on retention before price optimization")
        recs.append("Implement customer success program to reduce churn")
    elif inputs.churn_rate < 3:
        recs.append("Excellent retention - strong pricing power opportunity")
        recs.append("Consider premium tier for power users")

    if ltv_cac_ratio is not None:
        if ltv_cac_ratio < 3:
            recs.append("LTV:CAC ratio below optimal - focus on reducing acquisition costs")
        elif ltv_cac_ratio > 5:
            recs.append("Strong unit economics - consider scaling acquisition")

    if insights.competitive_position == CompetitivePosition.PREMIUM:
        recs.append("Priced above competitors - lead with differentiated features in sales messaging")
    elif insights.competitive_position == CompetitivePosition.VALUE:
        recs.append("Priced below competitors - room to close the gap on new plans")

    return tuple(dict.fromkeys(recs))[:MAX_RECOMMENDATIONS]
