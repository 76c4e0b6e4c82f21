"""
Pricing Engine — deterministic PricingInput -> PricingReport transformation.

No I/O and no randomness; only the informational timestamp depends on the
clock. Undefined metrics (customers = 0, churn = 0) come back as None and are
listed in report.not_applicable instead of raising.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from pricing_calculator.models.enums import ContractLength, SupportTier, TierName
from pricing_calculator.models.schemas import (
    PriceBreakdown,
    PricingInput,
    PricingReport,
    PricingTier,
    UnitEconomics,
)
from pricing_calculator.utils.rounding import (
    ComputationError,
    ensure_finite,
    round_half_away,
    round_int,
)
from .insights import build_insights, build_recommendations

logger = logging.getLogger(__name__)


class TierDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: TierName
    ratio: float  # multiple of the calculated monthly price
    features: tuple[str, ...]
    target_customers: str


class EngineConstants(BaseModel):
    """Formula constants. Changing any of these changes every golden value."""
    model_config = ConfigDict(frozen=True)

    base_price: int = 99
    price_per_user: int = 10
    feature_step: float = 0.1  # +10 % per bundled feature
    growth_step: float = 0.01  # growth rate is a percentage
    annual_discount: float = 0.8
    annual_savings_rate: float = 0.2
    support_multipliers: dict[SupportTier, float] = {
        SupportTier.STANDARD: 1.0,
        SupportTier.PREMIUM: 1.5,
        SupportTier.ENTERPRISE: 2.0,
    }
    tiers: tuple[TierDefinition, ...] = (
        TierDefinition(
            name=TierName.STARTER,
            ratio=0.8,
            features=(
                "Up to 10 users",
                "Core pricing calculator",
                "Basic metrics",
                "Email support",
            ),
            target_customers="Small teams and startups",
        ),
        TierDefinition(
            name=TierName.PROFESSIONAL,
            ratio=1.5,
            features=(
                "Up to 50 users",
                "Advanced analytics",
                "AI pricing insights",
                "Priority support",
                "Custom integrations",
                "Annual billing discount",
            ),
            target_customers="Growing businesses",
        ),
        TierDefinition(
            name=TierName.ENTERPRISE,
            ratio=3.0,
            features=(
                "Unlimited users",
                "All features",
                "Dedicated support",
                "Custom development",
                "SLA guarantee",
                "White-label options",
                "API access",
                "On-premise option",
            ),
            target_customers="Large organizations",
        ),
    )


DEFAULT_CONSTANTS = EngineConstants()


def _safe_metric(
    path: str,
    compute: Callable[[], float],
    not_applicable: list[str],
) -> Optional[float]:
    """Evaluate a metric; division by zero or a non-finite result becomes None."""
    try:
        return ensure_finite(path, compute())
    except ZeroDivisionError:
        logger.debug(f"{path} not applicable: division by zero")
    except ComputationError as exc:
        logger.debug(f"{path} not applicable: {exc.detail}")
    not_applicable.append(path)
    return None


def _unit_economics(
    inputs: PricingInput,
    not_applicable: list[str],
) -> Optional[UnitEconomics]:
    if inputs.cac is None:
        return None

    cac = inputs.cac
    # average lifetime in months (1 / monthly churn) times the monthly price
    ltv = _safe_metric(
        "metrics.ltv",
        lambda: inputs.current_price / (inputs.churn_rate / 100),
        not_applicable,
    )
    if ltv is None:
        ratio = None
        not_applicable.append("metrics.ltvCacRatio")
    else:
        ratio = _safe_metric("metrics.ltvCacRatio", lambda: ltv / cac, not_applicable)
    payback = _safe_metric(
        "metrics.paybackPeriodMonths",
        lambda: cac / inputs.current_price,
        not_applicable,
    )

    return UnitEconomics(
        cac=cac,
        ltv=round_int(ltv) if ltv is not None else None,
        ltv_cac_ratio=round_half_away(ratio, 1) if ratio is not None else None,
        payback_period_months=round_half_away(payback, 1) if payback is not None else None,
    )


def calculate(
    inputs: PricingInput,
    constants: EngineConstants = DEFAULT_CONSTANTS,
) -> PricingReport:
    """Run the pricing formula over validated inputs."""
    c = constants
    not_applicable: list[str] = []

    feature_multiplier = 1 + inputs.features * c.feature_step
    growth_multiplier = 1 + inputs.growth_rate * c.growth_step
    is_annual = inputs.contract_length == ContractLength.ANNUAL
    contract_discount = c.annual_discount if is_annual else 1.0
    support_multiplier = c.support_multipliers[inputs.support_tier]

    monthly_raw = c.base_price + (
        inputs.customers
        * c.price_per_user
        * feature_multiplier
        * growth_multiplier
        * support_multiplier
        * contract_discount
    )
    monthly_price = round_int(ensure_finite("monthlyPrice", monthly_raw))
    annual_price = monthly_price * 12
    savings = round_int(annual_price * c.annual_savings_rate) if is_annual else 0

    per_user = _safe_metric(
        "pricePerUser",
        lambda: monthly_price / inputs.customers,
        not_applicable,
    )

    breakdown = PriceBreakdown(
        base=c.base_price,
        user_cost=inputs.customers * c.price_per_user,
        features_cost=round_int((feature_multiplier - 1) * 100),
        growth_cost=round_int((growth_multiplier - 1) * 100),
        support_cost=round_int((support_multiplier - 1) * 100),
        discount=savings,
        contract_discount_percent=round_int((1 - contract_discount) * 100),
    )

    tiers = tuple(
        PricingTier(
            name=tier.name,
            price=round_int(monthly_price * tier.ratio),
            features=tier.features,
            target_customers=tier.target_customers,
        )
        for tier in c.tiers
    )

    metrics = _unit_economics(inputs, not_applicable)
    insights = build_insights(inputs)
    recommendations = build_recommendations(
        inputs,
        insights,
        metrics.ltv_cac_ratio if metrics else None,
    )

    logger.debug(
        f"Calculated monthly={monthly_price} annual={annual_price} "
        f"savings={savings} n/a={not_applicable}"
    )

    return PricingReport(
        monthly_price=monthly_price,
        annual_price=annual_price,
        savings=savings,
        price_per_user=round_int(per_user) if per_user is not None else None,
        breakdown=breakdown,
        tiers=tiers,
        metrics=metrics,
        insights=insights,
        recommendations=recommendations,
        not_applicable=tuple(not_applicable),
        inputs=inputs,
    )
