"""
Data schemas for calculator inputs and outputs.

Field names are snake_case in Python and camelCase on the wire, matching the
keys the calculator form posts and the charts / export screens read.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import (
    SupportTier,
    ContractLength,
    TierName,
    ValidationReason,
    PricePosition,
    CompetitivePosition,
    RiskLevel,
    AnalysisType,
)


class CamelModel(BaseModel):
    """Immutable model serialised with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


# ── Input ────────────────────────────────────────────────


class PricingInput(CamelModel):
    """A validated calculation request. Build through engine.validator.validate()."""
    current_price: float
    customers: int
    churn_rate: float
    competitor_price: Optional[float] = None
    cac: Optional[float] = None
    features: int = 0
    growth_rate: float = 0.0
    support_tier: SupportTier = SupportTier.STANDARD
    contract_length: ContractLength = ContractLength.MONTHLY


class ValidationError(CamelModel):
    """First input field that failed validation."""
    field: str
    reason: ValidationReason


# ── Report ───────────────────────────────────────────────


class PriceBreakdown(CamelModel):
    base: int
    user_cost: int
    features_cost: int  # percentage uplift
    growth_cost: int  # percentage uplift
    support_cost: int  # percentage uplift
    discount: int  # annual savings, 0 for monthly
    contract_discount_percent: int


class PricingTier(CamelModel):
    name: TierName
    price: int
    features: tuple[str, ...]
    target_customers: str = ""


class UnitEconomics(CamelModel):
    """LTV / CAC metrics. None marks a metric that is not applicable."""
    cac: float
    ltv: Optional[int] = None
    ltv_cac_ratio: Optional[float] = None
    payback_period_months: Optional[float] = None


class PricingInsights(CamelModel):
    suggested_price: float
    price_position: PricePosition
    optimization_potential: int  # |suggested - current| as % of current
    risk_level: RiskLevel
    competitive_position: Optional[CompetitivePosition] = None
    competitor_gap_percent: Optional[int] = None


class PricingReport(CamelModel):
    """Result of one calculation. Never mutated; recalculate instead."""
    monthly_price: int
    annual_price: int
    savings: int
    price_per_user: Optional[int]
    breakdown: PriceBreakdown
    tiers: tuple[PricingTier, PricingTier, PricingTier]
    metrics: Optional[UnitEconomics] = None
    insights: PricingInsights
    recommendations: tuple[str, ...] = ()
    not_applicable: tuple[str, ...] = ()  # dotted paths of sentinel fields
    inputs: PricingInput
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


# ── AI narrative insights ────────────────────────────────


class NarrativeInsight(CamelModel):
    """One narrative insight, produced by the LLM or the rule-based fallback."""
    id: str
    type: AnalysisType
    title: str
    description: str
    confidence: int = Field(default=70, ge=0, le=100)
    recommendations: list[str] = []
    impact: dict[str, str] = {}
    difficulty: str = "medium"  # low | medium | high
    timeline: str = ""
    metrics: list[str] = []


class NarrativeInsightList(BaseModel):
    """Structured-output envelope for the LLM call."""
    insights: list[NarrativeInsight] = []


# ── Leads ────────────────────────────────────────────────


class CapturedLead(CamelModel):
    email: str
    date: datetime
    source: str = "pricing_guide"
