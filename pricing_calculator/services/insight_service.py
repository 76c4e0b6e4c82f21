"""
Insight Service — optional AI narrative on top of a calculated report.

The LLM only ever sees a finished PricingReport; if it is disabled (mock mode),
unconfigured or failing, the rule-based fallback narrative is returned so the
calculation itself is never blocked.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Callable

from pricing_calculator.config import get_settings
from pricing_calculator.models.enums import AnalysisType, CompetitivePosition
from pricing_calculator.models.schemas import (
    NarrativeInsight,
    NarrativeInsightList,
    PricingReport,
)
from pricing_calculator.utils.hashing import fingerprint
from pricing_calculator.services import llm_service

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 5

_BASE_PROMPT = (
    "You are a SaaS pricing strategist. You receive the inputs and the computed "
    "pricing report of a calculator. Return concise, actionable insights. Do not "
    "recompute prices; refer to the numbers given. Confidence is 0-100, "
    "difficulty is low, medium or high."
)

SYSTEM_PROMPTS: dict[AnalysisType, str] = {
    AnalysisType.PRICING: _BASE_PROMPT + " Focus on price level, tier structure and discounting.",
    AnalysisType.COMPETITIVE: _BASE_PROMPT + " Focus on positioning against the competitor price.",
    AnalysisType.MARKET: _BASE_PROMPT + " Focus on growth, churn and unit economics.",
    AnalysisType.COMPREHENSIVE: _BASE_PROMPT + " Cover pricing, competition and market dynamics.",
}


def build_prompt(report: PricingReport, analysis_type: AnalysisType) -> str:
    payload = report.to_payload()
    payload.pop("timestamp", None)
    return (
        f"Analysis type: {analysis_type.value}\n"
        f"Return at most {MAX_INSIGHTS} insights.\n\n"
        f"Calculator report (JSON):\n{json.dumps(payload, indent=2)}"
    )


# ── Rule-based fallback ──────────────────────────────────


def _pricing_insight(report: PricingReport) -> NarrativeInsight:
    ins = report.insights
    current = report.inputs.current_price
    return NarrativeInsight(
        id="pricing-1",
        type=AnalysisType.PRICING,
        title=f"Pricing position: {ins.price_position.value}",
        description=(
            f"At ${current:,.2f} per customer the suggested price is "
            f"${ins.suggested_price:,.2f}, an optimization potential of "
            f"{ins.optimization_potential}%. The calculated plan is "
            f"${report.monthly_price:,}/month across {len(report.tiers)} tiers."
        ),
        confidence=75,
        recommendations=list(report.recommendations[:3]),
        impact={"revenue": f"+{ins.optimization_potential}%"} if ins.optimization_potential else {},
        difficulty="medium" if ins.optimization_potential > 10 else "low",
        timeline="1-3 months",
        metrics=["monthlyPrice", "suggestedPrice"],
    )


def _competitive_insight(report: PricingReport) -> NarrativeInsight:
    ins = report.insights
    if ins.competitive_position is None:
        return NarrativeInsight(
            id="competitive-1",
            type=AnalysisType.COMPETITIVE,
            title="No competitor benchmark",
            description="Add a competitor price to compare your positioning against the market.",
            confidence=40,
            recommendations=["Collect list prices from your two closest competitors"],
            difficulty="low",
            timeline="1-2 weeks",
        )

    wording = {
        CompetitivePosition.PREMIUM: "above",
        CompetitivePosition.PARITY: "in line with",
        CompetitivePosition.VALUE: "below",
    }[ins.competitive_position]
    return NarrativeInsight(
        id="competitive-1",
        type=AnalysisType.COMPETITIVE,
        title=f"Competitive position: {ins.competitive_position.value}",
        description=(
            f"Your price is {wording} the competitor benchmark "
            f"({ins.competitor_gap_percent:+d}%)."
        ),
        confidence=70,
        recommendations=[
            r for r in report.recommendations if "competitor" in r.lower()
        ],
        impact={"conversion": "positioning"},
        difficulty="medium",
        timeline="1-2 months",
        metrics=["competitorGapPercent"],
    )


def _market_insight(report: PricingReport) -> NarrativeInsight:
    inputs = report.inputs
    net_growth = inputs.growth_rate - inputs.churn_rate
    metrics = report.metrics
    if metrics is not None and metrics.ltv_cac_ratio is not None:
        economics = f" LTV:CAC is {metrics.ltv_cac_ratio}:1."
    else:
        economics = ""
    return NarrativeInsight(
        id="market-1",
        type=AnalysisType.MARKET,
        title="Growth outpaces churn" if net_growth > 0 else "Churn offsets growth",
        description=(
            f"Monthly growth of {inputs.growth_rate:g}% against churn of "
            f"{inputs.churn_rate:g}% gives net growth of {net_growth:+g}%.{economics}"
        ),
        confidence=65,
        recommendations=[
            r for r in report.recommendations if "churn" in r.lower() or "ltv" in r.lower()
        ],
        impact={"retention": f"{inputs.churn_rate:g}% monthly churn"},
        difficulty="high" if net_growth <= 0 else "medium",
        timeline="3-6 months",
        metrics=["growthRate", "churnRate", "ltvCacRatio"],
    )


_FALLBACKS: dict[AnalysisType, tuple[Callable[[PricingReport], NarrativeInsight], ...]] = {
    AnalysisType.PRICING: (_pricing_insight,),
    AnalysisType.COMPETITIVE: (_competitive_insight,),
    AnalysisType.MARKET: (_market_insight,),
    AnalysisType.COMPREHENSIVE: (_pricing_insight, _competitive_insight, _market_insight),
}


def fallback_insights(report: PricingReport, analysis_type: AnalysisType) -> list[NarrativeInsight]:
    return [build(report) for build in _FALLBACKS[analysis_type]]


# ── Service ──────────────────────────────────────────────


class InsightService:
    """
    Generates narrative insights, caching them by input fingerprint.
    In mock mode no LLM call is made. The cache holds at most
    ``cache_max_entries`` results; expired ones are purged on every write and
    the oldest are evicted first.
    """

    def __init__(
        self,
        mock_mode: bool | None = None,
        cache_ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        cache_max_entries: int | None = None,
    ):
        settings = get_settings()
        self.mock_mode = settings.mock_mode if mock_mode is None else mock_mode
        self.cache_ttl_seconds = (
            settings.insight_cache_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds
        )
        self.cache_max_entries = max(
            1, settings.insight_cache_max_entries if cache_max_entries is None else cache_max_entries
        )
        self._clock = clock
        self._lock = threading.Lock()
        # insertion order == age order
        self._cache: dict[str, tuple[float, list[NarrativeInsight]]] = {}

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def _cache_key(self, report: PricingReport, analysis_type: AnalysisType) -> str:
        return fingerprint({"inputs": report.inputs.to_payload(), "type": analysis_type.value})

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.cache_ttl_seconds

    def _get_cached(self, key: str) -> list[NarrativeInsight] | None:
        with self._lock:
            hit = self._cache.get(key)
            if hit is None:
                return None
            stored_at, insights = hit
            if self._expired(stored_at, self._clock()):
                del self._cache[key]
                return None
            return list(insights)

    def _store(self, key: str, insights: list[NarrativeInsight]) -> None:
        now = self._clock()
        with self._lock:
            self._cache.pop(key, None)
            for stale in [k for k, (stored_at, _) in self._cache.items() if self._expired(stored_at, now)]:
                del self._cache[stale]
            while len(self._cache) >= self.cache_max_entries:
                oldest = next(iter(self._cache))
                del self._cache[oldest]
                logger.debug(f"Insight cache full, evicted {oldest[:12]}")
            self._cache[key] = (now, insights)

    def generate(
        self,
        report: PricingReport,
        analysis_type: AnalysisType = AnalysisType.COMPREHENSIVE,
    ) -> list[NarrativeInsight]:
        key = self._cache_key(report, analysis_type)
        cached = self._get_cached(key)
        if cached is not None:
            logger.info(f"Insight cache hit ({analysis_type.value})")
            return cached

        if self.mock_mode:
            insights = fallback_insights(report, analysis_type)
        else:
            try:
                result = llm_service.llm_json_call(
                    SYSTEM_PROMPTS[analysis_type],
                    build_prompt(report, analysis_type),
                    NarrativeInsightList,
                )
                insights = result.insights[:MAX_INSIGHTS]
            except Exception as e:
                # collaborator failure: serve the rule-based narrative, don't cache it
                logger.warning(f"LLM insight generation failed, using fallback: {e}")
                return fallback_insights(report, analysis_type)

        self._store(key, insights)
        return list(insights)

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
