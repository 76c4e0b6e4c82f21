"""
Pricing calculation core: validator and engine behind one function.

    from pricing_calculator.engine import calculate_pricing
    calculate_pricing({"currentPrice": 99, "customers": 100, ...})
"""

from __future__ import annotations

from typing import Any, Mapping

from pricing_calculator.models.schemas import ValidationError
from .validator import validate, FIELD_ORDER
from .pricing_engine import calculate, EngineConstants, DEFAULT_CONSTANTS
from .insights import build_insights, build_recommendations, suggest_price


def calculate_pricing(raw: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Validate and price a raw payload.

    Returns ``{"success": True, "data": report}`` or
    ``{"success": False, "error": {"field": ..., "reason": ...}}``.
    """
    result = validate(raw)
    if isinstance(result, ValidationError):
        return {"success": False, "error": result.to_payload()}
    return {"success": True, "data": calculate(result).to_payload()}


__all__ = [
    "calculate_pricing",
    "validate",
    "calculate",
    "FIELD_ORDER",
    "EngineConstants",
    "DEFAULT_CONSTANTS",
    "build_insights",
    "build_recommendations",
    "suggest_price",
]
