"""
API routes — thin HTTP layer over the pricing engine and its collaborators.

Routes:
  GET  /health                → API health check
  POST /api/calculate         → Validate + price a calculator payload (200 / 400 / 500)
  POST /api/insights          → Narrative insights for a calculator payload
  GET  /api/catalog           → Static checkout price list
  POST /api/checkout/quote    → Resolve {tierName, billingCycle} to a checkout line item
  POST /api/leads             → Capture an email from the pricing-guide popup
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pricing_calculator.catalog import CatalogError, CheckoutCatalog
from pricing_calculator.config import Settings, get_settings
from pricing_calculator.engine import calculate, validate
from pricing_calculator.models.enums import AnalysisType, ValidationReason
from pricing_calculator.models.schemas import ValidationError
from pricing_calculator.services import InsightService, InvalidEmailError, LeadService
from pricing_calculator.api.dependencies import (
    get_catalog,
    get_insight_service,
    get_lead_service,
)

logger = logging.getLogger(__name__)

# ── Routers ──────────────────────────────────────────────
health_router = APIRouter()
calculator_router = APIRouter()


# ── Request schemas ──────────────────────────────────────
class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CheckoutRequest(CamelRequest):
    tier_name: str = ""
    billing_cycle: str = "onetime"


class LeadRequest(CamelRequest):
    email: str = ""
    source: str = "pricing_guide"


def _validation_failure(error: ValidationError) -> JSONResponse:
    logger.info(f"Rejected calculator input: {error.field} ({error.reason.value})")
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": error.to_payload()},
    )


def _internal_error(exc: Exception) -> JSONResponse:
    logger.exception(f"Calculation failed: {exc}")
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": {"field": None, "reason": "internal_error"}},
    )


async def _read_json(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


# ── Health ───────────────────────────────────────────────

@health_router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": "SaaS Calculator API is running",
        "environment": settings.environment,
    }


# ── Calculation ──────────────────────────────────────────

@calculator_router.post("/calculate")
async def calculate_route(request: Request):
    """Validate and price the posted payload."""
    payload = await _read_json(request)

    result = validate(payload)
    if isinstance(result, ValidationError):
        return _validation_failure(result)

    try:
        report = calculate(result)
    except Exception as e:
        return _internal_error(e)

    return {"success": True, "data": report.to_payload()}


@calculator_router.post("/insights")
async def insights_route(
    request: Request,
    insight_service: InsightService = Depends(get_insight_service),
):
    """
    Body: ``{"inputs": {...calculator payload...}, "analysisType": "comprehensive"}``.
    Insight generation failures fall back to rule-based narrative.
    """
    body = await _read_json(request)
    if not isinstance(body, dict):
        body = {}

    try:
        analysis_type = AnalysisType(str(body.get("analysisType") or "comprehensive").lower())
    except ValueError:
        return _validation_failure(
            ValidationError(field="analysisType", reason=ValidationReason.INVALID_ENUM)
        )

    result = validate(body.get("inputs"))
    if isinstance(result, ValidationError):
        return _validation_failure(result)

    try:
        report = calculate(result)
    except Exception as e:
        return _internal_error(e)

    # LLM call is blocking; keep it off the event loop
    insights = await asyncio.to_thread(insight_service.generate, report, analysis_type)
    return {
        "success": True,
        "data": {
            "analysisType": analysis_type.value,
            "report": report.to_payload(),
            "insights": [insight.to_payload() for insight in insights],
        },
    }


# ── Checkout catalog ─────────────────────────────────────

@calculator_router.get("/catalog")
async def list_catalog(catalog: CheckoutCatalog = Depends(get_catalog)):
    return [entry.model_dump(include={"key", "name", "amount", "description"}) for entry in catalog.list_entries()]


@calculator_router.post("/checkout/quote")
async def checkout_quote(body: CheckoutRequest, catalog: CheckoutCatalog = Depends(get_catalog)):
    try:
        item = catalog.resolve(body.tier_name, body.billing_cycle)
    except CatalogError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return item.to_payload()


# ── Lead capture ─────────────────────────────────────────

@calculator_router.post("/leads", status_code=201)
async def capture_lead(body: LeadRequest, leads: LeadService = Depends(get_lead_service)):
    try:
        lead = leads.capture(body.email, body.source)
    except InvalidEmailError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True, "lead": lead.to_payload()}
