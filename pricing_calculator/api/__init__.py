"""
FastAPI application factory and API package.

Run with:
    uvicorn pricing_calculator.api:app --reload --port 8000

Or via main.py:
    python -m pricing_calculator.main --serve
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pricing_calculator.catalog import CheckoutCatalog
from pricing_calculator.config import get_settings
from pricing_calculator.services import InsightService, LeadService
from pricing_calculator.api.routes import calculator_router, health_router
from pricing_calculator.api.admin_routes import admin_router

logger = logging.getLogger(__name__)


def create_app(
    lead_service: LeadService | None = None,
    insight_service: InsightService | None = None,
    catalog: CheckoutCatalog | None = None,
) -> FastAPI:
    """Create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title="SaaS Pricing Calculator API",
        description="Pricing engine, insights and checkout catalog for the SaaS pricing calculator",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Collaborators are created once here and injected into routes
    application.state.lead_service = lead_service or LeadService()
    application.state.insight_service = insight_service or InsightService()
    application.state.catalog = catalog or CheckoutCatalog(public_url=settings.public_url)

    application.include_router(health_router, tags=["Health"])
    application.include_router(calculator_router, prefix="/api", tags=["Calculator"])
    application.include_router(admin_router, prefix="/api/admin", tags=["Admin"])

    logger.info(f"Created {settings.app_name} API ({settings.environment})")
    return application


# Module-level instance for `uvicorn pricing_calculator.api:app`
app = create_app()
