"""
Request-scoped accessors for the services created in create_app().

Routes receive their collaborators through Depends(...) rather than module
globals, so tests can swap them via app.dependency_overrides.
"""

from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request

from pricing_calculator.catalog import CheckoutCatalog
from pricing_calculator.config import Settings, get_settings
from pricing_calculator.services import InsightService, LeadService


def get_lead_service(request: Request) -> LeadService:
    return request.app.state.lead_service


def get_insight_service(request: Request) -> InsightService:
    return request.app.state.insight_service


def get_catalog(request: Request) -> CheckoutCatalog:
    return request.app.state.catalog


def require_admin(
    x_admin_token: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Reject admin calls unless X-Admin-Token matches the configured token."""
    if not settings.admin_token:
        raise HTTPException(status_code=503, detail="Admin interface is not configured")
    if not x_admin_token or not secrets.compare_digest(x_admin_token, settings.admin_token):
        raise HTTPException(status_code=401, detail="Invalid admin token")
