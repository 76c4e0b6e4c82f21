"""
Admin routes for captured leads. Every route requires the X-Admin-Token header.

  GET    /api/admin/leads         → list captured leads
  GET    /api/admin/leads/stats   → totals (all / today / this week)
  GET    /api/admin/leads/export  → CSV download
  DELETE /api/admin/leads         → clear all leads
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from pricing_calculator.services import LeadService
from pricing_calculator.api.dependencies import get_lead_service, require_admin

logger = logging.getLogger(__name__)

admin_router = APIRouter(dependencies=[Depends(require_admin)])


@admin_router.get("/leads")
async def list_leads(leads: LeadService = Depends(get_lead_service)):
    return [lead.to_payload() for lead in leads.list_leads()]


@admin_router.get("/leads/stats")
async def lead_stats(leads: LeadService = Depends(get_lead_service)):
    return leads.stats()


@admin_router.get("/leads/export")
async def export_leads(leads: LeadService = Depends(get_lead_service)):
    filename = f"captured-emails-{datetime.now(timezone.utc).date().isoformat()}.csv"
    return PlainTextResponse(
        leads.export_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@admin_router.delete("/leads")
async def clear_leads(leads: LeadService = Depends(get_lead_service)):
    removed = leads.clear()
    logger.info(f"Admin cleared {removed} leads")
    return {"success": True, "removed": removed}
