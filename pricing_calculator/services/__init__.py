"""Services — InsightService, LeadService."""

from pricing_calculator.services.insight_service import InsightService
from pricing_calculator.services.lead_service import LeadService, InvalidEmailError

__all__ = ["InsightService", "LeadService", "InvalidEmailError"]
