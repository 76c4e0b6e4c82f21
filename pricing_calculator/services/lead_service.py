"""
Lead Service — emails captured by the pricing-guide popup, plus the admin
operations (list, stats, CSV export, clear) over them.

In-memory and bounded (oldest leads dropped first); one instance is created by
the API and injected into the routes that need it.
"""

from __future__ import annotations

import csv
import io
import logging
import re
import threading
from collections import deque
from datetime import datetime, timedelta, timezone
from typing import Callable

from pricing_calculator.config import get_settings
from pricing_calculator.models.schemas import CapturedLead

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class InvalidEmailError(ValueError):
    pass


class LeadService:
    """Thread-safe in-memory store of captured leads."""

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        max_entries: int | None = None,
    ):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        limit = get_settings().lead_store_max_entries if max_entries is None else max_entries
        self._leads: deque[CapturedLead] = deque(maxlen=max(1, limit))
        self._lock = threading.Lock()

    def capture(self, email: str, source: str = "pricing_guide") -> CapturedLead:
        """Store a lead. Raises InvalidEmailError for malformed addresses."""
        normalized = (email or "").strip().lower()
        if not _EMAIL_RE.match(normalized):
            raise InvalidEmailError("Please enter a valid email")

        lead = CapturedLead(email=normalized, date=self._clock(), source=source)
        with self._lock:
            if len(self._leads) == self._leads.maxlen:
                logger.warning(f"Lead store full ({self._leads.maxlen}), dropping oldest lead")
            self._leads.append(lead)
        logger.info(f"Captured lead from {source}")
        return lead

    def list_leads(self) -> list[CapturedLead]:
        with self._lock:
            return list(self._leads)

    def stats(self) -> dict[str, int]:
        """Counts for all time, since midnight UTC, and the last 7 days."""
        now = self._clock()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        week_ago = today - timedelta(days=7)
        leads = self.list_leads()
        return {
            "total": len(leads),
            "today": sum(1 for lead in leads if lead.date >= today),
            "thisWeek": sum(1 for lead in leads if lead.date >= week_ago),
        }

    def export_csv(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(["Email", "Date Captured"])
        for lead in self.list_leads():
            writer.writerow([lead.email, lead.date.isoformat()])
        return buffer.getvalue()

    def clear(self) -> int:
        """Remove all leads and return how many were removed."""
        with self._lock:
            removed = len(self._leads)
            self._leads.clear()
        logger.warning(f"Cleared {removed} captured leads")
        return removed
