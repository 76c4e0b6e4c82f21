"""
Checkout Catalog — the static, contractual price list used at purchase time.

Report tiers are derived from each calculation and are for display only; the
checkout collaborator charges the fixed amounts below, looked up by tier name.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import BaseModel

from pricing_calculator.config import get_settings
from pricing_calculator.models.enums import BillingCycle
from pricing_calculator.models.schemas import CamelModel

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Unknown tier or billing cycle."""


# ── Catalog models ───────────────────────────────────────

class CatalogEntry(BaseModel):
    key: str
    name: str
    amount: int  # whole dollars
    description: str
    onetime_price_id: str = ""
    subscription_price_id: str = ""


class CheckoutItem(CamelModel):
    """Line item handed to the payment collaborator."""
    tier: str
    name: str
    description: str
    unit_amount: int  # cents
    currency: str = "usd"
    mode: str  # "payment" | "subscription"
    recurring_interval: Optional[str] = None
    price_id: str = ""
    success_url: str
    cancel_url: str


DEFAULT_ENTRIES: tuple[CatalogEntry, ...] = (
    CatalogEntry(
        key="starter",
        name="Starter",
        amount=99,
        description=(
            "Perfect for bootstrapped startups. Includes core calculator, "
            "basic metrics, and PDF exports."
        ),
    ),
    CatalogEntry(
        key="professional",
        name="Professional",
        amount=199,
        description=(
            "For growing SaaS companies. Includes AI insights, advanced analytics, "
            "team collaboration, and Excel exports."
        ),
    ),
    CatalogEntry(
        key="enterprise",
        name="Enterprise",
        amount=499,
        description=(
            "For established businesses. Includes everything plus unlimited seats, "
            "white-label options, API access, and dedicated support."
        ),
    ),
)


# ── Catalog ──────────────────────────────────────────────

class CheckoutCatalog:
    """Case-insensitive tier lookup over a fixed set of catalog entries."""

    def __init__(
        self,
        entries: tuple[CatalogEntry, ...] = DEFAULT_ENTRIES,
        public_url: str | None = None,
    ):
        self._entries = {entry.key: entry for entry in entries}
        self.public_url = (public_url or get_settings().public_url).rstrip("/")

    def list_entries(self) -> list[CatalogEntry]:
        return list(self._entries.values())

    def get(self, tier_name: str) -> CatalogEntry:
        if not tier_name or not tier_name.strip():
            raise CatalogError("Tier name is required")
        entry = self._entries.get(tier_name.strip().lower())
        if entry is None:
            raise CatalogError(f"Invalid tier: {tier_name}")
        return entry

    def resolve(self, tier_name: str, billing_cycle: str = BillingCycle.ONETIME.value) -> CheckoutItem:
        """Build the checkout line item for a tier and billing cycle."""
        entry = self.get(tier_name)
        try:
            cycle = BillingCycle((billing_cycle or BillingCycle.ONETIME.value).strip().lower())
        except ValueError:
            raise CatalogError(f"Invalid billing cycle: {billing_cycle}")

        subscription = cycle == BillingCycle.SUBSCRIPTION
        item = CheckoutItem(
            tier=entry.key,
            name=f"SaaS Pricing Calculator - {entry.name}",
            description=entry.description,
            unit_amount=entry.amount * 100,
            mode="subscription" if subscription else "payment",
            recurring_interval="month" if subscription else None,
            price_id=entry.subscription_price_id if subscription else entry.onetime_price_id,
            success_url=f"{self.public_url}/success?tier={entry.key}&session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.public_url}/pricing",
        )
        logger.info(f"Resolved checkout item {entry.key} ({cycle.value}) → {item.unit_amount} cents")
        return item
