"""Catalog — static checkout price list."""

from pricing_calculator.catalog.checkout_catalog import (
    CatalogEntry,
    CatalogError,
    CheckoutCatalog,
    CheckoutItem,
)

__all__ = ["CatalogEntry", "CatalogError", "CheckoutCatalog", "CheckoutItem"]
