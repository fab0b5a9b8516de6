"""Billing API routes."""

from packages.billing.routes import billing, plans

__all__ = ["billing", "plans"]
