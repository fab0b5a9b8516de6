"""Accounts API routes."""

from packages.accounts.routes import accounts, locations

__all__ = ["accounts", "locations"]
