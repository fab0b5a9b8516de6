"""Invitations API routes."""

from packages.invitations.routes import invitations

__all__ = ["invitations"]
