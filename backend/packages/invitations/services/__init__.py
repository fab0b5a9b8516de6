"""Invitation services."""

from packages.invitations.services.invitation_service import InvitationService

__all__ = ["InvitationService"]
