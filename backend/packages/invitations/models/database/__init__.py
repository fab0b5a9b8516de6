"""Database models for invitations."""

from packages.invitations.models.database.invitation import InvitationEntity

__all__ = ["InvitationEntity"]
