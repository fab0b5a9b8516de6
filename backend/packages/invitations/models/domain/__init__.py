"""Domain models for invitations."""

from packages.invitations.models.domain.invitation import (
    Invitation,
    InvitationCreateModel,
    InvitationPreview,
    InvitationStatus,
)

__all__ = [
    "Invitation",
    "InvitationCreateModel",
    "InvitationPreview",
    "InvitationStatus",
]
