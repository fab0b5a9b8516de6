from packages.invitations.repositories.invitation_repository import (
    InvitationRepository,
)

__all__ = ["InvitationRepository"]
