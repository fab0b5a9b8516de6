"""
Invitations API routes.
"""

from fastapi import APIRouter, Depends, Query, status

from common.db.context import readonly
from packages.auth.dependencies import get_current_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.accounts.models.domain.membership import Membership
from packages.invitations.models.domain.invitation import (
    Invitation,
    InvitationPreview,
)
from packages.invitations.models.schemas.invitations import (
    InvitationCreateRequest,
    InvitationListResponse,
)
from packages.invitations.services.invitation_service import InvitationService

router = APIRouter()


@router.post("", response_model=Invitation, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    request: InvitationCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return await InvitationService().create_invitation(
        current_user.user_id, request.location_id, str(request.email)
    )


@router.get("", response_model=InvitationListResponse)
async def list_pending_invitations(
    location_id: str = Query(...),
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    invitations = await InvitationService().get_pending_invitations(
        current_user.user_id, location_id
    )
    return InvitationListResponse(invitations=invitations)


@router.get("/{token}", response_model=InvitationPreview)
@readonly
async def get_invitation_preview(token: str):
    """Public: location name and status for the invitation landing page."""
    return await InvitationService().get_invitation_preview(token)


@router.post("/{token}/accept", response_model=Membership)
async def accept_invitation(
    token: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return await InvitationService().accept_invitation(current_user, token)


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_invitation(
    invitation_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    await InvitationService().cancel_invitation(current_user.user_id, invitation_id)
