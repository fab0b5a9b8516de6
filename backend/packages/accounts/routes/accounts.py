"""
Accounts API routes.

Every route acts for the gateway-authenticated user.
"""

from fastapi import APIRouter, Depends, status

from common.db.context import readonly
from packages.auth.dependencies import get_current_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.accounts.models.domain.access_request import AccessRequest
from packages.accounts.models.domain.account import Account, AccountCreateModel
from packages.accounts.models.domain.membership import Membership
from packages.accounts.models.schemas.accounts import (
    AccessRequestCreateRequest,
    AccessRequestListResponse,
    AccessResponse,
    AccountListResponse,
    LocationListResponse,
    MemberListResponse,
    MergeResponse,
    PendingCountResponse,
)
from packages.accounts.services.access_request_service import AccessRequestService
from packages.accounts.services.location_service import LocationService
from packages.accounts.services.tenancy_service import TenancyService

router = APIRouter()


@router.get("", response_model=AccountListResponse)
@readonly
async def list_accounts(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    accounts = await TenancyService().list_user_accounts(current_user.user_id)
    return AccountListResponse(accounts=accounts)


@router.post("", response_model=Account, status_code=status.HTTP_201_CREATED)
async def create_account(
    request: AccountCreateModel,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create an account owned by the caller."""
    return await TenancyService().create_account_for_user(
        current_user.user_id, request
    )


@router.get("/access-requests/pending-count", response_model=PendingCountResponse)
@readonly
async def pending_access_request_count(
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Pending access requests on every account the caller belongs to."""
    count = await AccessRequestService().get_pending_request_count(
        current_user.user_id
    )
    return PendingCountResponse(count=count)


@router.post("/access-requests/{request_id}/approve", response_model=Membership)
async def approve_access_request(
    request_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return await AccessRequestService().approve_request(
        current_user.user_id, request_id
    )


@router.post("/access-requests/{request_id}/reject", response_model=AccessRequest)
async def reject_access_request(
    request_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return await AccessRequestService().reject_request(
        current_user.user_id, request_id
    )


@router.get("/{account_id}/access", response_model=AccessResponse)
@readonly
async def check_access(
    account_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    has_access = await TenancyService().has_access(current_user.user_id, account_id)
    return AccessResponse(account_id=account_id, has_access=has_access)


@router.post("/{account_id}/merge", response_model=MergeResponse)
async def merge_into_account(
    account_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """
    Join an account through its connected business profile.

    Returns ``already_member=true`` when the caller was already a member.
    The caller's other empty accounts are cleaned up in the background.
    """
    membership = await TenancyService().connect_account(
        current_user.user_id, current_user.email, account_id
    )
    return MergeResponse(
        account_id=account_id,
        already_member=membership is None,
        membership=membership,
    )


@router.get("/{account_id}/locations", response_model=LocationListResponse)
@readonly
async def list_locations(
    account_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    locations = await LocationService().list_account_locations(
        current_user.user_id, account_id
    )
    return LocationListResponse(locations=locations)


@router.get("/{account_id}/members", response_model=MemberListResponse)
@readonly
async def list_members(
    account_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    members = await TenancyService().list_account_members(
        current_user.user_id, account_id
    )
    return MemberListResponse(members=members)


@router.delete(
    "/{account_id}/members/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_member(
    account_id: str,
    member_user_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    await TenancyService().remove_member(
        current_user.user_id, account_id, member_user_id
    )


@router.post(
    "/{account_id}/access-requests",
    response_model=AccessRequest,
    status_code=status.HTTP_201_CREATED,
)
async def request_access(
    account_id: str,
    request: AccessRequestCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Ask to join an account. Any current member may approve or reject."""
    return await AccessRequestService().request_access(
        current_user.user_id, account_id, request.message
    )


@router.get("/{account_id}/access-requests", response_model=AccessRequestListResponse)
@readonly
async def list_access_requests(
    account_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    requests = await AccessRequestService().get_pending_requests(
        current_user.user_id, account_id
    )
    return AccessRequestListResponse(requests=requests)
