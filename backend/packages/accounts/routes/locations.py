"""
Locations API routes.
"""

from fastapi import APIRouter, Depends, status

from packages.auth.dependencies import get_current_user
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.accounts.models.domain.location import (
    Location,
    LocationCreateModel,
    LocationConfigUpdateModel,
)
from packages.accounts.services.location_service import LocationService

router = APIRouter()


@router.post("", response_model=Location, status_code=status.HTTP_201_CREATED)
async def create_location(
    request: LocationCreateModel,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Create a location in one of the caller's accounts, within the plan's location limit."""
    return await LocationService().create_location(current_user.user_id, request)


@router.get("/{location_id}", response_model=Location)
async def get_location(
    location_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    return await LocationService().get_location_for_user(
        current_user.user_id, location_id
    )


@router.patch("/{location_id}", response_model=Location)
async def update_location(
    location_id: str,
    request: LocationConfigUpdateModel,
    current_user: AuthenticatedUser = Depends(get_current_user),
):
    """Update reply configuration: tone, language, star policy, QR style, breadcrumb."""
    return await LocationService().update_location_config(
        current_user.user_id, location_id, request
    )
