from fastapi import APIRouter, Depends

from api.v1.routes import (
    health,
)
from packages.accounts.routes import accounts, locations
from packages.auth.dependencies import get_current_user
from packages.billing.routes import billing, plans
from packages.invitations.routes import invitations

api_router = APIRouter()

# Health check (no auth required)
api_router.include_router(health.router, prefix="/health", tags=["health"])

# Plans (no auth - public pricing info)
api_router.include_router(plans.router, prefix="/billing/plans", tags=["billing"])

# Invitations - the landing-page preview is public, other endpoints
# authenticate per route
api_router.include_router(
    invitations.router, prefix="/invitations", tags=["invitations"]
)

# Protected routes (require an authenticated user)
api_router.include_router(
    accounts.router,
    prefix="/accounts",
    tags=["accounts"],
    dependencies=[Depends(get_current_user)],
)
api_router.include_router(
    locations.router,
    prefix="/locations",
    tags=["locations"],
    dependencies=[Depends(get_current_user)],
)
api_router.include_router(
    billing.router,
    prefix="/billing",
    tags=["billing"],
    dependencies=[Depends(get_current_user)],
)
