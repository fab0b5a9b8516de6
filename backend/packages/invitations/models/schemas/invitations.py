from typing import List
from pydantic import BaseModel, EmailStr

from packages.invitations.models.domain.invitation import Invitation


class InvitationCreateRequest(BaseModel):
    location_id: str
    email: EmailStr


class InvitationListResponse(BaseModel):
    invitations: List[Invitation]
