from typing import Optional
from pydantic import BaseModel


class AuthenticatedUser(BaseModel):
    """User context passed through authentication dependencies"""

    user_id: str
    email: Optional[str] = None

    class Config:
        from_attributes = True
