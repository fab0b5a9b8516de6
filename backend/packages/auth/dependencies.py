from typing import Optional

from fastapi import Request

from common.core.config import settings
from common.core.exceptions import Unauthenticated
from common.core.otel_axiom_exporter import get_logger
from packages.auth.models.domain.authenticated_user import AuthenticatedUser

logger = get_logger(__name__)


def _header(request: Request, name: str) -> Optional[str]:
    value = request.headers.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


async def get_current_user(request: Request) -> AuthenticatedUser:
    """Resolve the caller from the identity gateway's trusted headers.

    The gateway authenticates the session and forwards an opaque user id.
    A request without one is rejected before any tenancy or entitlement call.
    """
    user_id = _header(request, settings.identity_user_id_header)
    if not user_id:
        logger.info(
            "Rejected request without identity",
            extra={"path": request.url.path},
        )
        raise Unauthenticated("Missing user identity")

    return AuthenticatedUser(
        user_id=user_id,
        email=_header(request, settings.identity_email_header),
    )
