from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from common.core.exceptions import AppException
from common.core.otel_axiom_exporter import get_logger

logger = get_logger(__name__)

STATUS_BY_CODE = {
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "access_denied": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_plan": status.HTTP_400_BAD_REQUEST,
    "quota_exceeded": status.HTTP_429_TOO_MANY_REQUESTS,
    "invitation_not_found": status.HTTP_404_NOT_FOUND,
    "invitation_already_used": status.HTTP_409_CONFLICT,
    "invitation_cancelled": status.HTTP_410_GONE,
    "invitation_expired": status.HTTP_410_GONE,
    "email_mismatch": status.HTTP_403_FORBIDDEN,
    "already_member": status.HTTP_409_CONFLICT,
    "last_owner": status.HTTP_409_CONFLICT,
    "access_request_not_found": status.HTTP_404_NOT_FOUND,
    "access_request_pending": status.HTTP_409_CONFLICT,
    "access_request_closed": status.HTTP_409_CONFLICT,
    "configuration_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "store_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Invitation failures are shown to the invitee as-is
USER_MESSAGES = {
    "invitation_not_found": "This invitation link is not valid. Ask the location owner to send a new one.",
    "invitation_already_used": "This invitation has already been used.",
    "invitation_cancelled": "This invitation was cancelled by the location owner.",
    "invitation_expired": "This invitation has expired. Ask the location owner to send a new one.",
    "email_mismatch": "This invitation was sent to a different email address. Sign in with the invited email to accept it.",
}


def status_for(exc: AppException) -> int:
    return STATUS_BY_CODE.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(
            f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
            extra={"code": exc.code, "path": request.url.path},
        )
        # Store and configuration details stay in the logs
        detail = "Internal server error"
    else:
        detail = USER_MESSAGES.get(exc.code, exc.message)

    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "code": exc.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
