class AppException(Exception):
    """Base application exception.

    Every subclass carries a stable ``code`` that the API boundary uses to pick
    an HTTP status and a user-facing message.
    """

    code = "app_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__ or self.code)
        self.message = str(self)


class NotFoundError(AppException):
    """Resource not found exception."""

    code = "not_found"


class ValidationError(AppException):
    """Validation error exception."""

    code = "validation_error"


class StoreError(AppException):
    """Unrecoverable persistence failure."""

    code = "store_error"


class Unauthenticated(AppException):
    """No valid identity was supplied by the gateway."""

    code = "unauthenticated"


class AccessDenied(AppException):
    """The user has no membership on the requested account."""

    code = "access_denied"


class ConfigurationError(AppException):
    """Missing or invalid operator configuration. Fatal at startup."""

    code = "configuration_error"


class InvalidPlanError(AppException):
    """Unknown plan/interval combination."""

    code = "invalid_plan"


class QuotaExceeded(AppException):
    """A plan limit for the current billing period has been reached."""

    code = "quota_exceeded"


class InvitationError(AppException):
    """Base class for invitation acceptance failures."""

    code = "invitation_error"


class InvitationNotFound(InvitationError):
    """Invitation not found."""

    code = "invitation_not_found"


class InvitationAlreadyUsed(InvitationError):
    """Invitation has already been used."""

    code = "invitation_already_used"


class InvitationExpired(InvitationError):
    """Invitation has expired."""

    code = "invitation_expired"


class InvitationCancelled(InvitationError):
    """Invitation was cancelled."""

    code = "invitation_cancelled"


class EmailMismatch(InvitationError):
    """Invitation was sent to a different email address."""

    code = "email_mismatch"


class AlreadyMember(AppException):
    """You are already a member of this account."""

    code = "already_member"


class LastOwner(AppException):
    """Cannot remove the last owner of an account."""

    code = "last_owner"


class AccessRequestNotFound(AppException):
    """Access request not found."""

    code = "access_request_not_found"


class AccessRequestPending(AppException):
    """You already have a pending access request for this account."""

    code = "access_request_pending"


class AccessRequestClosed(AppException):
    """Access request has already been decided."""

    code = "access_request_closed"
