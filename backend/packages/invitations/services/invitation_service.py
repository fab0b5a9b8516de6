"""
Service for location invitations.

Accepting an invitation runs in one transaction with the invitation row
locked: status check, expiry, email match, the conditional status update and
the membership insert either all apply or none do. The one exception is a
lapsed invitation, whose expired status is committed before the error is
raised.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from common.core.config import settings
from common.core.exceptions import (
    EmailMismatch,
    InvitationAlreadyUsed,
    InvitationCancelled,
    InvitationExpired,
    InvitationNotFound,
)
from common.core.otel_axiom_exporter import trace_span, get_logger, log_span_event
from common.db.scoped import transaction
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.accounts.models.domain.membership import (
    Membership,
    MembershipCreateModel,
)
from packages.accounts.models.domain.enums import MembershipRole
from packages.accounts.repositories.location_repository import LocationRepository
from packages.accounts.repositories.membership_repository import MembershipRepository
from packages.accounts.services.location_service import LocationService
from packages.accounts.services.tenancy_service import emails_match
from packages.invitations.repositories.invitation_repository import (
    InvitationRepository,
)
from packages.invitations.models.domain.invitation import (
    Invitation,
    InvitationCreateModel,
    InvitationPreview,
    InvitationStatus,
)

logger = get_logger(__name__)

TOKEN_BYTES = 32

_TERMINAL_STATUS_ERRORS = {
    InvitationStatus.ACCEPTED: InvitationAlreadyUsed,
    InvitationStatus.CANCELLED: InvitationCancelled,
    InvitationStatus.EXPIRED: InvitationExpired,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _raise_if_not_pending(invitation: Invitation) -> None:
    error = _TERMINAL_STATUS_ERRORS.get(invitation.status)
    if error is not None:
        raise error()


class InvitationService:
    """Service for creating, accepting and cancelling invitations."""

    def __init__(self):
        self.invitation_repo = InvitationRepository()
        self.location_repo = LocationRepository()
        self.membership_repo = MembershipRepository()
        self.location_service = LocationService()

    @trace_span
    async def create_invitation(
        self, user_id: str, location_id: str, email: str
    ) -> Invitation:
        """Invite ``email`` to a location the caller can access."""
        await self.location_service.get_location_for_user(user_id, location_id)

        invitation = await self.invitation_repo.create(
            InvitationCreateModel(
                token=secrets.token_hex(TOKEN_BYTES),
                location_id=location_id,
                email=email.strip().lower(),
                invited_by_user_id=user_id,
                expires_at=_utcnow() + timedelta(days=settings.invitation_ttl_days),
            )
        )

        logger.info(
            f"Created invitation {invitation.id} for location {location_id}",
            extra={
                "user_id": user_id,
                "location_id": location_id,
                "invitation_id": invitation.id,
            },
        )
        return invitation

    @trace_span
    async def accept_invitation(
        self, user: AuthenticatedUser, token: str, now: Optional[datetime] = None
    ) -> Membership:
        """
        Redeem ``token`` for the calling user.

        Returns the membership on the location's account. If the user was
        already a member, the existing membership is returned unchanged.

        Raises:
            InvitationNotFound: No invitation has this token
            InvitationAlreadyUsed: Already accepted, including by a concurrent request
            InvitationCancelled: Cancelled by the inviter
            InvitationExpired: Past its expiry time
            EmailMismatch: The caller's email is not the invited address
        """
        now = now or _utcnow()
        lapsed: Optional[Invitation] = None

        async with transaction():
            invitation = await self.invitation_repo.get_by_token(token, for_update=True)
            if invitation is None:
                raise InvitationNotFound()

            _raise_if_not_pending(invitation)

            if invitation.is_expired(now):
                await self.invitation_repo.mark_expired(invitation.id)
                lapsed = invitation
            else:
                membership = await self._redeem(invitation, user, now)

        if lapsed is not None:
            logger.info(
                f"Invitation {lapsed.id} expired on acceptance",
                extra={"invitation_id": lapsed.id, "user_id": user.user_id},
            )
            raise InvitationExpired()

        logger.info(
            f"User {user.user_id} joined account {membership.account_id} via invitation",
            extra={
                "user_id": user.user_id,
                "account_id": membership.account_id,
                "invitation_token_prefix": token[:8],
            },
        )
        return membership

    async def _redeem(
        self, invitation: Invitation, user: AuthenticatedUser, now: datetime
    ) -> Membership:
        if not emails_match(user.email, invitation.email):
            logger.warning(
                f"User {user.user_id} tried to accept invitation {invitation.id} for another email",
                extra={"user_id": user.user_id, "invitation_id": invitation.id},
            )
            raise EmailMismatch()

        location = await self.location_repo.get(invitation.location_id)
        if location is None:
            raise InvitationNotFound()

        accepted = await self.invitation_repo.mark_accepted(
            invitation.id, user.user_id, now
        )
        if not accepted:
            raise InvitationAlreadyUsed()

        membership = await self.membership_repo.insert_if_absent(
            MembershipCreateModel(
                user_id=user.user_id,
                account_id=location.account_id,
                role=MembershipRole.MEMBER,
            )
        )
        if membership is None:
            log_span_event(
                f"User {user.user_id} already a member of account {location.account_id}",
                {"user_id": user.user_id, "account_id": location.account_id},
            )
            membership = await self.membership_repo.get_membership(
                user.user_id, location.account_id
            )
        return membership

    @trace_span
    async def cancel_invitation(
        self, user_id: str, invitation_id: str, now: Optional[datetime] = None
    ) -> None:
        """Cancel a pending invitation. A lapsed one is marked expired instead."""
        invitation = await self.invitation_repo.get(invitation_id)
        if invitation is None:
            raise InvitationNotFound()

        await self.location_service.get_location_for_user(
            user_id, invitation.location_id
        )
        _raise_if_not_pending(invitation)

        if invitation.is_expired(now or _utcnow()):
            await self.invitation_repo.mark_expired(invitation_id)
            raise InvitationExpired()

        if not await self.invitation_repo.mark_cancelled(invitation_id):
            # Lost a race with acceptance or expiry
            current = await self.invitation_repo.get(invitation_id)
            _raise_if_not_pending(current)

        logger.info(
            f"Cancelled invitation {invitation_id}",
            extra={"user_id": user_id, "invitation_id": invitation_id},
        )

    @trace_span
    async def get_pending_invitations(
        self, user_id: str, location_id: str
    ) -> List[Invitation]:
        await self.location_service.get_location_for_user(user_id, location_id)
        return await self.invitation_repo.list_pending_for_location(
            location_id, _utcnow()
        )

    @trace_span
    async def get_invitation_preview(self, token: str) -> InvitationPreview:
        """Public view of an invitation for its landing page."""
        invitation = await self.invitation_repo.get_by_token(token)
        if invitation is None:
            raise InvitationNotFound()

        location = await self.location_repo.get(invitation.location_id)
        if location is None:
            raise InvitationNotFound()

        return InvitationPreview(
            location_id=location.id,
            location_name=location.name,
            status=invitation.effective_status(_utcnow()),
            expires_at=invitation.expires_at,
        )
