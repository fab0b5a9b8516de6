"""
Unit tests for InvitationService.

Covers the acceptance state machine: token exists -> pending -> not expired ->
email matches, the atomic membership grant, and cancellation.
"""

import pytest
from datetime import datetime, timezone, timedelta
from sqlalchemy import select
from unittest.mock import AsyncMock, patch

from common.core.exceptions import (
    AccessDenied,
    EmailMismatch,
    InvitationAlreadyUsed,
    InvitationCancelled,
    InvitationExpired,
    InvitationNotFound,
    StoreError,
)
from packages.accounts.models.database import LocationEntity
from packages.accounts.models.domain.enums import MembershipRole
from packages.accounts.repositories import MembershipRepository
from packages.auth.models.domain.authenticated_user import AuthenticatedUser
from packages.invitations.models.database.invitation import InvitationEntity
from packages.invitations.models.domain.invitation import InvitationStatus
from packages.invitations.services.invitation_service import InvitationService
from tests.conftest import create_invitation


async def _status(test_session_factory, invitation_id) -> str:
    async with test_session_factory() as session:
        result = await session.execute(
            select(InvitationEntity.status).where(InvitationEntity.id == invitation_id)
        )
        return result.scalar_one()


class TestCreateInvitation:
    async def test_creates_pending_invitation(self, sample_location, user_entity):
        before = datetime.now(timezone.utc)

        invitation = await InvitationService().create_invitation(
            user_entity.id, sample_location.id, " New.Person@Example.com "
        )

        assert invitation.status == InvitationStatus.PENDING
        assert invitation.email == "new.person@example.com"
        assert len(invitation.token) == 64
        assert invitation.invited_by_user_id == user_entity.id
        assert invitation.expires_at >= before + timedelta(days=7)

    async def test_tokens_are_unique(self, sample_location, user_entity):
        service = InvitationService()

        first = await service.create_invitation(
            user_entity.id, sample_location.id, "a@example.com"
        )
        second = await service.create_invitation(
            user_entity.id, sample_location.id, "a@example.com"
        )

        assert first.token != second.token

    async def test_requires_access_to_location(self, sample_location, other_user_entity):
        with pytest.raises(AccessDenied):
            await InvitationService().create_invitation(
                other_user_entity.id, sample_location.id, "x@example.com"
            )


class TestAcceptInvitation:
    async def test_accept_grants_membership(
        self, test_session_factory, sample_account, sample_invitation, other_user
    ):
        membership = await InvitationService().accept_invitation(
            other_user, sample_invitation.token
        )

        assert membership.user_id == other_user.user_id
        assert membership.account_id == sample_account.id
        assert membership.role == MembershipRole.MEMBER
        assert await _status(test_session_factory, sample_invitation.id) == "accepted"

    async def test_email_match_ignores_case_and_whitespace(
        self, sample_invitation, other_user_entity
    ):
        user = AuthenticatedUser(
            user_id=other_user_entity.id, email="  OTHER@example.COM "
        )

        membership = await InvitationService().accept_invitation(
            user, sample_invitation.token
        )

        assert membership.user_id == other_user_entity.id

    async def test_unknown_token(self, other_user):
        with pytest.raises(InvitationNotFound):
            await InvitationService().accept_invitation(other_user, "f" * 64)

    async def test_second_accept_is_already_used(self, sample_invitation, other_user):
        service = InvitationService()
        await service.accept_invitation(other_user, sample_invitation.token)

        with pytest.raises(InvitationAlreadyUsed):
            await service.accept_invitation(other_user, sample_invitation.token)

    async def test_cancelled_invitation(
        self, test_db, sample_location, user_entity, other_user
    ):
        invitation = await create_invitation(
            test_db, sample_location.id, user_entity.id, status="cancelled"
        )

        with pytest.raises(InvitationCancelled):
            await InvitationService().accept_invitation(other_user, invitation.token)

    async def test_expired_invitation_is_marked_expired(
        self, test_db, test_session_factory, sample_location, user_entity, other_user
    ):
        invitation = await create_invitation(
            test_db,
            sample_location.id,
            user_entity.id,
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        )

        with pytest.raises(InvitationExpired):
            await InvitationService().accept_invitation(other_user, invitation.token)

        assert await _status(test_session_factory, invitation.id) == "expired"
        assert (
            await MembershipRepository().exists(
                other_user.user_id, sample_location.account_id
            )
            is False
        )

    async def test_expiry_checked_before_email(
        self, test_db, sample_location, user_entity
    ):
        invitation = await create_invitation(
            test_db,
            sample_location.id,
            user_entity.id,
            expires_at=datetime.now(timezone.utc) - timedelta(days=1),
        )
        stranger = AuthenticatedUser(user_id=user_entity.id, email="nobody@example.com")

        with pytest.raises(InvitationExpired):
            await InvitationService().accept_invitation(stranger, invitation.token)

    async def test_expiry_at_exact_instant(self, sample_invitation, other_user):
        expires_at = sample_invitation.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)

        with pytest.raises(InvitationExpired):
            await InvitationService().accept_invitation(
                other_user, sample_invitation.token, now=expires_at
            )

    async def test_email_mismatch(
        self, test_session_factory, sample_invitation, user_entity, test_user
    ):
        with pytest.raises(EmailMismatch):
            await InvitationService().accept_invitation(
                test_user, sample_invitation.token
            )

        assert await _status(test_session_factory, sample_invitation.id) == "pending"

    async def test_missing_email_is_mismatch(self, sample_invitation, other_user_entity):
        user = AuthenticatedUser(user_id=other_user_entity.id, email=None)

        with pytest.raises(EmailMismatch):
            await InvitationService().accept_invitation(user, sample_invitation.token)

    async def test_existing_member_keeps_membership(
        self, test_db, sample_location, user_entity
    ):
        invitation = await create_invitation(
            test_db, sample_location.id, user_entity.id, email=user_entity.email
        )
        owner = AuthenticatedUser(user_id=user_entity.id, email=user_entity.email)

        membership = await InvitationService().accept_invitation(owner, invitation.token)

        assert membership.role == MembershipRole.OWNER

    async def test_membership_failure_rolls_back_acceptance(
        self, test_session_factory, sample_invitation, other_user
    ):
        service = InvitationService()

        with patch.object(
            service.membership_repo,
            "insert_if_absent",
            AsyncMock(side_effect=StoreError("connection lost")),
        ):
            with pytest.raises(StoreError):
                await service.accept_invitation(other_user, sample_invitation.token)

        assert await _status(test_session_factory, sample_invitation.id) == "pending"

    async def test_lost_race_reports_already_used(
        self, sample_account, sample_invitation, other_user
    ):
        service = InvitationService()

        with patch.object(
            service.invitation_repo, "mark_accepted", AsyncMock(return_value=False)
        ):
            with pytest.raises(InvitationAlreadyUsed):
                await service.accept_invitation(other_user, sample_invitation.token)

        assert (
            await MembershipRepository().exists(other_user.user_id, sample_account.id)
            is False
        )


class TestCancelInvitation:
    async def test_cancel_pending(
        self, test_session_factory, sample_invitation, user_entity
    ):
        await InvitationService().cancel_invitation(user_entity.id, sample_invitation.id)

        assert await _status(test_session_factory, sample_invitation.id) == "cancelled"

    async def test_cancel_accepted_invitation(
        self, sample_invitation, user_entity, other_user
    ):
        service = InvitationService()
        await service.accept_invitation(other_user, sample_invitation.token)

        with pytest.raises(InvitationAlreadyUsed):
            await service.cancel_invitation(user_entity.id, sample_invitation.id)

    async def test_cancel_lapsed_invitation_marks_it_expired(
        self, test_db, test_session_factory, sample_location, user_entity
    ):
        invitation = await create_invitation(
            test_db,
            sample_location.id,
            user_entity.id,
            expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
        )

        with pytest.raises(InvitationExpired):
            await InvitationService().cancel_invitation(user_entity.id, invitation.id)

        assert await _status(test_session_factory, invitation.id) == "expired"

    async def test_cancel_requires_access(self, sample_invitation, other_user_entity):
        with pytest.raises(AccessDenied):
            await InvitationService().cancel_invitation(
                other_user_entity.id, sample_invitation.id
            )

    async def test_cancel_unknown(self, user_entity):
        with pytest.raises(InvitationNotFound):
            await InvitationService().cancel_invitation(user_entity.id, "missing")


class TestQueries:
    async def test_pending_invitations_exclude_lapsed_and_terminal(
        self, test_db, sample_location, sample_invitation, user_entity
    ):
        await create_invitation(
            test_db,
            sample_location.id,
            user_entity.id,
            token="b" * 64,
            expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        )
        await create_invitation(
            test_db, sample_location.id, user_entity.id, token="c" * 64, status="accepted"
        )

        pending = await InvitationService().get_pending_invitations(
            user_entity.id, sample_location.id
        )

        assert [i.id for i in pending] == [sample_invitation.id]

    async def test_preview(self, sample_location, sample_invitation):
        preview = await InvitationService().get_invitation_preview(
            sample_invitation.token
        )

        assert preview.location_name == sample_location.name
        assert preview.status == InvitationStatus.PENDING

    async def test_preview_reports_lapsed_as_expired(
        self, test_db, sample_location, user_entity
    ):
        invitation = await create_invitation(
            test_db,
            sample_location.id,
            user_entity.id,
            expires_at=datetime.now(timezone.utc) - timedelta(hours=1),
        )

        preview = await InvitationService().get_invitation_preview(invitation.token)

        assert preview.status == InvitationStatus.EXPIRED

    async def test_location_delete_removes_invitations(
        self, test_db, sample_location, sample_invitation
    ):
        await test_db.delete(await test_db.get(LocationEntity, sample_location.id))
        await test_db.commit()

        result = await test_db.execute(
            select(InvitationEntity.id).where(InvitationEntity.id == sample_invitation.id)
        )
        assert result.first() is None
