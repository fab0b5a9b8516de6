"""
Unit tests for AccessRequestService.
"""

import pytest
from datetime import datetime, timezone
from sqlalchemy import select

from common.core.exceptions import (
    AccessDenied,
    AccessRequestClosed,
    AccessRequestNotFound,
    AccessRequestPending,
    AlreadyMember,
    NotFoundError,
)
from packages.accounts.models.database import AccessRequestEntity
from packages.accounts.models.domain.enums import AccessRequestStatus, MembershipRole
from packages.accounts.services.access_request_service import AccessRequestService
from packages.accounts.services.tenancy_service import TenancyService
from packages.users.models.database.user import UserEntity

DECIDED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


async def _request_row(test_db, request_id):
    result = await test_db.execute(
        select(
            AccessRequestEntity.status,
            AccessRequestEntity.reviewed_by_user_id,
        ).where(AccessRequestEntity.id == request_id)
    )
    return result.one()


async def _outsider(test_db):
    user = UserEntity(id="user-outsider", email="outsider@example.com")
    test_db.add(user)
    await test_db.commit()
    return user


class TestRequestAccess:
    async def test_creates_pending_request(self, sample_account, other_user_entity):
        request = await AccessRequestService().request_access(
            other_user_entity.id, sample_account.id, "  I run the weekend shift  "
        )

        assert request.status == AccessRequestStatus.PENDING
        assert request.requester_id == other_user_entity.id
        assert request.message == "I run the weekend shift"

    async def test_blank_message_is_dropped(self, sample_account, other_user_entity):
        request = await AccessRequestService().request_access(
            other_user_entity.id, sample_account.id, "   "
        )

        assert request.message is None

    async def test_member_cannot_request(self, sample_account, user_entity):
        with pytest.raises(AlreadyMember):
            await AccessRequestService().request_access(
                user_entity.id, sample_account.id
            )

    async def test_second_pending_request_is_refused(
        self, sample_account, other_user_entity
    ):
        service = AccessRequestService()
        await service.request_access(other_user_entity.id, sample_account.id)

        with pytest.raises(AccessRequestPending):
            await service.request_access(other_user_entity.id, sample_account.id)

    async def test_may_ask_again_after_rejection(
        self, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        first = await service.request_access(other_user_entity.id, sample_account.id)
        await service.reject_request(user_entity.id, first.id)

        second = await service.request_access(other_user_entity.id, sample_account.id)

        assert second.id != first.id
        assert second.status == AccessRequestStatus.PENDING

    async def test_unknown_account(self, other_user_entity):
        with pytest.raises(NotFoundError):
            await AccessRequestService().request_access(other_user_entity.id, "missing")


class TestDecideRequest:
    async def test_approve_adds_requester_as_member(
        self, test_db, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)

        membership = await service.approve_request(
            user_entity.id, request.id, now=DECIDED_AT
        )

        assert membership.user_id == other_user_entity.id
        assert membership.account_id == sample_account.id
        assert membership.role == MembershipRole.MEMBER
        assert await TenancyService().has_access(other_user_entity.id, sample_account.id)
        assert tuple(await _request_row(test_db, request.id)) == (
            "approved",
            user_entity.id,
        )

    async def test_approve_twice_is_closed(
        self, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)
        await service.approve_request(user_entity.id, request.id)

        with pytest.raises(AccessRequestClosed):
            await service.approve_request(user_entity.id, request.id)

    async def test_approve_when_requester_already_joined(
        self, test_db, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)
        await TenancyService().merge_user_into_account(
            other_user_entity.id, sample_account.id
        )

        membership = await service.approve_request(user_entity.id, request.id)

        assert membership.user_id == other_user_entity.id
        assert (await _request_row(test_db, request.id)).status == "approved"

    async def test_non_member_cannot_approve(
        self, test_db, sample_account, other_user_entity
    ):
        outsider = await _outsider(test_db)
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)

        with pytest.raises(AccessDenied):
            await service.approve_request(outsider.id, request.id)

        assert (await _request_row(test_db, request.id)).status == "pending"
        assert not await TenancyService().has_access(
            other_user_entity.id, sample_account.id
        )

    async def test_unknown_request(self, user_entity):
        with pytest.raises(AccessRequestNotFound):
            await AccessRequestService().approve_request(user_entity.id, "missing")

    async def test_reject_leaves_requester_outside(
        self, test_db, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)

        rejected = await service.reject_request(
            user_entity.id, request.id, now=DECIDED_AT
        )

        assert rejected.status == AccessRequestStatus.REJECTED
        assert rejected.reviewed_by_user_id == user_entity.id
        assert rejected.reviewed_at == DECIDED_AT
        assert (await _request_row(test_db, request.id)).status == "rejected"
        assert not await TenancyService().has_access(
            other_user_entity.id, sample_account.id
        )

        with pytest.raises(AccessRequestClosed):
            await service.approve_request(user_entity.id, request.id)


class TestPendingRequests:
    async def test_pending_list_carries_requester_identity(
        self, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        await service.request_access(other_user_entity.id, sample_account.id, "hi")

        pending = await service.get_pending_requests(user_entity.id, sample_account.id)

        assert [(p.requester_id, p.requester_email, p.message) for p in pending] == [
            (other_user_entity.id, "Other@Example.com", "hi")
        ]

    async def test_pending_list_requires_membership(
        self, sample_account, other_user_entity
    ):
        with pytest.raises(AccessDenied):
            await AccessRequestService().get_pending_requests(
                other_user_entity.id, sample_account.id
            )

    async def test_pending_count_for_members_only(
        self, test_db, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)

        assert await service.get_pending_request_count(user_entity.id) == 1
        assert await service.get_pending_request_count(other_user_entity.id) == 0

        await service.approve_request(user_entity.id, request.id)

        assert await service.get_pending_request_count(user_entity.id) == 0

    async def test_decided_requests_leave_the_list(
        self, sample_account, user_entity, other_user_entity
    ):
        service = AccessRequestService()
        request = await service.request_access(other_user_entity.id, sample_account.id)
        await service.reject_request(user_entity.id, request.id)

        assert await service.get_pending_requests(user_entity.id, sample_account.id) == []
