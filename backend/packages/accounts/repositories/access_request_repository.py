"""
Repository for account access requests.

Approve and reject are conditional updates guarded on ``status = 'pending'``,
so a request is decided at most once.
"""

from datetime import datetime
from typing import List
from sqlalchemy import select, update, func

from common.repositories.base import BaseRepository
from common.core.otel_axiom_exporter import trace_span
from packages.accounts.models.database.access_request import AccessRequestEntity
from packages.accounts.models.database.membership import MembershipEntity
from packages.accounts.models.domain.access_request import (
    AccessRequest,
    PendingAccessRequest,
)
from packages.accounts.models.domain.enums import AccessRequestStatus
from packages.users.models.database.user import UserEntity


class AccessRequestRepository(BaseRepository[AccessRequestEntity, AccessRequest]):
    """Repository for managing access requests."""

    def __init__(self):
        super().__init__(AccessRequestEntity, AccessRequest)

    @trace_span
    async def has_pending(self, requester_id: str, account_id: str) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                select(AccessRequestEntity.id)
                .where(
                    AccessRequestEntity.requester_id == requester_id,
                    AccessRequestEntity.account_id == account_id,
                    AccessRequestEntity.status == AccessRequestStatus.PENDING.value,
                )
                .limit(1)
            )
            return result.first() is not None

    async def _decide(
        self,
        request_id: str,
        status: AccessRequestStatus,
        reviewer_id: str,
        reviewed_at: datetime,
    ) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(AccessRequestEntity)
                .where(
                    AccessRequestEntity.id == request_id,
                    AccessRequestEntity.status == AccessRequestStatus.PENDING.value,
                )
                .values(
                    status=status.value,
                    reviewed_by_user_id=reviewer_id,
                    reviewed_at=reviewed_at,
                )
            )
            await session.flush()
            return result.rowcount == 1

    @trace_span
    async def mark_approved(
        self, request_id: str, reviewer_id: str, reviewed_at: datetime
    ) -> bool:
        """Returns False when the request was no longer pending."""
        return await self._decide(
            request_id, AccessRequestStatus.APPROVED, reviewer_id, reviewed_at
        )

    @trace_span
    async def mark_rejected(
        self, request_id: str, reviewer_id: str, reviewed_at: datetime
    ) -> bool:
        return await self._decide(
            request_id, AccessRequestStatus.REJECTED, reviewer_id, reviewed_at
        )

    @trace_span
    async def list_pending_for_account(
        self, account_id: str
    ) -> List[PendingAccessRequest]:
        """Pending requests with requester identity, oldest first."""
        async with self._get_session() as session:
            result = await session.execute(
                select(
                    AccessRequestEntity.id,
                    AccessRequestEntity.account_id,
                    AccessRequestEntity.requester_id,
                    AccessRequestEntity.status,
                    AccessRequestEntity.message,
                    AccessRequestEntity.reviewed_by_user_id,
                    AccessRequestEntity.reviewed_at,
                    AccessRequestEntity.created_at,
                    UserEntity.email.label("requester_email"),
                    UserEntity.name.label("requester_name"),
                )
                .join(UserEntity, UserEntity.id == AccessRequestEntity.requester_id)
                .where(
                    AccessRequestEntity.account_id == account_id,
                    AccessRequestEntity.status == AccessRequestStatus.PENDING.value,
                )
                .order_by(AccessRequestEntity.created_at, AccessRequestEntity.id)
            )
            return [
                PendingAccessRequest.model_validate(dict(row))
                for row in result.mappings()
            ]

    @trace_span
    async def count_pending_for_member(self, user_id: str) -> int:
        """Pending requests across every account the user is a member of."""
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count(AccessRequestEntity.id))
                .join(
                    MembershipEntity,
                    MembershipEntity.account_id == AccessRequestEntity.account_id,
                )
                .where(
                    MembershipEntity.user_id == user_id,
                    AccessRequestEntity.status == AccessRequestStatus.PENDING.value,
                )
            )
            return result.scalar_one() or 0
