"""
Service for account access requests.

A user who is not a member asks to join an account; any existing member may
approve or reject. Approval records the decision and merges the requester
into the account in one transaction.
"""

from datetime import datetime, timezone
from typing import List, Optional

from common.core.exceptions import (
    AccessRequestClosed,
    AccessRequestNotFound,
    AccessRequestPending,
    AlreadyMember,
    NotFoundError,
)
from common.core.otel_axiom_exporter import trace_span, get_logger, log_span_event
from common.db.context import transactional
from packages.accounts.models.domain.access_request import (
    AccessRequest,
    AccessRequestCreateModel,
    PendingAccessRequest,
)
from packages.accounts.models.domain.enums import AccessRequestStatus
from packages.accounts.models.domain.membership import Membership
from packages.accounts.repositories.access_request_repository import (
    AccessRequestRepository,
)
from packages.accounts.repositories.account_repository import AccountRepository
from packages.accounts.services.tenancy_service import TenancyService

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AccessRequestService:
    """Service for requesting, approving and rejecting account access."""

    def __init__(self):
        self.request_repo = AccessRequestRepository()
        self.account_repo = AccountRepository()
        self.tenancy_service = TenancyService()

    @trace_span
    @transactional
    async def request_access(
        self, user_id: str, account_id: str, message: Optional[str] = None
    ) -> AccessRequest:
        """
        File a pending request to join ``account_id``.

        Raises:
            NotFoundError: No such account
            AlreadyMember: The caller is already a member
            AccessRequestPending: The caller already has a pending request here
        """
        account = await self.account_repo.get(account_id)
        if account is None:
            raise NotFoundError(f"Account {account_id} not found")

        if await self.tenancy_service.has_access(user_id, account_id):
            raise AlreadyMember()

        if await self.request_repo.has_pending(user_id, account_id):
            raise AccessRequestPending()

        request = await self.request_repo.create(
            AccessRequestCreateModel(
                account_id=account_id,
                requester_id=user_id,
                message=message.strip() if message and message.strip() else None,
            )
        )

        logger.info(
            f"User {user_id} requested access to account {account_id}",
            extra={
                "user_id": user_id,
                "account_id": account_id,
                "access_request_id": request.id,
            },
        )
        return request

    async def _get_for_reviewer(self, user_id: str, request_id: str) -> AccessRequest:
        request = await self.request_repo.get(request_id)
        if request is None:
            raise AccessRequestNotFound()

        await self.tenancy_service.require_access(user_id, request.account_id)

        if request.status != AccessRequestStatus.PENDING:
            raise AccessRequestClosed()
        return request

    @trace_span
    @transactional
    async def approve_request(
        self, user_id: str, request_id: str, now: Optional[datetime] = None
    ) -> Membership:
        """
        Approve a pending request and add the requester to the account.

        Returns the requester's membership. If they joined some other way in
        the meantime, the existing membership is returned.
        """
        request = await self._get_for_reviewer(user_id, request_id)

        approved = await self.request_repo.mark_approved(
            request_id, user_id, now or _utcnow()
        )
        if not approved:
            # Decided by another reviewer
            raise AccessRequestClosed()

        membership = await self.tenancy_service.merge_user_into_account(
            request.requester_id, request.account_id
        )
        if membership is None:
            log_span_event(
                f"Requester {request.requester_id} already a member of account {request.account_id}",
                {"user_id": request.requester_id, "account_id": request.account_id},
            )
            membership = await self.tenancy_service.get_membership(
                request.requester_id, request.account_id
            )

        logger.info(
            f"User {user_id} approved access request {request_id}",
            extra={
                "user_id": user_id,
                "account_id": request.account_id,
                "access_request_id": request_id,
            },
        )
        return membership

    @trace_span
    @transactional
    async def reject_request(
        self, user_id: str, request_id: str, now: Optional[datetime] = None
    ) -> AccessRequest:
        request = await self._get_for_reviewer(user_id, request_id)
        reviewed_at = now or _utcnow()

        if not await self.request_repo.mark_rejected(request_id, user_id, reviewed_at):
            raise AccessRequestClosed()

        logger.info(
            f"User {user_id} rejected access request {request_id}",
            extra={"user_id": user_id, "access_request_id": request_id},
        )
        return request.model_copy(
            update={
                "status": AccessRequestStatus.REJECTED,
                "reviewed_by_user_id": user_id,
                "reviewed_at": reviewed_at,
            }
        )

    @trace_span
    async def get_pending_requests(
        self, user_id: str, account_id: str
    ) -> List[PendingAccessRequest]:
        await self.tenancy_service.require_access(user_id, account_id)
        return await self.request_repo.list_pending_for_account(account_id)

    @trace_span
    async def get_pending_request_count(self, user_id: str) -> int:
        """Pending requests awaiting the user across all their accounts."""
        return await self.request_repo.count_pending_for_member(user_id)
