"""
Service for account tenancy.

Owns the account/membership graph: who may act on which account, how a user
joins an account, and how dead accounts left behind by repeated connect flows
are reclaimed.
"""

from typing import List, Optional

from common.core.background import run_detached
from common.core.exceptions import AccessDenied, LastOwner, NotFoundError
from common.core.otel_axiom_exporter import trace_span, get_logger, log_span_event
from common.db.context import transactional
from packages.accounts.repositories.account_repository import AccountRepository
from packages.accounts.repositories.membership_repository import MembershipRepository
from packages.accounts.models.domain.account import Account, AccountCreateModel
from packages.accounts.models.domain.enums import MembershipRole
from packages.accounts.models.domain.membership import (
    AccountMember,
    Membership,
    MembershipCreateModel,
)

logger = get_logger(__name__)


class TenancyService:
    """Service for account membership and access."""

    def __init__(self):
        self.account_repo = AccountRepository()
        self.membership_repo = MembershipRepository()

    @trace_span
    async def merge_user_into_account(
        self, user_id: str, target_account_id: str
    ) -> Optional[Membership]:
        """
        Add the user to the account as a member.

        Idempotent: returns None when the user is already a member.
        """
        membership = await self.membership_repo.insert_if_absent(
            MembershipCreateModel(
                user_id=user_id,
                account_id=target_account_id,
                role=MembershipRole.MEMBER,
            )
        )

        if membership is None:
            logger.debug(
                f"User {user_id} already a member of account {target_account_id}",
                extra={"user_id": user_id, "account_id": target_account_id},
            )
        else:
            logger.info(
                f"Merged user {user_id} into account {target_account_id}",
                extra={"user_id": user_id, "account_id": target_account_id},
            )

        return membership

    @trace_span
    async def has_access(self, user_id: str, account_id: str) -> bool:
        return await self.membership_repo.exists(user_id, account_id)

    @trace_span
    async def require_access(self, user_id: str, account_id: str) -> None:
        """Raise AccessDenied unless the user is a member of the account."""
        if not await self.has_access(user_id, account_id):
            logger.warning(
                f"User {user_id} denied access to account {account_id}",
                extra={"user_id": user_id, "account_id": account_id},
            )
            raise AccessDenied(f"No access to account {account_id}")

    @trace_span
    async def cleanup_orphaned_accounts(
        self, user_id: str, exclude_account_id: str
    ) -> None:
        """
        Delete the user's other accounts that have no locations and no other members.

        Each account is judged on a snapshot read; a location created between
        the read and the delete is lost with the account. Store errors propagate.
        """
        snapshots = await self.account_repo.get_snapshots_for_user(
            user_id, exclude_account_id
        )

        deleted = 0
        for snapshot in snapshots:
            if not snapshot.is_orphaned():
                continue

            # Memberships go with the account via ON DELETE CASCADE
            await self.account_repo.delete(snapshot.id)
            deleted += 1
            log_span_event(
                "Deleted orphaned account",
                {"user_id": user_id, "account_id": snapshot.id},
            )

        logger.info(
            f"Orphan cleanup for user {user_id}: {deleted} of {len(snapshots)} accounts deleted",
            extra={
                "user_id": user_id,
                "kept_account_id": exclude_account_id,
                "deleted": deleted,
            },
        )

    @trace_span
    @transactional
    async def create_account_for_user(
        self, user_id: str, create_model: AccountCreateModel
    ) -> Account:
        """Create an account with the caller as its owner. Both rows commit together."""
        account = await self.account_repo.create(create_model)
        await self.membership_repo.insert_if_absent(
            MembershipCreateModel(
                user_id=user_id,
                account_id=account.id,
                role=MembershipRole.OWNER,
            )
        )

        logger.info(
            f"Created account {account.id} for user {user_id}",
            extra={"user_id": user_id, "account_id": account.id},
        )
        return account

    @trace_span
    async def connect_account(
        self, user_id: str, user_email: Optional[str], target_account_id: str
    ) -> Optional[Membership]:
        """
        Join an existing account through its connected business profile.

        The caller must already be a member, or must be signed in with the
        account's connected email. After the merge, the user's other empty
        accounts are reclaimed in the background; that cleanup never affects
        the result of this call.
        """
        account = await self.account_repo.get(target_account_id)
        if account is None:
            raise NotFoundError(f"Account {target_account_id} not found")

        if not await self.has_access(user_id, target_account_id):
            if not emails_match(user_email, account.email):
                logger.warning(
                    f"User {user_id} cannot connect account {target_account_id}",
                    extra={"user_id": user_id, "account_id": target_account_id},
                )
                raise AccessDenied(f"No access to account {target_account_id}")

        membership = await self.merge_user_into_account(user_id, target_account_id)

        run_detached(
            "cleanup_orphaned_accounts",
            lambda: self.cleanup_orphaned_accounts(user_id, target_account_id),
            user_id=user_id,
            account_id=target_account_id,
        )

        return membership

    @trace_span
    async def list_user_accounts(self, user_id: str) -> List[Account]:
        return await self.account_repo.list_for_user(user_id)

    @trace_span
    async def get_membership(
        self, user_id: str, account_id: str
    ) -> Optional[Membership]:
        return await self.membership_repo.get_membership(user_id, account_id)

    @trace_span
    async def list_account_members(
        self, user_id: str, account_id: str
    ) -> List[AccountMember]:
        await self.require_access(user_id, account_id)
        return await self.membership_repo.list_for_account(account_id)

    @trace_span
    @transactional
    async def remove_member(
        self, user_id: str, account_id: str, member_user_id: str
    ) -> None:
        """
        Remove a member from the account. Any member may remove any other,
        themselves included, but the last owner always stays.
        """
        await self.require_access(user_id, account_id)

        membership = await self.membership_repo.get_membership(
            member_user_id, account_id
        )
        if membership is None:
            raise NotFoundError(
                f"User {member_user_id} is not a member of account {account_id}"
            )

        if membership.role == MembershipRole.OWNER:
            if await self.membership_repo.count_owners(account_id) <= 1:
                raise LastOwner()

        await self.membership_repo.delete_membership(member_user_id, account_id)

        logger.info(
            f"User {user_id} removed {member_user_id} from account {account_id}",
            extra={
                "user_id": user_id,
                "account_id": account_id,
                "member_user_id": member_user_id,
            },
        )


def emails_match(a: Optional[str], b: Optional[str]) -> bool:
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()
