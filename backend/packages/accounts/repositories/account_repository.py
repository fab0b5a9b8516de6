"""
Repository for accounts.
"""

from typing import List
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from common.repositories.base import BaseRepository
from common.core.otel_axiom_exporter import trace_span
from packages.accounts.models.database.account import AccountEntity
from packages.accounts.models.database.membership import MembershipEntity
from packages.accounts.models.domain.account import Account, AccountSnapshot


class AccountRepository(BaseRepository[AccountEntity, Account]):
    """Repository for managing accounts."""

    def __init__(self):
        super().__init__(AccountEntity, Account)

    @trace_span
    async def list_for_user(self, user_id: str) -> List[Account]:
        """Accounts the user holds a membership on, oldest first."""
        async with self._get_session() as session:
            result = await session.execute(
                select(AccountEntity)
                .join(MembershipEntity, MembershipEntity.account_id == AccountEntity.id)
                .where(MembershipEntity.user_id == user_id)
                .order_by(AccountEntity.created_at, AccountEntity.id)
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def get_snapshots_for_user(
        self, user_id: str, exclude_account_id: str
    ) -> List[AccountSnapshot]:
        """
        Load every other account the user belongs to, with all of its
        locations and all of its memberships.
        """
        async with self._get_session() as session:
            result = await session.execute(
                select(AccountEntity)
                .join(MembershipEntity, MembershipEntity.account_id == AccountEntity.id)
                .where(
                    MembershipEntity.user_id == user_id,
                    AccountEntity.id != exclude_account_id,
                )
                .options(
                    selectinload(AccountEntity.locations),
                    selectinload(AccountEntity.memberships),
                )
            )
            accounts = result.scalars().unique().all()
            return [
                AccountSnapshot(
                    id=account.id,
                    location_count=len(account.locations),
                    membership_count=len(account.memberships),
                )
                for account in accounts
            ]
