"""
Repository for user/account memberships.
"""

from typing import List, Optional
from sqlalchemy import select, func, delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from common.repositories.base import BaseRepository
from common.core.otel_axiom_exporter import trace_span
from packages.accounts.models.database.membership import MembershipEntity
from packages.accounts.models.domain.enums import MembershipRole
from packages.accounts.models.domain.membership import (
    AccountMember,
    Membership,
    MembershipCreateModel,
)
from packages.users.models.database.user import UserEntity

_INSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class MembershipRepository(BaseRepository[MembershipEntity, Membership]):
    """Repository for managing memberships. Keyed by (user_id, account_id)."""

    def __init__(self):
        super().__init__(MembershipEntity, Membership)

    @trace_span
    async def insert_if_absent(
        self, create_model: MembershipCreateModel
    ) -> Optional[Membership]:
        """
        Insert the membership unless the pair already exists.

        Uniqueness is enforced by the composite primary key with
        ``ON CONFLICT DO NOTHING``, so concurrent inserts for the same pair
        produce one row. Returns None when the row already existed.
        """
        data = create_model.model_dump(mode="json")

        async with self._get_session() as session:
            insert = _INSERT_BY_DIALECT[session.get_bind().dialect.name]
            result = await session.execute(
                insert(MembershipEntity)
                .values(**data)
                .on_conflict_do_nothing(
                    index_elements=[MembershipEntity.user_id, MembershipEntity.account_id]
                )
                .returning(
                    MembershipEntity.user_id,
                    MembershipEntity.account_id,
                    MembershipEntity.role,
                    MembershipEntity.added_at,
                )
            )
            row = result.mappings().first()
            return Membership.model_validate(dict(row)) if row else None

    @trace_span
    async def get_membership(
        self, user_id: str, account_id: str
    ) -> Optional[Membership]:
        async with self._get_session() as session:
            entity = await session.get(MembershipEntity, (user_id, account_id))
            return self._entity_to_domain(entity) if entity else None

    @trace_span
    async def exists(self, user_id: str, account_id: str) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                select(MembershipEntity.user_id)
                .where(
                    MembershipEntity.user_id == user_id,
                    MembershipEntity.account_id == account_id,
                )
                .limit(1)
            )
            return result.first() is not None

    @trace_span
    async def list_for_user(self, user_id: str) -> List[Membership]:
        async with self._get_session() as session:
            result = await session.execute(
                select(MembershipEntity).where(MembershipEntity.user_id == user_id)
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def count_for_account(self, account_id: str) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count())
                .select_from(MembershipEntity)
                .where(
                    MembershipEntity.account_id == account_id
                )
            )
            return result.scalar_one() or 0

    @trace_span
    async def count_owners(self, account_id: str) -> int:
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count())
                .select_from(MembershipEntity)
                .where(
                    MembershipEntity.account_id == account_id,
                    MembershipEntity.role == MembershipRole.OWNER.value,
                )
            )
            return result.scalar_one() or 0

    @trace_span
    async def list_for_account(self, account_id: str) -> List[AccountMember]:
        """Members of the account with their identity, oldest membership first."""
        async with self._get_session() as session:
            result = await session.execute(
                select(
                    MembershipEntity.user_id,
                    MembershipEntity.account_id,
                    MembershipEntity.role,
                    MembershipEntity.added_at,
                    UserEntity.email,
                    UserEntity.name,
                )
                .join(UserEntity, UserEntity.id == MembershipEntity.user_id)
                .where(MembershipEntity.account_id == account_id)
                .order_by(MembershipEntity.added_at, MembershipEntity.user_id)
            )
            return [AccountMember.model_validate(dict(row)) for row in result.mappings()]

    @trace_span
    async def delete_membership(self, user_id: str, account_id: str) -> bool:
        """Returns False when there was no such membership."""
        async with self._get_session() as session:
            result = await session.execute(
                delete(MembershipEntity).where(
                    MembershipEntity.user_id == user_id,
                    MembershipEntity.account_id == account_id,
                )
            )
            await session.flush()
            return result.rowcount == 1
