"""
Repository for locations.
"""

from typing import List
from sqlalchemy import select, func

from common.repositories.base import BaseRepository
from common.core.otel_axiom_exporter import trace_span
from packages.accounts.models.database.location import LocationEntity
from packages.accounts.models.database.membership import MembershipEntity
from packages.accounts.models.domain.enums import MembershipRole
from packages.accounts.models.domain.location import Location


class LocationRepository(BaseRepository[LocationEntity, Location]):
    """Repository for managing locations."""

    def __init__(self):
        super().__init__(LocationEntity, Location)

    @trace_span
    async def list_by_account(self, account_id: str) -> List[Location]:
        async with self._get_session() as session:
            result = await session.execute(
                select(LocationEntity)
                .where(LocationEntity.account_id == account_id)
                .order_by(LocationEntity.created_at, LocationEntity.id)
            )
            return self._entities_to_domain(result.scalars().all())

    @trace_span
    async def count_for_user(self, user_id: str) -> int:
        """Locations in accounts the user owns. Memberships gained by invitation or merge do not count."""
        async with self._get_session() as session:
            result = await session.execute(
                select(func.count(LocationEntity.id))
                .join(
                    MembershipEntity,
                    MembershipEntity.account_id == LocationEntity.account_id,
                )
                .where(
                    MembershipEntity.user_id == user_id,
                    MembershipEntity.role == MembershipRole.OWNER.value,
                )
            )
            return result.scalar_one() or 0
