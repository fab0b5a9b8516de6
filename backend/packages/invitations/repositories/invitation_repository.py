"""
Repository for invitations.

Status transitions are conditional updates guarded on ``status = 'pending'``,
so two concurrent acceptances of one token cannot both succeed.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import select, update

from common.repositories.base import BaseRepository
from common.core.otel_axiom_exporter import trace_span
from packages.invitations.models.database.invitation import InvitationEntity
from packages.invitations.models.domain.invitation import (
    Invitation,
    InvitationStatus,
)


class InvitationRepository(BaseRepository[InvitationEntity, Invitation]):
    """Repository for managing invitations."""

    def __init__(self):
        super().__init__(InvitationEntity, Invitation)

    @trace_span
    async def get_by_token(
        self, token: str, for_update: bool = False
    ) -> Optional[Invitation]:
        """Invitation by token. ``for_update`` locks the row until the transaction ends."""
        query = select(InvitationEntity).where(InvitationEntity.token == token)
        if for_update:
            query = query.with_for_update()

        async with self._get_session() as session:
            result = await session.execute(query)
            entity = result.scalar_one_or_none()
            return self._entity_to_domain(entity) if entity else None

    async def _transition(self, invitation_id: str, values: dict) -> bool:
        async with self._get_session() as session:
            result = await session.execute(
                update(InvitationEntity)
                .where(
                    InvitationEntity.id == invitation_id,
                    InvitationEntity.status == InvitationStatus.PENDING.value,
                )
                .values(**values)
            )
            await session.flush()
            return result.rowcount == 1

    @trace_span
    async def mark_accepted(
        self, invitation_id: str, user_id: str, accepted_at: datetime
    ) -> bool:
        """Returns False when the invitation was no longer pending."""
        return await self._transition(
            invitation_id,
            {
                "status": InvitationStatus.ACCEPTED.value,
                "accepted_by_user_id": user_id,
                "accepted_at": accepted_at,
            },
        )

    @trace_span
    async def mark_cancelled(self, invitation_id: str) -> bool:
        return await self._transition(
            invitation_id, {"status": InvitationStatus.CANCELLED.value}
        )

    @trace_span
    async def mark_expired(self, invitation_id: str) -> bool:
        return await self._transition(
            invitation_id, {"status": InvitationStatus.EXPIRED.value}
        )

    @trace_span
    async def list_pending_for_location(
        self, location_id: str, now: datetime
    ) -> List[Invitation]:
        """Pending invitations that have not yet lapsed, newest first."""
        async with self._get_session() as session:
            result = await session.execute(
                select(InvitationEntity)
                .where(
                    InvitationEntity.location_id == location_id,
                    InvitationEntity.status == InvitationStatus.PENDING.value,
                    InvitationEntity.expires_at > now,
                )
                .order_by(InvitationEntity.created_at.desc(), InvitationEntity.id)
            )
            return self._entities_to_domain(result.scalars().all())
