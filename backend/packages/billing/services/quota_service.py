"""
Service for quota checks and enforcement.

Checks return a QuotaCheck describing current usage against the user's
effective limit. Enforcement points (recording a reply, creating a location)
raise QuotaExceeded when the check does not allow the operation.
"""

from datetime import datetime
from typing import Optional

from common.core.exceptions import QuotaExceeded
from common.core.otel_axiom_exporter import trace_span, get_logger
from packages.accounts.repositories.location_repository import LocationRepository
from packages.billing.repositories.usage_repository import UsageEventRepository
from packages.billing.models.domain.enums import UNLIMITED, UsageEventType
from packages.billing.models.domain.usage import (
    QuotaCheck,
    UsageEvent,
    UsageEventCreateModel,
)
from packages.billing.services.billing_period import get_current_billing_period
from packages.billing.services.entitlement_service import EntitlementService

logger = get_logger(__name__)

WARNING_THRESHOLD_PERCENT = 80


class QuotaService:
    """Service for quota enforcement."""

    def __init__(self):
        self.entitlement_service = EntitlementService()
        self.usage_repo = UsageEventRepository()
        self.location_repo = LocationRepository()

    def _build_quota_check(
        self, metric_name: str, current: int, limit: int, period_end: datetime
    ) -> QuotaCheck:
        if limit == UNLIMITED:
            return QuotaCheck(
                allowed=True,
                metric_name=metric_name,
                current_usage=current,
                limit=UNLIMITED,
                remaining=UNLIMITED,
                percentage_used=0.0,
                warning_threshold_reached=False,
                period_end=period_end,
            )

        percentage_used = (current / limit * 100) if limit else 100.0

        return QuotaCheck(
            allowed=current < limit,
            metric_name=metric_name,
            current_usage=current,
            limit=limit,
            remaining=max(limit - current, 0),
            percentage_used=percentage_used,
            warning_threshold_reached=(percentage_used >= WARNING_THRESHOLD_PERCENT),
            period_end=period_end,
        )

    @trace_span
    async def check_reply_quota(
        self, user_id: str, now: Optional[datetime] = None
    ) -> QuotaCheck:
        """AI replies used in the current calendar month against the plan limit."""
        period = get_current_billing_period(now)
        limits = await self.entitlement_service.get_user_plan_limits(user_id)

        current = await self.usage_repo.get_period_count(
            user_id=user_id,
            event_type=UsageEventType.AI_REPLY,
            start_date=period.start,
            end_date=period.end,
        )

        return self._build_quota_check(
            "ai_replies", current, limits.max_ai_replies_per_period, period.end
        )

    @trace_span
    async def check_location_quota(self, user_id: str) -> QuotaCheck:
        """Locations across the user's accounts against the plan limit."""
        period = get_current_billing_period()
        limits = await self.entitlement_service.get_user_plan_limits(user_id)
        current = await self.location_repo.count_for_user(user_id)

        return self._build_quota_check(
            "locations", current, limits.max_locations, period.end
        )

    @trace_span
    async def record_reply(
        self, user_id: str, location_id: Optional[str] = None
    ) -> UsageEvent:
        """Record one AI reply, refusing it once the monthly limit is reached."""
        quota = await self.check_reply_quota(user_id)
        if not quota.allowed:
            logger.warning(
                f"User {user_id} exceeded AI reply quota",
                extra={
                    "user_id": user_id,
                    "current": quota.current_usage,
                    "limit": quota.limit,
                },
            )
            raise QuotaExceeded(
                f"Monthly AI reply limit reached ({quota.limit:,}). Upgrade your plan for more."
            )

        event = await self.usage_repo.create(
            UsageEventCreateModel(
                user_id=user_id,
                location_id=location_id,
                event_type=UsageEventType.AI_REPLY,
            )
        )

        logger.info(
            f"Recorded AI reply for user {user_id} ({quota.current_usage + 1}/{quota.limit})",
            extra={"user_id": user_id, "location_id": location_id, "event_id": event.id},
        )
        return event
