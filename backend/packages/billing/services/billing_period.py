from datetime import datetime, timezone
from typing import Optional

from packages.billing.models.domain.billing_period import BillingPeriod


def _start_of_month(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def get_current_billing_period(now: Optional[datetime] = None) -> BillingPeriod:
    """
    Calendar month containing ``now`` (current UTC time by default).

    ``start`` is the first instant of the month; ``end`` and ``reset_date``
    are the first instant of the next month. ``now``'s tzinfo is preserved.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    start = _start_of_month(now)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)

    return BillingPeriod(start=start, end=end, reset_date=end)
