"""Domain model for the usage window."""

from datetime import datetime
from pydantic import BaseModel


class BillingPeriod(BaseModel):
    """
    Calendar-month usage window.

    This approximates, but is not, the Stripe invoice cycle: callers must not
    assume the two boundaries coincide.
    """

    start: datetime
    end: datetime
    reset_date: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end
