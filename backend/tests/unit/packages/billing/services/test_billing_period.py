from datetime import datetime, timezone, timedelta

from packages.billing.services.billing_period import get_current_billing_period


class TestBillingPeriod:
    def test_mid_month(self):
        period = get_current_billing_period(
            datetime(2024, 3, 15, 13, 45, tzinfo=timezone.utc)
        )

        assert period.start == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert period.end == datetime(2024, 4, 1, tzinfo=timezone.utc)
        assert period.reset_date == period.end

    def test_december_rolls_into_next_year(self):
        period = get_current_billing_period(
            datetime(2024, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
        )

        assert period.start == datetime(2024, 12, 1, tzinfo=timezone.utc)
        assert period.end == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_first_instant_belongs_to_its_month(self):
        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        period = get_current_billing_period(now)

        assert period.start == now
        assert period.contains(now) is True
        assert period.contains(period.end) is False

    def test_leap_february(self):
        period = get_current_billing_period(datetime(2024, 2, 29, tzinfo=timezone.utc))

        assert period.end == datetime(2024, 3, 1, tzinfo=timezone.utc)

    def test_preserves_timezone(self):
        tz = timezone(timedelta(hours=2))

        period = get_current_billing_period(datetime(2024, 6, 10, 8, tzinfo=tz))

        assert period.start.tzinfo == tz
        assert period.start == datetime(2024, 6, 1, tzinfo=tz)

    def test_defaults_to_now(self):
        period = get_current_billing_period()

        assert period.contains(datetime.now(timezone.utc))
