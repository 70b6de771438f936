"""Tests for pay period boundaries and pay dates."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from payroll_forecast.calculators.pay_schedule import (
    current_period,
    day_of_week,
    next_pay_day,
    paychecks_per_year_for,
    previous_period_window,
    weeks_in_period,
)
from payroll_forecast.calculators.types import (
    InvalidScheduleConfigError,
    PayPeriod,
    PayScheduleConfig,
    PayScheduleType,
)


def semi_monthly(first: int = 1, second: int = 15, **kwargs) -> PayScheduleConfig:
    return PayScheduleConfig(
        policy=PayScheduleType.SEMI_MONTHLY,
        semi_monthly_first_day=first,
        semi_monthly_second_day=second,
        **kwargs,
    )


class TestSemiMonthly:
    """Semi-monthly periods and pay days."""

    def test_second_half_of_month(self):
        period = current_period(semi_monthly(), date(2026, 1, 20))

        assert period.start == date(2026, 1, 15)
        assert period.end == date(2026, 1, 31)
        assert period.check_date == date(2026, 2, 5)

    def test_first_half_of_month(self):
        period = current_period(semi_monthly(), date(2026, 1, 10))

        assert period.start == date(2026, 1, 1)
        assert period.end == date(2026, 1, 14)

    def test_first_of_month_still_in_prior_period(self):
        """On the 1st the previous month's second half is still current."""
        period = current_period(semi_monthly(), date(2026, 1, 1))

        assert period.start == date(2025, 12, 15)
        assert period.end == date(2025, 12, 31)

    def test_second_pay_day_starts_second_half(self):
        period = current_period(semi_monthly(), date(2026, 1, 15))

        assert period.start == date(2026, 1, 15)
        assert period.end == date(2026, 1, 31)

    def test_second_half_ends_on_short_month_end(self):
        period = current_period(semi_monthly(), date(2026, 2, 20))

        assert period.end == date(2026, 2, 28)
        assert period.total_days == 14

    def test_day_past_month_length_is_clamped(self):
        config = semi_monthly(first=5, second=31)

        assert next_pay_day(config, date(2026, 2, 20)) == date(2026, 2, 28)
        period = current_period(config, date(2026, 2, 20))
        assert period.start == date(2026, 2, 5)
        assert period.end == date(2026, 2, 27)

    def test_next_pay_day(self):
        config = semi_monthly()

        assert next_pay_day(config, date(2026, 1, 14)) == date(2026, 1, 15)
        assert next_pay_day(config, date(2026, 1, 15)) == date(2026, 2, 1)
        assert next_pay_day(config, date(2026, 1, 31)) == date(2026, 2, 1)
        assert next_pay_day(config, date(2025, 12, 20)) == date(2026, 1, 1)

    def test_missing_config_uses_semi_monthly_default(self):
        assert current_period(None, date(2026, 1, 20)) == current_period(
            semi_monthly(), date(2026, 1, 20)
        )
        assert next_pay_day(None, date(2026, 1, 10)) == date(2026, 1, 15)


class TestBiWeekly:
    """Bi-weekly periods anchored on a known pay date."""

    def test_period_containing_today(self, bi_weekly_schedule):
        period = current_period(bi_weekly_schedule, date(2026, 1, 20))

        assert period.start == date(2026, 1, 11)
        assert period.end == date(2026, 1, 24)
        assert period.total_days == 14
        assert period.check_date == date(2026, 1, 29)

    def test_period_starts_on_sunday(self, bi_weekly_schedule):
        for offset in range(30):
            today = date(2026, 1, 1) + timedelta(days=offset)
            period = current_period(bi_weekly_schedule, today)
            assert day_of_week(period.start) == 0
            assert period.contains(today)

    def test_dates_before_anchor(self, bi_weekly_schedule):
        period = current_period(bi_weekly_schedule, date(2025, 12, 21))

        assert period.start == date(2025, 12, 14)
        assert period.end == date(2025, 12, 27)

    def test_next_pay_day_in_pay_week(self, bi_weekly_schedule):
        assert next_pay_day(bi_weekly_schedule, date(2026, 1, 1)) == date(2026, 1, 2)

    def test_next_pay_day_on_pay_day_skips_two_weeks(self, bi_weekly_schedule):
        assert next_pay_day(bi_weekly_schedule, date(2026, 1, 2)) == date(2026, 1, 16)

    def test_next_pay_day_in_off_week(self, bi_weekly_schedule):
        assert next_pay_day(bi_weekly_schedule, date(2026, 1, 5)) == date(2026, 1, 16)
        assert next_pay_day(bi_weekly_schedule, date(2026, 1, 20)) == date(2026, 1, 30)


class TestWeeklyAndMonthly:
    """Weekly and monthly policies."""

    def test_weekly_period_is_sunday_to_saturday(self):
        config = PayScheduleConfig(policy=PayScheduleType.WEEKLY)
        period = current_period(config, date(2026, 1, 7))

        assert period.start == date(2026, 1, 4)
        assert period.end == date(2026, 1, 10)

    def test_weekly_next_pay_day(self):
        config = PayScheduleConfig(policy=PayScheduleType.WEEKLY, weekly_day_of_week=5)

        assert next_pay_day(config, date(2026, 1, 7)) == date(2026, 1, 9)
        assert next_pay_day(config, date(2026, 1, 9)) == date(2026, 1, 16)

    def test_monthly_period_is_calendar_month(self):
        config = PayScheduleConfig(policy=PayScheduleType.MONTHLY)
        period = current_period(config, date(2026, 2, 10))

        assert period.start == date(2026, 2, 1)
        assert period.end == date(2026, 2, 28)
        assert period.total_days == 28

    def test_monthly_next_pay_day(self):
        config = PayScheduleConfig(policy=PayScheduleType.MONTHLY, monthly_pay_day=31)

        assert next_pay_day(config, date(2026, 2, 10)) == date(2026, 2, 28)
        assert next_pay_day(config, date(2026, 1, 31)) == date(2026, 2, 28)

        first = PayScheduleConfig(policy=PayScheduleType.MONTHLY, monthly_pay_day=1)
        assert next_pay_day(first, date(2026, 1, 1)) == date(2026, 2, 1)


class TestPeriodHelpers:
    """Check dates, labels and derived windows."""

    def test_days_until_check(self):
        period = current_period(semi_monthly(days_until_check=3), date(2026, 1, 20))

        assert period.check_date == date(2026, 2, 3)

    def test_zero_days_until_check_pays_next_day(self):
        period = current_period(semi_monthly(days_until_check=0), date(2026, 1, 20))

        assert period.check_date == period.end + timedelta(days=1)

    def test_label(self):
        period = PayPeriod(date(2026, 1, 11), date(2026, 1, 24), date(2026, 1, 29))

        assert period.label == "Jan 11 - Jan 24"

    def test_previous_period_window(self):
        period = PayPeriod(date(2026, 1, 11), date(2026, 1, 24), date(2026, 1, 29))

        assert previous_period_window(period) == (date(2025, 12, 28), date(2026, 1, 10))

    def test_weeks_in_period(self):
        assert weeks_in_period(date(2026, 1, 11), date(2026, 1, 24)) == Decimal("2")
        assert weeks_in_period(date(2026, 1, 4), date(2026, 1, 10)) == Decimal("1")

    def test_paychecks_per_year(self):
        assert paychecks_per_year_for(None) == 24
        assert paychecks_per_year_for(PayScheduleConfig(policy=PayScheduleType.BI_WEEKLY)) == 26
        assert paychecks_per_year_for(PayScheduleConfig(policy="weekly")) == 52


class TestScheduleValidation:
    """Invalid configurations are rejected on construction."""

    def test_first_day_must_precede_second(self):
        with pytest.raises(InvalidScheduleConfigError) as exc_info:
            semi_monthly(first=20, second=10)
        assert exc_info.value.field_name == "semi_monthly_first_day"

    @pytest.mark.parametrize(
        "field_name,value",
        [
            ("monthly_pay_day", 0),
            ("monthly_pay_day", 32),
            ("weekly_day_of_week", 7),
            ("bi_weekly_day_of_week", -1),
            ("days_until_check", -1),
        ],
    )
    def test_out_of_range(self, field_name, value):
        with pytest.raises(InvalidScheduleConfigError):
            PayScheduleConfig(**{field_name: value})

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            PayScheduleConfig(policy="fortnightly")


SWEEP_START = date(2025, 12, 1)
SWEEP_DAYS = 120


class TestPeriodOrdering:
    """Every policy yields start <= end < check date on every day."""

    @pytest.mark.parametrize(
        "config",
        [
            semi_monthly(),
            semi_monthly(first=5, second=20),
            semi_monthly(first=10, second=31, days_until_check=0),
            PayScheduleConfig(policy=PayScheduleType.BI_WEEKLY),
            PayScheduleConfig(
                policy=PayScheduleType.BI_WEEKLY,
                bi_weekly_day_of_week=1,
                bi_weekly_anchor_date=date(2026, 3, 2),
            ),
            PayScheduleConfig(policy=PayScheduleType.WEEKLY, weekly_day_of_week=0),
            PayScheduleConfig(policy=PayScheduleType.WEEKLY, days_until_check=0),
            PayScheduleConfig(policy=PayScheduleType.MONTHLY, monthly_pay_day=31),
        ],
        ids=lambda c: f"{c.policy.value}-{c.days_until_check}",
    )
    def test_check_date_after_period(self, config):
        for offset in range(SWEEP_DAYS):
            today = SWEEP_START + timedelta(days=offset)
            period = current_period(config, today)

            assert period.start <= period.end < period.check_date, today
            assert next_pay_day(config, today) > today, today

    # Semi-monthly keeps the prior half current on the 1st.
    @pytest.mark.parametrize(
        "policy",
        [PayScheduleType.BI_WEEKLY, PayScheduleType.WEEKLY, PayScheduleType.MONTHLY],
    )
    def test_period_contains_today(self, policy):
        config = PayScheduleConfig(policy=policy)
        for offset in range(SWEEP_DAYS):
            today = SWEEP_START + timedelta(days=offset)

            assert current_period(config, today).contains(today), today
