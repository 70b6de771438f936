"""Pay period boundaries and pay dates for each schedule policy.

All functions are pure: the caller supplies ``today`` and nothing here
reads the system clock. Weeks start on Sunday and day-of-week values use
0 = Sunday .. 6 = Saturday.
"""

from __future__ import annotations

import calendar
import logging
from datetime import date, timedelta
from decimal import Decimal

from payroll_forecast.calculators.types import (
    InvalidScheduleConfigError,
    PayPeriod,
    PayScheduleConfig,
    PayScheduleType,
)

logger = logging.getLogger(__name__)

DEFAULT_DAYS_UNTIL_CHECK = 5
MIN_DAYS_UNTIL_CHECK = 1
DEFAULT_BI_WEEKLY_ANCHOR = date(2026, 1, 2)
DEFAULT_PAY_SCHEDULE = PayScheduleConfig()

PAYCHECKS_PER_YEAR = {
    PayScheduleType.SEMI_MONTHLY: 24,
    PayScheduleType.BI_WEEKLY: 26,
    PayScheduleType.WEEKLY: 52,
    PayScheduleType.MONTHLY: 12,
}

__all__ = [
    "DEFAULT_PAY_SCHEDULE",
    "InvalidScheduleConfigError",
    "current_period",
    "next_pay_day",
    "paychecks_per_year_for",
    "previous_period_window",
    "weeks_in_period",
]


# === Calendar helpers ===


def day_of_week(day: date) -> int:
    """Weekday with Sunday = 0."""
    return (day.weekday() + 1) % 7


def start_of_week(day: date) -> date:
    return day - timedelta(days=day_of_week(day))


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    y, m = divmod(year * 12 + (month - 1) + delta, 12)
    return y, m + 1


def _clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, clamping the day to the month's length."""
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def end_of_month(day: date) -> date:
    return date(day.year, day.month, calendar.monthrange(day.year, day.month)[1])


def _day_in_month_offset(today: date, months: int, day: int) -> date:
    year, month = _shift_month(today.year, today.month, months)
    return _clamped_date(year, month, day)


def _weeks_since_anchor(config: PayScheduleConfig, today: date) -> tuple[date, int]:
    anchor = config.bi_weekly_anchor_date or DEFAULT_BI_WEEKLY_ANCHOR
    anchor_week = start_of_week(anchor)
    return anchor_week, (start_of_week(today) - anchor_week).days // 7


# === Next pay day ===


def _next_semi_monthly(config: PayScheduleConfig, today: date) -> date:
    first = _day_in_month_offset(today, 0, config.semi_monthly_first_day)
    if today < first:
        return first
    second = _day_in_month_offset(today, 0, config.semi_monthly_second_day)
    if today < second:
        return second
    return _day_in_month_offset(today, 1, config.semi_monthly_first_day)


def _next_bi_weekly(config: PayScheduleConfig, today: date) -> date:
    _, weeks = _weeks_since_anchor(config, today)
    is_pay_week = weeks % 2 == 0
    this_week = start_of_week(today)
    this_week_pay_day = this_week + timedelta(days=config.bi_weekly_day_of_week)

    if is_pay_week and this_week_pay_day > today:
        return this_week_pay_day

    weeks_to_add = 2 if is_pay_week else 1
    return this_week + timedelta(weeks=weeks_to_add, days=config.bi_weekly_day_of_week)


def _next_weekly(config: PayScheduleConfig, today: date) -> date:
    this_week_pay_day = start_of_week(today) + timedelta(days=config.weekly_day_of_week)
    if day_of_week(today) < config.weekly_day_of_week:
        return this_week_pay_day
    return this_week_pay_day + timedelta(weeks=1)


def _next_monthly(config: PayScheduleConfig, today: date) -> date:
    this_month = _day_in_month_offset(today, 0, config.monthly_pay_day)
    if today < this_month:
        return this_month
    return _day_in_month_offset(today, 1, config.monthly_pay_day)


_NEXT_PAY_DAY = {
    PayScheduleType.SEMI_MONTHLY: _next_semi_monthly,
    PayScheduleType.BI_WEEKLY: _next_bi_weekly,
    PayScheduleType.WEEKLY: _next_weekly,
    PayScheduleType.MONTHLY: _next_monthly,
}


def next_pay_day(config: PayScheduleConfig | None, today: date) -> date:
    """Next pay date strictly after ``today`` for the configured policy.

    This can fall inside the current period; the check date for a period
    is ``PayPeriod.check_date``.
    """
    config = config or DEFAULT_PAY_SCHEDULE
    return _NEXT_PAY_DAY[config.policy](config, today)


# === Current period ===


def _semi_monthly_bounds(config: PayScheduleConfig, today: date) -> tuple[date, date]:
    first_day = config.semi_monthly_first_day
    second_day = config.semi_monthly_second_day

    # The month-end period stays current through the 1st.
    if today.day < first_day or today.day == 1:
        start = _day_in_month_offset(today, -1, second_day)
        return start, end_of_month(start)

    second = _day_in_month_offset(today, 0, second_day)
    if today < second:
        start = _day_in_month_offset(today, 0, first_day)
        return start, max(start, second - timedelta(days=1))

    return second, end_of_month(today)


def _bi_weekly_bounds(config: PayScheduleConfig, today: date) -> tuple[date, date]:
    anchor_week, weeks = _weeks_since_anchor(config, today)
    start = anchor_week + timedelta(weeks=weeks - weeks % 2)
    return start, start + timedelta(days=13)


def _weekly_bounds(config: PayScheduleConfig, today: date) -> tuple[date, date]:
    start = start_of_week(today)
    return start, start + timedelta(days=6)


def _monthly_bounds(config: PayScheduleConfig, today: date) -> tuple[date, date]:
    return today.replace(day=1), end_of_month(today)


_PERIOD_BOUNDS = {
    PayScheduleType.SEMI_MONTHLY: _semi_monthly_bounds,
    PayScheduleType.BI_WEEKLY: _bi_weekly_bounds,
    PayScheduleType.WEEKLY: _weekly_bounds,
    PayScheduleType.MONTHLY: _monthly_bounds,
}


def current_period(config: PayScheduleConfig | None, today: date) -> PayPeriod:
    """Pay period in effect on ``today``.

    Falls back to the semi-monthly default (1st/15th, check 5 days after
    period end) when no configuration is supplied.
    """
    config = config or DEFAULT_PAY_SCHEDULE
    start, end = _PERIOD_BOUNDS[config.policy](config, today)

    days_until_check = (
        config.days_until_check
        if config.days_until_check is not None
        else DEFAULT_DAYS_UNTIL_CHECK
    )
    # The check always lands after the period it pays.
    days_until_check = max(days_until_check, MIN_DAYS_UNTIL_CHECK)
    period = PayPeriod(start=start, end=end, check_date=end + timedelta(days=days_until_check))
    logger.debug(
        "Resolved %s period %s..%s (check %s) for %s",
        config.policy.value,
        period.start,
        period.end,
        period.check_date,
        today,
    )
    return period


def previous_period_window(period: PayPeriod) -> tuple[date, date]:
    """Same-length window immediately before ``period``."""
    end = period.start - timedelta(days=1)
    return end - timedelta(days=period.total_days - 1), end


def weeks_in_period(start: date, end: date) -> Decimal:
    """Period length in weeks, counting both endpoints."""
    return Decimal((end - start).days + 1) / Decimal(7)


def paychecks_per_year_for(config: PayScheduleConfig | None) -> int:
    """Paychecks per year implied by the schedule policy."""
    config = config or DEFAULT_PAY_SCHEDULE
    return PAYCHECKS_PER_YEAR[config.policy]
