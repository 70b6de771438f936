"""Payroll forecasting engine - projects full-period pay from partial actuals."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from payroll_forecast.calculators.commission_resolver import CommissionResolver
from payroll_forecast.calculators.compensation import CompensationCalculator
from payroll_forecast.calculators.pay_schedule import current_period, previous_period_window
from payroll_forecast.calculators.tax_estimator import DEFAULT_TAX_RATES, FlatTaxRates, TaxEstimator
from payroll_forecast.calculators.types import (
    ZERO,
    CommissionRules,
    CommissionSourceKind,
    CompensationBreakdown,
    ConfidenceLevel,
    EmployeePayrollProfile,
    HoursWorked,
    PayPeriod,
    PayScheduleConfig,
    PayType,
    ResolvedCommission,
    SalesActual,
    SalesTotals,
    StylistLevel,
    format_money,
    to_decimal,
)
from payroll_forecast.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Forecasts always use a biweekly baseline, whatever the real schedule.
FORECAST_WEEKS_PER_PERIOD = Decimal("2")

HIGH_CONFIDENCE_RATIO = Decimal("0.75")
MEDIUM_CONFIDENCE_RATIO = Decimal("0.4")


@dataclass(frozen=True)
class EmployeeProjection:
    """Forecast for one employee."""

    employee_id: str
    employee_name: str | None
    pay_type: PayType
    current_sales: SalesTotals
    projected_sales: SalesTotals
    resolved_commission: ResolvedCommission
    projected_compensation: CompensationBreakdown
    assigned_level: StylistLevel | None = None

    @property
    def resolved_source(self) -> CommissionSourceKind:
        return self.resolved_commission.source.kind

    @property
    def resolved_rates(self) -> dict[str, Decimal]:
        return {
            "service": self.resolved_commission.service_rate,
            "retail": self.resolved_commission.retail_rate,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "pay_type": self.pay_type.value,
            "current_sales": self.current_sales.to_dict(),
            "projected_sales": self.projected_sales.to_dict(),
            "resolved_source": self.resolved_source.value,
            "resolved_rates": {k: format_money(v) for k, v in self.resolved_rates.items()},
            "resolved_commission": self.resolved_commission.to_dict(),
            "projected_compensation": self.projected_compensation.to_dict(),
            "level": self.assigned_level.to_dict() if self.assigned_level else None,
        }


@dataclass(frozen=True)
class PayrollProjection:
    """Aggregate forecast for the current pay period."""

    period: PayPeriod
    today: date
    employees: tuple[EmployeeProjection, ...]
    projected_gross_pay: Decimal
    projected_commissions: Decimal
    projected_taxes: Decimal
    projected_net_pay: Decimal
    projected_employer_taxes: Decimal
    projected_tips: Decimal
    confidence_level: ConfidenceLevel
    days_of_data: int
    days_remaining: int
    last_period_total: Decimal
    vs_last_period: Decimal

    @property
    def total_days(self) -> int:
        return self.period.total_days

    @property
    def period_label(self) -> str:
        return self.period.label

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.to_dict(),
            "period_label": self.period_label,
            "today": self.today.isoformat(),
            "by_employee": [e.to_dict() for e in self.employees],
            "projected_gross_pay": format_money(self.projected_gross_pay),
            "projected_commissions": format_money(self.projected_commissions),
            "projected_taxes": format_money(self.projected_taxes),
            "projected_net_pay": format_money(self.projected_net_pay),
            "projected_employer_taxes": format_money(self.projected_employer_taxes),
            "projected_tips": format_money(self.projected_tips),
            "confidence_level": self.confidence_level.value,
            "days_of_data": self.days_of_data,
            "days_remaining": self.days_remaining,
            "total_days": self.total_days,
            "last_period_total": format_money(self.last_period_total),
            "vs_last_period": format_money(self.vs_last_period),
        }


def classify_confidence(days_passed: int, total_days: int) -> ConfidenceLevel:
    """Reliability of a forecast from the share of the period elapsed."""
    if total_days <= 0:
        return ConfidenceLevel.LOW
    elapsed = Decimal(days_passed)
    total = Decimal(total_days)
    if elapsed >= total * HIGH_CONFIDENCE_RATIO:
        return ConfidenceLevel.HIGH
    if elapsed >= total * MEDIUM_CONFIDENCE_RATIO:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def aggregate_sales(
    actuals: Iterable[SalesActual], start: date, end: date
) -> dict[str, SalesTotals]:
    """Per-employee totals for actuals dated within [start, end]."""
    services: dict[str, Decimal] = defaultdict(lambda: ZERO)
    products: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for row in actuals:
        if not row.employee_id or not start <= row.summary_date <= end:
            continue
        services[row.employee_id] += to_decimal(row.service_revenue)
        products[row.employee_id] += to_decimal(row.product_revenue)

    return {
        employee_id: SalesTotals(services=services[employee_id], products=products[employee_id])
        for employee_id in services
    }


def extrapolate(actual: Decimal, days_passed: int, days_remaining: int) -> Decimal:
    """Linear projection at the elapsed-to-date daily average."""
    if days_remaining <= 0:
        return actual
    daily_average = actual / Decimal(days_passed)
    return actual + daily_average * Decimal(days_remaining)


class ForecastingEngine:
    """Projects payroll for the current period.

    Pipeline (per request, with a single caller-pinned ``today``):
    1) Current pay period from the schedule
    2) Elapsed / remaining days
    3) Per-employee actuals in [period start, min(today, period end)]
    4) Linear extrapolation to period end
    5) Commission resolved against projected sales, then compensation on
       the fixed biweekly baseline (80 hours, 2 weeks)
    6) Totals over the active roster with a blended tax estimate
    7) Confidence level and comparison with prior period actual sales
    """

    def __init__(
        self,
        settings: Settings | None = None,
        tax_rates: FlatTaxRates = DEFAULT_TAX_RATES,
    ):
        self.settings = settings or get_settings()
        self.compensation_calculator = CompensationCalculator(
            tax_rates=tax_rates,
            paychecks_per_year=self.settings.salary_paychecks_per_year,
        )

    def project(
        self,
        roster: Iterable[EmployeePayrollProfile],
        schedule_config: PayScheduleConfig | None,
        sales_actuals: Iterable[SalesActual],
        today: date,
        commission_rules: CommissionRules | None = None,
    ) -> PayrollProjection:
        rules = commission_rules or CommissionRules()
        resolver = CommissionResolver.from_rules(
            rules, inherit_level_rates=self.settings.partial_override_inherits_level
        )
        actuals = list(sales_actuals)

        # 1-2) Period and elapsed days
        period = current_period(schedule_config, today)
        total_days = period.total_days
        # Clamped for dates outside the resolved period (late semi-monthly first day).
        days_passed = min(total_days, max(1, (today - period.start).days + 1))
        days_remaining = max(0, total_days - days_passed)

        # 3) Actuals to date
        window_end = min(today, period.end)
        sales_by_employee = aggregate_sales(actuals, period.start, window_end)

        # 4-5) Employee projections
        active = [emp for emp in roster if emp.is_active]
        projections = tuple(
            self._project_employee(
                emp,
                sales_by_employee.get(emp.employee_id, SalesTotals()),
                days_passed,
                days_remaining,
                resolver,
                today,
            )
            for emp in active
        )

        # 6) Totals
        gross = sum((p.projected_compensation.gross_pay for p in projections), ZERO)
        commissions = sum((p.projected_compensation.commission_pay for p in projections), ZERO)
        employer_taxes = sum((p.projected_compensation.employer_taxes for p in projections), ZERO)
        taxes = TaxEstimator.blended(gross, self.settings.blended_tax_rate)

        # 7) Confidence and comparison
        if not projections or not sales_by_employee:
            confidence = ConfidenceLevel.LOW
        else:
            confidence = classify_confidence(days_passed, total_days)

        last_start, last_end = previous_period_window(period)
        last_period_total = sum(
            (totals.total for totals in aggregate_sales(actuals, last_start, last_end).values()),
            ZERO,
        )
        vs_last_period = ZERO
        if last_period_total > 0:
            vs_last_period = (gross - last_period_total) / last_period_total * Decimal(100)

        projection = PayrollProjection(
            period=period,
            today=today,
            employees=projections,
            projected_gross_pay=gross,
            projected_commissions=commissions,
            projected_taxes=taxes,
            projected_net_pay=gross - taxes,
            projected_employer_taxes=employer_taxes,
            projected_tips=ZERO,
            confidence_level=confidence,
            days_of_data=days_passed,
            days_remaining=days_remaining,
            last_period_total=last_period_total,
            vs_last_period=vs_last_period,
        )
        logger.info(
            "Projected %s: %d employees, gross %s, confidence %s",
            period.label,
            len(projections),
            gross,
            confidence.value,
        )
        return projection

    def _project_employee(
        self,
        profile: EmployeePayrollProfile,
        sales: SalesTotals,
        days_passed: int,
        days_remaining: int,
        resolver: CommissionResolver,
        today: date,
    ) -> EmployeeProjection:
        projected_sales = SalesTotals(
            services=extrapolate(sales.services, days_passed, days_remaining),
            products=extrapolate(sales.products, days_passed, days_remaining),
        )
        resolved = resolver.resolve(
            profile.employee_id,
            projected_sales.services,
            projected_sales.products,
            today,
        )
        hours = HoursWorked(regular_hours=self.settings.hours_per_period)
        compensation = self.compensation_calculator.calculate(
            profile, hours, resolved, None, FORECAST_WEEKS_PER_PERIOD
        )
        return EmployeeProjection(
            employee_id=profile.employee_id,
            employee_name=profile.employee_name,
            pay_type=profile.pay_type,
            current_sales=sales,
            projected_sales=projected_sales,
            resolved_commission=resolved,
            projected_compensation=compensation,
            assigned_level=resolver.find_level(profile.employee_id),
        )


def project_payroll(
    roster: Iterable[EmployeePayrollProfile],
    schedule_config: PayScheduleConfig | None,
    sales_actuals: Iterable[SalesActual],
    today: date,
    commission_rules: CommissionRules | None = None,
    *,
    settings: Settings | None = None,
) -> PayrollProjection:
    """Project payroll for the period containing ``today``."""
    return ForecastingEngine(settings=settings).project(
        roster, schedule_config, sales_actuals, today, commission_rules
    )
