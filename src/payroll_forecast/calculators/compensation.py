"""Compensation calculation across hourly, salary and commission pay types."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from payroll_forecast.calculators.tax_estimator import DEFAULT_TAX_RATES, FlatTaxRates, TaxEstimator
from payroll_forecast.calculators.types import (
    ZERO,
    CompensationBreakdown,
    EmployeePayrollProfile,
    HoursWorked,
    PayAdjustments,
    ResolvedCommission,
    format_money,
    to_decimal,
)

logger = logging.getLogger(__name__)

OVERTIME_MULTIPLIER = Decimal("1.5")
BIWEEKLY_PAYCHECKS_PER_YEAR = 26
BIWEEKLY_WEEKS = Decimal("2")


class CompensationCalculator:
    """Builds a compensation breakdown for one employee and period.

    Pipeline (stable order):
    1) Hourly pay: regular * rate + overtime * rate * 1.5 (split trusted)
    2) Salary pay: (annual / paychecks_per_year) * (weeks_in_period / 2)
    3) Commission pay, only for commission-enabled commission pay types
    4) Gross = hourly + salary + commission + bonus + tips
    5) Flat-rate employee taxes and employer burden against gross
    6) Net = gross - employee taxes - deductions

    Missing numeric inputs are treated as 0. Nothing is rounded here.
    """

    def __init__(
        self,
        tax_rates: FlatTaxRates = DEFAULT_TAX_RATES,
        paychecks_per_year: int = BIWEEKLY_PAYCHECKS_PER_YEAR,
    ):
        self.tax_estimator = TaxEstimator(tax_rates)
        self.paychecks_per_year = paychecks_per_year

    def calculate(
        self,
        profile: EmployeePayrollProfile,
        hours: HoursWorked | None,
        resolved_commission: ResolvedCommission | None,
        adjustments: PayAdjustments | None,
        weeks_in_period: Decimal,
    ) -> CompensationBreakdown:
        hours = hours or HoursWorked()
        adjustments = adjustments or PayAdjustments()
        pay_type = profile.pay_type

        regular_hours = to_decimal(hours.regular_hours)
        overtime_hours = to_decimal(hours.overtime_hours)

        hourly_rate = ZERO
        hourly_pay = ZERO
        if pay_type.includes_hourly:
            hourly_rate = to_decimal(profile.hourly_rate)
            hourly_pay = (
                regular_hours * hourly_rate
                + overtime_hours * hourly_rate * OVERTIME_MULTIPLIER
            )

        salary_pay = ZERO
        if pay_type.includes_salary:
            if profile.salary_amount is None:
                logger.warning(
                    "Employee %s has pay type %s but no salary amount; using 0",
                    profile.employee_id,
                    pay_type.value,
                )
            salary_pay = self._salary_for_period(
                to_decimal(profile.salary_amount), to_decimal(weeks_in_period)
            )

        service_commission = ZERO
        retail_commission = ZERO
        if profile.earns_commission and resolved_commission is not None:
            service_commission = resolved_commission.service_commission
            retail_commission = resolved_commission.retail_commission

        bonus = to_decimal(adjustments.bonus)
        tips = to_decimal(adjustments.tips)
        gross = hourly_pay + salary_pay + service_commission + retail_commission + bonus + tips
        taxes = self.tax_estimator.estimate(gross)

        return CompensationBreakdown(
            employee_id=profile.employee_id,
            pay_type=pay_type,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            hourly_pay=hourly_pay,
            salary_pay=salary_pay,
            service_commission=service_commission,
            retail_commission=retail_commission,
            bonus_pay=bonus,
            tips=tips,
            estimated_federal_tax=taxes.federal,
            estimated_state_tax=taxes.state,
            estimated_fica=taxes.employee_fica,
            employer_fica=taxes.employer_fica,
            employer_futa=taxes.futa,
            employer_suta=taxes.suta,
            deductions=to_decimal(adjustments.deductions),
            hourly_rate=hourly_rate,
            commission_source=resolved_commission.source if resolved_commission else None,
        )

    def _salary_for_period(self, annual_salary: Decimal, weeks_in_period: Decimal) -> Decimal:
        """Per-paycheck salary on the fixed baseline, scaled to the period length."""
        per_paycheck = annual_salary / Decimal(self.paychecks_per_year)
        return per_paycheck * (weeks_in_period / BIWEEKLY_WEEKS)


def compute_compensation(
    profile: EmployeePayrollProfile,
    hours: HoursWorked | None,
    resolved_commission: ResolvedCommission | None,
    adjustments: PayAdjustments | None,
    weeks_in_period: Decimal,
) -> CompensationBreakdown:
    """Compute one breakdown with default rates and the 26-paycheck baseline."""
    return CompensationCalculator().calculate(
        profile, hours, resolved_commission, adjustments, weeks_in_period
    )


@dataclass(frozen=True)
class PayrollTotals:
    """Run-level totals over a set of breakdowns."""

    employee_count: int
    gross_pay: Decimal
    employee_taxes: Decimal
    employer_taxes: Decimal
    net_pay: Decimal
    total_hourly_pay: Decimal
    total_salary_pay: Decimal
    total_commissions: Decimal
    total_bonuses: Decimal
    total_tips: Decimal
    total_deductions: Decimal

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"employee_count": self.employee_count}
        for name in (
            "gross_pay",
            "employee_taxes",
            "employer_taxes",
            "net_pay",
            "total_hourly_pay",
            "total_salary_pay",
            "total_commissions",
            "total_bonuses",
            "total_tips",
            "total_deductions",
        ):
            data[name] = format_money(getattr(self, name))
        return data


def calculate_payroll_totals(breakdowns: Iterable[CompensationBreakdown]) -> PayrollTotals:
    """Sum breakdowns into run-level totals."""
    items = list(breakdowns)
    return PayrollTotals(
        employee_count=len(items),
        gross_pay=sum((b.gross_pay for b in items), ZERO),
        employee_taxes=sum((b.employee_taxes for b in items), ZERO),
        employer_taxes=sum((b.employer_taxes for b in items), ZERO),
        net_pay=sum((b.net_pay for b in items), ZERO),
        total_hourly_pay=sum((b.hourly_pay for b in items), ZERO),
        total_salary_pay=sum((b.salary_pay for b in items), ZERO),
        total_commissions=sum((b.commission_pay for b in items), ZERO),
        total_bonuses=sum((b.bonus_pay for b in items), ZERO),
        total_tips=sum((b.tips for b in items), ZERO),
        total_deductions=sum((b.deductions for b in items), ZERO),
    )
