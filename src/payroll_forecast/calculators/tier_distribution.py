"""Reporting aggregates over a payroll projection."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from payroll_forecast.calculators.forecasting import EmployeeProjection, PayrollProjection
from payroll_forecast.calculators.types import (
    ZERO,
    CommissionSourceKind,
    StylistLevel,
    format_money,
)

UNASSIGNED_LABEL = "Unassigned"


@dataclass(frozen=True)
class TierDistributionItem:
    """Headcount and projected revenue for one level."""

    tier_slug: str | None
    tier_label: str
    service_rate: Decimal | None
    retail_rate: Decimal | None
    display_order: int
    headcount: int
    override_count: int
    service_revenue: Decimal
    product_revenue: Decimal

    @property
    def total_revenue(self) -> Decimal:
        return self.service_revenue + self.product_revenue

    @property
    def is_unassigned(self) -> bool:
        return self.tier_slug is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tier_slug": self.tier_slug,
            "tier_label": self.tier_label,
            "service_rate": format_money(self.service_rate) if self.service_rate is not None else None,
            "retail_rate": format_money(self.retail_rate) if self.retail_rate is not None else None,
            "display_order": self.display_order,
            "headcount": self.headcount,
            "override_count": self.override_count,
            "service_revenue": format_money(self.service_revenue),
            "product_revenue": format_money(self.product_revenue),
            "total_revenue": format_money(self.total_revenue),
        }


def _bucket(level: StylistLevel | None, members: list[EmployeeProjection]) -> TierDistributionItem:
    return TierDistributionItem(
        tier_slug=level.slug if level else None,
        tier_label=level.label if level else UNASSIGNED_LABEL,
        service_rate=level.service_rate if level else None,
        retail_rate=level.retail_rate if level else None,
        display_order=level.display_order if level else 0,
        headcount=len(members),
        override_count=sum(
            1 for m in members if m.resolved_source == CommissionSourceKind.OVERRIDE
        ),
        service_revenue=sum((m.projected_sales.services for m in members), ZERO),
        product_revenue=sum((m.projected_sales.products for m in members), ZERO),
    )


def aggregate_tier_distribution(projection: PayrollProjection) -> list[TierDistributionItem]:
    """Group employee projections by assigned level.

    Employees are keyed by their level slug, so override-sourced employees
    stay in their level's bucket (counted in ``override_count``). Employees
    without a level go to a trailing unassigned bucket. Level buckets sort
    ascending by service rate, then display order.
    """
    levels: dict[str, StylistLevel] = {}
    members: dict[str, list[EmployeeProjection]] = {}
    unassigned: list[EmployeeProjection] = []

    for employee in projection.employees:
        level = employee.assigned_level
        if level is None:
            unassigned.append(employee)
            continue
        levels.setdefault(level.slug, level)
        members.setdefault(level.slug, []).append(employee)

    ordered = sorted(
        levels.values(),
        key=lambda lvl: (
            lvl.service_rate if lvl.service_rate is not None else ZERO,
            lvl.display_order,
            lvl.slug,
        ),
    )
    items = [_bucket(level, members[level.slug]) for level in ordered]
    if unassigned:
        items.append(_bucket(None, unassigned))
    return items


@dataclass(frozen=True)
class CommissionSummary:
    """Headline commission figures for a projection."""

    employee_count: int
    total_commission: Decimal
    average_service_rate: Decimal
    override_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee_count": self.employee_count,
            "total_commission": format_money(self.total_commission),
            "average_service_rate": format_money(self.average_service_rate),
            "override_count": self.override_count,
        }


def summarize_commissions(projection: PayrollProjection) -> CommissionSummary:
    """Estimated commission across the roster at resolved rates.

    The average service rate only counts employees with a nonzero rate.
    """
    resolved = [e.resolved_commission for e in projection.employees]
    service_rates = [r.service_rate for r in resolved if r.service_rate > 0]
    average = sum(service_rates, ZERO) / len(service_rates) if service_rates else ZERO
    return CommissionSummary(
        employee_count=len(resolved),
        total_commission=sum((r.total_commission for r in resolved), ZERO),
        average_service_rate=average,
        override_count=sum(1 for r in resolved if r.source.kind == CommissionSourceKind.OVERRIDE),
    )
