"""Commission rate resolution with a fixed priority chain."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date
from decimal import Decimal

from payroll_forecast.calculators.types import (
    CommissionOverride,
    CommissionRules,
    CommissionSource,
    CommissionSourceKind,
    EmployeeLevelAssignment,
    ResolvedCommission,
    StylistLevel,
    to_decimal,
)

logger = logging.getLogger(__name__)

LevelAssignments = Mapping[str, "str | None"] | Iterable[EmployeeLevelAssignment]


def _assignment_map(assignments: LevelAssignments) -> dict[str, str | None]:
    if isinstance(assignments, Mapping):
        return dict(assignments)
    return {a.employee_id: a.level_slug for a in assignments}


class CommissionResolver:
    """Resolves an employee's effective commission rates.

    Rate selection priority (first match wins):
    1. Override: the first active, non-expired override for the employee
       with at least one rate set. An unset side resolves to 0 rather than
       to the level's rate, unless ``inherit_level_rates`` is enabled.
    2. Level: the employee's assigned level, if it exists and has at
       least one rate set.
    3. Unassigned: both rates are 0. Rates must be defined before payout.

    Commission amounts are ``revenue * rate`` with no rounding.
    """

    def __init__(
        self,
        overrides: Iterable[CommissionOverride],
        level_assignments: LevelAssignments,
        levels: Iterable[StylistLevel],
        *,
        inherit_level_rates: bool = False,
    ):
        self.overrides = list(overrides)
        self.level_assignments = _assignment_map(level_assignments)
        self.levels_by_slug = {level.slug: level for level in levels}
        self.inherit_level_rates = inherit_level_rates

    @classmethod
    def from_rules(cls, rules: CommissionRules, *, inherit_level_rates: bool = False) -> CommissionResolver:
        return cls(
            rules.overrides,
            rules.level_assignments,
            rules.levels,
            inherit_level_rates=inherit_level_rates,
        )

    def find_override(self, employee_id: str, as_of: date) -> CommissionOverride | None:
        """First effective override for the employee that carries a rate."""
        return next(
            (
                o
                for o in self.overrides
                if o.employee_id == employee_id and o.is_effective(as_of) and o.has_rates
            ),
            None,
        )

    def find_level(self, employee_id: str) -> StylistLevel | None:
        """Assigned level record, or None when unassigned or not in the catalog."""
        slug = self.level_assignments.get(employee_id)
        if slug is None:
            return None
        return self.levels_by_slug.get(slug)

    def resolve(
        self,
        employee_id: str,
        service_revenue: Decimal,
        product_revenue: Decimal,
        as_of: date,
    ) -> ResolvedCommission:
        """Resolve rates and commission amounts for one employee."""
        service_revenue = to_decimal(service_revenue)
        product_revenue = to_decimal(product_revenue)
        level = self.find_level(employee_id)

        override = self.find_override(employee_id, as_of)
        if override is not None:
            service_rate = override.service_rate
            retail_rate = override.retail_rate
            if self.inherit_level_rates and level is not None:
                if service_rate is None:
                    service_rate = level.service_rate
                if retail_rate is None:
                    retail_rate = level.retail_rate
            source = CommissionSource(
                kind=CommissionSourceKind.OVERRIDE,
                tier_slug=level.slug if level else None,
                name=override.reason or None,
            )
            return self._build(service_revenue, product_revenue, service_rate, retail_rate, source)

        if level is not None and level.has_rates:
            source = CommissionSource(
                kind=CommissionSourceKind.LEVEL,
                tier_slug=level.slug,
                name=level.label,
            )
            return self._build(
                service_revenue, product_revenue, level.service_rate, level.retail_rate, source
            )

        logger.debug("No commission rates defined for employee %s", employee_id)
        return self._build(
            service_revenue,
            product_revenue,
            None,
            None,
            CommissionSource(kind=CommissionSourceKind.UNASSIGNED),
        )

    @staticmethod
    def _build(
        service_revenue: Decimal,
        product_revenue: Decimal,
        service_rate: Decimal | None,
        retail_rate: Decimal | None,
        source: CommissionSource,
    ) -> ResolvedCommission:
        service_rate = to_decimal(service_rate)
        retail_rate = to_decimal(retail_rate)
        return ResolvedCommission(
            service_rate=service_rate,
            retail_rate=retail_rate,
            service_commission=service_revenue * service_rate,
            retail_commission=product_revenue * retail_rate,
            source=source,
        )


def resolve_commission(
    employee_id: str,
    service_revenue: Decimal,
    product_revenue: Decimal,
    overrides: Iterable[CommissionOverride],
    level_assignments: LevelAssignments,
    levels: Iterable[StylistLevel],
    as_of: date,
    *,
    inherit_level_rates: bool = False,
) -> ResolvedCommission:
    """Resolve commission for one employee without keeping a resolver around."""
    resolver = CommissionResolver(
        overrides, level_assignments, levels, inherit_level_rates=inherit_level_rates
    )
    return resolver.resolve(employee_id, service_revenue, product_revenue, as_of)


__all__ = ["CommissionResolver", "resolve_commission"]
