"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from payroll_forecast.calculators.types import (
    CommissionOverride,
    CommissionRules,
    CommissionSource,
    CommissionSourceKind,
    EmployeePayrollProfile,
    HoursWorked,
    PayAdjustments,
    PayScheduleConfig,
    PayScheduleType,
    PayType,
    ResolvedCommission,
    SalesActual,
    StylistLevel,
)


class ErrorResponse(BaseModel):
    """Error response body."""

    detail: str
    code: str | None = None


# ============================================================================
# Schedule schemas
# ============================================================================


class PayScheduleIn(BaseModel):
    """Pay schedule settings (0 = Sunday .. 6 = Saturday)."""

    policy: PayScheduleType = PayScheduleType.SEMI_MONTHLY
    semi_monthly_first_day: int = Field(1, ge=1, le=31)
    semi_monthly_second_day: int = Field(15, ge=1, le=31)
    bi_weekly_day_of_week: int = Field(5, ge=0, le=6)
    bi_weekly_anchor_date: date | None = None
    weekly_day_of_week: int = Field(5, ge=0, le=6)
    monthly_pay_day: int = Field(1, ge=1, le=31)
    days_until_check: int | None = Field(None, ge=0)

    def to_domain(self) -> PayScheduleConfig:
        return PayScheduleConfig(**self.model_dump())


class PeriodRequest(BaseModel):
    """Current period lookup."""

    schedule: PayScheduleIn | None = None
    today: date


class PayPeriodResponse(BaseModel):
    """Current pay period and next pay day."""

    start: date
    end: date
    check_date: date
    total_days: int
    label: str
    next_pay_day: date


# ============================================================================
# Roster and commission catalog schemas
# ============================================================================


class EmployeeProfileIn(BaseModel):
    """Employee pay settings."""

    employee_id: str
    pay_type: PayType
    hourly_rate: Decimal | None = None
    salary_amount: Decimal | None = None
    commission_enabled: bool = False
    is_active: bool = True
    employee_name: str | None = None

    def to_domain(self) -> EmployeePayrollProfile:
        return EmployeePayrollProfile(**self.model_dump())


class CommissionOverrideIn(BaseModel):
    """Per-employee commission override."""

    employee_id: str
    service_rate: Decimal | None = None
    retail_rate: Decimal | None = None
    reason: str = ""
    is_active: bool = True
    expires_at: date | None = None

    def to_domain(self) -> CommissionOverride:
        return CommissionOverride(**self.model_dump())


class StylistLevelIn(BaseModel):
    """Commission level."""

    slug: str
    label: str
    service_rate: Decimal | None = None
    retail_rate: Decimal | None = None
    display_order: int = 0

    def to_domain(self) -> StylistLevel:
        return StylistLevel(**self.model_dump())


class LevelAssignmentIn(BaseModel):
    """Employee to level mapping."""

    employee_id: str
    level_slug: str | None = None


class SalesActualIn(BaseModel):
    """Daily sales for one employee."""

    employee_id: str
    summary_date: date
    service_revenue: Decimal = Decimal("0")
    product_revenue: Decimal = Decimal("0")

    def to_domain(self) -> SalesActual:
        return SalesActual(**self.model_dump())


class CommissionRulesIn(BaseModel):
    """Overrides, levels and assignments used for resolution."""

    overrides: list[CommissionOverrideIn] = Field(default_factory=list)
    level_assignments: list[LevelAssignmentIn] = Field(default_factory=list)
    levels: list[StylistLevelIn] = Field(default_factory=list)

    def to_rules(self) -> CommissionRules:
        return CommissionRules(
            overrides=[o.to_domain() for o in self.overrides],
            level_assignments={a.employee_id: a.level_slug for a in self.level_assignments},
            levels=[lvl.to_domain() for lvl in self.levels],
        )


# ============================================================================
# Commission schemas
# ============================================================================


class ResolveCommissionRequest(CommissionRulesIn):
    """Resolve one employee's commission."""

    employee_id: str
    service_revenue: Decimal = Decimal("0")
    product_revenue: Decimal = Decimal("0")
    as_of: date


class ResolvedCommissionResponse(BaseModel):
    """Resolved rates and commission amounts."""

    service_rate: Decimal
    retail_rate: Decimal
    service_commission: Decimal
    retail_commission: Decimal
    total_commission: Decimal
    source: CommissionSourceKind
    source_label: str
    tier_slug: str | None = None


class ResolvedCommissionIn(BaseModel):
    """A previously resolved commission supplied to the compensation endpoint."""

    service_rate: Decimal = Decimal("0")
    retail_rate: Decimal = Decimal("0")
    service_commission: Decimal = Decimal("0")
    retail_commission: Decimal = Decimal("0")
    source: CommissionSourceKind = CommissionSourceKind.UNASSIGNED
    tier_slug: str | None = None
    source_name: str | None = None

    def to_domain(self) -> ResolvedCommission:
        return ResolvedCommission(
            service_rate=self.service_rate,
            retail_rate=self.retail_rate,
            service_commission=self.service_commission,
            retail_commission=self.retail_commission,
            source=CommissionSource(
                kind=self.source, tier_slug=self.tier_slug, name=self.source_name
            ),
        )


# ============================================================================
# Compensation schemas
# ============================================================================


class HoursIn(BaseModel):
    """Hours pre-split into regular and overtime."""

    regular_hours: Decimal = Field(Decimal("0"), ge=0)
    overtime_hours: Decimal = Field(Decimal("0"), ge=0)

    def to_domain(self) -> HoursWorked:
        return HoursWorked(**self.model_dump())


class AdjustmentsIn(BaseModel):
    """Bonus, tips and deductions."""

    bonus: Decimal = Decimal("0")
    tips: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")

    def to_domain(self) -> PayAdjustments:
        return PayAdjustments(**self.model_dump())


class CompensationRequest(BaseModel):
    """Compute one employee's compensation."""

    profile: EmployeeProfileIn
    hours: HoursIn = Field(default_factory=HoursIn)
    resolved_commission: ResolvedCommissionIn | None = None
    adjustments: AdjustmentsIn = Field(default_factory=AdjustmentsIn)
    weeks_in_period: Decimal = Field(Decimal("2"), ge=0)


class CompensationResponse(BaseModel):
    """Unrounded breakdown plus cent-rounded statement lines."""

    breakdown: dict[str, Any]
    lines: list[dict[str, Any]]


# ============================================================================
# Projection schemas
# ============================================================================


class ProjectionRequest(CommissionRulesIn):
    """Project payroll for the period containing ``today``."""

    roster: list[EmployeeProfileIn] = Field(default_factory=list)
    schedule: PayScheduleIn | None = None
    sales_actuals: list[SalesActualIn] = Field(default_factory=list)
    today: date


class ProjectionResponse(BaseModel):
    """Projection with reporting aggregates."""

    projection: dict[str, Any]
    tier_distribution: list[dict[str, Any]]
    commission_summary: dict[str, Any]
