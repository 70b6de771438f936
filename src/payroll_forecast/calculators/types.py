"""Type definitions for the forecasting pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    """Coerce an optional numeric input to Decimal (None -> 0)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def format_money(value: Decimal) -> str:
    """Render a Decimal for JSON output without exponent notation."""
    return format(value, "f")


class InvalidScheduleConfigError(ValueError):
    """Raised when a pay schedule configuration violates its invariants."""

    def __init__(self, field_name: str, value: Any, reason: str):
        self.field_name = field_name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid pay schedule {field_name}={value!r}: {reason}")


class PayScheduleType(str, Enum):
    """Pay schedule policies."""

    SEMI_MONTHLY = "semi_monthly"
    BI_WEEKLY = "bi_weekly"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class PayType(str, Enum):
    """Employee pay structures."""

    HOURLY = "hourly"
    SALARY = "salary"
    COMMISSION = "commission"
    HOURLY_PLUS_COMMISSION = "hourly_plus_commission"
    SALARY_PLUS_COMMISSION = "salary_plus_commission"

    @property
    def includes_hourly(self) -> bool:
        return self in (PayType.HOURLY, PayType.HOURLY_PLUS_COMMISSION)

    @property
    def includes_salary(self) -> bool:
        return self in (PayType.SALARY, PayType.SALARY_PLUS_COMMISSION)

    @property
    def includes_commission(self) -> bool:
        return self in (
            PayType.COMMISSION,
            PayType.HOURLY_PLUS_COMMISSION,
            PayType.SALARY_PLUS_COMMISSION,
        )


class CommissionSourceKind(str, Enum):
    """Where a resolved commission rate came from."""

    OVERRIDE = "override"
    LEVEL = "level"
    UNASSIGNED = "unassigned"


class ConfidenceLevel(str, Enum):
    """Forecast reliability indicator."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class LineType(str, Enum):
    """Pay statement line item types."""

    EARNING = "EARNING"
    DEDUCTION = "DEDUCTION"
    TAX = "TAX"
    EMPLOYER_TAX = "EMPLOYER_TAX"
    ROUNDING = "ROUNDING"


# ============================================================================
# Schedule
# ============================================================================


@dataclass(frozen=True)
class PayScheduleConfig:
    """Organization pay schedule.

    Day-of-week values use 0 = Sunday .. 6 = Saturday.
    ``days_until_check`` of None means the 5 day default.
    """

    policy: PayScheduleType = PayScheduleType.SEMI_MONTHLY
    semi_monthly_first_day: int = 1
    semi_monthly_second_day: int = 15
    bi_weekly_day_of_week: int = 5
    bi_weekly_anchor_date: date | None = None
    weekly_day_of_week: int = 5
    monthly_pay_day: int = 1
    days_until_check: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "policy", PayScheduleType(self.policy))

        for name in ("semi_monthly_first_day", "semi_monthly_second_day", "monthly_pay_day"):
            value = getattr(self, name)
            if not 1 <= value <= 31:
                raise InvalidScheduleConfigError(name, value, "must be between 1 and 31")

        if self.semi_monthly_first_day >= self.semi_monthly_second_day:
            raise InvalidScheduleConfigError(
                "semi_monthly_first_day",
                self.semi_monthly_first_day,
                "must be before semi_monthly_second_day",
            )

        for name in ("bi_weekly_day_of_week", "weekly_day_of_week"):
            value = getattr(self, name)
            if not 0 <= value <= 6:
                raise InvalidScheduleConfigError(name, value, "must be between 0 and 6")

        if self.days_until_check is not None and self.days_until_check < 0:
            raise InvalidScheduleConfigError(
                "days_until_check", self.days_until_check, "must not be negative"
            )


@dataclass(frozen=True)
class PayPeriod:
    """Date range covered by one payroll computation."""

    start: date
    end: date
    check_date: date

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1

    @property
    def label(self) -> str:
        """Short display label, e.g. 'Jan 4 - Jan 17'."""
        return f"{self.start:%b} {self.start.day} - {self.end:%b} {self.end.day}"

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "check_date": self.check_date.isoformat(),
            "total_days": self.total_days,
            "label": self.label,
        }


# ============================================================================
# Roster and commission catalog
# ============================================================================


@dataclass(frozen=True)
class EmployeePayrollProfile:
    """Pay settings for one employee.

    ``pay_type`` decides which of the rate fields are read: hourly types
    read ``hourly_rate``, salary types read ``salary_amount`` (annual).
    """

    employee_id: str
    pay_type: PayType
    hourly_rate: Decimal | None = None
    salary_amount: Decimal | None = None
    commission_enabled: bool = False
    is_active: bool = True
    employee_name: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "pay_type", PayType(self.pay_type))

    @property
    def earns_commission(self) -> bool:
        return self.commission_enabled and self.pay_type.includes_commission


@dataclass(frozen=True)
class CommissionOverride:
    """Per-employee commission rates superseding level defaults."""

    employee_id: str
    service_rate: Decimal | None = None
    retail_rate: Decimal | None = None
    reason: str = ""
    is_active: bool = True
    expires_at: date | None = None

    @property
    def has_rates(self) -> bool:
        return self.service_rate is not None or self.retail_rate is not None

    def is_effective(self, as_of: date) -> bool:
        """Active and not yet expired on ``as_of``."""
        if not self.is_active:
            return False
        return self.expires_at is None or self.expires_at > as_of


@dataclass(frozen=True)
class StylistLevel:
    """A named commission-rate tier."""

    slug: str
    label: str
    service_rate: Decimal | None = None
    retail_rate: Decimal | None = None
    display_order: int = 0

    @property
    def has_rates(self) -> bool:
        return self.service_rate is not None or self.retail_rate is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "label": self.label,
            "service_rate": format_money(self.service_rate) if self.service_rate is not None else None,
            "retail_rate": format_money(self.retail_rate) if self.retail_rate is not None else None,
            "display_order": self.display_order,
        }


@dataclass(frozen=True)
class EmployeeLevelAssignment:
    """Employee to level mapping; ``level_slug`` None means unassigned."""

    employee_id: str
    level_slug: str | None = None


@dataclass(frozen=True)
class SalesActual:
    """One employee's sales for one day."""

    employee_id: str
    summary_date: date
    service_revenue: Decimal = ZERO
    product_revenue: Decimal = ZERO


@dataclass(frozen=True)
class SalesTotals:
    """Service and product revenue for a window."""

    services: Decimal = ZERO
    products: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.services + self.products

    def to_dict(self) -> dict[str, str]:
        return {
            "services": format_money(self.services),
            "products": format_money(self.products),
            "total": format_money(self.total),
        }


# ============================================================================
# Resolution and compensation results
# ============================================================================


@dataclass(frozen=True)
class CommissionSource:
    """Typed origin of a resolved rate."""

    kind: CommissionSourceKind
    tier_slug: str | None = None
    name: str | None = None

    @property
    def label(self) -> str:
        """Display string. Never parse this; use ``kind`` and ``tier_slug``."""
        if self.kind == CommissionSourceKind.OVERRIDE:
            return f"Override: {self.name}" if self.name else "Override"
        if self.kind == CommissionSourceKind.LEVEL:
            return f"Level: {self.name or self.tier_slug}"
        return "Unassigned"

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "tier_slug": self.tier_slug,
            "name": self.name,
            "label": self.label,
        }


@dataclass(frozen=True)
class ResolvedCommission:
    """Effective commission rates and amounts for one employee."""

    service_rate: Decimal
    retail_rate: Decimal
    service_commission: Decimal
    retail_commission: Decimal
    source: CommissionSource

    @property
    def total_commission(self) -> Decimal:
        return self.service_commission + self.retail_commission

    @property
    def source_label(self) -> str:
        return self.source.label

    def to_dict(self) -> dict[str, Any]:
        return {
            "service_rate": format_money(self.service_rate),
            "retail_rate": format_money(self.retail_rate),
            "service_commission": format_money(self.service_commission),
            "retail_commission": format_money(self.retail_commission),
            "total_commission": format_money(self.total_commission),
            "source": self.source.kind.value,
            "source_label": self.source_label,
            "tier_slug": self.source.tier_slug,
        }


@dataclass(frozen=True)
class HoursWorked:
    """Hours already split into regular and overtime by the caller."""

    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO


@dataclass(frozen=True)
class PayAdjustments:
    """One-off additions and deductions for a period."""

    bonus: Decimal = ZERO
    tips: Decimal = ZERO
    deductions: Decimal = ZERO


@dataclass(frozen=True)
class CompensationBreakdown:
    """Full compensation for one employee and period (unrounded)."""

    employee_id: str
    pay_type: PayType
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_pay: Decimal
    salary_pay: Decimal
    service_commission: Decimal
    retail_commission: Decimal
    bonus_pay: Decimal
    tips: Decimal
    estimated_federal_tax: Decimal
    estimated_state_tax: Decimal
    estimated_fica: Decimal
    employer_fica: Decimal
    employer_futa: Decimal
    employer_suta: Decimal
    deductions: Decimal
    hourly_rate: Decimal = ZERO
    commission_source: CommissionSource | None = None

    @property
    def commission_pay(self) -> Decimal:
        return self.service_commission + self.retail_commission

    @property
    def base_pay(self) -> Decimal:
        return self.hourly_pay + self.salary_pay

    @property
    def gross_pay(self) -> Decimal:
        return self.hourly_pay + self.salary_pay + self.commission_pay + self.bonus_pay + self.tips

    @property
    def employee_taxes(self) -> Decimal:
        return self.estimated_federal_tax + self.estimated_state_tax + self.estimated_fica

    @property
    def employer_taxes(self) -> Decimal:
        return self.employer_fica + self.employer_futa + self.employer_suta

    @property
    def net_pay(self) -> Decimal:
        return self.gross_pay - self.employee_taxes - self.deductions

    def to_dict(self) -> dict[str, Any]:
        money_fields = (
            "regular_hours",
            "overtime_hours",
            "hourly_rate",
            "hourly_pay",
            "salary_pay",
            "service_commission",
            "retail_commission",
            "commission_pay",
            "base_pay",
            "bonus_pay",
            "tips",
            "gross_pay",
            "estimated_federal_tax",
            "estimated_state_tax",
            "estimated_fica",
            "employee_taxes",
            "employer_fica",
            "employer_futa",
            "employer_suta",
            "employer_taxes",
            "deductions",
            "net_pay",
        )
        data: dict[str, Any] = {
            "employee_id": self.employee_id,
            "pay_type": self.pay_type.value,
        }
        for name in money_fields:
            data[name] = format_money(getattr(self, name))
        data["commission_source"] = (
            self.commission_source.to_dict() if self.commission_source else None
        )
        return data


@dataclass
class LineCandidate:
    """A pay statement line item (signed, rounded to cents)."""

    line_type: LineType
    code: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None
    explanation: str | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "code": self.code,
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "rate": str(self.rate) if self.rate is not None else None,
            "amount": str(self.amount),
        }

    def to_dict(self) -> dict[str, Any]:
        data = self.to_canonical_dict()
        data["explanation"] = self.explanation
        return data


@dataclass
class CommissionRules:
    """Commission inputs handed to the forecasting engine."""

    overrides: list[CommissionOverride] = field(default_factory=list)
    level_assignments: dict[str, str | None] = field(default_factory=dict)
    levels: list[StylistLevel] = field(default_factory=list)

    @classmethod
    def from_assignments(
        cls,
        overrides: list[CommissionOverride],
        assignments: list[EmployeeLevelAssignment],
        levels: list[StylistLevel],
    ) -> CommissionRules:
        return cls(
            overrides=list(overrides),
            level_assignments={a.employee_id: a.level_slug for a in assignments},
            levels=list(levels),
        )

    def level_for(self, employee_id: str) -> StylistLevel | None:
        """The employee's assigned level record, if it exists in the catalog."""
        slug = self.level_assignments.get(employee_id)
        if slug is None:
            return None
        return next((lvl for lvl in self.levels if lvl.slug == slug), None)
