"""Pay period, commission, compensation and projection endpoints."""

from fastapi import APIRouter, status

from payroll_forecast.api.dependencies import AppSettings, Calculator, Engine
from payroll_forecast.api.schemas import (
    CompensationRequest,
    CompensationResponse,
    ErrorResponse,
    PayPeriodResponse,
    PeriodRequest,
    ProjectionRequest,
    ProjectionResponse,
    ResolveCommissionRequest,
    ResolvedCommissionResponse,
)
from payroll_forecast.calculators.commission_resolver import CommissionResolver
from payroll_forecast.calculators.line_builder import LineItemBuilder
from payroll_forecast.calculators.pay_schedule import current_period, next_pay_day
from payroll_forecast.calculators.tier_distribution import (
    aggregate_tier_distribution,
    summarize_commissions,
)

router = APIRouter(tags=["forecast"])


# ============================================================================
# Pay schedule
# ============================================================================


@router.post(
    "/pay-periods/current",
    response_model=PayPeriodResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def get_current_period(payload: PeriodRequest) -> PayPeriodResponse:
    """Current pay period and next pay day for ``today``."""
    config = payload.schedule.to_domain() if payload.schedule else None
    period = current_period(config, payload.today)
    return PayPeriodResponse(
        start=period.start,
        end=period.end,
        check_date=period.check_date,
        total_days=period.total_days,
        label=period.label,
        next_pay_day=next_pay_day(config, payload.today),
    )


# ============================================================================
# Commission and compensation
# ============================================================================


@router.post(
    "/commissions/resolve",
    response_model=ResolvedCommissionResponse,
    status_code=status.HTTP_200_OK,
)
async def resolve_employee_commission(
    payload: ResolveCommissionRequest,
    settings: AppSettings,
) -> ResolvedCommissionResponse:
    """Resolve rates and commission for one employee."""
    resolver = CommissionResolver.from_rules(
        payload.to_rules(),
        inherit_level_rates=settings.partial_override_inherits_level,
    )
    resolved = resolver.resolve(
        payload.employee_id,
        payload.service_revenue,
        payload.product_revenue,
        payload.as_of,
    )
    return ResolvedCommissionResponse(
        service_rate=resolved.service_rate,
        retail_rate=resolved.retail_rate,
        service_commission=resolved.service_commission,
        retail_commission=resolved.retail_commission,
        total_commission=resolved.total_commission,
        source=resolved.source.kind,
        source_label=resolved.source_label,
        tier_slug=resolved.source.tier_slug,
    )


@router.post(
    "/compensation",
    response_model=CompensationResponse,
    status_code=status.HTTP_200_OK,
)
async def compute_employee_compensation(
    payload: CompensationRequest,
    calculator: Calculator,
) -> CompensationResponse:
    """Compensation breakdown plus statement lines rounded to cents."""
    resolved = payload.resolved_commission.to_domain() if payload.resolved_commission else None
    breakdown = calculator.calculate(
        payload.profile.to_domain(),
        payload.hours.to_domain(),
        resolved,
        payload.adjustments.to_domain(),
        payload.weeks_in_period,
    )
    lines = LineItemBuilder.build_lines(breakdown)
    return CompensationResponse(
        breakdown=breakdown.to_dict(),
        lines=[line.to_dict() for line in lines],
    )


# ============================================================================
# Projection
# ============================================================================


@router.post(
    "/projections",
    response_model=ProjectionResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def project_current_period(
    payload: ProjectionRequest,
    engine: Engine,
) -> ProjectionResponse:
    """Project payroll for the period containing ``today``."""
    projection = engine.project(
        roster=[emp.to_domain() for emp in payload.roster],
        schedule_config=payload.schedule.to_domain() if payload.schedule else None,
        sales_actuals=[row.to_domain() for row in payload.sales_actuals],
        today=payload.today,
        commission_rules=payload.to_rules(),
    )
    return ProjectionResponse(
        projection=projection.to_dict(),
        tier_distribution=[item.to_dict() for item in aggregate_tier_distribution(projection)],
        commission_summary=summarize_commissions(projection).to_dict(),
    )
