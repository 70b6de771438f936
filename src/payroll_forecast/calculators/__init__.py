"""Payroll forecasting and commission resolution engine."""

from payroll_forecast.calculators.commission_resolver import CommissionResolver, resolve_commission
from payroll_forecast.calculators.compensation import (
    CompensationCalculator,
    PayrollTotals,
    calculate_payroll_totals,
    compute_compensation,
)
from payroll_forecast.calculators.forecasting import (
    EmployeeProjection,
    ForecastingEngine,
    PayrollProjection,
    project_payroll,
)
from payroll_forecast.calculators.line_builder import LineItemBuilder
from payroll_forecast.calculators.pay_schedule import current_period, next_pay_day
from payroll_forecast.calculators.tax_estimator import FlatTaxRates, TaxEstimator
from payroll_forecast.calculators.tier_distribution import (
    TierDistributionItem,
    aggregate_tier_distribution,
    summarize_commissions,
)

__all__ = [
    "CommissionResolver",
    "CompensationCalculator",
    "EmployeeProjection",
    "FlatTaxRates",
    "ForecastingEngine",
    "LineItemBuilder",
    "PayrollProjection",
    "PayrollTotals",
    "TaxEstimator",
    "TierDistributionItem",
    "aggregate_tier_distribution",
    "calculate_payroll_totals",
    "compute_compensation",
    "current_period",
    "next_pay_day",
    "project_payroll",
    "resolve_commission",
    "summarize_commissions",
]
