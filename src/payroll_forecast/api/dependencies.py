"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from payroll_forecast.calculators.compensation import CompensationCalculator
from payroll_forecast.calculators.forecasting import ForecastingEngine
from payroll_forecast.config import Settings, get_settings


def get_forecasting_engine(
    settings: Annotated[Settings, Depends(get_settings)],
) -> ForecastingEngine:
    """Forecasting engine bound to the current settings."""
    return ForecastingEngine(settings=settings)


def get_compensation_calculator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> CompensationCalculator:
    """Compensation calculator using the configured salary divisor."""
    return CompensationCalculator(paychecks_per_year=settings.salary_paychecks_per_year)


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
Engine = Annotated[ForecastingEngine, Depends(get_forecasting_engine)]
Calculator = Annotated[CompensationCalculator, Depends(get_compensation_calculator)]
