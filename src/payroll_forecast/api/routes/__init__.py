"""API routes."""

from payroll_forecast.api.routes.forecast import router as forecast_router
from payroll_forecast.api.routes.health import router as health_router

__all__ = ["forecast_router", "health_router"]
