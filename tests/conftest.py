"""Pytest fixtures for payroll forecast tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from payroll_forecast.api.app import create_app
from payroll_forecast.calculators.types import (
    CommissionOverride,
    CommissionRules,
    EmployeePayrollProfile,
    PayScheduleConfig,
    PayScheduleType,
    PayType,
    StylistLevel,
)
from payroll_forecast.config import Settings, get_settings


@pytest.fixture
def settings() -> Settings:
    """Settings with the standard forecasting assumptions, independent of env."""
    return Settings(
        engine_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="DEBUG",
        hours_per_period=Decimal("80"),
        salary_paychecks_per_year=26,
        blended_tax_rate=Decimal("0.35"),
        partial_override_inherits_level=False,
    )


@pytest.fixture
def bi_weekly_schedule() -> PayScheduleConfig:
    """Bi-weekly Friday pay; periods run Dec 28 - Jan 10, Jan 11 - Jan 24, ..."""
    return PayScheduleConfig(
        policy=PayScheduleType.BI_WEEKLY,
        bi_weekly_day_of_week=5,
        bi_weekly_anchor_date=date(2026, 1, 2),
    )


@pytest.fixture
def levels() -> list[StylistLevel]:
    return [
        StylistLevel(
            slug="senior",
            label="Senior Stylist",
            service_rate=Decimal("0.40"),
            retail_rate=Decimal("0.10"),
            display_order=2,
        ),
        StylistLevel(
            slug="junior",
            label="Junior Stylist",
            service_rate=Decimal("0.30"),
            retail_rate=Decimal("0.05"),
            display_order=1,
        ),
    ]


@pytest.fixture
def hourly_employee() -> EmployeePayrollProfile:
    return EmployeePayrollProfile(
        employee_id="emp-a",
        pay_type=PayType.HOURLY,
        hourly_rate=Decimal("20"),
        employee_name="Avery",
    )


@pytest.fixture
def salaried_stylist() -> EmployeePayrollProfile:
    return EmployeePayrollProfile(
        employee_id="emp-b",
        pay_type=PayType.SALARY_PLUS_COMMISSION,
        salary_amount=Decimal("52000"),
        commission_enabled=True,
        employee_name="Blake",
    )


@pytest.fixture
def flat_rate_rules() -> CommissionRules:
    """emp-b at a 10% service level, no overrides."""
    return CommissionRules(
        overrides=[],
        level_assignments={"emp-b": "flat"},
        levels=[
            StylistLevel(
                slug="flat",
                label="Flat",
                service_rate=Decimal("0.10"),
                retail_rate=Decimal("0"),
            )
        ],
    )


@pytest.fixture
def promo_override() -> CommissionOverride:
    return CommissionOverride(
        employee_id="emp-c",
        service_rate=Decimal("0.50"),
        reason="Promo",
    )


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: settings
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
