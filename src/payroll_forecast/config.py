"""Configuration management for the payroll forecasting engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache

from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment."""

    engine_version: str
    host: str
    port: int
    debug: bool
    log_level: str

    # Forecasting assumptions
    hours_per_period: Decimal
    salary_paychecks_per_year: int
    blended_tax_rate: Decimal
    partial_override_inherits_level: bool

    @property
    def HOST(self) -> str:
        """Alias for host."""
        return self.host

    @property
    def PORT(self) -> int:
        """Alias for port."""
        return self.port

    @property
    def DEBUG(self) -> bool:
        """Alias for debug."""
        return self.debug

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment variables."""
        load_dotenv()

        return cls(
            engine_version=os.getenv("ENGINE_VERSION", "1.0.0"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            hours_per_period=Decimal(os.getenv("PAYROLL_HOURS_PER_PERIOD", "80")),
            salary_paychecks_per_year=int(os.getenv("PAYROLL_SALARY_PAYCHECKS", "26")),
            blended_tax_rate=Decimal(os.getenv("PAYROLL_BLENDED_TAX_RATE", "0.35")),
            partial_override_inherits_level=(
                os.getenv("PAYROLL_PARTIAL_OVERRIDE_INHERITS_LEVEL", "false").lower() == "true"
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.from_env()
