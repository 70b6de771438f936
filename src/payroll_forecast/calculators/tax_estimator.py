"""Flat-rate tax estimation for forecasting.

These are approximations applied to gross pay for planning purposes.
They are not statutory withholding: no brackets, wage bases, filing
status, or taxable-wage adjustments are modeled.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FlatTaxRates:
    """Flat rates applied to gross pay."""

    federal: Decimal = Decimal("0.22")
    state: Decimal = Decimal("0.05")
    employee_fica: Decimal = Decimal("0.0765")
    employer_fica: Decimal = Decimal("0.0765")
    futa: Decimal = Decimal("0.006")
    suta: Decimal = Decimal("0.027")

    @property
    def employee_total(self) -> Decimal:
        return self.federal + self.state + self.employee_fica

    @property
    def employer_total(self) -> Decimal:
        return self.employer_fica + self.futa + self.suta


DEFAULT_TAX_RATES = FlatTaxRates()


@dataclass(frozen=True)
class TaxEstimate:
    """Estimated employee withholding and employer burden for one gross amount."""

    federal: Decimal
    state: Decimal
    employee_fica: Decimal
    employer_fica: Decimal
    futa: Decimal
    suta: Decimal

    @property
    def employee_total(self) -> Decimal:
        return self.federal + self.state + self.employee_fica

    @property
    def employer_total(self) -> Decimal:
        return self.employer_fica + self.futa + self.suta


class TaxEstimator:
    """Applies flat tax rates to gross pay."""

    def __init__(self, rates: FlatTaxRates = DEFAULT_TAX_RATES):
        self.rates = rates

    def estimate(self, gross: Decimal) -> TaxEstimate:
        rates = self.rates
        return TaxEstimate(
            federal=gross * rates.federal,
            state=gross * rates.state,
            employee_fica=gross * rates.employee_fica,
            employer_fica=gross * rates.employer_fica,
            futa=gross * rates.futa,
            suta=gross * rates.suta,
        )

    @staticmethod
    def blended(gross: Decimal, rate: Decimal) -> Decimal:
        """Single blended rate used for dashboard-level totals."""
        return gross * rate
