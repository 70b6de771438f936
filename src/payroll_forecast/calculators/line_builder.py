"""Pay statement line items with cent rounding and deterministic hashing."""

from __future__ import annotations

import hashlib
import json
from decimal import ROUND_HALF_UP, Decimal

from payroll_forecast.calculators.compensation import OVERTIME_MULTIPLIER
from payroll_forecast.calculators.types import (
    ZERO,
    CompensationBreakdown,
    LineCandidate,
    LineType,
)


class LineItemBuilder:
    """Turns a compensation breakdown into statement line items.

    Sign conventions:
    - EARNING: positive
    - TAX (employee): negative
    - DEDUCTION (employee): negative
    - EMPLOYER_TAX: positive (liability, excluded from net)
    - ROUNDING: positive or negative

    Calculators work unrounded; this is where amounts become cents. A
    ROUNDING line is added when the rounded lines drift from rounded net.
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def compute_line_hash(line: LineCandidate) -> str:
        """Deterministic hash over the line's defining fields."""
        json_str = json.dumps(line.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @classmethod
    def earning(
        cls,
        code: str,
        amount: Decimal,
        quantity: Decimal | None = None,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> LineCandidate:
        return LineCandidate(
            line_type=LineType.EARNING,
            code=code,
            amount=cls.round_to_cents(abs(amount)),
            quantity=quantity,
            rate=rate,
            explanation=explanation,
        )

    @classmethod
    def withholding(cls, line_type: LineType, code: str, amount: Decimal, explanation: str) -> LineCandidate:
        return LineCandidate(
            line_type=line_type,
            code=code,
            amount=-cls.round_to_cents(abs(amount)),
            explanation=explanation,
        )

    @classmethod
    def employer_tax(cls, code: str, amount: Decimal, explanation: str) -> LineCandidate:
        return LineCandidate(
            line_type=LineType.EMPLOYER_TAX,
            code=code,
            amount=cls.round_to_cents(abs(amount)),
            explanation=explanation,
        )

    @classmethod
    def build_lines(cls, breakdown: CompensationBreakdown) -> list[LineCandidate]:
        """Statement lines for a breakdown; zero amounts are skipped."""
        lines: list[LineCandidate] = []

        rate = breakdown.hourly_rate
        if breakdown.regular_hours and rate:
            lines.append(
                cls.earning(
                    "REG",
                    breakdown.regular_hours * rate,
                    breakdown.regular_hours,
                    rate,
                    "Regular hours",
                )
            )
        if breakdown.overtime_hours and rate:
            overtime_rate = rate * OVERTIME_MULTIPLIER
            lines.append(
                cls.earning(
                    "OT",
                    breakdown.overtime_hours * overtime_rate,
                    breakdown.overtime_hours,
                    overtime_rate,
                    "Overtime hours",
                )
            )

        earnings = (
            ("SALARY", breakdown.salary_pay, "Salary"),
            ("COMM_SVC", breakdown.service_commission, "Service commission"),
            ("COMM_RETAIL", breakdown.retail_commission, "Retail commission"),
            ("BONUS", breakdown.bonus_pay, "Bonus"),
            ("TIPS", breakdown.tips, "Tips"),
        )
        for code, amount, explanation in earnings:
            if amount:
                lines.append(cls.earning(code, amount, explanation=explanation))

        withholdings = (
            (LineType.TAX, "FED", breakdown.estimated_federal_tax, "Federal income tax (est.)"),
            (LineType.TAX, "STATE", breakdown.estimated_state_tax, "State income tax (est.)"),
            (LineType.TAX, "FICA", breakdown.estimated_fica, "FICA (employee, est.)"),
            (LineType.DEDUCTION, "DEDUCTIONS", breakdown.deductions, "Deductions"),
        )
        for line_type, code, amount, explanation in withholdings:
            if amount:
                lines.append(cls.withholding(line_type, code, amount, explanation))

        employer = (
            ("FICA_ER", breakdown.employer_fica, "FICA (employer, est.)"),
            ("FUTA", breakdown.employer_futa, "FUTA (est.)"),
            ("SUTA", breakdown.employer_suta, "SUTA (est.)"),
        )
        for code, amount, explanation in employer:
            if amount:
                lines.append(cls.employer_tax(code, amount, explanation))

        drift = cls.round_to_cents(breakdown.net_pay) - cls.calculate_net_from_lines(lines)
        if drift:
            lines.append(
                LineCandidate(
                    line_type=LineType.ROUNDING,
                    code="ROUNDING",
                    amount=drift,
                    explanation="Rounding adjustment",
                )
            )

        return lines

    @staticmethod
    def calculate_gross_from_lines(lines: list[LineCandidate]) -> Decimal:
        """Sum of earning lines."""
        return sum((l.amount for l in lines if l.line_type == LineType.EARNING), ZERO)

    @staticmethod
    def calculate_net_from_lines(lines: list[LineCandidate]) -> Decimal:
        """Net pay from lines; employer taxes do not affect net."""
        return sum(
            (l.amount for l in lines if l.line_type != LineType.EMPLOYER_TAX),
            ZERO,
        )

    @staticmethod
    def validate_line_signs(lines: list[LineCandidate]) -> list[str]:
        """Return sign convention violations, if any."""
        errors: list[str] = []
        for line in lines:
            if line.line_type == LineType.EARNING and line.amount < 0:
                errors.append(f"{line.code}: earning must be positive, got {line.amount}")
            elif line.line_type in (LineType.TAX, LineType.DEDUCTION) and line.amount > 0:
                errors.append(f"{line.code}: withholding must be negative, got {line.amount}")
            elif line.line_type == LineType.EMPLOYER_TAX and line.amount < 0:
                errors.append(f"{line.code}: employer tax must be positive, got {line.amount}")
        return errors
