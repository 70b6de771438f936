"""Tests for commission rate resolution."""

from datetime import date
from decimal import Decimal

from payroll_forecast.calculators.commission_resolver import (
    CommissionResolver,
    resolve_commission,
)
from payroll_forecast.calculators.types import (
    CommissionOverride,
    CommissionRules,
    CommissionSourceKind,
    EmployeeLevelAssignment,
    StylistLevel,
)

AS_OF = date(2026, 1, 20)


class TestLevelResolution:
    """Rates taken from the assigned level."""

    def test_level_rates_apply(self, levels):
        resolver = CommissionResolver([], {"emp-1": "senior"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("200"), AS_OF)

        assert resolved.service_rate == Decimal("0.40")
        assert resolved.retail_rate == Decimal("0.10")
        assert resolved.service_commission == Decimal("400")
        assert resolved.retail_commission == Decimal("20")
        assert resolved.total_commission == Decimal("420")
        assert resolved.source.kind == CommissionSourceKind.LEVEL
        assert resolved.source.tier_slug == "senior"
        assert resolved.source_label == "Level: Senior Stylist"

    def test_level_without_rates_is_unassigned(self):
        level = StylistLevel(slug="apprentice", label="Apprentice")
        resolver = CommissionResolver([], {"emp-1": "apprentice"}, [level])

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("200"), AS_OF)

        assert resolved.source.kind == CommissionSourceKind.UNASSIGNED
        assert resolved.total_commission == Decimal("0")

    def test_unknown_level_slug_is_unassigned(self, levels):
        resolver = CommissionResolver([], {"emp-1": "master"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("0"), AS_OF)

        assert resolved.source.kind == CommissionSourceKind.UNASSIGNED
        assert resolved.service_rate == Decimal("0")
        assert resolver.find_level("emp-1") is None

    def test_no_assignment(self, levels):
        resolved = CommissionResolver([], {}, levels).resolve(
            "emp-1", Decimal("500"), Decimal("50"), AS_OF
        )

        assert resolved.source.kind == CommissionSourceKind.UNASSIGNED
        assert resolved.source_label == "Unassigned"
        assert resolved.service_commission == Decimal("0")
        assert resolved.retail_commission == Decimal("0")

    def test_missing_revenue_counts_as_zero(self, levels):
        resolved = CommissionResolver([], {"emp-1": "senior"}, levels).resolve(
            "emp-1", None, None, AS_OF
        )

        assert resolved.total_commission == Decimal("0")
        assert resolved.source.kind == CommissionSourceKind.LEVEL


class TestOverrideResolution:
    """Per-employee overrides take priority over levels."""

    def test_override_beats_level(self, levels):
        override = CommissionOverride(
            employee_id="emp-1",
            service_rate=Decimal("0.50"),
            retail_rate=Decimal("0.20"),
            reason="Top performer",
        )
        resolver = CommissionResolver([override], {"emp-1": "junior"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("100"), AS_OF)

        assert resolved.service_rate == Decimal("0.50")
        assert resolved.service_commission == Decimal("500")
        assert resolved.retail_commission == Decimal("20")
        assert resolved.source.kind == CommissionSourceKind.OVERRIDE
        assert resolved.source.tier_slug == "junior"
        assert resolved.source_label == "Override: Top performer"

    def test_partial_override_zeroes_unset_side(self, levels):
        override = CommissionOverride(employee_id="emp-1", service_rate=Decimal("0.50"))
        resolver = CommissionResolver([override], {"emp-1": "senior"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("100"), AS_OF)

        assert resolved.service_rate == Decimal("0.50")
        assert resolved.retail_rate == Decimal("0")
        assert resolved.retail_commission == Decimal("0")
        assert resolved.source_label == "Override"

    def test_partial_override_can_inherit_level_side(self, levels):
        override = CommissionOverride(employee_id="emp-1", service_rate=Decimal("0.50"))
        resolver = CommissionResolver(
            [override], {"emp-1": "senior"}, levels, inherit_level_rates=True
        )

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("100"), AS_OF)

        assert resolved.service_rate == Decimal("0.50")
        assert resolved.retail_rate == Decimal("0.10")
        assert resolved.source.kind == CommissionSourceKind.OVERRIDE

    def test_expired_override_falls_through(self, levels):
        expired = CommissionOverride(
            employee_id="emp-1",
            service_rate=Decimal("0.60"),
            expires_at=AS_OF,
        )
        resolver = CommissionResolver([expired], {"emp-1": "senior"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("1000"), Decimal("0"), AS_OF)

        assert resolved.source.kind == CommissionSourceKind.LEVEL
        assert resolved.service_rate == Decimal("0.40")

    def test_override_effective_until_expiry(self, levels):
        override = CommissionOverride(
            employee_id="emp-1",
            service_rate=Decimal("0.60"),
            expires_at=date(2026, 1, 21),
        )
        resolver = CommissionResolver([override], {"emp-1": "senior"}, levels)

        assert resolver.find_override("emp-1", AS_OF) is override
        assert resolver.find_override("emp-1", date(2026, 1, 21)) is None

    def test_inactive_override_ignored(self, levels):
        inactive = CommissionOverride(
            employee_id="emp-1", service_rate=Decimal("0.60"), is_active=False
        )
        resolver = CommissionResolver([inactive], {"emp-1": "senior"}, levels)

        assert resolver.resolve("emp-1", Decimal("1"), Decimal("1"), AS_OF).source.kind == (
            CommissionSourceKind.LEVEL
        )

    def test_override_without_rates_ignored(self, levels):
        empty = CommissionOverride(employee_id="emp-1", reason="Pending review")
        resolver = CommissionResolver([empty], {"emp-1": "senior"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("100"), Decimal("0"), AS_OF)

        assert resolved.source.kind == CommissionSourceKind.LEVEL

    def test_first_matching_override_wins(self, levels):
        first = CommissionOverride(employee_id="emp-1", service_rate=Decimal("0.45"))
        second = CommissionOverride(employee_id="emp-1", service_rate=Decimal("0.55"))
        resolver = CommissionResolver([first, second], {"emp-1": "senior"}, levels)

        resolved = resolver.resolve("emp-1", Decimal("100"), Decimal("0"), AS_OF)

        assert resolved.service_rate == Decimal("0.45")

    def test_override_for_unassigned_employee(self, promo_override, levels):
        resolver = CommissionResolver([promo_override], {}, levels)

        resolved = resolver.resolve("emp-c", Decimal("200"), Decimal("0"), AS_OF)

        assert resolved.source.kind == CommissionSourceKind.OVERRIDE
        assert resolved.source.tier_slug is None
        assert resolved.service_commission == Decimal("100")


class TestResolveCommissionFunction:
    """Module-level helper and alternate input shapes."""

    def test_accepts_assignment_records(self, levels):
        assignments = [
            EmployeeLevelAssignment(employee_id="emp-1", level_slug="junior"),
            EmployeeLevelAssignment(employee_id="emp-2", level_slug=None),
        ]

        resolved = resolve_commission(
            "emp-1", Decimal("1000"), Decimal("100"), [], assignments, levels, AS_OF
        )
        unassigned = resolve_commission(
            "emp-2", Decimal("1000"), Decimal("100"), [], assignments, levels, AS_OF
        )

        assert resolved.service_commission == Decimal("300")
        assert resolved.retail_commission == Decimal("5")
        assert unassigned.source.kind == CommissionSourceKind.UNASSIGNED

    def test_from_rules(self, flat_rate_rules):
        resolver = CommissionResolver.from_rules(flat_rate_rules)

        resolved = resolver.resolve("emp-b", Decimal("2000"), Decimal("0"), AS_OF)

        assert resolved.service_commission == Decimal("200")
        assert flat_rate_rules.level_for("emp-b").slug == "flat"
        assert flat_rate_rules.level_for("emp-x") is None

    def test_rules_from_assignment_records(self, levels):
        rules = CommissionRules.from_assignments(
            [], [EmployeeLevelAssignment("emp-1", "senior")], levels
        )

        assert rules.level_assignments == {"emp-1": "senior"}

    def test_to_dict_carries_typed_source(self, levels):
        resolved = resolve_commission(
            "emp-1", Decimal("100"), Decimal("0"), [], {"emp-1": "senior"}, levels, AS_OF
        )

        data = resolved.to_dict()
        assert data["source"] == "level"
        assert data["tier_slug"] == "senior"
        assert data["service_commission"] == "40.00"
