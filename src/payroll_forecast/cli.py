"""Payroll forecast command line interface.

Usage:
    payroll-forecast period --today 2026-01-20 --policy bi_weekly
    payroll-forecast period --schedule schedule.json
    payroll-forecast project --scenario scenario.json
    payroll-forecast project --scenario scenario.json --today 2026-01-24 --format text
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from payroll_forecast.api.schemas import PayScheduleIn, ProjectionRequest
from payroll_forecast.calculators.forecasting import ForecastingEngine, PayrollProjection
from payroll_forecast.calculators.pay_schedule import current_period, next_pay_day
from payroll_forecast.calculators.tier_distribution import (
    aggregate_tier_distribution,
    summarize_commissions,
)
from payroll_forecast.calculators.types import (
    InvalidScheduleConfigError,
    PayScheduleConfig,
    PayScheduleType,
)
from payroll_forecast.config import Settings, get_settings

logger = logging.getLogger(__name__)


def parse_date(s: str) -> date:
    """Parse ISO date string."""
    return date.fromisoformat(s)


class ForecastCli:
    """Payroll forecast command line interface."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="payroll-forecast",
            description="Pay period and payroll projection tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        # period command
        period = subparsers.add_parser(
            "period",
            help="Show the current pay period and next pay day",
        )
        period.add_argument(
            "--today",
            type=parse_date,
            default=None,
            help="Reference date (ISO format, default: today)",
        )
        period.add_argument(
            "--schedule",
            type=Path,
            default=None,
            help="JSON file with pay schedule settings (overrides the flags below)",
        )
        period.add_argument(
            "--policy",
            type=PayScheduleType,
            choices=list(PayScheduleType),
            default=PayScheduleType.SEMI_MONTHLY,
            help="Pay schedule policy",
        )
        period.add_argument("--first-day", type=int, default=1, help="Semi-monthly first pay day")
        period.add_argument("--second-day", type=int, default=15, help="Semi-monthly second pay day")
        period.add_argument(
            "--pay-weekday",
            type=int,
            default=5,
            help="Weekly/bi-weekly pay weekday (0=Sunday .. 6=Saturday)",
        )
        period.add_argument(
            "--anchor",
            type=parse_date,
            default=None,
            help="Bi-weekly anchor date (ISO format)",
        )
        period.add_argument("--monthly-day", type=int, default=1, help="Monthly pay day")
        period.add_argument(
            "--days-until-check",
            type=int,
            default=None,
            help="Days from period end to check date (default: 5)",
        )

        # project command
        project = subparsers.add_parser(
            "project",
            help="Project payroll for a scenario file",
        )
        project.add_argument(
            "--scenario",
            type=Path,
            required=True,
            help="JSON file with roster, schedule, sales_actuals and commission rules",
        )
        project.add_argument(
            "--today",
            type=parse_date,
            default=None,
            help="Override the scenario's reference date",
        )
        project.add_argument(
            "--format",
            choices=["json", "text"],
            default="json",
            help="Output format (default: json)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "period": self._cmd_period,
            "project": self._cmd_project,
        }

        handler = handlers.get(parsed.command)
        if handler:
            return handler(parsed)

        print(f"Unknown command: {parsed.command}", file=sys.stderr)
        return 1

    def _cmd_period(self, args: argparse.Namespace) -> int:
        """Print the current pay period."""
        today = args.today or date.today()
        try:
            config = self._schedule_from_args(args)
        except (OSError, json.JSONDecodeError, ValidationError, InvalidScheduleConfigError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2

        period = current_period(config, today)
        output: dict[str, Any] = period.to_dict()
        output["next_pay_day"] = next_pay_day(config, today).isoformat()
        print(json.dumps(output, indent=2))
        return 0

    @staticmethod
    def _schedule_from_args(args: argparse.Namespace) -> PayScheduleConfig:
        if args.schedule is not None:
            return PayScheduleIn.model_validate_json(args.schedule.read_text()).to_domain()
        return PayScheduleConfig(
            policy=args.policy,
            semi_monthly_first_day=args.first_day,
            semi_monthly_second_day=args.second_day,
            bi_weekly_day_of_week=args.pay_weekday,
            bi_weekly_anchor_date=args.anchor,
            weekly_day_of_week=args.pay_weekday,
            monthly_pay_day=args.monthly_day,
            days_until_check=args.days_until_check,
        )

    def _cmd_project(self, args: argparse.Namespace) -> int:
        """Project payroll for a scenario file."""
        try:
            raw = json.loads(args.scenario.read_text())
        except OSError as e:
            print(f"Error: cannot read {args.scenario}: {e}", file=sys.stderr)
            return 2
        except json.JSONDecodeError as e:
            print(f"Error: {args.scenario} is not valid JSON: {e}", file=sys.stderr)
            return 2
        if not isinstance(raw, dict):
            print(f"Error: {args.scenario} must contain a JSON object", file=sys.stderr)
            return 2

        if args.today is not None:
            raw["today"] = args.today.isoformat()
        raw.setdefault("today", date.today().isoformat())

        try:
            request = ProjectionRequest.model_validate(raw)
            schedule = request.schedule.to_domain() if request.schedule else None
        except (ValidationError, InvalidScheduleConfigError) as e:
            print(f"Error: invalid scenario: {e}", file=sys.stderr)
            return 2

        logger.debug(
            "Loaded scenario %s: %d employees, %d sales rows",
            args.scenario,
            len(request.roster),
            len(request.sales_actuals),
        )
        engine = ForecastingEngine(settings=self.settings or get_settings())
        projection = engine.project(
            roster=[emp.to_domain() for emp in request.roster],
            schedule_config=schedule,
            sales_actuals=[row.to_domain() for row in request.sales_actuals],
            today=request.today,
            commission_rules=request.to_rules(),
        )

        if args.format == "text":
            self._print_summary(projection)
        else:
            output = {
                "projection": projection.to_dict(),
                "tier_distribution": [
                    item.to_dict() for item in aggregate_tier_distribution(projection)
                ],
                "commission_summary": summarize_commissions(projection).to_dict(),
            }
            print(json.dumps(output, indent=2))
        return 0

    @staticmethod
    def _print_summary(projection: PayrollProjection) -> None:
        print(f"Pay period: {projection.period_label} (check {projection.period.check_date})")
        print(
            f"  Day {projection.days_of_data} of {projection.total_days}, "
            f"confidence {projection.confidence_level.value}"
        )
        print(f"  Employees: {len(projection.employees)}")
        print(f"  Gross:       {projection.projected_gross_pay:.2f}")
        print(f"  Commissions: {projection.projected_commissions:.2f}")
        print(f"  Taxes:       {projection.projected_taxes:.2f}")
        print(f"  Net:         {projection.projected_net_pay:.2f}")
        print(f"  vs last:     {projection.vs_last_period:.1f}%")
        for item in aggregate_tier_distribution(projection):
            print(
                f"  {item.tier_label}: {item.headcount} "
                f"({item.override_count} override), revenue {item.total_revenue:.2f}"
            )


def main() -> int:
    """CLI entry point."""
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    cli = ForecastCli(settings=settings)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
