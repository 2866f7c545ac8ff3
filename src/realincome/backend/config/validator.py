"""Utilities for validating rate schedules and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from decimal import Decimal
from typing import Sequence

from .rate_config import (
    ContractualRiskConfig,
    RateConfig,
    RateSchedule,
    RiskClass,
    available_schedules,
    load_rate_schedule,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rates(rates: RateConfig) -> list[str]:
    errors: list[str] = []

    for label, value in {
        "base_income_fraction": rates.base_income_fraction,
        "health_rate": rates.health_rate,
        "pension_rate": rates.pension_rate,
        "vacation_provision_rate": rates.vacation_provision_rate,
        "severance_provision_rate": rates.severance_provision_rate,
    }.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope("rates", f"{label} {value} must be between 0 and 1")
            )

    if rates.base_income_fraction == 0:
        errors.append(
            _format_scope("rates", "base_income_fraction must be greater than zero")
        )

    previous: Decimal | None = None
    for risk_class in RiskClass:
        rate = rates.accident_insurance.get(risk_class)
        if rate is None:
            errors.append(
                _format_scope(
                    "rates.accident_insurance",
                    f"risk class {risk_class.value} has no rate",
                )
            )
            continue
        if previous is not None and rate < previous:
            errors.append(
                _format_scope(
                    "rates.accident_insurance",
                    f"rate for class {risk_class.value} is lower than the previous class",
                )
            )
        previous = rate

    return errors


def _validate_contractual_risk(config: ContractualRiskConfig) -> list[str]:
    errors: list[str] = []

    ids = [preset.id for preset in config.presets]
    duplicates = [value for value, count in Counter(ids).items() if count > 1]
    if duplicates:
        errors.append(
            _format_scope(
                "contractual_risk.presets",
                f"duplicate preset identifiers detected: {sorted(duplicates)}",
            )
        )

    for preset in config.presets:
        if preset.percent < config.minimum or preset.percent > config.maximum:
            errors.append(
                _format_scope(
                    f"contractual_risk.presets.{preset.id}",
                    (
                        f"percent {preset.percent} lies outside "
                        f"[{config.minimum}, {config.maximum}]"
                    ),
                )
            )

    percents = [preset.percent for preset in config.presets]
    if percents != sorted(percents):
        errors.append(
            _format_scope("contractual_risk.presets", "presets should be sorted by percent")
        )

    return errors


def _validate_defaults(schedule: RateSchedule) -> list[str]:
    errors: list[str] = []
    defaults = schedule.defaults
    limits = schedule.contractual_risk

    if not limits.minimum <= defaults.contractual_risk_percent <= limits.maximum:
        errors.append(
            _format_scope(
                "defaults",
                (
                    f"contractual_risk_percent {defaults.contractual_risk_percent} "
                    "lies outside the allowed range"
                ),
            )
        )
    return errors


def _validate_cost_ratio(schedule: RateSchedule) -> list[str]:
    """Flag schedules whose worst case consumes the whole contract value."""

    errors: list[str] = []
    rates = schedule.rates
    ceiling = schedule.contractual_risk.maximum
    for risk_class in RiskClass:
        if risk_class not in rates.accident_insurance:
            continue
        ratio = rates.cost_ratio(risk_class, ceiling)
        if ratio >= 1:
            errors.append(
                _format_scope(
                    "rates",
                    (
                        f"class {risk_class.value} at {ceiling}% contractual risk "
                        f"consumes {ratio * 100}% of the contract value"
                    ),
                )
            )
    return errors


def _validate_risk_class_metadata(schedule: RateSchedule) -> list[str]:
    described = {info.risk_class for info in schedule.risk_classes}
    missing = [member.value for member in RiskClass if member not in described]
    if not missing:
        return []
    return [
        _format_scope(
            "risk_classes",
            f"no description provided for classes: {', '.join(missing)}",
        )
    ]


def validate_rate_schedule(schedule: RateSchedule) -> list[str]:
    """Return a list of validation issues for the provided schedule."""

    errors: list[str] = []

    errors.extend(_validate_rates(schedule.rates))
    errors.extend(_validate_contractual_risk(schedule.contractual_risk))
    errors.extend(_validate_defaults(schedule))
    errors.extend(_validate_cost_ratio(schedule))
    errors.extend(_validate_risk_class_metadata(schedule))

    return errors


def validate_all_schedules(schedule_ids: Sequence[str] | None = None) -> dict[str, list[str]]:
    """Validate all configured schedules and return issues keyed by schedule id."""

    targets = schedule_ids or available_schedules()
    results: dict[str, list[str]] = {}

    for schedule_id in targets:
        schedule = load_rate_schedule(schedule_id)
        results[schedule_id] = validate_rate_schedule(schedule)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate configured rate schedules and report issues."
    )
    parser.add_argument(
        "schedules",
        nargs="*",
        help="Specific schedule identifiers to validate (defaults to all)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    schedule_ids = args.schedules or available_schedules()

    if not schedule_ids:
        parser.print_help()
        return 1

    exit_code = 0

    for schedule_id in schedule_ids:
        try:
            schedule = load_rate_schedule(schedule_id)
        except FileNotFoundError as error:
            print(f"[{schedule_id}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_rate_schedule(schedule)
        if issues:
            exit_code = 1
            print(f"[{schedule_id}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{schedule_id}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
