from decimal import Decimal

import pytest

from realincome.backend.config.rate_config import load_rate_schedule
from realincome.backend.config.schema import ContractualRiskPreset, RiskClass
from realincome.backend.config.validator import (
    main,
    validate_all_schedules,
    validate_rate_schedule,
)


def test_current_schedules_are_valid() -> None:
    results = validate_all_schedules()
    assert results
    assert all(not issues for issues in results.values()), results


def test_validator_flags_descending_accident_rates() -> None:
    schedule = load_rate_schedule("co")
    table = dict(schedule.rates.accident_insurance)
    table[RiskClass.IV] = Decimal("0.001")
    broken = schedule.model_copy(
        update={"rates": schedule.rates.model_copy(update={"accident_insurance": table})}
    )

    errors = validate_rate_schedule(broken)

    assert any("rates.accident_insurance" in error and "IV" in error for error in errors)


def test_validator_flags_presets_outside_bounds_and_unsorted() -> None:
    schedule = load_rate_schedule("co")
    presets = (
        ContractualRiskPreset(id="high", percent=Decimal("25")),
        ContractualRiskPreset(id="low", percent=Decimal("5")),
        ContractualRiskPreset(id="low", percent=Decimal("6")),
    )
    broken = schedule.model_copy(
        update={
            "contractual_risk": schedule.contractual_risk.model_copy(
                update={"presets": presets}
            )
        }
    )

    errors = validate_rate_schedule(broken)

    assert any("contractual_risk.presets.high" in error for error in errors)
    assert any("duplicate preset" in error for error in errors)
    assert any("sorted" in error for error in errors)


def test_validator_flags_default_percent_outside_range() -> None:
    schedule = load_rate_schedule("co")
    broken = schedule.model_copy(
        update={
            "defaults": schedule.defaults.model_copy(
                update={"contractual_risk_percent": Decimal("35")}
            )
        }
    )

    errors = validate_rate_schedule(broken)

    assert any(error.startswith("defaults:") for error in errors)


def test_validator_flags_costs_consuming_the_contract() -> None:
    schedule = load_rate_schedule("co")
    broken = schedule.model_copy(
        update={
            "rates": schedule.rates.model_copy(
                update={"severance_provision_rate": Decimal("0.9")}
            )
        }
    )

    errors = validate_rate_schedule(broken)

    assert any("consumes" in error for error in errors)


def test_validator_flags_undescribed_risk_classes() -> None:
    schedule = load_rate_schedule("co")
    broken = schedule.model_copy(update={"risk_classes": schedule.risk_classes[:3]})

    errors = validate_rate_schedule(broken)

    assert any("IV, V" in error for error in errors)


def test_main_reports_success(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["co"]) == 0
    assert "[co] OK" in capsys.readouterr().out


def test_main_reports_unknown_schedule(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["atlantis"]) == 1
    assert "failed to load configuration" in capsys.readouterr().out
