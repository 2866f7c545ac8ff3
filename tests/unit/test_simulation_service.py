"""Unit tests for the negotiation simulator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from realincome.backend.app.localization import get_translator
from realincome.backend.app.models import CalculationResult
from realincome.backend.app.services.calculation_service import compute
from realincome.backend.app.services.simulation_service import (
    build_simulation_summary,
    simulate,
)
from realincome.backend.config.rate_config import RateConfig
from realincome.backend.errors import InvalidInputError


def _current(rates: RateConfig, contract_value=3_200_000, risk_class="I", percent=10):
    return compute(
        {
            "contract_value": contract_value,
            "risk_class": risk_class,
            "contractual_risk_percent": percent,
        },
        rates,
    )


def _result_with_costs(contract_value: str, total_costs: str) -> CalculationResult:
    zero = Decimal("0")
    contract = Decimal(contract_value)
    costs = Decimal(total_costs)
    return CalculationResult(
        contract_value=contract,
        base_income=zero,
        health=zero,
        pension=zero,
        accident_insurance=zero,
        vacation_provision=zero,
        severance_provision=zero,
        contractual_risk_provision=costs,
        total_social_security=zero,
        total_provisions=costs,
        total_costs=costs,
        net_income=contract - costs,
        non_disposable_percent=costs / contract * 100,
    )


def test_simulate_reaches_desired_net_income(rates: RateConfig) -> None:
    current = _current(rates)

    simulation = simulate(2_800_000, current)

    assert simulation.cost_factor == Decimal("0.351088")
    assert simulation.remainder == Decimal("0.648912")
    assert float(simulation.required_gross_contract_value) == pytest.approx(
        2_800_000 / 0.648912
    )
    assert float(simulation.required_gross_contract_value) == pytest.approx(
        4_314_914.8, abs=0.1
    )
    assert simulation.difference_from_current_contract_value == (
        simulation.required_gross_contract_value - current.contract_value
    )
    assert not simulation.is_degenerate


@pytest.mark.parametrize("desired", [1, 1_500_000, 2_076_518.4, 7_000_000])
@pytest.mark.parametrize("risk_class", ["I", "III", "V"])
def test_simulated_gross_round_trips_through_compute(
    rates: RateConfig, desired: float, risk_class: str
) -> None:
    """Feeding the required gross back into the calculator yields the target."""

    current = _current(rates, risk_class=risk_class, percent=15)
    simulation = simulate(desired, current)

    round_trip = _current(
        rates,
        contract_value=simulation.required_gross_contract_value,
        risk_class=risk_class,
        percent=15,
    )

    assert float(round_trip.net_income) == pytest.approx(desired, rel=1e-9)


def test_simulate_matching_current_net_income_needs_no_change(rates: RateConfig) -> None:
    current = _current(rates)

    simulation = simulate(current.net_income, current)

    assert float(simulation.difference_from_current_contract_value) == pytest.approx(
        0, abs=1e-9
    )


def test_simulate_from_empty_contract_uses_zero_cost_factor(rates: RateConfig) -> None:
    current = _current(rates, contract_value=0)

    simulation = simulate(1_000_000, current)

    assert simulation.cost_factor == 0
    assert simulation.required_gross_contract_value == Decimal("1000000")
    assert simulation.difference_from_current_contract_value == Decimal("1000000")


@pytest.mark.parametrize("total_costs", ["100", "120"])
def test_simulate_degenerate_cost_factor_returns_zero(total_costs: str) -> None:
    current = _result_with_costs("100", total_costs)

    simulation = simulate(50, current)

    assert simulation.is_degenerate
    assert simulation.required_gross_contract_value == 0
    assert simulation.difference_from_current_contract_value == Decimal("-100")


def test_simulate_rejects_negative_desired_income(rates: RateConfig) -> None:
    with pytest.raises(InvalidInputError) as exc_info:
        simulate(-1, _current(rates))

    assert "desired_net_income" in str(exc_info.value)


def test_build_simulation_summary_flags_degenerate_results() -> None:
    simulation = simulate(50, _result_with_costs("100", "100"))

    payload = build_simulation_summary(simulation, get_translator("en"))

    assert payload["degenerate"] is True
    assert payload["required_gross_contract_value"] == 0
    assert payload["labels"]["degenerate"]
    assert payload["labels"]["required_gross_contract_value"] != (
        "simulation.required_gross_contract_value"
    )
