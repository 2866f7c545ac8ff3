"""Negotiation simulator: invert the forward calculation for a target net income.

Every cost term of the forward calculation is the contract value multiplied by a
fixed rate, so the cost factor ``total_costs / contract_value`` does not depend
on the contract value. Dividing the desired net income by ``1 - cost_factor``
therefore recovers the gross amount exactly.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from realincome.backend.app.localization import Translator
from realincome.backend.app.models import (
    CalculationResult,
    SimulationInput,
    SimulationResult,
    validate_input,
)

from .calculators import round_currency, round_rate

_LOGGER = logging.getLogger(__name__)

_ZERO = Decimal("0")
_ONE = Decimal("1")


def simulate(
    desired_net_income: Decimal | int | float | str | SimulationInput,
    current_result: CalculationResult,
) -> SimulationResult:
    """Return the gross contract value needed to take home ``desired_net_income``."""

    if isinstance(desired_net_income, SimulationInput):
        simulation_input = desired_net_income
    else:
        simulation_input = validate_input(
            SimulationInput, {"desired_net_income": desired_net_income}
        )
    desired = simulation_input.desired_net_income

    cost_factor = current_result.cost_factor
    remainder = _ONE - cost_factor

    if remainder > 0:
        required = desired / remainder
    else:
        _LOGGER.warning(
            "Costs consume %s of the contract value; simulation yields zero",
            cost_factor,
        )
        required = _ZERO

    return SimulationResult(
        required_gross_contract_value=required,
        difference_from_current_contract_value=required - current_result.contract_value,
        desired_net_income=desired,
        cost_factor=cost_factor,
        remainder=remainder,
    )


def build_simulation_summary(
    simulation: SimulationResult, translator: Translator
) -> dict[str, Any]:
    """Serialise ``simulation`` with localized labels for API and report consumers."""

    labels: Mapping[str, str] = {
        key: translator(f"simulation.{key}")
        for key in (
            "desired_net_income",
            "cost_factor",
            "required_gross_contract_value",
            "difference_from_current_contract_value",
        )
    }
    payload: dict[str, Any] = {
        "desired_net_income": round_currency(simulation.desired_net_income),
        "cost_factor": round_rate(simulation.cost_factor),
        "remainder": round_rate(simulation.remainder),
        "required_gross_contract_value": round_currency(
            simulation.required_gross_contract_value
        ),
        "difference_from_current_contract_value": round_currency(
            simulation.difference_from_current_contract_value
        ),
        "degenerate": simulation.is_degenerate,
        "labels": dict(labels),
    }
    if simulation.is_degenerate:
        payload["labels"]["degenerate"] = translator("simulation.degenerate")
    return payload


__all__ = ["build_simulation_summary", "simulate"]
