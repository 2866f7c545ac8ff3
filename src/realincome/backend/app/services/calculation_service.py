"""Orchestrate request validation, rate lookup and the forward calculation.

``compute`` is the pure engine: it maps a validated ``CalculationInput`` and a
``RateConfig`` to a ``CalculationResult`` of exact ``Decimal`` amounts. The
remaining helpers prepare API requests (schedule defaults, locale, optional
simulation) and shape the JSON payload returned by the routes.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from decimal import Decimal
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from realincome.backend.app.localization import Translator, get_translator
from realincome.backend.app.models import (
    CalculationInput,
    CalculationRequest,
    CalculationResponse,
    CalculationResult,
    SimulationRequest,
    SimulationResponse,
    SimulationResult,
    format_validation_error,
    validate_input,
)
from realincome.backend.config.rate_config import (
    RateConfig,
    RateSchedule,
    load_rate_schedule,
    load_rates,
)
from realincome.backend.errors import InvalidInputError

from .calculators import (
    calculate_mandatory_contributions,
    calculate_provisions,
    format_percentage,
    round_currency,
    round_rate,
)
from .simulation_service import build_simulation_summary, simulate

_LOGGER = logging.getLogger(__name__)

PROFILE_ENV = "REALINCOME_PROFILE_CALCULATIONS"

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv(PROFILE_ENV, "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _zero_result() -> CalculationResult:
    return CalculationResult(
        contract_value=_ZERO,
        base_income=_ZERO,
        health=_ZERO,
        pension=_ZERO,
        accident_insurance=_ZERO,
        vacation_provision=_ZERO,
        severance_provision=_ZERO,
        contractual_risk_provision=_ZERO,
        total_social_security=_ZERO,
        total_provisions=_ZERO,
        total_costs=_ZERO,
        net_income=_ZERO,
        non_disposable_percent=_ZERO,
    )


def compute(
    calculation_input: CalculationInput | Mapping[str, Any],
    rates: RateConfig | None = None,
) -> CalculationResult:
    """Derive contributions, provisions and net income for one contract value.

    ``calculation_input`` may be a mapping of raw values; invalid values raise
    ``InvalidInputError``. ``rates`` defaults to the configured rate schedule.
    """

    validated = validate_input(CalculationInput, calculation_input)
    rate_table = rates if rates is not None else load_rates()

    contract_value = validated.contract_value
    if contract_value == 0:
        return _zero_result()

    contributions = calculate_mandatory_contributions(
        contract_value, validated.risk_class, rate_table
    )
    provisions = calculate_provisions(
        contract_value, validated.contractual_risk_percent, rate_table
    )

    total_social_security = contributions.total
    total_provisions = provisions.total
    total_costs = total_social_security + total_provisions

    return CalculationResult(
        contract_value=contract_value,
        base_income=contributions.base_income,
        health=contributions.health,
        pension=contributions.pension,
        accident_insurance=contributions.accident_insurance,
        vacation_provision=provisions.vacation,
        severance_provision=provisions.severance,
        contractual_risk_provision=provisions.contractual_risk,
        total_social_security=total_social_security,
        total_provisions=total_provisions,
        total_costs=total_costs,
        net_income=contract_value - total_costs,
        non_disposable_percent=(total_costs / contract_value) * _HUNDRED,
    )


@dataclass(frozen=True)
class CalculationContext:
    """Everything derived from one API request, shared by responses and reports."""

    schedule: RateSchedule
    translator: Translator
    calculation_input: CalculationInput
    result: CalculationResult
    simulation: SimulationResult | None = None


def _validate_request(
    payload: Mapping[str, Any] | CalculationRequest,
    model: type[CalculationRequest],
) -> CalculationRequest:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, CalculationRequest):
        payload = payload.model_dump(mode="python", exclude_none=True)
    if not isinstance(payload, Mapping):
        raise InvalidInputError("Payload must be a mapping")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(format_validation_error(exc)) from exc


def prepare_calculation(
    payload: Mapping[str, Any] | CalculationRequest,
    *,
    model: type[CalculationRequest] = CalculationRequest,
) -> CalculationContext:
    """Validate ``payload``, apply schedule defaults and run the calculation."""

    request_model = _validate_request(payload, model)

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    schedule = load_rate_schedule(request_model.schedule)
    defaults = schedule.defaults

    risk_class = request_model.risk_class or defaults.risk_class
    risk_percent = request_model.contractual_risk_percent
    if risk_percent is None:
        risk_percent = defaults.contractual_risk_percent

    calculation_input = validate_input(
        CalculationInput,
        {
            "contract_value": request_model.contract_value,
            "risk_class": risk_class,
            "contractual_risk_percent": risk_percent,
        },
    )

    with _profile_section("compute", timings):
        result = compute(calculation_input, schedule.rates)

    simulation: SimulationResult | None = None
    if request_model.desired_net_income is not None:
        with _profile_section("simulate", timings):
            simulation = simulate(request_model.desired_net_income, result)

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "prepare_calculation timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return CalculationContext(
        schedule=schedule,
        translator=get_translator(request_model.locale),
        calculation_input=calculation_input,
        result=result,
        simulation=simulation,
    )


def build_summary(context: CalculationContext) -> dict[str, Any]:
    result = context.result
    translator = context.translator
    keys = (
        "contract_value",
        "base_income",
        "total_social_security",
        "total_provisions",
        "total_costs",
        "net_income",
    )
    summary: dict[str, Any] = {key: round_currency(getattr(result, key)) for key in keys}
    summary["non_disposable_percent"] = round_rate(result.non_disposable_percent)
    summary["disposable_percent"] = round_rate(result.disposable_percent)
    summary["labels"] = {
        key: translator(f"summary.{key}")
        for key in (*keys, "non_disposable_percent", "disposable_percent")
    }
    return summary


@dataclass(frozen=True, slots=True)
class LineItem:
    """One contribution or provision row with its exact ``Decimal`` amounts."""

    category: str
    group: str
    label: str
    rate: Decimal
    basis: Decimal
    amount: Decimal


def build_line_items(context: CalculationContext) -> list[LineItem]:
    """Return contribution and provision line items in display order."""

    result = context.result
    rates = context.schedule.rates
    translator = context.translator
    risk_class = context.calculation_input.risk_class
    contractual_rate = context.calculation_input.contractual_risk_rate

    rows = (
        ("health", "mandatory_contributions", rates.health_rate, result.base_income, result.health),
        ("pension", "mandatory_contributions", rates.pension_rate, result.base_income, result.pension),
        (
            "accident_insurance",
            "mandatory_contributions",
            rates.rate_for(risk_class),
            result.base_income,
            result.accident_insurance,
        ),
        (
            "vacation",
            "suggested_provisions",
            rates.vacation_provision_rate,
            result.contract_value,
            result.vacation_provision,
        ),
        (
            "severance",
            "suggested_provisions",
            rates.severance_provision_rate,
            result.contract_value,
            result.severance_provision,
        ),
        (
            "contractual_risk",
            "suggested_provisions",
            contractual_rate,
            result.contract_value,
            result.contractual_risk_provision,
        ),
    )

    return [
        LineItem(
            category=category,
            group=group,
            label=translator.format(
                f"details.{category}",
                rate=format_percentage(rate),
                risk_class=risk_class.value,
            ),
            rate=rate,
            basis=basis,
            amount=amount,
        )
        for category, group, rate, basis, amount in rows
    ]


def build_details(context: CalculationContext) -> list[dict[str, Any]]:
    return [
        {
            "category": item.category,
            "group": item.group,
            "label": item.label,
            "rate": float(item.rate),
            "basis": round_currency(item.basis),
            "amount": round_currency(item.amount),
        }
        for item in build_line_items(context)
    ]


def build_meta(context: CalculationContext) -> dict[str, Any]:
    risk_class = context.calculation_input.risk_class
    return {
        "schedule": context.schedule.id,
        "locale": context.translator.locale,
        "currency": context.schedule.currency.code,
        "risk_class": risk_class.value,
        "risk_class_label": context.translator(
            context.schedule.risk_class_label_key(risk_class)
        ),
        "contractual_risk_percent": float(
            context.calculation_input.contractual_risk_percent
        ),
    }


def calculate_income(payload: Mapping[str, Any] | CalculationRequest) -> dict[str, Any]:
    """Compute the full calculation response for the provided payload."""

    context = prepare_calculation(payload)

    response: dict[str, Any] = {
        "summary": build_summary(context),
        "details": build_details(context),
        "meta": build_meta(context),
    }
    if context.simulation is not None:
        response["simulation"] = build_simulation_summary(
            context.simulation, context.translator
        )

    response_model = CalculationResponse.model_validate(response)
    return response_model.model_dump(mode="json", exclude_none=True)


def simulate_income(payload: Mapping[str, Any] | SimulationRequest) -> dict[str, Any]:
    """Compute the simulation response for the provided payload."""

    context = prepare_calculation(payload, model=SimulationRequest)
    if context.simulation is None:
        raise InvalidInputError("Simulation requires a desired net income")

    response_model = SimulationResponse.model_validate(
        {
            "simulation": build_simulation_summary(context.simulation, context.translator),
            "meta": build_meta(context),
        }
    )
    return response_model.model_dump(mode="json")


__all__ = [
    "CalculationContext",
    "LineItem",
    "PROFILE_ENV",
    "build_details",
    "build_line_items",
    "build_meta",
    "build_summary",
    "calculate_income",
    "compute",
    "prepare_calculation",
    "simulate_income",
]
