"""Expose rate schedule metadata consumed by the decoupled front-end.

Forms use these endpoints to populate risk classes, contractual-risk presets
and default values without duplicating the statutory rates client side.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from flask import Blueprint, jsonify, request

from realincome.backend.app.http import ProblemResponse, not_found
from realincome.backend.app.localization import Translator, get_translator
from realincome.backend.app.services.calculators import format_percentage
from realincome.backend.config.rate_config import (
    RateSchedule,
    available_schedules,
    default_schedule_id,
    load_rate_schedule,
)
from realincome.backend.config.schema import RiskClass
from realincome.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


@dataclass(frozen=True)
class ScheduleRouteContext:
    """Schedule and translator resolved from the request's query string."""

    locale: str
    translator: Translator
    schedule: RateSchedule


def _build_schedule_context(
    schedule_hint: str | None, locale_hint: str | None
) -> ScheduleRouteContext | ProblemResponse:
    schedule_id = schedule_hint.strip().lower() if schedule_hint else None
    try:
        schedule = load_rate_schedule(schedule_id or None)
    except FileNotFoundError as exc:
        return not_found(str(exc))

    translator = get_translator(locale_hint)
    return ScheduleRouteContext(
        locale=translator.locale, translator=translator, schedule=schedule
    )


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    return {
        "version": get_project_version(),
        "schedules": list(available_schedules()),
        "default_schedule": default_schedule_id(),
    }


def _number(value: Decimal) -> float:
    return float(value)


def _serialise_schedule(context: ScheduleRouteContext) -> dict[str, Any]:
    schedule = context.schedule
    translator = context.translator
    rates = schedule.rates
    limits = schedule.contractual_risk
    defaults = schedule.defaults

    risk_classes = [
        {
            "id": risk_class.value,
            "level": risk_class.level,
            "label": translator(schedule.risk_class_label_key(risk_class)),
            "rate": _number(rates.rate_for(risk_class)),
        }
        for risk_class in RiskClass
    ]
    presets = [
        {
            "id": preset.id,
            "percent": _number(preset.percent),
            "label": translator(preset.resolved_label_key),
        }
        for preset in limits.presets
    ]

    return {
        "schedule": schedule.id,
        "jurisdiction": schedule.jurisdiction,
        "locale": context.locale,
        "currency": schedule.currency.model_dump(mode="json"),
        "rates": {
            "base_income_fraction": _number(rates.base_income_fraction),
            "health_rate": _number(rates.health_rate),
            "pension_rate": _number(rates.pension_rate),
            "vacation_provision_rate": _number(rates.vacation_provision_rate),
            "severance_provision_rate": _number(rates.severance_provision_rate),
        },
        "risk_classes": risk_classes,
        "contractual_risk": {
            "minimum": _number(limits.minimum),
            "maximum": _number(limits.maximum),
            "presets": presets,
        },
        "defaults": {
            "contract_value": _number(defaults.contract_value),
            "risk_class": defaults.risk_class.value,
            "contractual_risk_percent": _number(defaults.contractual_risk_percent),
        },
        "legal_notes": [
            translator.format(
                key, base_income_percent=format_percentage(rates.base_income_fraction)
            )
            for key in schedule.legal_notes
        ],
        "meta": dict(schedule.meta),
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/rates")
def get_rates() -> tuple[Any, int]:
    """Return the rate table, risk classes and form defaults of a schedule."""

    context = _build_schedule_context(
        request.args.get("schedule"), request.args.get("locale")
    )
    if isinstance(context, ProblemResponse):
        return context.to_response()

    return jsonify(_serialise_schedule(context)), 200


__all__ = ["blueprint", "get_configuration_metadata"]
