"""Helpers for normalising incoming calculation requests.

This is the input layer that sits in front of the engine: it turns raw form
values into the numbers the engine expects, clamping the contractual-risk
percentage the same way the interactive form does. The engine itself rejects
out-of-range values instead of clamping them.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from realincome.backend.app.localization import normalise_locale
from realincome.backend.config.rate_config import load_rate_schedule
from realincome.backend.config.schema import ContractualRiskConfig, CurrencyFormat

_AMOUNT_FIELDS = ("contract_value", "desired_net_income")
_AMOUNT_NOISE = re.compile(r"[^\d.,\-]")
_SINGLE_GROUP = re.compile(r"^-?\d{1,3}[.,]\d{3}$")


def clamp_contractual_risk_percent(
    raw: Any, limits: ContractualRiskConfig | None = None
) -> Decimal:
    """Parse ``raw`` as a percentage and clamp it to the allowed range.

    Unparseable input (including NaN) becomes the lower bound, mirroring how the
    form treats an empty or garbled field.
    """

    limits = limits or ContractualRiskConfig()

    if isinstance(raw, bool):
        return limits.minimum
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return limits.minimum
    if math.isnan(value):
        return limits.minimum
    if math.isinf(value):
        return limits.maximum if value > 0 else limits.minimum

    return limits.clamp(Decimal(str(value)))


def _decimal_mark(number: str, currency: CurrencyFormat | None) -> str | None:
    """Return the separator acting as decimal point in ``number``, if any.

    With both ``.`` and ``,`` present the last one is the decimal point. A
    separator repeated several times is grouping. A single separator is
    grouping only when it is the schedule's thousands separator followed by
    exactly three digits (``3.200`` in ``es-CO``, ``3,200`` otherwise).
    """

    marks = [char for char in number if char in ".,"]
    if not marks:
        return None
    if len(set(marks)) == 2:
        return marks[-1]
    if len(marks) > 1:
        return None
    grouping = currency.thousands_separator if currency else ","
    if marks[0] == grouping and _SINGLE_GROUP.match(number):
        return None
    return marks[0]


def clean_amount(raw: Any, currency: CurrencyFormat | None = None) -> Any:
    """Strip currency symbols, spaces and digit grouping from textual amounts.

    ``currency`` supplies the schedule's separators so that amounts typed the
    way reports print them (``$ 3.200.000``) are understood. Non-string values
    are returned untouched; an empty string reads as zero. Strings that are
    still not numeric after cleaning are passed through so the request
    validation reports them.
    """

    if not isinstance(raw, str):
        return raw
    cleaned = _AMOUNT_NOISE.sub("", raw)
    if not cleaned:
        return "0" if not raw.strip() else raw

    decimal_mark = _decimal_mark(cleaned, currency)
    digits = "".join(char for char in cleaned if char not in ".," or char == decimal_mark)
    if decimal_mark is not None:
        digits = digits.replace(decimal_mark, ".")
    return digits


def _resolve_locale(req: Request, payload: dict[str, Any]) -> None:
    """Populate the locale field in ``payload`` based on hints in ``req``."""

    locale = payload.get("locale")
    if isinstance(locale, str) and locale.strip():
        payload["locale"] = normalise_locale(locale)
        return

    locale_param = req.args.get("locale")
    if locale_param:
        payload["locale"] = normalise_locale(locale_param)
        return

    accept_language = req.headers.get("Accept-Language")
    if accept_language:
        primary = accept_language.split(",")[0].split(";")[0].strip()
        if primary:
            payload["locale"] = normalise_locale(primary)


def normalise_form_values(payload: dict[str, Any]) -> dict[str, Any]:
    """Apply the form-level cleaning rules to ``payload`` in place."""

    schedule_id = str(payload.get("schedule") or "").strip().lower()
    schedule = load_rate_schedule(schedule_id or None)

    for field in _AMOUNT_FIELDS:
        if field in payload and payload[field] is not None:
            payload[field] = clean_amount(payload[field], schedule.currency)

    if payload.get("contractual_risk_percent") is not None:
        payload["contractual_risk_percent"] = str(
            clamp_contractual_risk_percent(
                payload["contractual_risk_percent"], schedule.contractual_risk
            )
        )
    return payload


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract, clean and locale-tag a JSON payload from ``req``."""

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    _resolve_locale(req, payload)
    normalise_form_values(payload)

    return payload


__all__ = [
    "clamp_contractual_risk_percent",
    "clean_amount",
    "normalise_form_values",
    "parse_calculation_payload",
]
