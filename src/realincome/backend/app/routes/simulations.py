"""REST endpoint for the negotiation simulator."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from realincome.backend.app.services.calculation_service import simulate_income
from realincome.backend.services import (
    build_calculation_response,
    parse_calculation_payload,
)

blueprint = Blueprint("simulations", __name__, url_prefix="/api/v1")


@blueprint.post("/simulations")
def create_simulation() -> tuple[Any, int]:
    """Return the gross contract value needed to reach a desired net income."""

    payload = parse_calculation_payload(request)
    result = simulate_income(payload)

    return build_calculation_response(result)
