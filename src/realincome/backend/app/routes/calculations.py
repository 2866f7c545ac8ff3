"""REST endpoint for forward take-home income calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from realincome.backend.app.services.calculation_service import calculate_income
from realincome.backend.services import (
    build_calculation_response,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Compute contributions, provisions and net income for the submitted contract."""

    payload = parse_calculation_payload(request)
    result = calculate_income(payload)

    return build_calculation_response(result)
