"""Pydantic models describing the public API surface."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from realincome.backend.config.schema import (
    CONTRACTUAL_RISK_MAX,
    CONTRACTUAL_RISK_MIN,
    RiskClass,
)

__all__ = [
    "CalculationRequest",
    "SimulationRequest",
    "SummaryLabels",
    "Summary",
    "DetailEntry",
    "SimulationSummary",
    "ResponseMeta",
    "CalculationResponse",
    "SimulationResponse",
    "format_validation_error",
]


class CalculationRequest(BaseModel):
    """Payload accepted by the calculation and report endpoints.

    Omitted ``risk_class`` and ``contractual_risk_percent`` values are filled in
    from the rate schedule defaults by the calculation service.
    """

    model_config = ConfigDict(extra="forbid")

    schedule: str | None = None
    locale: str = Field(default="es")
    contract_value: Decimal = Field(..., ge=0)
    risk_class: RiskClass | None = None
    contractual_risk_percent: Decimal | None = Field(
        default=None, ge=CONTRACTUAL_RISK_MIN, le=CONTRACTUAL_RISK_MAX
    )
    desired_net_income: Decimal | None = Field(default=None, ge=0)

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        if value is None:
            return "es"
        text = str(value).strip()
        return text or "es"

    @field_validator("schedule", mode="before")
    @classmethod
    def _normalise_schedule(cls, value: Any) -> str | None:
        if value is None:
            return None
        text = str(value).strip().lower()
        return text or None

    @field_validator("risk_class", mode="before")
    @classmethod
    def _parse_risk_class(cls, value: Any) -> RiskClass | None:
        if value is None:
            return None
        return RiskClass.parse(value)


class SimulationRequest(CalculationRequest):
    """Payload accepted by the negotiation simulator endpoint."""

    desired_net_income: Decimal = Field(..., ge=0)


class SummaryLabels(BaseModel):
    """Localized labels for summary fields."""

    model_config = ConfigDict(extra="forbid")

    contract_value: str
    base_income: str
    total_social_security: str
    total_provisions: str
    total_costs: str
    net_income: str
    non_disposable_percent: str
    disposable_percent: str


class Summary(BaseModel):
    """Aggregated calculation results."""

    model_config = ConfigDict(extra="forbid")

    contract_value: float
    base_income: float
    total_social_security: float
    total_provisions: float
    total_costs: float
    net_income: float
    non_disposable_percent: float
    disposable_percent: float
    labels: SummaryLabels


class DetailEntry(BaseModel):
    """Single contribution or provision line item."""

    model_config = ConfigDict(extra="forbid")

    category: str
    group: str
    label: str
    rate: float
    basis: float
    amount: float


class SimulationSummary(BaseModel):
    """Negotiation simulator output."""

    model_config = ConfigDict(extra="forbid")

    desired_net_income: float
    cost_factor: float
    remainder: float
    required_gross_contract_value: float
    difference_from_current_contract_value: float
    degenerate: bool
    labels: dict[str, str]


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    schedule: str
    locale: str
    currency: str
    risk_class: str
    risk_class_label: str
    contractual_risk_percent: float


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: Summary
    details: list[DetailEntry]
    simulation: SimulationSummary | None = None
    meta: ResponseMeta


class SimulationResponse(BaseModel):
    """Response payload produced by the simulation endpoint."""

    model_config = ConfigDict(extra="forbid")

    simulation: SimulationSummary
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
