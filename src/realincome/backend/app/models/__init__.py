"""Typed inputs and results shared across the calculation services.

Inputs are frozen Pydantic models so that range checks live next to the field
declarations; derived results are lightweight frozen dataclasses holding exact
``Decimal`` amounts. Both are transient value objects rebuilt on every call.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from realincome.backend.config.schema import (
    CONTRACTUAL_RISK_MAX,
    CONTRACTUAL_RISK_MIN,
    RiskClass,
)
from realincome.backend.errors import InvalidInputError

from .api import (
    CalculationRequest,
    CalculationResponse,
    DetailEntry,
    ResponseMeta,
    SimulationRequest,
    SimulationResponse,
    SimulationSummary,
    Summary,
    SummaryLabels,
    format_validation_error,
)

__all__ = [
    "CONTRACTUAL_RISK_MAX",
    "CONTRACTUAL_RISK_MIN",
    "CalculationInput",
    "CalculationRequest",
    "CalculationResponse",
    "CalculationResult",
    "DetailEntry",
    "ResponseMeta",
    "SimulationInput",
    "SimulationRequest",
    "SimulationResponse",
    "SimulationResult",
    "SimulationSummary",
    "Summary",
    "SummaryLabels",
    "format_validation_error",
    "validate_input",
]

_HUNDRED = Decimal("100")
_ZERO = Decimal("0")


class CalculationInput(BaseModel):
    """Validated input of the forward calculator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    contract_value: Decimal = Field(..., ge=0)
    risk_class: RiskClass
    contractual_risk_percent: Decimal = Field(
        default=CONTRACTUAL_RISK_MIN, ge=CONTRACTUAL_RISK_MIN, le=CONTRACTUAL_RISK_MAX
    )

    @field_validator("risk_class", mode="before")
    @classmethod
    def _parse_risk_class(cls, value: Any) -> RiskClass:
        return RiskClass.parse(value)

    @property
    def contractual_risk_rate(self) -> Decimal:
        return self.contractual_risk_percent / _HUNDRED


class SimulationInput(BaseModel):
    """Validated input of the negotiation simulator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    desired_net_income: Decimal = Field(..., ge=0)


_ModelT = TypeVar("_ModelT", CalculationInput, SimulationInput)


def validate_input(model: type[_ModelT], data: _ModelT | Mapping[str, Any]) -> _ModelT:
    """Return ``data`` as ``model``, raising ``InvalidInputError`` when invalid."""

    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"{model.__name__} requires a mapping of field values")
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(format_validation_error(exc)) from exc


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """All figures derived from a single forward calculation."""

    contract_value: Decimal
    base_income: Decimal
    health: Decimal
    pension: Decimal
    accident_insurance: Decimal
    vacation_provision: Decimal
    severance_provision: Decimal
    contractual_risk_provision: Decimal
    total_social_security: Decimal
    total_provisions: Decimal
    total_costs: Decimal
    net_income: Decimal
    non_disposable_percent: Decimal

    @property
    def cost_factor(self) -> Decimal:
        """Share of the contract value consumed by costs (0 for empty contracts)."""

        if self.contract_value <= 0:
            return _ZERO
        return self.total_costs / self.contract_value

    @property
    def disposable_percent(self) -> Decimal:
        if self.contract_value <= 0:
            return _ZERO
        return _HUNDRED - self.non_disposable_percent

    def as_dict(self) -> dict[str, Decimal]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Gross contract value needed to reach a desired net income."""

    required_gross_contract_value: Decimal
    difference_from_current_contract_value: Decimal
    desired_net_income: Decimal = _ZERO
    cost_factor: Decimal = _ZERO
    remainder: Decimal = Decimal("1")

    @property
    def is_degenerate(self) -> bool:
        """``True`` when costs consume the whole contract value."""

        return self.remainder <= 0

    def as_dict(self) -> dict[str, Decimal]:
        return asdict(self)
