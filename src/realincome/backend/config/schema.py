"""Pydantic models describing the rate schedule configuration schema."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)

from realincome.backend.errors import ConfigurationError, InvalidInputError

_ONE = Decimal("1")
_HUNDRED = Decimal("100")

CONTRACTUAL_RISK_MIN = Decimal("0")
CONTRACTUAL_RISK_MAX = Decimal("20")


class RiskClass(str, Enum):
    """Statutory hazard categories that determine the accident-insurance rate."""

    I = "I"
    II = "II"
    III = "III"
    IV = "IV"
    V = "V"

    @property
    def level(self) -> int:
        """Return the ordinal level (1 for class I up to 5 for class V)."""

        return list(RiskClass).index(self) + 1

    @classmethod
    def parse(cls, value: Any) -> RiskClass:
        """Return the risk class named by ``value`` or raise ``InvalidInputError``."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalised = value.strip().upper()
            for member in cls:
                if member.value == normalised:
                    return member
        raise InvalidInputError(f"Undefined risk class: {value!r}")


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _ensure_fraction(name: str, value: Decimal) -> None:
    if value < 0 or value > _ONE:
        raise ConfigurationError(f"Rate '{name}' must be a fraction between 0 and 1")


class RateConfig(ImmutableModel):
    """Statutory rates applied by the forward calculator.

    Contribution rates apply to the base income (``base_income_fraction`` of the
    contract value); provision rates apply to the full contract value.
    """

    base_income_fraction: Decimal
    health_rate: Decimal
    pension_rate: Decimal
    accident_insurance: Mapping[RiskClass, Decimal]
    vacation_provision_rate: Decimal
    severance_provision_rate: Decimal

    @field_validator("accident_insurance", mode="before")
    @classmethod
    def _coerce_risk_class_keys(cls, value: Any) -> Mapping[RiskClass, Any]:
        if not isinstance(value, Mapping):
            raise ConfigurationError("Accident insurance rates must be a mapping by risk class")
        table: dict[RiskClass, Any] = {}
        for key, rate in value.items():
            try:
                risk_class = RiskClass.parse(key)
            except InvalidInputError as exc:
                raise ConfigurationError(
                    f"Accident insurance table declares an unknown risk class: {key!r}"
                ) from exc
            table[risk_class] = rate
        return table

    @model_validator(mode="after")
    def _validate_rates(self) -> RateConfig:
        for name in (
            "base_income_fraction",
            "health_rate",
            "pension_rate",
            "vacation_provision_rate",
            "severance_provision_rate",
        ):
            _ensure_fraction(name, getattr(self, name))

        missing = [member.value for member in RiskClass if member not in self.accident_insurance]
        if missing:
            raise ConfigurationError(
                f"Accident insurance rates missing for risk classes: {', '.join(missing)}"
            )
        for risk_class, rate in self.accident_insurance.items():
            _ensure_fraction(f"accident_insurance.{risk_class.value}", rate)
        return self

    def rate_for(self, risk_class: RiskClass | str) -> Decimal:
        """Return the accident-insurance rate for ``risk_class``."""

        return self.accident_insurance[RiskClass.parse(risk_class)]

    def contribution_rate(self, risk_class: RiskClass | str) -> Decimal:
        """Combined mandatory contribution rate expressed over the contract value."""

        return self.base_income_fraction * (
            self.health_rate + self.pension_rate + self.rate_for(risk_class)
        )

    def cost_ratio(
        self, risk_class: RiskClass | str, contractual_risk_percent: Decimal
    ) -> Decimal:
        """Fraction of the contract value consumed by contributions and provisions."""

        return (
            self.contribution_rate(risk_class)
            + self.vacation_provision_rate
            + self.severance_provision_rate
            + Decimal(contractual_risk_percent) / _HUNDRED
        )


class CurrencyFormat(ImmutableModel):
    """Display settings for monetary amounts of a schedule."""

    code: str
    symbol: str
    decimals: int = Field(default=0, ge=0, le=4)
    thousands_separator: str = "."
    decimal_separator: str = ","

    @model_validator(mode="after")
    def _validate_separators(self) -> CurrencyFormat:
        if self.thousands_separator == self.decimal_separator:
            raise ConfigurationError("Thousands and decimal separators must differ")
        return self


class ContractualRiskPreset(ImmutableModel):
    """Suggested contractual-risk percentage offered as a quick pick."""

    id: str
    percent: Decimal
    label_key: str | None = None

    @computed_field
    @property
    def resolved_label_key(self) -> str:
        return self.label_key or f"presets.{self.id}"


class ContractualRiskConfig(ImmutableModel):
    """Bounds and presets for the contractual-risk reserve."""

    minimum: Decimal = CONTRACTUAL_RISK_MIN
    maximum: Decimal = CONTRACTUAL_RISK_MAX
    presets: Sequence[ContractualRiskPreset] = Field(default_factory=tuple)

    @model_validator(mode="after")
    def _validate_bounds(self) -> ContractualRiskConfig:
        if self.minimum < CONTRACTUAL_RISK_MIN or self.maximum > CONTRACTUAL_RISK_MAX:
            raise ConfigurationError(
                "Contractual risk bounds must lie within "
                f"[{CONTRACTUAL_RISK_MIN}, {CONTRACTUAL_RISK_MAX}]"
            )
        if self.maximum <= self.minimum:
            raise ConfigurationError("Contractual risk maximum must exceed the minimum")
        return self

    def clamp(self, percent: Decimal) -> Decimal:
        if percent < self.minimum:
            return self.minimum
        if percent > self.maximum:
            return self.maximum
        return percent


class RiskClassInfo(ImmutableModel):
    """Descriptive metadata for a risk class shown next to its rate."""

    risk_class: RiskClass = Field(alias="class")
    label_key: str

    @field_validator("risk_class", mode="before")
    @classmethod
    def _parse_risk_class(cls, value: Any) -> RiskClass:
        try:
            return RiskClass.parse(value)
        except InvalidInputError as exc:
            raise ConfigurationError(str(exc)) from exc


class CalculationDefaults(ImmutableModel):
    """Initial form values suggested to interactive clients."""

    contract_value: Decimal = Field(default=Decimal("0"), ge=0)
    risk_class: RiskClass = RiskClass.I
    contractual_risk_percent: Decimal = Decimal("0")

    @field_validator("risk_class", mode="before")
    @classmethod
    def _parse_risk_class(cls, value: Any) -> RiskClass:
        try:
            return RiskClass.parse(value)
        except InvalidInputError as exc:
            raise ConfigurationError(str(exc)) from exc


class RateSchedule(ImmutableModel):
    """Complete configuration for one jurisdiction's contractor regime."""

    id: str
    jurisdiction: str
    currency: CurrencyFormat
    rates: RateConfig
    contractual_risk: ContractualRiskConfig = Field(default_factory=ContractualRiskConfig)
    defaults: CalculationDefaults = Field(default_factory=CalculationDefaults)
    risk_classes: Sequence[RiskClassInfo] = Field(default_factory=tuple)
    legal_notes: Sequence[str] = Field(default_factory=tuple)
    meta: Mapping[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_schedule(self) -> RateSchedule:
        seen: set[RiskClass] = set()
        for info in self.risk_classes:
            if info.risk_class in seen:
                raise ConfigurationError(
                    f"Risk class {info.risk_class.value} described more than once"
                )
            seen.add(info.risk_class)
        return self

    def risk_class_label_key(self, risk_class: RiskClass) -> str:
        for info in self.risk_classes:
            if info.risk_class is risk_class:
                return info.label_key
        return f"risk_classes.{risk_class.value}"


class RateScheduleManifestEntry(ImmutableModel):
    """Entry describing an available rate schedule in the manifest."""

    id: str
    filename: str | None = None
    status: str = "active"

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.id}.yaml"


class RateScheduleManifest(ImmutableModel):
    """Manifest describing the available rate schedule files."""

    default: str
    schedules: Sequence[RateScheduleManifestEntry]

    @model_validator(mode="after")
    def _validate_schedules(self) -> RateScheduleManifest:
        seen: set[str] = set()
        for entry in self.schedules:
            if entry.id in seen:
                raise ConfigurationError(
                    f"Duplicate schedule {entry.id} declared in the configuration manifest"
                )
            seen.add(entry.id)
        if self.default not in seen:
            raise ConfigurationError(
                f"Default schedule '{self.default}' is not declared in the manifest"
            )
        return self

    def get_entry(self, schedule_id: str) -> RateScheduleManifestEntry:
        for entry in self.schedules:
            if entry.id == schedule_id:
                return entry
        raise KeyError(schedule_id)

    @computed_field
    @property
    def schedule_ids(self) -> tuple[str, ...]:
        return tuple(sorted(entry.id for entry in self.schedules))


__all__ = [
    "CONTRACTUAL_RISK_MAX",
    "CONTRACTUAL_RISK_MIN",
    "CalculationDefaults",
    "ConfigurationError",
    "ContractualRiskConfig",
    "ContractualRiskPreset",
    "CurrencyFormat",
    "ImmutableModel",
    "RateConfig",
    "RateSchedule",
    "RateScheduleManifest",
    "RateScheduleManifestEntry",
    "RiskClass",
    "RiskClassInfo",
    "ValidationError",
]
