"""Mandatory social-security contributions assessed on the base income."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from realincome.backend.config.schema import RateConfig, RiskClass


@dataclass(frozen=True, slots=True)
class MandatoryContributions:
    """Health, pension and accident-insurance amounts for one contract value."""

    base_income: Decimal
    health: Decimal
    pension: Decimal
    accident_insurance: Decimal

    @property
    def total(self) -> Decimal:
        return self.health + self.pension + self.accident_insurance


def calculate_base_income(contract_value: Decimal, rates: RateConfig) -> Decimal:
    """Return the statutory share of ``contract_value`` used as contribution base."""

    return contract_value * rates.base_income_fraction


def calculate_mandatory_contributions(
    contract_value: Decimal, risk_class: RiskClass, rates: RateConfig
) -> MandatoryContributions:
    """Apply the contribution rates of ``rates`` to the base income."""

    base_income = calculate_base_income(contract_value, rates)
    return MandatoryContributions(
        base_income=base_income,
        health=base_income * rates.health_rate,
        pension=base_income * rates.pension_rate,
        accident_insurance=base_income * rates.rate_for(risk_class),
    )


__all__ = [
    "MandatoryContributions",
    "calculate_base_income",
    "calculate_mandatory_contributions",
]
