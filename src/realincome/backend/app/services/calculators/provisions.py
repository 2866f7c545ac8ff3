"""Suggested self-funded reserves set aside from the gross contract value."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from realincome.backend.config.schema import RateConfig

_HUNDRED = Decimal("100")


@dataclass(frozen=True, slots=True)
class SuggestedProvisions:
    """Vacation, severance and contractual-risk reserves."""

    vacation: Decimal
    severance: Decimal
    contractual_risk: Decimal

    @property
    def total(self) -> Decimal:
        return self.vacation + self.severance + self.contractual_risk


def calculate_provisions(
    contract_value: Decimal,
    contractual_risk_percent: Decimal,
    rates: RateConfig,
) -> SuggestedProvisions:
    """Return the provisions for ``contract_value``.

    ``contractual_risk_percent`` is a percentage (``10`` means 10%), unlike the
    fractional rates held by ``rates``.
    """

    return SuggestedProvisions(
        vacation=contract_value * rates.vacation_provision_rate,
        severance=contract_value * rates.severance_provision_rate,
        contractual_risk=contract_value * (contractual_risk_percent / _HUNDRED),
    )


__all__ = ["SuggestedProvisions", "calculate_provisions"]
