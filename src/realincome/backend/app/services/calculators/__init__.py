"""Domain-specific calculation helpers."""

from .contributions import (
    MandatoryContributions,
    calculate_base_income,
    calculate_mandatory_contributions,
)
from .provisions import SuggestedProvisions, calculate_provisions
from .utils import format_percentage, round_currency, round_rate

__all__ = [
    "MandatoryContributions",
    "SuggestedProvisions",
    "calculate_base_income",
    "calculate_mandatory_contributions",
    "calculate_provisions",
    "format_percentage",
    "round_currency",
    "round_rate",
]
