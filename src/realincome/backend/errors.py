"""Exception types shared by the configuration layer and the calculation engine."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class InvalidInputError(ValueError):
    """Raised when calculation inputs are out of range or malformed."""


__all__ = ["ConfigurationError", "InvalidInputError"]
