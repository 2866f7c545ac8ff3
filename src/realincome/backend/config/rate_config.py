"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    CalculationDefaults,
    ConfigurationError,
    ContractualRiskConfig,
    ContractualRiskPreset,
    CurrencyFormat,
    RateConfig,
    RateSchedule,
    RateScheduleManifest,
    RateScheduleManifestEntry,
    RiskClass,
    RiskClassInfo,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"
SCHEDULE_ENV = "REALINCOME_RATE_SCHEDULE"

_LOGGER = logging.getLogger(__name__)


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> RateScheduleManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return RateScheduleManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[RateScheduleManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().schedules


def default_schedule_id() -> str:
    """Return the schedule used when callers do not name one explicitly."""

    override = os.getenv(SCHEDULE_ENV, "").strip()
    manifest = load_manifest()
    if override:
        if override in manifest.schedule_ids:
            return override
        _LOGGER.warning("Ignoring unknown schedule in %s: %s", SCHEDULE_ENV, override)
    return manifest.default


@lru_cache(maxsize=8)
def _load_rate_schedule(schedule_id: str) -> RateSchedule:
    try:
        manifest_entry = load_manifest().get_entry(schedule_id)
    except KeyError as exc:
        raise FileNotFoundError(
            f"Rate schedule '{schedule_id}' not declared in manifest"
        ) from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for schedule '{schedule_id}' missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("id", schedule_id)

    try:
        schedule = RateSchedule.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(
            f"Configuration validation failed for schedule '{schedule_id}': {error}"
        ) from error

    if schedule.id != schedule_id:
        raise ConfigurationError(
            f"Schedule id mismatch: expected {schedule_id}, found {schedule.id}"
        )

    _LOGGER.debug("Loaded rate schedule %s from %s", schedule_id, config_file.name)
    return schedule


def load_rate_schedule(schedule_id: str | None = None) -> RateSchedule:
    """Load the named rate schedule (or the default one) from disk."""

    return _load_rate_schedule(schedule_id or default_schedule_id())


def load_rates(schedule_id: str | None = None) -> RateConfig:
    """Shortcut returning only the rate table of a schedule."""

    return load_rate_schedule(schedule_id).rates


def available_schedules() -> Sequence[str]:
    """Return the schedule identifiers declared in the manifest."""

    return load_manifest().schedule_ids


def clear_caches() -> None:
    """Drop cached manifest and schedules so that edits on disk are picked up."""

    _load_rate_schedule.cache_clear()
    load_manifest.cache_clear()


__all__ = [
    "CONFIG_DIRECTORY",
    "CalculationDefaults",
    "ConfigurationError",
    "ContractualRiskConfig",
    "ContractualRiskPreset",
    "CurrencyFormat",
    "MANIFEST_FILE",
    "RateConfig",
    "RateSchedule",
    "RateScheduleManifest",
    "RateScheduleManifestEntry",
    "RiskClass",
    "RiskClassInfo",
    "SCHEDULE_ENV",
    "available_schedules",
    "clear_caches",
    "default_schedule_id",
    "load_manifest",
    "load_rate_schedule",
    "load_rates",
    "manifest_entries",
]
