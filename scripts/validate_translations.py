#!/usr/bin/env python3
"""Validate translation catalogues against each other and the rate schedules."""

from __future__ import annotations

import argparse
import json
import string
import sys
from pathlib import Path

import yaml

REPO_ROOT = Path(__file__).resolve().parents[1]
TRANSLATIONS_DIR = REPO_ROOT / "src" / "realincome" / "translations"
CONFIG_DATA_DIR = REPO_ROOT / "src" / "realincome" / "backend" / "config" / "data"
BASE_LOCALE = "es"
SECTIONS = ("backend", "frontend")


class ValidationError(Exception):
    """Raised when validation detects unrecoverable issues."""


def _load_catalogues() -> dict[str, dict[str, dict[str, str]]]:
    if not TRANSLATIONS_DIR.is_dir():
        raise ValidationError(f"Missing translations directory: {TRANSLATIONS_DIR}")

    catalogues: dict[str, dict[str, dict[str, str]]] = {}
    for path in sorted(TRANSLATIONS_DIR.glob("*.json")):
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValidationError(f"Unexpected payload format in {path}")

        sections = {section: payload.get(section) or {} for section in SECTIONS}
        if not all(isinstance(value, dict) for value in sections.values()):
            raise ValidationError(f"Translation payload must define backend/frontend mappings: {path}")
        catalogues[path.stem] = {
            section: {key: str(value) for key, value in messages.items()}
            for section, messages in sections.items()
        }

    if BASE_LOCALE not in catalogues:
        raise ValidationError(f"Base locale '{BASE_LOCALE}' has no catalogue")
    return catalogues


def _placeholders(message: str) -> frozenset[str]:
    return frozenset(name for _, name, _, _ in string.Formatter().parse(message) if name)


def _missing_keys(catalogues: dict[str, dict[str, dict[str, str]]]) -> list[str]:
    issues: list[str] = []
    base = catalogues[BASE_LOCALE]
    for locale, payload in sorted(catalogues.items()):
        for section in SECTIONS:
            missing = set(base[section]) - set(payload[section])
            extra = set(payload[section]) - set(base[section])
            if missing:
                issues.append(
                    f"Locale '{locale}' missing {len(missing)} {section} keys: {', '.join(sorted(missing))}"
                )
            if extra:
                issues.append(
                    f"Locale '{locale}' defines {section} keys unknown to '{BASE_LOCALE}': "
                    f"{', '.join(sorted(extra))}"
                )
    return issues


def _placeholder_inconsistencies(catalogues: dict[str, dict[str, dict[str, str]]]) -> list[str]:
    issues: list[str] = []
    base = catalogues[BASE_LOCALE]
    for locale, payload in sorted(catalogues.items()):
        if locale == BASE_LOCALE:
            continue
        for section in SECTIONS:
            for key, message in payload[section].items():
                expected = base[section].get(key)
                if expected is None:
                    continue
                if _placeholders(message) != _placeholders(expected):
                    issues.append(f"{locale}:{section}:{key} placeholders differ from {BASE_LOCALE}")
    return issues


def _non_latin1_messages(catalogues: dict[str, dict[str, dict[str, str]]]) -> list[str]:
    """Backend strings feed PDF reports rendered with Latin-1 core fonts."""

    issues: list[str] = []
    for locale, payload in sorted(catalogues.items()):
        for key, message in payload["backend"].items():
            try:
                message.encode("latin-1")
            except UnicodeEncodeError:
                issues.append(f"{locale}:backend:{key} cannot be rendered in PDF reports")
    return issues


def _collect_config_keys() -> set[str]:
    used: set[str] = set()

    def traverse(node: object, key_hint: str | None = None) -> None:
        if isinstance(node, dict):
            for key, value in node.items():
                traverse(value, key_hint=str(key))
        elif isinstance(node, list):
            for item in node:
                traverse(item, key_hint=key_hint)
        elif isinstance(node, str) and key_hint in {"label_key", "legal_notes"}:
            used.add(node)

    for yaml_path in sorted(CONFIG_DATA_DIR.glob("*.yaml")):
        with yaml_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        traverse(data)

        presets = (data.get("contractual_risk") or {}).get("presets") or []
        for preset in presets:
            if isinstance(preset, dict) and "label_key" not in preset and "id" in preset:
                used.add(f"presets.{preset['id']}")
    return used


def _undefined_config_keys(catalogues: dict[str, dict[str, dict[str, str]]]) -> list[str]:
    backend = catalogues[BASE_LOCALE]["backend"]
    return [
        f"Rate schedules reference undefined translation key: {key}"
        for key in sorted(_collect_config_keys())
        if key not in backend
    ]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.parse_args(argv)

    try:
        catalogues = _load_catalogues()
    except ValidationError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1

    issues = [
        *_missing_keys(catalogues),
        *_placeholder_inconsistencies(catalogues),
        *_non_latin1_messages(catalogues),
        *_undefined_config_keys(catalogues),
    ]
    if issues:
        print(f"{len(issues)} translation issue(s) detected:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    print(f"Translations OK for locales: {', '.join(sorted(catalogues))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
