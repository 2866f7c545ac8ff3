"""Expose the realincome version reported by ``/health`` and ``/config/meta``."""

from __future__ import annotations

import re
from functools import lru_cache
from importlib import metadata
from pathlib import Path
from typing import Final

PACKAGE_NAME: Final = "realincome"
PYPROJECT_PATH: Final = Path(__file__).resolve().parents[3] / "pyproject.toml"

_PROJECT_VERSION = re.compile(
    r"^\[project\][ \t]*\n(?:(?!\[)[^\n]*\n)*?version\s*=\s*[\"']([^\"']+)[\"']",
    re.MULTILINE,
)


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """Installed distribution version, or the one declared in a source checkout."""

    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        pass

    try:
        text = PYPROJECT_PATH.read_text(encoding="utf-8")
    except FileNotFoundError as exc:  # pragma: no cover - source checkouts ship it
        raise RuntimeError(f"Unable to locate project metadata at {PYPROJECT_PATH}") from exc

    match = _PROJECT_VERSION.search(text)
    if match is None:
        raise RuntimeError(f"No [project] version declared in {PYPROJECT_PATH}")
    return match.group(1)


__all__ = ["get_project_version"]
