"""Utilities for serialising calculation responses."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Tuple

from flask import Response, jsonify

ResponseTuple = Tuple[Any, int]


def build_calculation_response(payload: Mapping[str, Any]) -> ResponseTuple:
    """Return a Flask JSON response for the calculation ``payload``."""

    return jsonify(payload), 200


def build_document_response(
    body: bytes | str, *, mimetype: str, filename: str | None = None
) -> Response:
    """Wrap a rendered report, marking it as a download when ``filename`` is set."""

    response = Response(body, mimetype=mimetype)
    if filename:
        response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response


__all__ = ["build_calculation_response", "build_document_response"]
