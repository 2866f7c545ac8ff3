"""Expose translation catalogues to front-end consumers."""

from __future__ import annotations

from flask import Blueprint, jsonify, request

from realincome.backend.app.localization import (
    available_locales,
    load_translations,
    normalise_locale,
)

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/")
def list_translations():
    """List the published locales and the one the client's hints resolve to."""

    hint = request.args.get("locale") or request.accept_languages.best
    return jsonify(
        {
            "locale": normalise_locale(hint),
            "available_locales": list(available_locales()),
        }
    ), 200


@blueprint.get("/<locale>")
def get_locale_translations(locale: str):
    """Return the catalogue for ``locale``, falling back to the base locale."""

    return jsonify(load_translations(locale)), 200
