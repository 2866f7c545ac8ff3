"""Integration tests for the translation catalogue endpoints."""

from flask.testing import FlaskClient


def test_translation_index_resolves_accept_language(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/", headers={"Accept-Language": "en-US"})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["locale"] == "en"
    assert payload["available_locales"] == ["en", "es"]


def test_translation_index_defaults_to_base_locale(client: FlaskClient) -> None:
    payload = client.get("/api/v1/translations/").get_json()

    assert payload["locale"] == "es"


def test_locale_catalogue_is_served(client: FlaskClient) -> None:
    response = client.get("/api/v1/translations/en")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["locale"] == "en"
    assert "summary.net_income" in payload["backend"]
    assert payload["fallback"]["locale"] == "es"


def test_unknown_locale_falls_back(client: FlaskClient) -> None:
    payload = client.get("/api/v1/translations/xx").get_json()

    assert payload["locale"] == "es"
