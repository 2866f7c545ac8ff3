"""Integration tests for the negotiation simulator endpoint."""

from __future__ import annotations

import pytest
from flask.testing import FlaskClient


def test_simulation_returns_required_gross(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/simulations",
        json={
            "contract_value": "$ 3,200,000",
            "risk_class": "I",
            "contractual_risk_percent": 10,
            "desired_net_income": 2_800_000,
            "locale": "en",
        },
    )

    assert response.status_code == 200
    payload = response.get_json()
    simulation = payload["simulation"]
    assert simulation["desired_net_income"] == pytest.approx(2_800_000)
    assert simulation["remainder"] == pytest.approx(0.6489)
    assert simulation["required_gross_contract_value"] == pytest.approx(4_314_914.81, abs=0.05)
    assert simulation["degenerate"] is False
    assert "degenerate" not in simulation["labels"]
    assert payload["meta"]["locale"] == "en"
    assert "summary" not in payload


def test_simulation_from_empty_contract(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/simulations",
        json={"contract_value": 0, "desired_net_income": 1_500_000},
    )

    simulation = response.get_json()["simulation"]
    assert simulation["cost_factor"] == 0
    assert simulation["required_gross_contract_value"] == pytest.approx(1_500_000)
    assert simulation["difference_from_current_contract_value"] == pytest.approx(1_500_000)


def test_simulation_requires_desired_net_income(client: FlaskClient) -> None:
    response = client.post("/api/v1/simulations", json={"contract_value": 3_200_000})

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "invalid_input"
    assert "desired_net_income" in body["message"]


def test_simulation_rejects_negative_target(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/simulations",
        json={"contract_value": 3_200_000, "desired_net_income": -10},
    )

    assert response.status_code == 400
    assert "value cannot be negative" in response.get_json()["message"]
