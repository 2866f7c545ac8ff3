"""Integration tests for the report export endpoints."""

from __future__ import annotations

from flask.testing import FlaskClient

PAYLOAD = {
    "contract_value": 3_200_000,
    "risk_class": "I",
    "contractual_risk_percent": 10,
    "desired_net_income": 2_800_000,
}


def test_pdf_report_is_downloadable(client: FlaskClient) -> None:
    response = client.post("/api/v1/reports/pdf", json=PAYLOAD)

    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.headers["Content-Disposition"] == (
        "attachment; filename=realincome-report.pdf"
    )
    assert response.data.startswith(b"%PDF")


def test_html_report_renders_inline(client: FlaskClient) -> None:
    response = client.post("/api/v1/reports/html", json={**PAYLOAD, "locale": "en"})

    assert response.status_code == 200
    assert response.mimetype == "text/html"
    assert "Content-Disposition" not in response.headers
    html = response.get_data(as_text=True)
    assert '<html lang="en">' in html
    assert 'id="simulation"' in html
    assert "$ 4.314.915" in html


def test_report_rejects_invalid_payload(client: FlaskClient) -> None:
    response = client.post("/api/v1/reports/pdf", json={"contract_value": -1})

    assert response.status_code == 400
    assert response.get_json()["error"] == "invalid_input"


def test_html_report_handles_very_large_contract_value(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/reports/html",
        json={"contract_value": "1" + "0" * 28, "risk_class": "I"},
    )

    assert response.status_code == 200
    assert "$ 10.000.000.000.000.000.000.000.000.000" in response.get_data(as_text=True)
