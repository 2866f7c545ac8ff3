"""Tests for response helpers."""

from __future__ import annotations

from flask import Flask

from realincome.backend.services.response_builder import (
    build_calculation_response,
    build_document_response,
)


def test_build_calculation_response_returns_json(app: Flask) -> None:
    payload = {"summary": {"net_income": 2076518.4}}

    with app.app_context():
        response, status = build_calculation_response(payload)

    assert status == 200
    assert response.get_json() == payload


def test_build_document_response_marks_attachments(app: Flask) -> None:
    with app.app_context():
        response = build_document_response(
            b"%PDF-1.3", mimetype="application/pdf", filename="report.pdf"
        )

    assert response.mimetype == "application/pdf"
    assert response.headers["Content-Disposition"] == "attachment; filename=report.pdf"
    assert response.get_data() == b"%PDF-1.3"


def test_build_document_response_inline_without_filename(app: Flask) -> None:
    with app.app_context():
        response = build_document_response("<p>ok</p>", mimetype="text/html")

    assert "Content-Disposition" not in response.headers
    assert response.content_type == "text/html; charset=utf-8"
