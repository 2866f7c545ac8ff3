"""Endpoints exporting a calculation as a printable PDF or HTML report."""

from __future__ import annotations

from flask import Blueprint, Response, request

from realincome.backend.app.services.calculation_service import prepare_calculation
from realincome.backend.app.services.report_service import render_html, render_pdf
from realincome.backend.services import (
    build_document_response,
    parse_calculation_payload,
)

blueprint = Blueprint("reports", __name__, url_prefix="/api/v1/reports")

REPORT_FILENAME = "realincome-report.pdf"


@blueprint.post("/pdf")
def download_report_pdf() -> Response:
    context = prepare_calculation(parse_calculation_payload(request))
    return build_document_response(
        render_pdf(context), mimetype="application/pdf", filename=REPORT_FILENAME
    )


@blueprint.post("/html")
def render_report_html() -> Response:
    context = prepare_calculation(parse_calculation_payload(request))
    return build_document_response(render_html(context), mimetype="text/html")


__all__ = ["REPORT_FILENAME", "blueprint"]
