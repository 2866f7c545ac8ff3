"""Unit tests for the PDF and HTML report renderers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from realincome.backend.app.services.calculation_service import prepare_calculation
from realincome.backend.app.services.report_service import (
    SECTION_ORDER,
    build_report_sections,
    format_currency,
    format_percent,
    render_html,
    render_pdf,
)
from realincome.backend.config.schema import CurrencyFormat

COP = CurrencyFormat(code="COP", symbol="$")

BASE_PAYLOAD = {
    "contract_value": 3_200_000,
    "risk_class": "I",
    "contractual_risk_percent": 10,
}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (Decimal("3200000"), "$ 3.200.000"),
        (Decimal("6681.6"), "$ 6.682"),
        (Decimal("0"), "$ 0"),
        (Decimal("999.5"), "$ 1.000"),
        (Decimal("-1114914.81"), "-$ 1.114.915"),
    ],
)
def test_format_currency_uses_schedule_grouping(value: Decimal, expected: str) -> None:
    assert format_currency(value, COP) == expected


def test_format_currency_honours_decimals() -> None:
    euro_style = CurrencyFormat(code="USD", symbol="US$", decimals=2)

    assert format_currency(Decimal("1234.5"), euro_style) == "US$ 1.234,50"


def test_format_percent_rounds_to_one_decimal() -> None:
    assert format_percent(Decimal("35.1088"), COP) == "35,1%"
    assert format_percent(Decimal("64.8912"), COP) == "64,9%"


def test_sections_follow_fixed_order_without_simulation() -> None:
    context = prepare_calculation(BASE_PAYLOAD)

    keys = [section.key for section in build_report_sections(context)]

    assert keys == [key for key in SECTION_ORDER if key != "simulation"]


def test_sections_include_simulation_when_requested() -> None:
    context = prepare_calculation({**BASE_PAYLOAD, "desired_net_income": 2_800_000})

    sections = build_report_sections(context)

    assert [section.key for section in sections] == list(SECTION_ORDER)
    simulation = next(section for section in sections if section.key == "simulation")
    assert simulation.total == ("Valor bruto requerido", "$ 4.314.915")


def test_summary_section_reports_net_income_and_disposable_share() -> None:
    context = prepare_calculation(BASE_PAYLOAD)

    summary = build_report_sections(context)[0]

    assert summary.total == ("Ingreso neto real estimado", "$ 2.076.518")
    assert ("Disponible real", "64,9%") in summary.rows
    assert "64,9%" in summary.paragraphs[0]


def test_legal_notes_substitute_base_income_share() -> None:
    context = prepare_calculation({**BASE_PAYLOAD, "locale": "en"})

    legal = next(s for s in build_report_sections(context) if s.key == "legal")

    assert len(legal.paragraphs) == 3
    assert "40%" in legal.paragraphs[0]
    assert "{" not in " ".join(legal.paragraphs)


def test_render_html_orders_sections_and_escapes_text() -> None:
    context = prepare_calculation({**BASE_PAYLOAD, "desired_net_income": 2_800_000})

    html = render_html(context)

    positions = [html.index(f'id="{key}"') for key in SECTION_ORDER]
    assert positions == sorted(positions)
    assert html.startswith("<!DOCTYPE html>")
    assert '<html lang="es">' in html
    assert "$ 3.200.000" in html
    assert "Cesantías + Int. (9.33%)" in html


def test_render_html_omits_simulation_section_when_not_requested() -> None:
    html = render_html(prepare_calculation(BASE_PAYLOAD))

    assert 'id="simulation"' not in html


def test_render_pdf_produces_pdf_document() -> None:
    context = prepare_calculation({**BASE_PAYLOAD, "desired_net_income": 2_800_000})

    pdf_bytes = render_pdf(context)

    assert isinstance(pdf_bytes, bytes)
    assert pdf_bytes.startswith(b"%PDF")
    assert pdf_bytes.rstrip().endswith(b"%%EOF")


def test_render_pdf_handles_empty_contract() -> None:
    context = prepare_calculation(
        {"contract_value": 0, "risk_class": "V", "desired_net_income": 1_000_000, "locale": "en"}
    )

    assert render_pdf(context).startswith(b"%PDF")


def test_format_currency_handles_amounts_beyond_default_precision() -> None:
    huge = Decimal("1" + "0" * 28)

    assert format_currency(huge, COP) == "$ 10.000.000.000.000.000.000.000.000.000"
    assert format_percent(huge, COP).endswith(",0%")


def test_render_html_accepts_very_large_contract_value() -> None:
    context = prepare_calculation({**BASE_PAYLOAD, "contract_value": "1" + "0" * 28})

    assert "$ 10.000.000.000.000.000.000.000.000.000" in render_html(context)


def test_line_items_are_rounded_from_exact_amounts() -> None:
    context = prepare_calculation(
        {"contract_value": "1049.51", "risk_class": "I", "contractual_risk_percent": 1}
    )
    assert context.result.contractual_risk_provision == Decimal("10.4951")

    provisions = next(s for s in build_report_sections(context) if s.key == "provisions")

    assert provisions.rows[-1][1] == "$ 10"
