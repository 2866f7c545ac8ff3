"""Render calculation results as printable PDF and HTML reports.

Sections always appear in the same order: summary, mandatory contributions,
suggested provisions, negotiation simulation (only when one was requested),
legal notes and disclaimer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, localcontext
from html import escape
from typing import Iterable, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from realincome.backend.config.schema import CurrencyFormat

from .calculation_service import CalculationContext, build_line_items
from .calculators import format_percentage

_HUNDRED = Decimal("100")

SECTION_ORDER: tuple[str, ...] = (
    "summary",
    "contributions",
    "provisions",
    "simulation",
    "legal",
    "disclaimer",
)


@dataclass(frozen=True)
class ReportSection:
    """Heading plus label/value rows and free-text paragraphs."""

    key: str
    heading: str
    rows: Sequence[tuple[str, str]] = field(default_factory=tuple)
    paragraphs: Sequence[str] = field(default_factory=tuple)
    total: tuple[str, str] | None = None


def _group_digits(number: str, currency: CurrencyFormat) -> str:
    return (
        number.replace(",", "\0")
        .replace(".", currency.decimal_separator)
        .replace("\0", currency.thousands_separator)
    )


def _quantize(value: Decimal, decimals: int) -> Decimal:
    """Round ``value`` half-up to ``decimals`` places regardless of its magnitude."""

    value = Decimal(value)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus the kept decimals
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def format_currency(value: Decimal, currency: CurrencyFormat) -> str:
    """Format ``value`` as ``$ 3.200.000`` using the schedule's display rules."""

    quantized = _quantize(value, currency.decimals)
    number = _group_digits(f"{abs(quantized):,.{currency.decimals}f}", currency)
    sign = "-" if quantized < 0 else ""
    return f"{sign}{currency.symbol} {number}"


def format_percent(value: Decimal, currency: CurrencyFormat, *, decimals: int = 1) -> str:
    """Format an already-scaled percentage (``35.1`` -> ``35,1%``)."""

    quantized = _quantize(value, decimals)
    number = _group_digits(f"{quantized:,.{decimals}f}", currency)
    return f"{number}%"


def build_report_sections(context: CalculationContext) -> list[ReportSection]:
    """Assemble the localized report content for ``context``."""

    translator = context.translator
    result = context.result
    schedule = context.schedule
    currency = schedule.currency

    def money(value: Decimal) -> str:
        return format_currency(value, currency)

    def percent(value: Decimal) -> str:
        return format_percent(value, currency)

    sections: list[ReportSection] = [
        ReportSection(
            key="summary",
            heading=translator("report.summary_heading"),
            rows=(
                (translator("summary.contract_value"), money(result.contract_value)),
                (translator("summary.base_income"), money(result.base_income)),
                (translator("summary.total_costs"), money(result.total_costs)),
                (
                    translator("summary.non_disposable_percent"),
                    percent(result.non_disposable_percent),
                ),
                (translator("summary.disposable_percent"), percent(result.disposable_percent)),
            ),
            paragraphs=(
                translator.format(
                    "summary.disposable_note", percent=percent(result.disposable_percent)
                ),
            ),
            total=(translator("summary.net_income"), money(result.net_income)),
        )
    ]

    line_items = build_line_items(context)
    for key, group, total_label, total_value in (
        (
            "contributions",
            "mandatory_contributions",
            "summary.total_social_security",
            result.total_social_security,
        ),
        (
            "provisions",
            "suggested_provisions",
            "summary.total_provisions",
            result.total_provisions,
        ),
    ):
        rows = tuple((item.label, money(item.amount)) for item in line_items if item.group == group)
        badge_key = "groups.mandatory_badge" if key == "contributions" else "groups.suggested_badge"
        sections.append(
            ReportSection(
                key=key,
                heading=f"{translator(f'report.{key}_heading')} ({translator(badge_key)})",
                rows=rows,
                total=(translator(total_label), money(total_value)),
            )
        )

    simulation = context.simulation
    if simulation is not None:
        paragraphs: tuple[str, ...] = ()
        if simulation.is_degenerate:
            paragraphs = (translator("simulation.degenerate"),)
        difference = simulation.difference_from_current_contract_value
        sections.append(
            ReportSection(
                key="simulation",
                heading=translator("report.simulation_heading"),
                rows=(
                    (
                        translator("simulation.desired_net_income"),
                        money(simulation.desired_net_income),
                    ),
                    (
                        translator("simulation.cost_factor"),
                        percent(simulation.cost_factor * _HUNDRED),
                    ),
                    (
                        translator("simulation.difference_from_current_contract_value"),
                        ("+" if difference > 0 else "") + money(difference),
                    ),
                ),
                paragraphs=paragraphs,
                total=(
                    translator("simulation.required_gross_contract_value"),
                    money(simulation.required_gross_contract_value),
                ),
            )
        )

    base_income_percent = format_percentage(schedule.rates.base_income_fraction)
    sections.append(
        ReportSection(
            key="legal",
            heading=translator("report.legal_heading"),
            paragraphs=tuple(
                translator.format(key, base_income_percent=base_income_percent)
                for key in schedule.legal_notes
            ),
        )
    )
    sections.append(
        ReportSection(
            key="disclaimer",
            heading=translator("report.disclaimer_heading"),
            paragraphs=(translator("report.disclaimer"),),
        )
    )
    return sections


def _html_rows(rows: Iterable[tuple[str, str]], *, css_class: str = "") -> str:
    attribute = f' class="{css_class}"' if css_class else ""
    return "\n".join(
        f"<tr{attribute}><th>{escape(label)}</th><td>{escape(value)}</td></tr>"
        for label, value in rows
    )


def render_html(context: CalculationContext) -> str:
    translator = context.translator
    cards: list[str] = []
    for section in build_report_sections(context):
        body = ""
        if section.rows or section.total:
            rows_html = _html_rows(section.rows)
            if section.total:
                rows_html += "\n" + _html_rows([section.total], css_class="total")
            body += f"<table>{rows_html}</table>"
        body += "".join(f"<p>{escape(text)}</p>" for text in section.paragraphs)
        cards.append(
            f'<section class="report-section" id="{section.key}">'
            f"<h2>{escape(section.heading)}</h2>{body}</section>"
        )

    return f"""<!DOCTYPE html>
<html lang="{translator.locale}">
  <head>
    <meta charset="utf-8" />
    <title>{escape(translator('report.title'))}</title>
    <style>
      body {{ font-family: 'Segoe UI', sans-serif; margin: 0; padding: 2rem; color: #0f172a; background: #f8fafc; }}
      h1, h2 {{ margin-top: 0; }}
      table {{ width: 100%; border-collapse: collapse; margin-bottom: 1rem; }}
      th, td {{ padding: 0.5rem; text-align: left; border-bottom: 1px solid #e2e8f0; }}
      td {{ text-align: right; }}
      tr.total th, tr.total td {{ font-weight: 700; }}
      .report-section {{ background: #fff; border: 1px solid #e2e8f0; border-radius: 1rem; padding: 1rem; margin-bottom: 1rem; }}
      footer {{ margin-top: 2rem; font-size: 0.9rem; color: #64748b; }}
    </style>
  </head>
  <body>
    <header>
      <h1>{escape(translator('report.heading'))}</h1>
    </header>
    {''.join(cards)}
    <footer>
      <p>{escape(translator('report.generated_with'))}</p>
    </footer>
  </body>
</html>"""


def _latin1(text: str) -> str:
    # Core PDF fonts only cover Latin-1.
    return text.encode("latin-1", errors="replace").decode("latin-1")


def render_pdf(context: CalculationContext) -> bytes:
    translator = context.translator

    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()
    pdf.set_title(_latin1(translator("report.title")))
    pdf.set_text_color(15, 23, 42)
    pdf.set_draw_color(226, 232, 240)

    pdf.set_font("Helvetica", style="B", size=16)
    pdf.cell(0, 10, _latin1(translator("report.heading")), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    label_width = pdf.epw * 0.65
    for section in build_report_sections(context):
        pdf.ln(4)
        pdf.set_font("Helvetica", style="B", size=12)
        pdf.cell(0, 8, _latin1(section.heading), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        pdf.set_font("Helvetica", size=10)
        for label, value in section.rows:
            pdf.cell(label_width, 6, _latin1(label))
            pdf.cell(0, 6, _latin1(value), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if section.total:
            label, value = section.total
            pdf.set_font("Helvetica", style="B", size=10)
            pdf.cell(label_width, 7, _latin1(label), border="T")
            pdf.cell(
                0, 7, _latin1(value), border="T", align="R",
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
            pdf.set_font("Helvetica", size=10)
        for paragraph in section.paragraphs:
            pdf.multi_cell(pdf.epw, 5, _latin1(paragraph), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    pdf.ln(6)
    pdf.set_font("Helvetica", style="I", size=8)
    pdf.multi_cell(pdf.epw, 5, _latin1(translator("report.generated_with")))

    output = pdf.output()
    if isinstance(output, (bytes, bytearray)):
        return bytes(output)
    return output.encode("latin1")


__all__ = [
    "ReportSection",
    "SECTION_ORDER",
    "build_report_sections",
    "format_currency",
    "format_percent",
    "render_html",
    "render_pdf",
]
