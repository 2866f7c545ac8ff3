"""Calculation, simulation and reporting services."""

from .calculation_service import (
    CalculationContext,
    calculate_income,
    compute,
    prepare_calculation,
    simulate_income,
)
from .report_service import render_html, render_pdf
from .simulation_service import simulate

__all__ = [
    "CalculationContext",
    "calculate_income",
    "compute",
    "prepare_calculation",
    "render_html",
    "render_pdf",
    "simulate",
    "simulate_income",
]
