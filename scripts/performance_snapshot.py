#!/usr/bin/env python3
"""Collect baseline timings for calculations, simulations and report rendering."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, Callable

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from realincome.backend.app.services.calculation_service import (  # noqa: E402
    calculate_income,
    prepare_calculation,
    simulate_income,
)
from realincome.backend.app.services.report_service import render_html, render_pdf  # noqa: E402

SAMPLE_PAYLOAD = {
    "locale": "es",
    "contract_value": 5_000_000,
    "risk_class": "III",
    "contractual_risk_percent": 10,
    "desired_net_income": 4_000_000,
}


def _measure(operation: Callable[[], Any], iterations: int) -> dict[str, float]:
    operation()  # Warm caches
    start = perf_counter()
    for _ in range(iterations):
        operation()
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("REALINCOME_PROFILE_ITERATIONS", "75"))
    payload = dict(SAMPLE_PAYLOAD)
    context = prepare_calculation(payload)

    report = {
        "calculation": _measure(lambda: calculate_income(payload), iterations),
        "simulation": _measure(lambda: simulate_income(payload), iterations),
        "report_html": _measure(lambda: render_html(context), iterations),
        "report_pdf": _measure(lambda: render_pdf(context), max(1, iterations // 5)),
        "report_pdf_bytes": len(render_pdf(context)),
    }
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
