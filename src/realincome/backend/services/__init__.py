"""HTTP-facing helpers shared by the realincome blueprints."""

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response, build_document_response

__all__ = [
    "build_calculation_response",
    "build_document_response",
    "parse_calculation_payload",
]
