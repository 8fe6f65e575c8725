"""
Services Layer for the Dental EDI Codec.
"""

from src.services.edi import (
    EDIService,
    get_edi_service,
    X12837DGenerator,
    X12Parser,
    X12ParseError,
    X12ValidationError,
    parse_x12,
)

__all__ = [
    "EDIService",
    "get_edi_service",
    "X12837DGenerator",
    "X12Parser",
    "X12ParseError",
    "X12ValidationError",
    "parse_x12",
]
