"""
X12 EDI Services for Dental Claims.

Provides X12 EDI integration:
- Generic interchange tokenizer (inbound 271/277/835/999)
- 837D dental claim generation (outbound)
- Pre-generation claim validation
"""

from src.services.edi.x12_base import (
    X12Delimiters,
    X12Segment,
    X12Document,
    X12Envelope,
    X12FunctionalGroup,
    X12Parser,
    X12ValidationError,
    X12ParseError,
    parse_x12,
)
from src.services.edi.control_numbers import (
    ControlNumberSource,
    ClockControlNumberSource,
    SequenceControlNumberSource,
    get_control_number_source,
)
from src.services.edi.segment_builder import X12InterchangeBuilder
from src.services.edi.x12_837d_generator import (
    X12837DGenerator,
    ClaimDto,
    ClaimLine,
    ProviderAddress,
    ProviderInfo,
    SubmitterInfo,
)
from src.services.edi.claim_validation import (
    ClaimValidationResult,
    FieldViolation,
    validate_claim_submission,
)
from src.services.edi.edi_service import (
    EDIService,
    EDI837DResult,
    EDIParseResult,
    get_edi_service,
)

__all__ = [
    # Base
    "X12Delimiters",
    "X12Segment",
    "X12Document",
    "X12Envelope",
    "X12FunctionalGroup",
    "X12Parser",
    "X12ValidationError",
    "X12ParseError",
    "parse_x12",
    # Control numbers
    "ControlNumberSource",
    "ClockControlNumberSource",
    "SequenceControlNumberSource",
    "get_control_number_source",
    # Builder
    "X12InterchangeBuilder",
    # 837D Generator
    "X12837DGenerator",
    "ClaimDto",
    "ClaimLine",
    "ProviderAddress",
    "ProviderInfo",
    "SubmitterInfo",
    # Validation
    "ClaimValidationResult",
    "FieldViolation",
    "validate_claim_submission",
    # EDI Service
    "EDIService",
    "EDI837DResult",
    "EDIParseResult",
    "get_edi_service",
]
