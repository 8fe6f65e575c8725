"""
Pydantic Schemas for the Dental EDI Codec.

This module exports the request/response schemas for EDI operations.
"""

from src.schemas.edi import (
    ClaimLineSchema,
    ClaimSchema,
    ProviderAddressSchema,
    ProviderSchema,
    SubmitterSchema,
    EDI837DGenerateRequest,
    FieldViolationResponse,
    EDI837DGenerateResponse,
    X12SegmentResponse,
    X12DocumentResponse,
)

__all__ = [
    # 837D Requests
    "ClaimLineSchema",
    "ClaimSchema",
    "ProviderAddressSchema",
    "ProviderSchema",
    "SubmitterSchema",
    "EDI837DGenerateRequest",
    # 837D Responses
    "FieldViolationResponse",
    "EDI837DGenerateResponse",
    # Tokenizer
    "X12SegmentResponse",
    "X12DocumentResponse",
]
