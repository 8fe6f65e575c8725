"""
Pydantic Schemas for EDI Processing.

Provides request/response models for X12 EDI operations:
- 837D claim generation
- Inbound interchange tokenization
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core.enums import EDITransactionStatus, OutputFormat, ViolationSeverity
from src.services.edi.edi_service import EDI837DResult
from src.services.edi.x12_837d_generator import (
    ClaimDto,
    ClaimLine,
    ProviderAddress,
    ProviderInfo,
    SubmitterInfo,
)
from src.services.edi.x12_base import X12Document, X12Segment


# =============================================================================
# 837D Request Schemas
# =============================================================================


class ClaimLineSchema(BaseModel):
    """Service line on a dental claim."""

    line_number: int = Field(..., ge=0, description="LX assigned number")
    cdt_code: str = Field(..., min_length=1, max_length=10, description="CDT procedure code")
    charge: Decimal = Field(..., ge=0, description="Line charge amount")
    tooth_number: Optional[str] = Field(None, max_length=10)
    surface: Optional[str] = Field(None, max_length=10)
    description: Optional[str] = None


class ClaimSchema(BaseModel):
    """Dental claim to submit."""

    claim_id: str = Field(..., min_length=1, max_length=38, description="Patient control number")
    payer_id: str = Field(..., min_length=1, max_length=80)
    payer_name: Optional[str] = Field(None, max_length=60)
    subscriber_id: str = Field(..., min_length=1, max_length=80)
    group_number: Optional[str] = Field(None, max_length=50)
    service_date: date
    total_charge: Decimal = Field(..., ge=0)
    lines: list[ClaimLineSchema] = Field(default_factory=list)


class ProviderAddressSchema(BaseModel):
    """Billing provider street address."""

    line1: str = Field(default="", max_length=55)
    city: str = Field(default="", max_length=30)
    state: str = Field(default="", max_length=2)
    zip_code: str = Field(default="", max_length=15)


class ProviderSchema(BaseModel):
    """Billing dentist."""

    first_name: str = Field(default="", max_length=35)
    last_name: str = Field(..., min_length=1, max_length=60)
    npi: str = Field(
        ...,
        min_length=10,
        max_length=10,
        pattern=r"^\d{10}$",
        description="National Provider Identifier (10 digits)",
    )
    tax_id: str = Field(..., min_length=1, max_length=20, description="Tax ID")
    address: ProviderAddressSchema = Field(default_factory=ProviderAddressSchema)


class SubmitterSchema(BaseModel):
    """Submitting organization."""

    organization_name: str = Field(..., min_length=1, max_length=60)
    etin: str = Field(..., min_length=1, max_length=15, description="Electronic Transmitter ID")
    contact_name: str = Field(default="", max_length=60)
    contact_phone: str = Field(default="", max_length=20)


class EDI837DGenerateRequest(BaseModel):
    """Request to generate an 837D interchange."""

    claim: ClaimSchema
    provider: ProviderSchema
    submitter: SubmitterSchema

    def to_domain(self) -> tuple[ClaimDto, ProviderInfo, SubmitterInfo]:
        """Convert to the generator's input objects."""
        claim = ClaimDto(
            claim_id=self.claim.claim_id,
            payer_id=self.claim.payer_id,
            payer_name=self.claim.payer_name,
            subscriber_id=self.claim.subscriber_id,
            group_number=self.claim.group_number,
            service_date=self.claim.service_date,
            total_charge=self.claim.total_charge,
            lines=[ClaimLine(**line.model_dump()) for line in self.claim.lines],
        )
        provider = ProviderInfo(
            first_name=self.provider.first_name,
            last_name=self.provider.last_name,
            npi=self.provider.npi,
            tax_id=self.provider.tax_id,
            address=ProviderAddress(**self.provider.address.model_dump()),
        )
        submitter = SubmitterInfo(**self.submitter.model_dump())
        return claim, provider, submitter


# =============================================================================
# 837D Response Schemas
# =============================================================================


class FieldViolationResponse(BaseModel):
    """One validation finding."""

    model_config = ConfigDict(from_attributes=True)

    field: str
    message: str
    severity: ViolationSeverity


class EDI837DGenerateResponse(BaseModel):
    """Result of 837D generation."""

    transaction_id: str = Field(..., description="Unique transaction identifier")
    claim_id: str = Field(..., description="Source claim ID")
    status: EDITransactionStatus = Field(..., description="Generation status")
    control_number: str = Field(default="", description="ISA control number")
    segment_count: int = Field(default=0, description="SE01 segment count")
    content: str = Field(default="", description="Generated X12 837D content")
    output_format: OutputFormat = OutputFormat.WIRE
    violations: list[FieldViolationResponse] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_result(
        cls,
        result: EDI837DResult,
        output_format: OutputFormat = OutputFormat.WIRE,
    ) -> "EDI837DGenerateResponse":
        content = result.display_content if output_format == OutputFormat.DISPLAY else result.content
        return cls(
            transaction_id=result.transaction_id,
            claim_id=result.claim_id,
            status=result.status,
            control_number=result.control_number,
            segment_count=result.segment_count,
            content=content,
            output_format=output_format,
            violations=[FieldViolationResponse.model_validate(v) for v in result.violations],
            created_at=result.created_at,
        )


# =============================================================================
# Tokenizer Response Schemas
# =============================================================================


class X12SegmentResponse(BaseModel):
    """Tokenized segment."""

    position: int
    segment_id: str
    elements: list[str] = Field(default_factory=list)

    @classmethod
    def from_segment(cls, segment: X12Segment) -> "X12SegmentResponse":
        return cls(
            position=segment.position,
            segment_id=segment.segment_id,
            elements=list(segment.elements),
        )


class X12DocumentResponse(BaseModel):
    """Tokenized interchange."""

    control_number: Optional[str] = None
    transaction_set_ids: list[str] = Field(default_factory=list)
    element_separator: str
    segment_terminator: str
    sub_element_separator: Optional[str] = None
    segment_count: int
    segments: list[X12SegmentResponse] = Field(default_factory=list)

    @classmethod
    def from_document(cls, document: X12Document) -> "X12DocumentResponse":
        return cls(
            control_number=document.interchange_control_number,
            transaction_set_ids=document.transaction_set_ids,
            element_separator=document.element_separator,
            segment_terminator=document.segment_terminator,
            sub_element_separator=document.sub_element_separator,
            segment_count=len(document),
            segments=[X12SegmentResponse.from_segment(s) for s in document.segments],
        )


__all__ = [
    "ClaimLineSchema",
    "ClaimSchema",
    "ProviderAddressSchema",
    "ProviderSchema",
    "SubmitterSchema",
    "EDI837DGenerateRequest",
    "FieldViolationResponse",
    "EDI837DGenerateResponse",
    "X12SegmentResponse",
    "X12DocumentResponse",
]
