"""
EDI Service - Orchestrates X12 EDI processing.

Provides the operations the claim submission workflow calls:
- Validate and generate outbound 837D claims
- Tokenize inbound acknowledgments/responses (271/277/835/999)
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import List, Optional
from uuid import uuid4
import logging

from src.config.environment import AppConfig, get_config
from src.core.enums import (
    ControlNumberStrategy,
    EDIDirection,
    EDITransactionStatus,
    OutputFormat,
    ViolationSeverity,
)
from src.services.edi.claim_validation import (
    FieldViolation,
    validate_claim_submission,
)
from src.services.edi.control_numbers import (
    ControlNumberSource,
    SequenceControlNumberSource,
    get_control_number_source,
)
from src.services.edi.x12_837d_generator import (
    ClaimDto,
    ProviderInfo,
    SubmitterInfo,
    X12837DGenerator,
)
from src.services.edi.x12_base import (
    X12Document,
    X12Envelope,
    X12Parser,
    X12ParseError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Result Models
# =============================================================================


@dataclass
class EDI837DResult:
    """Result of 837D generation: a payload, or the reasons there is none."""

    transaction_id: str
    claim_id: str
    status: EDITransactionStatus
    content: str = ""  # Terminator-only, for transmission
    display_content: str = ""  # One segment per line
    control_number: str = ""
    segment_count: int = 0
    violations: List[FieldViolation] = field(default_factory=list)
    direction: EDIDirection = EDIDirection.OUTBOUND
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def succeeded(self) -> bool:
        return self.status == EDITransactionStatus.COMPLETED

    @property
    def errors(self) -> List[str]:
        return [str(v) for v in self.violations if v.severity == ViolationSeverity.ERROR]

    @property
    def warnings(self) -> List[str]:
        return [str(v) for v in self.violations if v.severity == ViolationSeverity.WARNING]


@dataclass
class EDIParseResult:
    """Result of tokenizing an inbound interchange."""

    transaction_id: str
    status: EDITransactionStatus
    document: Optional[X12Document] = None
    envelope: Optional[X12Envelope] = None
    control_number: str = ""
    transaction_set_ids: List[str] = field(default_factory=list)
    segment_count: int = 0
    errors: List[str] = field(default_factory=list)
    direction: EDIDirection = EDIDirection.INBOUND

    @property
    def succeeded(self) -> bool:
        return self.status == EDITransactionStatus.COMPLETED


# =============================================================================
# Service
# =============================================================================


class EDIService:
    """
    EDI Service for X12 dental claim processing.

    Usage:
        service = EDIService()
        result = service.generate_837d(claim, provider, submitter)
        if result.succeeded:
            transport.upload(result.content)

        ack = service.parse_inbound(raw_999)
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        control_numbers: Optional[ControlNumberSource] = None,
        generator: Optional[X12837DGenerator] = None,
        parser: Optional[X12Parser] = None,
    ):
        """
        Initialize EDI service.

        Args:
            config: Application configuration (defaults to get_config())
            control_numbers: Control number source; overrides the configured strategy
            generator: Preconfigured 837D generator
            parser: X12 tokenizer
        """
        self.config = config or get_config()
        self.delimiters = self.config.delimiters.to_delimiters()
        self.generator = generator or X12837DGenerator(
            delimiters=self.delimiters,
            control_numbers=control_numbers or self._control_number_source(),
            output_format=self.config.interchange.output_format,
            receiver_id=self.config.interchange.receiver_id,
            usage_indicator=self.config.interchange.usage_indicator,
        )
        self.parser = parser or X12Parser()

    def _control_number_source(self) -> ControlNumberSource:
        interchange = self.config.interchange
        if interchange.control_number_strategy == ControlNumberStrategy.SEQUENCE:
            return SequenceControlNumberSource(start=interchange.control_number_start)
        return get_control_number_source()

    def generate_837d(
        self,
        claim: ClaimDto,
        provider: ProviderInfo,
        submitter: SubmitterInfo,
    ) -> EDI837DResult:
        """
        Validate a claim and generate its 837D interchange.

        Args:
            claim: Claim to submit
            provider: Billing provider
            submitter: Submitting organization

        Returns:
            EDI837DResult; COMPLETED with content, or REJECTED with violations
        """
        transaction_id = str(uuid4())
        claim_id = claim.claim_id if claim is not None else ""
        violations: List[FieldViolation] = []

        if self.config.interchange.validate_before_generate:
            validation = validate_claim_submission(claim, provider, submitter, self.delimiters)
            violations = validation.violations
            if not validation.is_valid:
                logger.warning(
                    "Rejected 837D for claim %s: %d validation errors",
                    claim_id,
                    len(validation.errors),
                )
                return EDI837DResult(
                    transaction_id=transaction_id,
                    claim_id=claim_id,
                    status=EDITransactionStatus.REJECTED,
                    violations=violations,
                )

        try:
            builder = self.generator.build(claim, provider, submitter)
        except Exception:
            logger.exception("Error generating 837D for claim %s", claim_id)
            raise

        control_number = builder.control_number

        return EDI837DResult(
            transaction_id=transaction_id,
            claim_id=claim_id,
            status=EDITransactionStatus.COMPLETED,
            content=builder.render(OutputFormat.WIRE.line_separator),
            display_content=builder.render(OutputFormat.DISPLAY.line_separator),
            control_number=control_number,
            segment_count=builder.transaction_segment_counts[0],
            violations=violations,
        )

    def parse_inbound(self, content: str) -> EDIParseResult:
        """
        Tokenize an inbound interchange.

        A malformed interchange is reported as FAILED and never retried;
        the payload should be quarantined for an operator.

        Args:
            content: Raw X12 content

        Returns:
            EDIParseResult with the tokenized document
        """
        transaction_id = str(uuid4())

        try:
            document = self.parser.parse(content)
        except X12ParseError as e:
            logger.error("Parse error in inbound transaction %s: %s", transaction_id, e)
            return EDIParseResult(
                transaction_id=transaction_id,
                status=EDITransactionStatus.FAILED,
                errors=[str(e)],
            )

        isa = document.get_first_segment("ISA")
        envelope = X12Envelope.from_isa_segment(isa) if isa else None

        logger.info(
            "Parsed inbound interchange %s: %d segments, transaction sets %s",
            document.interchange_control_number,
            len(document),
            ",".join(document.transaction_set_ids) or "none",
        )

        return EDIParseResult(
            transaction_id=transaction_id,
            status=EDITransactionStatus.COMPLETED,
            document=document,
            envelope=envelope,
            control_number=document.interchange_control_number or "",
            transaction_set_ids=document.transaction_set_ids,
            segment_count=len(document),
        )


# =============================================================================
# Factory Function
# =============================================================================


_edi_service: Optional[EDIService] = None


def get_edi_service(config: Optional[AppConfig] = None) -> EDIService:
    """
    Get or create EDI service instance.

    Args:
        config: Application configuration

    Returns:
        EDIService instance
    """
    global _edi_service

    if _edi_service is None:
        _edi_service = EDIService(config=config)

    return _edi_service
