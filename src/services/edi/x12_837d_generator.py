"""
X12 837D Dental Claim Generator.

Generates ASC X12 005010X224A2 dental claim transactions from a claim,
its billing provider and the submitting organization.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Callable, List, Optional
import logging

from src.core.enums import OutputFormat, TransactionSetCode, UsageIndicator
from src.services.edi.control_numbers import (
    ControlNumberSource,
    get_control_number_source,
    transaction_control_number,
)
from src.services.edi.segment_builder import X12InterchangeBuilder
from src.services.edi.x12_base import (
    X12Delimiters,
    format_x12_amount,
    format_x12_date,
    format_x12_time,
)

logger = logging.getLogger(__name__)

IMPLEMENTATION_VERSION = "005010X224A2"
DEFAULT_RECEIVER_ID = "RECEIVER"
UNKNOWN_PAYER_NAME = "UNKNOWN"


# =============================================================================
# Data Models
# =============================================================================


@dataclass
class ClaimLine:
    """One CDT procedure on the claim (Loop 2400)."""

    line_number: int
    cdt_code: str
    charge: Decimal
    tooth_number: Optional[str] = None
    surface: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ClaimDto:
    """Dental claim as supplied by the claims service."""

    claim_id: str
    payer_id: str
    subscriber_id: str
    service_date: date
    total_charge: Decimal
    payer_name: Optional[str] = None
    group_number: Optional[str] = None
    lines: List[ClaimLine] = field(default_factory=list)


@dataclass
class ProviderAddress:
    line1: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


@dataclass
class ProviderInfo:
    """Billing/rendering dentist."""

    first_name: str = ""
    last_name: str = ""
    npi: str = ""
    tax_id: str = ""
    address: ProviderAddress = field(default_factory=ProviderAddress)


@dataclass
class SubmitterInfo:
    """Organization submitting the interchange (Loop 1000A)."""

    organization_name: str = ""
    etin: str = ""
    contact_name: str = ""
    contact_phone: str = ""


# =============================================================================
# Generator
# =============================================================================


class X12837DGenerator:
    """
    X12 837D Dental Claim Generator.

    Produces a complete interchange (ISA/GS/ST ... SE/GE/IEA) holding one
    claim. One control number is drawn per call and shared by every
    envelope segment of that interchange.

    Input identifiers are emitted as given; run
    validate_claim_submission() first to catch values a payer would reject.

    Usage:
        generator = X12837DGenerator()
        content = generator.generate(claim, provider, submitter)
    """

    def __init__(
        self,
        delimiters: Optional[X12Delimiters] = None,
        control_numbers: Optional[ControlNumberSource] = None,
        output_format: OutputFormat = OutputFormat.DISPLAY,
        receiver_id: str = DEFAULT_RECEIVER_ID,
        usage_indicator: UsageIndicator = UsageIndicator.PRODUCTION,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.delimiters = delimiters or X12Delimiters()
        self.control_numbers = control_numbers or get_control_number_source()
        self.output_format = output_format
        self.receiver_id = receiver_id
        self.usage_indicator = usage_indicator
        self._clock = clock or (lambda: datetime.now(UTC))

    def generate(
        self,
        claim: ClaimDto,
        provider: ProviderInfo,
        submitter: SubmitterInfo,
        output_format: Optional[OutputFormat] = None,
        control_number: Optional[str] = None,
    ) -> str:
        """
        Generate an X12 837D interchange.

        Args:
            claim: Claim with payer, subscriber and service lines
            provider: Billing provider
            submitter: Submitting organization
            output_format: Overrides the generator's output format
            control_number: Use this control number instead of drawing one

        Returns:
            X12 837D content string
        """
        builder = self.build(claim, provider, submitter, control_number)
        fmt = output_format or self.output_format
        return builder.render(OutputFormat(fmt).line_separator)

    def build(
        self,
        claim: ClaimDto,
        provider: ProviderInfo,
        submitter: SubmitterInfo,
        control_number: Optional[str] = None,
    ) -> X12InterchangeBuilder:
        """Build the closed interchange without rendering it."""
        if claim is None or provider is None or submitter is None:
            raise TypeError("claim, provider and submitter are required")

        control = (control_number or self.control_numbers.next_control_number()).zfill(9)
        st_control = transaction_control_number(control)
        now = self._clock()

        builder = X12InterchangeBuilder(self.delimiters)

        # ISA - Interchange Control Header
        builder.begin_interchange(
            sender_id=submitter.etin,
            receiver_id=self.receiver_id,
            control_number=control,
            timestamp=now,
            usage_indicator=UsageIndicator(self.usage_indicator).value,
        )

        # GS - Functional Group Header
        builder.begin_group(
            functional_id="HC",
            sender_id=submitter.etin,
            receiver_id=self.receiver_id,
            control_number=control,
            timestamp=now,
            version=IMPLEMENTATION_VERSION,
        )

        # ST - Transaction Set Header
        builder.begin_transaction(TransactionSetCode.CLAIM_837.value, st_control, IMPLEMENTATION_VERSION)

        # BHT - Beginning of Hierarchical Transaction
        builder.add(
            "BHT",
            "0019",  # Hierarchical Structure Code
            "00",  # Transaction Set Purpose (Original)
            control,  # Reference Identification
            format_x12_date(now),
            format_x12_time(now),
            "CH",  # Chargeable
        )

        self._add_submitter_loop(builder, submitter)
        self._add_receiver_loop(builder, claim)
        self._add_billing_provider_loop(builder, provider)
        self._add_subscriber_loop(builder, claim)
        self._add_claim_loop(builder, claim)

        for line in claim.lines:
            self._add_service_line(builder, claim, line)

        # SE / GE / IEA
        segment_count = builder.end_transaction()
        builder.end_group()
        builder.end_interchange()

        logger.info(
            "Generated 837D for claim %s: control number %s, %d service lines, %d segments",
            claim.claim_id,
            control,
            len(claim.lines),
            segment_count,
        )
        return builder

    def _add_submitter_loop(self, builder: X12InterchangeBuilder, submitter: SubmitterInfo) -> None:
        """Loop 1000A - Submitter Name."""
        builder.add(
            "NM1",
            "41",  # Submitter
            "2",  # Organization
            submitter.organization_name,
            "",  # First Name
            "",  # Middle Name
            "",  # Prefix
            "",  # Suffix
            "46",  # ETIN
            submitter.etin,
        )
        builder.add("PER", "IC", submitter.contact_name, "TE", submitter.contact_phone)

    def _add_receiver_loop(self, builder: X12InterchangeBuilder, claim: ClaimDto) -> None:
        """Loop 1000B - Receiver Name."""
        builder.add(
            "NM1",
            "40",  # Receiver
            "2",  # Organization
            claim.payer_name or UNKNOWN_PAYER_NAME,
            "",
            "",
            "",
            "",
            "46",
            claim.payer_id,
        )

    def _add_billing_provider_loop(self, builder: X12InterchangeBuilder, provider: ProviderInfo) -> None:
        """Loop 2000A/2010AA - Billing Provider."""
        builder.add("HL", "1", "", "20", "1")
        builder.add(
            "NM1",
            "85",  # Billing Provider
            "1",  # Person
            provider.last_name,
            provider.first_name,
            "",  # Middle Name
            "",  # Prefix
            "",  # Suffix
            "XX",  # NPI
            provider.npi,
        )
        address = provider.address or ProviderAddress()
        builder.add("N3", address.line1)
        builder.add("N4", address.city, address.state, address.zip_code)
        builder.add("REF", "EI", provider.tax_id)

    def _add_subscriber_loop(self, builder: X12InterchangeBuilder, claim: ClaimDto) -> None:
        """Loop 2000B/2010BA/2010BB - Subscriber and Payer."""
        builder.add("HL", "2", "1", "22", "0")
        builder.add(
            "SBR",
            "P",  # Primary
            "18",  # Self
            claim.group_number or "",
            "",
            "",
            "",
            "",
            "",
            "CI",  # Commercial Insurance
        )
        builder.add("NM1", "IL", "1", "", "", "", "", "", "MI", claim.subscriber_id)
        builder.add(
            "NM1",
            "PR",  # Payer
            "2",
            claim.payer_name or UNKNOWN_PAYER_NAME,
            "",
            "",
            "",
            "",
            "PI",
            claim.payer_id,
        )

    def _add_claim_loop(self, builder: X12InterchangeBuilder, claim: ClaimDto) -> None:
        """Loop 2300 - Claim Information."""
        builder.add(
            "CLM",
            claim.claim_id,
            format_x12_amount(claim.total_charge),
            "",
            "",
            builder.add_composite("11", "B", "1"),  # Office, dental, original
            "Y",  # Provider signature on file
            "A",  # Assignment accepted
            "Y",  # Benefits assigned
            "Y",  # Release of information
        )
        builder.add("DTP", "472", "D8", format_x12_date(claim.service_date))

    def _add_service_line(self, builder: X12InterchangeBuilder, claim: ClaimDto, line: ClaimLine) -> None:
        """Loop 2400 - Service Line."""
        builder.add("LX", str(line.line_number))

        elements = [
            builder.add_composite("AD", line.cdt_code),
            format_x12_amount(line.charge),
            "UN",
            "1",
        ]
        if line.tooth_number or line.surface:
            elements.extend(["", "", "", line.tooth_number or ""])
        if line.surface:
            elements.append(line.surface)
        builder.add("SV3", *elements)

        builder.add("DTP", "472", "D8", format_x12_date(claim.service_date))
