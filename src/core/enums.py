"""
Core Enumerations for the Dental EDI Codec.
"""

from enum import Enum


# =============================================================================
# Output and Control Number Enums
# =============================================================================


class OutputFormat(str, Enum):
    """How generated segments are joined."""

    WIRE = "wire"  # Terminator only, for transmission
    DISPLAY = "display"  # Terminator plus line break, for logs and review

    @property
    def line_separator(self) -> str:
        return "\n" if self is OutputFormat.DISPLAY else ""


class ControlNumberStrategy(str, Enum):
    """Where interchange control numbers come from."""

    CLOCK = "clock"  # Clock-derived, unique within one process
    SEQUENCE = "sequence"  # Counter seeded from the last persisted value


class UsageIndicator(str, Enum):
    """ISA15 usage indicator."""

    PRODUCTION = "P"
    TEST = "T"


# =============================================================================
# Transaction Enums
# =============================================================================


class TransactionSetCode(str, Enum):
    """X12 transaction set identifiers (ST01) seen by the codec."""

    CLAIM_837 = "837"  # Health Care Claim (837D when version is X224)
    ELIG_270 = "270"  # Eligibility Inquiry
    ELIG_271 = "271"  # Eligibility Response
    STATUS_276 = "276"  # Claim Status Inquiry
    STATUS_277 = "277"  # Claim Status Response
    AUTH_278 = "278"  # Prior Authorization
    ENROLL_834 = "834"  # Benefit Enrollment
    REMIT_835 = "835"  # Remittance Advice
    ACK_999 = "999"  # Implementation Acknowledgment


class EDITransactionStatus(str, Enum):
    """EDI transaction processing status."""

    COMPLETED = "completed"  # Generated or parsed successfully
    REJECTED = "rejected"  # Input failed pre-generation validation
    FAILED = "failed"  # Malformed interchange


class EDIDirection(str, Enum):
    """EDI transaction direction."""

    INBOUND = "inbound"  # Received from external
    OUTBOUND = "outbound"  # Sent to external


class ViolationSeverity(str, Enum):
    """Severity of a pre-generation field violation."""

    ERROR = "error"  # Blocks generation
    WARNING = "warning"  # Reported, generation continues
