"""
X12 EDI Base Parser and Models.

Provides core X12 functionality shared by the dental claim codec:
- Tokenizer that splits raw interchange text into segments and elements
- Document/segment models with lookup helpers
- Envelope readers for correlating inbound acknowledgments
- Formatting utilities for X12 dates, times and amounts
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union
import logging

logger = logging.getLogger(__name__)


# Fixed ISA layout offsets (0-based)
ISA_LENGTH = 106
ISA_ELEMENT_SEPARATOR_OFFSET = 3
ISA_SUB_ELEMENT_SEPARATOR_OFFSET = 104
ISA_SEGMENT_TERMINATOR_OFFSET = 105


# =============================================================================
# Exceptions
# =============================================================================


class X12ValidationError(Exception):
    """X12 validation error with detailed context."""

    def __init__(
        self,
        message: str,
        segment_id: Optional[str] = None,
        segment_position: Optional[int] = None,
        element_position: Optional[int] = None,
        raw_segment: Optional[str] = None,
    ):
        self.message = message
        self.segment_id = segment_id
        self.segment_position = segment_position
        self.element_position = element_position
        self.raw_segment = raw_segment
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.segment_id:
            parts.append(f"Segment: {self.segment_id}")
        if self.segment_position is not None:
            parts.append(f"Position: {self.segment_position}")
        if self.element_position is not None:
            parts.append(f"Element: {self.element_position}")
        return " | ".join(parts)


class X12ParseError(X12ValidationError):
    """Error during X12 parsing."""

    pass


# =============================================================================
# Data Models
# =============================================================================


@dataclass(frozen=True)
class X12Delimiters:
    """
    The delimiter set of one interchange.

    Element separator, sub-element separator and segment terminator live at
    ISA offsets 3, 104 and 105. The repetition separator is ISA11.
    """

    element_separator: str = "*"
    sub_element_separator: str = ":"
    segment_terminator: str = "~"
    repetition_separator: str = "^"

    def as_tuple(self) -> tuple:
        return (
            self.element_separator,
            self.sub_element_separator,
            self.segment_terminator,
            self.repetition_separator,
        )


@dataclass
class X12Segment:
    """
    Represents a single X12 segment.

    Example: NM1*IL*1*DOE*JOHN****MI*12345~
    - segment_id: NM1
    - elements: ['IL', '1', 'DOE', 'JOHN', '', '', '', 'MI', '12345']
    - get_element(1) == 'IL'
    """

    segment_id: str
    elements: List[str] = field(default_factory=list)
    raw: str = ""
    position: int = 0

    def get_element(self, position: int) -> Optional[str]:
        """Get element at 1-based position (X12 notation, e.g. NM1-09 is 9).

        Returns None when the position is outside the segment.
        """
        if 0 < position <= len(self.elements):
            return self.elements[position - 1]
        return None

    def get_composite(self, position: int, separator: str = ":") -> List[str]:
        """Split the composite element at 1-based position into its components."""
        value = self.get_element(position)
        if value:
            return value.split(separator)
        return []

    def __len__(self) -> int:
        return len(self.elements)

    def __str__(self) -> str:
        return self.raw or "*".join([self.segment_id, *self.elements])


@dataclass
class X12Document:
    """
    Tokenized X12 interchange.

    Holds the segments in source order and the delimiters used to split
    them. The tokenizer knows nothing about transaction grammar, so 837,
    271, 277 and 835 payloads all come out in this same shape.
    """

    segments: List[X12Segment] = field(default_factory=list)
    element_separator: str = "*"
    segment_terminator: str = "~"
    sub_element_separator: Optional[str] = ":"

    def get_segments(self, segment_id: str) -> List[X12Segment]:
        """Find all segments with given ID (case-insensitive)."""
        wanted = segment_id.upper()
        return [s for s in self.segments if s.segment_id.upper() == wanted]

    def get_first_segment(self, segment_id: str) -> Optional[X12Segment]:
        """Find first segment with given ID (case-insensitive)."""
        wanted = segment_id.upper()
        for segment in self.segments:
            if segment.segment_id.upper() == wanted:
                return segment
        return None

    def get_composite(self, segment: X12Segment, position: int) -> List[str]:
        """Split a composite element using this document's sub-element separator."""
        return segment.get_composite(position, self.sub_element_separator or ":")

    @property
    def interchange_control_number(self) -> Optional[str]:
        """ISA13 of the interchange."""
        isa = self.get_first_segment("ISA")
        return isa.get_element(13) if isa else None

    @property
    def transaction_set_ids(self) -> List[str]:
        """ST01 of every transaction set in the interchange, in order."""
        return [st.get_element(1) or "" for st in self.get_segments("ST")]

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)


@dataclass
class X12Envelope:
    """
    X12 interchange envelope (ISA/IEA).

    Contains control information for the interchange.
    """

    sender_id: str
    sender_qualifier: str
    receiver_id: str
    receiver_qualifier: str
    control_number: str
    date: str
    time: str
    version: str = "00501"
    acknowledgment_requested: str = "0"
    usage_indicator: str = "P"  # P=Production, T=Test

    @classmethod
    def from_isa_segment(cls, segment: X12Segment) -> "X12Envelope":
        """Parse ISA segment into envelope."""
        if segment.segment_id.upper() != "ISA":
            raise X12ValidationError("Expected ISA segment", segment_id=segment.segment_id)
        return cls(
            sender_qualifier=segment.get_element(5) or "",
            sender_id=(segment.get_element(6) or "").strip(),
            receiver_qualifier=segment.get_element(7) or "",
            receiver_id=(segment.get_element(8) or "").strip(),
            date=segment.get_element(9) or "",
            time=segment.get_element(10) or "",
            version=segment.get_element(12) or "",
            control_number=segment.get_element(13) or "",
            acknowledgment_requested=segment.get_element(14) or "",
            usage_indicator=segment.get_element(15) or "",
        )


@dataclass
class X12FunctionalGroup:
    """
    X12 functional group (GS/GE).

    Groups related transaction sets.
    """

    functional_id: str  # HC=Health Care Claim, HB=Eligibility Response, HP=Payment
    sender_id: str
    receiver_id: str
    date: str
    time: str
    control_number: str
    responsible_agency: str = "X"
    version: str = "005010X224A2"

    @classmethod
    def from_gs_segment(cls, segment: X12Segment) -> "X12FunctionalGroup":
        """Parse GS segment into functional group."""
        if segment.segment_id.upper() != "GS":
            raise X12ValidationError("Expected GS segment", segment_id=segment.segment_id)
        return cls(
            functional_id=segment.get_element(1) or "",
            sender_id=segment.get_element(2) or "",
            receiver_id=segment.get_element(3) or "",
            date=segment.get_element(4) or "",
            time=segment.get_element(5) or "",
            control_number=segment.get_element(6) or "",
            responsible_agency=segment.get_element(7) or "",
            version=segment.get_element(8) or "",
        )


# =============================================================================
# Tokenizer
# =============================================================================


class X12Parser:
    """
    X12 EDI tokenizer.

    Turns raw interchange text into an X12Document. Delimiters are read
    from the fixed-width ISA header on every call, so one parser instance
    can be shared between threads.

    Usage:
        document = X12Parser().parse(raw_text)
        for clp in document.get_segments("CLP"):
            print(clp.get_element(1))
    """

    def detect_delimiters(self, content: str) -> X12Delimiters:
        """
        Detect delimiters from ISA segment.

        ISA is always 106 characters with fixed positions:
        - Element separator: position 3
        - Sub-element separator: position 104
        - Segment terminator: position 105
        """
        if not content or len(content) < ISA_LENGTH or not content.startswith("ISA"):
            raise X12ParseError("Invalid X12: Missing or malformed ISA segment")

        element_sep = content[ISA_ELEMENT_SEPARATOR_OFFSET]
        sub_element_sep = content[ISA_SUB_ELEMENT_SEPARATOR_OFFSET]
        segment_term = content[ISA_SEGMENT_TERMINATOR_OFFSET]

        # Repetition separator is ISA11; only informative for the tokenizer
        isa_elements = content[:ISA_SEGMENT_TERMINATOR_OFFSET].split(element_sep)
        rep_sep = isa_elements[11] if len(isa_elements) >= 12 else "^"

        return X12Delimiters(
            element_separator=element_sep,
            sub_element_separator=sub_element_sep,
            segment_terminator=segment_term,
            repetition_separator=rep_sep,
        )

    def parse(self, content: Union[str, bytes]) -> X12Document:
        """
        Tokenize X12 content into a document.

        Args:
            content: Raw X12 EDI content (str or ASCII bytes), starting
                with the ISA segment

        Returns:
            X12Document with segments in source order

        Raises:
            X12ParseError: If the content is not text or the ISA header is
                missing or malformed
        """
        if isinstance(content, (bytes, bytearray)):
            try:
                content = content.decode("ascii")
            except UnicodeDecodeError as e:
                raise X12ParseError("Invalid X12: content is not ASCII") from e
        elif content is not None and not isinstance(content, str):
            raise X12ParseError(f"Invalid X12: expected text, got {type(content).__name__}")

        delimiters = self.detect_delimiters(content)

        segments = []
        for raw in content.split(delimiters.segment_terminator):
            raw = raw.strip()
            if not raw:
                continue
            segments.append(self._parse_segment(raw, delimiters.element_separator, len(segments)))

        logger.debug(
            "Tokenized X12 interchange: %d segments, delimiters %r",
            len(segments),
            delimiters.as_tuple(),
        )

        return X12Document(
            segments=segments,
            element_separator=delimiters.element_separator,
            segment_terminator=delimiters.segment_terminator,
            sub_element_separator=delimiters.sub_element_separator,
        )

    @staticmethod
    def _parse_segment(raw: str, element_separator: str, position: int) -> X12Segment:
        elements = raw.split(element_separator)
        return X12Segment(
            segment_id=elements[0],
            elements=elements[1:],
            raw=raw,
            position=position,
        )


def parse_x12(content: str) -> X12Document:
    """Tokenize raw X12 text with a fresh parser."""
    return X12Parser().parse(content)


# =============================================================================
# Utility Functions
# =============================================================================


def format_x12_date(d: date) -> str:
    """Format date as X12 CCYYMMDD."""
    return d.strftime("%Y%m%d")


def format_isa_date(d: date) -> str:
    """Format date as ISA09 YYMMDD."""
    return d.strftime("%y%m%d")


def format_x12_time(t: datetime) -> str:
    """Format time as X12 HHMM (24-hour)."""
    return t.strftime("%H%M")


def format_x12_amount(amount: Union[Decimal, float, int]) -> str:
    """Format amount for X12 (exactly 2 decimal places, half-up)."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def validate_npi(npi: str) -> bool:
    """
    Validate NPI using Luhn algorithm.

    NPI is a 10-digit identifier for healthcare providers.
    """
    if not npi or len(npi) != 10:
        return False

    if not npi.isdigit():
        return False

    # Apply Luhn algorithm with healthcare prefix (80840)
    prefix = "80840"
    full_number = prefix + npi

    total = 0
    for i, digit in enumerate(reversed(full_number)):
        d = int(digit)
        if i % 2 == 0:
            total += d
        else:
            doubled = d * 2
            total += doubled if doubled < 10 else doubled - 9

    return total % 10 == 0
