"""
X12 Interchange Builder.

Accumulates segments as element lists and closes each envelope level
itself: the SE count, and the ST/SE, GS/GE and ISA/IEA control number
pairs, are derived from what was actually emitted.
"""

from datetime import datetime
from typing import List, Optional
import logging

from src.services.edi.x12_base import (
    X12Delimiters,
    X12ValidationError,
    format_isa_date,
    format_x12_date,
    format_x12_time,
)

logger = logging.getLogger(__name__)


class X12InterchangeBuilder:
    """
    Builds one X12 interchange.

    Usage:
        builder = X12InterchangeBuilder()
        builder.begin_interchange("SENDER", "RECEIVER", "000000123", now)
        builder.begin_group("HC", "SENDER", "RECEIVER", "000000123", now, "005010X224A2")
        builder.begin_transaction("837", "0000", "005010X224A2")
        builder.add("BHT", "0019", "00", "000000123", "20240405", "1200", "CH")
        builder.end_transaction()
        builder.end_group()
        builder.end_interchange()
        content = builder.render()
    """

    def __init__(self, delimiters: Optional[X12Delimiters] = None):
        self.delimiters = delimiters or X12Delimiters()
        self._segments: List[str] = []

        self._interchange_control: Optional[str] = None
        self._interchange_group_count = 0

        self._group_control: Optional[str] = None
        self._group_transaction_count = 0

        self._transaction_control: Optional[str] = None
        self._transaction_start: Optional[int] = None
        self.transaction_segment_counts: List[int] = []
        # Last interchange control number written, kept after IEA
        self.control_number: Optional[str] = None

    # -------------------------------------------------------------------------
    # Segments
    # -------------------------------------------------------------------------

    def segment(self, segment_id: str, *elements) -> str:
        """Build a segment string (without terminator) from ID and elements."""
        values = [segment_id] + ["" if e is None else str(e) for e in elements]
        return self.delimiters.element_separator.join(values)

    def add(self, segment_id: str, *elements) -> "X12InterchangeBuilder":
        """Append a segment."""
        self._segments.append(self.segment(segment_id, *elements))
        return self

    def add_composite(self, *components) -> str:
        """Join components with the sub-element separator."""
        return self.delimiters.sub_element_separator.join(
            "" if c is None else str(c) for c in components
        )

    @property
    def segments(self) -> List[str]:
        return list(self._segments)

    @property
    def transaction_segment_count(self) -> int:
        """Segments emitted since the open ST, including the ST itself."""
        if self._transaction_start is None:
            return 0
        return len(self._segments) - self._transaction_start

    # -------------------------------------------------------------------------
    # Envelope levels
    # -------------------------------------------------------------------------

    def begin_interchange(
        self,
        sender_id: str,
        receiver_id: str,
        control_number: str,
        timestamp: datetime,
        usage_indicator: str = "P",
        sender_qualifier: str = "ZZ",
        receiver_qualifier: str = "ZZ",
        version: str = "00501",
        acknowledgment_requested: str = "0",
    ) -> "X12InterchangeBuilder":
        """Emit the fixed-width ISA segment."""
        if self._interchange_control is not None:
            raise X12ValidationError("Interchange already open", segment_id="ISA")

        control = control_number.zfill(9)
        self._interchange_control = control
        self.control_number = control
        self._interchange_group_count = 0
        self.add(
            "ISA",
            "00",  # Authorization Info Qualifier
            " " * 10,  # Authorization Info
            "00",  # Security Info Qualifier
            " " * 10,  # Security Info
            sender_qualifier,  # Sender ID Qualifier
            sender_id.ljust(15)[:15],  # Sender ID
            receiver_qualifier,  # Receiver ID Qualifier
            receiver_id.ljust(15)[:15],  # Receiver ID
            format_isa_date(timestamp),  # Date
            format_x12_time(timestamp),  # Time
            self.delimiters.repetition_separator,  # Repetition Separator
            version,  # Version
            control,  # Control Number
            acknowledgment_requested,  # Acknowledgment Requested
            usage_indicator,  # Usage Indicator (P=Production, T=Test)
            self.delimiters.sub_element_separator,  # Sub-element Separator
        )
        return self

    def begin_group(
        self,
        functional_id: str,
        sender_id: str,
        receiver_id: str,
        control_number: str,
        timestamp: datetime,
        version: str,
    ) -> "X12InterchangeBuilder":
        """Emit GS."""
        if self._interchange_control is None:
            raise X12ValidationError("GS requires an open interchange", segment_id="GS")
        if self._group_control is not None:
            raise X12ValidationError("Functional group already open", segment_id="GS")

        self._group_control = control_number
        self._group_transaction_count = 0
        self.add(
            "GS",
            functional_id,  # Functional ID Code
            sender_id,  # Application Sender's Code
            receiver_id,  # Application Receiver's Code
            format_x12_date(timestamp),  # Date
            format_x12_time(timestamp),  # Time
            control_number,  # Group Control Number
            "X",  # Responsible Agency Code
            version,  # Version
        )
        return self

    def begin_transaction(
        self, transaction_set_id: str, control_number: str, version: str
    ) -> "X12InterchangeBuilder":
        """Emit ST and start counting segments."""
        if self._group_control is None:
            raise X12ValidationError("ST requires an open functional group", segment_id="ST")
        if self._transaction_control is not None:
            raise X12ValidationError("Transaction set already open", segment_id="ST")

        self._transaction_control = control_number
        self._transaction_start = len(self._segments)
        self.add("ST", transaction_set_id, control_number, version)
        return self

    def end_transaction(self) -> int:
        """Emit SE and return its segment count (ST through SE inclusive)."""
        if self._transaction_control is None:
            raise X12ValidationError("SE without open transaction set", segment_id="SE")

        count = self.transaction_segment_count + 1
        self.add("SE", str(count), self._transaction_control)

        self._transaction_control = None
        self._transaction_start = None
        self.transaction_segment_counts.append(count)
        self._group_transaction_count += 1
        return count

    def end_group(self) -> "X12InterchangeBuilder":
        """Emit GE."""
        if self._group_control is None:
            raise X12ValidationError("GE without open functional group", segment_id="GE")
        if self._transaction_control is not None:
            raise X12ValidationError("Transaction set still open", segment_id="GE")

        self.add("GE", str(self._group_transaction_count), self._group_control)
        self._group_control = None
        self._interchange_group_count += 1
        return self

    def end_interchange(self) -> "X12InterchangeBuilder":
        """Emit IEA."""
        if self._interchange_control is None:
            raise X12ValidationError("IEA without open interchange", segment_id="IEA")
        if self._group_control is not None:
            raise X12ValidationError("Functional group still open", segment_id="IEA")

        self.add("IEA", str(self._interchange_group_count), self._interchange_control)
        logger.debug(
            "Closed interchange %s: %d groups, %d segments",
            self._interchange_control,
            self._interchange_group_count,
            len(self._segments),
        )
        self._interchange_control = None
        return self

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    @property
    def is_closed(self) -> bool:
        return (
            self._interchange_control is None
            and self._group_control is None
            and self._transaction_control is None
        )

    def render(self, line_separator: str = "") -> str:
        """
        Render all segments, each followed by the segment terminator.

        Args:
            line_separator: Text placed between terminated segments. Empty
                for transmission; "\\n" for human-readable output.
        """
        if not self.is_closed:
            raise X12ValidationError("Cannot render an interchange with open envelopes")

        terminator = self.delimiters.segment_terminator
        return line_separator.join(seg + terminator for seg in self._segments)
