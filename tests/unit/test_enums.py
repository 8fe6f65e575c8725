"""
Unit tests for core enumerations.
"""

import pytest

from src.core.enums import (
    ControlNumberStrategy,
    EDIDirection,
    EDITransactionStatus,
    OutputFormat,
    TransactionSetCode,
    UsageIndicator,
    ViolationSeverity,
)


@pytest.mark.unit
class TestOutputFormat:
    """Line separators per output format."""

    def test_wire_has_no_line_separator(self):
        assert OutputFormat.WIRE.line_separator == ""

    def test_display_uses_newline(self):
        assert OutputFormat.DISPLAY.line_separator == "\n"

    def test_lookup_by_value(self):
        assert OutputFormat("wire") is OutputFormat.WIRE


@pytest.mark.unit
class TestEnumValues:
    """String values used on the wire and in configuration."""

    def test_usage_indicator_matches_isa15(self):
        assert UsageIndicator.PRODUCTION.value == "P"
        assert UsageIndicator.TEST.value == "T"

    def test_transaction_set_codes(self):
        assert TransactionSetCode.CLAIM_837.value == "837"
        assert TransactionSetCode("999") is TransactionSetCode.ACK_999

    def test_str_enums_compare_to_strings(self):
        assert ControlNumberStrategy.SEQUENCE == "sequence"
        assert EDITransactionStatus.REJECTED == "rejected"
        assert EDIDirection.INBOUND == "inbound"
        assert ViolationSeverity.WARNING == "warning"
