"""
Unit Tests for the X12 Interchange Builder.
"""

from datetime import datetime

import pytest

from src.services.edi.segment_builder import X12InterchangeBuilder
from src.services.edi.x12_base import X12Delimiters, X12ValidationError, parse_x12

NOW = datetime(2024, 4, 5, 8, 15)


def _open(builder, control="000000123"):
    builder.begin_interchange("SENDER", "RECEIVER", control, NOW)
    builder.begin_group("HC", "SENDER", "RECEIVER", "123", NOW, "005010X224A2")
    builder.begin_transaction("837", "0000", "005010X224A2")
    return builder


def _close(builder):
    count = builder.end_transaction()
    builder.end_group()
    builder.end_interchange()
    return count


@pytest.mark.unit
class TestSegmentAssembly:
    """Segment strings."""

    def test_segment_joins_elements(self):
        builder = X12InterchangeBuilder()
        assert builder.segment("N4", "SPRINGFIELD", "IL", "62701") == "N4*SPRINGFIELD*IL*62701"

    def test_none_becomes_empty(self):
        builder = X12InterchangeBuilder()
        assert builder.segment("HL", "1", None, "20", "1") == "HL*1**20*1"

    def test_composite(self):
        builder = X12InterchangeBuilder(X12Delimiters(sub_element_separator=">"))
        assert builder.add_composite("AD", "D0150") == "AD>D0150"

    def test_add_is_chainable(self):
        builder = X12InterchangeBuilder()
        builder.add("LX", "1").add("LX", "2")
        assert builder.segments == ["LX*1", "LX*2"]


@pytest.mark.unit
class TestEnvelopeClosing:
    """Trailer segments are derived from what was emitted."""

    def test_se_count_includes_st_and_se(self):
        builder = _open(X12InterchangeBuilder())
        builder.add("BHT", "0019").add("LX", "1")
        assert builder.transaction_segment_count == 3
        assert _close(builder) == 4
        assert builder.segments[-3] == "SE*4*0000"
        assert builder.transaction_segment_counts == [4]

    def test_empty_transaction(self):
        builder = _open(X12InterchangeBuilder())
        assert _close(builder) == 2

    def test_trailer_control_numbers(self):
        builder = _open(X12InterchangeBuilder(), control="77")
        _close(builder)
        assert builder.segments[-2] == "GE*1*123"
        assert builder.segments[-1] == "IEA*1*000000077"

    def test_control_number_survives_iea(self):
        builder = _open(X12InterchangeBuilder(), control="123")
        _close(builder)
        assert builder.control_number == "000000123"

    def test_multiple_transactions_in_group(self):
        builder = _open(X12InterchangeBuilder())
        builder.end_transaction()
        builder.begin_transaction("837", "0001", "005010X224A2")
        builder.add("LX", "1")
        builder.end_transaction()
        builder.end_group()
        builder.end_interchange()
        assert builder.transaction_segment_counts == [2, 3]
        assert builder.segments[-2] == "GE*2*123"

    def test_isa_layout(self):
        builder = _open(X12InterchangeBuilder())
        _close(builder)
        content = builder.render()
        assert content[:106].endswith(":~")
        assert len(content.split("~")[0]) + 1 == 106

    def test_render_parses_back(self):
        builder = _open(X12InterchangeBuilder(X12Delimiters("|", ">", "!", "^")))
        builder.add("LX", "1")
        _close(builder)
        document = parse_x12(builder.render("\n"))
        assert document.element_separator == "|"
        assert document.get_first_segment("SE").get_element(1) == "3"


@pytest.mark.unit
class TestEnvelopeErrors:
    """Unbalanced envelopes are rejected."""

    def test_group_without_interchange(self):
        with pytest.raises(X12ValidationError):
            X12InterchangeBuilder().begin_group("HC", "S", "R", "1", NOW, "005010X224A2")

    def test_transaction_without_group(self):
        builder = X12InterchangeBuilder()
        builder.begin_interchange("S", "R", "1", NOW)
        with pytest.raises(X12ValidationError):
            builder.begin_transaction("837", "0001", "005010X224A2")

    def test_nested_transaction(self):
        builder = _open(X12InterchangeBuilder())
        with pytest.raises(X12ValidationError):
            builder.begin_transaction("837", "0002", "005010X224A2")

    def test_se_without_st(self):
        with pytest.raises(X12ValidationError):
            X12InterchangeBuilder().end_transaction()

    def test_ge_with_open_transaction(self):
        builder = _open(X12InterchangeBuilder())
        with pytest.raises(X12ValidationError):
            builder.end_group()

    def test_iea_with_open_group(self):
        builder = _open(X12InterchangeBuilder())
        builder.end_transaction()
        with pytest.raises(X12ValidationError):
            builder.end_interchange()

    def test_render_with_open_envelope(self):
        builder = _open(X12InterchangeBuilder())
        assert not builder.is_closed
        with pytest.raises(X12ValidationError):
            builder.render()
