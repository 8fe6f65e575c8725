"""
Unit Tests for EDI Pydantic Schemas
Tests request validation and conversion to/from service objects
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.core.enums import EDITransactionStatus, OutputFormat, ViolationSeverity
from src.schemas.edi import (
    ClaimSchema,
    EDI837DGenerateRequest,
    EDI837DGenerateResponse,
    ProviderSchema,
    SubmitterSchema,
    X12DocumentResponse,
)
from src.services.edi.edi_service import EDIService
from src.services.edi.x12_837d_generator import ClaimDto, ProviderInfo, SubmitterInfo, X12837DGenerator
from src.services.edi.control_numbers import SequenceControlNumberSource
from src.services.edi.x12_base import parse_x12
from src.config.environment import AppConfig


def _request_payload():
    return {
        "claim": {
            "claim_id": "CLM-1001",
            "payer_id": "86027",
            "payer_name": "DELTA DENTAL",
            "subscriber_id": "DDT123456789",
            "service_date": "2024-04-05",
            "total_charge": "265.00",
            "lines": [
                {"line_number": 1, "cdt_code": "D0150", "charge": "85.00"},
                {"line_number": 2, "cdt_code": "D2391", "charge": "180.00", "tooth_number": "14", "surface": "O"},
            ],
        },
        "provider": {
            "first_name": "JANE",
            "last_name": "SMITH",
            "npi": "1234567893",
            "tax_id": "12-3456789",
            "address": {"line1": "100 MAIN ST", "city": "SPRINGFIELD", "state": "IL", "zip_code": "62701"},
        },
        "submitter": {
            "organization_name": "SMILE DENTAL GROUP",
            "etin": "SMILE01",
            "contact_name": "BILLING DESK",
            "contact_phone": "2175550100",
        },
    }


@pytest.mark.unit
class TestGenerateRequest:
    """837D request schemas"""

    def test_to_domain(self):
        request = EDI837DGenerateRequest.model_validate(_request_payload())
        claim, provider, submitter = request.to_domain()

        assert isinstance(claim, ClaimDto)
        assert isinstance(provider, ProviderInfo)
        assert isinstance(submitter, SubmitterInfo)
        assert claim.service_date == date(2024, 4, 5)
        assert claim.total_charge == Decimal("265.00")
        assert claim.lines[1].tooth_number == "14"
        assert claim.lines[1].surface == "O"
        assert provider.address.city == "SPRINGFIELD"
        assert submitter.etin == "SMILE01"

    def test_npi_must_be_ten_digits(self):
        payload = _request_payload()
        payload["provider"]["npi"] = "12345"
        with pytest.raises(ValidationError):
            EDI837DGenerateRequest.model_validate(payload)

    def test_etin_fits_isa(self):
        with pytest.raises(ValidationError):
            SubmitterSchema(organization_name="ORG", etin="X" * 16)

    def test_negative_charge_rejected(self):
        payload = _request_payload()["claim"]
        payload["total_charge"] = "-1"
        with pytest.raises(ValidationError):
            ClaimSchema.model_validate(payload)

    def test_provider_address_optional(self):
        provider = ProviderSchema(last_name="SMITH", npi="1234567893", tax_id="123456789")
        assert provider.address.line1 == ""

    def test_request_generates(self, fixed_clock):
        claim, provider, submitter = EDI837DGenerateRequest.model_validate(_request_payload()).to_domain()
        generator = X12837DGenerator(control_numbers=SequenceControlNumberSource(), clock=fixed_clock)
        document = parse_x12(generator.generate(claim, provider, submitter))
        assert len(document.get_segments("SV3")) == 2


@pytest.mark.unit
class TestGenerateResponse:
    """837D response schemas"""

    def _result(self, fixed_clock, **overrides):
        claim, provider, submitter = EDI837DGenerateRequest.model_validate(_request_payload()).to_domain()
        for key, value in overrides.items():
            setattr(provider, key, value)
        generator = X12837DGenerator(control_numbers=SequenceControlNumberSource(start=8), clock=fixed_clock)
        return EDIService(config=AppConfig(), generator=generator).generate_837d(claim, provider, submitter)

    def test_from_completed_result(self, fixed_clock):
        response = EDI837DGenerateResponse.from_result(self._result(fixed_clock))
        assert response.status == EDITransactionStatus.COMPLETED
        assert response.control_number == "000000008"
        assert response.output_format == OutputFormat.WIRE
        assert "\n" not in response.content

    def test_display_content(self, fixed_clock):
        response = EDI837DGenerateResponse.from_result(self._result(fixed_clock), OutputFormat.DISPLAY)
        assert "~\n" in response.content

    def test_from_rejected_result(self, fixed_clock):
        response = EDI837DGenerateResponse.from_result(self._result(fixed_clock, npi="1234567890"))
        assert response.status == EDITransactionStatus.REJECTED
        assert response.content == ""
        assert response.violations[0].field == "provider.npi"
        assert response.violations[0].severity == ViolationSeverity.ERROR

    def test_serializes_to_json(self, fixed_clock):
        data = EDI837DGenerateResponse.from_result(self._result(fixed_clock)).model_dump(mode="json")
        assert data["status"] == "completed"
        assert data["output_format"] == "wire"


@pytest.mark.unit
class TestDocumentResponse:
    """Tokenizer response schemas"""

    def test_from_document(self, sample_999):
        response = X12DocumentResponse.from_document(parse_x12(sample_999))
        assert response.control_number == "000000042"
        assert response.transaction_set_ids == ["999"]
        assert response.segment_count == 10
        assert response.segments[0].segment_id == "ISA"
        assert response.segments[3].elements == ["HC", "123456789", "005010X224A2"]
        assert response.segments[3].position == 3
