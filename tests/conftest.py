"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

import sys
from datetime import UTC, date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

# Add project root to path for `src.` imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.config.environment import get_config  # noqa: E402
from src.services.edi.control_numbers import SequenceControlNumberSource  # noqa: E402
from src.services.edi.x12_837d_generator import (  # noqa: E402
    ClaimDto,
    ClaimLine,
    ProviderAddress,
    ProviderInfo,
    SubmitterInfo,
    X12837DGenerator,
)

FIXED_NOW = datetime(2024, 4, 5, 14, 30, tzinfo=UTC)


# =============================================================================
# Sample X12 Content
# =============================================================================


SAMPLE_999 = (
    "ISA*00*          *00*          *ZZ*PAYER          *ZZ*SUBMITTER      "
    "*240405*1431*^*00501*000000042*0*P*:~"
    "GS*FA*PAYER*SUBMITTER*20240405*1431*42*X*005010X231A1~"
    "ST*999*0001*005010X231A1~"
    "AK1*HC*123456789*005010X224A2~"
    "AK2*837*1234~"
    "IK5*A~"
    "AK9*A*1*1*1~"
    "SE*6*0001~"
    "GE*1*42~"
    "IEA*1*000000042~"
)


@pytest.fixture
def sample_999():
    """Accepted 999 acknowledgment for one 837 transaction set."""
    return SAMPLE_999


# =============================================================================
# Claim Fixtures
# =============================================================================


@pytest.fixture
def sample_claim():
    """Single-line prophylaxis claim."""
    return ClaimDto(
        claim_id="CLM-1001",
        payer_id="86027",
        payer_name="DELTA DENTAL",
        subscriber_id="DDT123456789",
        group_number="GRP500",
        service_date=date(2024, 4, 5),
        total_charge=Decimal("85.00"),
        lines=[
            ClaimLine(line_number=1, cdt_code="D0150", charge=Decimal("85.00")),
        ],
    )


@pytest.fixture
def multi_line_claim():
    """Claim with tooth and surface detail on some lines."""
    return ClaimDto(
        claim_id="CLM-2002",
        payer_id="86027",
        payer_name="DELTA DENTAL",
        subscriber_id="DDT123456789",
        service_date=date(2024, 4, 5),
        total_charge=Decimal("420.00"),
        lines=[
            ClaimLine(line_number=1, cdt_code="D0120", charge=Decimal("60.00")),
            ClaimLine(line_number=2, cdt_code="D2391", charge=Decimal("180.00"), tooth_number="14", surface="O"),
            ClaimLine(line_number=3, cdt_code="D2140", charge=Decimal("180.00"), tooth_number="3"),
        ],
    )


@pytest.fixture
def sample_provider():
    return ProviderInfo(
        first_name="JANE",
        last_name="SMITH",
        npi="1234567893",
        tax_id="12-3456789",
        address=ProviderAddress(
            line1="100 MAIN ST",
            city="SPRINGFIELD",
            state="IL",
            zip_code="62701",
        ),
    )


@pytest.fixture
def sample_submitter():
    return SubmitterInfo(
        organization_name="SMILE DENTAL GROUP",
        etin="SMILE01",
        contact_name="BILLING DESK",
        contact_phone="2175550100",
    )


# =============================================================================
# Generator Fixtures
# =============================================================================


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def sequence_source():
    return SequenceControlNumberSource(start=123456789)


@pytest.fixture
def generator(fixed_clock, sequence_source):
    """Deterministic generator: fixed clock and sequential control numbers."""
    return X12837DGenerator(control_numbers=sequence_source, clock=fixed_clock)


@pytest.fixture(autouse=True)
def clear_config_cache():
    """Reset cached configuration between tests."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
