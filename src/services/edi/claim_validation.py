"""
Pre-generation validation for 837D claims.

The generator emits whatever it is given; a blank NPI or a payer id with
a stray delimiter produces a syntactically complete interchange that the
payer rejects days later. This pass reports field-level violations before
anything is generated.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple
import logging
import re

from src.core.enums import ViolationSeverity
from src.services.edi.x12_837d_generator import (
    ClaimDto,
    ProviderInfo,
    SubmitterInfo,
)
from src.services.edi.x12_base import X12Delimiters, validate_npi

logger = logging.getLogger(__name__)

CDT_CODE_PATTERN = re.compile(r"^D\d{4}$")
TAX_ID_PATTERN = re.compile(r"^\d{2}-?\d{7}$")
MAX_ISA_ID_LENGTH = 15


@dataclass
class FieldViolation:
    """One problem with one input field."""

    field: str
    message: str
    severity: ViolationSeverity = ViolationSeverity.ERROR

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass
class ClaimValidationResult:
    """Outcome of validate_claim_submission()."""

    violations: List[FieldViolation] = field(default_factory=list)

    @property
    def errors(self) -> List[FieldViolation]:
        return [v for v in self.violations if v.severity == ViolationSeverity.ERROR]

    @property
    def warnings(self) -> List[FieldViolation]:
        return [v for v in self.violations if v.severity == ViolationSeverity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add(self, field_name: str, message: str, severity: ViolationSeverity = ViolationSeverity.ERROR) -> None:
        self.violations.append(FieldViolation(field_name, message, severity))


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _as_decimal(value) -> Decimal:
    # Through str so a float 0.1 compares as 0.1, not its binary expansion
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _require(result: ClaimValidationResult, fields: Iterable[Tuple[str, Optional[str]]]) -> None:
    for name, value in fields:
        if _is_blank(value):
            result.add(name, "is required")


def _check_delimiters(
    result: ClaimValidationResult,
    fields: Iterable[Tuple[str, Optional[str]]],
    delimiters: X12Delimiters,
) -> None:
    reserved = set(delimiters.as_tuple())
    for name, value in fields:
        if value is None:
            continue
        found = sorted(reserved.intersection(str(value)))
        if found:
            result.add(name, f"contains reserved delimiter character(s) {''.join(found)!r}")


def validate_claim_submission(
    claim: ClaimDto,
    provider: ProviderInfo,
    submitter: SubmitterInfo,
    delimiters: Optional[X12Delimiters] = None,
) -> ClaimValidationResult:
    """
    Check claim, provider and submitter before generating an 837D.

    Args:
        claim: Claim to submit
        provider: Billing provider
        submitter: Submitting organization
        delimiters: Delimiters the interchange will use

    Returns:
        ClaimValidationResult; generation should proceed only if is_valid
    """
    delimiters = delimiters or X12Delimiters()
    result = ClaimValidationResult()

    if claim is None:
        result.add("claim", "is required")
    if provider is None:
        result.add("provider", "is required")
    if submitter is None:
        result.add("submitter", "is required")
    if not result.is_valid:
        return result

    address = provider.address
    text_fields = [
        ("claim.claim_id", claim.claim_id),
        ("claim.payer_id", claim.payer_id),
        ("claim.payer_name", claim.payer_name),
        ("claim.subscriber_id", claim.subscriber_id),
        ("claim.group_number", claim.group_number),
        ("provider.first_name", provider.first_name),
        ("provider.last_name", provider.last_name),
        ("provider.npi", provider.npi),
        ("provider.tax_id", provider.tax_id),
        ("provider.address.line1", address.line1 if address else None),
        ("provider.address.city", address.city if address else None),
        ("provider.address.state", address.state if address else None),
        ("provider.address.zip_code", address.zip_code if address else None),
        ("submitter.organization_name", submitter.organization_name),
        ("submitter.etin", submitter.etin),
        ("submitter.contact_name", submitter.contact_name),
        ("submitter.contact_phone", submitter.contact_phone),
    ]

    _require(
        result,
        [
            ("claim.claim_id", claim.claim_id),
            ("claim.payer_id", claim.payer_id),
            ("claim.subscriber_id", claim.subscriber_id),
            ("provider.last_name", provider.last_name),
            ("provider.npi", provider.npi),
            ("provider.tax_id", provider.tax_id),
            ("submitter.organization_name", submitter.organization_name),
            ("submitter.etin", submitter.etin),
        ],
    )

    if claim.service_date is None:
        result.add("claim.service_date", "is required")

    if not _is_blank(provider.npi) and not validate_npi(provider.npi):
        result.add("provider.npi", "must be 10 digits with a valid check digit")

    if not _is_blank(provider.tax_id) and not TAX_ID_PATTERN.match(provider.tax_id):
        result.add("provider.tax_id", "must be 9 digits (NN-NNNNNNN)")

    if submitter.etin and len(submitter.etin) > MAX_ISA_ID_LENGTH:
        result.add("submitter.etin", f"must be at most {MAX_ISA_ID_LENGTH} characters to fit ISA06")

    if claim.total_charge is None or _as_decimal(claim.total_charge) < 0:
        result.add("claim.total_charge", "must be zero or greater")

    if claim.payer_name is None or not claim.payer_name.strip():
        result.add("claim.payer_name", "missing; UNKNOWN will be sent", ViolationSeverity.WARNING)

    if not claim.lines:
        result.add("claim.lines", "claim has no service lines", ViolationSeverity.WARNING)

    seen_numbers = set()
    for index, line in enumerate(claim.lines):
        prefix = f"claim.lines[{index}]"
        if line.line_number is None or line.line_number < 0:
            result.add(f"{prefix}.line_number", "must be a non-negative integer")
        elif line.line_number in seen_numbers:
            result.add(f"{prefix}.line_number", f"duplicate line number {line.line_number}", ViolationSeverity.WARNING)
        else:
            seen_numbers.add(line.line_number)

        if _is_blank(line.cdt_code):
            result.add(f"{prefix}.cdt_code", "is required")
        elif not CDT_CODE_PATTERN.match(line.cdt_code):
            result.add(f"{prefix}.cdt_code", "must look like D####")

        if line.charge is None or _as_decimal(line.charge) < 0:
            result.add(f"{prefix}.charge", "must be zero or greater")

        text_fields.extend(
            [
                (f"{prefix}.cdt_code", line.cdt_code),
                (f"{prefix}.tooth_number", line.tooth_number),
                (f"{prefix}.surface", line.surface),
            ]
        )

    if claim.lines and claim.total_charge is not None:
        charges = [_as_decimal(line.charge) for line in claim.lines if line.charge is not None]
        line_total = sum(charges, Decimal("0"))
        if line_total != _as_decimal(claim.total_charge):
            result.add(
                "claim.total_charge",
                f"line item total ({line_total}) doesn't match claim total ({claim.total_charge})",
                ViolationSeverity.WARNING,
            )

    _check_delimiters(result, text_fields, delimiters)

    if result.violations:
        logger.debug(
            "Claim %s validation: %d errors, %d warnings",
            claim.claim_id,
            len(result.errors),
            len(result.warnings),
        )

    return result
