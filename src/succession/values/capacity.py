"""
Testamentary capacity declaration (Section 7 LSA).

A declaration records how the testator's capacity was established. It is
validated on construction: an assessed-competent declaration must affirm
all four understanding tests, a medical certification needs a practitioner
and certificate date, and a court determination needs a case number and
order date.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from succession.values.risk import RiskLevel

ADULT_AGE = 18


class CapacityStatus(Enum):
    ASSESSED_COMPETENT = "ASSESSED_COMPETENT"
    ASSESSED_INCOMPETENT = "ASSESSED_INCOMPETENT"
    PENDING_ASSESSMENT = "PENDING_ASSESSMENT"
    MEDICAL_CERTIFICATION = "MEDICAL_CERTIFICATION"
    COURT_DETERMINATION = "COURT_DETERMINATION"
    SELF_DECLARATION = "SELF_DECLARATION"


class AssessmentMethod(Enum):
    MEDICAL_EXAMINATION = "MEDICAL_EXAMINATION"
    PSYCHIATRIC_EVALUATION = "PSYCHIATRIC_EVALUATION"
    LEGAL_TEST = "LEGAL_TEST"
    VIDEO_RECORDING = "VIDEO_RECORDING"
    WITNESS_AFFIDAVIT = "WITNESS_AFFIDAVIT"
    COURT_ORDER = "COURT_ORDER"
    SELF_DECLARATION = "SELF_DECLARATION"


_CONFERS_CAPACITY = frozenset(
    {
        CapacityStatus.ASSESSED_COMPETENT,
        CapacityStatus.MEDICAL_CERTIFICATION,
        CapacityStatus.COURT_DETERMINATION,
        CapacityStatus.SELF_DECLARATION,
    }
)

_STATUS_LABELS = {
    CapacityStatus.ASSESSED_COMPETENT: "Legally competent",
    CapacityStatus.ASSESSED_INCOMPETENT: "Legally incompetent",
    CapacityStatus.MEDICAL_CERTIFICATION: "Medically certified competent",
    CapacityStatus.COURT_DETERMINATION: "Court determined competent",
    CapacityStatus.SELF_DECLARATION: "Self-declared competent",
    CapacityStatus.PENDING_ASSESSMENT: "Pending assessment",
}


class CapacityDeclaration(BaseModel):
    """
    How the testator's capacity to make a will was established.

    Attributes:
        status: Outcome or basis of the capacity finding
        testator_age: Age of the testator when the declaration was made
        declared_at: When the declaration was recorded (UTC)
        assessed_by: Assessor reference, if any
        assessment_method: How the assessment was carried out
        understands_nature_of_will: First limb of the capacity test
        understands_extent_of_property: Second limb
        understands_claims_of_dependants: Third limb
        free_from_undue_influence: Fourth limb
        medical_practitioner: Certifying practitioner (medical certification)
        medical_certificate_date: Date of the certificate
        court_case_number: Case number (court determination)
        court_order_date: Date of the order
        supporting_documents: Document references backing the declaration
    """

    model_config = ConfigDict(frozen=True)

    status: CapacityStatus
    testator_age: int = Field(..., ge=0)
    declared_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    assessed_by: str | None = None
    assessment_method: AssessmentMethod | None = None

    understands_nature_of_will: bool = False
    understands_extent_of_property: bool = False
    understands_claims_of_dependants: bool = False
    free_from_undue_influence: bool = False

    medical_practitioner: str | None = None
    medical_certificate_date: date | None = None
    court_case_number: str | None = None
    court_order_date: date | None = None

    supporting_documents: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_basis(self) -> CapacityDeclaration:
        problems: list[str] = []
        if self.status is CapacityStatus.ASSESSED_COMPETENT and not self.passes_understanding_test:
            problems.append("assessed competent requires all four understanding tests")
        if self.status is CapacityStatus.MEDICAL_CERTIFICATION and (
            not self.medical_practitioner or self.medical_certificate_date is None
        ):
            problems.append("medical certification requires practitioner and certificate date")
        if self.status is CapacityStatus.COURT_DETERMINATION and (
            not self.court_case_number or self.court_order_date is None
        ):
            problems.append("court determination requires case number and order date")
        if problems:
            raise ValueError("; ".join(problems))
        return self

    @property
    def passes_understanding_test(self) -> bool:
        return (
            self.understands_nature_of_will
            and self.understands_extent_of_property
            and self.understands_claims_of_dependants
            and self.free_from_undue_influence
        )

    @property
    def is_minor(self) -> bool:
        return self.testator_age < ADULT_AGE

    @property
    def confers_capacity(self) -> bool:
        """True if the testator may make a will on the strength of this declaration."""
        if self.is_minor:
            return False
        return self.status in _CONFERS_CAPACITY

    def risk_level(self) -> RiskLevel:
        """Likelihood that the declaration is successfully challenged (LOW/MEDIUM/HIGH)."""
        if not self.confers_capacity:
            return RiskLevel.HIGH
        if self.status is CapacityStatus.SELF_DECLARATION or not self.passes_understanding_test:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def is_legally_sufficient(self) -> bool:
        if not self.confers_capacity:
            return False
        if self.status is CapacityStatus.SELF_DECLARATION:
            return self.passes_understanding_test and bool(self.supporting_documents)
        return True

    def assessment_summary(self) -> str:
        issues: list[str] = []
        if not self.understands_nature_of_will:
            issues.append("does not understand nature of will")
        if not self.understands_extent_of_property:
            issues.append("does not understand extent of property")
        if not self.understands_claims_of_dependants:
            issues.append("does not understand dependant claims")
        if not self.free_from_undue_influence:
            issues.append("potential undue influence")
        if self.is_minor:
            issues.append("testator is a minor")

        summary = f"Status: {_STATUS_LABELS[self.status]}"
        if issues:
            return f"{summary}. Issues: {', '.join(issues)}"
        return summary


__all__ = [
    "CapacityStatus",
    "AssessmentMethod",
    "CapacityDeclaration",
    "ADULT_AGE",
]
