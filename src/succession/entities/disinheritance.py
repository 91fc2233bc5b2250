"""
Disinheritance records (Section 26 LSA).

The legal-risk level is computed from the record's relationship, reason
and severity each time it is read. It is never stored.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from succession.exceptions import EntityStateError
from succession.values.persons import PersonRef, display_name
from succession.values.risk import (
    DisinheritanceReason,
    DisinheritanceSeverity,
    PersonRelationship,
    RiskLevel,
    risk_level_for,
    risk_points,
)


class DisinheritanceStatus(Enum):
    RECORDED = "RECORDED"
    EFFECTIVE = "EFFECTIVE"
    WITHDRAWN = "WITHDRAWN"


class DisinheritanceRecord(BaseModel):
    """
    Explicit exclusion of a person from the estate.

    Attributes:
        person: The excluded person
        relationship: Relationship class used for risk scoring
        reason: Category of the stated reason
        justification: Free-text explanation, required
        severity: How far the exclusion goes
        evidence: References to supporting documents; required for LEGAL reasons
        alternative_provision: Provision made outside the will, if any
        testator_statement: The testator's own words on the exclusion
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    person: PersonRef
    relationship: PersonRelationship
    reason: DisinheritanceReason
    justification: str
    severity: DisinheritanceSeverity = DisinheritanceSeverity.COMPLETE
    evidence: tuple[str, ...] = ()
    alternative_provision: str | None = None
    testator_statement: str | None = None
    status: DisinheritanceStatus = DisinheritanceStatus.RECORDED
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    withdrawn_at: datetime | None = None
    withdrawal_reason: str | None = None

    @field_validator("justification")
    @classmethod
    def _require_justification(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Disinheritance requires a justification")
        return value

    @model_validator(mode="after")
    def _legal_reason_needs_evidence(self) -> DisinheritanceRecord:
        if self.reason is DisinheritanceReason.LEGAL and not self.evidence:
            raise ValueError("Legal grounds for disinheritance must be supported by evidence")
        return self

    @property
    def person_name(self) -> str:
        return display_name(self.person)

    @property
    def is_in_force(self) -> bool:
        return self.status is not DisinheritanceStatus.WITHDRAWN

    @property
    def risk_score(self) -> int:
        return risk_points(self.relationship, self.reason, self.severity)

    @property
    def risk_level(self) -> RiskLevel:
        return risk_level_for(self.risk_score)

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level.is_at_least(RiskLevel.HIGH)

    def make_effective(self) -> DisinheritanceRecord:
        if self.status is not DisinheritanceStatus.RECORDED:
            return self
        return self.model_copy(update={"status": DisinheritanceStatus.EFFECTIVE})

    def withdraw(self, reason: str | None = None, at: datetime | None = None) -> DisinheritanceRecord:
        if not self.is_in_force:
            raise EntityStateError("disinheritance", self.id, self.status.value, "withdraw")
        return self.model_copy(
            update={
                "status": DisinheritanceStatus.WITHDRAWN,
                "withdrawn_at": at or datetime.now(UTC),
                "withdrawal_reason": reason,
            }
        )


__all__ = [
    "DisinheritanceStatus",
    "DisinheritanceRecord",
]
