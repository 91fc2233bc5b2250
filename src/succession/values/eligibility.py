"""
Witness candidates and eligibility snapshots.

A ``WitnessCandidate`` is the descriptor the eligibility checker evaluates.
The resulting ``WitnessEligibility`` is stored on each witness as a snapshot
of the verdict at the time it was taken.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from succession.values.persons import PersonRef
from succession.values.severity import Severity


class ConflictType(Enum):
    IS_BENEFICIARY = "IS_BENEFICIARY"
    IS_SPOUSE = "IS_SPOUSE"
    IS_EXECUTOR = "IS_EXECUTOR"
    IS_MINOR = "IS_MINOR"
    LACKS_CAPACITY = "LACKS_CAPACITY"
    HAS_CRIMINAL_RECORD = "HAS_CRIMINAL_RECORD"
    FAMILY_CONFLICT = "FAMILY_CONFLICT"
    FINANCIAL_INTEREST = "FINANCIAL_INTEREST"


class WitnessConflict(BaseModel):
    """One reason a candidate may be unsuitable as a witness."""

    model_config = ConfigDict(frozen=True)

    type: ConflictType
    severity: Severity
    description: str
    legal_reference: str | None = None

    @property
    def is_legal_impediment(self) -> bool:
        return self.severity is Severity.CRITICAL


class WitnessCandidate(BaseModel):
    """A person proposed as a witness, with the facts eligibility depends on."""

    model_config = ConfigDict(frozen=True)

    person: PersonRef
    date_of_birth: date | None = None
    relationship_to_testator: str | None = None
    is_spouse_of_testator: bool = False
    has_criminal_record: bool = False
    # None means not assessed
    has_mental_capacity: bool | None = None

    def age_on(self, on: date) -> int | None:
        if self.date_of_birth is None:
            return None
        dob = self.date_of_birth
        years = on.year - dob.year
        if (on.month, on.day) < (dob.month, dob.day):
            years -= 1
        return years


class WitnessEligibility(BaseModel):
    """Eligibility verdict for one candidate."""

    model_config = ConfigDict(frozen=True)

    is_eligible: bool
    conflicts: tuple[WitnessConflict, ...] = ()
    warnings: tuple[str, ...] = ()
    checked_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_findings(
        cls,
        conflicts: Sequence[WitnessConflict],
        warnings: Sequence[str],
        checked_at: datetime | None = None,
    ) -> WitnessEligibility:
        return cls(
            is_eligible=not any(c.is_legal_impediment for c in conflicts),
            conflicts=tuple(conflicts),
            warnings=tuple(warnings),
            checked_at=checked_at or datetime.now(UTC),
        )

    @property
    def legal_impediments(self) -> list[WitnessConflict]:
        return [c for c in self.conflicts if c.is_legal_impediment]

    @property
    def advisory_conflicts(self) -> list[WitnessConflict]:
        return [c for c in self.conflicts if not c.is_legal_impediment]

    def has_conflict(self, conflict_type: ConflictType) -> bool:
        return any(c.type is conflict_type for c in self.conflicts)


__all__ = [
    "ConflictType",
    "WitnessConflict",
    "WitnessCandidate",
    "WitnessEligibility",
]
