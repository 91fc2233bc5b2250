"""
Witness attestations (Section 11 LSA).

A witness moves PENDING -> SIGNED -> VERIFIED, or is REJECTED from PENDING
or SIGNED. Signing requires all five legal declarations to be affirmed.
Every transition returns a new ``WillWitness``; instances are never mutated.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from succession.exceptions import EntityStateError, EntityValidationError
from succession.values.eligibility import WitnessCandidate, WitnessEligibility
from succession.values.persons import PersonRef, display_name
from succession.values.records import ensure_not_future


class WitnessStatus(Enum):
    PENDING = "PENDING"
    SIGNED = "SIGNED"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class SignatureMethod(Enum):
    PHYSICAL = "PHYSICAL"
    DIGITAL = "DIGITAL"
    VIDEO = "VIDEO"


class WitnessSignature(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: SignatureMethod
    signed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    location: str | None = None

    @field_validator("signed_at")
    @classmethod
    def _not_in_future(cls, value: datetime) -> datetime:
        return ensure_not_future(value, "Signature timestamp")


class WitnessDeclarations(BaseModel):
    """The five statements a witness affirms when signing."""

    model_config = ConfigDict(frozen=True)

    not_a_beneficiary: bool = False
    not_spouse_of_beneficiary: bool = False
    of_sound_mind: bool = False
    understands_obligation: bool = False
    present_with_testator: bool = False

    @classmethod
    def affirmed(cls) -> WitnessDeclarations:
        return cls(
            not_a_beneficiary=True,
            not_spouse_of_beneficiary=True,
            of_sound_mind=True,
            understands_obligation=True,
            present_with_testator=True,
        )

    @property
    def all_affirmed(self) -> bool:
        return all(getattr(self, name) for name in type(self).model_fields)

    def missing(self) -> list[str]:
        return [name for name in type(self).model_fields if not getattr(self, name)]


class WillWitness(BaseModel):
    """
    A witness to the will and the state of their attestation.

    Attributes:
        id: Witness entity id
        person: Registered or external person descriptor
        date_of_birth: Needed to establish the witness is an adult
        relationship_to_testator: Free-text relationship, e.g. "brother"
        is_spouse_of_testator: Spouses may not witness
        has_criminal_record: Advisory
        has_mental_capacity: None when not assessed
        status: Attestation status
        eligibility: Last eligibility verdict recorded for this witness
        signature: Present once signed
        declarations: Legal declarations affirmed at signing
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    person: PersonRef
    date_of_birth: date | None = None
    relationship_to_testator: str | None = None
    is_spouse_of_testator: bool = False
    has_criminal_record: bool = False
    has_mental_capacity: bool | None = None

    status: WitnessStatus = WitnessStatus.PENDING
    eligibility: WitnessEligibility | None = None
    signature: WitnessSignature | None = None
    declarations: WitnessDeclarations = Field(default_factory=WitnessDeclarations)
    verified_by: str | None = None
    verified_at: datetime | None = None
    rejection_reason: str | None = None
    added_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_candidate(cls, candidate: WitnessCandidate) -> WillWitness:
        return cls(
            person=candidate.person,
            date_of_birth=candidate.date_of_birth,
            relationship_to_testator=candidate.relationship_to_testator,
            is_spouse_of_testator=candidate.is_spouse_of_testator,
            has_criminal_record=candidate.has_criminal_record,
            has_mental_capacity=candidate.has_mental_capacity,
        )

    @property
    def candidate(self) -> WitnessCandidate:
        return WitnessCandidate(
            person=self.person,
            date_of_birth=self.date_of_birth,
            relationship_to_testator=self.relationship_to_testator,
            is_spouse_of_testator=self.is_spouse_of_testator,
            has_criminal_record=self.has_criminal_record,
            has_mental_capacity=self.has_mental_capacity,
        )

    @property
    def name(self) -> str:
        return display_name(self.person)

    @property
    def has_signed(self) -> bool:
        return self.status in (WitnessStatus.SIGNED, WitnessStatus.VERIFIED)

    @property
    def is_rejected(self) -> bool:
        return self.status is WitnessStatus.REJECTED

    def _require(self, operation: str, *allowed: WitnessStatus) -> None:
        if self.status not in allowed:
            raise EntityStateError("witness", self.id, self.status.value, operation)

    def with_eligibility(self, eligibility: WitnessEligibility) -> WillWitness:
        return self.model_copy(update={"eligibility": eligibility})

    def sign(self, signature: WitnessSignature, declarations: WitnessDeclarations) -> WillWitness:
        self._require("sign", WitnessStatus.PENDING)
        if not declarations.all_affirmed:
            raise EntityValidationError(
                "declarations",
                f"witness {self.name} has not affirmed: {', '.join(declarations.missing())}",
            )
        return self.model_copy(
            update={
                "status": WitnessStatus.SIGNED,
                "signature": signature,
                "declarations": declarations,
            }
        )

    def verify(self, verified_by: str, verified_at: datetime | None = None) -> WillWitness:
        self._require("verify", WitnessStatus.SIGNED)
        return self.model_copy(
            update={
                "status": WitnessStatus.VERIFIED,
                "verified_by": verified_by,
                "verified_at": verified_at or datetime.now(UTC),
            }
        )

    def reject(self, reason: str) -> WillWitness:
        self._require("reject", WitnessStatus.PENDING, WitnessStatus.SIGNED)
        return self.model_copy(
            update={"status": WitnessStatus.REJECTED, "rejection_reason": reason}
        )

    def reset(self) -> WillWitness:
        """Discard any signature so the witness can attest again."""
        if self.is_rejected:
            return self
        return self.model_copy(
            update={
                "status": WitnessStatus.PENDING,
                "signature": None,
                "declarations": WitnessDeclarations(),
                "verified_by": None,
                "verified_at": None,
            }
        )


__all__ = [
    "WitnessStatus",
    "SignatureMethod",
    "WitnessSignature",
    "WitnessDeclarations",
    "WillWitness",
]
