"""
Codicils: amendments to an attested or active will.

Each codicil carries its own attestation: DRAFT -> WITNESSED once two
witnesses have attested, then ACTIVE. Modification and revocation codicils
must name the clauses they affect.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from succession.exceptions import EntityStateError, EntityValidationError
from succession.values.persons import PersonRef, display_name, same_person
from succession.values.records import ensure_not_future

REQUIRED_CODICIL_ATTESTATIONS = 2


class CodicilType(Enum):
    ADDITION = "ADDITION"
    MODIFICATION = "MODIFICATION"
    REVOCATION = "REVOCATION"


class CodicilStatus(Enum):
    DRAFT = "DRAFT"
    WITNESSED = "WITNESSED"
    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"


class CodicilAttestation(BaseModel):
    model_config = ConfigDict(frozen=True)

    witness: PersonRef
    attested_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("attested_at")
    @classmethod
    def _not_in_future(cls, value: datetime) -> datetime:
        return ensure_not_future(value, "Codicil attestation")


class Codicil(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    sequence_number: int = Field(..., ge=1)
    type: CodicilType
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=10_000)
    affected_clauses: tuple[str, ...] = ()
    status: CodicilStatus = CodicilStatus.DRAFT
    attestations: tuple[CodicilAttestation, ...] = ()
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    activated_at: datetime | None = None

    @model_validator(mode="after")
    def _check_affected_clauses(self) -> Codicil:
        if self.type is not CodicilType.ADDITION and not self.affected_clauses:
            raise ValueError(f"{self.type.value} codicil must reference the clauses it affects")
        return self

    @property
    def is_active(self) -> bool:
        return self.status is CodicilStatus.ACTIVE

    @property
    def revokes_clauses(self) -> frozenset[str]:
        """Clauses removed from the will by this codicil while it is active."""
        if self.is_active and self.type is CodicilType.REVOCATION:
            return frozenset(self.affected_clauses)
        return frozenset()

    def add_attestation(self, attestation: CodicilAttestation) -> Codicil:
        if self.status is not CodicilStatus.DRAFT:
            raise EntityStateError("codicil", self.id, self.status.value, "witness")
        if any(same_person(a.witness, attestation.witness) for a in self.attestations):
            raise EntityValidationError(
                "attestations",
                f"{display_name(attestation.witness)} has already attested codicil {self.sequence_number}",
            )
        attestations = (*self.attestations, attestation)
        status = self.status
        if len(attestations) >= REQUIRED_CODICIL_ATTESTATIONS:
            status = CodicilStatus.WITNESSED
        return self.model_copy(update={"attestations": attestations, "status": status})

    def activate(self, at: datetime | None = None) -> Codicil:
        if self.status is not CodicilStatus.WITNESSED:
            raise EntityStateError("codicil", self.id, self.status.value, "activate")
        return self.model_copy(
            update={"status": CodicilStatus.ACTIVE, "activated_at": at or datetime.now(UTC)}
        )

    def revoke(self) -> Codicil:
        if self.status is CodicilStatus.REVOKED:
            raise EntityStateError("codicil", self.id, self.status.value, "revoke")
        return self.model_copy(update={"status": CodicilStatus.REVOKED})


__all__ = [
    "CodicilType",
    "CodicilStatus",
    "CodicilAttestation",
    "Codicil",
    "REQUIRED_CODICIL_ATTESTATIONS",
]
