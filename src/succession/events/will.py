"""
Domain events raised by the will aggregate.

One event is recorded per accepted mutation. Payloads carry entity ids and
primitive fields only; the authoritative state is the persisted snapshot.
"""

from datetime import datetime
from uuid import UUID

from succession.events.base import DomainEvent


class WillEvent(DomainEvent):
    """Common base for events on the Will aggregate."""

    aggregate_type: str = "Will"


# =============================================================================
# Document events
# =============================================================================


class WillCreated(WillEvent):
    testator_id: str
    will_type: str
    title: str | None = None


class WillClausesUpdated(WillEvent):
    changed_fields: list[str]


class CapacityDeclarationUpdated(WillEvent):
    capacity_status: str
    confers_capacity: bool


class StorageLocationUpdated(WillEvent):
    storage_location: str
    storage_details: str | None = None


# =============================================================================
# Lifecycle events
# =============================================================================


class WillSubmittedForAttestation(WillEvent):
    bequest_count: int
    executor_count: int


class WillReturnedToDraft(WillEvent):
    previous_status: str
    reason: str | None = None


class WillAttested(WillEvent):
    witness_count: int
    executed_at: datetime
    location: str


class WillActivated(WillEvent):
    activated_at: datetime


class WillRevoked(WillEvent):
    previous_status: str
    method: str
    reason: str | None = None
    court_order_ref: str | None = None


class WillSuperseded(WillEvent):
    superseded_by: UUID


class WillContested(WillEvent):
    previous_status: str
    contested_by: str
    grounds: str


class WillContestResolved(WillEvent):
    upheld: bool
    resolution: str | None = None


class ProbateFiled(WillEvent):
    case_number: str
    registry: str
    filed_by: str | None = None


class WillExecuted(WillEvent):
    granted_at: datetime


# =============================================================================
# Witness events
# =============================================================================


class WitnessAdded(WillEvent):
    witness_id: UUID
    witness_name: str
    person_key: str
    is_eligible: bool


class WitnessSigned(WillEvent):
    witness_id: UUID
    signature_method: str
    signed_at: datetime


class WitnessVerified(WillEvent):
    witness_id: UUID
    verified_by: str


class WitnessRejected(WillEvent):
    witness_id: UUID
    reason: str


# =============================================================================
# Executor events
# =============================================================================


class ExecutorAdded(WillEvent):
    executor_id: UUID
    executor_name: str
    person_key: str
    role: str


class ExecutorNotified(WillEvent):
    executor_id: UUID


class ExecutorAccepted(WillEvent):
    executor_id: UUID


class ExecutorDeclined(WillEvent):
    executor_id: UUID
    reason: str | None = None


class ExecutorRemoved(WillEvent):
    executor_id: UUID
    reason: str | None = None


# =============================================================================
# Bequest events
# =============================================================================


class BequestAdded(WillEvent):
    bequest_id: UUID
    beneficiary_name: str
    person_key: str
    share_kind: str
    percentage: str | None = None
    asset_id: str | None = None


class BequestRevoked(WillEvent):
    bequest_id: UUID
    reason: str | None = None


# =============================================================================
# Codicil events
# =============================================================================


class CodicilAdded(WillEvent):
    codicil_id: UUID
    sequence_number: int
    codicil_type: str
    affected_clauses: list[str]


class CodicilWitnessed(WillEvent):
    codicil_id: UUID
    witness_name: str
    attestation_count: int
    fully_witnessed: bool


class CodicilActivated(WillEvent):
    codicil_id: UUID
    version_number: int


# =============================================================================
# Disinheritance events
# =============================================================================


class DisinheritanceAdded(WillEvent):
    record_id: UUID
    person_name: str
    person_key: str
    relationship: str
    reason: str
    severity: str
    risk_level: str


class DisinheritanceWithdrawn(WillEvent):
    record_id: UUID
    reason: str | None = None


__all__ = [
    "WillEvent",
    "WillCreated",
    "WillClausesUpdated",
    "CapacityDeclarationUpdated",
    "StorageLocationUpdated",
    "WillSubmittedForAttestation",
    "WillReturnedToDraft",
    "WillAttested",
    "WillActivated",
    "WillRevoked",
    "WillSuperseded",
    "WillContested",
    "WillContestResolved",
    "ProbateFiled",
    "WillExecuted",
    "WitnessAdded",
    "WitnessSigned",
    "WitnessVerified",
    "WitnessRejected",
    "ExecutorAdded",
    "ExecutorNotified",
    "ExecutorAccepted",
    "ExecutorDeclined",
    "ExecutorRemoved",
    "BequestAdded",
    "BequestRevoked",
    "CodicilAdded",
    "CodicilWitnessed",
    "CodicilActivated",
    "DisinheritanceAdded",
    "DisinheritanceWithdrawn",
]
