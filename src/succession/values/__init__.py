"""
Value objects for the will compliance engine.

All value objects are immutable pydantic models or enums with no identity
of their own.
"""

from succession.values.capacity import AssessmentMethod, CapacityDeclaration, CapacityStatus
from succession.values.eligibility import (
    ConflictType,
    WitnessCandidate,
    WitnessConflict,
    WitnessEligibility,
)
from succession.values.money import Money
from succession.values.persons import (
    ExternalPerson,
    PersonRef,
    RegisteredPerson,
    display_name,
    identity_keys,
    person_key,
    same_person,
)
from succession.values.powers import ExecutorPowers
from succession.values.records import (
    ContestRecord,
    ExecutionRecord,
    ProbateRecord,
    RevocationMethod,
    RevocationRecord,
    StorageLocation,
)
from succession.values.risk import (
    DisinheritanceReason,
    DisinheritanceSeverity,
    PersonRelationship,
    RiskLevel,
)
from succession.values.severity import Severity
from succession.values.status import WillStatus, allowed_transitions, can_transition
from succession.values.will_type import WillType

__all__ = [
    # Status and type
    "WillStatus",
    "WillType",
    "allowed_transitions",
    "can_transition",
    # Money
    "Money",
    # Persons
    "RegisteredPerson",
    "ExternalPerson",
    "PersonRef",
    "identity_keys",
    "person_key",
    "same_person",
    "display_name",
    # Capacity
    "CapacityDeclaration",
    "CapacityStatus",
    "AssessmentMethod",
    # Records
    "ExecutionRecord",
    "RevocationMethod",
    "RevocationRecord",
    "StorageLocation",
    "ProbateRecord",
    "ContestRecord",
    # Powers
    "ExecutorPowers",
    # Eligibility
    "Severity",
    "ConflictType",
    "WitnessConflict",
    "WitnessCandidate",
    "WitnessEligibility",
    # Risk
    "RiskLevel",
    "PersonRelationship",
    "DisinheritanceReason",
    "DisinheritanceSeverity",
]
