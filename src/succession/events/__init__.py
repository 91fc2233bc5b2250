"""Domain events for the succession package."""

from succession.events.base import DomainEvent
from succession.events.will import (
    BequestAdded,
    BequestRevoked,
    CapacityDeclarationUpdated,
    CodicilActivated,
    CodicilAdded,
    CodicilWitnessed,
    DisinheritanceAdded,
    DisinheritanceWithdrawn,
    ExecutorAccepted,
    ExecutorAdded,
    ExecutorDeclined,
    ExecutorNotified,
    ExecutorRemoved,
    ProbateFiled,
    StorageLocationUpdated,
    WillActivated,
    WillAttested,
    WillClausesUpdated,
    WillContested,
    WillContestResolved,
    WillCreated,
    WillEvent,
    WillExecuted,
    WillReturnedToDraft,
    WillRevoked,
    WillSubmittedForAttestation,
    WillSuperseded,
    WitnessAdded,
    WitnessRejected,
    WitnessSigned,
    WitnessVerified,
)

__all__ = [
    "DomainEvent",
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
