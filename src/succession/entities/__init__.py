"""Child entities owned by the will aggregate."""

from succession.entities.bequest import (
    Bequest,
    BequestStatus,
    FixedAmountShare,
    PercentageShare,
    ResiduaryShare,
    ShareSpec,
    SpecificAssetShare,
)
from succession.entities.codicil import (
    Codicil,
    CodicilAttestation,
    CodicilStatus,
    CodicilType,
)
from succession.entities.disinheritance import DisinheritanceRecord, DisinheritanceStatus
from succession.entities.executor import (
    ExecutorCapacity,
    ExecutorNomination,
    ExecutorRole,
    ExecutorStatus,
)
from succession.entities.witness import (
    SignatureMethod,
    WillWitness,
    WitnessDeclarations,
    WitnessSignature,
    WitnessStatus,
)

__all__ = [
    # Witnesses
    "WillWitness",
    "WitnessStatus",
    "WitnessSignature",
    "WitnessDeclarations",
    "SignatureMethod",
    # Executors
    "ExecutorNomination",
    "ExecutorRole",
    "ExecutorStatus",
    "ExecutorCapacity",
    # Bequests
    "Bequest",
    "BequestStatus",
    "ShareSpec",
    "SpecificAssetShare",
    "PercentageShare",
    "ResiduaryShare",
    "FixedAmountShare",
    # Codicils
    "Codicil",
    "CodicilAttestation",
    "CodicilStatus",
    "CodicilType",
    # Disinheritance
    "DisinheritanceRecord",
    "DisinheritanceStatus",
]
