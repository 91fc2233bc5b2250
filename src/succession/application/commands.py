"""
Command payloads and the command envelope.

Each payload model maps to exactly one ``WillAggregate`` method. Payloads
carry the already-built value objects and entities the method takes; the
envelope adds who is acting, on which will, and the correlation id stamped
on the resulting events.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from succession.entities.bequest import Bequest
from succession.entities.codicil import CodicilAttestation, CodicilType
from succession.entities.disinheritance import DisinheritanceRecord
from succession.entities.executor import ExecutorNomination
from succession.entities.witness import WitnessDeclarations, WitnessSignature
from succession.values.capacity import CapacityDeclaration
from succession.values.eligibility import WitnessCandidate
from succession.values.records import RevocationMethod, StorageLocation
from succession.values.will_type import WillType


class Command(BaseModel):
    """Base class for command payloads."""

    model_config = ConfigDict(frozen=True)

    @property
    def command_type(self) -> str:
        return type(self).__name__


class CommandEnvelope(BaseModel):
    """
    A command addressed to one will.

    Example:
        >>> envelope = CommandEnvelope(
        ...     actor_id="user-42",
        ...     aggregate_id=will_id,
        ...     payload=AttestWill(location="Nairobi"),
        ... )
        >>> result = await handler.handle(envelope)
    """

    model_config = ConfigDict(frozen=True)

    actor_id: str = Field(..., min_length=1)
    aggregate_id: UUID
    payload: SerializeAsAny[Command]
    correlation_id: UUID | None = None

    @property
    def command_type(self) -> str:
        return self.payload.command_type


# =============================================================================
# Document
# =============================================================================


class CreateWill(Command):
    testator_id: str = Field(..., min_length=1)
    will_type: WillType = WillType.STANDARD
    title: str | None = None
    supersedes_will_id: UUID | None = None


class UpdateClauses(Command):
    title: str | None = None
    funeral_wishes: str | None = None
    burial_location: str | None = None
    residuary_clause: str | None = None


class UpdateCapacityDeclaration(Command):
    declaration: CapacityDeclaration


class UpdateStorageLocation(Command):
    location: StorageLocation
    details: str | None = None


# =============================================================================
# Witnesses
# =============================================================================


class AddWitness(Command):
    candidate: WitnessCandidate


class SignWitness(Command):
    witness_id: UUID
    signature: WitnessSignature
    declarations: WitnessDeclarations


class VerifyWitness(Command):
    witness_id: UUID
    verified_by: str = Field(..., min_length=1)


class RejectWitness(Command):
    witness_id: UUID
    reason: str = Field(..., min_length=1)


# =============================================================================
# Executors
# =============================================================================


class AddExecutor(Command):
    nomination: ExecutorNomination


class NotifyExecutor(Command):
    executor_id: UUID


class AcceptExecutor(Command):
    executor_id: UUID


class DeclineExecutor(Command):
    executor_id: UUID
    reason: str | None = None


class RemoveExecutor(Command):
    executor_id: UUID
    reason: str | None = None


# =============================================================================
# Bequests and disinheritance
# =============================================================================


class AddBequest(Command):
    bequest: Bequest


class RevokeBequest(Command):
    bequest_id: UUID
    reason: str | None = None


class AddDisinheritance(Command):
    record: DisinheritanceRecord


class WithdrawDisinheritance(Command):
    record_id: UUID
    reason: str | None = None


# =============================================================================
# Codicils
# =============================================================================


class AddCodicil(Command):
    codicil_type: CodicilType
    title: str
    content: str
    affected_clauses: tuple[str, ...] = ()


class WitnessCodicil(Command):
    codicil_id: UUID
    attestation: CodicilAttestation


class ActivateCodicil(Command):
    codicil_id: UUID


# =============================================================================
# Lifecycle
# =============================================================================


class SubmitForAttestation(Command):
    pass


class ReturnToDraft(Command):
    reason: str | None = None


class AttestWill(Command):
    location: str = Field(..., min_length=1)
    executed_at: datetime | None = None


class ActivateWill(Command):
    pass


class RevokeWill(Command):
    method: RevocationMethod
    reason: str | None = None
    court_order_ref: str | None = None
    revoked_by: str | None = None


class SupersedeWill(Command):
    """
    Replace the addressed will with ``new_will_id``.

    The addressed will is superseded and the new will is activated in one
    transaction.
    """

    new_will_id: UUID


class ContestWill(Command):
    contested_by: str = Field(..., min_length=1)
    grounds: str = Field(..., min_length=1)


class ResolveContest(Command):
    upheld: bool
    resolution: str | None = None


class FileForProbate(Command):
    case_number: str = Field(..., min_length=1)
    registry: str = Field(..., min_length=1)
    filed_by: str | None = None


class GrantProbate(Command):
    granted_at: datetime | None = None


__all__ = [
    "Command",
    "CommandEnvelope",
    # Document
    "CreateWill",
    "UpdateClauses",
    "UpdateCapacityDeclaration",
    "UpdateStorageLocation",
    # Witnesses
    "AddWitness",
    "SignWitness",
    "VerifyWitness",
    "RejectWitness",
    # Executors
    "AddExecutor",
    "NotifyExecutor",
    "AcceptExecutor",
    "DeclineExecutor",
    "RemoveExecutor",
    # Bequests and disinheritance
    "AddBequest",
    "RevokeBequest",
    "AddDisinheritance",
    "WithdrawDisinheritance",
    # Codicils
    "AddCodicil",
    "WitnessCodicil",
    "ActivateCodicil",
    # Lifecycle
    "SubmitForAttestation",
    "ReturnToDraft",
    "AttestWill",
    "ActivateWill",
    "RevokeWill",
    "SupersedeWill",
    "ContestWill",
    "ResolveContest",
    "FileForProbate",
    "GrantProbate",
]
