"""
The will aggregate.

``WillAggregate`` owns the document state and its five child collections
(witnesses, executors, bequests, codicils, disinheritance records). Every
mutation validates the incoming change and scans the other collections for
conflicts before anything is written. A rejected mutation raises an
``InvariantViolationError`` and leaves state, version and events untouched.
An accepted mutation swaps in a new ``WillState`` and records exactly one
event.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from succession.aggregates.base import AggregateRoot
from succession.config import DEFAULT_RULES, ComplianceRules
from succession.entities.bequest import Bequest
from succession.entities.codicil import Codicil, CodicilAttestation, CodicilStatus, CodicilType
from succession.entities.disinheritance import DisinheritanceRecord
from succession.entities.executor import ExecutorNomination
from succession.entities.witness import WillWitness, WitnessDeclarations, WitnessSignature
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
from succession.exceptions import (
    AllocationExceededError,
    CodicilNotAllowedError,
    DisinheritanceContradictionError,
    DuplicateAssetAssignmentError,
    DuplicatePrimaryExecutorError,
    EntityNotFoundError,
    EntityValidationError,
    InsufficientWitnessesError,
    InvalidTransitionError,
    InvariantViolationError,
    RequirementNotMetError,
    WillNotEditableError,
    WitnessConflictError,
)
from succession.services.witness_eligibility import WitnessEligibilityChecker
from succession.values.capacity import CapacityDeclaration
from succession.values.eligibility import WitnessCandidate, WitnessEligibility
from succession.values.persons import PersonRef, display_name, person_key, same_person
from succession.values.records import (
    ContestRecord,
    ExecutionRecord,
    ProbateRecord,
    RevocationMethod,
    RevocationRecord,
    StorageLocation,
)
from succession.values.status import WillStatus, allowed_transitions, can_transition
from succession.values.will_type import WillType

# Statuses in which nothing about the will may change any more
_CLOSED = frozenset({WillStatus.REVOKED, WillStatus.SUPERSEDED, WillStatus.EXECUTED})


class WillState(BaseModel):
    """Immutable snapshot of a will and its child collections."""

    model_config = ConfigDict(frozen=True)

    will_id: UUID
    testator_id: str | None = None
    title: str | None = None
    will_type: WillType = WillType.STANDARD
    status: WillStatus = WillStatus.DRAFT
    version_number: int = Field(default=1, ge=1)

    capacity_declaration: CapacityDeclaration | None = None
    execution_record: ExecutionRecord | None = None
    revocation: RevocationRecord | None = None

    funeral_wishes: str | None = None
    burial_location: str | None = None
    residuary_clause: str | None = None

    storage_location: StorageLocation | None = None
    storage_details: str | None = None

    probate: ProbateRecord | None = None
    contest: ContestRecord | None = None
    supersedes_will_id: UUID | None = None
    superseded_by_will_id: UUID | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None
    activated_at: datetime | None = None

    witnesses: tuple[WillWitness, ...] = ()
    executors: tuple[ExecutorNomination, ...] = ()
    bequests: tuple[Bequest, ...] = ()
    codicils: tuple[Codicil, ...] = ()
    disinheritances: tuple[DisinheritanceRecord, ...] = ()


class WillAggregate(AggregateRoot[WillState]):
    """
    A testamentary document and its compliance rules.

    Example:
        >>> will = WillAggregate(uuid4())
        >>> will.create(testator_id="user-42")
        >>> will.add_executor(ExecutorNomination(nominee=executor))
        >>> will.add_bequest(Bequest(beneficiary=child, share=ResiduaryShare()))
        >>> will.status
        <WillStatus.DRAFT: 'DRAFT'>
        >>> will.version
        3
    """

    aggregate_type = "Will"
    schema_version = 1

    def __init__(self, aggregate_id: UUID, rules: ComplianceRules = DEFAULT_RULES) -> None:
        super().__init__(aggregate_id)
        self._rules = rules
        self._checker = WitnessEligibilityChecker(rules)

    def _get_initial_state(self) -> WillState:
        return WillState(will_id=self.aggregate_id)

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def rules(self) -> ComplianceRules:
        return self._rules

    @property
    def status(self) -> WillStatus:
        return self.current_state.status

    @property
    def will_type(self) -> WillType:
        return self.current_state.will_type

    @property
    def testator_id(self) -> str | None:
        return self.current_state.testator_id

    @property
    def witnesses(self) -> tuple[WillWitness, ...]:
        return self.current_state.witnesses

    @property
    def executors(self) -> tuple[ExecutorNomination, ...]:
        return self.current_state.executors

    @property
    def bequests(self) -> tuple[Bequest, ...]:
        return self.current_state.bequests

    @property
    def codicils(self) -> tuple[Codicil, ...]:
        return self.current_state.codicils

    @property
    def disinheritances(self) -> tuple[DisinheritanceRecord, ...]:
        return self.current_state.disinheritances

    @property
    def has_capacity(self) -> bool:
        declaration = self.current_state.capacity_declaration
        return declaration is not None and declaration.confers_capacity

    @property
    def minimum_witnesses(self) -> int:
        return self.will_type.minimum_witnesses

    def revoked_clauses(self) -> frozenset[str]:
        clauses: set[str] = set()
        for codicil in self.codicils:
            clauses |= codicil.revokes_clauses
        return frozenset(clauses)

    def effective_bequests(self) -> list[Bequest]:
        """Bequests that are neither revoked nor removed by an active revocation codicil."""
        revoked = self.revoked_clauses()
        return [
            b
            for b in self.bequests
            if not b.is_revoked and (b.clause_ref is None or b.clause_ref not in revoked)
        ]

    def active_witnesses(self) -> list[WillWitness]:
        return [w for w in self.witnesses if not w.is_rejected]

    def attesting_witnesses(self) -> list[WillWitness]:
        """Witnesses who have signed (SIGNED or VERIFIED)."""
        return [w for w in self.witnesses if w.has_signed]

    def active_executors(self) -> list[ExecutorNomination]:
        return sorted(
            (e for e in self.executors if e.is_active),
            key=lambda e: e.order_of_priority,
        )

    def primary_executor(self) -> ExecutorNomination | None:
        for executor in self.active_executors():
            if executor.is_primary:
                return executor
        return None

    def in_force_disinheritances(self) -> list[DisinheritanceRecord]:
        return [d for d in self.disinheritances if d.is_in_force]

    def percentage_allocated(self) -> Decimal:
        """Sum of effective non-residuary percentage shares."""
        return sum(
            (b.percentage for b in self.effective_bequests() if b.percentage is not None),
            Decimal("0"),
        )

    def residuary_allocated(self) -> Decimal:
        """Sum of effective residuary shares."""
        return sum(
            (
                b.residuary_percentage
                for b in self.effective_bequests()
                if b.residuary_percentage is not None
            ),
            Decimal("0"),
        )

    def has_residuary_disposition(self) -> bool:
        if self.current_state.residuary_clause:
            return True
        return any(b.is_residuary for b in self.effective_bequests())

    def residuary_balanced(self) -> bool:
        """True unless residuary shares exist and miss 100 by more than the tolerance."""
        if not any(b.is_residuary for b in self.effective_bequests()):
            return True
        return abs(self.residuary_allocated() - Decimal("100")) <= self._rules.residuary_tolerance

    def signature_spread(self) -> timedelta | None:
        """Time between the first and last witness signature, or None."""
        times = [w.signature.signed_at for w in self.attesting_witnesses() if w.signature]
        if len(times) < 2:
            return None
        return max(times) - min(times)

    def signatures_simultaneous(self) -> bool:
        spread = self.signature_spread()
        return spread is None or spread <= self._rules.signature_window

    def check_witness(self, witness: WillWitness) -> WitnessEligibility:
        return self._checker.recheck(witness, self)

    def witness_violations(self, witnesses: list[WillWitness] | None = None) -> dict[str, list[str]]:
        """Legal impediments of each witness that currently fails eligibility, by name."""
        violations: dict[str, list[str]] = {}
        for witness in self.active_witnesses() if witnesses is None else witnesses:
            verdict = self.check_witness(witness)
            if not verdict.is_eligible:
                violations[witness.name] = [c.description for c in verdict.legal_impediments]
        return violations

    def summary(self) -> dict[str, Any]:
        state = self.current_state
        return {
            "will_id": str(self.aggregate_id),
            "testator_id": state.testator_id,
            "status": state.status.value,
            "will_type": state.will_type.value,
            "version": self.version,
            "version_number": state.version_number,
            "has_capacity": self.has_capacity,
            "witness_count": len(self.active_witnesses()),
            "signed_witness_count": len(self.attesting_witnesses()),
            "executor_count": len(self.active_executors()),
            "bequest_count": len(self.effective_bequests()),
            "codicil_count": len(self.codicils),
            "disinheritance_count": len(self.in_force_disinheritances()),
            "percentage_allocated": str(self.percentage_allocated()),
            "residuary_allocated": str(self.residuary_allocated()),
            "has_residuary_disposition": self.has_residuary_disposition(),
        }

    # =========================================================================
    # Guards
    # =========================================================================

    def _require_created(self, operation: str) -> WillState:
        if self._state is None:
            raise RequirementNotMetError(self.aggregate_id, operation, ["will has not been created"])
        return self._state

    def _require_editable(self, operation: str) -> WillState:
        state = self._require_created(operation)
        if not state.status.is_editable:
            raise WillNotEditableError(self.aggregate_id, state.status.value, operation)
        return state

    def _require_status(self, operation: str, *statuses: WillStatus) -> WillState:
        state = self._require_created(operation)
        if state.status not in statuses:
            raise WillNotEditableError(self.aggregate_id, state.status.value, operation)
        return state

    def _require_open(self, operation: str) -> WillState:
        state = self._require_created(operation)
        if state.status in _CLOSED:
            raise WillNotEditableError(self.aggregate_id, state.status.value, operation)
        return state

    def _ensure_transition(self, target: WillStatus) -> WillState:
        state = self._require_created(f"move to {target.value}")
        if not can_transition(state.status, target):
            raise InvalidTransitionError(
                self.aggregate_id,
                state.status.value,
                target.value,
                [s.value for s in allowed_transitions(state.status)],
            )
        return state

    def _require_codicils_allowed(self) -> WillState:
        state = self._require_created("amend by codicil")
        if not state.status.accepts_codicils:
            raise CodicilNotAllowedError(self.aggregate_id, state.status.value)
        return state

    def _find(self, collection: tuple[Any, ...], entity: str, entity_id: UUID) -> Any:
        for item in collection:
            if item.id == entity_id:
                return item
        raise EntityNotFoundError(self.aggregate_id, entity, entity_id)

    def _ensure_new_id(self, collection: tuple[Any, ...], entity: str, entity_id: UUID) -> None:
        if any(item.id == entity_id for item in collection):
            raise EntityValidationError(
                entity, f"{entity.capitalize()} {entity_id} is already on this will", self.aggregate_id
            )

    def _attach_will_id(self, operation: Callable[[], Any]) -> Any:
        """Run an entity transition, tagging any invariant error with this will's id."""
        try:
            return operation()
        except InvariantViolationError as e:
            if e.will_id is None:
                e.will_id = self.aggregate_id
            raise

    @staticmethod
    def _replace(collection: tuple[Any, ...], updated: Any) -> tuple[Any, ...]:
        return tuple(updated if item.id == updated.id else item for item in collection)

    def _update(self, state: WillState, **changes: Any) -> WillState:
        changes.setdefault("updated_at", datetime.now(UTC))
        return state.model_copy(update=changes)

    # =========================================================================
    # Document
    # =========================================================================

    def create(
        self,
        testator_id: str,
        will_type: WillType = WillType.STANDARD,
        title: str | None = None,
        supersedes_will_id: UUID | None = None,
    ) -> None:
        if self._state is not None:
            raise InvariantViolationError(f"Will {self.aggregate_id} already exists", self.aggregate_id)
        if not testator_id:
            raise EntityValidationError("testator_id", "testator is required", self.aggregate_id)

        now = datetime.now(UTC)
        state = WillState(
            will_id=self.aggregate_id,
            testator_id=testator_id,
            title=title,
            will_type=will_type,
            supersedes_will_id=supersedes_will_id,
            created_at=now,
            updated_at=now,
        )
        self._commit_change(
            state,
            self._new_event(
                WillCreated,
                testator_id=testator_id,
                will_type=will_type.value,
                title=title,
            ),
        )

    def update_clauses(
        self,
        title: str | None = None,
        funeral_wishes: str | None = None,
        burial_location: str | None = None,
        residuary_clause: str | None = None,
    ) -> None:
        """Update free-text clauses. Arguments left as None are unchanged."""
        state = self._require_editable("update clauses")
        changes = {
            name: value
            for name, value in (
                ("title", title),
                ("funeral_wishes", funeral_wishes),
                ("burial_location", burial_location),
                ("residuary_clause", residuary_clause),
            )
            if value is not None
        }
        if not changes:
            raise EntityValidationError("clauses", "no clause changes supplied", self.aggregate_id)

        self._commit_change(
            self._update(state, **changes),
            self._new_event(WillClausesUpdated, changed_fields=sorted(changes)),
        )

    def update_capacity_declaration(self, declaration: CapacityDeclaration) -> None:
        state = self._require_editable("update capacity declaration")
        self._commit_change(
            self._update(state, capacity_declaration=declaration),
            self._new_event(
                CapacityDeclarationUpdated,
                capacity_status=declaration.status.value,
                confers_capacity=declaration.confers_capacity,
            ),
        )

    def update_storage_location(
        self,
        location: StorageLocation,
        details: str | None = None,
    ) -> None:
        state = self._require_open("update storage location")
        self._commit_change(
            self._update(state, storage_location=location, storage_details=details),
            self._new_event(
                StorageLocationUpdated,
                storage_location=location.value,
                storage_details=details,
            ),
        )

    # =========================================================================
    # Witnesses
    # =========================================================================

    def add_witness(self, candidate: WitnessCandidate) -> UUID:
        """
        Add a witness after checking eligibility.

        Raises:
            WillNotEditableError: If the will is past attestation
            EntityValidationError: If the person is already a witness
            WitnessConflictError: If the candidate has a legal impediment
        """
        state = self._require_status(
            "add witness", WillStatus.DRAFT, WillStatus.PENDING_ATTESTATION
        )
        name = display_name(candidate.person)
        if any(same_person(w.person, candidate.person) for w in self.active_witnesses()):
            raise EntityValidationError(
                "witness", f"{name} is already a witness", self.aggregate_id
            )

        eligibility = self._checker.check(candidate, self)
        if not eligibility.is_eligible:
            raise WitnessConflictError(
                self.aggregate_id,
                name,
                [c.description for c in eligibility.legal_impediments],
            )

        witness = WillWitness.from_candidate(candidate).with_eligibility(eligibility)
        self._commit_change(
            self._update(state, witnesses=(*state.witnesses, witness)),
            self._new_event(
                WitnessAdded,
                witness_id=witness.id,
                witness_name=name,
                person_key=person_key(candidate.person),
                is_eligible=eligibility.is_eligible,
            ),
        )
        return witness.id

    def sign_witness(
        self,
        witness_id: UUID,
        signature: WitnessSignature,
        declarations: WitnessDeclarations,
    ) -> None:
        state = self._require_status("record witness signature", WillStatus.PENDING_ATTESTATION)
        witness: WillWitness = self._find(state.witnesses, "witness", witness_id)
        signed = self._attach_will_id(lambda: witness.sign(signature, declarations))
        self._commit_change(
            self._update(state, witnesses=self._replace(state.witnesses, signed)),
            self._new_event(
                WitnessSigned,
                witness_id=witness_id,
                signature_method=signature.method.value,
                signed_at=signature.signed_at,
            ),
        )

    def verify_witness(self, witness_id: UUID, verified_by: str) -> None:
        state = self._require_status(
            "verify witness",
            WillStatus.PENDING_ATTESTATION,
            WillStatus.ATTESTED,
            WillStatus.ACTIVE,
        )
        witness: WillWitness = self._find(state.witnesses, "witness", witness_id)
        verified = self._attach_will_id(lambda: witness.verify(verified_by))
        self._commit_change(
            self._update(state, witnesses=self._replace(state.witnesses, verified)),
            self._new_event(WitnessVerified, witness_id=witness_id, verified_by=verified_by),
        )

    def reject_witness(self, witness_id: UUID, reason: str) -> None:
        state = self._require_status(
            "reject witness", WillStatus.DRAFT, WillStatus.PENDING_ATTESTATION
        )
        witness: WillWitness = self._find(state.witnesses, "witness", witness_id)
        rejected = self._attach_will_id(lambda: witness.reject(reason))
        self._commit_change(
            self._update(state, witnesses=self._replace(state.witnesses, rejected)),
            self._new_event(WitnessRejected, witness_id=witness_id, reason=reason),
        )

    # =========================================================================
    # Executors
    # =========================================================================

    def add_executor(self, nomination: ExecutorNomination) -> UUID:
        state = self._require_editable("add executor")
        self._ensure_new_id(state.executors, "executor", nomination.id)
        name = nomination.name
        if any(same_person(e.nominee, nomination.nominee) for e in self.active_executors()):
            raise EntityValidationError(
                "executor", f"{name} is already nominated as executor", self.aggregate_id
            )
        if nomination.is_primary and nomination.is_active:
            existing = self.primary_executor()
            if existing is not None:
                raise DuplicatePrimaryExecutorError(self.aggregate_id, existing.id)

        self._commit_change(
            self._update(state, executors=(*state.executors, nomination)),
            self._new_event(
                ExecutorAdded,
                executor_id=nomination.id,
                executor_name=name,
                person_key=person_key(nomination.nominee),
                role=nomination.role.value,
            ),
        )
        return nomination.id

    def notify_executor(self, executor_id: UUID) -> None:
        state = self._require_open("notify executor")
        executor: ExecutorNomination = self._find(state.executors, "executor", executor_id)
        notified = self._attach_will_id(executor.notify)
        self._commit_change(
            self._update(state, executors=self._replace(state.executors, notified)),
            self._new_event(ExecutorNotified, executor_id=executor_id),
        )

    def accept_executor(self, executor_id: UUID) -> None:
        state = self._require_open("record executor acceptance")
        executor: ExecutorNomination = self._find(state.executors, "executor", executor_id)
        accepted = self._attach_will_id(executor.accept)
        self._commit_change(
            self._update(state, executors=self._replace(state.executors, accepted)),
            self._new_event(ExecutorAccepted, executor_id=executor_id),
        )

    def decline_executor(self, executor_id: UUID, reason: str | None = None) -> None:
        state = self._require_open("record executor decline")
        executor: ExecutorNomination = self._find(state.executors, "executor", executor_id)
        declined = self._attach_will_id(lambda: executor.decline(reason))
        self._commit_change(
            self._update(state, executors=self._replace(state.executors, declined)),
            self._new_event(ExecutorDeclined, executor_id=executor_id, reason=reason),
        )

    def remove_executor(self, executor_id: UUID, reason: str | None = None) -> None:
        state = self._require_editable("remove executor")
        executor: ExecutorNomination = self._find(state.executors, "executor", executor_id)
        removed = self._attach_will_id(lambda: executor.remove(reason))
        self._commit_change(
            self._update(state, executors=self._replace(state.executors, removed)),
            self._new_event(ExecutorRemoved, executor_id=executor_id, reason=reason),
        )

    # =========================================================================
    # Bequests
    # =========================================================================

    def _check_beneficiary(self, beneficiary: PersonRef) -> None:
        name = display_name(beneficiary)
        if any(same_person(w.person, beneficiary) for w in self.active_witnesses()):
            raise WitnessConflictError(
                self.aggregate_id,
                name,
                [f"{name} is a witness to this will and cannot also be a beneficiary"],
            )
        if any(same_person(d.person, beneficiary) for d in self.in_force_disinheritances()):
            raise DisinheritanceContradictionError(self.aggregate_id, name, "disinherited")

    def add_bequest(self, bequest: Bequest) -> UUID:
        """
        Add a bequest.

        Raises:
            WillNotEditableError: If the will is not a draft
            EntityValidationError: If a bequest with the same id was already added
            WitnessConflictError: If the beneficiary is a witness
            DisinheritanceContradictionError: If the beneficiary is disinherited
            DuplicateAssetAssignmentError: If the asset is already bequeathed
            AllocationExceededError: If percentage or residuary shares would exceed 100
        """
        state = self._require_editable("add bequest")
        self._ensure_new_id(state.bequests, "bequest", bequest.id)
        self._check_beneficiary(bequest.beneficiary)

        effective = self.effective_bequests()
        if bequest.asset_id is not None:
            for existing in effective:
                if existing.asset_id == bequest.asset_id:
                    raise DuplicateAssetAssignmentError(
                        self.aggregate_id, bequest.asset_id, existing.id
                    )

        limit = self._rules.max_allocation_percentage
        if bequest.percentage is not None:
            allocated = self.percentage_allocated()
            if allocated + bequest.percentage > limit:
                raise AllocationExceededError(
                    self.aggregate_id, allocated, bequest.percentage, limit
                )
        if bequest.residuary_percentage is not None:
            allocated = self.residuary_allocated()
            if allocated + bequest.residuary_percentage > limit:
                raise AllocationExceededError(
                    self.aggregate_id,
                    allocated,
                    bequest.residuary_percentage,
                    limit,
                    residuary=True,
                )

        percentage = bequest.percentage or bequest.residuary_percentage
        self._commit_change(
            self._update(state, bequests=(*state.bequests, bequest)),
            self._new_event(
                BequestAdded,
                bequest_id=bequest.id,
                beneficiary_name=bequest.beneficiary_name,
                person_key=person_key(bequest.beneficiary),
                share_kind=bequest.share.kind,
                percentage=str(percentage) if percentage is not None else None,
                asset_id=bequest.asset_id,
            ),
        )
        return bequest.id

    def revoke_bequest(self, bequest_id: UUID, reason: str | None = None) -> None:
        state = self._require_editable("revoke bequest")
        bequest: Bequest = self._find(state.bequests, "bequest", bequest_id)
        revoked = self._attach_will_id(lambda: bequest.revoke(reason))
        self._commit_change(
            self._update(state, bequests=self._replace(state.bequests, revoked)),
            self._new_event(BequestRevoked, bequest_id=bequest_id, reason=reason),
        )

    # =========================================================================
    # Disinheritance
    # =========================================================================

    def add_disinheritance(self, record: DisinheritanceRecord) -> UUID:
        state = self._require_editable("add disinheritance")
        self._ensure_new_id(state.disinheritances, "disinheritance", record.id)
        name = record.person_name
        if any(same_person(d.person, record.person) for d in self.in_force_disinheritances()):
            raise EntityValidationError(
                "disinheritance", f"{name} is already disinherited", self.aggregate_id
            )
        if any(same_person(b.beneficiary, record.person) for b in self.effective_bequests()):
            raise DisinheritanceContradictionError(self.aggregate_id, name, "beneficiary")

        self._commit_change(
            self._update(state, disinheritances=(*state.disinheritances, record)),
            self._new_event(
                DisinheritanceAdded,
                record_id=record.id,
                person_name=name,
                person_key=person_key(record.person),
                relationship=record.relationship.value,
                reason=record.reason.value,
                severity=record.severity.value,
                risk_level=record.risk_level.value,
            ),
        )
        return record.id

    def withdraw_disinheritance(self, record_id: UUID, reason: str | None = None) -> None:
        state = self._require_editable("withdraw disinheritance")
        record: DisinheritanceRecord = self._find(
            state.disinheritances, "disinheritance", record_id
        )
        withdrawn = self._attach_will_id(lambda: record.withdraw(reason))
        self._commit_change(
            self._update(state, disinheritances=self._replace(state.disinheritances, withdrawn)),
            self._new_event(DisinheritanceWithdrawn, record_id=record_id, reason=reason),
        )

    # =========================================================================
    # Codicils
    # =========================================================================

    def add_codicil(
        self,
        codicil_type: CodicilType,
        title: str,
        content: str,
        affected_clauses: tuple[str, ...] = (),
    ) -> UUID:
        """
        Attach a codicil to an attested or active will.

        Raises:
            CodicilNotAllowedError: If the will is not ATTESTED or ACTIVE
            ValidationError: If the codicil fails validation
        """
        state = self._require_codicils_allowed()
        codicil = Codicil(
            sequence_number=len(state.codicils) + 1,
            type=codicil_type,
            title=title,
            content=content,
            affected_clauses=affected_clauses,
        )
        self._commit_change(
            self._update(state, codicils=(*state.codicils, codicil)),
            self._new_event(
                CodicilAdded,
                codicil_id=codicil.id,
                sequence_number=codicil.sequence_number,
                codicil_type=codicil_type.value,
                affected_clauses=list(affected_clauses),
            ),
        )
        return codicil.id

    def witness_codicil(self, codicil_id: UUID, attestation: CodicilAttestation) -> None:
        state = self._require_codicils_allowed()
        codicil: Codicil = self._find(state.codicils, "codicil", codicil_id)
        name = display_name(attestation.witness)
        if any(same_person(b.beneficiary, attestation.witness) for b in self.effective_bequests()):
            raise WitnessConflictError(
                self.aggregate_id,
                name,
                [f"{name} is named as beneficiary in this will"],
            )
        witnessed = self._attach_will_id(lambda: codicil.add_attestation(attestation))
        self._commit_change(
            self._update(state, codicils=self._replace(state.codicils, witnessed)),
            self._new_event(
                CodicilWitnessed,
                codicil_id=codicil_id,
                witness_name=name,
                attestation_count=len(witnessed.attestations),
                fully_witnessed=witnessed.status is CodicilStatus.WITNESSED,
            ),
        )

    def activate_codicil(self, codicil_id: UUID) -> None:
        state = self._require_codicils_allowed()
        codicil: Codicil = self._find(state.codicils, "codicil", codicil_id)
        activated = self._attach_will_id(codicil.activate)
        version_number = state.version_number + 1
        self._commit_change(
            self._update(
                state,
                codicils=self._replace(state.codicils, activated),
                version_number=version_number,
            ),
            self._new_event(
                CodicilActivated, codicil_id=codicil_id, version_number=version_number
            ),
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def submit_for_attestation(self) -> None:
        state = self._ensure_transition(WillStatus.PENDING_ATTESTATION)
        unmet: list[str] = []
        if not self.has_capacity:
            unmet.append("testamentary capacity not confirmed")
        if not self.effective_bequests():
            unmet.append("no beneficiaries named")
        if not self.active_executors():
            unmet.append("no executor nominated")
        if unmet:
            raise RequirementNotMetError(self.aggregate_id, "submit for attestation", unmet)

        self._commit_change(
            self._update(state, status=WillStatus.PENDING_ATTESTATION),
            self._new_event(
                WillSubmittedForAttestation,
                bequest_count=len(self.effective_bequests()),
                executor_count=len(self.active_executors()),
            ),
        )

    def return_to_draft(self, reason: str | None = None) -> None:
        """
        Send a pending or revoked will back to DRAFT.

        Witness signatures are discarded; a revoked will also loses its
        revocation record.
        """
        state = self._ensure_transition(WillStatus.DRAFT)
        changes: dict[str, Any] = {
            "status": WillStatus.DRAFT,
            "witnesses": tuple(w.reset() for w in state.witnesses),
        }
        if state.status is WillStatus.REVOKED:
            changes["revocation"] = None
        self._commit_change(
            self._update(state, **changes),
            self._new_event(
                WillReturnedToDraft, previous_status=state.status.value, reason=reason
            ),
        )

    def _check_signed_witnesses(self) -> list[WillWitness]:
        signed = self.attesting_witnesses()
        if len(signed) < self.minimum_witnesses:
            raise InsufficientWitnessesError(self.aggregate_id, self.minimum_witnesses, len(signed))
        return signed

    def _simultaneity_problem(self) -> str | None:
        if self.signatures_simultaneous():
            return None
        window_minutes = int(self._rules.signature_window.total_seconds() // 60)
        return f"witness signatures not within {window_minutes} minutes of each other"

    def attest(self, location: str, executed_at: datetime | None = None) -> None:
        """
        Record execution of the will before its witnesses.

        Raises:
            InvalidTransitionError: If the will is not pending attestation
            RequirementNotMetError: If capacity is unconfirmed or signatures
                were not simultaneous
            InsufficientWitnessesError: If too few witnesses have signed
            WitnessConflictError: If a signed witness fails eligibility
        """
        state = self._ensure_transition(WillStatus.ATTESTED)
        if not self.has_capacity:
            raise RequirementNotMetError(
                self.aggregate_id, "attest", ["testamentary capacity not confirmed"]
            )
        signed = self._check_signed_witnesses()

        verdicts = {w.id: self.check_witness(w) for w in signed}
        for witness in signed:
            verdict = verdicts[witness.id]
            if not verdict.is_eligible:
                raise WitnessConflictError(
                    self.aggregate_id,
                    witness.name,
                    [c.description for c in verdict.legal_impediments],
                )

        problem = self._simultaneity_problem()
        if problem:
            raise RequirementNotMetError(self.aggregate_id, "attest", [problem])

        signature_times = [w.signature.signed_at for w in signed if w.signature]
        executed = executed_at or max(signature_times, default=datetime.now(UTC))
        record = ExecutionRecord(executed_at=executed, location=location, witness_count=len(signed))
        witnesses = tuple(
            w.with_eligibility(verdicts[w.id]) if w.id in verdicts else w for w in state.witnesses
        )
        self._commit_change(
            self._update(
                state,
                status=WillStatus.ATTESTED,
                execution_record=record,
                witnesses=witnesses,
            ),
            self._new_event(
                WillAttested,
                witness_count=len(signed),
                executed_at=record.executed_at,
                location=record.location,
            ),
        )

    def activate(self) -> None:
        """
        Make an attested will the operative will.

        Raises:
            InvalidTransitionError: If the will cannot move to ACTIVE
            InsufficientWitnessesError: If too few witnesses have signed
            RequirementNotMetError: Listing every other unmet requirement
        """
        state = self._ensure_transition(WillStatus.ACTIVE)
        if state.status is WillStatus.CONTESTED:
            raise RequirementNotMetError(
                self.aggregate_id, "activate", ["contest must be resolved first"]
            )
        signed = self._check_signed_witnesses()

        unmet: list[str] = []
        if not self.has_capacity:
            unmet.append("testamentary capacity not confirmed")
        if not any(e.is_eligible for e in self.active_executors()):
            unmet.append("no eligible active executor")
        if not self.effective_bequests():
            unmet.append("no effective beneficiary")
        if not self.has_residuary_disposition():
            unmet.append("no residuary disposition")
        if not self.residuary_balanced():
            unmet.append(f"residuary shares total {self.residuary_allocated()}% (must be 100%)")
        for name, reasons in self.witness_violations(signed).items():
            unmet.append(f"witness {name} is not eligible ({'; '.join(reasons)})")
        problem = self._simultaneity_problem()
        if problem:
            unmet.append(problem)
        if unmet:
            raise RequirementNotMetError(self.aggregate_id, "activate", unmet)

        now = datetime.now(UTC)
        self._commit_change(
            self._update(
                state,
                status=WillStatus.ACTIVE,
                activated_at=now,
                bequests=tuple(b.activate() for b in state.bequests),
                disinheritances=tuple(d.make_effective() for d in state.disinheritances),
            ),
            self._new_event(WillActivated, activated_at=now),
        )

    def revoke(
        self,
        method: RevocationMethod,
        reason: str | None = None,
        court_order_ref: str | None = None,
        revoked_by: str | None = None,
    ) -> None:
        """
        Revoke the will.

        Revoking an ACTIVE or CONTESTED will requires a court order.
        """
        state = self._ensure_transition(WillStatus.REVOKED)
        if (
            state.status in (WillStatus.ACTIVE, WillStatus.CONTESTED)
            and method is not RevocationMethod.COURT_ORDER
        ):
            raise RequirementNotMetError(
                self.aggregate_id,
                "revoke",
                [f"revoking a {state.status.value} will requires a court order"],
            )

        record = RevocationRecord(
            method=method,
            reason=reason,
            court_order_ref=court_order_ref,
            revoked_by=revoked_by,
        )
        self._commit_change(
            self._update(state, status=WillStatus.REVOKED, revocation=record),
            self._new_event(
                WillRevoked,
                previous_status=state.status.value,
                method=method.value,
                reason=reason,
                court_order_ref=court_order_ref,
            ),
        )

    def supersede(self, new_will_id: UUID) -> None:
        state = self._ensure_transition(WillStatus.SUPERSEDED)
        if new_will_id == self.aggregate_id:
            raise EntityValidationError(
                "superseded_by", "a will cannot supersede itself", self.aggregate_id
            )
        self._commit_change(
            self._update(
                state, status=WillStatus.SUPERSEDED, superseded_by_will_id=new_will_id
            ),
            self._new_event(WillSuperseded, superseded_by=new_will_id),
        )

    def contest(self, contested_by: str, grounds: str) -> None:
        state = self._ensure_transition(WillStatus.CONTESTED)
        record = ContestRecord(contested_by=contested_by, grounds=grounds)
        self._commit_change(
            self._update(state, status=WillStatus.CONTESTED, contest=record),
            self._new_event(
                WillContested,
                previous_status=state.status.value,
                contested_by=contested_by,
                grounds=grounds,
            ),
        )

    def resolve_contest(self, upheld: bool, resolution: str | None = None) -> None:
        """
        Close a contest. An upheld will returns to ACTIVE; otherwise it is
        revoked by court order.
        """
        state = self._require_status("resolve contest", WillStatus.CONTESTED)
        target = WillStatus.ACTIVE if upheld else WillStatus.REVOKED
        self._ensure_transition(target)

        now = datetime.now(UTC)
        contest = state.contest
        if contest is not None:
            contest = contest.model_copy(
                update={"resolved_at": now, "upheld": upheld, "resolution": resolution}
            )
        changes: dict[str, Any] = {"status": target, "contest": contest}
        if not upheld:
            changes["revocation"] = RevocationRecord(
                method=RevocationMethod.COURT_ORDER,
                reason=resolution or "Contest succeeded",
                revoked_at=now,
            )
        self._commit_change(
            self._update(state, **changes),
            self._new_event(WillContestResolved, upheld=upheld, resolution=resolution),
        )

    def file_for_probate(
        self,
        case_number: str,
        registry: str,
        filed_by: str | None = None,
    ) -> None:
        state = self._ensure_transition(WillStatus.PROBATE)
        if not any(e.has_accepted for e in self.active_executors()):
            raise RequirementNotMetError(
                self.aggregate_id, "file for probate", ["no executor has accepted the nomination"]
            )
        record = ProbateRecord(case_number=case_number, registry=registry, filed_by=filed_by)
        self._commit_change(
            self._update(state, status=WillStatus.PROBATE, probate=record),
            self._new_event(
                ProbateFiled, case_number=case_number, registry=registry, filed_by=filed_by
            ),
        )

    def grant_probate(self, granted_at: datetime | None = None) -> None:
        state = self._ensure_transition(WillStatus.EXECUTED)
        granted = granted_at or datetime.now(UTC)
        probate = state.probate
        if probate is not None:
            probate = probate.model_copy(update={"granted_at": granted})
        self._commit_change(
            self._update(state, status=WillStatus.EXECUTED, probate=probate),
            self._new_event(WillExecuted, granted_at=granted),
        )


__all__ = [
    "WillAggregate",
    "WillState",
]
