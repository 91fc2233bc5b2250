"""
Unit tests for WillAggregate.

Covers:
- Creation and the guards that apply before a will exists
- Allocation, asset, witness and disinheritance conflict rules
- Atomicity of rejected mutations
- The lifecycle from DRAFT through EXECUTED, including revocation,
  contest, supersession and codicils
- Event stamping (version, actor, correlation)
"""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from succession.aggregates.will import WillAggregate
from succession.entities.codicil import CodicilAttestation, CodicilStatus, CodicilType
from succession.entities.executor import ExecutorCapacity, ExecutorRole, ExecutorStatus
from succession.entities.witness import WitnessDeclarations, WitnessStatus
from succession.events.will import (
    ProbateFiled,
    WillActivated,
    WillAttested,
    WillCreated,
    WillExecuted,
    WitnessAdded,
)
from succession.exceptions import (
    AllocationExceededError,
    CodicilNotAllowedError,
    DisinheritanceContradictionError,
    DuplicateAssetAssignmentError,
    DuplicatePrimaryExecutorError,
    EntityNotFoundError,
    EntityStateError,
    EntityValidationError,
    InsufficientWitnessesError,
    InvalidTransitionError,
    InvariantViolationError,
    RequirementNotMetError,
    WillNotEditableError,
    WitnessConflictError,
)
from succession.values.records import RevocationMethod, StorageLocation
from succession.values.status import WillStatus
from tests.fixtures import (
    BENEFICIARY_NAME,
    active_will,
    add_standard_witnesses,
    adult_candidate,
    asset_bequest,
    competent_declaration,
    created_will,
    disinheritance,
    draft_will,
    external,
    nomination,
    pending_will,
    percentage_bequest,
    physical_signature,
    residuary_bequest,
    sign_all,
)


def _event_types(will: WillAggregate) -> list[str]:
    return [e.event_type for e in will.uncommitted_events]


def _attested_with_residuary(will_id: UUID, shares: tuple[str, ...]) -> WillAggregate:
    will = created_will(will_id)
    will.update_capacity_declaration(competent_declaration())
    will.add_executor(nomination())
    for name, share in zip(("Amani Otieno", "Jane Wanjiru"), shares, strict=False):
        will.add_bequest(residuary_bequest(name, percentage=share))
    add_standard_witnesses(will)
    will.submit_for_attestation()
    sign_all(will)
    will.attest(location="Nairobi")
    return will


# =============================================================================
# Creation
# =============================================================================


class TestCreation:
    def test_create_records_one_event(self, will_id: UUID) -> None:
        will = WillAggregate(will_id)
        will.create(testator_id="user-1", title="My will")

        assert will.status is WillStatus.DRAFT
        assert will.version == 1
        assert will.testator_id == "user-1"
        [event] = will.uncommitted_events
        assert isinstance(event, WillCreated)
        assert event.aggregate_version == 1
        assert event.will_type == "STANDARD"

    def test_cannot_create_twice(self, new_will: WillAggregate) -> None:
        with pytest.raises(InvariantViolationError, match="already exists") as exc_info:
            new_will.create(testator_id="user-2")
        assert exc_info.value.code == "INVARIANT_VIOLATION"
        assert new_will.version == 1

    def test_testator_required(self, will_id: UUID) -> None:
        will = WillAggregate(will_id)
        with pytest.raises(EntityValidationError):
            will.create(testator_id="")
        assert will.state is None
        assert will.version == 0

    def test_operations_before_create_are_rejected(self, will_id: UUID) -> None:
        will = WillAggregate(will_id)
        with pytest.raises(RequirementNotMetError, match="has not been created"):
            will.add_bequest(residuary_bequest())
        with pytest.raises(RequirementNotMetError):
            will.submit_for_attestation()
        assert not will.has_uncommitted_events

    def test_initial_state_before_create(self, will_id: UUID) -> None:
        will = WillAggregate(will_id)
        assert will.current_state.will_id == will_id
        assert will.status is WillStatus.DRAFT
        assert will.effective_bequests() == []

    def test_update_clauses(self, new_will: WillAggregate) -> None:
        new_will.update_clauses(funeral_wishes="Simple ceremony", residuary_clause="All else to Amani")
        assert new_will.current_state.funeral_wishes == "Simple ceremony"
        assert new_will.has_residuary_disposition()
        assert new_will.uncommitted_events[-1].changed_fields == [
            "funeral_wishes",
            "residuary_clause",
        ]

    def test_update_clauses_requires_a_change(self, new_will: WillAggregate) -> None:
        with pytest.raises(EntityValidationError, match="no clause changes"):
            new_will.update_clauses()


# =============================================================================
# Allocation and assets
# =============================================================================


class TestAllocation:
    def test_percentage_over_limit_is_rejected_atomically(self, will_id: UUID) -> None:
        will = draft_will(will_id, extra_bequests=(percentage_bequest("Jane Wanjiru", "60"),))
        state_before = will.state
        version_before = will.version
        events_before = len(will.uncommitted_events)

        with pytest.raises(AllocationExceededError) as exc_info:
            will.add_bequest(percentage_bequest("Joseph Kariuki", "50"))

        assert exc_info.value.code == "ALLOCATION_EXCEEDS_100"
        assert exc_info.value.allocated == Decimal("60")
        assert not exc_info.value.residuary
        assert will.state is state_before
        assert will.version == version_before
        assert len(will.uncommitted_events) == events_before
        assert will.percentage_allocated() == Decimal("60")

    def test_exactly_one_hundred_percent_is_allowed(self, new_will: WillAggregate) -> None:
        new_will.add_bequest(percentage_bequest("Jane Wanjiru", "60"))
        new_will.add_bequest(percentage_bequest("Joseph Kariuki", "40"))
        assert new_will.percentage_allocated() == Decimal("100")

    def test_residuary_overflow(self, draft: WillAggregate) -> None:
        with pytest.raises(AllocationExceededError) as exc_info:
            draft.add_bequest(residuary_bequest("Jane Wanjiru", percentage="10"))
        assert exc_info.value.residuary
        assert draft.residuary_allocated() == Decimal("100")

    def test_residuary_and_percentage_are_separate_pools(self, draft: WillAggregate) -> None:
        draft.add_bequest(percentage_bequest("Jane Wanjiru", "100"))
        assert draft.percentage_allocated() == Decimal("100")
        assert draft.residuary_allocated() == Decimal("100")

    def test_same_bequest_cannot_be_added_twice(self, new_will: WillAggregate) -> None:
        bequest = percentage_bequest("Jane Wanjiru", "10")
        new_will.add_bequest(bequest)
        version = new_will.version

        with pytest.raises(EntityValidationError, match="already on this will"):
            new_will.add_bequest(bequest)
        assert new_will.version == version
        assert len(new_will.bequests) == 1

    def test_duplicate_asset(self, draft: WillAggregate) -> None:
        draft.add_bequest(asset_bequest("Jane Wanjiru", "land-karen-001"))
        with pytest.raises(DuplicateAssetAssignmentError) as exc_info:
            draft.add_bequest(asset_bequest("Joseph Kariuki", "land-karen-001"))
        assert exc_info.value.code == "DUPLICATE_ASSET_ASSIGNMENT"

    def test_revoked_bequest_frees_the_asset(self, draft: WillAggregate) -> None:
        bequest_id = draft.add_bequest(asset_bequest("Jane Wanjiru", "land-karen-001"))
        draft.revoke_bequest(bequest_id, "Sold during lifetime")
        draft.add_bequest(asset_bequest("Joseph Kariuki", "land-karen-001"))
        assert [b.asset_id for b in draft.effective_bequests() if b.asset_id] == ["land-karen-001"]

    def test_revoked_percentage_is_released(self, new_will: WillAggregate) -> None:
        bequest_id = new_will.add_bequest(percentage_bequest("Jane Wanjiru", "80"))
        new_will.revoke_bequest(bequest_id)
        new_will.add_bequest(percentage_bequest("Joseph Kariuki", "90"))
        assert new_will.percentage_allocated() == Decimal("90")


# =============================================================================
# Conflicts between collections
# =============================================================================


class TestBeneficiaryWitnessConflict:
    def test_beneficiary_cannot_be_added_as_witness(self, draft: WillAggregate) -> None:
        with pytest.raises(WitnessConflictError) as exc_info:
            draft.add_witness(adult_candidate(BENEFICIARY_NAME))
        assert exc_info.value.code == "WITNESS_CONFLICT"
        assert "named as beneficiary" in exc_info.value.reasons[0]
        assert draft.witnesses == ()

    def test_national_id_does_not_hide_a_beneficiary_known_by_name(
        self, draft: WillAggregate
    ) -> None:
        with pytest.raises(WitnessConflictError):
            draft.add_witness(adult_candidate(BENEFICIARY_NAME, national_id="ID-77"))
        assert draft.witnesses == ()

    def test_witness_cannot_become_beneficiary(self, draft: WillAggregate) -> None:
        draft.add_witness(adult_candidate("Joseph Kariuki"))
        with pytest.raises(WitnessConflictError):
            draft.add_bequest(percentage_bequest("Joseph Kariuki", "10"))

    def test_rejected_witness_no_longer_blocks(self, draft: WillAggregate) -> None:
        witness_id = draft.add_witness(adult_candidate("Joseph Kariuki"))
        draft.reject_witness(witness_id, "Will receive a gift instead")
        draft.add_bequest(percentage_bequest("Joseph Kariuki", "10"))
        assert len(draft.effective_bequests()) == 2

    def test_match_by_national_id_across_names(self, draft: WillAggregate) -> None:
        draft.add_witness(adult_candidate("Joseph Kariuki", national_id="12345678"))
        with pytest.raises(WitnessConflictError):
            draft.add_bequest(
                percentage_bequest("J. Kariuki", "10").model_copy(
                    update={"beneficiary": external("J. Kariuki", national_id="12345678")}
                )
            )


class TestDisinheritanceContradiction:
    def test_cannot_disinherit_a_beneficiary(self, draft: WillAggregate) -> None:
        with pytest.raises(DisinheritanceContradictionError) as exc_info:
            draft.add_disinheritance(disinheritance(full_name=BENEFICIARY_NAME))
        assert exc_info.value.existing == "beneficiary"

    def test_cannot_bequeath_to_disinherited_person(self, draft: WillAggregate) -> None:
        draft.add_disinheritance(disinheritance(full_name="Brian Kamau"))
        with pytest.raises(DisinheritanceContradictionError) as exc_info:
            draft.add_bequest(percentage_bequest("Brian Kamau", "10"))
        assert exc_info.value.existing == "disinherited"

    def test_withdrawn_disinheritance_allows_bequest(self, draft: WillAggregate) -> None:
        record_id = draft.add_disinheritance(disinheritance(full_name="Brian Kamau"))
        draft.withdraw_disinheritance(record_id, "Reconciled")
        draft.add_bequest(percentage_bequest("Brian Kamau", "10"))
        assert draft.in_force_disinheritances() == []

    def test_duplicate_disinheritance(self, draft: WillAggregate) -> None:
        draft.add_disinheritance(disinheritance(full_name="Brian Kamau"))
        with pytest.raises(EntityValidationError, match="already disinherited"):
            draft.add_disinheritance(disinheritance(full_name="brian kamau"))


# =============================================================================
# Executors
# =============================================================================


class TestExecutors:
    def test_second_primary_is_rejected(self, draft: WillAggregate) -> None:
        with pytest.raises(DuplicatePrimaryExecutorError) as exc_info:
            draft.add_executor(nomination("Samuel Kiprop"))
        assert exc_info.value.existing_executor_id == draft.primary_executor().id

    def test_alternate_is_allowed(self, draft: WillAggregate) -> None:
        draft.add_executor(
            nomination("Samuel Kiprop", role=ExecutorRole.ALTERNATE, order_of_priority=2)
        )
        assert [e.name for e in draft.active_executors()] == ["Grace Njeri", "Samuel Kiprop"]

    def test_same_person_cannot_be_nominated_twice(self, draft: WillAggregate) -> None:
        existing = draft.primary_executor()
        with pytest.raises(EntityValidationError):
            draft.add_executor(
                nomination(existing.name, role=ExecutorRole.ALTERNATE, user_id=existing.nominee.user_id)
            )

    def test_same_nomination_cannot_be_added_twice(self, new_will: WillAggregate) -> None:
        alternate = nomination("Samuel Kiprop", role=ExecutorRole.ALTERNATE)
        new_will.add_executor(alternate)

        with pytest.raises(EntityValidationError, match="already on this will"):
            new_will.add_executor(alternate)
        assert len(new_will.executors) == 1

    def test_removed_primary_can_be_replaced(self, draft: WillAggregate) -> None:
        draft.remove_executor(draft.primary_executor().id, "Moved abroad")
        draft.add_executor(nomination("Samuel Kiprop"))
        assert draft.primary_executor().name == "Samuel Kiprop"

    def test_remove_only_in_draft(self, pending: WillAggregate) -> None:
        with pytest.raises(WillNotEditableError):
            pending.remove_executor(pending.primary_executor().id)

    def test_notify_accept_on_active_will(self, active: WillAggregate) -> None:
        executor_id = active.primary_executor().id
        active.notify_executor(executor_id)
        active.accept_executor(executor_id)
        assert active.primary_executor().status is ExecutorStatus.ACCEPTED

    def test_decline(self, draft: WillAggregate) -> None:
        executor_id = draft.primary_executor().id
        draft.decline_executor(executor_id, "Too busy")
        assert draft.primary_executor() is None

    def test_unknown_executor(self, draft: WillAggregate) -> None:
        missing = uuid4()
        with pytest.raises(EntityNotFoundError) as exc_info:
            draft.remove_executor(missing)
        assert exc_info.value.code == "ENTITY_NOT_FOUND"
        assert exc_info.value.entity_id == missing
        assert exc_info.value.will_id == draft.aggregate_id


# =============================================================================
# Witnesses
# =============================================================================


class TestWitnesses:
    def test_add_witness_records_eligibility(self, draft: WillAggregate) -> None:
        witness_id = draft.add_witness(adult_candidate("Joseph Kariuki"))
        [witness] = draft.witnesses
        assert witness.id == witness_id
        assert witness.eligibility is not None and witness.eligibility.is_eligible
        event = draft.uncommitted_events[-1]
        assert isinstance(event, WitnessAdded)
        assert event.person_key == "name:joseph kariuki"

    def test_duplicate_witness(self, draft: WillAggregate) -> None:
        draft.add_witness(adult_candidate("Joseph Kariuki"))
        with pytest.raises(EntityValidationError, match="already a witness"):
            draft.add_witness(adult_candidate("Joseph Kariuki"))

    def test_minor_witness_is_rejected(self, draft: WillAggregate) -> None:
        today = datetime.now(UTC).date()
        candidate = adult_candidate("Kevin Otieno", date_of_birth=date(today.year - 16, 1, 1))
        with pytest.raises(WitnessConflictError, match="years old"):
            draft.add_witness(candidate)

    def test_spouse_witness_is_rejected(self, draft: WillAggregate) -> None:
        with pytest.raises(WitnessConflictError, match="Spouse"):
            draft.add_witness(adult_candidate("Ruth Wambui", is_spouse_of_testator=True))

    def test_witness_may_be_added_while_pending(self, pending: WillAggregate) -> None:
        pending.add_witness(adult_candidate("Joseph Kariuki"))
        assert len(pending.active_witnesses()) == 3

    def test_cannot_sign_in_draft(self, draft: WillAggregate) -> None:
        witness_id = draft.add_witness(adult_candidate("Joseph Kariuki"))
        with pytest.raises(WillNotEditableError):
            draft.sign_witness(witness_id, physical_signature(), WitnessDeclarations.affirmed())

    def test_signing_requires_every_declaration(self, pending: WillAggregate) -> None:
        witness = pending.active_witnesses()[0]
        with pytest.raises(EntityValidationError, match="has not affirmed") as exc_info:
            pending.sign_witness(
                witness.id,
                physical_signature(),
                WitnessDeclarations(not_a_beneficiary=True),
            )
        assert exc_info.value.will_id == pending.aggregate_id
        assert pending.attesting_witnesses() == []

    def test_verify_unsigned_witness(self, pending: WillAggregate) -> None:
        witness = pending.active_witnesses()[0]
        with pytest.raises(EntityStateError) as exc_info:
            pending.verify_witness(witness.id, "registrar")
        assert exc_info.value.will_id == pending.aggregate_id

    def test_verify_after_attestation(self, attested: WillAggregate) -> None:
        witness = attested.attesting_witnesses()[0]
        attested.verify_witness(witness.id, "registrar")
        assert attested.witnesses[0].status is WitnessStatus.VERIFIED


# =============================================================================
# Submission and attestation
# =============================================================================


class TestSubmission:
    def test_submit_lists_every_unmet_requirement(self, new_will: WillAggregate) -> None:
        with pytest.raises(RequirementNotMetError) as exc_info:
            new_will.submit_for_attestation()
        assert exc_info.value.unmet == [
            "testamentary capacity not confirmed",
            "no beneficiaries named",
            "no executor nominated",
        ]
        assert new_will.status is WillStatus.DRAFT

    def test_submit(self, draft: WillAggregate) -> None:
        draft.submit_for_attestation()
        assert draft.status is WillStatus.PENDING_ATTESTATION

    def test_pending_will_is_not_editable(self, pending: WillAggregate) -> None:
        with pytest.raises(WillNotEditableError) as exc_info:
            pending.add_bequest(percentage_bequest("Jane Wanjiru", "10"))
        assert exc_info.value.code == "WILL_NOT_EDITABLE"
        assert exc_info.value.status == "PENDING_ATTESTATION"

    def test_return_to_draft_resets_signatures(self, signed: WillAggregate) -> None:
        assert len(signed.attesting_witnesses()) == 2
        signed.return_to_draft("Changing the residuary gift")
        assert signed.status is WillStatus.DRAFT
        assert signed.attesting_witnesses() == []
        assert all(w.status is WitnessStatus.PENDING for w in signed.witnesses)


class TestAttestation:
    def test_attest(self, signed: WillAggregate) -> None:
        signed.attest(location="Nairobi")
        assert signed.status is WillStatus.ATTESTED
        record = signed.current_state.execution_record
        assert record.witness_count == 2
        assert record.location == "Nairobi"
        assert isinstance(signed.uncommitted_events[-1], WillAttested)

    def test_attest_with_one_signature(self, pending: WillAggregate) -> None:
        witness = pending.active_witnesses()[0]
        pending.sign_witness(witness.id, physical_signature(), WitnessDeclarations.affirmed())
        with pytest.raises(InsufficientWitnessesError) as exc_info:
            pending.attest(location="Nairobi")
        assert exc_info.value.required == 2
        assert exc_info.value.actual == 1
        assert pending.status is WillStatus.PENDING_ATTESTATION

    def test_signatures_must_be_simultaneous(self, pending: WillAggregate) -> None:
        now = datetime.now(UTC)
        first, second = pending.active_witnesses()
        pending.sign_witness(
            first.id, physical_signature(now - timedelta(minutes=60)), WitnessDeclarations.affirmed()
        )
        pending.sign_witness(
            second.id, physical_signature(now - timedelta(minutes=15)), WitnessDeclarations.affirmed()
        )
        assert pending.signature_spread() == timedelta(minutes=45)

        with pytest.raises(RequirementNotMetError, match="within 30 minutes"):
            pending.attest(location="Nairobi")

    def test_signatures_inside_window(self, pending: WillAggregate) -> None:
        now = datetime.now(UTC)
        sign_all(pending, signed_at=now - timedelta(minutes=5))
        pending.attest(location="Mombasa", executed_at=now - timedelta(minutes=1))
        assert pending.current_state.execution_record.location == "Mombasa"

    def test_cannot_attest_a_draft(self, draft: WillAggregate) -> None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            draft.attest(location="Nairobi")
        assert exc_info.value.allowed == ["PENDING_ATTESTATION", "REVOKED"]


# =============================================================================
# Activation
# =============================================================================


class TestActivation:
    def test_activate(self, attested: WillAggregate) -> None:
        attested.activate()
        assert attested.status is WillStatus.ACTIVE
        assert attested.current_state.activated_at is not None
        assert all(b.status.value == "ACTIVE" for b in attested.bequests)
        assert isinstance(attested.uncommitted_events[-1], WillActivated)

    def test_disinheritances_become_effective(self, will_id: UUID) -> None:
        will = draft_will(will_id)
        will.add_disinheritance(disinheritance())
        add_standard_witnesses(will)
        will.submit_for_attestation()
        sign_all(will)
        will.attest(location="Nairobi")
        will.activate()
        assert will.disinheritances[0].status.value == "EFFECTIVE"

    def test_activation_needs_residuary_disposition(self, will_id: UUID) -> None:
        will = created_will(will_id)
        will.update_capacity_declaration(competent_declaration())
        will.add_executor(nomination())
        will.add_bequest(percentage_bequest(BENEFICIARY_NAME, "100"))
        add_standard_witnesses(will)
        will.submit_for_attestation()
        sign_all(will)
        will.attest(location="Nairobi")

        with pytest.raises(RequirementNotMetError) as exc_info:
            will.activate()
        assert exc_info.value.unmet == ["no residuary disposition"]
        assert will.status is WillStatus.ATTESTED

    @pytest.mark.parametrize(
        ("shares", "total"),
        [(("40", "40"), "80"), (("40",), "40")],
    )
    def test_activation_needs_residuary_shares_to_total_one_hundred(
        self, will_id: UUID, shares: tuple[str, ...], total: str
    ) -> None:
        will = _attested_with_residuary(will_id, shares)

        with pytest.raises(RequirementNotMetError) as exc_info:
            will.activate()
        assert exc_info.value.unmet == [f"residuary shares total {total}% (must be 100%)"]
        assert will.status is WillStatus.ATTESTED

    def test_residuary_shares_summing_to_one_hundred_activate(self, will_id: UUID) -> None:
        will = _attested_with_residuary(will_id, ("60", "40"))
        will.activate()
        assert will.status is WillStatus.ACTIVE
        assert will.residuary_balanced()

    def test_activation_needs_eligible_executor(self, will_id: UUID) -> None:
        will = created_will(will_id)
        will.update_capacity_declaration(competent_declaration())
        will.add_executor(nomination(capacity=ExecutorCapacity.BANKRUPT))
        will.add_bequest(residuary_bequest())
        add_standard_witnesses(will)
        will.submit_for_attestation()
        sign_all(will)
        will.attest(location="Nairobi")

        with pytest.raises(RequirementNotMetError, match="no eligible active executor"):
            will.activate()


# =============================================================================
# Revocation, contest, supersession, probate
# =============================================================================


class TestRevocation:
    def test_active_will_needs_court_order(self, active: WillAggregate) -> None:
        with pytest.raises(RequirementNotMetError, match="court order"):
            active.revoke(RevocationMethod.DESTRUCTION)
        assert active.status is WillStatus.ACTIVE

        active.revoke(RevocationMethod.COURT_ORDER, court_order_ref="HC-2026-17")
        assert active.status is WillStatus.REVOKED
        assert active.current_state.revocation.court_order_ref == "HC-2026-17"

    def test_revoked_draft_can_return_to_draft(self, draft: WillAggregate) -> None:
        draft.revoke(RevocationMethod.DESTRUCTION, reason="Torn up")
        assert draft.current_state.revocation is not None

        draft.return_to_draft()
        assert draft.status is WillStatus.DRAFT
        assert draft.current_state.revocation is None

    def test_revoked_will_is_closed(self, draft: WillAggregate) -> None:
        draft.revoke(RevocationMethod.NEW_WILL)
        with pytest.raises(WillNotEditableError):
            draft.update_storage_location(StorageLocation.HOME_SAFE)
        with pytest.raises(WillNotEditableError):
            draft.notify_executor(draft.primary_executor().id)

    def test_storage_location_on_active_will(self, active: WillAggregate) -> None:
        active.update_storage_location(StorageLocation.LAWYER_OFFICE, "Kamau & Co. Advocates")
        assert active.current_state.storage_location is StorageLocation.LAWYER_OFFICE


class TestContest:
    def test_contest_blocks_activation_until_resolved(self, active: WillAggregate) -> None:
        active.contest("Brian Kamau", "Undue influence")
        assert active.status is WillStatus.CONTESTED

        with pytest.raises(RequirementNotMetError, match="contest must be resolved first"):
            active.activate()

        active.resolve_contest(upheld=True, resolution="Will upheld")
        assert active.status is WillStatus.ACTIVE
        assert active.current_state.contest.upheld is True

    def test_failed_will_is_revoked_by_court_order(self, active: WillAggregate) -> None:
        active.contest("Brian Kamau", "Lack of capacity")
        active.resolve_contest(upheld=False, resolution="Capacity not established")
        assert active.status is WillStatus.REVOKED
        assert active.current_state.revocation.method is RevocationMethod.COURT_ORDER

    def test_resolve_without_contest(self, active: WillAggregate) -> None:
        with pytest.raises(WillNotEditableError):
            active.resolve_contest(upheld=True)


class TestSupersession:
    def test_supersede(self, active: WillAggregate) -> None:
        new_id = uuid4()
        active.supersede(new_id)
        assert active.status is WillStatus.SUPERSEDED
        assert active.current_state.superseded_by_will_id == new_id
        assert active.status.is_terminal

    def test_cannot_supersede_itself(self, active: WillAggregate) -> None:
        with pytest.raises(EntityValidationError, match="cannot supersede itself"):
            active.supersede(active.aggregate_id)

    def test_draft_cannot_be_superseded(self, draft: WillAggregate) -> None:
        with pytest.raises(InvalidTransitionError):
            draft.supersede(uuid4())


class TestProbate:
    def test_full_path_to_executed(self, active: WillAggregate) -> None:
        active.accept_executor(active.primary_executor().id)
        active.file_for_probate("HC-P-2026-001", "Nairobi High Court", filed_by="Grace Njeri")
        assert active.status is WillStatus.PROBATE

        active.grant_probate()
        assert active.status is WillStatus.EXECUTED
        assert active.current_state.probate.granted_at is not None
        assert isinstance(active.uncommitted_events[-2], ProbateFiled)
        assert isinstance(active.uncommitted_events[-1], WillExecuted)

    def test_probate_needs_an_accepted_executor(self, active: WillAggregate) -> None:
        with pytest.raises(RequirementNotMetError, match="accepted"):
            active.file_for_probate("HC-P-2026-001", "Nairobi High Court")

    def test_executed_will_is_closed(self, active: WillAggregate) -> None:
        active.accept_executor(active.primary_executor().id)
        active.file_for_probate("HC-P-2026-001", "Nairobi High Court")
        active.grant_probate()
        with pytest.raises(InvalidTransitionError):
            active.revoke(RevocationMethod.COURT_ORDER)


# =============================================================================
# Codicils
# =============================================================================


class TestCodicils:
    def test_codicil_not_allowed_on_draft(self, draft: WillAggregate) -> None:
        with pytest.raises(CodicilNotAllowedError) as exc_info:
            draft.add_codicil(CodicilType.ADDITION, "Books", "My books to the library")
        assert exc_info.value.code == "CODICIL_NOT_ALLOWED"

    def test_modification_must_name_clauses(self, active: WillAggregate) -> None:
        with pytest.raises(ValidationError):
            active.add_codicil(CodicilType.MODIFICATION, "Change", "Change the gift")
        assert active.codicils == ()

    def test_revocation_codicil_removes_bequest(self, will_id: UUID) -> None:
        gift = percentage_bequest("Jane Wanjiru", "20", clause_ref="clause-2")
        will = active_will(will_id, extra_bequests=(gift,))
        assert len(will.effective_bequests()) == 2

        codicil_id = will.add_codicil(
            CodicilType.REVOCATION,
            "Revoke gift to Jane",
            "I revoke clause 2 of my will.",
            affected_clauses=("clause-2",),
        )
        with pytest.raises(EntityStateError):
            will.activate_codicil(codicil_id)

        for name in ("Paul Mutua", "Esther Chebet"):
            will.witness_codicil(codicil_id, CodicilAttestation(witness=external(name)))
        assert will.codicils[0].status is CodicilStatus.WITNESSED

        will.activate_codicil(codicil_id)
        assert will.current_state.version_number == 2
        assert [b.beneficiary_name for b in will.effective_bequests()] == [BENEFICIARY_NAME]
        assert will.percentage_allocated() == Decimal("0")

    def test_beneficiary_cannot_witness_codicil(self, active: WillAggregate) -> None:
        codicil_id = active.add_codicil(CodicilType.ADDITION, "Books", "My books to the library")
        with pytest.raises(WitnessConflictError):
            active.witness_codicil(codicil_id, CodicilAttestation(witness=external(BENEFICIARY_NAME)))


# =============================================================================
# Events and queries
# =============================================================================


class TestEvents:
    def test_versions_are_contiguous(self, attested: WillAggregate) -> None:
        versions = [e.aggregate_version for e in attested.uncommitted_events]
        assert versions == list(range(1, attested.version + 1))

    def test_actor_and_correlation_are_stamped(self, will_id: UUID) -> None:
        correlation_id = uuid4()
        will = WillAggregate(will_id)
        will.set_command_context(actor_id="advocate-7", correlation_id=correlation_id)
        will.create(testator_id="user-1")
        [event] = will.uncommitted_events
        assert event.actor_id == "advocate-7"
        assert event.correlation_id == correlation_id
        assert event.aggregate_type == "Will"

    def test_uncommitted_events_is_a_copy(self, draft: WillAggregate) -> None:
        events = draft.uncommitted_events
        events.clear()
        assert len(draft.uncommitted_events) == 4

    def test_mark_committed(self, draft: WillAggregate) -> None:
        draft.mark_events_as_committed()
        assert not draft.has_uncommitted_events
        assert draft.version == 4

    def test_lifecycle_event_sequence(self, active: WillAggregate) -> None:
        assert _event_types(active) == [
            "WillCreated",
            "CapacityDeclarationUpdated",
            "ExecutorAdded",
            "BequestAdded",
            "WitnessAdded",
            "WitnessAdded",
            "WillSubmittedForAttestation",
            "WitnessSigned",
            "WitnessSigned",
            "WillAttested",
            "WillActivated",
        ]


class TestSummary:
    def test_summary(self, active: WillAggregate) -> None:
        summary = active.summary()
        assert summary["status"] == "ACTIVE"
        assert summary["version"] == 11
        assert summary["witness_count"] == 2
        assert summary["signed_witness_count"] == 2
        assert summary["executor_count"] == 1
        assert summary["bequest_count"] == 1
        assert summary["residuary_allocated"] == "100"
        assert summary["has_residuary_disposition"] is True

    def test_witness_violations_empty_for_clean_will(self, attested: WillAggregate) -> None:
        assert attested.witness_violations() == {}
        assert attested.signatures_simultaneous()
