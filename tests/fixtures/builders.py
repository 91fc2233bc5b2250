"""
Builders for people, entities and wills at each lifecycle stage.

Each ``*_will`` builder starts from the previous stage, so an attested will
has been through create, capacity, executor, bequest, witnesses, submission
and signing. None of them save anything; pass the result to a repository
when a test needs it stored.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from succession.aggregates.will import WillAggregate
from succession.config import DEFAULT_RULES, ComplianceRules
from succession.entities.bequest import (
    Bequest,
    PercentageShare,
    ResiduaryShare,
    SpecificAssetShare,
)
from succession.entities.disinheritance import DisinheritanceRecord
from succession.entities.executor import ExecutorCapacity, ExecutorNomination, ExecutorRole
from succession.entities.witness import SignatureMethod, WitnessDeclarations, WitnessSignature
from succession.values.capacity import CapacityDeclaration, CapacityStatus
from succession.values.eligibility import WitnessCandidate
from succession.values.persons import ExternalPerson, RegisteredPerson
from succession.values.risk import (
    DisinheritanceReason,
    DisinheritanceSeverity,
    PersonRelationship,
)
from succession.values.will_type import WillType

TESTATOR_ID = "user-testator"
EXECUTOR_USER_ID = "user-executor"
BENEFICIARY_NAME = "Amani Otieno"
WITNESS_NAMES = ("Peter Mwangi", "Mary Achieng")
ADULT_DOB = date(1980, 1, 1)


# =============================================================================
# People and entities
# =============================================================================


def registered(full_name: str, user_id: str | None = None, **kwargs) -> RegisteredPerson:
    return RegisteredPerson(
        user_id=user_id or f"user-{full_name.lower().replace(' ', '-')}",
        full_name=full_name,
        **kwargs,
    )


def external(full_name: str, **kwargs) -> ExternalPerson:
    return ExternalPerson(full_name=full_name, **kwargs)


def adult_candidate(
    full_name: str = "Peter Mwangi",
    national_id: str | None = None,
    **overrides,
) -> WitnessCandidate:
    """An adult of sound mind with no connection to the will."""
    fields = {
        "person": ExternalPerson(full_name=full_name, national_id=national_id),
        "date_of_birth": ADULT_DOB,
        "has_mental_capacity": True,
    }
    fields.update(overrides)
    return WitnessCandidate(**fields)


def competent_declaration(age: int = 55) -> CapacityDeclaration:
    return CapacityDeclaration(
        status=CapacityStatus.ASSESSED_COMPETENT,
        testator_age=age,
        understands_nature_of_will=True,
        understands_extent_of_property=True,
        understands_claims_of_dependants=True,
        free_from_undue_influence=True,
    )


def nomination(
    full_name: str = "Grace Njeri",
    role: ExecutorRole = ExecutorRole.PRIMARY,
    capacity: ExecutorCapacity = ExecutorCapacity.COMPETENT,
    order_of_priority: int = 1,
    user_id: str | None = None,
) -> ExecutorNomination:
    return ExecutorNomination(
        nominee=registered(full_name, user_id=user_id),
        role=role,
        capacity=capacity,
        order_of_priority=order_of_priority,
    )


def residuary_bequest(
    full_name: str = BENEFICIARY_NAME,
    percentage: Decimal | str = "100",
    **kwargs,
) -> Bequest:
    return Bequest(
        beneficiary=external(full_name),
        share=ResiduaryShare(percentage=Decimal(percentage)),
        **kwargs,
    )


def percentage_bequest(full_name: str, percentage: Decimal | str, **kwargs) -> Bequest:
    return Bequest(
        beneficiary=external(full_name),
        share=PercentageShare(percentage=Decimal(percentage)),
        **kwargs,
    )


def asset_bequest(full_name: str, asset_id: str, **kwargs) -> Bequest:
    return Bequest(
        beneficiary=external(full_name),
        share=SpecificAssetShare(asset_id=asset_id),
        **kwargs,
    )


def disinheritance(
    full_name: str = "Brian Kamau",
    relationship: PersonRelationship = PersonRelationship.CHILD,
    reason: DisinheritanceReason = DisinheritanceReason.PERSONAL,
    justification: str = "Estranged for many years",
    severity: DisinheritanceSeverity = DisinheritanceSeverity.COMPLETE,
    **kwargs,
) -> DisinheritanceRecord:
    return DisinheritanceRecord(
        person=external(full_name),
        relationship=relationship,
        reason=reason,
        justification=justification,
        severity=severity,
        **kwargs,
    )


def physical_signature(signed_at: datetime | None = None) -> WitnessSignature:
    return WitnessSignature(
        method=SignatureMethod.PHYSICAL,
        signed_at=signed_at or datetime.now(UTC),
    )


# =============================================================================
# Wills by lifecycle stage
# =============================================================================


def created_will(
    will_id: UUID | None = None,
    rules: ComplianceRules = DEFAULT_RULES,
    testator_id: str = TESTATOR_ID,
    will_type: WillType = WillType.STANDARD,
    supersedes_will_id: UUID | None = None,
) -> WillAggregate:
    will = WillAggregate(will_id or uuid4(), rules=rules)
    will.create(
        testator_id=testator_id,
        will_type=will_type,
        title="Last Will and Testament",
        supersedes_will_id=supersedes_will_id,
    )
    return will


def draft_will(
    will_id: UUID | None = None,
    rules: ComplianceRules = DEFAULT_RULES,
    testator_id: str = TESTATOR_ID,
    extra_bequests: tuple[Bequest, ...] = (),
    supersedes_will_id: UUID | None = None,
) -> WillAggregate:
    """A complete draft: capacity, one primary executor and a full residuary gift."""
    will = created_will(will_id, rules, testator_id, supersedes_will_id=supersedes_will_id)
    will.update_capacity_declaration(competent_declaration())
    will.add_executor(nomination(user_id=EXECUTOR_USER_ID))
    will.add_bequest(residuary_bequest())
    for bequest in extra_bequests:
        will.add_bequest(bequest)
    return will


def add_standard_witnesses(will: WillAggregate) -> list[UUID]:
    return [
        will.add_witness(adult_candidate(name, national_id=f"ID-{i}"))
        for i, name in enumerate(WITNESS_NAMES, start=1)
    ]


def pending_will(will_id: UUID | None = None, **kwargs) -> WillAggregate:
    will = draft_will(will_id, **kwargs)
    add_standard_witnesses(will)
    will.submit_for_attestation()
    return will


def sign_all(will: WillAggregate, signed_at: datetime | None = None) -> None:
    for witness in will.active_witnesses():
        will.sign_witness(
            witness.id, physical_signature(signed_at), WitnessDeclarations.affirmed()
        )


def signed_will(will_id: UUID | None = None, **kwargs) -> WillAggregate:
    will = pending_will(will_id, **kwargs)
    sign_all(will)
    return will


def attested_will(will_id: UUID | None = None, **kwargs) -> WillAggregate:
    will = signed_will(will_id, **kwargs)
    will.attest(location="Nairobi")
    return will


def active_will(will_id: UUID | None = None, **kwargs) -> WillAggregate:
    will = attested_will(will_id, **kwargs)
    will.activate()
    return will


__all__ = [
    "TESTATOR_ID",
    "EXECUTOR_USER_ID",
    "BENEFICIARY_NAME",
    "WITNESS_NAMES",
    "ADULT_DOB",
    "registered",
    "external",
    "adult_candidate",
    "competent_declaration",
    "nomination",
    "residuary_bequest",
    "percentage_bequest",
    "asset_bequest",
    "disinheritance",
    "physical_signature",
    "created_will",
    "draft_will",
    "add_standard_witnesses",
    "pending_will",
    "sign_all",
    "signed_will",
    "attested_will",
    "active_will",
]
