"""
Unit tests for ReadinessValidator.

Scores are computed from the default rules: 25/15/10/5 per CRITICAL/HIGH/
MEDIUM/LOW error and 3 per warning.
"""

from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from uuid import UUID

import pytest

from succession.aggregates.will import WillAggregate
from succession.config import ComplianceRules
from succession.entities.executor import ExecutorCapacity, ExecutorRole
from succession.entities.witness import WitnessDeclarations
from succession.services.readiness import ReadinessError, ReadinessTier, ReadinessValidator
from succession.values.records import StorageLocation
from succession.values.severity import Severity
from tests.fixtures import (
    add_standard_witnesses,
    adult_candidate,
    competent_declaration,
    created_will,
    disinheritance,
    draft_will,
    nomination,
    percentage_bequest,
    physical_signature,
    residuary_bequest,
    sign_all,
)


def _with_alternate(will: WillAggregate) -> WillAggregate:
    will.add_executor(
        nomination("Samuel Kiprop", role=ExecutorRole.ALTERNATE, order_of_priority=2)
    )
    return will


# =============================================================================
# Attestation tier
# =============================================================================


class TestAttestationTier:
    def test_draft_without_witnesses(
        self, validator: ReadinessValidator, draft: WillAggregate
    ) -> None:
        report = validator.validate_for_attestation(draft)

        assert not report.is_valid
        assert report.error_codes == ["INSUFFICIENT_WITNESSES"]
        assert report.errors[0].severity is Severity.CRITICAL
        assert report.errors[0].context == {"required": 2, "current": 0}
        assert report.warning_codes == ["NO_ALTERNATE_EXECUTORS"]
        assert report.score == 72
        assert report.recommendations == ("Nominate at least one alternate executor",)

    def test_bare_will(self, validator: ReadinessValidator, new_will: WillAggregate) -> None:
        report = validator.validate_for_attestation(new_will)

        assert report.error_codes == [
            "MISSING_CAPACITY_DECLARATION",
            "NO_EXECUTOR_NOMINATED",
            "NO_BENEFICIARIES",
            "INSUFFICIENT_WITNESSES",
        ]
        assert report.errors[1].severity is Severity.HIGH
        assert report.warning_codes == ["NO_RESIDUARY_PROVISION"]
        assert report.score == 7

    def test_signed_will_is_valid(
        self, validator: ReadinessValidator, signed: WillAggregate
    ) -> None:
        report = validator.validate_for_attestation(signed)
        assert report.is_valid
        assert report.score == 97

    def test_complete_draft(self, validator: ReadinessValidator, draft: WillAggregate) -> None:
        _with_alternate(draft)
        add_standard_witnesses(draft)

        report = validator.validate(draft, ReadinessTier.ATTESTATION)
        assert report.tier is ReadinessTier.ATTESTATION
        assert report.is_valid
        assert report.warnings == ()
        assert report.score == 100
        assert report.recommendations == ("Will appears complete - proceed with witnessing",)

    def test_incapable_testator(
        self, validator: ReadinessValidator, new_will: WillAggregate
    ) -> None:
        new_will.update_capacity_declaration(competent_declaration(age=17))
        report = validator.validate_for_attestation(new_will)
        assert report.has_error("LACKS_TESTAMENTARY_CAPACITY")
        assert not report.has_error("MISSING_CAPACITY_DECLARATION")

    def test_no_eligible_executor(
        self, validator: ReadinessValidator, new_will: WillAggregate
    ) -> None:
        new_will.add_executor(nomination(capacity=ExecutorCapacity.MINOR))
        report = validator.validate_for_attestation(new_will)
        assert report.has_error("NO_ELIGIBLE_EXECUTOR")
        assert report.errors_with(Severity.CRITICAL)
        assert not report.has_warning("NO_PRIMARY_EXECUTOR")

    def test_no_primary_executor(
        self, validator: ReadinessValidator, new_will: WillAggregate
    ) -> None:
        new_will.add_executor(nomination(role=ExecutorRole.ALTERNATE))
        report = validator.validate_for_attestation(new_will)
        assert report.has_warning("NO_PRIMARY_EXECUTOR")
        assert not report.has_warning("NO_ALTERNATE_EXECUTORS")
        assert "Designate one executor as primary" in report.recommendations

    def test_residuary_shares_must_total_one_hundred(
        self, validator: ReadinessValidator, will_id: UUID
    ) -> None:
        will = created_will(will_id)
        will.add_bequest(residuary_bequest("Amani Otieno", percentage="50"))
        will.add_bequest(residuary_bequest("Jane Wanjiru", percentage="30"))

        report = validator.validate_for_attestation(will)
        [mismatch] = [e for e in report.errors if e.code == "RESIDUARY_PERCENTAGE_MISMATCH"]
        assert mismatch.severity is Severity.HIGH
        assert mismatch.context["total_percentage"] == "80"

    def test_single_partial_residuary_is_a_mismatch(
        self, validator: ReadinessValidator, will_id: UUID
    ) -> None:
        will = created_will(will_id)
        will.add_bequest(residuary_bequest(percentage="40"))
        report = validator.validate_for_attestation(will)
        [mismatch] = [e for e in report.errors if e.code == "RESIDUARY_PERCENTAGE_MISMATCH"]
        assert mismatch.context["total_percentage"] == "40"

    def test_residuary_shares_totalling_one_hundred(
        self, validator: ReadinessValidator, will_id: UUID
    ) -> None:
        will = created_will(will_id)
        will.add_bequest(residuary_bequest("Amani Otieno", percentage="60"))
        will.add_bequest(residuary_bequest("Jane Wanjiru", percentage="40"))
        report = validator.validate_for_attestation(will)
        assert not report.has_error("RESIDUARY_PERCENTAGE_MISMATCH")

    def test_error_defaults(self, validator: ReadinessValidator, draft: WillAggregate) -> None:
        report = validator.validate_for_attestation(draft)
        error = report.errors[0]
        assert error.field == "witnesses"
        assert error.legal_reference is not None

        first, second = ReadinessError("A", "a", Severity.LOW), ReadinessError("B", "b", Severity.LOW)
        assert first.field is None
        assert first.context == {}
        assert first.context is not second.context

    def test_percentage_over_limit_under_looser_will_rules(
        self, validator: ReadinessValidator, will_id: UUID
    ) -> None:
        loose = ComplianceRules(max_allocation_percentage=Decimal("150"))
        will = created_will(will_id, rules=loose)
        will.add_bequest(percentage_bequest("Amani Otieno", "80"))
        will.add_bequest(percentage_bequest("Jane Wanjiru", "40"))

        report = validator.validate_for_attestation(will)
        [error] = [e for e in report.errors if e.code == "PERCENTAGE_EXCEEDS_100"]
        assert error.context["excess"] == "20"

    def test_disinheritance_warnings(
        self, validator: ReadinessValidator, draft: WillAggregate
    ) -> None:
        draft.add_disinheritance(disinheritance())
        report = validator.validate_for_attestation(draft)

        assert report.has_warning("HIGH_RISK_DISINHERITANCE")
        assert report.has_warning("WEAK_DISINHERITANCE")
        assert "Seek legal counsel before finalizing high-risk disinheritance" in report.recommendations
        assert "Provide detailed written statement for disinheritance" in report.recommendations

    def test_recommendations_are_not_repeated(
        self, validator: ReadinessValidator, draft: WillAggregate
    ) -> None:
        draft.add_disinheritance(disinheritance("Brian Kamau"))
        draft.add_disinheritance(disinheritance("Cynthia Kamau"))
        report = validator.validate_for_attestation(draft)

        assert report.warning_codes.count("WEAK_DISINHERITANCE") == 2
        assert len(report.recommendations) == len(set(report.recommendations))


# =============================================================================
# Witness compliance
# =============================================================================


class TestWitnessCompliance:
    def test_signatures_not_simultaneous(
        self, validator: ReadinessValidator, pending: WillAggregate
    ) -> None:
        now = datetime.now(UTC)
        first, second = pending.active_witnesses()
        pending.sign_witness(
            first.id, physical_signature(now - timedelta(minutes=50)), WitnessDeclarations.affirmed()
        )
        pending.sign_witness(
            second.id, physical_signature(now - timedelta(minutes=5)), WitnessDeclarations.affirmed()
        )

        report = validator.validate_witness_compliance(pending)
        assert report.tier is None
        assert report.error_codes == ["WITNESSES_NOT_SIMULTANEOUS"]
        assert report.errors[0].context["spread_seconds"] == 45 * 60
        assert report.score == 75
        assert report.recommendations == ()

    def test_compliant_witnesses(
        self, validator: ReadinessValidator, signed: WillAggregate
    ) -> None:
        report = validator.validate_witness_compliance(signed)
        assert report.is_valid
        assert report.score == 100
        assert report.recommendations == ()

    def test_witness_eligibility_uses_validator_rules(self, draft: WillAggregate) -> None:
        nineteen = date(date.today().year - 19, 1, 1)
        draft.add_witness(adult_candidate("Joseph Kariuki", date_of_birth=nineteen))
        strict = ReadinessValidator(ComplianceRules(minimum_witness_age=21))

        assert draft.witness_violations() == {}
        report = strict.validate_witness_compliance(draft)
        [violation] = [e for e in report.errors if e.code == "WITNESS_LEGAL_VIOLATION"]
        assert violation.context["witness"] == "Joseph Kariuki"
        assert "must be 21+" in violation.message

    def test_custom_window(self, pending: WillAggregate) -> None:
        strict = ReadinessValidator(ComplianceRules(signature_window=timedelta(minutes=1)))
        now = datetime.now(UTC)
        first, second = pending.active_witnesses()
        pending.sign_witness(
            first.id, physical_signature(now - timedelta(minutes=5)), WitnessDeclarations.affirmed()
        )
        pending.sign_witness(
            second.id, physical_signature(now - timedelta(minutes=3)), WitnessDeclarations.affirmed()
        )
        # The will keeps its own default window
        assert pending.signatures_simultaneous()
        report = strict.validate_witness_compliance(pending)
        assert report.has_error("WITNESSES_NOT_SIMULTANEOUS")
        assert "1 minutes" in report.errors[0].message


# =============================================================================
# Activation and probate tiers
# =============================================================================


class TestActivationTier:
    def test_attested_will(self, validator: ReadinessValidator, attested: WillAggregate) -> None:
        report = validator.validate_for_activation(attested)

        assert report.error_codes == ["UNVERIFIED_WITNESSES"]
        assert report.errors[0].severity is Severity.HIGH
        assert report.warning_codes == ["NO_ALTERNATE_EXECUTORS", "NO_ACCEPTED_EXECUTORS"]
        assert report.score == 79

    def test_draft_is_not_attested(
        self, validator: ReadinessValidator, draft: WillAggregate
    ) -> None:
        report = validator.validate_for_activation(draft)
        assert report.has_error("NOT_ATTESTED")
        assert report.has_error("INSUFFICIENT_WITNESSES")

    def test_verified_and_accepted(
        self, validator: ReadinessValidator, attested: WillAggregate
    ) -> None:
        for witness in attested.attesting_witnesses():
            attested.verify_witness(witness.id, "registrar")
        attested.accept_executor(attested.primary_executor().id)

        report = validator.validate_for_activation(attested)
        assert report.is_valid
        assert report.warning_codes == ["NO_ALTERNATE_EXECUTORS"]


class TestProbateTier:
    def test_attested_will_is_not_active(
        self, validator: ReadinessValidator, attested: WillAggregate
    ) -> None:
        report = validator.validate_for_probate(attested)
        assert report.has_error("NOT_ACTIVE")
        assert report.has_warning("NO_STORAGE_LOCATION")
        assert "Record where the original will is stored" in report.recommendations

    def test_ready_for_probate(self, validator: ReadinessValidator, will_id: UUID) -> None:
        will = _with_alternate(draft_will(will_id))
        add_standard_witnesses(will)
        will.submit_for_attestation()
        sign_all(will)
        will.attest(location="Nairobi")
        will.activate()
        for witness in will.attesting_witnesses():
            will.verify_witness(witness.id, "registrar")
        will.accept_executor(will.primary_executor().id)
        will.update_storage_location(StorageLocation.COURT_REGISTRY, "Milimani registry")

        report = validator.validate(will, ReadinessTier.PROBATE)
        assert report.is_valid
        assert report.score == 100
        assert report.recommendations == (
            "Will appears complete - proceed with probate application",
        )

    def test_vulnerable_disinheritance(
        self, validator: ReadinessValidator, will_id: UUID
    ) -> None:
        will = draft_will(will_id)
        will.add_disinheritance(disinheritance())
        add_standard_witnesses(will)
        will.submit_for_attestation()
        sign_all(will)
        will.attest(location="Nairobi")
        will.activate()

        report = validator.validate_for_probate(will)
        assert report.has_warning("VULNERABLE_DISINHERITANCE")
        assert not report.has_error("NOT_ACTIVE")


@pytest.mark.parametrize("tier", list(ReadinessTier))
def test_validate_dispatches_by_tier(
    validator: ReadinessValidator, draft: WillAggregate, tier: ReadinessTier
) -> None:
    assert validator.validate(draft, tier).tier is tier
