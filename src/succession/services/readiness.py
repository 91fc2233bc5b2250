"""
Multi-tier readiness validation.

Three tiers, each a superset of the one below:

- ATTESTATION: capacity, executors, beneficiaries, residuary provision,
  allocation consistency, disinheritance defence and witness compliance
  (Section 11 LSA)
- ACTIVATION: adds attestation status, witness verification and executor
  acceptance
- PROBATE: adds active status, a primary executor, vulnerable
  disinheritances and a recorded storage location

Every check runs; nothing short-circuits. Findings are split into errors
(which make the report invalid) and warnings (which only lower the score).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from succession.config import DEFAULT_RULES, ComplianceRules
from succession.entities.executor import ExecutorRole
from succession.entities.witness import WitnessStatus
from succession.services.risk import DisinheritanceRiskScorer
from succession.services.witness_eligibility import WitnessEligibilityChecker
from succession.values.persons import same_person
from succession.values.severity import Severity
from succession.values.status import WillStatus

if TYPE_CHECKING:
    from succession.aggregates.will import WillAggregate

SECTION_9 = "Section 9 LSA"
SECTION_11 = "Section 11 LSA"
SECTION_26 = "Section 26 LSA"


class ReadinessTier(Enum):
    ATTESTATION = "ATTESTATION"
    ACTIVATION = "ACTIVATION"
    PROBATE = "PROBATE"


@dataclass(frozen=True)
class ReadinessError:
    code: str
    message: str
    severity: Severity
    field: str | None = None
    legal_reference: str | None = None
    context: Mapping[str, Any] = dataclass_field(default_factory=dict)


@dataclass(frozen=True)
class ReadinessWarning:
    code: str
    message: str
    recommendation: str
    impact: str | None = None


@dataclass(frozen=True)
class ReadinessReport:
    """
    Outcome of a readiness validation.

    Attributes:
        tier: Tier validated, or None for a standalone witness check
        errors: Findings that block the next lifecycle step
        warnings: Findings that only lower the score
        score: 0-100, after severity and warning penalties
        recommendations: Actions derived from the warnings, de-duplicated
    """

    tier: ReadinessTier | None
    errors: tuple[ReadinessError, ...] = ()
    warnings: tuple[ReadinessWarning, ...] = ()
    score: int = 100
    recommendations: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]

    @property
    def warning_codes(self) -> list[str]:
        return [w.code for w in self.warnings]

    def has_error(self, code: str) -> bool:
        return any(e.code == code for e in self.errors)

    def has_warning(self, code: str) -> bool:
        return any(w.code == code for w in self.warnings)

    def errors_with(self, severity: Severity) -> list[ReadinessError]:
        return [e for e in self.errors if e.severity is severity]


# Recommendations derived from warning codes
WARNING_RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "NO_PRIMARY_EXECUTOR": ("Designate one executor as primary",),
    "NO_ALTERNATE_EXECUTORS": ("Nominate at least one alternate executor",),
    "NO_RESIDUARY_PROVISION": (
        'Add residuary clause: "All remaining property to [beneficiary]"',
    ),
    "HIGH_RISK_DISINHERITANCE": ("Seek legal counsel before finalizing high-risk disinheritance",),
    "WEAK_DISINHERITANCE": (
        "Provide detailed written statement for disinheritance",
        "Gather supporting evidence (letters, photos, witnesses)",
    ),
    "NO_ACCEPTED_EXECUTORS": ("Notify executor(s) and request acceptance",),
    "VULNERABLE_DISINHERITANCE": ("Strengthen evidence and reasoning for disinheritance",),
    "NO_STORAGE_LOCATION": ("Record where the original will is stored",),
}

COMPLETE_RECOMMENDATION = {
    ReadinessTier.ATTESTATION: "Will appears complete - proceed with witnessing",
    ReadinessTier.ACTIVATION: "Will appears complete - proceed with activation",
    ReadinessTier.PROBATE: "Will appears complete - proceed with probate application",
}


class _Findings:
    def __init__(self) -> None:
        self.errors: list[ReadinessError] = []
        self.warnings: list[ReadinessWarning] = []

    def error(
        self,
        code: str,
        message: str,
        severity: Severity,
        field: str | None = None,
        legal_reference: str | None = None,
        **context: Any,
    ) -> None:
        self.errors.append(
            ReadinessError(code, message, severity, field, legal_reference, context)
        )

    def warning(
        self, code: str, message: str, recommendation: str, impact: str | None = None
    ) -> None:
        self.warnings.append(ReadinessWarning(code, message, recommendation, impact))


class ReadinessValidator:
    """
    Validates a hydrated will for its next lifecycle step.

    Example:
        >>> validator = ReadinessValidator()
        >>> report = validator.validate_for_attestation(will)
        >>> report.is_valid, report.score
        (False, 75)
        >>> report.error_codes
        ['INSUFFICIENT_WITNESSES']
    """

    def __init__(
        self,
        rules: ComplianceRules = DEFAULT_RULES,
        risk_scorer: DisinheritanceRiskScorer | None = None,
        eligibility_checker: WitnessEligibilityChecker | None = None,
    ) -> None:
        self._rules = rules
        self._risk = risk_scorer or DisinheritanceRiskScorer()
        self._eligibility = eligibility_checker or WitnessEligibilityChecker(rules)

    # =========================================================================
    # Public tiers
    # =========================================================================

    def validate(self, will: WillAggregate, tier: ReadinessTier) -> ReadinessReport:
        validators: dict[ReadinessTier, Callable[[WillAggregate], ReadinessReport]] = {
            ReadinessTier.ATTESTATION: self.validate_for_attestation,
            ReadinessTier.ACTIVATION: self.validate_for_activation,
            ReadinessTier.PROBATE: self.validate_for_probate,
        }
        return validators[tier](will)

    def validate_for_attestation(self, will: WillAggregate) -> ReadinessReport:
        findings = _Findings()
        self._attestation_checks(will, findings)
        return self._report(ReadinessTier.ATTESTATION, findings)

    def validate_for_activation(self, will: WillAggregate) -> ReadinessReport:
        findings = _Findings()
        self._attestation_checks(will, findings)
        self._activation_checks(will, findings)
        return self._report(ReadinessTier.ACTIVATION, findings)

    def validate_for_probate(self, will: WillAggregate) -> ReadinessReport:
        findings = _Findings()
        self._attestation_checks(will, findings)
        self._activation_checks(will, findings)
        self._probate_checks(will, findings)
        return self._report(ReadinessTier.PROBATE, findings)

    def validate_witness_compliance(self, will: WillAggregate) -> ReadinessReport:
        """Section 11 LSA checks on their own."""
        findings = _Findings()
        self._check_witnesses(will, findings)
        return self._report(None, findings)

    # =========================================================================
    # Tier bodies
    # =========================================================================

    def _attestation_checks(self, will: WillAggregate, findings: _Findings) -> None:
        self._check_capacity(will, findings)
        self._check_executors(will, findings)
        self._check_beneficiaries(will, findings)
        self._check_residuary(will, findings)
        self._check_allocations(will, findings)
        self._check_disinheritances(will, findings)
        self._check_witnesses(will, findings)

    def _activation_checks(self, will: WillAggregate, findings: _Findings) -> None:
        if not will.status.is_finalized:
            findings.error(
                "NOT_ATTESTED",
                f"Will must be ATTESTED before activation ({SECTION_11})",
                Severity.CRITICAL,
                field="status",
                legal_reference=SECTION_11,
                status=will.status.value,
            )

        unverified = [w for w in will.attesting_witnesses() if w.status is not WitnessStatus.VERIFIED]
        if unverified:
            findings.error(
                "UNVERIFIED_WITNESSES",
                f"{len(unverified)} witness(es) not verified",
                Severity.HIGH,
                field="witnesses",
                witnesses=[w.name for w in unverified],
            )

        if not any(e.has_accepted for e in will.active_executors()):
            findings.warning(
                "NO_ACCEPTED_EXECUTORS",
                "No executor has accepted their nomination",
                "At least one executor should confirm acceptance before activation",
                "May delay probate process",
            )

    def _probate_checks(self, will: WillAggregate, findings: _Findings) -> None:
        if will.status not in (WillStatus.ACTIVE, WillStatus.PROBATE):
            findings.error(
                "NOT_ACTIVE",
                "Will must be ACTIVE before a probate application",
                Severity.CRITICAL,
                field="status",
                status=will.status.value,
            )

        if will.primary_executor() is None:
            alternates = [e for e in will.active_executors() if e.role is ExecutorRole.ALTERNATE]
            findings.error(
                "NO_PRIMARY_EXECUTOR",
                "Primary executor is required for probate application",
                Severity.CRITICAL,
                field="executors",
                alternates_available=len(alternates),
            )

        vulnerable = self._risk.assess_will(will).vulnerable
        if vulnerable:
            findings.warning(
                "VULNERABLE_DISINHERITANCE",
                f"{len(vulnerable)} disinheritance(s) vulnerable to {SECTION_26} challenge",
                "Strengthen evidence and reasoning for disinheritance",
                "May face dependant claims in court",
            )

        if will.current_state.storage_location is None:
            findings.warning(
                "NO_STORAGE_LOCATION",
                "No storage location recorded for the original will",
                "Record where the original will is kept",
                "The court requires the original document",
            )

    # =========================================================================
    # Individual checks
    # =========================================================================

    def _check_capacity(self, will: WillAggregate, findings: _Findings) -> None:
        declaration = will.current_state.capacity_declaration
        if declaration is None:
            findings.error(
                "MISSING_CAPACITY_DECLARATION",
                f"No testamentary capacity declaration recorded ({SECTION_9})",
                Severity.CRITICAL,
                field="capacity_declaration",
                legal_reference=SECTION_9,
            )
        elif not declaration.confers_capacity:
            findings.error(
                "LACKS_TESTAMENTARY_CAPACITY",
                f"Testator lacks testamentary capacity ({SECTION_9})",
                Severity.CRITICAL,
                field="capacity_declaration",
                legal_reference=SECTION_9,
                capacity_status=declaration.status.value,
            )

    def _check_executors(self, will: WillAggregate, findings: _Findings) -> None:
        executors = will.active_executors()
        if not executors:
            findings.error(
                "NO_EXECUTOR_NOMINATED",
                "At least one executor must be nominated",
                Severity.HIGH,
                field="executors",
            )
            return

        eligible = [e for e in executors if e.is_eligible]
        if not eligible:
            findings.error(
                "NO_ELIGIBLE_EXECUTOR",
                "No eligible executor available",
                Severity.CRITICAL,
                field="executors",
                total_nominated=len(executors),
            )

        if eligible and will.primary_executor() is None:
            findings.warning(
                "NO_PRIMARY_EXECUTOR",
                "No primary executor designated",
                "Designate one executor as primary",
                "May cause confusion during probate",
            )

        if not any(e.role is ExecutorRole.ALTERNATE for e in executors):
            findings.warning(
                "NO_ALTERNATE_EXECUTORS",
                "No alternate executors nominated",
                "Consider nominating alternate executor(s)",
                "If primary cannot serve, court will appoint administrator",
            )

    def _check_beneficiaries(self, will: WillAggregate, findings: _Findings) -> None:
        if not will.effective_bequests():
            findings.error(
                "NO_BENEFICIARIES",
                "At least one beneficiary must be assigned",
                Severity.CRITICAL,
                field="bequests",
            )

    def _check_residuary(self, will: WillAggregate, findings: _Findings) -> None:
        if not will.has_residuary_disposition():
            findings.warning(
                "NO_RESIDUARY_PROVISION",
                "No residuary clause or residuary beneficiary",
                "Add residuary clause to prevent partial intestacy",
                "Unmentioned assets will be distributed under intestacy rules",
            )

        if any(b.is_residuary for b in will.effective_bequests()):
            total = will.residuary_allocated()
            if abs(total - Decimal("100")) > self._rules.residuary_tolerance:
                findings.error(
                    "RESIDUARY_PERCENTAGE_MISMATCH",
                    f"Residuary beneficiary percentages total {total}% (must be 100%)",
                    Severity.HIGH,
                    field="bequests",
                    total_percentage=str(total),
                    expected_total="100",
                )

    def _check_allocations(self, will: WillAggregate, findings: _Findings) -> None:
        total = will.percentage_allocated()
        limit = self._rules.max_allocation_percentage
        if total > limit:
            findings.error(
                "PERCENTAGE_EXCEEDS_100",
                f"Total percentage allocation is {total}% (max {limit}%)",
                Severity.CRITICAL,
                field="bequests",
                total_percentage=str(total),
                excess=str(total - limit),
            )

        assets = Counter(b.asset_id for b in will.effective_bequests() if b.asset_id)
        for asset_id, count in assets.items():
            if count > 1:
                findings.error(
                    "DUPLICATE_ASSET_ASSIGNMENT",
                    f"Asset {asset_id} is assigned to multiple beneficiaries",
                    Severity.HIGH,
                    field="bequests",
                    asset_id=asset_id,
                )

    def _check_disinheritances(self, will: WillAggregate, findings: _Findings) -> None:
        bequests = will.effective_bequests()
        for record in will.in_force_disinheritances():
            if any(same_person(record.person, b.beneficiary) for b in bequests):
                findings.error(
                    "DISINHERITANCE_CONFLICT",
                    f"{record.person_name} is both disinherited and named as beneficiary",
                    Severity.HIGH,
                    field="disinheritances",
                    record_id=str(record.id),
                )

            assessment = self._risk.assess(record)
            if assessment.is_high_risk:
                findings.warning(
                    "HIGH_RISK_DISINHERITANCE",
                    f"Disinheritance of {record.person_name} carries "
                    f"{assessment.risk_level.value} legal risk",
                    "Consider legal counsel before finalizing",
                    f"May face a {SECTION_26} dependant claim",
                )
            if assessment.strength.is_weak:
                findings.warning(
                    "WEAK_DISINHERITANCE",
                    f"Disinheritance of {record.person_name} has weak legal defense "
                    f"(score: {assessment.strength.score}/100)",
                    "; ".join(assessment.strength.recommendations),
                    f"High risk of {SECTION_26} challenge",
                )

    def _check_witnesses(self, will: WillAggregate, findings: _Findings) -> None:
        witnesses = will.active_witnesses()
        required = will.minimum_witnesses
        if len(witnesses) < required:
            findings.error(
                "INSUFFICIENT_WITNESSES",
                f"{SECTION_11} requires {required} witnesses. Current: {len(witnesses)}",
                Severity.CRITICAL,
                field="witnesses",
                legal_reference=SECTION_11,
                required=required,
                current=len(witnesses),
            )

        for witness in witnesses:
            verdict = self._eligibility.recheck(witness, will)
            for conflict in verdict.legal_impediments:
                findings.error(
                    "WITNESS_LEGAL_VIOLATION",
                    f"Witness {witness.name}: {conflict.description}",
                    Severity.CRITICAL,
                    field="witnesses",
                    legal_reference=SECTION_11,
                    witness=witness.name,
                )

        spread = will.signature_spread()
        if spread is not None and spread > self._rules.signature_window:
            window = int(self._rules.signature_window.total_seconds() // 60)
            findings.error(
                "WITNESSES_NOT_SIMULTANEOUS",
                f"Witness signatures are more than {window} minutes apart",
                Severity.CRITICAL,
                field="witnesses",
                legal_reference=SECTION_11,
                spread_seconds=int(spread.total_seconds()),
            )

    # =========================================================================
    # Scoring
    # =========================================================================

    def score(self, errors: list[ReadinessError], warnings: list[ReadinessWarning]) -> int:
        penalties = {
            Severity.CRITICAL: self._rules.critical_penalty,
            Severity.HIGH: self._rules.high_penalty,
            Severity.MEDIUM: self._rules.medium_penalty,
            Severity.LOW: self._rules.low_penalty,
        }
        score = 100
        for error in errors:
            score -= penalties[error.severity]
        score -= self._rules.warning_penalty * len(warnings)
        return max(0, min(100, score))

    def _recommendations(
        self, tier: ReadinessTier | None, findings: _Findings
    ) -> list[str]:
        recommendations: list[str] = []
        for warning in findings.warnings:
            for text in WARNING_RECOMMENDATIONS.get(warning.code, ()):
                if text not in recommendations:
                    recommendations.append(text)
        if tier is not None and not recommendations and not findings.errors:
            recommendations.append(COMPLETE_RECOMMENDATION[tier])
        return recommendations

    def _report(self, tier: ReadinessTier | None, findings: _Findings) -> ReadinessReport:
        return ReadinessReport(
            tier=tier,
            errors=tuple(findings.errors),
            warnings=tuple(findings.warnings),
            score=self.score(findings.errors, findings.warnings),
            recommendations=tuple(self._recommendations(tier, findings)),
        )


__all__ = [
    "ReadinessTier",
    "ReadinessError",
    "ReadinessWarning",
    "ReadinessReport",
    "ReadinessValidator",
    "WARNING_RECOMMENDATIONS",
]
