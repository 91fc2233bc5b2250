"""
Witness eligibility checking (Section 11 LSA).

The checker is stateless and never mutates the will. It cross-checks a
candidate against the will's effective bequests and active executor
nominations and returns a ``WitnessEligibility`` verdict.

Checks run in a fixed order:

1. Age (date of birth missing, or below the minimum age) - CRITICAL
2. Named beneficiary - CRITICAL
3. Spouse of the testator - CRITICAL
4. Lacks mental capacity - CRITICAL
5. Criminal record - HIGH, with a warning
6. Nominated executor - MEDIUM, with a warning
7. Close family of the testator - LOW, with a warning

Only CRITICAL conflicts make a candidate ineligible.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from succession.config import DEFAULT_RULES, ComplianceRules
from succession.values.eligibility import (
    ConflictType,
    WitnessCandidate,
    WitnessConflict,
    WitnessEligibility,
)
from succession.values.persons import ExternalPerson, RegisteredPerson, display_name, same_person
from succession.values.severity import Severity
from succession.values.will_type import WillType

if TYPE_CHECKING:
    from succession.aggregates.will import WillAggregate
    from succession.entities.witness import WillWitness

CLOSE_FAMILY_TERMS = ("child", "son", "daughter", "parent", "sibling", "brother", "sister")

RANK_BASE_SCORE = 100
RANK_CLEAN_BONUS = 10
RANK_WARNING_PENALTY = 3
RANK_CONFLICT_PENALTIES: dict[Severity, int] = {
    Severity.CRITICAL: 50,
    Severity.HIGH: 25,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}


@dataclass(frozen=True)
class RankedCandidate:
    """A candidate with its verdict and suitability score (0-110)."""

    candidate: WitnessCandidate
    eligibility: WitnessEligibility
    score: int

    @property
    def name(self) -> str:
        return display_name(self.candidate.person)


def _is_close_family(relationship: str | None) -> bool:
    if not relationship:
        return False
    lowered = relationship.lower()
    return any(term in lowered for term in CLOSE_FAMILY_TERMS)


def candidate_key(candidate: WitnessCandidate) -> str:
    """Key used by ``check_many``: user id, else national id, else full name."""
    person = candidate.person
    if isinstance(person, RegisteredPerson):
        return person.user_id
    if isinstance(person, ExternalPerson) and person.national_id:
        return person.national_id
    return person.full_name


class WitnessEligibilityChecker:
    """
    Evaluates witness candidates against a will.

    Example:
        >>> checker = WitnessEligibilityChecker()
        >>> verdict = checker.check(candidate, will)
        >>> if not verdict.is_eligible:
        ...     print([c.description for c in verdict.legal_impediments])
    """

    def __init__(self, rules: ComplianceRules = DEFAULT_RULES) -> None:
        self._rules = rules

    @property
    def rules(self) -> ComplianceRules:
        return self._rules

    def check(
        self,
        candidate: WitnessCandidate,
        will: WillAggregate,
        on: date | None = None,
    ) -> WitnessEligibility:
        """
        Check one candidate against ``will``.

        Args:
            candidate: The proposed witness
            will: The will being witnessed
            on: Date used for the age check, defaults to today (UTC)
        """
        today = on or datetime.now(UTC).date()
        name = display_name(candidate.person)
        conflicts: list[WitnessConflict] = []
        warnings: list[str] = []

        minimum_age = self._rules.minimum_witness_age
        age = candidate.age_on(today)
        if age is None:
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.IS_MINOR,
                    severity=Severity.CRITICAL,
                    description="Cannot verify age - date of birth required",
                    legal_reference=f"Must be {minimum_age}+ to witness",
                )
            )
        elif age < minimum_age:
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.IS_MINOR,
                    severity=Severity.CRITICAL,
                    description=f"Witness is {age} years old (must be {minimum_age}+)",
                    legal_reference="Section 11 LSA",
                )
            )

        if any(same_person(candidate.person, b.beneficiary) for b in will.effective_bequests()):
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.IS_BENEFICIARY,
                    severity=Severity.CRITICAL,
                    description=f"{name} is named as beneficiary in this will",
                    legal_reference="Section 11 LSA",
                )
            )

        if candidate.is_spouse_of_testator:
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.IS_SPOUSE,
                    severity=Severity.CRITICAL,
                    description="Spouse of testator cannot be witness",
                    legal_reference="Section 11 LSA",
                )
            )

        if candidate.has_mental_capacity is False:
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.LACKS_CAPACITY,
                    severity=Severity.CRITICAL,
                    description="Witness lacks mental capacity",
                    legal_reference="Common law requirement",
                )
            )

        if candidate.has_criminal_record:
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.HAS_CRIMINAL_RECORD,
                    severity=Severity.HIGH,
                    description="Witness has criminal record (fraud/forgery)",
                )
            )
            warnings.append("Witness with fraud conviction may reduce will credibility")

        if any(same_person(candidate.person, e.nominee) for e in will.active_executors()):
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.IS_EXECUTOR,
                    severity=Severity.MEDIUM,
                    description=f"{name} is nominated as executor",
                )
            )
            warnings.append("Executor witnessing is legal but discouraged - may complicate probate")

        if _is_close_family(candidate.relationship_to_testator):
            conflicts.append(
                WitnessConflict(
                    type=ConflictType.FAMILY_CONFLICT,
                    severity=Severity.LOW,
                    description=f"{name} is {candidate.relationship_to_testator} of testator",
                )
            )
            warnings.append("Close family member as witness may raise questions of undue influence")

        return WitnessEligibility.from_findings(conflicts, warnings)

    def recheck(
        self,
        witness: WillWitness,
        will: WillAggregate,
        on: date | None = None,
    ) -> WitnessEligibility:
        """Re-run the check for a witness already on the will."""
        return self.check(witness.candidate, will, on)

    def check_many(
        self,
        candidates: Iterable[WitnessCandidate],
        will: WillAggregate,
        on: date | None = None,
    ) -> dict[str, WitnessEligibility]:
        return {candidate_key(c): self.check(c, will, on) for c in candidates}

    def score(self, eligibility: WitnessEligibility) -> int:
        if not eligibility.conflicts and not eligibility.warnings:
            return RANK_BASE_SCORE + RANK_CLEAN_BONUS
        score = RANK_BASE_SCORE
        for conflict in eligibility.conflicts:
            score -= RANK_CONFLICT_PENALTIES[conflict.severity]
        score -= RANK_WARNING_PENALTY * len(eligibility.warnings)
        return max(0, score)

    def rank(
        self,
        candidates: Sequence[WitnessCandidate],
        will: WillAggregate,
        on: date | None = None,
    ) -> list[RankedCandidate]:
        """Score candidates and sort best first, ties broken by name."""
        ranked = []
        for candidate in candidates:
            eligibility = self.check(candidate, will, on)
            ranked.append(RankedCandidate(candidate, eligibility, self.score(eligibility)))
        return sorted(ranked, key=lambda r: (-r.score, r.name))

    def recommended_witness_types(self, will: WillAggregate) -> list[str]:
        recommendations = [
            f"Two independent adults ({self._rules.minimum_witness_age}+) not mentioned in will"
        ]

        if will.will_type is WillType.INTERNATIONAL:
            recommendations.append("Notary public or professional witness")

        if will.will_type in (WillType.JOINT_WILL, WillType.MUTUAL_WILL):
            recommendations.append("Three witnesses recommended (one extra for joint wills)")

        if len(will.effective_bequests()) > 5:
            recommendations.append(
                "Professional witness (lawyer/notary) recommended for complex estates"
            )

        if any(d.is_in_force for d in will.disinheritances):
            recommendations.append(
                "Professional witness recommended when disinheriting family members"
            )
            recommendations.append("Consider video recording of signing ceremony")

        return recommendations


__all__ = [
    "WitnessEligibilityChecker",
    "RankedCandidate",
    "candidate_key",
    "CLOSE_FAMILY_TERMS",
]
