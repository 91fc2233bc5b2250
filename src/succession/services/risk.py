"""
Disinheritance risk scoring (Section 26 LSA).

Two independent measures are produced for each record:

- risk: how likely the exclusion is to draw a dependant's claim, from the
  weighted sum in ``succession.values.risk``;
- legal strength: how well the record is prepared to defend against
  such a claim, from its evidence, justification and provisions.

Both are pure functions of the record and are recomputed on every call.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from succession.entities.disinheritance import DisinheritanceRecord, DisinheritanceStatus
from succession.values.risk import DisinheritanceSeverity, RiskLevel

if TYPE_CHECKING:
    from succession.aggregates.will import WillAggregate

STRENGTH_BASE = 100
NO_EVIDENCE_PENALTY = 30
SHORT_JUSTIFICATION_PENALTY = 20
NO_PROVISION_PENALTY = 15
COMPLETE_SEVERITY_PENALTY = 10
DETAILED_STATEMENT_BONUS = 10

MIN_JUSTIFICATION_LENGTH = 50
MIN_STATEMENT_LENGTH = 100
FIRST_PERSON_WORDS = frozenset({"i", "me", "my", "mine", "myself"})


class StrengthRating(Enum):
    STRONG = "STRONG"
    MODERATE = "MODERATE"
    WEAK = "WEAK"


def is_first_person(text: str) -> bool:
    return any(word in FIRST_PERSON_WORDS for word in re.findall(r"[a-z]+", text.lower()))


def rating_for(score: int) -> StrengthRating:
    if score >= 70:
        return StrengthRating.STRONG
    if score >= 40:
        return StrengthRating.MODERATE
    return StrengthRating.WEAK


@dataclass(frozen=True)
class LegalStrength:
    score: int
    rating: StrengthRating
    recommendations: tuple[str, ...] = ()

    @property
    def is_weak(self) -> bool:
        return self.rating is StrengthRating.WEAK


@dataclass(frozen=True)
class DisinheritanceAssessment:
    """Risk and legal strength of one disinheritance record."""

    record_id: UUID
    person_name: str
    risk_score: int
    risk_level: RiskLevel
    strength: LegalStrength

    @property
    def is_high_risk(self) -> bool:
        return self.risk_level.is_at_least(RiskLevel.HIGH)

    @property
    def is_vulnerable(self) -> bool:
        """High risk and not strongly defended."""
        return self.is_high_risk and self.strength.rating is not StrengthRating.STRONG


@dataclass(frozen=True)
class WillRiskReport:
    will_id: UUID
    assessments: tuple[DisinheritanceAssessment, ...] = ()

    @property
    def highest_level(self) -> RiskLevel | None:
        if not self.assessments:
            return None
        return max((a.risk_level for a in self.assessments), key=lambda level: level.rank)

    @property
    def high_risk(self) -> tuple[DisinheritanceAssessment, ...]:
        return tuple(a for a in self.assessments if a.is_high_risk)

    @property
    def weak(self) -> tuple[DisinheritanceAssessment, ...]:
        return tuple(a for a in self.assessments if a.strength.is_weak)

    @property
    def vulnerable(self) -> tuple[DisinheritanceAssessment, ...]:
        return tuple(a for a in self.assessments if a.is_vulnerable)


class DisinheritanceRiskScorer:
    """
    Scores disinheritance records.

    Example:
        >>> scorer = DisinheritanceRiskScorer()
        >>> scorer.level(record)
        <RiskLevel.EXTREME: 'EXTREME'>
        >>> scorer.legal_strength(record).rating
        <StrengthRating.WEAK: 'WEAK'>
    """

    def score(self, record: DisinheritanceRecord) -> int:
        return record.risk_score

    def level(self, record: DisinheritanceRecord) -> RiskLevel:
        return record.risk_level

    def is_high_risk(self, record: DisinheritanceRecord) -> bool:
        return record.is_high_risk

    def legal_strength(self, record: DisinheritanceRecord) -> LegalStrength:
        score = STRENGTH_BASE
        recommendations: list[str] = []

        if not record.evidence:
            score -= NO_EVIDENCE_PENALTY
            recommendations.append(
                "Gather supporting evidence (letters, photos, witness statements)"
            )

        if len(record.justification) < MIN_JUSTIFICATION_LENGTH:
            score -= SHORT_JUSTIFICATION_PENALTY
            recommendations.append(
                "Expand the justification with specific events and dates"
            )

        if record.relationship.is_dependant and not record.alternative_provision:
            score -= NO_PROVISION_PENALTY
            recommendations.append(
                "Consider a token provision to show the dependant was not forgotten"
            )

        if record.severity is DisinheritanceSeverity.COMPLETE:
            score -= COMPLETE_SEVERITY_PENALTY
            recommendations.append(
                "Consider a partial or conditional exclusion instead of a complete one"
            )

        statement = (record.testator_statement or "").strip()
        if len(statement) >= MIN_STATEMENT_LENGTH and is_first_person(statement):
            score += DETAILED_STATEMENT_BONUS

        score = max(0, min(STRENGTH_BASE, score))
        return LegalStrength(
            score=score,
            rating=rating_for(score),
            recommendations=tuple(recommendations),
        )

    def assess(self, record: DisinheritanceRecord) -> DisinheritanceAssessment:
        return DisinheritanceAssessment(
            record_id=record.id,
            person_name=record.person_name,
            risk_score=record.risk_score,
            risk_level=record.risk_level,
            strength=self.legal_strength(record),
        )

    def assess_records(
        self, records: Iterable[DisinheritanceRecord]
    ) -> list[DisinheritanceAssessment]:
        return [
            self.assess(r) for r in records if r.status is not DisinheritanceStatus.WITHDRAWN
        ]

    def assess_will(self, will: WillAggregate) -> WillRiskReport:
        """Assess every non-withdrawn disinheritance record on ``will``."""
        return WillRiskReport(
            will_id=will.aggregate_id,
            assessments=tuple(self.assess_records(will.disinheritances)),
        )


__all__ = [
    "StrengthRating",
    "LegalStrength",
    "DisinheritanceAssessment",
    "WillRiskReport",
    "DisinheritanceRiskScorer",
    "rating_for",
    "is_first_person",
]
