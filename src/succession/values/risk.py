"""
Inputs and weights of the disinheritance risk model.

The model is a deterministic weighted sum. Points are added for the
excluded person's relationship to the testator, the stated reason
category, and the severity of the exclusion; the total is bucketed into
five ordered risk levels. Dependants (spouse, children, parents) may apply
for reasonable provision under Section 26 LSA.
"""

from enum import Enum


class PersonRelationship(Enum):
    """Relationship of an excluded person to the testator."""

    SPOUSE = "SPOUSE"
    CHILD = "CHILD"
    PARENT = "PARENT"
    SIBLING = "SIBLING"
    OTHER_RELATIVE = "OTHER_RELATIVE"
    EXTERNAL = "EXTERNAL"

    @property
    def is_dependant(self) -> bool:
        return self in (
            PersonRelationship.SPOUSE,
            PersonRelationship.CHILD,
            PersonRelationship.PARENT,
        )


class DisinheritanceReason(Enum):
    """Category of the stated reason for exclusion."""

    MORAL = "MORAL"
    FINANCIAL = "FINANCIAL"
    RELATIONSHIP = "RELATIONSHIP"
    LEGAL = "LEGAL"
    PERSONAL = "PERSONAL"


class DisinheritanceSeverity(Enum):
    """How far the exclusion goes."""

    COMPLETE = "COMPLETE"
    PARTIAL = "PARTIAL"
    CONDITIONAL = "CONDITIONAL"
    TEMPORARY = "TEMPORARY"


class RiskLevel(Enum):
    """Ordered legal-risk buckets, LOW to EXTREME."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    VERY_HIGH = "VERY_HIGH"
    EXTREME = "EXTREME"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    def is_at_least(self, other: "RiskLevel") -> bool:
        return self.rank >= other.rank


_LEVEL_ORDER = [
    RiskLevel.LOW,
    RiskLevel.MEDIUM,
    RiskLevel.HIGH,
    RiskLevel.VERY_HIGH,
    RiskLevel.EXTREME,
]

RELATIONSHIP_POINTS: dict[PersonRelationship, int] = {
    PersonRelationship.SPOUSE: 40,
    PersonRelationship.CHILD: 30,
    PersonRelationship.PARENT: 20,
    PersonRelationship.SIBLING: 10,
    PersonRelationship.OTHER_RELATIVE: 10,
    PersonRelationship.EXTERNAL: 5,
}

REASON_POINTS: dict[DisinheritanceReason, int] = {
    DisinheritanceReason.LEGAL: 5,
    DisinheritanceReason.MORAL: 15,
    DisinheritanceReason.RELATIONSHIP: 15,
    DisinheritanceReason.FINANCIAL: 20,
    DisinheritanceReason.PERSONAL: 25,
}

SEVERITY_POINTS: dict[DisinheritanceSeverity, int] = {
    DisinheritanceSeverity.COMPLETE: 25,
    DisinheritanceSeverity.PARTIAL: 15,
    DisinheritanceSeverity.CONDITIONAL: 10,
    DisinheritanceSeverity.TEMPORARY: 5,
}

# (minimum score, level), checked from the top down
RISK_THRESHOLDS: list[tuple[int, RiskLevel]] = [
    (70, RiskLevel.EXTREME),
    (55, RiskLevel.VERY_HIGH),
    (40, RiskLevel.HIGH),
    (25, RiskLevel.MEDIUM),
]


def risk_points(
    relationship: PersonRelationship,
    reason: DisinheritanceReason,
    severity: DisinheritanceSeverity,
) -> int:
    """Raw weighted-sum score for one exclusion."""
    return RELATIONSHIP_POINTS[relationship] + REASON_POINTS[reason] + SEVERITY_POINTS[severity]


def risk_level_for(score: int) -> RiskLevel:
    """Bucket a raw score into a RiskLevel."""
    for minimum, level in RISK_THRESHOLDS:
        if score >= minimum:
            return level
    return RiskLevel.LOW


__all__ = [
    "PersonRelationship",
    "DisinheritanceReason",
    "DisinheritanceSeverity",
    "RiskLevel",
    "RELATIONSHIP_POINTS",
    "REASON_POINTS",
    "SEVERITY_POINTS",
    "RISK_THRESHOLDS",
    "risk_points",
    "risk_level_for",
]
