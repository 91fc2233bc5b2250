"""Severity scale shared by eligibility conflicts and readiness errors."""

from enum import Enum


class Severity(Enum):
    """
    Ordered severity of a finding.

    CRITICAL findings are legal impediments. HIGH, MEDIUM and LOW are
    increasingly advisory.
    """

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Numeric rank, higher is more severe."""
        return _RANKS[self]


_RANKS = {
    Severity.CRITICAL: 4,
    Severity.HIGH: 3,
    Severity.MEDIUM: 2,
    Severity.LOW: 1,
}


__all__ = ["Severity"]
