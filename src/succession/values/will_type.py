"""Will types and their attestation requirements."""

from enum import Enum


class WillType(Enum):
    """Kind of testamentary document."""

    STANDARD = "STANDARD"
    JOINT_WILL = "JOINT_WILL"
    MUTUAL_WILL = "MUTUAL_WILL"
    HOLOGRAPHIC = "HOLOGRAPHIC"
    INTERNATIONAL = "INTERNATIONAL"
    TESTAMENTARY_TRUST_WILL = "TESTAMENTARY_TRUST_WILL"

    @property
    def minimum_witnesses(self) -> int:
        """Witnesses required under Section 11 LSA for this type."""
        return _MINIMUM_WITNESSES[self]


# Section 11 LSA sets two competent witnesses for every written will.
_MINIMUM_WITNESSES = {
    WillType.STANDARD: 2,
    WillType.JOINT_WILL: 2,
    WillType.MUTUAL_WILL: 2,
    WillType.HOLOGRAPHIC: 2,
    WillType.INTERNATIONAL: 2,
    WillType.TESTAMENTARY_TRUST_WILL: 2,
}


__all__ = ["WillType"]
