"""
Will lifecycle statuses and the transition table.

The table is the single source of truth for which lifecycle moves are
legal. The aggregate consults it before every status change and never
writes a status that is not reachable from the current one.
"""

from enum import Enum


class WillStatus(Enum):
    """Lifecycle status of a will."""

    DRAFT = "DRAFT"
    PENDING_ATTESTATION = "PENDING_ATTESTATION"
    ATTESTED = "ATTESTED"
    ACTIVE = "ACTIVE"
    CONTESTED = "CONTESTED"
    PROBATE = "PROBATE"
    REVOKED = "REVOKED"
    SUPERSEDED = "SUPERSEDED"
    EXECUTED = "EXECUTED"

    @property
    def is_editable(self) -> bool:
        """Only drafts accept ordinary field edits."""
        return self is WillStatus.DRAFT

    @property
    def is_terminal(self) -> bool:
        """No transition leaves a terminal status."""
        return not WILL_STATUS_TRANSITIONS[self]

    @property
    def is_finalized(self) -> bool:
        """Statuses in which the will has been formally attested."""
        return self in _FINALIZED

    @property
    def accepts_codicils(self) -> bool:
        return self in (WillStatus.ATTESTED, WillStatus.ACTIVE)


WILL_STATUS_TRANSITIONS: dict[WillStatus, frozenset[WillStatus]] = {
    WillStatus.DRAFT: frozenset({WillStatus.PENDING_ATTESTATION, WillStatus.REVOKED}),
    WillStatus.PENDING_ATTESTATION: frozenset(
        {WillStatus.ATTESTED, WillStatus.DRAFT, WillStatus.REVOKED}
    ),
    WillStatus.ATTESTED: frozenset(
        {WillStatus.ACTIVE, WillStatus.REVOKED, WillStatus.SUPERSEDED}
    ),
    WillStatus.ACTIVE: frozenset(
        {
            WillStatus.CONTESTED,
            WillStatus.PROBATE,
            WillStatus.REVOKED,
            WillStatus.SUPERSEDED,
        }
    ),
    WillStatus.CONTESTED: frozenset({WillStatus.ACTIVE, WillStatus.REVOKED}),
    WillStatus.PROBATE: frozenset({WillStatus.EXECUTED, WillStatus.CONTESTED}),
    # Correction path only
    WillStatus.REVOKED: frozenset({WillStatus.DRAFT}),
    WillStatus.SUPERSEDED: frozenset(),
    WillStatus.EXECUTED: frozenset(),
}

_FINALIZED = frozenset(
    {
        WillStatus.ATTESTED,
        WillStatus.ACTIVE,
        WillStatus.CONTESTED,
        WillStatus.PROBATE,
        WillStatus.EXECUTED,
    }
)


def can_transition(current: WillStatus, target: WillStatus) -> bool:
    """Return True if ``target`` is reachable from ``current`` in one step."""
    return target in WILL_STATUS_TRANSITIONS[current]


def allowed_transitions(current: WillStatus) -> list[WillStatus]:
    """Allowed targets from ``current``, in declaration order."""
    targets = WILL_STATUS_TRANSITIONS[current]
    return [status for status in WillStatus if status in targets]


__all__ = [
    "WillStatus",
    "WILL_STATUS_TRANSITIONS",
    "can_transition",
    "allowed_transitions",
]
