"""Executor nominations and their acceptance lifecycle."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from succession.exceptions import EntityStateError
from succession.values.persons import PersonRef, display_name
from succession.values.powers import ExecutorPowers


class ExecutorRole(Enum):
    PRIMARY = "PRIMARY"
    ALTERNATE = "ALTERNATE"
    CO_EXECUTOR = "CO_EXECUTOR"


class ExecutorStatus(Enum):
    NOMINATED = "NOMINATED"
    NOTIFIED = "NOTIFIED"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    REMOVED = "REMOVED"


class ExecutorCapacity(Enum):
    COMPETENT = "COMPETENT"
    MINOR = "MINOR"
    MENTALLY_INCAPACITATED = "MENTALLY_INCAPACITATED"
    BANKRUPT = "BANKRUPT"
    CONVICTED = "CONVICTED"
    UNKNOWN = "UNKNOWN"


# Section 56 LSA disqualifications
_DISQUALIFYING = frozenset(
    {
        ExecutorCapacity.MINOR,
        ExecutorCapacity.MENTALLY_INCAPACITATED,
        ExecutorCapacity.BANKRUPT,
        ExecutorCapacity.CONVICTED,
    }
)


class ExecutorNomination(BaseModel):
    """
    A person nominated to administer the estate.

    NOMINATED -> NOTIFIED -> ACCEPTED | DECLINED. Any nomination that has
    not been removed can be REMOVED.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    nominee: PersonRef
    role: ExecutorRole = ExecutorRole.PRIMARY
    powers: ExecutorPowers = Field(default_factory=ExecutorPowers.standard)
    capacity: ExecutorCapacity = ExecutorCapacity.UNKNOWN
    order_of_priority: int = Field(default=1, ge=1)
    status: ExecutorStatus = ExecutorStatus.NOMINATED

    nominated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    notified_at: datetime | None = None
    responded_at: datetime | None = None
    decline_reason: str | None = None
    removal_reason: str | None = None

    @property
    def name(self) -> str:
        return display_name(self.nominee)

    @property
    def is_active(self) -> bool:
        return self.status not in (ExecutorStatus.DECLINED, ExecutorStatus.REMOVED)

    @property
    def is_eligible(self) -> bool:
        return self.capacity not in _DISQUALIFYING

    @property
    def is_primary(self) -> bool:
        return self.role is ExecutorRole.PRIMARY

    @property
    def has_accepted(self) -> bool:
        return self.status is ExecutorStatus.ACCEPTED

    def _require(self, operation: str, *allowed: ExecutorStatus) -> None:
        if self.status not in allowed:
            raise EntityStateError("executor", self.id, self.status.value, operation)

    def notify(self, at: datetime | None = None) -> ExecutorNomination:
        self._require("notify", ExecutorStatus.NOMINATED)
        return self.model_copy(
            update={"status": ExecutorStatus.NOTIFIED, "notified_at": at or datetime.now(UTC)}
        )

    def accept(self, at: datetime | None = None) -> ExecutorNomination:
        self._require("accept", ExecutorStatus.NOMINATED, ExecutorStatus.NOTIFIED)
        return self.model_copy(
            update={"status": ExecutorStatus.ACCEPTED, "responded_at": at or datetime.now(UTC)}
        )

    def decline(self, reason: str | None = None, at: datetime | None = None) -> ExecutorNomination:
        self._require("decline", ExecutorStatus.NOMINATED, ExecutorStatus.NOTIFIED)
        return self.model_copy(
            update={
                "status": ExecutorStatus.DECLINED,
                "responded_at": at or datetime.now(UTC),
                "decline_reason": reason,
            }
        )

    def remove(self, reason: str | None = None) -> ExecutorNomination:
        if self.status is ExecutorStatus.REMOVED:
            raise EntityStateError("executor", self.id, self.status.value, "remove")
        return self.model_copy(
            update={"status": ExecutorStatus.REMOVED, "removal_reason": reason}
        )


__all__ = [
    "ExecutorRole",
    "ExecutorStatus",
    "ExecutorCapacity",
    "ExecutorNomination",
]
