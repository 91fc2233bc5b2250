"""
Repository contract for will aggregates.

Wills are stored as snapshots: the serialized ``WillState`` plus the
aggregate version and the state schema version. Loading restores the
snapshot directly; events are never replayed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import TracebackType
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable
from uuid import UUID

from succession.events.base import DomainEvent
from succession.repositories.query import Page, Query
from succession.values.status import WillStatus

if TYPE_CHECKING:
    from succession.aggregates.will import WillAggregate


@dataclass(frozen=True)
class WillSnapshot:
    """
    A stored will.

    Attributes:
        aggregate_id: Will identifier
        version: Aggregate version at the time of the save
        state: ``WillState`` as produced by ``model_dump(mode="json")``
        schema_version: ``WillAggregate.schema_version`` at the time of the save
        saved_at: When the snapshot was written
    """

    aggregate_id: UUID
    version: int
    state: dict[str, Any]
    schema_version: int
    saved_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"WillSnapshot({self.aggregate_id}, v{self.version}, schema_v{self.schema_version})"


@dataclass(frozen=True)
class SaveResult:
    """
    Result of a successful save.

    Attributes:
        aggregate_id: Will that was saved
        previous_version: Stored version before the save (0 for a new will)
        new_version: Stored version after the save
        events: Events committed by the save, in order
    """

    aggregate_id: UUID
    previous_version: int
    new_version: int
    events: tuple[DomainEvent, ...] = ()

    @property
    def event_count(self) -> int:
        return len(self.events)


@runtime_checkable
class WillTransaction(Protocol):
    """
    A unit of work spanning one or more wills.

    Wills read with ``for_update=True`` stay locked until the transaction
    commits or rolls back. ``commit`` checks every staged version before
    writing anything, so either all staged wills are written or none are.
    """

    async def get(self, aggregate_id: UUID, for_update: bool = True) -> WillAggregate: ...

    def save(self, will: WillAggregate, expected_version: int | None = None) -> None: ...

    async def commit(self) -> list[SaveResult]: ...

    async def rollback(self) -> None: ...

    async def __aenter__(self) -> WillTransaction: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


@runtime_checkable
class WillRepository(Protocol):
    """
    Persistence contract for wills.

    Example:
        >>> will = await repo.get(will_id)
        >>> will.attest(location="Nairobi")
        >>> result = await repo.save(will)
        >>> result.new_version
        9
    """

    async def find_by_id(self, aggregate_id: UUID) -> WillAggregate | None:
        """Load a will, or None if it was never saved."""
        ...

    async def get(self, aggregate_id: UUID) -> WillAggregate:
        """
        Load a will.

        Raises:
            AggregateNotFoundError: If the will was never saved
        """
        ...

    async def save(self, will: WillAggregate, expected_version: int | None = None) -> SaveResult:
        """
        Persist a will's uncommitted changes.

        Args:
            will: The will to save
            expected_version: Stored version the changes were made against.
                Defaults to the version the will was loaded at.

        Raises:
            OptimisticLockError: If the stored version differs from expected_version
        """
        ...

    async def exists(self, aggregate_id: UUID) -> bool: ...

    async def get_version(self, aggregate_id: UUID) -> int:
        """Stored version, 0 if the will was never saved."""
        ...

    async def find_active_by_owner(self, testator_id: str) -> list[WillAggregate]: ...

    async def find_by_status(self, status: WillStatus) -> list[WillAggregate]: ...

    async def find_by_nominated_executor(self, person_key: str) -> list[WillAggregate]: ...

    async def search(self, query: Query | None = None) -> Page[WillAggregate]: ...

    def begin_transaction(self) -> WillTransaction: ...


__all__ = [
    "WillSnapshot",
    "SaveResult",
    "WillTransaction",
    "WillRepository",
]
