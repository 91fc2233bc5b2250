"""
In-memory will repository.

Stores one snapshot per will and the committed event history. Suitable
for tests and single-process use; nothing survives a restart.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Sequence
from types import TracebackType
from typing import Any
from uuid import UUID

from succession.aggregates.will import WillAggregate
from succession.bus.interface import EventBus
from succession.config import DEFAULT_RULES, ComplianceRules
from succession.events.base import DomainEvent
from succession.exceptions import (
    AggregateNotFoundError,
    OptimisticLockError,
    TransactionError,
)
from succession.observability import Tracer, create_tracer
from succession.observability.attributes import (
    ATTR_AGGREGATE_ID,
    ATTR_AGGREGATE_TYPE,
    ATTR_EVENT_COUNT,
    ATTR_EXPECTED_VERSION,
    ATTR_QUERY_FILTER_COUNT,
    ATTR_QUERY_LIMIT,
    ATTR_TRANSACTION_SIZE,
    ATTR_VERSION,
    ATTR_WILL_STATUS,
)
from succession.repositories.interface import SaveResult, WillSnapshot
from succession.repositories.query import Page, Query, _plain
from succession.values.persons import identity_keys
from succession.values.status import WillStatus

logger = logging.getLogger(__name__)


def _search_row(will: WillAggregate) -> dict[str, Any]:
    """Flat, filterable view of a will."""
    state = will.current_state
    return {
        "will_id": will.aggregate_id,
        "testator_id": state.testator_id,
        "title": state.title,
        "status": state.status,
        "will_type": state.will_type,
        "version": will.version,
        "version_number": state.version_number,
        "storage_location": state.storage_location,
        "has_capacity": will.has_capacity,
        "witness_count": len(will.active_witnesses()),
        "executor_count": len(will.active_executors()),
        "bequest_count": len(will.effective_bequests()),
        "codicil_count": len(state.codicils),
        "disinheritance_count": len(will.in_force_disinheritances()),
        "percentage_allocated": will.percentage_allocated(),
        "residuary_allocated": will.residuary_allocated(),
        "created_at": state.created_at,
        "updated_at": state.updated_at,
        "activated_at": state.activated_at,
    }


def _sort_key(value: Any) -> tuple[bool, Any]:
    # None sorts last in ascending order
    value = _plain(value)
    return (value is None, 0 if value is None else value)


class InMemoryWillRepository:
    """
    Snapshot-based in-memory repository for wills.

    Saving writes the serialized state of the will, not its events; loading
    restores that state directly. Committed events are kept per will for
    inspection and are published to the event bus after each write.

    Example:
        >>> bus = InMemoryEventBus()
        >>> repo = InMemoryWillRepository(event_bus=bus)
        >>> will = WillAggregate(uuid4())
        >>> will.create(testator_id="user-42")
        >>> await repo.save(will)
        SaveResult(aggregate_id=..., previous_version=0, new_version=1, ...)
    """

    def __init__(
        self,
        *,
        rules: ComplianceRules = DEFAULT_RULES,
        event_bus: EventBus | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Args:
            rules: Compliance rules handed to every loaded will
            event_bus: Optional bus that receives committed events
            tracer: Optional custom Tracer instance
            enable_tracing: If True and OpenTelemetry is available, emit traces.
                          Ignored if tracer is explicitly provided.
        """
        self._rules = rules
        self._event_bus = event_bus
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._snapshots: dict[UUID, WillSnapshot] = {}
        self._events: dict[UUID, list[DomainEvent]] = defaultdict(list)
        self._store_lock = asyncio.Lock()
        self._row_locks: dict[UUID, asyncio.Lock] = {}

    @property
    def rules(self) -> ComplianceRules:
        return self._rules

    @property
    def event_bus(self) -> EventBus | None:
        return self._event_bus

    # =========================================================================
    # Loading
    # =========================================================================

    def _hydrate(self, snapshot: WillSnapshot) -> WillAggregate:
        if snapshot.schema_version != WillAggregate.schema_version:
            logger.warning(
                "Snapshot schema version %d differs from current %d for will %s",
                snapshot.schema_version,
                WillAggregate.schema_version,
                snapshot.aggregate_id,
                extra={
                    "aggregate_id": str(snapshot.aggregate_id),
                    "snapshot_schema_version": snapshot.schema_version,
                    "current_schema_version": WillAggregate.schema_version,
                },
            )
        will = WillAggregate(snapshot.aggregate_id, rules=self._rules)
        will._restore_from_snapshot(snapshot.state, snapshot.version)
        return will

    async def find_by_id(self, aggregate_id: UUID) -> WillAggregate | None:
        with self._tracer.span(
            "succession.repository.get",
            {
                ATTR_AGGREGATE_ID: str(aggregate_id),
                ATTR_AGGREGATE_TYPE: WillAggregate.aggregate_type,
            },
        ) as span:
            snapshot = self._snapshots.get(aggregate_id)
            if snapshot is None:
                return None

            will = self._hydrate(snapshot)
            if span:
                span.set_attribute(ATTR_VERSION, will.version)
                span.set_attribute(ATTR_WILL_STATUS, will.status.value)

            logger.debug(
                "Loaded %s/%s at version %d",
                WillAggregate.aggregate_type,
                aggregate_id,
                will.version,
                extra={
                    "aggregate_id": str(aggregate_id),
                    "version": will.version,
                },
            )
            return will

    async def get(self, aggregate_id: UUID) -> WillAggregate:
        will = await self.find_by_id(aggregate_id)
        if will is None:
            raise AggregateNotFoundError(aggregate_id, WillAggregate.aggregate_type)
        return will

    async def exists(self, aggregate_id: UUID) -> bool:
        with self._tracer.span(
            "succession.repository.exists",
            {ATTR_AGGREGATE_ID: str(aggregate_id)},
        ) as span:
            exists = aggregate_id in self._snapshots
            if span:
                span.set_attribute("exists", exists)
            return exists

    async def get_version(self, aggregate_id: UUID) -> int:
        snapshot = self._snapshots.get(aggregate_id)
        return snapshot.version if snapshot else 0

    def get_snapshot(self, aggregate_id: UUID) -> WillSnapshot | None:
        return self._snapshots.get(aggregate_id)

    def get_events(self, aggregate_id: UUID) -> list[DomainEvent]:
        """Committed events of one will, oldest first."""
        return list(self._events.get(aggregate_id, []))

    def get_all_events(self) -> list[DomainEvent]:
        """Committed events of every will, ordered by commit time."""
        events = [e for stream in self._events.values() for e in stream]
        return sorted(events, key=lambda e: e.occurred_at)

    # =========================================================================
    # Saving
    # =========================================================================

    @staticmethod
    def _default_expected(will: WillAggregate) -> int:
        return will.version - len(will.uncommitted_events)

    async def save(
        self,
        will: WillAggregate,
        expected_version: int | None = None,
    ) -> SaveResult:
        """
        Persist a will's uncommitted changes.

        A will with no uncommitted events is left untouched and the result
        reports its current version.

        Raises:
            OptimisticLockError: If the stored version differs from expected_version
        """
        expected = self._default_expected(will) if expected_version is None else expected_version
        with self._tracer.span(
            "succession.repository.save",
            {
                ATTR_AGGREGATE_ID: str(will.aggregate_id),
                ATTR_AGGREGATE_TYPE: will.aggregate_type,
                ATTR_EXPECTED_VERSION: expected,
                ATTR_EVENT_COUNT: len(will.uncommitted_events),
            },
        ) as span:
            async with self._row_lock(will.aggregate_id):
                results = await self._write([(will, expected)])

            if span:
                span.set_attribute(ATTR_VERSION, results[0].new_version)

        await self._publish(results)
        return results[0]

    def _row_lock(self, aggregate_id: UUID) -> asyncio.Lock:
        lock = self._row_locks.get(aggregate_id)
        if lock is None:
            lock = asyncio.Lock()
            self._row_locks[aggregate_id] = lock
        return lock

    async def _write(self, staged: Sequence[tuple[WillAggregate, int]]) -> list[SaveResult]:
        """
        Check every expected version, then write every will.

        Nothing is written if any version check fails.
        """
        async with self._store_lock:
            for will, expected in staged:
                actual = await self.get_version(will.aggregate_id)
                if actual != expected:
                    logger.debug(
                        "Version conflict on will %s: expected %d, stored %d",
                        will.aggregate_id,
                        expected,
                        actual,
                        extra={
                            "aggregate_id": str(will.aggregate_id),
                            "expected_version": expected,
                            "actual_version": actual,
                        },
                    )
                    raise OptimisticLockError(will.aggregate_id, expected, actual)

            results: list[SaveResult] = []
            for will, expected in staged:
                events = tuple(will.uncommitted_events)
                if events:
                    self._snapshots[will.aggregate_id] = WillSnapshot(
                        aggregate_id=will.aggregate_id,
                        version=will.version,
                        state=will._serialize_state(),
                        schema_version=will.schema_version,
                    )
                    self._events[will.aggregate_id].extend(events)
                    will.mark_events_as_committed()

                    logger.debug(
                        "Saved %s/%s at version %d (%d events)",
                        will.aggregate_type,
                        will.aggregate_id,
                        will.version,
                        len(events),
                        extra={
                            "aggregate_id": str(will.aggregate_id),
                            "version": will.version,
                            "event_count": len(events),
                        },
                    )

                results.append(
                    SaveResult(
                        aggregate_id=will.aggregate_id,
                        previous_version=expected,
                        new_version=will.version,
                        events=events,
                    )
                )
            return results

    async def _publish(self, results: Sequence[SaveResult]) -> None:
        if self._event_bus is None:
            return
        events = [e for result in results for e in result.events]
        if events:
            await self._event_bus.publish(events)

    # =========================================================================
    # Finders
    # =========================================================================

    def _all_wills(self) -> list[WillAggregate]:
        return [self._hydrate(s) for s in self._snapshots.values()]

    async def find_active_by_owner(self, testator_id: str) -> list[WillAggregate]:
        """ACTIVE wills of one testator. At most one in normal operation."""
        return [
            w
            for w in self._all_wills()
            if w.testator_id == testator_id and w.status is WillStatus.ACTIVE
        ]

    async def find_by_status(self, status: WillStatus) -> list[WillAggregate]:
        return [w for w in self._all_wills() if w.status is status]

    async def find_by_nominated_executor(self, person_key: str) -> list[WillAggregate]:
        """
        Wills naming the person as an active executor.

        Args:
            person_key: Any identity key of the person ("user:...", "nid:..."
                or "name:...")
        """
        return [
            w
            for w in self._all_wills()
            if any(person_key in identity_keys(e.nominee) for e in w.active_executors())
        ]

    async def search(self, query: Query | None = None) -> Page[WillAggregate]:
        """
        Filter, order and paginate stored wills.

        Filters apply to the fields of the search row: will_id, testator_id,
        title, status, will_type, version, version_number, storage_location,
        has_capacity, the witness, executor, bequest, codicil and
        disinheritance counts, percentage_allocated, residuary_allocated,
        created_at, updated_at and activated_at.
        """
        query = query or Query()
        with self._tracer.span(
            "succession.repository.search",
            {
                ATTR_QUERY_FILTER_COUNT: len(query.filters),
                ATTR_QUERY_LIMIT: query.limit if query.limit is not None else -1,
            },
        ) as span:
            rows = [(w, _search_row(w)) for w in self._all_wills()]
            matched = [(w, row) for w, row in rows if query.matches(row)]

            if query.order_by:
                order_by = query.order_by
                matched.sort(
                    key=lambda pair: _sort_key(pair[1].get(order_by)),
                    reverse=query.order_direction == "desc",
                )

            end = None if query.limit is None else query.offset + query.limit
            items = tuple(w for w, _ in matched[query.offset : end])

            if span:
                span.set_attribute("result_count", len(items))

            logger.debug(
                "Search %s matched %d will(s)",
                query,
                len(matched),
                extra={"query": str(query), "total": len(matched)},
            )
            return Page(items=items, total=len(matched), offset=query.offset, limit=query.limit)

    # =========================================================================
    # Transactions
    # =========================================================================

    def begin_transaction(self) -> InMemoryWillTransaction:
        return InMemoryWillTransaction(self)

    async def _commit_transaction(
        self, staged: Sequence[tuple[WillAggregate, int]]
    ) -> list[SaveResult]:
        with self._tracer.span(
            "succession.repository.commit",
            {ATTR_TRANSACTION_SIZE: len(staged)},
        ):
            return await self._write(staged)

    def clear(self) -> None:
        """Drop every stored will and event."""
        self._snapshots.clear()
        self._events.clear()
        self._row_locks.clear()


class InMemoryWillTransaction:
    """
    Unit of work over an ``InMemoryWillRepository``.

    Wills read with ``for_update=True`` are locked until commit or rollback.
    Lock several wills in a consistent order (for example sorted by id) to
    avoid deadlocks between concurrent transactions.

    Example:
        >>> async with repo.begin_transaction() as tx:
        ...     old = await tx.get(old_id)
        ...     new = await tx.get(new_id)
        ...     old.supersede(new_id)
        ...     new.activate()
        ...     tx.save(old)
        ...     tx.save(new)
    """

    def __init__(self, repository: InMemoryWillRepository) -> None:
        self._repository = repository
        self._held: dict[UUID, asyncio.Lock] = {}
        self._staged: dict[UUID, tuple[WillAggregate, int]] = {}
        self._finished = False

    @property
    def is_finished(self) -> bool:
        return self._finished

    @property
    def staged_count(self) -> int:
        return len(self._staged)

    def _ensure_open(self) -> None:
        if self._finished:
            raise TransactionError("Transaction has already been committed or rolled back")

    async def _lock(self, aggregate_id: UUID) -> None:
        if aggregate_id in self._held:
            return
        lock = self._repository._row_lock(aggregate_id)
        await lock.acquire()
        self._held[aggregate_id] = lock

    def _release(self) -> None:
        for lock in self._held.values():
            lock.release()
        self._held.clear()
        self._staged.clear()
        self._finished = True

    async def get(self, aggregate_id: UUID, for_update: bool = True) -> WillAggregate:
        """
        Load a will inside the transaction.

        Raises:
            AggregateNotFoundError: If the will was never saved
            TransactionError: If the transaction has finished
        """
        self._ensure_open()
        if for_update:
            await self._lock(aggregate_id)
        return await self._repository.get(aggregate_id)

    def save(self, will: WillAggregate, expected_version: int | None = None) -> None:
        """Stage a will for commit. Staging the same will again replaces it."""
        self._ensure_open()
        if expected_version is None:
            expected_version = InMemoryWillRepository._default_expected(will)
        self._staged[will.aggregate_id] = (will, expected_version)

    async def commit(self) -> list[SaveResult]:
        """
        Write every staged will, then publish their events.

        Raises:
            OptimisticLockError: If any staged will is stale; nothing is written
            TransactionError: If the transaction has finished
        """
        self._ensure_open()
        staged = list(self._staged.values())
        try:
            for aggregate_id in sorted(self._staged, key=str):
                await self._lock(aggregate_id)
            results = await self._repository._commit_transaction(staged)
        finally:
            self._release()

        logger.debug(
            "Committed transaction with %d will(s)",
            len(results),
            extra={
                "transaction_size": len(results),
                "aggregate_ids": [str(r.aggregate_id) for r in results],
            },
        )
        await self._repository._publish(results)
        return results

    async def rollback(self) -> None:
        """Discard staged wills and release locks. Nothing is written."""
        if self._finished:
            return
        logger.debug(
            "Rolled back transaction with %d staged will(s)",
            len(self._staged),
            extra={"transaction_size": len(self._staged)},
        )
        self._release()

    async def __aenter__(self) -> InMemoryWillTransaction:
        self._ensure_open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()
        elif not self._finished:
            await self.commit()


__all__ = [
    "InMemoryWillRepository",
    "InMemoryWillTransaction",
]
