"""
Base class for snapshot-persisted aggregates.

An aggregate is the consistency boundary for one document. Every accepted
mutation swaps in a new immutable state snapshot and records exactly one
domain event. State is persisted as a serialized snapshot; the recorded
events are published after the save and are never replayed.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar, cast, get_args, get_origin
from uuid import UUID

from succession.events.base import DomainEvent
from succession.exceptions import EventVersionError
from succession.types import TState

logger = logging.getLogger(__name__)

TEvent = TypeVar("TEvent", bound=DomainEvent)


class AggregateRoot(Generic[TState], ABC):
    """
    Base class for aggregate roots.

    Aggregates:
    - Hold an immutable pydantic state snapshot
    - Track uncommitted events that need to be published
    - Carry a version equal to the number of recorded events, used for
      optimistic concurrency on save

    Subclasses must implement ``_get_initial_state()`` and mutate only
    through ``_commit_change()``, after all validation has passed. A
    mutation that raises before calling it leaves state, version and the
    uncommitted event list untouched.

    Example:
        >>> class OrderAggregate(AggregateRoot[OrderState]):
        ...     aggregate_type = "Order"
        ...
        ...     def _get_initial_state(self) -> OrderState:
        ...         return OrderState(order_id=self.aggregate_id)
        ...
        ...     def ship(self) -> None:
        ...         if self.current_state.status != "paid":
        ...             raise ValueError("Order not paid")
        ...         self._commit_change(
        ...             self.current_state.model_copy(update={"status": "shipped"}),
        ...             self._new_event(OrderShipped),
        ...         )

    Attributes:
        aggregate_type: String identifier for this aggregate type
        schema_version: Version of the state schema stored in snapshots.
            Increment when TState changes incompatibly.
        validate_versions: Raise EventVersionError on out-of-sequence events
    """

    aggregate_type: str = "Unknown"

    schema_version: int = 1

    validate_versions: bool = True

    def __init__(self, aggregate_id: UUID) -> None:
        self._aggregate_id = aggregate_id
        self._version = 0
        self._uncommitted_events: list[DomainEvent] = []
        self._state: TState | None = None
        self._actor_id: str | None = None
        self._correlation_id: UUID | None = None

    @property
    def aggregate_id(self) -> UUID:
        return self._aggregate_id

    @property
    def version(self) -> int:
        """Current version (number of recorded events)."""
        return self._version

    @property
    def state(self) -> TState | None:
        """Current state, or None before the aggregate has been created."""
        return self._state

    @property
    def current_state(self) -> TState:
        """Current state, falling back to the initial state for new aggregates."""
        if self._state is None:
            return self._get_initial_state()
        return self._state

    @property
    def uncommitted_events(self) -> list[DomainEvent]:
        """Events recorded since the last save. Returns a copy."""
        return self._uncommitted_events.copy()

    @property
    def has_uncommitted_events(self) -> bool:
        return len(self._uncommitted_events) > 0

    @abstractmethod
    def _get_initial_state(self) -> TState:
        """Return the state of an aggregate that has not been created yet."""
        pass

    def set_command_context(
        self,
        actor_id: str | None = None,
        correlation_id: UUID | None = None,
    ) -> None:
        """
        Set the actor and correlation id stamped on subsequently recorded events.

        Called by the command handler before invoking a mutation.
        """
        self._actor_id = actor_id
        self._correlation_id = correlation_id

    def get_next_version(self) -> int:
        return self._version + 1

    def _new_event(self, event_type: type[TEvent], **payload: Any) -> TEvent:
        """Build an event for this aggregate at the next version."""
        context: dict[str, Any] = {
            "aggregate_id": self._aggregate_id,
            "aggregate_version": self.get_next_version(),
            "actor_id": self._actor_id,
        }
        if self._correlation_id is not None:
            context["correlation_id"] = self._correlation_id
        return event_type(**context, **payload)

    def _commit_change(self, new_state: TState, event: DomainEvent) -> None:
        """
        Swap in ``new_state`` and record ``event``.

        Raises:
            EventVersionError: If validation is enabled and the event does not
                carry the next version (current version + 1)
        """
        expected_version = self._version + 1
        if event.aggregate_version != expected_version:
            if self.validate_versions:
                raise EventVersionError(
                    expected_version=expected_version,
                    actual_version=event.aggregate_version,
                    event_id=event.event_id,
                    aggregate_id=self._aggregate_id,
                )
            logger.warning(
                "Version mismatch (validation disabled): expected %d, got %d "
                "for aggregate %s, event %s",
                expected_version,
                event.aggregate_version,
                self._aggregate_id,
                event.event_id,
                extra={
                    "aggregate_id": str(self._aggregate_id),
                    "expected_version": expected_version,
                    "actual_version": event.aggregate_version,
                    "event_id": str(event.event_id),
                },
            )

        self._state = new_state
        self._version = event.aggregate_version
        self._uncommitted_events.append(event)

    def mark_events_as_committed(self) -> None:
        """Called by the repository once the snapshot has been stored."""
        self._uncommitted_events.clear()

    def clear_uncommitted_events(self) -> list[DomainEvent]:
        """Clear and return all uncommitted events."""
        events = self._uncommitted_events.copy()
        self._uncommitted_events.clear()
        return events

    def _serialize_state(self) -> dict[str, Any]:
        """
        Serialize the current state for snapshot storage.

        Uses ``model_dump(mode="json")`` so nested models, UUIDs, decimals and
        datetimes are JSON-compatible. Returns an empty dict for a new
        aggregate.
        """
        if self._state is None:
            return {}
        return self._state.model_dump(mode="json")

    def _restore_from_snapshot(
        self,
        state_dict: dict[str, Any],
        version: int,
    ) -> None:
        """
        Restore state and version from a stored snapshot.

        Args:
            state_dict: Output of ``_serialize_state()``
            version: Aggregate version when the snapshot was taken

        Raises:
            ValidationError: If state_dict doesn't match the TState schema.
        """
        if not state_dict:
            self._version = version
            return

        state_type = self._get_state_type()
        self._state = state_type.model_validate(state_dict)
        self._version = version

    def _get_state_type(self) -> type[TState]:
        """
        Get the state type (TState) from the Generic parameter.

        Raises:
            RuntimeError: If the state type cannot be determined.
        """
        for base in type(self).__mro__:
            if not hasattr(base, "__orig_bases__"):
                continue

            for orig_base in base.__orig_bases__:
                origin = get_origin(orig_base)
                if origin is None:
                    continue

                try:
                    if issubclass(origin, AggregateRoot):
                        args = get_args(orig_base)
                        if args:
                            return cast(type[TState], args[0])
                except TypeError:
                    continue

        raise RuntimeError(
            f"Cannot determine state type for {type(self).__name__}. "
            "Ensure the class properly inherits from AggregateRoot[StateType]."
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"id={self._aggregate_id}, "
            f"version={self._version}, "
            f"uncommitted={len(self._uncommitted_events)})"
        )

    def __eq__(self, other: object) -> bool:
        """Check equality based on aggregate ID."""
        if not isinstance(other, AggregateRoot):
            return NotImplemented
        return self._aggregate_id == other._aggregate_id

    def __hash__(self) -> int:
        return hash(self._aggregate_id)


__all__ = ["AggregateRoot"]
