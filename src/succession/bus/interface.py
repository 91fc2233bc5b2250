"""Event bus interface definitions.

The event bus decouples the command side from whatever reacts to will
events (audit trails, notifications, read models). Handlers may be plain
callables or objects with a ``handle`` method, sync or async.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, runtime_checkable

from succession.events.base import DomainEvent

# Type alias for simple function-based handlers
EventHandlerFunc = Callable[[DomainEvent], Awaitable[None] | None]


@runtime_checkable
class FlexibleEventHandler(Protocol):
    """Handler object whose ``handle`` may be sync or async."""

    def handle(self, event: DomainEvent) -> Awaitable[None] | None:
        """Handle event, returning Awaitable if async."""
        ...


@runtime_checkable
class EventSubscriber(Protocol):
    """
    A handler that declares the event types it wants.

    Example:
        >>> class WillAuditTrail:
        ...     def subscribed_to(self) -> list[type[DomainEvent]]:
        ...         return [WillAttested, WillRevoked]
        ...
        ...     async def handle(self, event: DomainEvent) -> None:
        ...         await self._record(event)
    """

    def subscribed_to(self) -> list[type[DomainEvent]]:
        """Return list of event types this subscriber handles."""
        ...

    def handle(self, event: DomainEvent) -> Awaitable[None] | None:
        """Handle event, returning Awaitable if async."""
        ...


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.

    Implementations must isolate handler failures: one failing handler
    never prevents the others from running, and never propagates to the
    publisher.

    Tracing:
        Implementations take ``tracer: Tracer | None`` and fall back to
        ``create_tracer(__name__, enable_tracing)``. Dispatch of one event
        runs inside a ``succession.event_bus.dispatch`` span and each
        handler inside ``succession.event_bus.handle``.

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(WillAttested, notify_executors)
        >>> bus.subscribe_to_all_events(audit_trail)
        >>> await bus.publish([WillAttested(...)])
    """

    @abstractmethod
    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """
        Publish events to all registered subscribers.

        Events are processed in order, and all handlers for each event
        are invoked before moving to the next event.

        Args:
            events: Events to publish
        """
        pass

    @abstractmethod
    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        """
        Subscribe a handler to a specific event type.

        Args:
            event_type: The event class to subscribe to
            handler: Object with handle() method or callable
        """
        pass

    @abstractmethod
    def unsubscribe(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> bool:
        """
        Unsubscribe a handler from a specific event type.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        pass

    @abstractmethod
    def subscribe_all(self, subscriber: EventSubscriber) -> None:
        """Subscribe ``subscriber`` to each type from its ``subscribed_to()``."""
        pass

    @abstractmethod
    def subscribe_to_all_events(
        self,
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        """
        Subscribe a handler to all event types (wildcard subscription).

        Example:
            >>> bus.subscribe_to_all_events(audit_trail)
        """
        pass

    @abstractmethod
    def unsubscribe_from_all_events(
        self,
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> bool:
        """
        Unsubscribe a handler from the wildcard subscription.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        pass


__all__ = [
    "EventBus",
    "EventHandlerFunc",
    "EventSubscriber",
    "FlexibleEventHandler",
]
