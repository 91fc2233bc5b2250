"""In-memory event bus implementation.

Distributes will events to handlers within the same process. The command
handler publishes through it only after a successful save.
"""

import asyncio
import logging
import threading
from collections import defaultdict
from collections.abc import Sequence

from succession.bus.adapter import HandlerAdapter
from succession.bus.interface import (
    EventBus,
    EventHandlerFunc,
    EventSubscriber,
    FlexibleEventHandler,
)
from succession.events.base import DomainEvent
from succession.observability import Tracer, create_tracer
from succession.observability.attributes import (
    ATTR_AGGREGATE_ID,
    ATTR_EVENT_ID,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
)

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    In-memory event bus for event distribution.

    Features:
    - Thread-safe subscription management
    - Support for sync and async handlers
    - Wildcard subscriptions (receive all events)
    - Error isolation (handler failures don't stop other handlers)
    - Optional OpenTelemetry tracing

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe(WillAttested, my_handler)
        >>> await bus.publish([WillAttested(...)])
    """

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Args:
            tracer: Optional custom Tracer instance
            enable_tracing: If True and OpenTelemetry is available, emit traces.
                          Ignored if tracer is explicitly provided.
        """
        self._subscribers: dict[type[DomainEvent], list[HandlerAdapter]] = defaultdict(list)
        self._all_event_handlers: list[HandlerAdapter] = []
        self._lock = threading.RLock()
        self._stats = {
            "events_published": 0,
            "handlers_invoked": 0,
            "handler_errors": 0,
        }

        self._tracer = tracer or create_tracer(__name__, enable_tracing)

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """
        Publish events sequentially, waiting for every handler.

        Handler failures are logged and counted but never raised.
        """
        for event in events:
            await self._dispatch_event(event)
            self._stats["events_published"] += 1

    async def _dispatch_event(self, event: DomainEvent) -> None:
        event_type = type(event)

        with self._lock:
            specific_handlers = list(self._subscribers.get(event_type, []))
            wildcard_handlers = list(self._all_event_handlers)

        handlers = specific_handlers + wildcard_handlers

        if not handlers:
            logger.debug(
                f"No handlers registered for event type: {event_type.__name__}",
                extra={"event_type": event_type.__name__},
            )
            return

        logger.debug(
            f"Dispatching {event_type.__name__} to {len(handlers)} handler(s)",
            extra={
                "event_type": event_type.__name__,
                "event_id": str(event.event_id),
                "aggregate_id": str(event.aggregate_id),
                "handler_count": len(handlers),
            },
        )

        with self._tracer.span(
            "succession.event_bus.dispatch",
            {
                ATTR_EVENT_TYPE: event_type.__name__,
                ATTR_EVENT_ID: str(event.event_id),
                ATTR_AGGREGATE_ID: str(event.aggregate_id),
                ATTR_HANDLER_COUNT: len(handlers),
            },
        ):
            await asyncio.gather(*(self._safe_handle(adapter, event) for adapter in handlers))

    async def _safe_handle(self, adapter: HandlerAdapter, event: DomainEvent) -> None:
        """Run one handler, logging and counting any exception it raises."""
        with self._tracer.span(
            "succession.event_bus.handle",
            {
                ATTR_EVENT_TYPE: type(event).__name__,
                ATTR_EVENT_ID: str(event.event_id),
                ATTR_AGGREGATE_ID: str(event.aggregate_id),
                ATTR_HANDLER_NAME: adapter.name,
            },
        ) as span:
            try:
                await adapter.handle(event)
                if span:
                    span.set_attribute(ATTR_HANDLER_SUCCESS, True)
                self._stats["handlers_invoked"] += 1
                logger.debug(
                    f"Handler {adapter.name} processed {type(event).__name__}",
                    extra={
                        "handler": adapter.name,
                        "event_type": type(event).__name__,
                        "event_id": str(event.event_id),
                    },
                )
            except Exception as e:
                if span:
                    span.set_attribute(ATTR_HANDLER_SUCCESS, False)
                    span.record_exception(e)
                self._stats["handler_errors"] += 1
                logger.error(
                    f"Handler {adapter.name} failed processing {type(event).__name__}: {e}",
                    exc_info=True,
                    extra={
                        "handler": adapter.name,
                        "event_type": type(event).__name__,
                        "event_id": str(event.event_id),
                        "error": str(e),
                    },
                )

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        adapter = HandlerAdapter(handler)

        with self._lock:
            self._subscribers[event_type].append(adapter)

        logger.info(
            f"Registered handler {adapter.name} for {event_type.__name__}",
            extra={
                "handler": adapter.name,
                "event_type": event_type.__name__,
            },
        )

    def unsubscribe(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> bool:
        target_adapter = HandlerAdapter(handler)

        with self._lock:
            adapters = self._subscribers.get(event_type, [])
            for i, adapter in enumerate(adapters):
                if adapter == target_adapter:
                    adapters.pop(i)
                    logger.info(
                        f"Unsubscribed handler {adapter.name} from {event_type.__name__}",
                        extra={
                            "handler": adapter.name,
                            "event_type": event_type.__name__,
                        },
                    )
                    return True

        logger.debug(
            f"Handler {target_adapter.name} not found for {event_type.__name__}",
            extra={
                "handler": target_adapter.name,
                "event_type": event_type.__name__,
            },
        )
        return False

    def subscribe_all(self, subscriber: EventSubscriber) -> None:
        for event_type in subscriber.subscribed_to():
            self.subscribe(event_type, subscriber)

    def subscribe_to_all_events(
        self,
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        adapter = HandlerAdapter(handler)

        with self._lock:
            self._all_event_handlers.append(adapter)

        logger.info(
            f"Registered wildcard handler {adapter.name}",
            extra={"handler": adapter.name},
        )

    def unsubscribe_from_all_events(
        self,
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> bool:
        target_adapter = HandlerAdapter(handler)

        with self._lock:
            for i, adapter in enumerate(self._all_event_handlers):
                if adapter == target_adapter:
                    self._all_event_handlers.pop(i)
                    logger.info(
                        f"Unsubscribed wildcard handler {adapter.name}",
                        extra={"handler": adapter.name},
                    )
                    return True

        return False

    def clear_subscribers(self) -> None:
        with self._lock:
            self._subscribers.clear()
            self._all_event_handlers.clear()

        logger.info("All event subscribers cleared")

    def get_subscriber_count(self, event_type: type[DomainEvent] | None = None) -> int:
        """
        Number of type-specific subscribers, excluding wildcard handlers.

        Args:
            event_type: If provided, count subscribers for this event type only
        """
        with self._lock:
            if event_type is None:
                return sum(len(handlers) for handlers in self._subscribers.values())
            return len(self._subscribers.get(event_type, []))

    def get_wildcard_subscriber_count(self) -> int:
        with self._lock:
            return len(self._all_event_handlers)

    def get_stats(self) -> dict[str, int]:
        """
        Get statistics about event bus operation.

        Returns:
            Dictionary with counts:
            - events_published: Total events published
            - handlers_invoked: Total successful handler invocations
            - handler_errors: Total handler errors
        """
        return dict(self._stats)


__all__ = ["InMemoryEventBus"]
