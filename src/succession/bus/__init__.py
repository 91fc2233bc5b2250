"""
Event bus for distributing will events in-process.

Example:
    >>> from succession.bus import InMemoryEventBus
    >>> bus = InMemoryEventBus()
    >>> bus.subscribe(WillAttested, notify_executors)
"""

from succession.bus.adapter import HandlerAdapter
from succession.bus.interface import (
    EventBus,
    EventHandlerFunc,
    EventSubscriber,
    FlexibleEventHandler,
)
from succession.bus.memory import InMemoryEventBus

__all__ = [
    "EventBus",
    "EventHandlerFunc",
    "EventSubscriber",
    "FlexibleEventHandler",
    "HandlerAdapter",
    "InMemoryEventBus",
]
