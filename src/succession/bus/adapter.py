"""
Handler adapter for normalizing event handlers.

Handlers arrive as async or sync ``handle`` methods, or as async or sync
callables. ``HandlerAdapter`` gives all of them the same async interface.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from succession.events.base import DomainEvent

AsyncHandlerFunc = Callable[[DomainEvent], Awaitable[None]]


def get_handler_name(handler: Any) -> str:
    """Descriptive name for a handler, for logging and span attributes."""
    if hasattr(handler, "handle"):
        return str(handler.__class__.__name__)
    if hasattr(handler, "__name__"):
        return str(handler.__name__)
    return repr(handler)


class HandlerAdapter:
    """
    Adapter that normalizes event handlers to a consistent async interface.

    Example:
        >>> def sync_handler(event: DomainEvent) -> None:
        ...     print(event)
        >>> adapter = HandlerAdapter(sync_handler)
        >>> await adapter.handle(event)

    Attributes:
        original: The original unwrapped handler
        name: Descriptive name for logging
    """

    def __init__(self, handler: Any) -> None:
        """
        Raises:
            TypeError: If handler doesn't have handle() method and isn't callable
        """
        self._original = handler
        self._name = get_handler_name(handler)
        self._async_handler = self._normalize(handler)

    @staticmethod
    def _wrap(func: Callable[[DomainEvent], Any]) -> AsyncHandlerFunc:
        async def async_wrapper(event: DomainEvent) -> None:
            result = func(event)
            # A sync-looking callable may still hand back a coroutine
            if asyncio.iscoroutine(result):
                await result

        return async_wrapper

    def _normalize(self, handler: Any) -> AsyncHandlerFunc:
        if hasattr(handler, "handle"):
            method = handler.handle
            if asyncio.iscoroutinefunction(method):
                return method  # type: ignore[no-any-return]
            return self._wrap(method)

        if callable(handler):
            if asyncio.iscoroutinefunction(handler):
                return handler  # type: ignore[no-any-return]
            return self._wrap(handler)

        raise TypeError(
            f"Handler must have a handle() method or be callable, got {type(handler)}"
        )

    @property
    def original(self) -> Any:
        return self._original

    @property
    def name(self) -> str:
        return self._name

    async def handle(self, event: DomainEvent) -> None:
        await self._async_handler(event)

    def __eq__(self, other: object) -> bool:
        """Check equality based on original handler identity."""
        if isinstance(other, HandlerAdapter):
            return self._original is other._original
        return self._original is other

    def __hash__(self) -> int:
        return id(self._original)

    def __repr__(self) -> str:
        return f"HandlerAdapter({self._name})"


__all__ = [
    "HandlerAdapter",
    "AsyncHandlerFunc",
    "get_handler_name",
]
