"""
Standard span attributes for succession.

These constants keep span attribute keys consistent across the repository,
the event bus and the command handler.

Example:
    >>> from succession.observability.attributes import ATTR_AGGREGATE_ID
    >>>
    >>> with tracer.span(
    ...     "succession.repository.save",
    ...     {ATTR_AGGREGATE_ID: str(will.aggregate_id)},
    ... ):
    ...     pass
"""

# =============================================================================
# Aggregate Attributes
# =============================================================================

ATTR_AGGREGATE_ID = "succession.aggregate.id"
"""Unique identifier for the aggregate instance (UUID string)."""

ATTR_AGGREGATE_TYPE = "succession.aggregate.type"
"""Type name of the aggregate (e.g., 'Will')."""

ATTR_WILL_STATUS = "succession.will.status"
"""Lifecycle status of the will after the operation (string)."""

# =============================================================================
# Event Attributes
# =============================================================================

ATTR_EVENT_ID = "succession.event.id"
"""Unique identifier for the event (UUID string)."""

ATTR_EVENT_TYPE = "succession.event.type"
"""Type name of the event (e.g., 'WillAttested')."""

ATTR_EVENT_COUNT = "succession.event.count"
"""Number of events in an operation (integer)."""

# =============================================================================
# Version Attributes
# =============================================================================

ATTR_VERSION = "succession.version"
"""Current version of an aggregate (integer)."""

ATTR_EXPECTED_VERSION = "succession.expected_version"
"""Expected version for optimistic concurrency (integer)."""

# =============================================================================
# Actor and Command Attributes
# =============================================================================

ATTR_ACTOR_ID = "succession.actor.id"
"""Actor/user identifier who initiated the action (string)."""

ATTR_CORRELATION_ID = "succession.correlation.id"
"""Correlation identifier shared by everything one request caused (string)."""

ATTR_COMMAND_TYPE = "succession.command.type"
"""Payload type of the command being handled (string)."""

ATTR_COMMAND_SUCCESS = "succession.command.success"
"""Whether the command was accepted (boolean)."""

ATTR_ERROR_CODE = "succession.error.code"
"""Stable code of the invariant that rejected a command (string)."""

# =============================================================================
# Component-Specific Attributes
# =============================================================================

ATTR_HANDLER_NAME = "succession.handler.name"
"""Name of the event handler being invoked (string)."""

ATTR_HANDLER_COUNT = "succession.handler.count"
"""Number of handlers receiving an event (integer)."""

ATTR_HANDLER_SUCCESS = "succession.handler.success"
"""Whether the handler completed without raising (boolean)."""

ATTR_QUERY_FILTER_COUNT = "succession.query.filter_count"
"""Number of filters in a repository search (integer)."""

ATTR_QUERY_LIMIT = "succession.query.limit"
"""Page size requested by a repository search (integer)."""

ATTR_TRANSACTION_SIZE = "succession.transaction.size"
"""Number of aggregates staged in a transaction (integer)."""


__all__ = [
    "ATTR_AGGREGATE_ID",
    "ATTR_AGGREGATE_TYPE",
    "ATTR_WILL_STATUS",
    "ATTR_EVENT_ID",
    "ATTR_EVENT_TYPE",
    "ATTR_EVENT_COUNT",
    "ATTR_VERSION",
    "ATTR_EXPECTED_VERSION",
    "ATTR_ACTOR_ID",
    "ATTR_CORRELATION_ID",
    "ATTR_COMMAND_TYPE",
    "ATTR_COMMAND_SUCCESS",
    "ATTR_ERROR_CODE",
    "ATTR_HANDLER_NAME",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_SUCCESS",
    "ATTR_QUERY_FILTER_COUNT",
    "ATTR_QUERY_LIMIT",
    "ATTR_TRANSACTION_SIZE",
]
