"""
Observability utilities for succession.

Tracing is composition-based: components accept a ``Tracer`` and fall back
to ``create_tracer(__name__, enable_tracing)``. Without the ``telemetry``
extra installed every tracer is a ``NullTracer``.

Example:
    >>> from succession.observability import create_tracer, ATTR_AGGREGATE_ID
    >>>
    >>> tracer = create_tracer(__name__)
    >>> with tracer.span("succession.repository.get", {ATTR_AGGREGATE_ID: str(will_id)}):
    ...     pass
"""

from succession.observability.attributes import (
    ATTR_ACTOR_ID,
    ATTR_AGGREGATE_ID,
    ATTR_AGGREGATE_TYPE,
    ATTR_COMMAND_SUCCESS,
    ATTR_COMMAND_TYPE,
    ATTR_CORRELATION_ID,
    ATTR_ERROR_CODE,
    ATTR_EVENT_COUNT,
    ATTR_EVENT_ID,
    ATTR_EVENT_TYPE,
    ATTR_EXPECTED_VERSION,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
    ATTR_QUERY_FILTER_COUNT,
    ATTR_QUERY_LIMIT,
    ATTR_TRANSACTION_SIZE,
    ATTR_VERSION,
    ATTR_WILL_STATUS,
)
from succession.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    Tracer,
    create_tracer,
)
from succession.observability.tracing import OTEL_AVAILABLE, get_tracer, should_trace

__all__ = [
    # Tracing utilities
    "OTEL_AVAILABLE",
    "get_tracer",
    "should_trace",
    # Tracer protocol and implementations
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "create_tracer",
    # Attributes
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
