"""
Will persistence.

Wills are stored as snapshots with optimistic concurrency control.
``InMemoryWillRepository`` is the bundled implementation.
"""

from succession.repositories.in_memory import (
    InMemoryWillRepository,
    InMemoryWillTransaction,
)
from succession.repositories.interface import (
    SaveResult,
    WillRepository,
    WillSnapshot,
    WillTransaction,
)
from succession.repositories.query import Filter, Page, Query

__all__ = [
    # Protocols and results
    "WillRepository",
    "WillTransaction",
    "WillSnapshot",
    "SaveResult",
    # Implementations
    "InMemoryWillRepository",
    "InMemoryWillTransaction",
    # Queries
    "Filter",
    "Query",
    "Page",
]
