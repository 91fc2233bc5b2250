"""
Test utilities for succession-py.

Components:
    InMemoryTestHarness: Bus, repository, command handler and query service
        wired together, with every published event captured
    EventAssertions: Event assertions with clear failure messages

Note:
    Intended for test code only.
"""

from succession.testing.assertions import EventAssertions
from succession.testing.harness import InMemoryTestHarness

__all__ = [
    "InMemoryTestHarness",
    "EventAssertions",
]
