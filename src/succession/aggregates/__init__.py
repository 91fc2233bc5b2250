"""Aggregates for the succession package."""

from succession.aggregates.base import AggregateRoot
from succession.aggregates.will import WillAggregate, WillState

__all__ = [
    "AggregateRoot",
    "WillAggregate",
    "WillState",
]
