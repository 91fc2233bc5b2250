"""
succession - Will lifecycle and compliance engine under the Law of Succession Act.

This library provides:
- A will aggregate enforcing attestation, allocation and disinheritance rules
- Witness eligibility checks and candidate ranking
- Disinheritance risk and legal-strength scoring
- Tiered readiness validation for attestation, activation and probate
- Estate solvency analysis with a debt-priority waterfall
- An in-memory repository with optimistic locking and transactions
- Command handling, an in-process event bus and optional tracing
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("succession-py")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

# Aggregate
from succession.aggregates.will import WillAggregate, WillState

# Application layer
from succession.application import (
    CommandEnvelope,
    CommandResult,
    WillCommandHandler,
    WillQueryService,
)

# Event bus
from succession.bus import EventBus, InMemoryEventBus

# Configuration
from succession.config import DEFAULT_RULES, ComplianceRules

# Events
from succession.events.base import DomainEvent

# Exceptions
from succession.exceptions import (
    AggregateNotFoundError,
    InvariantViolationError,
    OptimisticLockError,
    SuccessionError,
    TransactionError,
    UnknownCommandError,
)

# Repositories
from succession.repositories import (
    Filter,
    InMemoryWillRepository,
    Page,
    Query,
    SaveResult,
    WillRepository,
)

# Services
from succession.services import (
    DisinheritanceRiskScorer,
    ReadinessTier,
    ReadinessValidator,
    SolvencyAnalyzer,
    WitnessEligibilityChecker,
)

# Value objects
from succession.values import Money, Severity, WillStatus, WillType

__all__ = [
    "__version__",
    # Aggregate
    "WillAggregate",
    "WillState",
    # Application
    "CommandEnvelope",
    "CommandResult",
    "WillCommandHandler",
    "WillQueryService",
    # Event bus
    "EventBus",
    "InMemoryEventBus",
    # Configuration
    "ComplianceRules",
    "DEFAULT_RULES",
    # Events
    "DomainEvent",
    # Exceptions
    "SuccessionError",
    "InvariantViolationError",
    "OptimisticLockError",
    "AggregateNotFoundError",
    "TransactionError",
    "UnknownCommandError",
    # Repositories
    "WillRepository",
    "InMemoryWillRepository",
    "SaveResult",
    "Filter",
    "Query",
    "Page",
    # Services
    "WitnessEligibilityChecker",
    "DisinheritanceRiskScorer",
    "ReadinessValidator",
    "ReadinessTier",
    "SolvencyAnalyzer",
    # Values
    "Money",
    "Severity",
    "WillStatus",
    "WillType",
]
