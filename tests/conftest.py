"""
Shared pytest fixtures for the succession library tests.

This module provides:
- Identity fixtures (will_id)
- Infrastructure fixtures (event_bus, repository, mock_tracer, harness)
- Wills at each lifecycle stage (draft, pending, signed, attested, active)
- Service fixtures (eligibility_checker, validator, risk_scorer, solvency_analyzer)
"""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest

from succession.aggregates.will import WillAggregate
from succession.bus.memory import InMemoryEventBus
from succession.observability import MockTracer
from succession.repositories.in_memory import InMemoryWillRepository
from succession.services.readiness import ReadinessValidator
from succession.services.risk import DisinheritanceRiskScorer
from succession.services.solvency import SolvencyAnalyzer
from succession.services.witness_eligibility import WitnessEligibilityChecker
from succession.testing import InMemoryTestHarness
from tests.fixtures import (
    active_will,
    attested_will,
    created_will,
    draft_will,
    pending_will,
    signed_will,
)

# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def will_id() -> UUID:
    return uuid4()


# =============================================================================
# Infrastructure Fixtures
# =============================================================================


@pytest.fixture
def mock_tracer() -> MockTracer:
    return MockTracer()


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus(enable_tracing=False)


@pytest.fixture
def repository(event_bus: InMemoryEventBus) -> InMemoryWillRepository:
    """Repository publishing to the ``event_bus`` fixture, tracing disabled."""
    return InMemoryWillRepository(event_bus=event_bus, enable_tracing=False)


@pytest.fixture
def harness() -> InMemoryTestHarness:
    return InMemoryTestHarness()


# =============================================================================
# Will Fixtures
# =============================================================================


@pytest.fixture
def new_will(will_id: UUID) -> WillAggregate:
    """A created will with nothing else recorded."""
    return created_will(will_id)


@pytest.fixture
def draft(will_id: UUID) -> WillAggregate:
    return draft_will(will_id)


@pytest.fixture
def pending(will_id: UUID) -> WillAggregate:
    return pending_will(will_id)


@pytest.fixture
def signed(will_id: UUID) -> WillAggregate:
    return signed_will(will_id)


@pytest.fixture
def attested(will_id: UUID) -> WillAggregate:
    return attested_will(will_id)


@pytest.fixture
def active(will_id: UUID) -> WillAggregate:
    return active_will(will_id)


# =============================================================================
# Service Fixtures
# =============================================================================


@pytest.fixture
def eligibility_checker() -> WitnessEligibilityChecker:
    return WitnessEligibilityChecker()


@pytest.fixture
def risk_scorer() -> DisinheritanceRiskScorer:
    return DisinheritanceRiskScorer()


@pytest.fixture
def validator() -> ReadinessValidator:
    return ReadinessValidator()


@pytest.fixture
def solvency_analyzer() -> SolvencyAnalyzer:
    return SolvencyAnalyzer()
