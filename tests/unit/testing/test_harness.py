"""
Unit tests for InMemoryTestHarness and EventAssertions.
"""

from uuid import UUID, uuid4

import pytest

from succession.application import (
    AddBequest,
    AddExecutor,
    CreateWill,
    UpdateCapacityDeclaration,
)
from succession.events.will import (
    BequestAdded,
    CapacityDeclarationUpdated,
    ExecutorAdded,
    WillAttested,
    WillCreated,
)
from succession.services.readiness import ReadinessTier
from succession.testing import EventAssertions, InMemoryTestHarness
from tests.fixtures import (
    TESTATOR_ID,
    competent_declaration,
    nomination,
    percentage_bequest,
    residuary_bequest,
)


async def build_draft(harness: InMemoryTestHarness, will_id: UUID) -> None:
    for payload in (
        CreateWill(testator_id=TESTATOR_ID),
        UpdateCapacityDeclaration(declaration=competent_declaration()),
        AddExecutor(nomination=nomination()),
        AddBequest(bequest=residuary_bequest()),
    ):
        result = await harness.send(will_id, payload)
        assert result.success, result.message


# =============================================================================
# Harness
# =============================================================================


class TestHarness:
    @pytest.mark.asyncio
    async def test_send_publishes_events(
        self, harness: InMemoryTestHarness, will_id: UUID
    ) -> None:
        result = await harness.send(will_id, CreateWill(testator_id=TESTATOR_ID))

        assert result.success
        [event] = harness.published_events
        assert isinstance(event, WillCreated)
        assert event.actor_id == "test-actor"
        assert await harness.repository.exists(will_id)

    @pytest.mark.asyncio
    async def test_actor_override(self, harness: InMemoryTestHarness, will_id: UUID) -> None:
        await harness.send(will_id, CreateWill(testator_id=TESTATOR_ID), actor_id="advocate-7")
        assert harness.published_events[0].actor_id == "advocate-7"

    @pytest.mark.asyncio
    async def test_queries_see_stored_wills(
        self, harness: InMemoryTestHarness, will_id: UUID
    ) -> None:
        await build_draft(harness, will_id)
        report = await harness.queries.readiness(will_id, ReadinessTier.ATTESTATION)
        assert report.error_codes == ["INSUFFICIENT_WITNESSES"]

    @pytest.mark.asyncio
    async def test_rejected_command_publishes_nothing(
        self, harness: InMemoryTestHarness, will_id: UUID
    ) -> None:
        await build_draft(harness, will_id)
        await harness.send(will_id, AddBequest(bequest=percentage_bequest("Jane Wanjiru", "70")))
        harness.clear_published_events()

        result = await harness.send(
            will_id, AddBequest(bequest=percentage_bequest("Kevin Otieno", "40"))
        )

        assert result.failed
        harness.assertions().assert_no_events_published()

    @pytest.mark.asyncio
    async def test_reset(self, harness: InMemoryTestHarness, will_id: UUID) -> None:
        await harness.send(will_id, CreateWill(testator_id=TESTATOR_ID))
        repository = harness.repository

        harness.reset()

        assert harness.repository is not repository
        assert harness.published_events == []
        assert not await harness.repository.exists(will_id)


# =============================================================================
# Assertions
# =============================================================================


class TestEventAssertions:
    @pytest.mark.asyncio
    async def test_passing_assertions(self, harness: InMemoryTestHarness, will_id: UUID) -> None:
        correlation_id = uuid4()
        for payload in (
            CreateWill(testator_id=TESTATOR_ID),
            UpdateCapacityDeclaration(declaration=competent_declaration()),
            AddExecutor(nomination=nomination("Grace Njeri")),
            AddBequest(bequest=residuary_bequest()),
        ):
            await harness.send(will_id, payload, correlation_id=correlation_id)

        assertions = harness.assertions()
        assertions.assert_event_count(4)
        assertions.assert_event_sequence(
            [WillCreated, CapacityDeclarationUpdated, ExecutorAdded, BequestAdded]
        )
        created = assertions.assert_event_published(WillCreated)
        assert created.testator_id == TESTATOR_ID
        assertions.assert_event_with_fields(ExecutorAdded, executor_name="Grace Njeri")
        assertions.assert_event_for_aggregate(BequestAdded, will_id)
        assertions.assert_no_event_published(WillAttested)
        assertions.assert_contiguous_versions(will_id)
        assertions.assert_all_correlated(correlation_id)

    def test_missing_event_message(self) -> None:
        with pytest.raises(AssertionError, match="Published event types: none"):
            EventAssertions([]).assert_event_published(WillAttested)

    @pytest.mark.asyncio
    async def test_failing_assertions(self, harness: InMemoryTestHarness, will_id: UUID) -> None:
        await build_draft(harness, will_id)
        assertions = harness.assertions()

        with pytest.raises(AssertionError, match="Event sequence mismatch"):
            assertions.assert_event_sequence([WillCreated])
        with pytest.raises(AssertionError, match="Expected 2 events, got 4"):
            assertions.assert_event_count(2)
        with pytest.raises(AssertionError, match="Expected no WillCreated events, found 1"):
            assertions.assert_no_event_published(WillCreated)
        with pytest.raises(AssertionError, match="Expected ExecutorAdded"):
            assertions.assert_event_with_fields(ExecutorAdded, executor_name="Nobody")
        with pytest.raises(AssertionError, match="Found it only for"):
            assertions.assert_event_for_aggregate(WillCreated, uuid4())
        with pytest.raises(AssertionError, match="not correlated"):
            assertions.assert_all_correlated(uuid4())

    def test_gap_in_versions(self, will_id: UUID) -> None:
        events = [
            WillCreated(
                aggregate_id=will_id, aggregate_version=1, testator_id="u", will_type="STANDARD"
            ),
            WillCreated(
                aggregate_id=will_id, aggregate_version=3, testator_id="u", will_type="STANDARD"
            ),
        ]
        with pytest.raises(AssertionError, match="not contiguous"):
            EventAssertions(events).assert_contiguous_versions(will_id)
