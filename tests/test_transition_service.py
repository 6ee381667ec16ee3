import asyncio
import logging

import pytest

from recruitment_pipeline.core.stages import Stage
from recruitment_pipeline.services.application_store import UpstreamStoreError
from recruitment_pipeline.services.pipeline_aggregator import aggregate
from recruitment_pipeline.services.transition_service import (
    TransitionErrorKind,
    TransitionService,
)

pytestmark = pytest.mark.unit


class FailingStore:
    """Store whose transport is down."""

    def __init__(self, fail_on="get"):
        self.fail_on = fail_on
        self.inner = None

    async def get_application(self, application_id):
        if self.fail_on == "get":
            raise UpstreamStoreError("connection refused", {"host": "store"})
        return await self.inner.get_application(application_id)

    async def update_status(self, application_id, new_status, **kwargs):
        raise UpstreamStoreError("write timed out")


class RacingStore:
    """Store where another recruiter changes the status between read and write."""

    def __init__(self, inner, competing_status):
        self.inner = inner
        self.competing_status = competing_status

    async def get_application(self, application_id):
        record = await self.inner.get_application(application_id)
        await self.inner.update_status(
            application_id,
            self.competing_status,
            expected_status=record.raw_status,
            action="advance",
            actor="someone-else",
        )
        return record

    async def update_status(self, application_id, new_status, **kwargs):
        return await self.inner.update_status(application_id, new_status, **kwargs)


def test_reject_moves_candidate_out_of_l2(store):
    async def scenario():
        before = aggregate(await store.fetch_applications())
        result = await TransitionService(store).reject("isha", "skills mismatch", actor="client")
        after = aggregate(await store.fetch_applications())
        return before, result, after

    before, result, after = asyncio.run(scenario())

    assert before.stage_of("isha") is Stage.L2
    assert result.ok
    assert result.stale
    assert result.previous_status == "L2"
    assert result.new_status == "Rejected"
    assert after.stage_of("isha") is Stage.REJECTED
    assert all(record.id != "isha" for record in after.membership[Stage.L2])


def test_reject_reason_is_recorded_in_history(store):
    async def scenario():
        await TransitionService(store).reject("isha", "  skills mismatch  ", actor="client")
        return await store.status_history("isha")

    history = asyncio.run(scenario())

    assert len(history) == 1
    assert history[0].action == "reject"
    assert history[0].reason == "skills mismatch"
    assert history[0].previous_status == "L2"
    assert history[0].new_status == "Rejected"
    assert history[0].actor == "client"


def test_blank_reject_reason_is_dropped(store):
    async def scenario():
        await TransitionService(store).reject("isha", "   ")
        return await store.status_history("isha")

    assert asyncio.run(scenario())[0].reason is None


def test_advance_moves_hr_round_to_offer_stage(store):
    async def scenario():
        result = await TransitionService(store).advance("rohan")
        return result, aggregate(await store.fetch_applications())

    result, snapshot = asyncio.run(scenario())

    assert result.ok
    assert result.new_status == "Selected"
    assert snapshot.stage_of("rohan") is Stage.OFFER_STAGE
    assert snapshot.counts[Stage.HR_ROUND] == 0


def test_advance_status_is_configurable(store):
    async def scenario():
        await TransitionService(store, advance_status="Offer Stage").advance("rohan")
        return await store.get_application("rohan")

    assert asyncio.run(scenario()).raw_status == "Offer Stage"


def test_advance_unknown_id_is_not_found_and_changes_nothing(store):
    async def scenario():
        before = aggregate(await store.fetch_applications())
        result = await TransitionService(store).advance("nonexistent-id")
        after = aggregate(await store.fetch_applications())
        return before, result, after

    before, result, after = asyncio.run(scenario())

    assert not result.ok
    assert result.error.kind is TransitionErrorKind.NOT_FOUND
    assert not result.stale
    assert before == after


def test_record_removed_before_transition_is_not_found(store):
    store.remove("isha")

    result = asyncio.run(TransitionService(store).reject("isha", "gone"))

    assert result.error.kind is TransitionErrorKind.NOT_FOUND


def test_concurrent_modification_is_reported_as_not_found(store):
    racing = RacingStore(store, competing_status="L3")

    async def scenario():
        result = await TransitionService(racing).reject("isha", "too slow")
        return result, await store.get_application("isha")

    result, record = asyncio.run(scenario())

    assert result.error.kind is TransitionErrorKind.NOT_FOUND
    assert result.error.details == {"expected_status": "L2"}
    assert record.raw_status == "L3"


def test_store_failure_on_read_is_upstream():
    result = asyncio.run(TransitionService(FailingStore()).advance("isha"))

    assert result.error.kind is TransitionErrorKind.UPSTREAM
    assert result.error.message == "connection refused"
    assert result.error.details == {"host": "store"}
    assert not result.stale


def test_store_failure_on_write_is_upstream(store):
    failing = FailingStore(fail_on="update")
    failing.inner = store

    result = asyncio.run(TransitionService(failing).reject("isha"))

    assert result.error.kind is TransitionErrorKind.UPSTREAM
    assert result.error.message == "write timed out"


def test_listeners_are_told_after_success_only(store):
    invalidated = []
    refreshed = []
    service = TransitionService(store, listeners=[invalidated.append])
    service.add_listener(refreshed.append)

    async def scenario():
        await service.advance("nonexistent-id")
        await service.advance("rohan")

    asyncio.run(scenario())

    assert invalidated == ["rohan"]
    assert refreshed == ["rohan"]


def test_repeating_a_transition_writes_once(store):
    service = TransitionService(store)

    async def scenario():
        first = await service.reject("isha", "skills mismatch")
        second = await service.reject("isha", "skills mismatch")
        return first, second, await store.status_history("isha")

    first, second, history = asyncio.run(scenario())

    assert first.ok and first.stale
    assert second.ok and not second.stale
    assert len(history) == 1


def test_concurrent_transitions_for_different_candidates(store):
    service = TransitionService(store)

    async def scenario():
        results = await asyncio.gather(service.reject("isha", "no"), service.advance("rohan"))
        return results, aggregate(await store.fetch_applications())

    results, snapshot = asyncio.run(scenario())

    assert all(result.ok for result in results)
    assert snapshot.stage_of("isha") is Stage.REJECTED
    assert snapshot.stage_of("rohan") is Stage.OFFER_STAGE


def test_failing_listener_does_not_hide_committed_transition(store, caplog):
    def broken_listener(application_id):
        raise RuntimeError("listener broke")

    called = []
    service = TransitionService(store, listeners=[broken_listener, called.append])

    async def scenario():
        result = await service.reject("isha", "x")
        return result, await store.get_application("isha")

    with caplog.at_level(logging.ERROR, logger="recruitment_pipeline.services.transition_service"):
        result, record = asyncio.run(scenario())

    assert result.ok
    assert result.stale
    assert record.raw_status == "Rejected"
    assert called == ["isha"]
    assert "Invalidation listener failed for application isha" in caplog.text
