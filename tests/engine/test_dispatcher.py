from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from attendance_sync.core.contracts.entity import Concert, EntityType, Member, Rehearsal
from attendance_sync.core.contracts.events import ChangeEvent, Operation, UnrecognizedEvent
from attendance_sync.core.contracts.sync import DispatchStatus
from attendance_sync.core.engine.decoder import decode_message
from attendance_sync.core.engine.dispatcher import ReconciliationDispatcher
from tests.fakes.consumer import make_message
from tests.fakes.fetcher import FakeFetcher
from tests.fakes.store import FakeStore


def _event(entity_type: EntityType, operation: Operation, entity_id: int, correlation_id: str | None = None) -> ChangeEvent:
    return ChangeEvent(entity_type=entity_type, operation=operation, entity_id=entity_id, correlation_id=correlation_id)


@pytest.mark.asyncio
async def test_add_member_fetches_and_stores_upstream_state() -> None:
    fetcher = FakeFetcher([Member(id=1, name="Ada")])
    store = FakeStore()
    dispatcher = ReconciliationDispatcher(fetcher, store)

    event = decode_message(make_message("members", "add_member", {"entityId": 1, "correlationId": "c-1"}))
    result = await dispatcher.dispatch(event)

    assert result.status is DispatchStatus.APPLIED
    assert await store.get_by_id(EntityType.MEMBER, 1) == Member(id=1, name="Ada")
    assert fetcher.fetch_one_calls == [(EntityType.MEMBER, 1, "c-1")]


@pytest.mark.asyncio
async def test_edit_replaces_local_row_and_is_idempotent() -> None:
    fetcher = FakeFetcher([Concert(id=5, title="Winter Concert")])
    store = FakeStore()
    await store.upsert(Concert(id=5, title="Old Title"))
    dispatcher = ReconciliationDispatcher(fetcher, store)

    event = _event(EntityType.CONCERT, Operation.EDIT, 5)
    first = await dispatcher.dispatch(event)
    second = await dispatcher.dispatch(event)

    assert first.status is DispatchStatus.APPLIED
    assert second.status is DispatchStatus.APPLIED
    assert await store.list_all(EntityType.CONCERT) == [Concert(id=5, title="Winter Concert")]


@pytest.mark.asyncio
async def test_edit_reflects_latest_upstream_state_not_event_order() -> None:
    fetcher = FakeFetcher([Rehearsal(id=2, title="Tutti")])
    store = FakeStore()
    dispatcher = ReconciliationDispatcher(fetcher, store)

    await dispatcher.dispatch(_event(EntityType.REHEARSAL, Operation.ADD, 2))
    fetcher.put(Rehearsal(id=2, title="Tutti (moved)"))
    await dispatcher.dispatch(_event(EntityType.REHEARSAL, Operation.EDIT, 2))

    assert await store.get_by_id(EntityType.REHEARSAL, 2) == Rehearsal(id=2, title="Tutti (moved)")


@pytest.mark.asyncio
async def test_edit_not_found_upstream_keeps_local_row_and_fails() -> None:
    fetcher = FakeFetcher()
    store = FakeStore()
    await store.upsert(Member(id=9, name="Stale"))
    dispatcher = ReconciliationDispatcher(fetcher, store)

    result = await dispatcher.dispatch(_event(EntityType.MEMBER, Operation.EDIT, 9))

    assert result.status is DispatchStatus.FAILED
    assert result.error == "entity not found upstream"
    assert await store.get_by_id(EntityType.MEMBER, 9) == Member(id=9, name="Stale")


@pytest.mark.asyncio
async def test_delete_removes_row_without_fetching() -> None:
    fetcher = FakeFetcher([Member(id=3, name="Still upstream")])
    store = FakeStore()
    await store.upsert(Member(id=3, name="Local"))
    dispatcher = ReconciliationDispatcher(fetcher, store)

    result = await dispatcher.dispatch(_event(EntityType.MEMBER, Operation.DELETE, 3))

    assert result.status is DispatchStatus.APPLIED
    assert await store.get_by_id(EntityType.MEMBER, 3) is None
    assert fetcher.fetch_one_calls == []


@pytest.mark.asyncio
async def test_delete_of_missing_row_is_applied() -> None:
    dispatcher = ReconciliationDispatcher(FakeFetcher(), FakeStore())

    result = await dispatcher.dispatch(_event(EntityType.CONCERT, Operation.DELETE, 404))

    assert result.status is DispatchStatus.APPLIED


@pytest.mark.asyncio
async def test_fetch_error_is_reported_not_raised() -> None:
    fetcher = FakeFetcher([Concert(id=1, title="Gala")])
    fetcher.fail_types.add(EntityType.CONCERT)
    store = FakeStore()
    dispatcher = ReconciliationDispatcher(fetcher, store)

    result = await dispatcher.dispatch(_event(EntityType.CONCERT, Operation.ADD, 1))

    assert result.status is DispatchStatus.FAILED
    assert result.error is not None and result.error.startswith("fetch failed")
    assert await store.list_all(EntityType.CONCERT) == []


@pytest.mark.asyncio
async def test_store_error_is_reported_not_raised() -> None:
    fetcher = FakeFetcher([Member(id=1, name="Ada")])
    store = FakeStore()
    store.fail_writes = True
    dispatcher = ReconciliationDispatcher(fetcher, store)

    upsert_result = await dispatcher.dispatch(_event(EntityType.MEMBER, Operation.ADD, 1))
    delete_result = await dispatcher.dispatch(_event(EntityType.MEMBER, Operation.DELETE, 1))

    assert upsert_result.status is DispatchStatus.FAILED
    assert "store write failed" in (upsert_result.error or "")
    assert delete_result.status is DispatchStatus.FAILED
    assert "store delete failed" in (delete_result.error or "")


@pytest.mark.asyncio
async def test_unrecognized_event_is_skipped_without_side_effects() -> None:
    fetcher = AsyncMock()
    store = AsyncMock()
    dispatcher = ReconciliationDispatcher(fetcher, store)

    event = UnrecognizedEvent(topic="venues", key="add_venue", reason="unknown topic 'venues'")
    result = await dispatcher.dispatch(event)

    assert result.status is DispatchStatus.SKIPPED
    fetcher.fetch_one.assert_not_awaited()
    store.upsert.assert_not_awaited()
    store.delete_by_id.assert_not_awaited()
