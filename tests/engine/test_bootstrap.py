from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from attendance_sync.core.contracts.entity import Concert, Entity, EntityType, Member, Rehearsal
from attendance_sync.core.engine.bootstrap import BootstrapSync
from attendance_sync.core.engine.progress import BootstrapProgress
from tests.fakes.fetcher import FakeFetcher
from tests.fakes.store import FakeStore


def _upstream() -> FakeFetcher:
    return FakeFetcher(
        [
            Member(id=1, name="Ada"),
            Member(id=2, name="Grace"),
            Concert(id=10, title="Spring Gala"),
            Rehearsal(id=20, title="Sectionals"),
            Rehearsal(id=21, title="Dress Rehearsal"),
        ]
    )


@pytest.mark.asyncio
async def test_run_once_populates_every_entity_type() -> None:
    store = FakeStore()

    result = await BootstrapSync(_upstream(), store).run_once()

    assert result.ok
    assert {entity_type: r.stored for entity_type, r in result.results.items()} == {
        EntityType.MEMBER: 2,
        EntityType.CONCERT: 1,
        EntityType.REHEARSAL: 2,
    }
    assert [m.id for m in await store.list_all(EntityType.MEMBER)] == [1, 2]
    assert [r.id for r in await store.list_all(EntityType.REHEARSAL)] == [20, 21]


@pytest.mark.asyncio
async def test_failed_type_does_not_block_the_others() -> None:
    fetcher = _upstream()
    fetcher.fail_types.add(EntityType.CONCERT)
    store = FakeStore()

    result = await BootstrapSync(fetcher, store).run_once()

    assert not result.ok
    assert result.failed_types == [EntityType.CONCERT]
    assert "service unavailable" in (result.results[EntityType.CONCERT].error or "")
    assert len(await store.list_all(EntityType.MEMBER)) == 2
    assert len(await store.list_all(EntityType.REHEARSAL)) == 2
    assert await store.list_all(EntityType.CONCERT) == []


@pytest.mark.asyncio
async def test_store_failure_is_recorded_per_type() -> None:
    store = FakeStore()
    store.fail_writes = True

    result = await BootstrapSync(_upstream(), store).run_once()

    assert set(result.failed_types) == set(EntityType)


@pytest.mark.asyncio
async def test_rerun_is_idempotent_and_does_not_prune() -> None:
    fetcher = _upstream()
    store = FakeStore()
    await store.upsert(Member(id=99, name="Local only"))
    bootstrap = BootstrapSync(fetcher, store)

    await bootstrap.run_once()
    await bootstrap.run_once()

    assert [m.id for m in await store.list_all(EntityType.MEMBER)] == [1, 2, 99]


@pytest.mark.asyncio
async def test_cancel_before_start_marks_every_type_cancelled() -> None:
    cancel = asyncio.Event()
    cancel.set()
    fetcher = _upstream()

    result = await BootstrapSync(fetcher, FakeStore()).run_once(cancel)

    assert not result.ok
    assert all(r.cancelled for r in result.results.values())
    assert fetcher.fetch_all_calls == []


@pytest.mark.asyncio
async def test_cancel_after_fetch_skips_the_store_write() -> None:
    cancel = asyncio.Event()

    class CancellingFetcher(FakeFetcher):
        async def fetch_all(self, entity_type: EntityType) -> list[Entity]:
            entities = await super().fetch_all(entity_type)
            cancel.set()
            return entities

    fetcher = CancellingFetcher([Member(id=1, name="Ada")])
    store = FakeStore()

    result = await BootstrapSync(fetcher, store, entity_types=(EntityType.MEMBER,)).run_once(cancel)

    member_result = result.results[EntityType.MEMBER]
    assert member_result.cancelled
    assert member_result.fetched == 1
    assert await store.list_all(EntityType.MEMBER) == []


@pytest.mark.asyncio
async def test_progress_events_per_type() -> None:
    fetcher = _upstream()
    fetcher.fail_types.add(EntityType.REHEARSAL)
    progress = MagicMock(spec=BootstrapProgress)

    await BootstrapSync(fetcher, FakeStore(), progress=progress).run_once()

    assert progress.type_start.call_count == 3
    progress.type_done.assert_any_call(EntityType.MEMBER, 2)
    progress.type_done.assert_any_call(EntityType.CONCERT, 1)
    progress.type_error.assert_called_once()
    assert progress.type_error.call_args.args[0] is EntityType.REHEARSAL
