"""Shared test fixtures for attendance-sync tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
import pytest_asyncio

from attendance_sync.core.contracts.config import SyncServiceConfig
from attendance_sync.core.store import SqlAlchemyEntityStore


@pytest.fixture
def sample_config(tmp_path: Path) -> SyncServiceConfig:
    """A minimal valid SyncServiceConfig backed by a throwaway SQLite file."""
    return SyncServiceConfig(
        members_graphql_url="http://members.test/graphql",
        planning_graphql_url="http://planning.test/graphql",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'replica.db'}",
        idle_backoff=0.0,
    )


@pytest_asyncio.fixture
async def sql_store(sample_config: SyncServiceConfig) -> AsyncIterator[SqlAlchemyEntityStore]:
    store = SqlAlchemyEntityStore(sample_config.database_url)
    await store.create_schema()
    try:
        yield store
    finally:
        await store.close()
