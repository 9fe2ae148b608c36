"""One-shot full fetch of every entity type."""

from __future__ import annotations

import asyncio
import logging

from attendance_sync.core.contracts.entity import EntityType
from attendance_sync.core.contracts.exceptions import SyncServiceError
from attendance_sync.core.contracts.fetcher import EntityFetcher
from attendance_sync.core.contracts.store import EntityStore
from attendance_sync.core.contracts.sync import BootstrapResult, EntityTypeSyncResult
from attendance_sync.core.engine.progress import BootstrapProgress, NullBootstrapProgress

logger = logging.getLogger(__name__)


class BootstrapSync:
    """Loads the full upstream state of every entity type into the replica.

    Entity types are fetched concurrently and fail independently: an error
    for one type is logged and recorded, the others still complete. There is
    no retry; a later change event or a manual resync repairs the gap.
    """

    def __init__(
        self,
        fetcher: EntityFetcher,
        store: EntityStore,
        *,
        entity_types: tuple[EntityType, ...] = tuple(EntityType),
        progress: BootstrapProgress | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._entity_types = entity_types
        self._progress: BootstrapProgress = progress or NullBootstrapProgress()

    async def run_once(self, cancel: asyncio.Event | None = None) -> BootstrapResult:
        cancel = cancel or asyncio.Event()
        logger.info("Syncing data from upstream services")

        async with asyncio.TaskGroup() as tg:
            tasks = {
                entity_type: tg.create_task(self._sync_type(entity_type, cancel))
                for entity_type in self._entity_types
            }
        result = BootstrapResult(results={entity_type: task.result() for entity_type, task in tasks.items()})

        if result.ok:
            logger.info("Sync successful")
        else:
            failed = ", ".join(str(entity_type) for entity_type in result.failed_types) or "none"
            logger.warning("Sync incomplete (failed: %s)", failed)
        return result

    async def _sync_type(self, entity_type: EntityType, cancel: asyncio.Event) -> EntityTypeSyncResult:
        if cancel.is_set():
            return EntityTypeSyncResult(entity_type=entity_type, cancelled=True)

        logger.info("Fetching %ss", entity_type)
        self._progress.type_start(entity_type)
        fetched = 0
        try:
            entities = await self._fetcher.fetch_all(entity_type)
            fetched = len(entities)
            if cancel.is_set():
                logger.info("Cancellation requested; not storing %d %ss", fetched, entity_type)
                return EntityTypeSyncResult(entity_type=entity_type, fetched=fetched, cancelled=True)
            stored = await self._store.upsert_many(entities)
        except SyncServiceError as exc:
            logger.error("Error while syncing %ss: %s", entity_type, exc)
            self._progress.type_error(entity_type, exc)
            return EntityTypeSyncResult(entity_type=entity_type, fetched=fetched, error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while syncing %ss", entity_type)
            self._progress.type_error(entity_type, exc)
            return EntityTypeSyncResult(entity_type=entity_type, fetched=fetched, error=str(exc))

        logger.info("Successfully synced %d %ss", stored, entity_type)
        self._progress.type_done(entity_type, stored)
        return EntityTypeSyncResult(entity_type=entity_type, fetched=fetched, stored=stored)
