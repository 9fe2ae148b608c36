"""Apply decoded change events to the local replica."""

from __future__ import annotations

import logging

from attendance_sync.core.contracts.events import ChangeEvent, DecodedEvent, Operation, UnrecognizedEvent
from attendance_sync.core.contracts.exceptions import FetchError, StoreError
from attendance_sync.core.contracts.fetcher import EntityFetcher
from attendance_sync.core.contracts.store import EntityStore
from attendance_sync.core.contracts.sync import DispatchResult, DispatchStatus

logger = logging.getLogger(__name__)


class ReconciliationDispatcher:
    """Routes one change event to fetch+upsert or delete.

    Every failure is reported in the returned :class:`DispatchResult`; nothing
    is retried and no domain error propagates to the caller.
    """

    def __init__(self, fetcher: EntityFetcher, store: EntityStore) -> None:
        self._fetcher = fetcher
        self._store = store

    async def dispatch(self, event: DecodedEvent) -> DispatchResult:
        if isinstance(event, UnrecognizedEvent):
            return DispatchResult(event=event, status=DispatchStatus.SKIPPED, error=event.reason)

        if event.operation is Operation.DELETE:
            return await self._delete(event)
        return await self._fetch_and_upsert(event)

    async def _fetch_and_upsert(self, event: ChangeEvent) -> DispatchResult:
        label = _describe(event)
        logger.info("Reconciling %s", label)

        try:
            entity = await self._fetcher.fetch_one(
                event.entity_type,
                event.entity_id,
                correlation_id=event.correlation_id,
            )
        except FetchError as exc:
            return self._failed(event, f"fetch failed: {exc}")

        if entity is None:
            # Not found on edit is ambiguous upstream; the local row stays.
            return self._failed(event, "entity not found upstream")

        try:
            await self._store.upsert(entity)
        except StoreError as exc:
            return self._failed(event, f"store write failed: {exc}")

        logger.info("Applied %s", label)
        return DispatchResult(event=event, status=DispatchStatus.APPLIED)

    async def _delete(self, event: ChangeEvent) -> DispatchResult:
        label = _describe(event)
        logger.info("Reconciling %s", label)
        try:
            removed = await self._store.delete_by_id(event.entity_type, event.entity_id)
        except StoreError as exc:
            return self._failed(event, f"store delete failed: {exc}")

        if not removed:
            logger.debug("%s: no local row to delete", label)
        logger.info("Applied %s", label)
        return DispatchResult(event=event, status=DispatchStatus.APPLIED)

    @staticmethod
    def _failed(event: ChangeEvent, message: str) -> DispatchResult:
        logger.error("Failed %s: %s", _describe(event), message)
        return DispatchResult(event=event, status=DispatchStatus.FAILED, error=message)


def _describe(event: ChangeEvent) -> str:
    label = f"{event.operation} {event.entity_type} {event.entity_id}"
    if event.correlation_id:
        label += f" (correlation {event.correlation_id})"
    return label
