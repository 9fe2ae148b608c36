"""SDK composition root for attendance-sync."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from attendance_sync.core.broker import KafkaMessageConsumer
from attendance_sync.core.contracts.config import SyncServiceConfig
from attendance_sync.core.contracts.consumer import MessageConsumer
from attendance_sync.core.contracts.fetcher import EntityFetcher
from attendance_sync.core.contracts.store import EntityStore
from attendance_sync.core.contracts.sync import BootstrapResult, ConsumerStats
from attendance_sync.core.engine import BootstrapSync, ConsumerLoop, ReconciliationDispatcher
from attendance_sync.core.engine.progress import BootstrapProgress
from attendance_sync.core.store import SqlAlchemyEntityStore
from attendance_sync.core.upstream import GraphQLEntityFetcher

logger = logging.getLogger(__name__)


class SyncService:
    """attendance-sync public API.

    Owns the fetch client and the replica store for its lifetime; the broker
    consumer handle is owned by the consumer loop while it runs.
    """

    def __init__(
        self,
        *,
        config: SyncServiceConfig,
        fetcher: EntityFetcher,
        store: EntityStore,
        consumer: MessageConsumer,
        progress: BootstrapProgress | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._store = store
        self._consumer = consumer
        self._progress = progress
        self._dispatcher = ReconciliationDispatcher(fetcher, store)

    @classmethod
    def from_config(cls, config: SyncServiceConfig, *, progress: BootstrapProgress | None = None) -> SyncService:
        return cls(
            config=config,
            fetcher=GraphQLEntityFetcher(config),
            store=SqlAlchemyEntityStore(config.database_url),
            consumer=KafkaMessageConsumer(config),
            progress=progress,
        )

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def dispatcher(self) -> ReconciliationDispatcher:
        return self._dispatcher

    async def __aenter__(self) -> SyncService:
        await self._fetcher.__aenter__()
        try:
            await self._store.create_schema()
        except BaseException:
            await self._fetcher.__aexit__(None, None, None)
            raise
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            await self._fetcher.__aexit__(exc_type, exc_val, exc_tb)
        finally:
            await self._store.close()

    async def run_once(self, cancel: asyncio.Event | None = None) -> BootstrapResult:
        """Bootstrap: full fetch of every entity type into the replica."""
        bootstrap = BootstrapSync(self._fetcher, self._store, progress=self._progress)
        return await bootstrap.run_once(cancel)

    async def start(self, cancel: asyncio.Event) -> ConsumerStats:
        """Consume change events until *cancel* is set."""
        loop = ConsumerLoop(
            self._consumer,
            self._dispatcher,
            poll_timeout=self._config.poll_timeout,
            idle_backoff=self._config.idle_backoff,
        )
        return await loop.start(cancel)

    async def run(self, cancel: asyncio.Event) -> tuple[BootstrapResult, ConsumerStats]:
        """Run bootstrap and the consumer loop side by side.

        Neither run cancels the other. If one raises, the error is re-raised
        once both have finished.
        """
        bootstrap_outcome, consumer_outcome = await asyncio.gather(
            self.run_once(cancel),
            self.start(cancel),
            return_exceptions=True,
        )
        if isinstance(bootstrap_outcome, BaseException):
            raise bootstrap_outcome
        if isinstance(consumer_outcome, BaseException):
            logger.error("Consumer loop failed: %s", consumer_outcome)
            raise consumer_outcome
        return bootstrap_outcome, consumer_outcome
