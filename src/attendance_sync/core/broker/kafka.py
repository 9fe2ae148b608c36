"""Kafka consumer handle built on aiokafka."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import TracebackType

from aiokafka import AIOKafkaConsumer
from aiokafka.errors import KafkaError
from aiokafka.structs import TopicPartition

from attendance_sync.core.contracts.config import SyncServiceConfig
from attendance_sync.core.contracts.consumer import MessageConsumer
from attendance_sync.core.contracts.events import BrokerMessage

logger = logging.getLogger(__name__)


class KafkaMessageConsumer(MessageConsumer):
    """Owned Kafka subscription that yields one message per poll.

    Offsets are auto-committed by the client; reconciliation is idempotent,
    so redelivery after a restart converges to the same replica state. A
    message polled but never dispatched is rewound before close so the final
    commit does not skip it.
    """

    def __init__(self, config: SyncServiceConfig, *, client: AIOKafkaConsumer | None = None) -> None:
        self._config = config
        self._client = client
        self._owns_client = client is None
        self._started = False

    async def __aenter__(self) -> KafkaMessageConsumer:
        if self._client is None:
            self._client = self._new_client()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None and self._started:
            await self._client.stop()
            self._started = False
            logger.info("Kafka consumer closed")

    async def subscribe(self, topics: Sequence[str]) -> None:
        client = self._require_client()
        client.subscribe(topics=list(topics))
        if not self._started:
            try:
                await client.start()
            except BaseException:
                await client.stop()
                if self._owns_client:
                    # A stopped aiokafka consumer cannot be started again.
                    self._client = self._new_client()
                raise
            self._started = True
        logger.info("Subscribed to %s on %s", ", ".join(topics), self._config.kafka_bootstrap_servers)

    async def poll(self, timeout: float) -> BrokerMessage | None:
        client = self._require_client()
        try:
            batches = await client.getmany(timeout_ms=int(timeout * 1000), max_records=1)
        except KafkaError as exc:
            logger.error("Kafka poll failed: %s", exc)
            return None

        for records in batches.values():
            for record in records:
                return BrokerMessage(
                    topic=record.topic,
                    key=record.key.decode("utf-8", errors="replace") if record.key is not None else None,
                    value=record.value,
                    partition=record.partition,
                    offset=record.offset,
                )
        return None

    async def rewind(self, message: BrokerMessage) -> None:
        if message.partition is None or message.offset is None:
            return
        client = self._require_client()
        client.seek(TopicPartition(message.topic, message.partition), message.offset)
        logger.info("Rewound %s[%d] to offset %d", message.topic, message.partition, message.offset)

    def _new_client(self) -> AIOKafkaConsumer:
        return AIOKafkaConsumer(
            bootstrap_servers=self._config.kafka_bootstrap_servers,
            group_id=self._config.kafka_group_id,
            auto_offset_reset=self._config.kafka_auto_offset_reset,
            enable_auto_commit=True,
        )

    def _require_client(self) -> AIOKafkaConsumer:
        if self._client is None:
            raise RuntimeError("Consumer is not initialized. Use 'async with'.")
        return self._client
