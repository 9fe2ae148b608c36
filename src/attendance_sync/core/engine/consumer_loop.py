"""Change-event consumer loop."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Sequence
from enum import StrEnum

from attendance_sync.core.contracts.consumer import MessageConsumer
from attendance_sync.core.contracts.events import SUBSCRIBED_TOPICS, BrokerMessage
from attendance_sync.core.contracts.sync import ConsumerStats, DispatchResult, DispatchStatus
from attendance_sync.core.engine.decoder import decode_message
from attendance_sync.core.engine.dispatcher import ReconciliationDispatcher

logger = logging.getLogger(__name__)


class LoopState(StrEnum):
    IDLE = "idle"
    SUBSCRIBED = "subscribed"
    POLLING = "polling"
    DISPATCHING = "dispatching"
    DRAINING = "draining"
    STOPPED = "stopped"


class ConsumerLoop:
    """Polls the broker and dispatches messages one at a time, in poll order.

    The cancellation event is checked before every poll and before every
    dispatch: a dispatch already running finishes, no new one starts. A broker
    that cannot be reached at start-up is retried until cancellation.
    """

    def __init__(
        self,
        consumer: MessageConsumer,
        dispatcher: ReconciliationDispatcher,
        *,
        poll_timeout: float = 1.0,
        idle_backoff: float = 10.0,
        topics: Sequence[str] = SUBSCRIBED_TOPICS,
    ) -> None:
        self._consumer = consumer
        self._dispatcher = dispatcher
        self._poll_timeout = poll_timeout
        self._idle_backoff = idle_backoff
        self._topics = tuple(topics)
        self._state = LoopState.IDLE
        self.stats = ConsumerStats()

    @property
    def state(self) -> LoopState:
        return self._state

    async def start(self, cancel: asyncio.Event) -> ConsumerStats:
        """Run until *cancel* is set. Returns the counters for this run."""
        try:
            async with self._consumer:
                if await self._subscribe(cancel):
                    self._state = LoopState.SUBSCRIBED
                    logger.info("Starting consumer loop")
                    try:
                        await self._run(cancel)
                    finally:
                        self._state = LoopState.DRAINING
        finally:
            self._state = LoopState.STOPPED
            logger.info("Consumer loop has stopped")
        return self.stats

    async def _run(self, cancel: asyncio.Event) -> None:
        while not cancel.is_set():
            self._state = LoopState.POLLING
            message = await self._poll()
            if message is None:
                await self._idle(cancel)
                continue

            self.stats.polled += 1
            if cancel.is_set():
                logger.info("Cancellation requested; message at offset %s will be redelivered", message.offset)
                await self._rewind(message)
                break

            self._state = LoopState.DISPATCHING
            result = await self._process(message)
            self.stats.record(result)

    async def _subscribe(self, cancel: asyncio.Event) -> bool:
        """Subscribe, retrying after the idle backoff until it succeeds or *cancel* is set."""
        while not cancel.is_set():
            try:
                await self._consumer.subscribe(self._topics)
            except Exception:
                logger.exception("Subscribing to %s failed; retrying", ", ".join(self._topics))
                await self._idle(cancel)
                continue
            return True
        return False

    async def _rewind(self, message: BrokerMessage) -> None:
        try:
            await self._consumer.rewind(message)
        except Exception:
            logger.exception("Failed to rewind %s to offset %s", message.topic, message.offset)

    async def _poll(self) -> BrokerMessage | None:
        try:
            return await self._consumer.poll(self._poll_timeout)
        except Exception:
            logger.exception("Broker poll failed")
            return None

    async def _idle(self, cancel: asyncio.Event) -> None:
        if self._idle_backoff <= 0:
            await asyncio.sleep(0)
            return
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(cancel.wait(), timeout=self._idle_backoff)

    async def _process(self, message: BrokerMessage) -> DispatchResult:
        event = decode_message(message)
        try:
            return await self._dispatcher.dispatch(event)
        except Exception as exc:
            # One message never takes the loop down.
            logger.exception("Unexpected error while dispatching message on %s", message.topic)
            return DispatchResult(event=event, status=DispatchStatus.FAILED, error=str(exc))
