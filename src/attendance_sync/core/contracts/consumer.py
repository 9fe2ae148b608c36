"""Broker consumer handle contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType

from attendance_sync.core.contracts.events import BrokerMessage


class MessageConsumer(ABC):
    """An owned broker subscription.

    The consumer loop enters the handle, subscribes once, polls until it is
    cancelled and then exits the handle, which closes the underlying client.
    """

    @abstractmethod
    async def __aenter__(self) -> MessageConsumer: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def subscribe(self, topics: Sequence[str]) -> None: ...  # pragma: no cover

    @abstractmethod
    async def poll(self, timeout: float) -> BrokerMessage | None:
        """Wait at most *timeout* seconds for the next message."""
        ...  # pragma: no cover

    @abstractmethod
    async def rewind(self, message: BrokerMessage) -> None:
        """Move the read position back so *message* is delivered again after a restart."""
        ...  # pragma: no cover
