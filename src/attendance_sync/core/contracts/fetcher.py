"""Upstream entity fetch contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType

from attendance_sync.core.contracts.entity import Entity, EntityType


class EntityFetcher(ABC):
    """Queries the owning service for instances of an entity type.

    Implementations raise :class:`~attendance_sync.core.contracts.exceptions.FetchError`
    on transport or schema failure and never return a partially-populated entity.
    """

    @abstractmethod
    async def __aenter__(self) -> EntityFetcher: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def fetch_all(self, entity_type: EntityType) -> list[Entity]: ...  # pragma: no cover

    @abstractmethod
    async def fetch_one(
        self,
        entity_type: EntityType,
        entity_id: int,
        *,
        correlation_id: str | None = None,
    ) -> Entity | None: ...  # pragma: no cover
