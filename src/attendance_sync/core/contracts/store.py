"""Local replica store contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from attendance_sync.core.contracts.entity import Entity, EntityType


class EntityStore(ABC):
    """Keyed (entity type, id) replica of upstream entities.

    Every write is idempotent and committed atomically. Writes to the same
    key are serialized; writes to different keys may proceed concurrently.
    """

    @abstractmethod
    async def create_schema(self) -> None: ...  # pragma: no cover

    @abstractmethod
    async def upsert(self, entity: Entity) -> None: ...  # pragma: no cover

    @abstractmethod
    async def upsert_many(self, entities: Sequence[Entity]) -> int: ...  # pragma: no cover

    @abstractmethod
    async def delete_by_id(self, entity_type: EntityType, entity_id: int) -> bool: ...  # pragma: no cover

    @abstractmethod
    async def get_by_id(self, entity_type: EntityType, entity_id: int) -> Entity | None: ...  # pragma: no cover

    @abstractmethod
    async def list_all(self, entity_type: EntityType) -> list[Entity]: ...  # pragma: no cover

    @abstractmethod
    async def close(self) -> None: ...  # pragma: no cover
