"""SQLAlchemy-backed replica store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from attendance_sync.core.contracts.entity import ENTITY_MODELS, Entity, EntityType, entity_type_of
from attendance_sync.core.contracts.exceptions import StoreError
from attendance_sync.core.contracts.store import EntityStore
from attendance_sync.core.store.models import ROW_MODELS, Base

logger = logging.getLogger(__name__)

_Key = tuple[str, int]


class KeyedLocks:
    """Per-key asyncio locks, dropped once no task holds or awaits them."""

    def __init__(self) -> None:
        self._locks: dict[_Key, asyncio.Lock] = {}
        self._refs: dict[_Key, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, keys: Iterable[_Key]) -> AsyncIterator[None]:
        # Sorted acquisition keeps overlapping batches from deadlocking.
        ordered = sorted(set(keys))
        for key in ordered:
            self._locks.setdefault(key, asyncio.Lock())
            self._refs[key] = self._refs.get(key, 0) + 1

        acquired: list[asyncio.Lock] = []
        try:
            for key in ordered:
                lock = self._locks[key]
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._refs[key] -= 1
                if self._refs[key] == 0:
                    del self._refs[key]
                    del self._locks[key]


def _key(entity_type: EntityType, entity_id: int) -> _Key:
    return (entity_type.value, entity_id)


class SqlAlchemyEntityStore(EntityStore):
    """Replica store on any SQLAlchemy async dialect.

    Each public write runs in its own transaction. Writers targeting the same
    (entity type, id) are serialized in-process; the database transaction
    covers the rest.
    """

    def __init__(self, database_url: str | None = None, *, engine: AsyncEngine | None = None) -> None:
        if engine is None:
            if database_url is None:
                raise ValueError("either database_url or engine is required")
            engine = create_async_engine(database_url)
        self._engine = engine
        self._sessions = async_sessionmaker(engine, expire_on_commit=False)
        self._locks = KeyedLocks()

    async def create_schema(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to create replica schema: {exc}") from exc
        logger.info("Replica schema ready")

    async def upsert(self, entity: Entity) -> None:
        await self.upsert_many([entity])

    async def upsert_many(self, entities: Sequence[Entity]) -> int:
        if not entities:
            return 0
        # Last occurrence of a key wins inside one batch.
        by_key: dict[_Key, Entity] = {}
        for entity in entities:
            by_key[_key(entity_type_of(entity), entity.id)] = entity

        async with self._locks.hold(by_key):
            try:
                async with self._session() as session:
                    for entity in by_key.values():
                        row_model = ROW_MODELS[entity_type_of(entity)]
                        await session.merge(row_model(**entity.model_dump()))
            except SQLAlchemyError as exc:
                raise StoreError(f"failed to upsert {len(by_key)} entities: {exc}") from exc
        return len(by_key)

    async def delete_by_id(self, entity_type: EntityType, entity_id: int) -> bool:
        row_model = ROW_MODELS[entity_type]
        async with self._locks.hold([_key(entity_type, entity_id)]):
            try:
                async with self._session() as session:
                    result = await session.execute(delete(row_model).where(row_model.id == entity_id))
            except SQLAlchemyError as exc:
                raise StoreError(f"failed to delete {entity_type} {entity_id}: {exc}") from exc
        return bool(result.rowcount)

    async def get_by_id(self, entity_type: EntityType, entity_id: int) -> Entity | None:
        try:
            async with self._sessions() as session:
                row = await session.get(ROW_MODELS[entity_type], entity_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to read {entity_type} {entity_id}: {exc}") from exc
        if row is None:
            return None
        return ENTITY_MODELS[entity_type].model_validate(row, from_attributes=True)

    async def list_all(self, entity_type: EntityType) -> list[Entity]:
        row_model = ROW_MODELS[entity_type]
        try:
            async with self._sessions() as session:
                rows = (await session.scalars(select(row_model).order_by(row_model.id))).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to list {entity_type}: {exc}") from exc
        model = ENTITY_MODELS[entity_type]
        return [model.model_validate(row, from_attributes=True) for row in rows]

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        async with self._sessions() as session, session.begin():
            yield session
