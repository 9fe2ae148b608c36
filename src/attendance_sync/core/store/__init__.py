"""Local replica store implementations."""

from attendance_sync.core.store.sql import KeyedLocks, SqlAlchemyEntityStore

__all__ = ["KeyedLocks", "SqlAlchemyEntityStore"]
