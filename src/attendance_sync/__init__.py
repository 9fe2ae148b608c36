"""Public API surface for attendance-sync."""

__version__ = "1.0.0"

from attendance_sync.core.config import load_config
from attendance_sync.core.contracts import (
    BootstrapResult,
    BrokerMessage,
    ChangeEvent,
    Concert,
    ConfigError,
    ConsumerStats,
    DispatchResult,
    DispatchStatus,
    Entity,
    EntityFetcher,
    EntityStore,
    EntityType,
    EntityTypeSyncResult,
    FetchError,
    Member,
    MessageConsumer,
    Operation,
    Rehearsal,
    StoreError,
    SyncServiceConfig,
    SyncServiceError,
    UnrecognizedEvent,
)
from attendance_sync.core.engine import BootstrapProgress
from attendance_sync.sdk import SyncService

__all__ = [
    "BootstrapProgress",
    "BootstrapResult",
    "BrokerMessage",
    "ChangeEvent",
    "Concert",
    "ConfigError",
    "ConsumerStats",
    "DispatchResult",
    "DispatchStatus",
    "Entity",
    "EntityFetcher",
    "EntityStore",
    "EntityType",
    "EntityTypeSyncResult",
    "FetchError",
    "Member",
    "MessageConsumer",
    "Operation",
    "Rehearsal",
    "StoreError",
    "SyncService",
    "SyncServiceConfig",
    "SyncServiceError",
    "UnrecognizedEvent",
    "__version__",
    "load_config",
]
