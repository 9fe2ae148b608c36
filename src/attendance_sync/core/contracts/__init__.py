"""Core contracts for attendance-sync."""

from attendance_sync.core.contracts.config import SyncServiceConfig, TransportConfig
from attendance_sync.core.contracts.consumer import MessageConsumer
from attendance_sync.core.contracts.entity import ENTITY_MODELS, Concert, Entity, EntityType, Member, Rehearsal
from attendance_sync.core.contracts.events import (
    SUBSCRIBED_TOPICS,
    BrokerMessage,
    ChangeEvent,
    DecodedEvent,
    Operation,
    UnrecognizedEvent,
)
from attendance_sync.core.contracts.exceptions import (
    ConfigError,
    DecodeError,
    FetchError,
    StoreError,
    SyncServiceError,
)
from attendance_sync.core.contracts.fetcher import EntityFetcher
from attendance_sync.core.contracts.store import EntityStore
from attendance_sync.core.contracts.sync import (
    BootstrapResult,
    ConsumerStats,
    DispatchResult,
    DispatchStatus,
    EntityTypeSyncResult,
)

__all__ = [
    "ENTITY_MODELS",
    "SUBSCRIBED_TOPICS",
    "BootstrapResult",
    "BrokerMessage",
    "ChangeEvent",
    "Concert",
    "ConfigError",
    "ConsumerStats",
    "DecodeError",
    "DecodedEvent",
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
    "SyncServiceConfig",
    "SyncServiceError",
    "TransportConfig",
    "UnrecognizedEvent",
]
