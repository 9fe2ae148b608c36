"""Exception hierarchy for attendance-sync."""

from __future__ import annotations

from attendance_sync.core.contracts.entity import EntityType


class SyncServiceError(Exception):
    """Base exception for all attendance-sync errors."""


class ConfigError(SyncServiceError):
    """Configuration loading or validation failure."""


class FetchError(SyncServiceError):
    """Upstream query failed at the transport or schema level."""

    def __init__(self, message: str, *, entity_type: EntityType) -> None:
        super().__init__(message)
        self.entity_type = entity_type


class StoreError(SyncServiceError):
    """Local replica write or read failure."""


class DecodeError(SyncServiceError):
    """Broker message could not be decoded into a change event."""
