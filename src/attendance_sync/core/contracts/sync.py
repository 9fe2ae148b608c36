"""Reconciliation outcome contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from attendance_sync.core.contracts.entity import EntityType
from attendance_sync.core.contracts.events import DecodedEvent


class DispatchStatus(StrEnum):
    APPLIED = "applied"
    FAILED = "failed"
    SKIPPED = "skipped"


class DispatchResult(BaseModel):
    event: DecodedEvent
    status: DispatchStatus
    error: str | None = None


class ConsumerStats(BaseModel):
    polled: int = 0
    applied: int = 0
    failed: int = 0
    skipped: int = 0

    def record(self, result: DispatchResult) -> None:
        if result.status is DispatchStatus.APPLIED:
            self.applied += 1
        elif result.status is DispatchStatus.FAILED:
            self.failed += 1
        else:
            self.skipped += 1


class EntityTypeSyncResult(BaseModel):
    entity_type: EntityType
    fetched: int = 0
    stored: int = 0
    error: str | None = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.cancelled


class BootstrapResult(BaseModel):
    results: dict[EntityType, EntityTypeSyncResult] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results.values())

    @property
    def failed_types(self) -> list[EntityType]:
        return [entity_type for entity_type, result in self.results.items() if result.error is not None]
