"""Broker message and change-event contracts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from attendance_sync.core.contracts.entity import EntityType

SUBSCRIBED_TOPICS: tuple[str, ...] = tuple(entity_type.topic for entity_type in EntityType)


class Operation(StrEnum):
    ADD = "add"
    EDIT = "edit"
    DELETE = "delete"


@dataclass(frozen=True)
class BrokerMessage:
    """A raw message as handed over by the broker client."""

    topic: str
    key: str | None
    value: bytes | None
    partition: int | None = None
    offset: int | None = None


class ChangeEvent(BaseModel):
    """A decoded change notification for one upstream entity."""

    model_config = ConfigDict(frozen=True)

    entity_type: EntityType
    operation: Operation
    entity_id: int
    correlation_id: str | None = None


class UnrecognizedEvent(BaseModel):
    """A message that does not map onto any known (entity type, operation)."""

    model_config = ConfigDict(frozen=True)

    topic: str
    key: str | None = None
    reason: str


DecodedEvent = ChangeEvent | UnrecognizedEvent
