"""Decode raw broker messages into typed change events."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from attendance_sync.core.contracts.entity import EntityType
from attendance_sync.core.contracts.events import BrokerMessage, ChangeEvent, DecodedEvent, Operation, UnrecognizedEvent
from attendance_sync.core.contracts.exceptions import DecodeError

logger = logging.getLogger(__name__)


class _EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    entity_id: int = Field(alias="entityId", gt=0)
    correlation_id: str | None = Field(default=None, alias="correlationId")

    @field_validator("correlation_id", mode="before")
    @classmethod
    def _stringify_correlation_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


def parse_key(key: str | None) -> tuple[Operation, EntityType]:
    """Split ``<operation>_<entity>`` into its enum parts."""
    if not key:
        raise DecodeError("message has no key")
    operation_name, sep, entity_name = key.partition("_")
    if not sep:
        raise DecodeError(f"unrecognized key {key!r}")
    try:
        return Operation(operation_name), EntityType(entity_name)
    except ValueError as exc:
        raise DecodeError(f"unrecognized key {key!r}") from exc


def parse_payload(value: bytes | None) -> _EventPayload:
    if value is None:
        raise DecodeError("message has no value")
    try:
        raw: Any = json.loads(value)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError("value is not valid JSON") from exc

    # Older producers publish the bare entity id.
    if isinstance(raw, int) and not isinstance(raw, bool):
        raw = {"entityId": raw}
    if not isinstance(raw, dict):
        raise DecodeError("value is not a JSON object")
    try:
        return _EventPayload.model_validate(raw)
    except ValidationError as exc:
        raise DecodeError(f"invalid value payload: {exc.errors(include_url=False)}") from exc


def decode_message(message: BrokerMessage) -> DecodedEvent:
    """Turn *message* into a :class:`ChangeEvent` or an :class:`UnrecognizedEvent`.

    Unknown topics, unknown keys and unreadable payloads are not errors: the
    broker may carry unrelated traffic.
    """
    topic_type = EntityType.from_topic(message.topic)
    if topic_type is None:
        return _unrecognized(message, f"unknown topic {message.topic!r}")

    try:
        operation, key_type = parse_key(message.key)
        if key_type is not topic_type:
            raise DecodeError(f"key {message.key!r} does not belong to topic {message.topic!r}")
        payload = parse_payload(message.value)
    except DecodeError as exc:
        return _unrecognized(message, str(exc))

    return ChangeEvent(
        entity_type=topic_type,
        operation=operation,
        entity_id=payload.entity_id,
        correlation_id=payload.correlation_id,
    )


def _unrecognized(message: BrokerMessage, reason: str) -> UnrecognizedEvent:
    logger.debug("Ignoring message on %s (key=%r): %s", message.topic, message.key, reason)
    return UnrecognizedEvent(topic=message.topic, key=message.key, reason=reason)
