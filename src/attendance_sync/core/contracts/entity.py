"""Replicated entity contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class EntityType(StrEnum):
    """Remotely-owned record classes replicated into the local store."""

    MEMBER = "member"
    CONCERT = "concert"
    REHEARSAL = "rehearsal"

    @property
    def topic(self) -> str:
        """Broker topic carrying change events for this entity type."""
        return f"{self.value}s"

    @classmethod
    def from_topic(cls, topic: str) -> EntityType | None:
        for entity_type in cls:
            if entity_type.topic == topic:
                return entity_type
        return None


class _EntityBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int


class Member(_EntityBase):
    name: str


class Concert(_EntityBase):
    title: str


class Rehearsal(_EntityBase):
    title: str


Entity = Member | Concert | Rehearsal

ENTITY_MODELS: dict[EntityType, type[Member] | type[Concert] | type[Rehearsal]] = {
    EntityType.MEMBER: Member,
    EntityType.CONCERT: Concert,
    EntityType.REHEARSAL: Rehearsal,
}


def entity_type_of(entity: Entity) -> EntityType:
    for entity_type, model in ENTITY_MODELS.items():
        if type(entity) is model:
            return entity_type
    raise TypeError(f"not a replicated entity: {type(entity).__name__}")
