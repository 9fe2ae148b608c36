"""Configuration contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from attendance_sync.core.contracts.entity import EntityType


class TransportConfig(BaseModel):
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=6, ge=0, le=10)
    circuit_breaker_threshold: int = Field(default=5, ge=1)
    circuit_breaker_reset: float = Field(default=30.0, gt=0)

    model_config = {"frozen": True}


class SyncServiceConfig(BaseModel):
    members_graphql_url: str
    planning_graphql_url: str
    kafka_bootstrap_servers: str = "localhost:9092"
    kafka_group_id: str = "attendance-service"
    kafka_auto_offset_reset: str = "earliest"
    database_url: str = "sqlite+aiosqlite:///attendance.db"
    poll_timeout: float = Field(default=1.0, gt=0)
    idle_backoff: float = Field(default=10.0, ge=0)
    transport: TransportConfig = Field(default_factory=TransportConfig)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_urls(self) -> SyncServiceConfig:
        for name in ("members_graphql_url", "planning_graphql_url"):
            value = getattr(self, name).strip()
            if not value.startswith(("http://", "https://")):
                raise ValueError(f"{name} must be an http(s) URL")
        if self.kafka_auto_offset_reset not in {"earliest", "latest"}:
            raise ValueError("kafka_auto_offset_reset must be one of: earliest, latest")
        return self

    def graphql_url_for(self, entity_type: EntityType) -> str:
        """Members are owned by the members service; concerts and rehearsals by planning."""
        if entity_type is EntityType.MEMBER:
            return self.members_graphql_url
        return self.planning_graphql_url
