from __future__ import annotations

import pytest
from pydantic import ValidationError

from attendance_sync.core.contracts.config import SyncServiceConfig, TransportConfig
from attendance_sync.core.contracts.entity import EntityType


def _config(**overrides: object) -> SyncServiceConfig:
    payload: dict[str, object] = {
        "members_graphql_url": "http://members/graphql",
        "planning_graphql_url": "http://planning/graphql",
    }
    payload.update(overrides)
    return SyncServiceConfig.model_validate(payload)


def test_defaults() -> None:
    config = _config()

    assert config.kafka_bootstrap_servers == "localhost:9092"
    assert config.kafka_group_id == "attendance-service"
    assert config.kafka_auto_offset_reset == "earliest"
    assert config.poll_timeout == 1.0
    assert config.idle_backoff == 10.0
    assert config.transport == TransportConfig()
    assert config.transport.max_retries == 6
    assert config.transport.circuit_breaker_threshold == 5
    assert config.transport.circuit_breaker_reset == 30.0


def test_graphql_url_routes_members_and_planning() -> None:
    config = _config()

    assert config.graphql_url_for(EntityType.MEMBER) == "http://members/graphql"
    assert config.graphql_url_for(EntityType.CONCERT) == "http://planning/graphql"
    assert config.graphql_url_for(EntityType.REHEARSAL) == "http://planning/graphql"


@pytest.mark.parametrize("field", ["members_graphql_url", "planning_graphql_url"])
def test_rejects_non_http_urls(field: str) -> None:
    with pytest.raises(ValidationError, match=field):
        _config(**{field: "members:5000"})


def test_rejects_unknown_offset_reset() -> None:
    with pytest.raises(ValidationError):
        _config(kafka_auto_offset_reset="middle")


def test_rejects_non_positive_poll_timeout() -> None:
    with pytest.raises(ValidationError):
        _config(poll_timeout=0)


def test_config_is_frozen() -> None:
    config = _config()

    with pytest.raises(ValidationError):
        config.kafka_group_id = "other"  # type: ignore[misc]
