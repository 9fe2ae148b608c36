"""Config loading with environment overrides."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from attendance_sync.core.contracts.config import SyncServiceConfig
from attendance_sync.core.contracts.exceptions import ConfigError

# Environment variable -> top-level config field.
ENV_OVERRIDES: dict[str, str] = {
    "KAFKA_URL": "kafka_bootstrap_servers",
    "KAFKA_GROUP_ID": "kafka_group_id",
    "MEMBERS_GRAPHQL_URL": "members_graphql_url",
    "PLANNING_GRAPHQL_URL": "planning_graphql_url",
    "DATABASE_URL": "database_url",
}


def _read_payload(config_path: Path) -> dict[str, Any]:
    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    if not isinstance(raw_payload, dict):
        raise ConfigError(f"config file must contain a JSON object: {config_path}")
    return raw_payload


def _apply_env_overrides(payload: dict[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    merged = dict(payload)
    for env_name, field_name in ENV_OVERRIDES.items():
        value = environ.get(env_name, "").strip()
        if value:
            merged[field_name] = value
    return merged


def load_config(path: str | Path | None = None, *, environ: Mapping[str, str] | None = None) -> SyncServiceConfig:
    """Load config from an optional JSON file, then apply environment overrides.

    Without a file, the configuration is built from the environment alone.
    """
    payload: dict[str, Any] = {}
    if path is not None:
        payload = _read_payload(Path(path).expanduser().resolve())

    payload = _apply_env_overrides(payload, os.environ if environ is None else environ)
    try:
        return SyncServiceConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc
