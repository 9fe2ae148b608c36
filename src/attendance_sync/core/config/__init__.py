"""Configuration loading."""

from attendance_sync.core.config.loader import ENV_OVERRIDES, load_config

__all__ = ["ENV_OVERRIDES", "load_config"]
