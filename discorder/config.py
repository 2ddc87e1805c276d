"""Configuration management with Pydantic Settings + optional YAML."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from discorder.utils.platform import get_config_dir


class RelayConfig(BaseModel):
    """Read-only process configuration handed to the relay handler."""

    model_config = ConfigDict(frozen=True)

    webhook_url: str = ""
    environment: str = ""

    @property
    def has_webhook_url(self) -> bool:
        return bool(self.webhook_url)

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


class ServerConfig(BaseModel):
    bind: str = "0.0.0.0"
    port: int = 3000
    path: str = "/api/discorder"
    # GitHub caps webhook payloads at 25 MB
    client_max_size: int = 25 * 1024 * 1024


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DISCORDER_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    discord_webhook_url: str = Field(
        default="",
        validation_alias=AliasChoices(
            "discord_webhook_url", "DISCORDER_DISCORD_WEBHOOK_URL"
        ),
    )
    environment: str = Field(
        default="",
        validation_alias=AliasChoices("environment", "DISCORDER_ENVIRONMENT", "NODE_ENV"),
    )
    server: ServerConfig = Field(default_factory=ServerConfig)
    delivery_timeout: float | None = None
    log_level: str = "INFO"
    log_json: bool = False

    def relay_config(self) -> RelayConfig:
        return RelayConfig(
            webhook_url=self.discord_webhook_url,
            environment=self.environment,
        )


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(
    config_path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> Settings:
    """Load settings from env vars, optionally overlaying a YAML config.

    ``overrides`` (typically command line options) take precedence over both
    the YAML file and the environment.
    """
    yaml_data: dict[str, Any] = {}

    # Determine config file path
    if config_path is None:
        config_path = os.environ.get("DISCORDER_CONFIG")
    if config_path is None:
        default = get_config_dir() / "config.yaml"
        if default.exists():
            config_path = default

    # Load YAML if found
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                yaml_data = yaml.safe_load(f) or {}

    settings = Settings(**yaml_data)
    if not overrides:
        return settings
    merged = _deep_merge(settings.model_dump(), overrides)
    return Settings(**merged)
