"""Tests for settings loading and the relay configuration value."""

import pytest
from pydantic import ValidationError

from discorder.config import RelayConfig, ServerConfig, Settings, load_settings


_ENV_VARS = (
    "DISCORD_WEBHOOK_URL",
    "DISCORDER_DISCORD_WEBHOOK_URL",
    "NODE_ENV",
    "ENVIRONMENT",
    "DISCORDER_ENVIRONMENT",
    "DISCORDER_CONFIG",
    "DISCORDER_LOG_LEVEL",
    "DISCORDER_SERVER__PORT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DISCORDER_CONFIG_DIR", str(tmp_path / "no-config"))


class TestRelayConfig:
    def test_defaults(self):
        cfg = RelayConfig()
        assert cfg.webhook_url == ""
        assert cfg.has_webhook_url is False
        assert cfg.is_development is False

    def test_development(self):
        assert RelayConfig(environment="development").is_development is True
        assert RelayConfig(environment="production").is_development is False

    def test_immutable(self):
        cfg = RelayConfig(webhook_url="https://example.com/hook")
        with pytest.raises(ValidationError):
            cfg.webhook_url = "https://other.example.com"


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.discord_webhook_url == ""
        assert settings.environment == ""
        assert settings.server == ServerConfig()
        assert settings.server.path == "/api/discorder"
        assert settings.delivery_timeout is None
        assert settings.log_level == "INFO"

    def test_conventional_env_names(self, monkeypatch):
        monkeypatch.setenv("DISCORD_WEBHOOK_URL", "https://discord.com/api/webhooks/1/t")
        monkeypatch.setenv("NODE_ENV", "development")
        settings = Settings()
        assert settings.discord_webhook_url == "https://discord.com/api/webhooks/1/t"
        assert settings.environment == "development"

    def test_prefixed_env_names(self, monkeypatch):
        monkeypatch.setenv("DISCORDER_ENVIRONMENT", "staging")
        monkeypatch.setenv("DISCORDER_SERVER__PORT", "8088")
        monkeypatch.setenv("DISCORDER_LOG_LEVEL", "DEBUG")
        settings = Settings()
        assert settings.environment == "staging"
        assert settings.server.port == 8088
        assert settings.log_level == "DEBUG"

    def test_relay_config(self):
        settings = Settings(discord_webhook_url="https://hook", environment="development")
        cfg = settings.relay_config()
        assert cfg == RelayConfig(webhook_url="https://hook", environment="development")
        assert cfg.has_webhook_url is True


class TestLoadSettings:
    def test_without_file(self):
        settings = load_settings()
        assert settings.discord_webhook_url == ""

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "discord_webhook_url: https://hook\n"
            "server:\n"
            "  port: 9000\n"
        )
        settings = load_settings(path)
        assert settings.discord_webhook_url == "https://hook"
        assert settings.server.port == 9000
        assert settings.server.bind == "0.0.0.0"

    def test_config_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "relay.yaml"
        path.write_text("environment: development\n")
        monkeypatch.setenv("DISCORDER_CONFIG", str(path))
        assert load_settings().environment == "development"

    def test_default_config_dir(self, tmp_path, monkeypatch):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("log_level: WARNING\n")
        monkeypatch.setenv("DISCORDER_CONFIG_DIR", str(config_dir))
        assert load_settings().log_level == "WARNING"

    def test_missing_file_is_ignored(self, tmp_path):
        settings = load_settings(tmp_path / "absent.yaml")
        assert settings.log_level == "INFO"

    def test_overrides_merge_nested(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("server:\n  port: 9000\n  bind: 127.0.0.1\n")
        settings = load_settings(path, overrides={"server": {"port": 9100}, "log_level": "ERROR"})
        assert settings.server.port == 9100
        assert settings.server.bind == "127.0.0.1"
        assert settings.log_level == "ERROR"
