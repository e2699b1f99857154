"""Tests for configuration module."""

from __future__ import annotations

from redis_console.config import (
    AppConfig,
    ConnectionConfig,
    ConsoleConfig,
    load_config,
    save_config,
)


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig()
        assert config.connection.host == "127.0.0.1"
        assert config.connection.port == 6379
        assert config.connection.db == 0
        assert config.console.command_timeout == 30
        assert config.console.history_limit == 0
        assert config.console.safe_mode is False

    def test_label(self):
        assert ConnectionConfig(host="cache", port=6380, db=3).label == "cache:6380[3]"

    def test_save_and_load(self, tmp_path, monkeypatch):
        import redis_console.config as cfg_module

        config_file = tmp_path / "config.toml"

        monkeypatch.setattr(cfg_module, "CONFIG_FILE", config_file)
        monkeypatch.setattr(cfg_module, "CONFIG_DIR", tmp_path)

        config = AppConfig(
            connection=ConnectionConfig(host="10.0.0.5", port=6380, password="secret", db=4),
            console=ConsoleConfig(command_timeout=10, history_limit=200, safe_mode=True),
        )

        save_config(config)
        assert config_file.exists()
        assert config_file.stat().st_mode & 0o777 == 0o600

        loaded = load_config()
        assert loaded.connection.host == "10.0.0.5"
        assert loaded.connection.port == 6380
        assert loaded.connection.password == "secret"
        assert loaded.connection.db == 4
        assert loaded.console.history_limit == 200
        assert loaded.console.safe_mode is True

    def test_env_overrides(self, tmp_path, monkeypatch):
        import redis_console.config as cfg_module

        monkeypatch.setattr(cfg_module, "CONFIG_FILE", tmp_path / "missing.toml")
        monkeypatch.setenv("REDIS_CONSOLE_HOST", "redis.internal")
        monkeypatch.setenv("REDIS_CONSOLE_PORT", "7000")
        monkeypatch.setenv("REDIS_CONSOLE_DB", "5")
        monkeypatch.setenv("REDIS_CONSOLE_SAFE_MODE", "yes")

        loaded = load_config()
        assert loaded.connection.host == "redis.internal"
        assert loaded.connection.port == 7000
        assert loaded.connection.db == 5
        assert loaded.console.safe_mode is True

    def test_get_config_singleton(self, tmp_path, monkeypatch):
        import redis_console.config as cfg_module

        monkeypatch.setattr(cfg_module, "CONFIG_FILE", tmp_path / "missing.toml")
        cfg_module.reset_config()
        try:
            assert cfg_module.get_config() is cfg_module.get_config()
        finally:
            cfg_module.reset_config()
