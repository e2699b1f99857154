"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

CONFIG_DIR = Path.home() / ".redis-console"
CONFIG_FILE = CONFIG_DIR / "config.toml"

TRUTHY = ("true", "1", "yes", "on")


@dataclass
class ConnectionConfig:
    host: str = "127.0.0.1"
    port: int = 6379
    username: str = ""
    password: str = ""
    db: int = 0
    ssl: bool = False
    socket_timeout: int = 5

    @property
    def label(self) -> str:
        """Prompt-style label, e.g. ``127.0.0.1:6379[0]``."""
        return f"{self.host}:{self.port}[{self.db}]"


@dataclass
class ConsoleConfig:
    command_timeout: int = 30
    history_limit: int = 0
    safe_mode: bool = False


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = "~/.redis-console/console.log"


@dataclass
class AppConfig:
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    console: ConsoleConfig = field(default_factory=ConsoleConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def ensure_config_dir() -> None:
    """Create config directory with secure permissions."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    os.chmod(CONFIG_DIR, 0o700)


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        conn = data.get("connection", {})
        config.connection.host = conn.get("host", config.connection.host)
        config.connection.port = conn.get("port", config.connection.port)
        config.connection.username = conn.get("username", config.connection.username)
        config.connection.password = conn.get("password", config.connection.password)
        config.connection.db = conn.get("db", config.connection.db)
        config.connection.ssl = conn.get("ssl", config.connection.ssl)
        config.connection.socket_timeout = conn.get("socket_timeout", config.connection.socket_timeout)

        console = data.get("console", {})
        config.console.command_timeout = console.get("command_timeout", config.console.command_timeout)
        config.console.history_limit = console.get("history_limit", config.console.history_limit)
        config.console.safe_mode = console.get("safe_mode", config.console.safe_mode)

        logging_cfg = data.get("logging", {})
        config.logging.level = logging_cfg.get("level", config.logging.level)
        config.logging.file = logging_cfg.get("file", config.logging.file)

    # Environment variable overrides
    if env_host := os.environ.get("REDIS_CONSOLE_HOST"):
        config.connection.host = env_host
    if env_port := os.environ.get("REDIS_CONSOLE_PORT"):
        config.connection.port = int(env_port)
    if env_password := os.environ.get("REDIS_CONSOLE_PASSWORD"):
        config.connection.password = env_password
    if env_db := os.environ.get("REDIS_CONSOLE_DB"):
        config.connection.db = int(env_db)
    if env_timeout := os.environ.get("REDIS_CONSOLE_TIMEOUT"):
        config.console.command_timeout = int(env_timeout)
    if env_safe := os.environ.get("REDIS_CONSOLE_SAFE_MODE"):
        config.console.safe_mode = env_safe.strip().lower() in TRUTHY
    if env_log_level := os.environ.get("REDIS_CONSOLE_LOG_LEVEL"):
        config.logging.level = env_log_level

    return config


def save_config(config: AppConfig) -> None:
    """Save configuration to TOML file."""
    ensure_config_dir()

    data = {
        "connection": {
            "host": config.connection.host,
            "port": config.connection.port,
            "username": config.connection.username,
            "password": config.connection.password,
            "db": config.connection.db,
            "ssl": config.connection.ssl,
            "socket_timeout": config.connection.socket_timeout,
        },
        "console": {
            "command_timeout": config.console.command_timeout,
            "history_limit": config.console.history_limit,
            "safe_mode": config.console.safe_mode,
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
        },
    }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)

    # May hold a password
    os.chmod(CONFIG_FILE, 0o600)


# Global singleton
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or load the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    _config = None
