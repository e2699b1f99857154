"""Shared test fixtures."""

from __future__ import annotations

import pytest

from redis_console.config import AppConfig, ConnectionConfig, ConsoleConfig, LoggingConfig


@pytest.fixture
def app_config(tmp_path):
    """Create a test configuration."""
    return AppConfig(
        connection=ConnectionConfig(host="localhost", port=6379, db=2),
        console=ConsoleConfig(command_timeout=5, history_limit=0, safe_mode=False),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "test.log")),
    )


class FakeRunner:
    """Stands in for RedisRunner: replies from a table, raises for exceptions."""

    def __init__(self, replies=None) -> None:
        self.replies = replies or {}
        self.calls: list[tuple] = []
        self.closed = False

    async def execute(self, connection, command):
        self.calls.append((connection, command))
        reply = self.replies.get(command)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
