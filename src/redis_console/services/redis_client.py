"""Redis command execution service."""

from __future__ import annotations

import asyncio
import logging
import shlex
from dataclasses import astuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from redis_console.config import AppConfig, ConnectionConfig
from redis_console.errors import CommandError
from redis_console.services.guard import command_guard
from redis_console.storage.models import ReplyValue

logger = logging.getLogger(__name__)


def parse_command(command: str) -> list[str]:
    """Tokenize a command line, honouring quotes where they balance."""
    try:
        return shlex.split(command)
    except ValueError:
        return command.split()


class RedisRunner:
    """Execute single Redis commands with guard and timeout protection."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._clients: dict[tuple, aioredis.Redis] = {}

    def _get_client(self, connection: ConnectionConfig) -> aioredis.Redis:
        key = astuple(connection)
        client = self._clients.get(key)
        if client is None:
            client = aioredis.Redis(
                host=connection.host,
                port=connection.port,
                db=connection.db,
                username=connection.username or None,
                password=connection.password or None,
                ssl=connection.ssl,
                socket_timeout=connection.socket_timeout,
                socket_connect_timeout=connection.socket_timeout,
            )
            # Raw replies: "OK" stays a string instead of becoming True
            client.response_callbacks.clear()
            self._clients[key] = client
            logger.debug("Created client for %s", connection.label)
        return client

    async def execute(self, connection: ConnectionConfig, command: str) -> ReplyValue:
        """Execute one command string and return its reply.

        Raises ``CommandError`` for anything that prevents a reply.
        """
        args = parse_command(command)
        if not args:
            raise CommandError("Empty command")

        # Check the tokens actually sent; quoting must not hide the command name
        blocked, reason = command_guard.check(" ".join(args), safe_mode=self.config.console.safe_mode)
        if blocked:
            raise CommandError(f"Blocked: {reason}")

        client = self._get_client(connection)
        timeout = self.config.console.command_timeout
        try:
            raw = await asyncio.wait_for(client.execute_command(*args), timeout=timeout)
        except asyncio.TimeoutError:
            raise CommandError(f"Command timed out after {timeout}s") from None
        except RedisError as e:
            logger.warning("Redis error on %s: %s", args[0].upper(), e)
            raise CommandError(str(e)) from e

        return ReplyValue.from_raw(raw)

    async def close(self) -> None:
        """Close every client opened by this runner."""
        clients = list(self._clients.values())
        self._clients.clear()
        for client in clients:
            await client.aclose()
