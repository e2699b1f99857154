"""System utility checks."""

from __future__ import annotations

import redis

from redis_console.config import ConnectionConfig


def check_server(connection: ConnectionConfig) -> tuple[bool, str]:
    """Ping the configured server and return its version."""
    client = redis.Redis(
        host=connection.host,
        port=connection.port,
        db=connection.db,
        username=connection.username or None,
        password=connection.password or None,
        ssl=connection.ssl,
        socket_timeout=connection.socket_timeout,
        socket_connect_timeout=connection.socket_timeout,
    )
    try:
        client.ping()
        info = client.info("server")
        return True, f"Redis {info.get('redis_version', 'unknown')}"
    except redis.exceptions.AuthenticationError:
        return False, "Authentication failed. Check the configured password."
    except redis.exceptions.ConnectionError as e:
        return False, f"Could not connect to Redis at {connection.host}:{connection.port}: {e}"
    except redis.exceptions.RedisError as e:
        return False, f"Error checking Redis server: {e}"
    finally:
        client.close()
