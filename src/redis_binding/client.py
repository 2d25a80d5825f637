"""
Store client used by the Redis binding.

A thin facade over ``redis.asyncio``: it builds a node or cluster client from
``RedisSettings`` and runs every command under a caller-supplied
cancellation token. Connection pooling, retries and protocol framing stay
inside redis-py.

Requires redis (async): pip install redis
"""

from __future__ import annotations

from typing import Any, Mapping

import redis.asyncio as redis_lib
from redis.asyncio.cluster import ClusterNode, RedisCluster
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff

from .cancellation import CancellationToken, run_cancellable
from .config.redis import RedisSettings

# Smallest backoff step before the configured cap is reached.
_MIN_RETRY_BACKOFF = 0.008


def _retry_policy(settings: RedisSettings) -> Retry:
    return Retry(
        ExponentialBackoff(cap=settings.max_retry_backoff, base=_MIN_RETRY_BACKOFF),
        settings.max_retries,
    )


def _connection_kwargs(settings: RedisSettings) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "username": settings.username,
        "password": settings.password,
        "socket_connect_timeout": settings.dial_timeout,
        "socket_timeout": settings.read_timeout,
        "retry": _retry_policy(settings),
        "decode_responses": False,
    }
    if settings.enable_tls:
        kwargs["ssl"] = True
        if settings.client_cert:
            kwargs["ssl_certfile"] = settings.client_cert
            kwargs["ssl_keyfile"] = settings.client_key
    if settings.pool_size is not None:
        kwargs["max_connections"] = settings.pool_size
    return kwargs


def build_redis(settings: RedisSettings) -> Any:
    """Create the underlying redis-py client. No connection is opened yet."""
    kwargs = _connection_kwargs(settings)

    if settings.redis_type == "cluster":
        nodes = [ClusterNode(host, port) for host, port in settings.addresses]
        return RedisCluster(startup_nodes=nodes, **kwargs)

    host, port = settings.addresses[0]
    return redis_lib.Redis(host=host, port=port, db=settings.db, **kwargs)


class RedisClient:
    """
    Store client with ping/get/set/delete.

    Every command takes an optional cancellation token. When the token fires
    before the command completes, the command is abandoned and
    ``CancelledError`` is raised. Redis errors propagate unchanged.

    Example:
        ```python
        client, settings = parse_client_from_properties({"redisHost": "localhost:6379"})
        await client.set("x", b"42")
        assert await client.get("x") == b"42"
        await client.close()
        ```
    """

    def __init__(self, redis: Any, settings: RedisSettings | None = None) -> None:
        self._redis = redis
        self.settings = settings

    @property
    def redis(self) -> Any:
        return self._redis

    async def ping(self, token: CancellationToken | None = None) -> bool:
        return bool(await run_cancellable(self._redis.ping(), token))

    async def get(self, key: str, token: CancellationToken | None = None) -> bytes:
        """Fetch the raw value stored at ``key``; a missing key yields ``b""``."""
        value = await run_cancellable(self._redis.get(key), token)
        if value is None:
            return b""
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    async def set(self, key: str, value: bytes, token: CancellationToken | None = None) -> None:
        """Unconditionally set ``key`` to ``value``."""
        await run_cancellable(self._redis.set(key, value), token)

    async def delete(self, key: str, token: CancellationToken | None = None) -> None:
        await run_cancellable(self._redis.delete(key), token)

    async def close(self) -> None:
        await self._redis.aclose()


def parse_client_from_properties(
    properties: Mapping[str, str],
) -> tuple[RedisClient, RedisSettings]:
    """
    Build a client from host-supplied component properties.

    Raises:
        InvalidConfigError: If the properties are missing or malformed.
    """
    settings = RedisSettings.from_properties(properties)
    return RedisClient(build_redis(settings), settings), settings


__all__ = ["RedisClient", "build_redis", "parse_client_from_properties"]
