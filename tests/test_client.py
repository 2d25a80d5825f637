"""
Tests for the store client facade.
"""

from __future__ import annotations

import pytest
import redis.asyncio as redis_lib
from redis.asyncio.cluster import RedisCluster

from redis_binding.cancellation import CancellationToken, CancelledError
from redis_binding.client import RedisClient, build_redis, parse_client_from_properties
from redis_binding.config import RedisSettings
from redis_binding.errors import InvalidConfigError


class TestBuildRedis:
    """Constructing a client opens no connection."""

    def test_node_client(self):
        settings = RedisSettings(host="cache.internal:6380", db=2, password="hunter2hunter2")
        client = build_redis(settings)

        assert isinstance(client, redis_lib.Redis)
        kwargs = client.connection_pool.connection_kwargs
        assert kwargs["host"] == "cache.internal"
        assert kwargs["port"] == 6380
        assert kwargs["db"] == 2
        assert kwargs["password"] == "hunter2hunter2"

    def test_default_port(self):
        client = build_redis(RedisSettings(host="localhost"))
        assert client.connection_pool.connection_kwargs["port"] == 6379

    def test_timeouts(self):
        client = build_redis(RedisSettings(host="localhost", dial_timeout=1.5, read_timeout=0.5))
        kwargs = client.connection_pool.connection_kwargs
        assert kwargs["socket_connect_timeout"] == 1.5
        assert kwargs["socket_timeout"] == 0.5

    def test_cluster_client(self):
        settings = RedisSettings(host="node-a:7000, node-b:7001", redis_type="cluster", password="pw")
        client = build_redis(settings)

        assert isinstance(client, RedisCluster)
        assert set(client.nodes_manager.startup_nodes) == {"node-a:7000", "node-b:7001"}

    def test_parse_client_from_properties(self):
        client, settings = parse_client_from_properties({"redisHost": "localhost:6379", "redisDB": "3"})

        assert isinstance(client, RedisClient)
        assert client.settings is settings
        assert settings.db == 3
        assert client.redis.connection_pool.connection_kwargs["db"] == 3

    def test_parse_client_rejects_bad_properties(self):
        with pytest.raises(InvalidConfigError):
            parse_client_from_properties({"redisHost": "localhost", "redisDB": "zero"})


class TestRedisClient:
    """Test command translation."""

    @pytest.mark.asyncio
    async def test_get_missing_returns_empty_bytes(self, fake_redis):
        client = RedisClient(fake_redis)
        assert await client.get("absent") == b""

    @pytest.mark.asyncio
    async def test_get_encodes_str_values(self, fake_redis):
        fake_redis.store["k"] = "value"  # decode_responses=True clients return str
        client = RedisClient(fake_redis)
        assert await client.get("k") == b"value"

    @pytest.mark.asyncio
    async def test_set_get_delete(self, fake_redis):
        client = RedisClient(fake_redis)

        await client.set("k", b"\x00\xffraw")
        assert await client.get("k") == b"\x00\xffraw"

        await client.delete("k")
        assert await client.get("k") == b""

    @pytest.mark.asyncio
    async def test_ping(self, fake_redis):
        assert await RedisClient(fake_redis).ping() is True

    @pytest.mark.asyncio
    async def test_cancelled_token(self, fake_redis):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(CancelledError):
            await RedisClient(fake_redis).set("k", b"v", token)
        assert fake_redis.calls == []

    @pytest.mark.asyncio
    async def test_close(self, fake_redis):
        await RedisClient(fake_redis).close()
        assert fake_redis.closed
