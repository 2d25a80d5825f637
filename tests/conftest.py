"""
Shared test fixtures and fakes for redis-binding tests.

This module provides:
- An in-memory stand-in for ``redis.asyncio.Redis`` that records calls
- A binding factory wired to that fake
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Mapping

import pytest

from redis_binding.bindings import BindingMetadata, RedisBinding
from redis_binding.client import RedisClient
from redis_binding.config import LoggingConfig, RedisSettings
from redis_binding.logging import StructuredLogger

# =============================================================================
# In-Memory Redis (for testing)
# =============================================================================


@dataclass
class FakeRedis:
    """Minimal async Redis: ping/get/set/delete/aclose over a dict.

    Commands are recorded when they start executing. Set ``fail_with`` to
    make every command raise, ``ping_error`` to fail only pings, and clear
    ``gate`` to hold commands until it is set again.
    """

    store: dict[str, bytes] = field(default_factory=dict)
    calls: list[tuple[str, Any]] = field(default_factory=list)
    fail_with: BaseException | None = None
    ping_error: BaseException | None = None
    close_error: BaseException | None = None
    closed: bool = False
    gate: asyncio.Event | None = None

    async def _enter(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    async def ping(self) -> bool:
        await self._enter("ping")
        if self.ping_error is not None:
            raise self.ping_error
        return True

    async def get(self, key: str) -> bytes | None:
        await self._enter("get", key)
        return self.store.get(key)

    async def set(self, key: str, value: bytes) -> bool:
        await self._enter("set", key, value)
        self.store[key] = bytes(value)
        return True

    async def delete(self, key: str) -> int:
        await self._enter("delete", key)
        return 1 if self.store.pop(key, None) is not None else 0

    async def aclose(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    def commands(self) -> list[str]:
        return [name for name, _ in self.calls if name != "ping"]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def test_logger() -> StructuredLogger:
    return StructuredLogger("redis_binding.test", level="DEBUG", json_output=True)


@pytest.fixture
def make_binding(fake_redis, test_logger):
    """Build an uninitialized binding whose client talks to ``fake_redis``."""

    def _factory(properties: Mapping[str, str]) -> tuple[RedisClient, RedisSettings]:
        settings = RedisSettings.from_properties(properties)
        return RedisClient(fake_redis, settings), settings

    def _make(logging_config: LoggingConfig | None = None) -> RedisBinding:
        return RedisBinding(logger=test_logger, client_factory=_factory, logging_config=logging_config)

    return _make


@pytest.fixture
def metadata() -> BindingMetadata:
    return BindingMetadata(name="test-binding", properties={"redisHost": "localhost:6379"})
