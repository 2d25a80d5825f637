#!/usr/bin/env python3
"""
Example: Redis Output Binding

Demonstrates:
1. Initializing the binding against a local Redis
2. create / get / delete through the invocation envelope
3. Health check and shutdown

Requires a Redis server (default localhost:6379, override with BINDING_REDIS_HOST).
"""

import asyncio

# Add src to path for development
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from redis_binding import (
    BindingMetadata,
    InvokeRequest,
    OperationKind,
    Settings,
    create_output_binding,
)
from redis_binding.logging import configure_logging


async def main():
    settings = Settings.from_env()
    settings.redis.setdefault("redisHost", "localhost:6379")
    logger = configure_logging(level=settings.logging.level, json_output=settings.logging.format == "json")

    binding = create_output_binding("bindings.redis", logger=logger, logging_config=settings.logging)
    await binding.init(BindingMetadata(name="statestore-binding", properties=settings.redis))
    print(f"Supported operations: {[str(op) for op in binding.operations()]}")

    print("\n" + "=" * 60)
    print("create -> get -> delete")
    print("=" * 60)

    await binding.invoke(InvokeRequest(OperationKind.CREATE, {"key": "x"}, b"42"))
    response = await binding.invoke(InvokeRequest(OperationKind.GET, {"key": "x"}))
    print(f"get x: {response.data!r}")

    await binding.invoke(InvokeRequest(OperationKind.DELETE, {"key": "x"}))
    response = await binding.invoke(InvokeRequest(OperationKind.GET, {"key": "x"}))
    print(f"get x after delete: {response.data!r}")

    await binding.ping()
    print("ping ok")

    await binding.close()


if __name__ == "__main__":
    asyncio.run(main())
