"""
Redis output binding.

Supports three operations keyed by the ``key`` metadata entry:

- ``create``: SET key to the request payload
- ``get``: GET key, returned as the response payload
- ``delete``: DEL key

Store errors are not wrapped; they reach the host as redis-py raised them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from ..cancellation import CancellationToken
from ..client import RedisClient, parse_client_from_properties
from ..config.logging import LoggingConfig
from ..config.redis import RedisSettings
from ..errors import BindingConnectionError, MissingKeyError, UnsupportedOperationError
from ..logging import InvocationLog, StructuredLogger, get_logger, timed, truncate_for_log
from .base import BindingMetadata, InvokeRequest, InvokeResponse, OperationKind

ClientFactory = Callable[[Mapping[str, str]], tuple[RedisClient, RedisSettings]]

METADATA_KEY = "key"


class RedisBinding:
    """
    Output binding backed by a Redis server.

    The binding holds only the client handle and a lifecycle token, so
    concurrent ``invoke`` calls are safe without locking.

    Example:
        ```python
        binding = RedisBinding()
        await binding.init(BindingMetadata(properties={"redisHost": "localhost:6379"}))
        await binding.invoke(InvokeRequest(OperationKind.CREATE, {"key": "x"}, b"42"))
        resp = await binding.invoke(InvokeRequest(OperationKind.GET, {"key": "x"}))
        await binding.close()
        ```
    """

    name = "bindings.redis"

    def __init__(
        self,
        logger: StructuredLogger | None = None,
        client_factory: ClientFactory | None = None,
        logging_config: LoggingConfig | None = None,
    ) -> None:
        self.logger = logger or get_logger()
        self.logging_config = logging_config or LoggingConfig()
        self._client_factory = client_factory or parse_client_from_properties

        self._client: RedisClient | None = None
        self._settings: RedisSettings | None = None
        self._token: CancellationToken | None = None

    @property
    def client(self) -> RedisClient | None:
        return self._client

    @property
    def settings(self) -> RedisSettings | None:
        return self._settings

    async def init(self, metadata: BindingMetadata) -> None:
        """
        Parse the component properties, connect, and check liveness.

        Raises:
            InvalidConfigError: If the properties are malformed.
            BindingConnectionError: If the initial ping fails.
        """
        self._client, self._settings = self._client_factory(metadata.properties)
        self._token = CancellationToken()

        # Each binding gets its own context; a shared logger is never mutated.
        self.logger = self.logger.bind(
            component=metadata.name or None,
            binding=self.name,
            host=self._settings.host,
        )
        self.logger.info(
            "Initializing redis binding",
            settings=self._settings.to_dict(redact=self.logging_config.redact_secrets),
        )

        await self.ping()

    async def ping(self) -> None:
        """
        Check that the store is reachable.

        Raises:
            BindingConnectionError: With the configured host and the cause.
        """
        client, settings = self._require_client()
        try:
            await client.ping(self._token)
        except Exception as e:
            error = BindingConnectionError(
                f"redis binding: error connecting to redis at {settings.host}: {e}",
                host=settings.host,
                cause=e,
            )
            self.logger.log_error(error, level=logging.WARNING)
            raise error from e

    def operations(self) -> list[OperationKind]:
        return [
            OperationKind.CREATE,
            OperationKind.DELETE,
            OperationKind.GET,
        ]

    async def invoke(
        self,
        request: InvokeRequest,
        token: CancellationToken | None = None,
    ) -> InvokeResponse | None:
        """
        Run one request against the store.

        Args:
            request: Operation, metadata (must hold a non-empty ``key``) and payload.
            token: Caller's cancellation token, passed to the store call as-is.

        Returns:
            A response carrying the value for ``get``, otherwise None.

        Raises:
            MissingKeyError: If ``metadata["key"]`` is missing or empty.
            UnsupportedOperationError: For operations other than create/get/delete.
            StoreError: Any error raised by the store, unchanged.
        """
        key = request.metadata.get(METADATA_KEY)
        if not key:
            error = MissingKeyError()
            self.logger.debug(str(error), operation=str(request.operation))
            raise error

        operation = _operation_kind(request.operation)
        if operation not in self.operations():
            error = UnsupportedOperationError(operation=str(request.operation))
            self.logger.debug(str(error), key=key)
            raise error

        client, _ = self._require_client()
        logger = self.logger.bind(operation=operation.value)
        record = InvocationLog(
            operation=operation.value,
            key=truncate_for_log(key),
            request_bytes=len(request.data or b""),
        )
        with timed() as timer:
            try:
                response = await self._dispatch(client, operation, key, request, token)
            except Exception as e:
                record.success = False
                record.error = f"{type(e).__name__}: {e}"
                raise
            else:
                if response is not None and response.data is not None:
                    record.response_bytes = len(response.data)
                return response
            finally:
                record.duration_ms = timer.elapsed_ms
                if self.logging_config.log_invocations:
                    logger.log_invocation(record)

    async def _dispatch(
        self,
        client: RedisClient,
        operation: OperationKind,
        key: str,
        request: InvokeRequest,
        token: CancellationToken | None,
    ) -> InvokeResponse | None:
        if operation is OperationKind.DELETE:
            await client.delete(key, token)
            return None
        if operation is OperationKind.GET:
            data = await client.get(key, token)
            return InvokeResponse(data=data)
        # OperationKind.CREATE
        await client.set(key, request.data, token)
        return None

    async def close(self) -> None:
        """Cancel the lifecycle token and close the client connection."""
        if self._token is not None:
            self._token.cancel()
        if self._client is None:
            return
        self.logger.info("Closing redis binding")
        await self._client.close()

    def _require_client(self) -> tuple[RedisClient, RedisSettings]:
        if self._client is None or self._settings is None:
            raise RuntimeError("redis binding used before init()")
        return self._client, self._settings


def _operation_kind(operation: OperationKind | str) -> OperationKind | str:
    if isinstance(operation, OperationKind):
        return operation
    try:
        return OperationKind(str(operation).lower())
    except ValueError:
        return operation


def new_redis_binding(
    logger: StructuredLogger | None = None,
    logging_config: LoggingConfig | None = None,
) -> RedisBinding:
    """Factory used by the binding registry."""
    return RedisBinding(logger=logger, logging_config=logging_config)


__all__ = ["RedisBinding", "new_redis_binding", "METADATA_KEY"]
