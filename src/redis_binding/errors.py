"""
Error taxonomy for redis-binding.

This module provides a small exception hierarchy with:
- Error codes for programmatic handling
- Retryable vs non-retryable classification
- The original cause kept alongside the message

Errors raised by the Redis client itself are never wrapped: they reach the
host as the client produced them (see ``StoreError``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from redis.exceptions import RedisError


class ErrorCode(str, Enum):
    """Standardized error codes for the binding."""

    # Connectivity errors (1xxx)
    CONNECTION_ERROR = "ERR_1000"
    STORE_UNREACHABLE = "ERR_1001"

    # Request errors (2xxx)
    VALIDATION_ERROR = "ERR_2000"
    MISSING_KEY = "ERR_2001"
    UNSUPPORTED_OPERATION = "ERR_2002"

    # Configuration errors (3xxx)
    CONFIG_ERROR = "ERR_3000"
    INVALID_CONFIG = "ERR_3001"
    UNKNOWN_BINDING = "ERR_3002"

    # Internal errors (9xxx)
    INTERNAL_ERROR = "ERR_9000"


# Any error produced by the store client. Passed through unchanged.
StoreError = RedisError


class BindingError(Exception):
    """
    Base exception for all binding errors.

    Attributes:
        code: Standardized error code for programmatic handling
        message: Human-readable error message
        retryable: Whether the host may retry the operation
        cause: Original exception that caused this error
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        retryable: bool | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if retryable is not None:
            self.retryable = retryable
        self.cause = cause

    def __str__(self) -> str:
        # Hosts only see the message text at the binding boundary.
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code.value,
            "message": self.message,
            "retryable": self.retryable,
            "cause": str(self.cause) if self.cause else None,
        }


# =============================================================================
# Connectivity Errors
# =============================================================================


class BindingConnectionError(BindingError):
    """The liveness check against the store failed."""

    code = ErrorCode.STORE_UNREACHABLE
    retryable = True

    def __init__(
        self,
        message: str = "error connecting to redis",
        *,
        host: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.host = host

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["host"] = self.host
        return d


# =============================================================================
# Request Errors
# =============================================================================


class ValidationError(BindingError):
    """Base class for rejected invocation requests."""

    code = ErrorCode.VALIDATION_ERROR
    retryable = False


class MissingKeyError(ValidationError):
    """The request metadata has no usable "key" entry."""

    code = ErrorCode.MISSING_KEY

    def __init__(
        self,
        message: str = "redis binding: missing key in request metadata",
        **kwargs,
    ):
        super().__init__(message, **kwargs)


class UnsupportedOperationError(ValidationError):
    """The operation kind is not one the binding handles."""

    code = ErrorCode.UNSUPPORTED_OPERATION

    def __init__(
        self,
        message: str = "invalid operation type",
        *,
        operation: str | None = None,
        **kwargs,
    ):
        if operation is not None:
            message = f"invalid operation type: {operation}"
        super().__init__(message, **kwargs)
        self.operation = operation


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(BindingError):
    """Base class for configuration errors."""

    code = ErrorCode.CONFIG_ERROR
    retryable = False


class InvalidConfigError(ConfigError):
    """A component property is missing or malformed."""

    code = ErrorCode.INVALID_CONFIG

    def __init__(
        self,
        message: str = "invalid binding configuration",
        *,
        field: str | None = None,
        **kwargs,
    ):
        super().__init__(message, **kwargs)
        self.field = field


class UnknownBindingError(ConfigError):
    """No binding is registered under the requested name."""

    code = ErrorCode.UNKNOWN_BINDING

    def __init__(
        self,
        message: str = "unknown binding",
        *,
        name: str | None = None,
        **kwargs,
    ):
        if name is not None:
            message = f"unknown binding: {name}"
        super().__init__(message, **kwargs)
        self.name = name


__all__ = [
    "ErrorCode",
    "StoreError",
    "BindingError",
    "BindingConnectionError",
    "ValidationError",
    "MissingKeyError",
    "UnsupportedOperationError",
    "ConfigError",
    "InvalidConfigError",
    "UnknownBindingError",
]
