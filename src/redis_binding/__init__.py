"""
Top-level package for the Redis output binding.

Environment variables are loaded from the nearest `.env` so connection
settings can be supplied the same way in development and deployment.
"""
from dotenv import find_dotenv, load_dotenv

_ = load_dotenv(find_dotenv(usecwd=True), override=False)

from .bindings import (
    BindingMetadata,
    InvokeRequest,
    InvokeResponse,
    OperationKind,
    OutputBinding,
    RedisBinding,
    create_output_binding,
)
from .cancellation import CancellationToken, CancelledError
from .client import RedisClient, parse_client_from_properties
from .config import RedisSettings, Settings
from .errors import (
    BindingConnectionError,
    BindingError,
    MissingKeyError,
    StoreError,
    UnsupportedOperationError,
)

__all__ = [
    "BindingMetadata",
    "InvokeRequest",
    "InvokeResponse",
    "OperationKind",
    "OutputBinding",
    "RedisBinding",
    "create_output_binding",
    "CancellationToken",
    "CancelledError",
    "RedisClient",
    "parse_client_from_properties",
    "RedisSettings",
    "Settings",
    "BindingError",
    "BindingConnectionError",
    "MissingKeyError",
    "UnsupportedOperationError",
    "StoreError",
]
