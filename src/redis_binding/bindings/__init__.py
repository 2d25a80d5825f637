"""
Output bindings.
"""

from .base import BindingMetadata, InvokeRequest, InvokeResponse, OperationKind, OutputBinding
from .redis import METADATA_KEY, RedisBinding, new_redis_binding
from .registry import BindingRegistry, create_output_binding, default_registry

__all__ = [
    "BindingMetadata",
    "InvokeRequest",
    "InvokeResponse",
    "OperationKind",
    "OutputBinding",
    "METADATA_KEY",
    "RedisBinding",
    "new_redis_binding",
    "BindingRegistry",
    "create_output_binding",
    "default_registry",
]
