"""
Types and protocols for output bindings.

An output binding lets a host runtime invoke an external system through a
uniform envelope: an operation kind, a string metadata map and an opaque
payload. Bindings satisfy ``OutputBinding`` structurally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from ..cancellation import CancellationToken


class OperationKind(str, Enum):
    """Operation kinds understood by the host contract."""

    CREATE = "create"
    GET = "get"
    DELETE = "delete"
    LIST = "list"

    def __str__(self) -> str:
        return self.value


@dataclass
class BindingMetadata:
    """Component metadata handed to ``init`` by the host."""

    name: str = ""
    properties: dict[str, str] = field(default_factory=dict)


@dataclass
class InvokeRequest:
    """A single invocation from the host."""

    operation: OperationKind | str
    metadata: dict[str, str] = field(default_factory=dict)
    data: bytes = b""


@dataclass
class InvokeResponse:
    """Result of an invocation. ``data`` is only populated by reads."""

    data: bytes | None = None
    metadata: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class OutputBinding(Protocol):
    """
    Protocol every output binding implements.

    The host calls ``init`` once, then any number of concurrent ``invoke``
    and ``ping`` calls, then ``close`` at most once.
    """

    async def init(self, metadata: BindingMetadata) -> None:
        """Parse configuration and connect."""
        ...

    def operations(self) -> list[OperationKind]:
        """Operation kinds this binding accepts."""
        ...

    async def invoke(
        self,
        request: InvokeRequest,
        token: CancellationToken | None = None,
    ) -> InvokeResponse | None:
        """Execute one request."""
        ...

    async def ping(self) -> None:
        """Raise if the backing system is unreachable."""
        ...

    async def close(self) -> None:
        """Release all resources."""
        ...


__all__ = [
    "OperationKind",
    "BindingMetadata",
    "InvokeRequest",
    "InvokeResponse",
    "OutputBinding",
]
