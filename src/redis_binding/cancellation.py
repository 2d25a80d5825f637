"""Cancellation tokens for cooperative task interruption.

This module provides a CancellationToken class that lets a host abort
in-flight store calls, and lets a binding signal its own shutdown to every
call still running under its lifecycle token.

Key design:
- Token uses asyncio.Event internally for async-friendly waiting
- Tokens are passed explicitly into blocking calls, never looked up ambiently
- ``run_cancellable`` races an awaitable against a token
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class CancelledError(Exception):
    """Canonical cancellation exception for redis-binding.

    Raised when an operation is cancelled via CancellationToken. Distinct
    from asyncio.CancelledError so hosts can tell a token-driven abort from
    task cancellation.
    """


@dataclass
class CancellationToken:
    """Mutable token for cooperative cancellation.

    Usage:
        token = CancellationToken()

        # In a blocking call:
        value = await run_cancellable(client.get(key), token)

        # To cancel:
        token.cancel()
    """

    _event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _callbacks: list[Callable[[], Any]] = field(default_factory=list, init=False)
    _noop: bool = field(default=False, init=False, repr=False)

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        if self._noop:
            return False
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation (idempotent).

        Triggers all registered callbacks on first call.
        """
        if self._noop:
            return
        if not self._event.is_set():
            self._event.set()
            for cb in self._callbacks:
                try:
                    cb()
                except Exception:
                    # A failing callback must not block cancellation
                    pass

    async def wait(self) -> None:
        """Block until cancel() is called."""
        if self._noop:
            # Never resolves: this token never cancels.
            await asyncio.Future()
            return
        await self._event.wait()

    def on_cancel(self, callback: Callable[[], Any]) -> None:
        """Register callback for cancellation.

        Callback is invoked immediately if already cancelled.
        """
        self._callbacks.append(callback)
        if self._noop:
            return
        if self._event.is_set():
            try:
                callback()
            except Exception:
                pass

    def raise_if_cancelled(self) -> None:
        """Raise CancelledError if cancelled.

        Raises:
            CancelledError: If cancellation was requested.
        """
        if self._noop:
            return
        if self._event.is_set():
            raise CancelledError("Operation was cancelled")

    @property
    def is_noop(self) -> bool:
        return self._noop

    @classmethod
    def none(cls) -> CancellationToken:
        """Return a no-op token (never cancels)."""
        return _get_never_cancel()


# Created lazily so no event loop is needed at import time
_NEVER_CANCEL: CancellationToken | None = None


def _get_never_cancel() -> CancellationToken:
    """Get or create the singleton no-op token."""
    global _NEVER_CANCEL
    if _NEVER_CANCEL is None:
        token = CancellationToken()
        token._noop = True
        _NEVER_CANCEL = token
    return _NEVER_CANCEL


async def run_cancellable(awaitable: Awaitable[T], token: CancellationToken | None = None) -> T:
    """Await ``awaitable`` unless ``token`` fires first.

    When the token wins, the pending operation is cancelled and awaited so it
    can unwind, then CancelledError is raised. A result that is already
    available when the token fires is still returned.

    Raises:
        CancelledError: If the token was or becomes cancelled.
    """
    if token is None or token.is_noop:
        return await awaitable

    if token.is_cancelled:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        raise CancelledError("Operation was cancelled")

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        raise
    finally:
        waiter.cancel()

    if not task.done():
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise CancelledError("Operation was cancelled")
    return task.result()


__all__ = ["CancellationToken", "CancelledError", "run_cancellable"]
