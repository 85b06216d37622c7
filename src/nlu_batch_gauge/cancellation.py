"""
Cooperative cancellation

A CancellationToken is threaded through every suspension point of a batch
evaluation (HTTP calls, retry back-off, status polling). Once cancelled, every
subsequent check or sleep raises OperationCancelledError carrying the token.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from nlu_batch_gauge.domain.exceptions import OperationCancelledError

T = TypeVar("T")


class CancellationToken:
    """Cancellation signal shared by the awaits of one operation"""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation. Idempotent."""
        self._event.set()

    def raise_if_cancellation_requested(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError(self)

    async def wait(self) -> None:
        """Block until cancellation is requested"""
        await self._event.wait()


async def sleep(delay: float, cancellation_token: CancellationToken | None = None) -> None:
    """
    Sleep for delay seconds, waking early if cancellation is requested.

    Negative delays are treated as zero.

    Raises:
        OperationCancelledError: If the token is cancelled before or during the sleep
    """
    delay = max(delay, 0.0)
    if cancellation_token is None:
        await asyncio.sleep(delay)
        return

    cancellation_token.raise_if_cancellation_requested()
    try:
        await asyncio.wait_for(cancellation_token.wait(), timeout=delay)
    except TimeoutError:
        return
    cancellation_token.raise_if_cancellation_requested()


async def run_cancellable(
    awaitable: Awaitable[T],
    cancellation_token: CancellationToken | None = None,
) -> T:
    """
    Await awaitable, abandoning it as soon as cancellation is requested.

    The awaitable runs as a task raced against the token. When the token wins,
    the task is cancelled and awaited before OperationCancelledError is raised.

    Raises:
        OperationCancelledError: If the token is cancelled before the awaitable completes
    """
    if cancellation_token is None:
        return await awaitable

    if cancellation_token.is_cancellation_requested:
        # Close a coroutine that will never be awaited
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        cancellation_token.raise_if_cancellation_requested()

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancellation_token.wait())
    try:
        await asyncio.wait((task, waiter), return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not task.done():
            task.cancel()
        await asyncio.wait((task, waiter))

    if task.cancelled():
        cancellation_token.raise_if_cancellation_requested()
    return task.result()
