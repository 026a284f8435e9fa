"""Cooperative cancellation for long-running async operations.

A CancellationToken is threaded from the caller through every suspending
call (disc mounts, ffmpeg/ffprobe runs). Firing the token aborts whatever is
currently awaited; asyncio task cancellation is honoured the same way.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationCancelledError(asyncio.CancelledError):
    """Raised when an operation is aborted through its CancellationToken.

    Subclasses asyncio.CancelledError so cancellation is never caught by
    ordinary ``except Exception`` handlers.
    """


class CancellationToken:
    """Cancellation signal shared between a caller and the work it starts.

    Example:
        token = CancellationToken()
        task = asyncio.create_task(provider.get_image(item, ImageType.PRIMARY, token))
        ...
        token.cancel()  # aborts the mount or the ffmpeg run in progress
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        """True once cancel() has been called."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """Reason passed to cancel(), if any."""
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Signal cancellation. Calling it more than once has no effect."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        logger.debug("Cancellation requested: %s", reason or "no reason given")

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if the token has fired.

        Raises:
            OperationCancelledError: If cancel() was called.
        """
        if self._event.is_set():
            raise OperationCancelledError(self._reason or "Operation cancelled")

    async def wait(self) -> None:
        """Block until the token fires."""
        await self._event.wait()


async def run_cancellable(aw: Awaitable[T], token: CancellationToken | None) -> T:
    """Await ``aw`` unless ``token`` fires first.

    Args:
        aw: Awaitable to run.
        token: Cancellation token, or None to simply await.

    Returns:
        The awaitable's result.

    Raises:
        OperationCancelledError: If the token fired before completion. The
            inner task has been cancelled and awaited by then.
        asyncio.CancelledError: If the surrounding task was cancelled. The
            inner task is cancelled as well.
    """
    if token is None:
        return await aw

    if token.is_cancelled:
        # Close a bare coroutine so it doesn't warn about never being awaited
        if asyncio.iscoroutine(aw):
            aw.close()
        token.raise_if_cancelled()

    task = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        await asyncio.gather(task, waiter, return_exceptions=True)
        raise

    if task.done():
        waiter.cancel()
        await asyncio.gather(waiter, return_exceptions=True)
        return task.result()

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    raise OperationCancelledError(token.reason or "Operation cancelled")
