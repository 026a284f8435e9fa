"""Daemon lifecycle: uptime, shutdown state and in-flight extractions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from stillframe.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)


@dataclass
class DaemonLifecycle:
    """Tracks daemon state shared between the signal handlers and requests."""

    shutdown_timeout: float = 30.0
    """Seconds to wait for in-flight requests before cancelling them."""

    start_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    shutdown_initiated: datetime | None = None

    _active_tokens: set[CancellationToken] = field(
        default_factory=set, init=False, repr=False
    )

    @property
    def uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.start_time).total_seconds()

    @property
    def is_shutting_down(self) -> bool:
        return self.shutdown_initiated is not None

    @property
    def active_requests(self) -> int:
        return len(self._active_tokens)

    def initiate_shutdown(self) -> None:
        """Mark the daemon as shutting down. Idempotent."""
        if self.shutdown_initiated is None:
            self.shutdown_initiated = datetime.now(timezone.utc)

    def track(self, token: CancellationToken) -> None:
        self._active_tokens.add(token)

    def untrack(self, token: CancellationToken) -> None:
        self._active_tokens.discard(token)

    def cancel_active(self, reason: str = "Daemon shutting down") -> int:
        """Cancel every in-flight extraction.

        Returns:
            Number of extractions cancelled.
        """
        tokens = list(self._active_tokens)
        for token in tokens:
            token.cancel(reason)
        if tokens:
            logger.info("Cancelled %d in-flight extraction(s)", len(tokens))
        return len(tokens)
