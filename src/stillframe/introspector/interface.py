"""MediaIntrospector interface for probing video inputs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol, runtime_checkable

from stillframe.core.cancellation import CancellationToken


class MediaIntrospectionError(Exception):
    """Raised when media introspection fails."""

    pass


@dataclass(frozen=True)
class ProbeInfo:
    """What a probe found out about an input."""

    runtime: timedelta | None = None
    default_video_stream_index: int | None = None
    video_stream_count: int = 0
    container_format: str | None = None


@runtime_checkable
class MediaIntrospector(Protocol):
    """Protocol for media introspection implementations."""

    async def probe(
        self, input_argument: str, token: CancellationToken | None = None
    ) -> ProbeInfo:
        """Probe an input (as built by get_input_argument()).

        Raises:
            MediaIntrospectionError: If the input cannot be introspected.
        """
        ...
