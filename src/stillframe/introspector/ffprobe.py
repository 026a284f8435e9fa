"""FFprobe-based implementation of the MediaIntrospector protocol."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

from stillframe.core.cancellation import CancellationToken
from stillframe.core.subprocess_utils import run_command
from stillframe.introspector.interface import MediaIntrospectionError, ProbeInfo
from stillframe.introspector.parsers import parse_ffprobe_output
from stillframe.tools.detection import require_tool

logger = logging.getLogger(__name__)


class FFprobeIntrospector:
    """Probe runtime and video streams with ffprobe."""

    DEFAULT_TIMEOUT: float = 60.0

    def __init__(
        self, ffprobe_path: Path | None = None, timeout: float | None = None
    ) -> None:
        """Initialize the introspector.

        Args:
            ffprobe_path: Explicit ffprobe path. None looks it up in PATH.
            timeout: Seconds before ffprobe is killed.
        """
        self._configured_path = ffprobe_path
        self._tool_path: Path | None = None
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    @property
    def tool_path(self) -> Path:
        """Get path to ffprobe, verifying availability.

        Raises:
            ToolNotFoundError: If ffprobe is not available.
        """
        if self._tool_path is None:
            self._tool_path = require_tool("ffprobe", self._configured_path)
        return self._tool_path

    async def probe(
        self, input_argument: str, token: CancellationToken | None = None
    ) -> ProbeInfo:
        """Probe an input.

        Args:
            input_argument: Input from get_input_argument() (file:, concat:
                or a URL).
            token: Cancellation token.

        Returns:
            ProbeInfo for the input.

        Raises:
            MediaIntrospectionError: If ffprobe fails or its output is invalid.
            ToolNotFoundError: If ffprobe is not available.
            OperationCancelledError: If the token fires.
        """
        cmd = [
            str(self.tool_path),
            "-v",
            "error",
            "-print_format",
            "json",
            "-show_streams",
            "-show_format",
            input_argument,
        ]

        try:
            stdout, stderr, rc = await run_command(
                cmd, token=token, timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            raise MediaIntrospectionError(
                f"ffprobe timed out for {input_argument} after {self._timeout}s"
            ) from e

        if rc != 0:
            raise MediaIntrospectionError(
                f"ffprobe failed for {input_argument}: {stderr.strip() or rc}"
            )

        try:
            data = json.loads(stdout.decode("utf-8", errors="replace"))
        except json.JSONDecodeError as e:
            raise MediaIntrospectionError(
                f"Invalid ffprobe output for {input_argument}: {e}"
            ) from e
        if not isinstance(data, dict):
            raise MediaIntrospectionError(
                f"Unexpected ffprobe output for {input_argument}"
            )

        info = parse_ffprobe_output(data)
        logger.debug(
            "Probed %s: runtime=%s default_video_stream=%s",
            input_argument,
            info.runtime,
            info.default_video_stream_index,
        )
        return info
