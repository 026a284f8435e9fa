"""FFmpeg-based frame extraction.

Runs ffmpeg once per image, seeking to the requested offset and piping a
single MJPEG frame to stdout. Nothing is written to disk.
"""

from __future__ import annotations

import asyncio
import io
import logging
from datetime import timedelta
from pathlib import Path
from typing import BinaryIO

from stillframe.core.cancellation import CancellationToken
from stillframe.core.subprocess_utils import run_command
from stillframe.domain.enums import MediaProtocol, Video3DFormat
from stillframe.encoder.interface import FrameExtractionError
from stillframe.tools.detection import require_tool

logger = logging.getLogger(__name__)

# Crop to the left/top eye; half formats are stretched back to full size
_STEREO_PREFILTERS: dict[Video3DFormat, str] = {
    Video3DFormat.HALF_SIDE_BY_SIDE: "crop=iw/2:ih:0:0,scale=iw*2:ih,setsar=1",
    Video3DFormat.FULL_SIDE_BY_SIDE: "crop=iw/2:ih:0:0,setsar=1",
    Video3DFormat.HALF_TOP_AND_BOTTOM: "crop=iw:ih/2:0:0,scale=iw:ih*2,setsar=1",
    Video3DFormat.FULL_TOP_AND_BOTTOM: "crop=iw:ih/2:0:0,setsar=1",
}

USER_AGENT = "stillframe"

# Number of stderr lines kept in error messages
_STDERR_TAIL_LINES = 5


def format_offset(offset: timedelta) -> str:
    """Render an offset as seconds with millisecond precision ("360.000")."""
    return f"{offset.total_seconds():.3f}"


def build_video_filter(width: int, video_3d_format: Video3DFormat | None) -> str:
    """Build the -vf filter chain for a thumbnail of the given width.

    The height keeps the display aspect ratio and is rounded to an even
    number of pixels.
    """
    scale = f"scale={width}:trunc({width}/dar/2)*2"
    prefilter = _STEREO_PREFILTERS.get(video_3d_format) if video_3d_format else None
    if prefilter:
        return f"{prefilter},{scale}"
    return scale


def build_extract_command(
    ffmpeg_path: Path,
    input_argument: str,
    protocol: MediaProtocol,
    video_3d_format: Video3DFormat | None,
    offset: timedelta,
    width: int,
) -> list[str]:
    """Build the ffmpeg argument list for extracting one frame.

    Args:
        ffmpeg_path: ffmpeg executable.
        input_argument: Input from get_input_argument().
        protocol: Transport used for the input.
        video_3d_format: Stereoscopic layout, if any.
        offset: Seek position.
        width: Output width in pixels.

    Returns:
        Command argument list.
    """
    cmd: list[str] = [str(ffmpeg_path)]
    if protocol == MediaProtocol.HTTP:
        cmd.extend(["-user_agent", USER_AGENT])
    if offset > timedelta(0):
        # Input seeking: fast, lands on the nearest keyframe before decoding
        cmd.extend(["-ss", format_offset(offset)])
    cmd.extend(
        [
            "-i",
            input_argument,
            "-threads",
            "0",
            "-v",
            "quiet",
            "-vframes",
            "1",
            "-vf",
            build_video_filter(width, video_3d_format),
            "-f",
            "image2pipe",
            "-vcodec",
            "mjpeg",
            "pipe:1",
        ]
    )
    return cmd


class FFmpegFrameExtractor:
    """FrameExtractor implementation driving the ffmpeg CLI."""

    DEFAULT_TIMEOUT: float = 120.0
    DEFAULT_IMAGE_WIDTH: int = 600

    def __init__(
        self,
        ffmpeg_path: Path | None = None,
        image_width: int | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            ffmpeg_path: Explicit ffmpeg path. None looks it up in PATH.
            image_width: Thumbnail width in pixels.
            timeout: Seconds before ffmpeg is killed. None uses DEFAULT_TIMEOUT.
        """
        self._configured_path = ffmpeg_path
        self._tool_path: Path | None = None
        self._image_width = image_width or self.DEFAULT_IMAGE_WIDTH
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    @property
    def tool_path(self) -> Path:
        """Get path to ffmpeg, verifying availability.

        Raises:
            ToolNotFoundError: If ffmpeg is not available.
        """
        if self._tool_path is None:
            self._tool_path = require_tool("ffmpeg", self._configured_path)
        return self._tool_path

    async def extract_video_image(
        self,
        input_argument: str,
        protocol: MediaProtocol,
        video_3d_format: Video3DFormat | None,
        offset: timedelta,
        token: CancellationToken | None = None,
    ) -> BinaryIO:
        """Extract one JPEG frame.

        Raises:
            FrameExtractionError: If ffmpeg fails, times out or outputs nothing.
            ToolNotFoundError: If ffmpeg is not available.
            OperationCancelledError: If the token fires.
        """
        cmd = build_extract_command(
            self.tool_path,
            input_argument,
            protocol,
            video_3d_format,
            offset,
            self._image_width,
        )
        logger.debug(
            "Extracting frame from %s at %ss", input_argument, format_offset(offset)
        )

        try:
            stdout, stderr, rc = await run_command(
                cmd, token=token, timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            raise FrameExtractionError(
                f"ffmpeg timed out after {self._timeout}s for {input_argument}"
            ) from e

        if rc != 0:
            raise FrameExtractionError(
                f"ffmpeg failed for {input_argument} (rc={rc}): {_tail(stderr)}",
                returncode=rc,
            )
        if not stdout:
            raise FrameExtractionError(
                f"ffmpeg produced no image for {input_argument}", returncode=rc
            )

        return io.BytesIO(stdout)


def _tail(stderr: str) -> str:
    lines = [line for line in stderr.strip().splitlines() if line.strip()]
    return "\n".join(lines[-_STDERR_TAIL_LINES:]) or "no output"
