"""Pure parsing functions for ffprobe JSON output.

No I/O and no side effects, so they can be tested against canned output.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from stillframe.introspector.interface import MediaIntrospectionError, ProbeInfo

logger = logging.getLogger(__name__)


def parse_duration(value: Any) -> timedelta | None:
    """Parse an ffprobe duration ("3600.000000") into a timedelta.

    Returns None for missing, unparseable or negative values.
    """
    if value is None:
        return None
    try:
        seconds = float(value)
    except (ValueError, TypeError):
        return None
    if seconds < 0:
        logger.warning("Ignoring negative duration: %s", value)
        return None
    return timedelta(seconds=seconds)


def _is_video_stream(stream: dict[str, Any]) -> bool:
    if stream.get("codec_type") != "video":
        return False
    # Embedded cover art shows up as a video stream
    disposition = stream.get("disposition") or {}
    return disposition.get("attached_pic", 0) != 1


def find_default_video_stream(streams: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Pick the stream flagged default, else the first video stream."""
    video_streams = [s for s in streams if _is_video_stream(s)]
    for stream in video_streams:
        if (stream.get("disposition") or {}).get("default", 0) == 1:
            return stream
    return video_streams[0] if video_streams else None


def parse_ffprobe_output(data: dict[str, Any]) -> ProbeInfo:
    """Turn `ffprobe -show_streams -show_format` JSON into a ProbeInfo.

    Args:
        data: Decoded ffprobe JSON.

    Returns:
        ProbeInfo. The runtime comes from the container, falling back to
        the default video stream's own duration.

    Raises:
        MediaIntrospectionError: If the output has no stream list.
    """
    streams = data.get("streams")
    if not isinstance(streams, list):
        raise MediaIntrospectionError(
            "Missing 'streams' in ffprobe output. "
            "Input may be corrupted or not a valid media file."
        )
    format_info = data.get("format") or {}

    default_stream = find_default_video_stream(streams)

    runtime = parse_duration(format_info.get("duration"))
    if runtime is None and default_stream is not None:
        runtime = parse_duration(default_stream.get("duration"))

    default_index: int | None = None
    if default_stream is not None:
        index = default_stream.get("index")
        if isinstance(index, int) and index >= 0:
            default_index = index

    return ProbeInfo(
        runtime=runtime,
        default_video_stream_index=default_index,
        video_stream_count=sum(1 for s in streams if _is_video_stream(s)),
        container_format=format_info.get("format_name"),
    )
