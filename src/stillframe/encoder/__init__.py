"""Frame extraction and input argument construction."""

from stillframe.encoder.ffmpeg import (
    FFmpegFrameExtractor,
    build_extract_command,
    build_video_filter,
    format_offset,
)
from stillframe.encoder.input_args import (
    get_input_argument,
    get_playable_stream_files,
)
from stillframe.encoder.interface import FrameExtractionError, FrameExtractor

__all__ = [
    "FFmpegFrameExtractor",
    "FrameExtractionError",
    "FrameExtractor",
    "build_extract_command",
    "build_video_filter",
    "format_offset",
    "get_input_argument",
    "get_playable_stream_files",
]
