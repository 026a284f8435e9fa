"""Media introspection: classify, probe and resolve video items."""

from stillframe.introspector.ffprobe import FFprobeIntrospector
from stillframe.introspector.interface import (
    MediaIntrospectionError,
    MediaIntrospector,
    ProbeInfo,
)
from stillframe.introspector.parsers import parse_ffprobe_output
from stillframe.introspector.paths import (
    PathClassification,
    classify_path,
    detect_3d_format,
    detect_iso_type,
    find_playable_stream_files,
)
from stillframe.introspector.resolver import MediaItemResolver, build_resolver

__all__ = [
    "FFprobeIntrospector",
    "MediaIntrospectionError",
    "MediaIntrospector",
    "MediaItemResolver",
    "PathClassification",
    "ProbeInfo",
    "build_resolver",
    "classify_path",
    "detect_3d_format",
    "detect_iso_type",
    "find_playable_stream_files",
    "parse_ffprobe_output",
]
