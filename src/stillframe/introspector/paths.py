"""Classify paths and locate the main title of disc structures.

Classification only looks at names and directory layout; nothing is
probed or mounted here.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from stillframe.domain.enums import IsoType, LocationType, Video3DFormat, VideoType

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = frozenset({"http", "https", "rtsp", "rtmp"})

DISC_FOLDERS: dict[str, VideoType] = {
    "video_ts": VideoType.DVD,
    "bdmv": VideoType.BLURAY,
    "hvdvd_ts": VideoType.HDDVD,
}

PLACEHOLDER_EXTENSIONS = frozenset({".disc"})
SHORTCUT_EXTENSIONS = frozenset({".strm"})
ARCHIVE_EXTENSIONS = frozenset({".rar", ".zip", ".7z"})

_BLURAY_TOKEN = re.compile(r"(?<![a-z0-9])(?:blu-?ray|bdmv|bd)(?![a-z0-9])")
_DVD_TOKEN = re.compile(r"(?<![a-z0-9])dvd(?![a-z0-9])")
_NAME_TOKEN_SPLIT = re.compile(r"[^a-z0-9]+")

# Checked in order; "sbs" and "tab" without a prefix mean the half formats
_3D_TOKENS: tuple[tuple[str, Video3DFormat], ...] = (
    ("hsbs", Video3DFormat.HALF_SIDE_BY_SIDE),
    ("fsbs", Video3DFormat.FULL_SIDE_BY_SIDE),
    ("htab", Video3DFormat.HALF_TOP_AND_BOTTOM),
    ("ftab", Video3DFormat.FULL_TOP_AND_BOTTOM),
    ("mvc", Video3DFormat.MVC),
    ("sbs", Video3DFormat.HALF_SIDE_BY_SIDE),
    ("tab", Video3DFormat.HALF_TOP_AND_BOTTOM),
)

_VOB_NAME = re.compile(r"^vts_(\d{2})_(\d)\.vob$", re.IGNORECASE)


@dataclass(frozen=True)
class PathClassification:
    """Result of classify_path()."""

    location_type: LocationType
    video_type: VideoType
    is_placeholder: bool = False
    is_shortcut: bool = False
    is_archive: bool = False


def is_remote(path: str) -> bool:
    """Return True for URLs with a streaming scheme."""
    return urlparse(path).scheme.lower() in REMOTE_SCHEMES


def _child_dir(parent: Path, name: str) -> Path | None:
    """Find a direct subdirectory by case-insensitive name."""
    try:
        children = sorted(parent.iterdir())
    except OSError:
        return None
    wanted = name.casefold()
    return next(
        (c for c in children if c.is_dir() and c.name.casefold() == wanted), None
    )


def detect_disc_folder(path: Path) -> VideoType | None:
    """Return the disc type of a disc folder or of its parent folder."""
    if not path.is_dir():
        return None
    video_type = DISC_FOLDERS.get(path.name.casefold())
    if video_type is not None:
        return video_type
    for folder_name, folder_type in DISC_FOLDERS.items():
        if _child_dir(path, folder_name) is not None:
            return folder_type
    return None


def classify_path(path: str) -> PathClassification:
    """Classify a path or URL.

    Args:
        path: Filesystem path or URL.

    Returns:
        Location, storage medium and placeholder/shortcut/archive flags.
    """
    if is_remote(path):
        return PathClassification(LocationType.REMOTE, VideoType.VIDEO_FILE)

    fs_path = Path(path)
    disc_type = detect_disc_folder(fs_path)
    if disc_type is not None:
        return PathClassification(LocationType.FILESYSTEM, disc_type)

    suffix = fs_path.suffix.lower()
    return PathClassification(
        LocationType.FILESYSTEM,
        VideoType.ISO if suffix == ".iso" else VideoType.VIDEO_FILE,
        is_placeholder=suffix in PLACEHOLDER_EXTENSIONS,
        is_shortcut=suffix in SHORTCUT_EXTENSIONS,
        is_archive=suffix in ARCHIVE_EXTENSIONS,
    )


def detect_iso_type(path: str | Path) -> IsoType | None:
    """Guess an ISO's content type from its file name.

    "Movie.BluRay.iso" is a Blu-ray, "Movie (DVD).iso" a DVD. Returns None
    when the name says neither.
    """
    name = Path(path).stem.casefold()
    if _BLURAY_TOKEN.search(name):
        return IsoType.BLURAY
    if _DVD_TOKEN.search(name):
        return IsoType.DVD
    return None


def detect_iso_type_from_contents(root: Path) -> IsoType | None:
    """Determine an ISO's content type from its mounted file layout."""
    disc_type = detect_disc_folder(root)
    if disc_type == VideoType.DVD:
        return IsoType.DVD
    if disc_type == VideoType.BLURAY:
        return IsoType.BLURAY
    return None


def detect_3d_format(path: str | Path) -> Video3DFormat | None:
    """Detect a stereoscopic layout from file name tokens ("Movie.3D.HSBS.mkv")."""
    tokens = set(_NAME_TOKEN_SPLIT.split(Path(path).stem.casefold()))
    for token, video_3d_format in _3D_TOKENS:
        if token in tokens:
            return video_3d_format
    return None


def _disc_subfolder(root: Path, folder_name: str) -> Path | None:
    if root.name.casefold() == folder_name:
        return root
    return _child_dir(root, folder_name)


def _find_dvd_title(root: Path) -> list[str]:
    video_ts = _disc_subfolder(root, "video_ts")
    if video_ts is None:
        return []

    title_sets: dict[str, list[tuple[int, Path]]] = {}
    for candidate in video_ts.iterdir():
        match = _VOB_NAME.match(candidate.name)
        if match is None or not candidate.is_file():
            continue
        title_set, part = match.group(1), int(match.group(2))
        if part == 0:
            # Part 0 holds the title set menu
            continue
        title_sets.setdefault(title_set, []).append((part, candidate))

    if not title_sets:
        return []

    def total_size(parts: list[tuple[int, Path]]) -> int:
        return sum(p.stat().st_size for _, p in parts)

    main_title = max(
        sorted(title_sets.items()), key=lambda item: total_size(item[1])
    )[1]
    return [p.name for _, p in sorted(main_title)]


def _find_bluray_title(root: Path) -> list[str]:
    bdmv = _disc_subfolder(root, "bdmv")
    stream_dir = _child_dir(bdmv, "stream") if bdmv is not None else None
    if stream_dir is None:
        return []

    streams = sorted(
        p
        for p in stream_dir.iterdir()
        if p.is_file() and p.suffix.lower() == ".m2ts"
    )
    if not streams:
        return []
    return [max(streams, key=lambda p: p.stat().st_size).name]


def find_playable_stream_files(root: Path, video_type: VideoType) -> list[str]:
    """Return the file names that make up the main title of a disc.

    DVDs use the largest title set's VOB parts in order (menus excluded),
    Blu-rays the largest .m2ts stream. Other types have no playable files.

    Args:
        root: Disc folder, its parent, or an ISO mount point.
        video_type: DVD or BLURAY.

    Returns:
        File names in playback order, empty if none were found.
    """
    if video_type == VideoType.DVD:
        names = _find_dvd_title(root)
    elif video_type == VideoType.BLURAY:
        names = _find_bluray_title(root)
    else:
        return []

    if not names:
        logger.debug("No playable %s streams under %s", video_type.value, root)
    return names
