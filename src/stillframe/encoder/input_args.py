"""Build the input argument handed to ffmpeg/ffprobe for an item.

Plain files become ``file:<path>``, multi-part disc titles become
``concat:<a>|<b>``, remote items are passed through as URLs. A mounted ISO
replaces the image path with its mount point.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from stillframe.domain.enums import MediaProtocol
from stillframe.iso.interface import IsoMount

logger = logging.getLogger(__name__)


def get_playable_stream_files(root: Path, names: Sequence[str]) -> list[Path]:
    """Locate playable stream files below a disc root.

    Args:
        root: Disc folder or mount point.
        names: File names in playback order.

    Returns:
        Matching paths in the order of ``names``. Names with no match are
        skipped.
    """
    by_name: dict[str, Path] = {}
    for candidate in sorted(root.rglob("*")):
        if candidate.is_file():
            by_name.setdefault(candidate.name.casefold(), candidate)

    found: list[Path] = []
    for name in names:
        match = by_name.get(name.casefold())
        if match is None:
            logger.debug("Playable stream file %s not found under %s", name, root)
            continue
        found.append(match)
    return found


def get_input_argument(
    path: str,
    protocol: MediaProtocol,
    iso_mount: IsoMount | None = None,
    playable_stream_file_names: Sequence[str] | None = None,
) -> str:
    """Combine an item's location into one ffmpeg input argument.

    Args:
        path: Item path (file, folder or URL).
        protocol: Transport the tool must use.
        iso_mount: Mounted disc image, if the item was mounted.
        playable_stream_file_names: Ordered internal file names for
            multi-file disc structures.

    Returns:
        Input argument string.
    """
    if protocol != MediaProtocol.FILE:
        return path

    root = Path(iso_mount.mounted_path) if iso_mount is not None else Path(path)
    inputs = [root]
    if playable_stream_file_names:
        files = get_playable_stream_files(root, playable_stream_file_names)
        if files:
            inputs = files

    if len(inputs) > 1:
        return "concat:" + "|".join(str(p) for p in inputs)
    return f"file:{inputs[0]}"
