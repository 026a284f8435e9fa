"""Build MediaItems for paths and URLs.

The resolver classifies the input, mounts ISO images long enough to find
the main title, and probes the result so image providers get a fully
described item.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import IsoType, LocationType, MediaProtocol, VideoType
from stillframe.domain.models import MediaItem
from stillframe.encoder.input_args import get_input_argument
from stillframe.introspector.interface import MediaIntrospector, ProbeInfo
from stillframe.introspector.paths import (
    PathClassification,
    classify_path,
    detect_3d_format,
    detect_iso_type,
    detect_iso_type_from_contents,
    find_playable_stream_files,
)
from stillframe.iso.manager import IsoManager

if TYPE_CHECKING:
    from stillframe.config.models import StillframeConfig

logger = logging.getLogger(__name__)

_ISO_CONTENT_TYPES: dict[IsoType, VideoType] = {
    IsoType.DVD: VideoType.DVD,
    IsoType.BLURAY: VideoType.BLURAY,
}


class MediaItemResolver:
    """Resolve a path or URL into a MediaItem."""

    def __init__(
        self,
        introspector: MediaIntrospector,
        iso_manager: IsoManager | None = None,
    ) -> None:
        self._introspector = introspector
        self._iso_manager = iso_manager

    async def resolve(
        self, path: str, token: CancellationToken | None = None
    ) -> MediaItem:
        """Describe the item at path.

        Placeholders, shortcuts, archives and HD-DVD folders are classified
        but not probed. ISO images are mounted only while they are inspected.

        Args:
            path: Filesystem path or URL.
            token: Cancellation token.

        Returns:
            The resolved MediaItem.

        Raises:
            FileNotFoundError: If a filesystem path does not exist.
            MediaIntrospectionError: If probing fails.
            IsoMountError: If an ISO image cannot be mounted.
            OperationCancelledError: If the token fires.
        """
        classification = classify_path(path)
        if classification.location_type == LocationType.FILESYSTEM:
            date_modified = await asyncio.to_thread(_modified_time, Path(path))
        else:
            date_modified = datetime.now(timezone.utc)

        base = {
            "path": path,
            "location_type": classification.location_type,
            "video_type": classification.video_type,
            "video_3d_format": detect_3d_format(path),
            "date_modified": date_modified,
            "is_placeholder": classification.is_placeholder,
            "is_shortcut": classification.is_shortcut,
            "is_archive": classification.is_archive,
        }

        if not self._should_probe(classification):
            logger.debug("Not probing %s", path)
            return MediaItem(**base)

        if classification.video_type == VideoType.ISO:
            return await self._resolve_iso(path, base, token)

        protocol = (
            MediaProtocol.HTTP
            if classification.location_type == LocationType.REMOTE
            else MediaProtocol.FILE
        )
        playable: list[str] = []
        if classification.video_type in (VideoType.DVD, VideoType.BLURAY):
            playable = await asyncio.to_thread(
                find_playable_stream_files, Path(path), classification.video_type
            )

        input_argument = await asyncio.to_thread(
            get_input_argument, path, protocol, None, playable
        )
        info = await self._introspector.probe(input_argument, token)
        return _with_probe(base, info, playable)

    @staticmethod
    def _should_probe(classification: PathClassification) -> bool:
        return not (
            classification.is_placeholder
            or classification.is_shortcut
            or classification.is_archive
            or classification.video_type == VideoType.HDDVD
        )

    async def _resolve_iso(
        self,
        path: str,
        base: dict,
        token: CancellationToken | None,
    ) -> MediaItem:
        iso_type = detect_iso_type(path)
        if self._iso_manager is None or not self._iso_manager.can_mount(path):
            logger.debug("No ISO mounter for %s, leaving it unprobed", path)
            return MediaItem(**base, iso_type=iso_type)

        iso_mount = await self._iso_manager.mount(path, token)
        try:
            root = Path(iso_mount.mounted_path)
            if iso_type is None:
                iso_type = await asyncio.to_thread(detect_iso_type_from_contents, root)
            if iso_type is None:
                logger.info("Could not determine the content type of %s", path)
                return MediaItem(**base)

            playable = await asyncio.to_thread(
                find_playable_stream_files, root, _ISO_CONTENT_TYPES[iso_type]
            )
            input_argument = await asyncio.to_thread(
                get_input_argument, path, MediaProtocol.FILE, iso_mount, playable
            )
            info = await self._introspector.probe(input_argument, token)
        finally:
            await iso_mount.release()

        return _with_probe(base, info, playable, iso_type=iso_type)


def _modified_time(path: Path) -> datetime:
    try:
        st_mtime = path.stat().st_mtime
    except FileNotFoundError:
        raise FileNotFoundError(f"Source not found: {path}") from None
    return datetime.fromtimestamp(st_mtime, tz=timezone.utc)


def _with_probe(
    base: dict,
    info: ProbeInfo,
    playable: list[str],
    iso_type: IsoType | None = None,
) -> MediaItem:
    return MediaItem(
        **base,
        iso_type=iso_type,
        runtime=info.runtime,
        default_video_stream_index=info.default_video_stream_index,
        playable_stream_file_names=tuple(playable),
    )


def build_resolver(
    config: StillframeConfig, iso_manager: IsoManager | None = None
) -> MediaItemResolver:
    """MediaItemResolver backed by ffprobe, configured from config."""
    from stillframe.introspector.ffprobe import FFprobeIntrospector

    return MediaItemResolver(
        FFprobeIntrospector(ffprobe_path=config.tools.ffprobe), iso_manager
    )
