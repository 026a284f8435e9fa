"""Local artwork: image files stored next to the video."""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path

from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import ImageFormat, ImageType, LocationType
from stillframe.domain.models import DynamicImageResponse, MediaItem
from stillframe.introspector.paths import DISC_FOLDERS

logger = logging.getLogger(__name__)

# Base names tried in order; "{stem}" is the video's file name without suffix
SIDECAR_NAMES: dict[ImageType, tuple[str, ...]] = {
    ImageType.PRIMARY: ("{stem}", "{stem}-poster", "poster", "folder", "cover"),
    ImageType.BACKDROP: ("{stem}-fanart", "fanart", "backdrop"),
}

SIDECAR_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


def _artwork_location(item: MediaItem) -> tuple[Path, str]:
    """Return the directory to search and the stem sidecars are named after."""
    path = Path(item.path)
    if path.is_dir():
        # Disc structures keep artwork beside VIDEO_TS/BDMV, not inside it
        if path.name.casefold() in DISC_FOLDERS:
            path = path.parent
        return path, path.name
    return path.parent, path.stem


def find_sidecar_image(item: MediaItem, image_type: ImageType) -> Path | None:
    """Find the first sidecar image for an item.

    Matching is case-insensitive. Returns None when nothing matches.
    """
    base_names = SIDECAR_NAMES.get(image_type)
    if not base_names:
        return None

    directory, stem = _artwork_location(item)
    try:
        files = {p.name.casefold(): p for p in directory.iterdir() if p.is_file()}
    except OSError as e:
        logger.debug("Cannot list %s: %s", directory, e)
        return None

    for base_name in base_names:
        base = base_name.format(stem=stem).casefold()
        for extension in SIDECAR_EXTENSIONS:
            match = files.get(base + extension)
            if match is not None:
                return match
    return None


class LocalImageProvider:
    """DynamicImageProvider returning artwork saved alongside the video."""

    name = "Local Artwork"

    order = 0

    def get_supported_images(self, item: MediaItem) -> list[ImageType]:
        return list(SIDECAR_NAMES)

    def supports(self, item: MediaItem) -> bool:
        return item.location_type == LocationType.FILESYSTEM and not item.is_placeholder

    async def get_image(
        self,
        item: MediaItem,
        image_type: ImageType,
        token: CancellationToken | None = None,
    ) -> DynamicImageResponse:
        if token is not None:
            token.raise_if_cancelled()

        image_path = find_sidecar_image(item, image_type)
        if image_path is None:
            return DynamicImageResponse.no_image()

        image_format = ImageFormat.from_extension(image_path.suffix)
        if image_format is None:
            return DynamicImageResponse.no_image()

        data = await asyncio.to_thread(image_path.read_bytes)
        logger.debug("Using local %s image %s", image_type.value, image_path)
        return DynamicImageResponse.with_image(image_format, io.BytesIO(data))
