"""Screen grabber: thumbnails extracted from the video itself.

Used as a fallback when no artwork is available from other providers. The
provider mounts ISO images when needed, picks a seek position, resolves the
ffmpeg input and grabs a single JPEG frame. Any mount is released before
get_image() returns or raises.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import ImageFormat, ImageType, VideoType
from stillframe.domain.models import DynamicImageResponse, MediaItem, MetadataStatus
from stillframe.encoder.input_args import get_input_argument
from stillframe.encoder.interface import FrameExtractor
from stillframe.iso.interface import IsoMount
from stillframe.iso.manager import IsoManager
from stillframe.logging.context import item_context
from stillframe.providers.eligibility import (
    MISSING_VIDEO_STREAM,
    compute_image_offset,
    has_changed_since_last_extraction,
    resolve_protocol,
    skip_reason,
    supports_extraction,
)

logger = logging.getLogger(__name__)


class VideoImageProvider:
    """DynamicImageProvider that grabs a frame with the frame extractor."""

    name = "Screen Grabber"

    # Runs after internet and local artwork providers
    order = 100

    def __init__(
        self, iso_manager: IsoManager, frame_extractor: FrameExtractor
    ) -> None:
        self._iso_manager = iso_manager
        self._frame_extractor = frame_extractor

    def get_supported_images(self, item: MediaItem) -> list[ImageType]:
        return [ImageType.PRIMARY]

    def supports(self, item: MediaItem) -> bool:
        return supports_extraction(item)

    def has_changed(self, item: MediaItem, status: MetadataStatus) -> bool:
        return has_changed_since_last_extraction(item, status)

    async def get_image(
        self,
        item: MediaItem,
        image_type: ImageType,
        token: CancellationToken | None = None,
    ) -> DynamicImageResponse:
        """Grab a frame unless the item is not applicable.

        Not-applicable items (HD-DVD, placeholders, ISOs of unknown type,
        no video stream) yield a response without an image; nothing is
        mounted or executed for them.
        """
        reason = skip_reason(item)
        if reason is not None:
            if reason == MISSING_VIDEO_STREAM:
                logger.info(
                    "Skipping image extraction due to missing default video "
                    "stream index for %s.",
                    item.path or "",
                )
            else:
                logger.debug(
                    "Skipping image extraction for %s: %s", item.path, reason
                )
            return DynamicImageResponse.no_image()

        return await self.get_video_image(item, token)

    async def get_video_image(
        self, item: MediaItem, token: CancellationToken | None = None
    ) -> DynamicImageResponse:
        """Mount (if needed), extract and package a frame.

        Raises:
            IsoMountError: If the ISO cannot be mounted.
            FrameExtractionError: If the extractor fails.
            OperationCancelledError: If the token fires.
        """
        with item_context(item.path):
            async with self._mount_iso_if_needed(item, token) as iso_mount:
                offset = compute_image_offset(item)
                protocol = resolve_protocol(item)
                # Walks the disc tree, possibly on a FUSE mount
                input_argument = await asyncio.to_thread(
                    get_input_argument,
                    item.path,
                    protocol,
                    iso_mount,
                    item.playable_stream_file_names,
                )

                stream = await self._frame_extractor.extract_video_image(
                    input_argument,
                    protocol,
                    item.video_3d_format,
                    offset,
                    token,
                )

        return DynamicImageResponse.with_image(ImageFormat.JPG, stream)

    @asynccontextmanager
    async def _mount_iso_if_needed(
        self, item: MediaItem, token: CancellationToken | None
    ) -> AsyncIterator[IsoMount | None]:
        """Yield a mount for ISO items, None for everything else.

        The mount is released exactly once when the block exits, whether it
        completes, raises or is cancelled.
        """
        if item.video_type != VideoType.ISO:
            yield None
            return

        iso_mount = await self._iso_manager.mount(item.path, token)
        try:
            yield iso_mount
        finally:
            await iso_mount.release()
