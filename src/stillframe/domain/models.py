"""Domain models for stillframe.

These models represent the video items handed to image providers and the
responses providers give back. They are independent of how items were
discovered (CLI, daemon, or an embedding application).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO

from stillframe.domain.enums import (
    ImageFormat,
    IsoType,
    LocationType,
    Video3DFormat,
    VideoType,
)


@dataclass(frozen=True)
class MediaItem:
    """A video asset as seen by image providers (read-only)."""

    # Filesystem path, folder path for disc structures, or URL for remote items
    path: str
    location_type: LocationType = LocationType.FILESYSTEM
    video_type: VideoType = VideoType.VIDEO_FILE
    # Only meaningful for VideoType.ISO; None when it could not be determined
    iso_type: IsoType | None = None
    runtime: timedelta | None = None
    # Index of the primary video stream within the container, None if unknown
    default_video_stream_index: int | None = None
    video_3d_format: Video3DFormat | None = None
    date_modified: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    # Ordered file names making up the main title of a disc structure
    playable_stream_file_names: tuple[str, ...] = ()
    is_placeholder: bool = False
    is_shortcut: bool = False
    is_archive: bool = False

    @property
    def name(self) -> str:
        """Display name derived from the path."""
        if self.location_type == LocationType.REMOTE:
            return self.path.rstrip("/").rsplit("/", 1)[-1] or self.path
        return Path(self.path).name


@dataclass(frozen=True)
class MetadataStatus:
    """What was recorded the last time images were generated for an item."""

    item_date_modified: datetime | None = None


@dataclass(frozen=True)
class DynamicImageResponse:
    """Result of asking a provider for an image.

    has_image is True exactly when both format and stream are set.
    """

    has_image: bool = False
    format: ImageFormat | None = None
    stream: BinaryIO | None = None

    def __post_init__(self) -> None:
        """Validate the has_image invariant."""
        populated = self.format is not None and self.stream is not None
        if self.has_image != populated:
            raise ValueError(
                "has_image must be True if and only if format and stream are set"
            )

    @classmethod
    def no_image(cls) -> DynamicImageResponse:
        """Response for items the provider cannot produce an image for."""
        return cls(has_image=False)

    @classmethod
    def with_image(cls, fmt: ImageFormat, stream: BinaryIO) -> DynamicImageResponse:
        """Response carrying an encoded image."""
        return cls(has_image=True, format=fmt, stream=stream)
