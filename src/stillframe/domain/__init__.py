"""Domain types shared across stillframe modules."""

from stillframe.domain.enums import (
    ImageFormat,
    ImageType,
    IsoType,
    LocationType,
    MediaProtocol,
    Video3DFormat,
    VideoType,
)
from stillframe.domain.models import (
    DynamicImageResponse,
    MediaItem,
    MetadataStatus,
)

__all__ = [
    # Enums
    "ImageFormat",
    "ImageType",
    "IsoType",
    "LocationType",
    "MediaProtocol",
    "Video3DFormat",
    "VideoType",
    # Models
    "DynamicImageResponse",
    "MediaItem",
    "MetadataStatus",
]
