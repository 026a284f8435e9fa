"""Domain enums for stillframe.

These enums describe how a video is stored and where it lives, and the kinds
and formats of images that providers can produce.
"""

from enum import Enum


class VideoType(Enum):
    """Storage medium of a video item."""

    VIDEO_FILE = "video_file"  # Plain container file (mkv, mp4, ...)
    ISO = "iso"  # Optical disc image, must be mounted before reading
    DVD = "dvd"  # VIDEO_TS folder structure
    BLURAY = "bluray"  # BDMV folder structure
    HDDVD = "hddvd"  # HVDVD_TS folder structure (unsupported for extraction)


class IsoType(Enum):
    """Content type of an ISO image."""

    DVD = "dvd"
    BLURAY = "bluray"


class LocationType(Enum):
    """Where an item's media lives."""

    FILESYSTEM = "filesystem"
    REMOTE = "remote"
    VIRTUAL = "virtual"
    OFFLINE = "offline"


class MediaProtocol(Enum):
    """Transport used by external tools to read an input."""

    FILE = "file"
    HTTP = "http"


class Video3DFormat(Enum):
    """Stereoscopic layout of a video stream."""

    HALF_SIDE_BY_SIDE = "hsbs"
    FULL_SIDE_BY_SIDE = "fsbs"
    HALF_TOP_AND_BOTTOM = "htab"
    FULL_TOP_AND_BOTTOM = "ftab"
    MVC = "mvc"


class ImageType(Enum):
    """Kind of image a provider can supply for an item."""

    PRIMARY = "primary"
    BACKDROP = "backdrop"
    THUMB = "thumb"


class ImageFormat(Enum):
    """Encoded image format."""

    JPG = "jpg"
    PNG = "png"
    WEBP = "webp"

    @property
    def mime_type(self) -> str:
        """MIME type for HTTP responses."""
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        """File extension including the leading dot."""
        return f".{self.value}"

    @classmethod
    def from_extension(cls, extension: str) -> "ImageFormat | None":
        """Map a file extension (with or without dot) to a format.

        Returns:
            Matching ImageFormat, or None for unknown extensions.
        """
        ext = extension.lower().lstrip(".")
        if ext == "jpeg":
            ext = "jpg"
        for fmt in cls:
            if fmt.value == ext:
                return fmt
        return None


_MIME_TYPES = {
    ImageFormat.JPG: "image/jpeg",
    ImageFormat.PNG: "image/png",
    ImageFormat.WEBP: "image/webp",
}
