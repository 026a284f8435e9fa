"""Eligibility rules for frame extraction.

All functions here are pure: they only look at the MediaItem (and status
record) they are given.
"""

from __future__ import annotations

from datetime import timedelta

from stillframe.domain.enums import LocationType, MediaProtocol, VideoType
from stillframe.domain.models import MediaItem, MetadataStatus

# Seek position used when the runtime is unknown or untrustworthy
FALLBACK_IMAGE_OFFSET = timedelta(seconds=10)

# Fraction of the runtime to seek to when the runtime is known
IMAGE_OFFSET_RATIO = 0.1

_ONE_MICROSECOND = timedelta(microseconds=1)

MISSING_VIDEO_STREAM = "missing default video stream index"


def supports_extraction(item: MediaItem) -> bool:
    """Return True if frames can be grabbed from the item at all.

    Only real files on the local filesystem qualify: no remote or virtual
    items, no placeholders, shortcuts or archives.
    """
    return (
        item.location_type == LocationType.FILESYSTEM
        and not item.is_placeholder
        and not item.is_shortcut
        and not item.is_archive
    )


def has_changed_since_last_extraction(
    item: MediaItem, status: MetadataStatus
) -> bool:
    """Return True if the item was modified since images were last generated.

    No recorded timestamp means "not known to have changed" and yields False.
    Timestamps are compared for exact equality.
    """
    if status.item_date_modified is None:
        return False
    return status.item_date_modified != item.date_modified


def skip_reason(item: MediaItem) -> str | None:
    """Return why extraction is not applicable, or None if it is.

    Checked before any resource (mount, process) is touched.
    """
    if item.video_type == VideoType.HDDVD:
        return "HD-DVD media is not supported"
    if item.is_placeholder:
        return "item is a placeholder"
    if item.video_type == VideoType.ISO and item.iso_type is None:
        return "ISO type could not be determined"
    if item.default_video_stream_index is None:
        return MISSING_VIDEO_STREAM
    return None


def compute_image_offset(item: MediaItem) -> timedelta:
    """Return the position to grab a frame from.

    10% into the video when the runtime is known. DVD runtimes are not
    trusted, so DVDs (like items without a positive runtime) use a fixed
    10 second offset.
    """
    if (
        item.video_type != VideoType.DVD
        and item.runtime is not None
        and item.runtime > timedelta(0)
    ):
        micros = item.runtime / _ONE_MICROSECOND
        return timedelta(microseconds=round(micros * IMAGE_OFFSET_RATIO))
    return FALLBACK_IMAGE_OFFSET


def resolve_protocol(item: MediaItem) -> MediaProtocol:
    """Remote items are streamed over HTTP; everything else is read as a file."""
    if item.location_type == LocationType.REMOTE:
        return MediaProtocol.HTTP
    return MediaProtocol.FILE
