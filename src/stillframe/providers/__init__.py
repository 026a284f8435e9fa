"""Image providers and the pipeline that runs them."""

from stillframe.providers.eligibility import (
    compute_image_offset,
    has_changed_since_last_extraction,
    resolve_protocol,
    skip_reason,
    supports_extraction,
)
from stillframe.providers.interfaces import (
    DynamicImageProvider,
    HasItemChangeMonitor,
    HasOrder,
)
from stillframe.providers.local_image import LocalImageProvider
from stillframe.providers.registry import (
    ImageFetchResult,
    ImageProviderRegistry,
    ProviderFailure,
    build_iso_manager,
    get_default_registry,
)
from stillframe.providers.video_image import VideoImageProvider

__all__ = [
    "DynamicImageProvider",
    "HasItemChangeMonitor",
    "HasOrder",
    "ImageFetchResult",
    "ImageProviderRegistry",
    "LocalImageProvider",
    "ProviderFailure",
    "VideoImageProvider",
    "build_iso_manager",
    "compute_image_offset",
    "get_default_registry",
    "has_changed_since_last_extraction",
    "resolve_protocol",
    "skip_reason",
    "supports_extraction",
]
