"""Image provider protocols.

Providers are plain classes that satisfy these protocols structurally; there
is no base class to inherit from. The registry checks optional capabilities
(ordering, change monitoring) with isinstance() against the runtime-checkable
protocols.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import ImageType
from stillframe.domain.models import DynamicImageResponse, MediaItem, MetadataStatus


@runtime_checkable
class DynamicImageProvider(Protocol):
    """Protocol for providers that generate or locate images on demand.

    Required attributes (can be class attributes or properties):
        name: str - Unique, human-readable provider name
    """

    name: str

    def get_supported_images(self, item: MediaItem) -> list[ImageType]:
        """Image kinds this provider can produce for the item."""
        ...

    def supports(self, item: MediaItem) -> bool:
        """Return True if the provider applies to the item at all.

        Must be side-effect free.
        """
        ...

    async def get_image(
        self,
        item: MediaItem,
        image_type: ImageType,
        token: CancellationToken | None = None,
    ) -> DynamicImageResponse:
        """Produce an image.

        Returns:
            DynamicImageResponse; has_image is False when the provider has
            nothing to offer for this item (not an error).
        """
        ...


@runtime_checkable
class HasOrder(Protocol):
    """Providers with an explicit position in the pipeline.

    Lower values run first. Providers without an order run at 0.
    """

    order: int


@runtime_checkable
class HasItemChangeMonitor(Protocol):
    """Providers able to tell whether an item changed since images were made."""

    def has_changed(self, item: MediaItem, status: MetadataStatus) -> bool:
        """Return True if the item changed since ``status`` was recorded."""
        ...
