"""Image provider registry and fetch pipeline.

The registry tracks DynamicImageProviders by name and asks them for an
image in ascending order until one delivers.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import ImageType
from stillframe.domain.models import DynamicImageResponse, MediaItem, MetadataStatus
from stillframe.providers.interfaces import (
    DynamicImageProvider,
    HasItemChangeMonitor,
    HasOrder,
)

if TYPE_CHECKING:
    from stillframe.config.models import StillframeConfig
    from stillframe.iso.manager import IsoManager

logger = logging.getLogger(__name__)


def provider_order(provider: DynamicImageProvider) -> int:
    """Pipeline position of a provider; 0 when it does not declare one."""
    if isinstance(provider, HasOrder):
        return provider.order
    return 0


@dataclass
class ProviderFailure:
    """A provider that raised while fetching an image."""

    provider: str
    error: str
    error_type: str


@dataclass
class ImageFetchResult:
    """Outcome of running the provider pipeline for one item."""

    response: DynamicImageResponse = field(
        default_factory=DynamicImageResponse.no_image
    )
    # Name of the provider that supplied the image
    provider: str | None = None
    # Providers asked, in order
    attempted: list[str] = field(default_factory=list)
    failures: list[ProviderFailure] = field(default_factory=list)

    @property
    def has_image(self) -> bool:
        return self.response.has_image


class ImageProviderRegistry:
    """Central registry of image providers."""

    def __init__(self, providers: list[DynamicImageProvider] | None = None) -> None:
        self._providers: dict[str, DynamicImageProvider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: DynamicImageProvider) -> None:
        """Register a provider.

        A provider whose name is already registered is skipped with a
        warning; the first registration wins.
        """
        if provider.name in self._providers:
            logger.warning(
                "Image provider '%s' already registered. Skipping duplicate.",
                provider.name,
            )
            return

        self._providers[provider.name] = provider
        logger.debug(
            "Registered image provider: %s (order %d)",
            provider.name,
            provider_order(provider),
        )

    def unregister(self, name: str) -> bool:
        """Unregister a provider by name.

        Returns:
            True if the provider was removed, False if it was not registered.
        """
        if name in self._providers:
            del self._providers[name]
            logger.debug("Unregistered image provider: %s", name)
            return True
        return False

    def get(self, name: str) -> DynamicImageProvider | None:
        return self._providers.get(name)

    def get_all(self) -> list[DynamicImageProvider]:
        """All providers in pipeline order (stable for equal orders)."""
        return sorted(self._providers.values(), key=provider_order)

    def get_providers(
        self, item: MediaItem, image_type: ImageType
    ) -> list[DynamicImageProvider]:
        """Providers that apply to the item and can produce image_type, in order."""
        return [
            provider
            for provider in self.get_all()
            if provider.supports(item)
            and image_type in provider.get_supported_images(item)
        ]

    async def fetch_image(
        self,
        item: MediaItem,
        image_type: ImageType = ImageType.PRIMARY,
        token: CancellationToken | None = None,
        provider_name: str | None = None,
    ) -> ImageFetchResult:
        """Ask providers for an image until one delivers.

        A provider that raises is logged and recorded, and the next one is
        tried. Cancellation is never caught.

        Args:
            item: Item to find an image for.
            image_type: Kind of image wanted.
            token: Cancellation token passed to each provider.
            provider_name: Restrict the pipeline to this provider.

        Returns:
            ImageFetchResult; its response has no image when no provider
            delivered.
        """
        result = ImageFetchResult()
        providers = self.get_providers(item, image_type)
        if provider_name is not None:
            providers = [p for p in providers if p.name == provider_name]

        for provider in providers:
            if token is not None:
                token.raise_if_cancelled()

            result.attempted.append(provider.name)
            try:
                response = await provider.get_image(item, image_type, token)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(
                    "Image provider %s failed for %s: %s",
                    provider.name,
                    item.path,
                    e,
                    exc_info=True,
                )
                result.failures.append(
                    ProviderFailure(
                        provider=provider.name,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                )
                continue

            if response.has_image:
                logger.info(
                    "Got %s image for %s from %s",
                    image_type.value,
                    item.path,
                    provider.name,
                )
                result.response = response
                result.provider = provider.name
                return result

        return result

    def has_changed(self, item: MediaItem, status: MetadataStatus) -> bool:
        """Return True if any change-monitoring provider reports a change."""
        return any(
            provider.has_changed(item, status)
            for provider in self.get_all()
            if isinstance(provider, HasItemChangeMonitor) and provider.supports(item)
        )


def build_iso_manager(config: StillframeConfig) -> IsoManager:
    """IsoManager with the fuseiso mounter configured from config."""
    from stillframe.iso.fuseiso import FuseIsoMounter
    from stillframe.iso.manager import IsoManager

    return IsoManager(
        [
            FuseIsoMounter(
                mount_root=config.extraction.mount_root,
                fuseiso_path=config.tools.fuseiso,
                fusermount_path=config.tools.fusermount,
                timeout=config.extraction.mount_timeout_seconds,
            )
        ]
    )


def get_default_registry(
    config: StillframeConfig, iso_manager: IsoManager | None = None
) -> ImageProviderRegistry:
    """Build the stock pipeline: local artwork, then the screen grabber."""
    from stillframe.encoder.ffmpeg import FFmpegFrameExtractor
    from stillframe.providers.local_image import LocalImageProvider
    from stillframe.providers.video_image import VideoImageProvider

    extractor = FFmpegFrameExtractor(
        ffmpeg_path=config.tools.ffmpeg,
        image_width=config.extraction.image_width,
        timeout=config.extraction.timeout_seconds,
    )
    return ImageProviderRegistry(
        [
            LocalImageProvider(),
            VideoImageProvider(iso_manager or build_iso_manager(config), extractor),
        ]
    )
