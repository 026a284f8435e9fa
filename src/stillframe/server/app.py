"""HTTP application for daemon mode.

Routes:
    GET /health        liveness and version
    GET /api/image     resolve an item and return its image bytes
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from aiohttp import web

from stillframe import __version__
from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import ImageType
from stillframe.introspector.interface import MediaIntrospectionError
from stillframe.iso.interface import IsoMountError
from stillframe.server.errors import (
    EXTRACTION_FAILED,
    INVALID_PARAMETER,
    INVALID_REQUEST,
    NO_IMAGE,
    NOT_FOUND,
    SHUTTING_DOWN,
    TOOL_UNAVAILABLE,
    api_error,
)
from stillframe.server.lifecycle import DaemonLifecycle
from stillframe.tools.detection import ToolNotFoundError

if TYPE_CHECKING:
    from stillframe.introspector.resolver import MediaItemResolver
    from stillframe.providers.registry import ImageProviderRegistry

logger = logging.getLogger(__name__)


async def health_handler(request: web.Request) -> web.Response:
    """Handle GET /health.

    Returns 200 with status "ok" while running, 503 once shutdown started.
    """
    lifecycle: DaemonLifecycle = request.app["lifecycle"]
    shutting_down = lifecycle.is_shutting_down
    body = {
        "status": "shutting_down" if shutting_down else "ok",
        "version": __version__,
        "uptime_seconds": round(lifecycle.uptime_seconds, 1),
        "active_requests": lifecycle.active_requests,
    }
    return web.json_response(body, status=503 if shutting_down else 200)


def _parse_image_type(value: str) -> ImageType | None:
    try:
        return ImageType(value.casefold())
    except ValueError:
        return None


async def image_handler(request: web.Request) -> web.Response:
    """Handle GET /api/image?path=...&type=primary[&provider=NAME].

    Responds with the image bytes, its MIME type and an X-Image-Provider
    header naming the provider that delivered it.
    """
    lifecycle: DaemonLifecycle = request.app["lifecycle"]
    if lifecycle.is_shutting_down:
        return api_error("Daemon is shutting down", code=SHUTTING_DOWN, status=503)

    path = request.query.get("path", "").strip()
    if not path:
        return api_error("Query parameter 'path' is required", code=INVALID_REQUEST)

    image_type = _parse_image_type(request.query.get("type", "primary"))
    if image_type is None:
        return api_error(
            "Invalid image type",
            code=INVALID_PARAMETER,
            details={"allowed": [t.value for t in ImageType]},
        )
    provider_name = request.query.get("provider") or None

    resolver: MediaItemResolver = request.app["resolver"]
    registry: ImageProviderRegistry = request.app["registry"]

    if provider_name is not None and registry.get(provider_name) is None:
        return api_error(
            f"Unknown provider: {provider_name}",
            code=INVALID_PARAMETER,
            details={"providers": [p.name for p in registry.get_all()]},
        )

    token = CancellationToken()
    lifecycle.track(token)
    try:
        try:
            item = await resolver.resolve(path, token)
        except FileNotFoundError:
            return api_error(f"Source not found: {path}", code=NOT_FOUND, status=404)
        except ToolNotFoundError as e:
            logger.error("Cannot resolve %s: %s", path, e)
            return api_error(str(e), code=TOOL_UNAVAILABLE, status=500)
        except (MediaIntrospectionError, IsoMountError) as e:
            logger.error("Cannot resolve %s: %s", path, e)
            return api_error(str(e), code=EXTRACTION_FAILED, status=500)

        result = await registry.fetch_image(item, image_type, token, provider_name)
    finally:
        lifecycle.untrack(token)

    response = result.response
    if not response.has_image or response.stream is None or response.format is None:
        if result.failures:
            return api_error(
                "Image extraction failed",
                code=EXTRACTION_FAILED,
                status=500,
                details=[
                    {"provider": f.provider, "error": f.error, "type": f.error_type}
                    for f in result.failures
                ],
            )
        return api_error(
            f"No {image_type.value} image available for {path}",
            code=NO_IMAGE,
            status=404,
        )

    return web.Response(
        body=response.stream.read(),
        content_type=response.format.mime_type,
        headers={"X-Image-Provider": result.provider or ""},
    )


def create_app(
    resolver: MediaItemResolver,
    registry: ImageProviderRegistry,
    lifecycle: DaemonLifecycle | None = None,
) -> web.Application:
    """Create and configure the aiohttp Application.

    Args:
        resolver: Builds MediaItems for requested paths.
        registry: Provider pipeline that produces the images.
        lifecycle: Shared daemon state. A fresh one is created if omitted.

    Returns:
        Configured aiohttp Application instance.
    """
    app = web.Application()
    app["resolver"] = resolver
    app["registry"] = registry
    app["lifecycle"] = lifecycle or DaemonLifecycle()

    app.router.add_get("/health", health_handler)
    app.router.add_get("/api/image", image_handler)
    return app
