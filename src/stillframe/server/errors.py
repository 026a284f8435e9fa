"""JSON error responses for the HTTP API.

Every error body has ``error`` (human-readable) and ``code``
(machine-readable), plus optional ``details``.
"""

from __future__ import annotations

from typing import Any

from aiohttp import web

INVALID_REQUEST = "INVALID_REQUEST"
INVALID_PARAMETER = "INVALID_PARAMETER"
NOT_FOUND = "NOT_FOUND"
NO_IMAGE = "NO_IMAGE"
TOOL_UNAVAILABLE = "TOOL_UNAVAILABLE"
EXTRACTION_FAILED = "EXTRACTION_FAILED"
SHUTTING_DOWN = "SHUTTING_DOWN"


def api_error(
    message: str,
    *,
    code: str,
    status: int = 400,
    details: Any = None,
) -> web.Response:
    """Create a JSON error response.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (one of this module's constants).
        status: HTTP status code.
        details: Optional additional context.
    """
    body: dict[str, Any] = {"error": message, "code": code}
    if details is not None:
        body["details"] = details
    return web.json_response(body, status=status)
