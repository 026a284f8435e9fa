"""External tool detection."""

from stillframe.tools.detection import (
    TOOL_HINTS,
    ToolNotFoundError,
    check_tool_availability,
    find_tool,
    require_tool,
)

__all__ = [
    "TOOL_HINTS",
    "ToolNotFoundError",
    "check_tool_availability",
    "find_tool",
    "require_tool",
]
