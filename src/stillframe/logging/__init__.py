"""Structured logging module for stillframe.

Provides configurable logging with JSON format support and file rotation.
Log records carry the item being processed.
"""

from stillframe.logging.config import configure_logging
from stillframe.logging.context import (
    ItemContextFilter,
    get_item_context,
    item_context,
    set_item_context,
)
from stillframe.logging.handlers import JSONFormatter

__all__ = [
    "ItemContextFilter",
    "JSONFormatter",
    "configure_logging",
    "get_item_context",
    "item_context",
    "set_item_context",
]
