"""Item context for structured logging.

Provides context propagation using contextvars, so every log record emitted
while an item is being processed carries that item's path. Works across
asyncio tasks: each task sees the context it was created in.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_item_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "item_path", default=None
)


def set_item_context(item_path: str | None) -> None:
    """Set the item currently being processed."""
    _item_path.set(item_path)


def get_item_context() -> str | None:
    """Get the item currently being processed, or None."""
    return _item_path.get()


@contextmanager
def item_context(item_path: str) -> Generator[None, None, None]:
    """Context manager scoping log records to an item.

    Example:
        with item_context("/media/movie.mkv"):
            logger.info("Extracting")  # record.item_path == "/media/movie.mkv"
    """
    reset_token = _item_path.set(item_path)
    try:
        yield
    finally:
        _item_path.reset(reset_token)


class ItemContextFilter(logging.Filter):
    """Logging filter that injects the current item into log records.

    Adds item_path, and for text format a compact item_tag like
    "[movie.mkv] " (empty when no item is set).
    """

    def filter(self, record: logging.LogRecord) -> bool:
        item_path = get_item_context()
        record.item_path = item_path
        if item_path:
            name = item_path.rstrip("/").rsplit("/", 1)[-1] or item_path
            record.item_tag = f"[{name}] "
        else:
            record.item_tag = ""
        return True  # Never filter out records
