"""Tests for item context propagation into log records."""

import asyncio
import logging

import pytest

from stillframe.logging.context import (
    ItemContextFilter,
    get_item_context,
    item_context,
    set_item_context,
)


def make_record() -> logging.LogRecord:
    return logging.LogRecord("stillframe.test", logging.INFO, "", 0, "msg", None, None)


class TestItemContext:
    """Tests for the item context variable."""

    def test_default_is_none(self):
        assert get_item_context() is None

    def test_context_manager_restores_previous(self):
        with item_context("/media/outer.mkv"):
            with item_context("/media/inner.mkv"):
                assert get_item_context() == "/media/inner.mkv"
            assert get_item_context() == "/media/outer.mkv"
        assert get_item_context() is None

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with item_context("/media/a.mkv"):
                raise RuntimeError("boom")
        assert get_item_context() is None

    @pytest.mark.asyncio
    async def test_tasks_do_not_share_context(self):
        seen = {}

        async def work(path):
            with item_context(path):
                await asyncio.sleep(0.01)
                seen[path] = get_item_context()

        await asyncio.gather(work("/a.mkv"), work("/b.mkv"))

        assert seen == {"/a.mkv": "/a.mkv", "/b.mkv": "/b.mkv"}


class TestItemContextFilter:
    """Tests for ItemContextFilter."""

    def test_without_item(self):
        record = make_record()
        assert ItemContextFilter().filter(record) is True
        assert record.item_path is None
        assert record.item_tag == ""

    def test_with_item(self):
        record = make_record()
        with item_context("/media/movies/Movie.mkv"):
            ItemContextFilter().filter(record)

        assert record.item_path == "/media/movies/Movie.mkv"
        assert record.item_tag == "[Movie.mkv] "

    def test_disc_folder_tag(self):
        record = make_record()
        set_item_context("/media/Film/VIDEO_TS/")
        try:
            ItemContextFilter().filter(record)
        finally:
            set_item_context(None)

        assert record.item_tag == "[VIDEO_TS] "
