"""Tests for ffmpeg command construction."""

from datetime import timedelta
from pathlib import Path

import pytest

from stillframe.domain.enums import MediaProtocol, Video3DFormat
from stillframe.encoder.ffmpeg import (
    USER_AGENT,
    build_extract_command,
    build_video_filter,
    format_offset,
)

FFMPEG = Path("/usr/bin/ffmpeg")


class TestFormatOffset:
    """Tests for format_offset."""

    @pytest.mark.parametrize(
        ("offset", "expected"),
        [
            (timedelta(seconds=360), "360.000"),
            (timedelta(seconds=10), "10.000"),
            (timedelta(milliseconds=1500), "1.500"),
            (timedelta(0), "0.000"),
        ],
    )
    def test_formats_seconds(self, offset, expected):
        assert format_offset(offset) == expected


class TestBuildVideoFilter:
    """Tests for build_video_filter."""

    def test_plain_scale_keeps_aspect_with_even_height(self):
        assert build_video_filter(600, None) == "scale=600:trunc(600/dar/2)*2"

    def test_half_side_by_side_crops_left_eye_first(self):
        vf = build_video_filter(600, Video3DFormat.HALF_SIDE_BY_SIDE)
        assert vf.startswith("crop=iw/2:ih:0:0,scale=iw*2:ih")
        assert vf.endswith("scale=600:trunc(600/dar/2)*2")

    def test_full_top_and_bottom_crops_top_eye(self):
        vf = build_video_filter(320, Video3DFormat.FULL_TOP_AND_BOTTOM)
        assert vf.startswith("crop=iw:ih/2:0:0")

    def test_mvc_needs_no_prefilter(self):
        assert build_video_filter(600, Video3DFormat.MVC) == (
            "scale=600:trunc(600/dar/2)*2"
        )


class TestBuildExtractCommand:
    """Tests for build_extract_command."""

    def test_file_input(self):
        cmd = build_extract_command(
            FFMPEG,
            "file:/media/Movie.mkv",
            MediaProtocol.FILE,
            None,
            timedelta(seconds=360),
            600,
        )

        assert cmd[0] == str(FFMPEG)
        assert "-user_agent" not in cmd
        # Seek before -i (input seeking)
        assert cmd.index("-ss") < cmd.index("-i")
        assert cmd[cmd.index("-ss") + 1] == "360.000"
        assert cmd[cmd.index("-i") + 1] == "file:/media/Movie.mkv"
        assert cmd[cmd.index("-vframes") + 1] == "1"
        assert cmd[cmd.index("-f") + 1] == "image2pipe"
        assert cmd[cmd.index("-vcodec") + 1] == "mjpeg"
        assert cmd[-1] == "pipe:1"

    def test_http_input_sends_user_agent(self):
        cmd = build_extract_command(
            FFMPEG,
            "http://host/clip.mp4",
            MediaProtocol.HTTP,
            None,
            timedelta(seconds=10),
            600,
        )

        assert cmd[cmd.index("-user_agent") + 1] == USER_AGENT

    def test_zero_offset_skips_seek(self):
        cmd = build_extract_command(
            FFMPEG, "file:/a.mkv", MediaProtocol.FILE, None, timedelta(0), 600
        )

        assert "-ss" not in cmd

    def test_3d_filter_is_used(self):
        cmd = build_extract_command(
            FFMPEG,
            "file:/a.3D.HSBS.mkv",
            MediaProtocol.FILE,
            Video3DFormat.HALF_SIDE_BY_SIDE,
            timedelta(seconds=10),
            600,
        )

        assert cmd[cmd.index("-vf") + 1] == build_video_filter(
            600, Video3DFormat.HALF_SIDE_BY_SIDE
        )
