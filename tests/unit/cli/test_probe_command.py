"""Tests for the probe CLI command."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from stillframe.cli import main
from stillframe.cli.exit_codes import ExitCode
from stillframe.cli.probe import describe_item, format_human
from stillframe.config.models import StillframeConfig
from stillframe.domain.enums import IsoType, LocationType, VideoType
from stillframe.iso.interface import IsoMountError


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("stillframe.cli._configure_logging"):
        yield


def invoke(args, item=None, resolve_error=None):
    resolver = MagicMock()
    resolver.resolve = AsyncMock(return_value=item, side_effect=resolve_error)
    with (
        patch("stillframe.cli.probe.build_iso_manager"),
        patch("stillframe.cli.probe.build_resolver", return_value=resolver),
    ):
        return CliRunner().invoke(
            main, ["probe", *args], obj={"config": StillframeConfig()}
        )


class TestDescribeItem:
    """Tests for describe_item."""

    def test_video_file(self, make_item):
        info = describe_item(make_item(runtime=timedelta(hours=1)))

        assert info["video_type"] == "video_file"
        assert info["runtime_seconds"] == 3600.0
        assert info["supported"] is True
        assert info["skip_reason"] is None
        assert info["image_offset_seconds"] == 360.0
        assert info["protocol"] == "file"
        assert info["input_argument"] == "file:/media/movies/Movie.mkv"

    def test_iso_has_no_input_argument(self, make_item):
        item = make_item(
            path="/media/Film.iso", video_type=VideoType.ISO, iso_type=IsoType.DVD
        )

        info = describe_item(item)

        assert info["iso_type"] == "dvd"
        assert info["input_argument"] is None

    def test_remote(self, make_item):
        url = "http://host/clip.mp4"
        info = describe_item(make_item(path=url, location_type=LocationType.REMOTE))

        assert info["supported"] is False
        assert info["protocol"] == "http"
        assert info["input_argument"] == url

    def test_skip_reason(self, make_item):
        info = describe_item(make_item(default_video_stream_index=None))
        assert info["skip_reason"] == "missing default video stream index"

    def test_format_human(self, make_item):
        text = format_human(describe_item(make_item()))

        assert "video type" in text
        assert "playable stream files" in text
        assert "-" in text


class TestProbeCommand:
    """Tests for `stillframe probe`."""

    def test_json_output(self, make_item):
        result = invoke(["/media/movies/Movie.mkv", "--json"], make_item())

        assert result.exit_code == ExitCode.SUCCESS
        data = json.loads(result.output)
        assert data["path"] == "/media/movies/Movie.mkv"
        assert data["default_video_stream_index"] == 0

    def test_human_output(self, make_item):
        result = invoke(["/media/movies/Movie.mkv"], make_item())

        assert result.exit_code == ExitCode.SUCCESS
        assert "image offset seconds" in result.output

    def test_not_found(self):
        result = invoke(["/missing.mkv"], resolve_error=FileNotFoundError("x"))

        assert result.exit_code == ExitCode.SOURCE_NOT_FOUND

    def test_mount_failure(self):
        result = invoke(["/media/a.iso"], resolve_error=IsoMountError("no fuse"))

        assert result.exit_code == ExitCode.EXTRACTION_FAILED
        assert "no fuse" in result.output
