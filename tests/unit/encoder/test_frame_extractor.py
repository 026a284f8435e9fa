"""Tests for FFmpegFrameExtractor (subprocess calls mocked)."""

import asyncio
from datetime import timedelta
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from stillframe.core.cancellation import CancellationToken, OperationCancelledError
from stillframe.domain.enums import MediaProtocol
from stillframe.encoder.ffmpeg import FFmpegFrameExtractor
from stillframe.encoder.interface import FrameExtractionError, FrameExtractor
from stillframe.tools.detection import ToolNotFoundError


@pytest.fixture
def extractor() -> FFmpegFrameExtractor:
    extractor = FFmpegFrameExtractor(image_width=320, timeout=7)
    extractor._tool_path = Path("/usr/bin/ffmpeg")
    return extractor


async def extract(extractor, token=None):
    return await extractor.extract_video_image(
        "file:/media/Movie.mkv",
        MediaProtocol.FILE,
        None,
        timedelta(seconds=360),
        token,
    )


class TestFFmpegFrameExtractor:
    """Tests for FFmpegFrameExtractor.extract_video_image."""

    def test_satisfies_protocol(self, extractor):
        assert isinstance(extractor, FrameExtractor)

    @pytest.mark.asyncio
    async def test_returns_stdout_as_stream(self, extractor, jpeg_bytes):
        token = CancellationToken()
        with patch(
            "stillframe.encoder.ffmpeg.run_command",
            new=AsyncMock(return_value=(jpeg_bytes, "", 0)),
        ) as mock_run:
            stream = await extract(extractor, token)

        assert stream.read() == jpeg_bytes
        cmd = mock_run.await_args.args[0]
        assert cmd[0] == "/usr/bin/ffmpeg"
        assert "scale=320:trunc(320/dar/2)*2" in cmd
        assert mock_run.await_args.kwargs == {"token": token, "timeout": 7}

    @pytest.mark.asyncio
    async def test_non_zero_exit_raises(self, extractor):
        stderr = "line1\nline2\nInvalid data found when processing input\n"
        with patch(
            "stillframe.encoder.ffmpeg.run_command",
            new=AsyncMock(return_value=(b"", stderr, 1)),
        ):
            with pytest.raises(FrameExtractionError, match="Invalid data") as exc:
                await extract(extractor)

        assert exc.value.returncode == 1

    @pytest.mark.asyncio
    async def test_empty_output_raises(self, extractor):
        with patch(
            "stillframe.encoder.ffmpeg.run_command",
            new=AsyncMock(return_value=(b"", "", 0)),
        ):
            with pytest.raises(FrameExtractionError, match="no image"):
                await extract(extractor)

    @pytest.mark.asyncio
    async def test_timeout_raises_extraction_error(self, extractor):
        with patch(
            "stillframe.encoder.ffmpeg.run_command",
            new=AsyncMock(side_effect=asyncio.TimeoutError),
        ):
            with pytest.raises(FrameExtractionError, match="timed out"):
                await extract(extractor)

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self, extractor):
        with patch(
            "stillframe.encoder.ffmpeg.run_command",
            new=AsyncMock(side_effect=OperationCancelledError("stop")),
        ):
            with pytest.raises(OperationCancelledError):
                await extract(extractor)

    @pytest.mark.asyncio
    async def test_missing_ffmpeg(self):
        extractor = FFmpegFrameExtractor()
        with patch("stillframe.tools.detection.shutil.which", return_value=None):
            with pytest.raises(ToolNotFoundError):
                await extract(extractor)

    def test_defaults(self):
        extractor = FFmpegFrameExtractor()
        assert extractor._image_width == FFmpegFrameExtractor.DEFAULT_IMAGE_WIDTH
        assert extractor._timeout == FFmpegFrameExtractor.DEFAULT_TIMEOUT
