"""Shared test fixtures for stillframe."""

import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone
from io import BytesIO
from pathlib import Path
from unittest.mock import patch

import pytest

from stillframe.config.loader import clear_config_cache
from stillframe.domain.enums import LocationType, VideoType
from stillframe.domain.models import MediaItem


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test isolation."""
    dir_path = tempfile.mkdtemp()
    yield Path(dir_path)
    shutil.rmtree(dir_path, ignore_errors=True)


@pytest.fixture
def movie_file(temp_dir: Path) -> Path:
    """An (empty) video file on disk."""
    path = temp_dir / "Movie.mkv"
    path.write_bytes(b"\x1a\x45\xdf\xa3")
    return path


@pytest.fixture
def dvd_folder(temp_dir: Path) -> Path:
    """A DVD folder with two title sets; title set 2 is the main title."""
    root = temp_dir / "Film"
    video_ts = root / "VIDEO_TS"
    video_ts.mkdir(parents=True)
    (video_ts / "VIDEO_TS.VOB").write_bytes(b"m" * 10)
    (video_ts / "VTS_01_0.VOB").write_bytes(b"m" * 10)
    (video_ts / "VTS_01_1.VOB").write_bytes(b"x" * 100)
    (video_ts / "VTS_02_0.VOB").write_bytes(b"m" * 10)
    (video_ts / "VTS_02_1.VOB").write_bytes(b"x" * 300)
    (video_ts / "VTS_02_2.VOB").write_bytes(b"x" * 300)
    return root


@pytest.fixture
def bluray_folder(temp_dir: Path) -> Path:
    """A Blu-ray folder whose largest stream is 00001.m2ts."""
    root = temp_dir / "Epic"
    stream = root / "BDMV" / "STREAM"
    stream.mkdir(parents=True)
    (stream / "00000.m2ts").write_bytes(b"x" * 50)
    (stream / "00001.m2ts").write_bytes(b"x" * 500)
    (stream / "00002.m2ts").write_bytes(b"x" * 20)
    return root


@pytest.fixture
def make_item():
    """Factory for MediaItems with sensible defaults."""

    def _make(**kwargs) -> MediaItem:
        defaults = {
            "path": "/media/movies/Movie.mkv",
            "location_type": LocationType.FILESYSTEM,
            "video_type": VideoType.VIDEO_FILE,
            "runtime": timedelta(hours=1),
            "default_video_stream_index": 0,
            "date_modified": datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        }
        defaults.update(kwargs)
        return MediaItem(**defaults)

    return _make


@pytest.fixture
def jpeg_bytes() -> bytes:
    """Minimal JPEG-looking payload."""
    return b"\xff\xd8\xff\xe0" + b"\x00" * 16 + b"\xff\xd9"


@pytest.fixture
def jpeg_stream(jpeg_bytes: bytes) -> BytesIO:
    return BytesIO(jpeg_bytes)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path):
    """Point stillframe at a config file that does not exist.

    Keeps the developer's ~/.stillframe/config.toml and STILLFRAME_*
    variables out of every test.
    """
    env = {
        key: value
        for key, value in os.environ.items()
        if not key.startswith("STILLFRAME_")
    }
    env["STILLFRAME_CONFIG_PATH"] = str(temp_dir / "no-such-config.toml")
    clear_config_cache()
    with patch.dict(os.environ, env, clear=True):
        yield
    clear_config_cache()
