"""Tests for ffmpeg input argument resolution."""

from pathlib import Path

from stillframe.domain.enums import MediaProtocol
from stillframe.encoder.input_args import get_input_argument, get_playable_stream_files


class FakeMount:
    def __init__(self, iso_path: Path, mounted_path: Path) -> None:
        self.iso_path = iso_path
        self.mounted_path = mounted_path

    async def release(self) -> None:
        pass


class TestGetPlayableStreamFiles:
    """Tests for get_playable_stream_files."""

    def test_returns_paths_in_requested_order(self, dvd_folder: Path):
        files = get_playable_stream_files(
            dvd_folder, ["VTS_02_2.VOB", "VTS_02_1.VOB"]
        )

        assert [f.name for f in files] == ["VTS_02_2.VOB", "VTS_02_1.VOB"]

    def test_matches_case_insensitively(self, dvd_folder: Path):
        files = get_playable_stream_files(dvd_folder, ["vts_02_1.vob"])

        assert files == [dvd_folder / "VIDEO_TS" / "VTS_02_1.VOB"]

    def test_skips_missing_names(self, dvd_folder: Path):
        files = get_playable_stream_files(dvd_folder, ["VTS_09_1.VOB"])

        assert files == []


class TestGetInputArgument:
    """Tests for get_input_argument."""

    def test_plain_file(self):
        arg = get_input_argument("/media/Movie.mkv", MediaProtocol.FILE)

        assert arg == "file:/media/Movie.mkv"

    def test_remote_url_passes_through(self):
        url = "http://host/videos/clip.mp4"

        assert get_input_argument(url, MediaProtocol.HTTP) == url

    def test_multi_part_disc_title_is_concatenated(self, dvd_folder: Path):
        arg = get_input_argument(
            str(dvd_folder),
            MediaProtocol.FILE,
            None,
            ["VTS_02_1.VOB", "VTS_02_2.VOB"],
        )

        video_ts = dvd_folder / "VIDEO_TS"
        assert arg == (
            f"concat:{video_ts / 'VTS_02_1.VOB'}|{video_ts / 'VTS_02_2.VOB'}"
        )

    def test_single_stream_file(self, bluray_folder: Path):
        arg = get_input_argument(
            str(bluray_folder), MediaProtocol.FILE, None, ["00001.m2ts"]
        )

        assert arg == f"file:{bluray_folder / 'BDMV' / 'STREAM' / '00001.m2ts'}"

    def test_mount_point_replaces_iso_path(self, bluray_folder: Path):
        mount = FakeMount(Path("/media/Epic.iso"), bluray_folder)

        arg = get_input_argument(
            "/media/Epic.iso", MediaProtocol.FILE, mount, ["00001.m2ts"]
        )

        assert arg.startswith(f"file:{bluray_folder}")
        assert "/media/Epic.iso" not in arg

    def test_mount_without_stream_files_uses_mount_point(self, temp_dir: Path):
        mount = FakeMount(Path("/media/Epic.iso"), temp_dir)

        arg = get_input_argument("/media/Epic.iso", MediaProtocol.FILE, mount)

        assert arg == f"file:{temp_dir}"

    def test_unresolvable_stream_files_fall_back_to_root(self, temp_dir: Path):
        arg = get_input_argument(
            str(temp_dir), MediaProtocol.FILE, None, ["VTS_01_1.VOB"]
        )

        assert arg == f"file:{temp_dir}"
