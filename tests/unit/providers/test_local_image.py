"""Tests for the local artwork provider."""

from pathlib import Path

import pytest

from stillframe.core.cancellation import CancellationToken, OperationCancelledError
from stillframe.domain.enums import ImageFormat, ImageType, LocationType, VideoType
from stillframe.providers.local_image import LocalImageProvider, find_sidecar_image


@pytest.fixture
def provider() -> LocalImageProvider:
    return LocalImageProvider()


class TestFindSidecarImage:
    """Tests for find_sidecar_image."""

    def test_no_artwork(self, make_item, movie_file: Path):
        item = make_item(path=str(movie_file))
        assert find_sidecar_image(item, ImageType.PRIMARY) is None

    def test_stem_named_image_wins_over_folder(self, make_item, movie_file: Path):
        (movie_file.parent / "folder.jpg").write_bytes(b"folder")
        (movie_file.parent / "Movie.png").write_bytes(b"stem")
        item = make_item(path=str(movie_file))

        assert find_sidecar_image(item, ImageType.PRIMARY) == (
            movie_file.parent / "Movie.png"
        )

    def test_case_insensitive(self, make_item, movie_file: Path):
        (movie_file.parent / "POSTER.JPG").write_bytes(b"poster")
        item = make_item(path=str(movie_file))

        assert find_sidecar_image(item, ImageType.PRIMARY) == (
            movie_file.parent / "POSTER.JPG"
        )

    def test_backdrop_names(self, make_item, movie_file: Path):
        (movie_file.parent / "poster.jpg").write_bytes(b"poster")
        (movie_file.parent / "Movie-fanart.jpg").write_bytes(b"fanart")
        item = make_item(path=str(movie_file))

        assert find_sidecar_image(item, ImageType.BACKDROP) == (
            movie_file.parent / "Movie-fanart.jpg"
        )

    def test_thumb_has_no_sidecars(self, make_item, movie_file: Path):
        (movie_file.parent / "poster.jpg").write_bytes(b"poster")
        item = make_item(path=str(movie_file))

        assert find_sidecar_image(item, ImageType.THUMB) is None

    def test_disc_folder_uses_parent(self, make_item, dvd_folder: Path):
        (dvd_folder / "folder.jpg").write_bytes(b"cover")
        item = make_item(path=str(dvd_folder / "VIDEO_TS"), video_type=VideoType.DVD)

        assert find_sidecar_image(item, ImageType.PRIMARY) == (
            dvd_folder / "folder.jpg"
        )

    def test_disc_root_folder_is_searched(self, make_item, dvd_folder: Path):
        (dvd_folder / "Film.jpg").write_bytes(b"cover")
        item = make_item(path=str(dvd_folder), video_type=VideoType.DVD)

        assert find_sidecar_image(item, ImageType.PRIMARY) == (
            dvd_folder / "Film.jpg"
        )


class TestLocalImageProvider:
    """Tests for LocalImageProvider."""

    def test_identity(self, provider):
        assert provider.name == "Local Artwork"
        assert provider.order == 0

    def test_supports_filesystem_only(self, provider, make_item):
        assert provider.supports(make_item()) is True
        assert (
            provider.supports(
                make_item(path="http://h/a.mp4", location_type=LocationType.REMOTE)
            )
            is False
        )
        assert provider.supports(make_item(is_placeholder=True)) is False

    @pytest.mark.asyncio
    async def test_returns_sidecar_bytes(self, provider, make_item, movie_file):
        (movie_file.parent / "poster.png").write_bytes(b"png-bytes")
        item = make_item(path=str(movie_file))

        response = await provider.get_image(item, ImageType.PRIMARY)

        assert response.has_image is True
        assert response.format == ImageFormat.PNG
        assert response.stream.read() == b"png-bytes"

    @pytest.mark.asyncio
    async def test_jpeg_extension_maps_to_jpg(self, provider, make_item, movie_file):
        (movie_file.parent / "cover.jpeg").write_bytes(b"jpeg")
        item = make_item(path=str(movie_file))

        response = await provider.get_image(item, ImageType.PRIMARY)

        assert response.format == ImageFormat.JPG

    @pytest.mark.asyncio
    async def test_no_artwork_means_no_image(self, provider, make_item, movie_file):
        response = await provider.get_image(
            make_item(path=str(movie_file)), ImageType.PRIMARY
        )

        assert response.has_image is False

    @pytest.mark.asyncio
    async def test_cancelled_token(self, provider, make_item, movie_file):
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            await provider.get_image(
                make_item(path=str(movie_file)), ImageType.PRIMARY, token
            )
