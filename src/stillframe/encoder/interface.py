"""Frame extraction capability protocol."""

from __future__ import annotations

from datetime import timedelta
from typing import BinaryIO, Protocol, runtime_checkable

from stillframe.core.cancellation import CancellationToken
from stillframe.domain.enums import MediaProtocol, Video3DFormat


class FrameExtractionError(Exception):
    """Raised when the extraction tool fails to produce an image."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        self.returncode = returncode
        super().__init__(message)


@runtime_checkable
class FrameExtractor(Protocol):
    """Extracts a single still image from a video input."""

    async def extract_video_image(
        self,
        input_argument: str,
        protocol: MediaProtocol,
        video_3d_format: Video3DFormat | None,
        offset: timedelta,
        token: CancellationToken | None,
    ) -> BinaryIO:
        """Grab one frame at ``offset``.

        Returns:
            Readable stream positioned at the start of one JPEG image.

        Raises:
            FrameExtractionError: If extraction fails.
            OperationCancelledError: If the token fires.
        """
        ...
