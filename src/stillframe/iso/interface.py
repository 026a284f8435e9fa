"""Mount capability protocols for optical disc images."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from stillframe.core.cancellation import CancellationToken


class IsoMountError(Exception):
    """Raised when a disc image cannot be mounted or unmounted."""


@runtime_checkable
class IsoMount(Protocol):
    """An ISO image mounted as a browsable directory.

    Owned by whoever called mount(); valid until release() is awaited.
    """

    iso_path: Path
    mounted_path: Path

    async def release(self) -> None:
        """Unmount the image and free the mount point.

        Safe to call more than once; only the first call does any work.
        """
        ...


@runtime_checkable
class IsoMounter(Protocol):
    """A mechanism able to mount disc images (FUSE, udisks, loop devices...)."""

    name: str

    def can_mount(self, path: Path) -> bool:
        """Return True if this mounter handles the given image."""
        ...

    async def mount(self, path: Path, token: CancellationToken | None) -> IsoMount:
        """Mount the image.

        Raises:
            IsoMountError: If mounting fails.
            OperationCancelledError: If the token fires while mounting.
        """
        ...
