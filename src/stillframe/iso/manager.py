"""ISO manager dispatching mount requests to registered mounters."""

from __future__ import annotations

import logging
from pathlib import Path

from stillframe.core.cancellation import CancellationToken
from stillframe.iso.interface import IsoMount, IsoMounter, IsoMountError

logger = logging.getLogger(__name__)


class IsoManager:
    """Registry of IsoMounter implementations.

    The first registered mounter whose can_mount() accepts a path is used.
    """

    def __init__(self, mounters: list[IsoMounter] | None = None) -> None:
        self._mounters: list[IsoMounter] = list(mounters or [])

    @property
    def mounters(self) -> list[IsoMounter]:
        """Registered mounters in lookup order."""
        return list(self._mounters)

    def add_mounter(self, mounter: IsoMounter) -> None:
        """Register a mounter after the existing ones."""
        self._mounters.append(mounter)
        logger.debug("Registered ISO mounter: %s", mounter.name)

    def _find_mounter(self, path: Path) -> IsoMounter | None:
        return next((m for m in self._mounters if m.can_mount(path)), None)

    def can_mount(self, path: str | Path) -> bool:
        """Return True if some registered mounter accepts the image."""
        return self._find_mounter(Path(path)) is not None

    async def mount(
        self, path: str | Path, token: CancellationToken | None = None
    ) -> IsoMount:
        """Mount a disc image.

        Args:
            path: Path to the image file.
            token: Optional cancellation token.

        Returns:
            IsoMount owned by the caller, who must release() it.

        Raises:
            IsoMountError: If the file is missing or no mounter accepts it.
            OperationCancelledError: If the token fires while mounting.
        """
        iso_path = Path(path)
        if not iso_path.is_file():
            raise IsoMountError(f"ISO image not found: {iso_path}")

        if token is not None:
            token.raise_if_cancelled()

        mounter = self._find_mounter(iso_path)
        if mounter is None:
            raise IsoMountError(f"No ISO mounter available for {iso_path}")

        logger.info("Mounting %s with %s", iso_path, mounter.name)
        return await mounter.mount(iso_path, token)
