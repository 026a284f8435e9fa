"""FUSE-based ISO mounting via fuseiso/fusermount."""

from __future__ import annotations

import asyncio
import logging
import tempfile
import uuid
from pathlib import Path

from stillframe.core.cancellation import CancellationToken
from stillframe.core.subprocess_utils import run_command
from stillframe.iso.interface import IsoMountError
from stillframe.tools.detection import require_tool

logger = logging.getLogger(__name__)

DEFAULT_MOUNT_ROOT = Path(tempfile.gettempdir()) / "stillframe-mounts"


class FuseIsoMount:
    """An ISO image mounted with fuseiso. Unmounted by release()."""

    def __init__(
        self,
        iso_path: Path,
        mounted_path: Path,
        fusermount_path: Path,
        timeout: float,
    ) -> None:
        self.iso_path = iso_path
        self.mounted_path = mounted_path
        self._fusermount_path = fusermount_path
        self._timeout = timeout
        self._released = False

    @property
    def released(self) -> bool:
        """True once the image has been unmounted."""
        return self._released

    async def release(self) -> None:
        """Unmount and remove the mount point.

        Unmount failures are logged, never raised. A plain unmount that fails
        or times out is followed by a lazy one. The mount only counts as
        released once an unmount succeeds, so a call that failed or was
        cancelled part way leaves the next call to try again.
        """
        if self._released:
            return

        logger.info("Unmounting %s from %s", self.iso_path, self.mounted_path)
        unmounted = await _fusermount(
            self._fusermount_path, self.mounted_path, self._timeout
        )
        if not unmounted:
            logger.warning("Falling back to lazy unmount of %s", self.mounted_path)
            unmounted = await _fusermount(
                self._fusermount_path, self.mounted_path, self._timeout, lazy=True
            )
        if not unmounted:
            # Directory stays; it is still a mount point
            return

        self._released = True
        _remove_mount_point(self.mounted_path)

    def __repr__(self) -> str:
        return f"FuseIsoMount({self.iso_path!s} -> {self.mounted_path!s})"


class FuseIsoMounter:
    """IsoMounter implementation backed by fuseiso.

    Each mount gets its own directory under mount_root so concurrent
    extractions never share a mount point.
    """

    name = "fuseiso"
    DEFAULT_TIMEOUT: float = 60.0

    def __init__(
        self,
        mount_root: Path | None = None,
        fuseiso_path: Path | None = None,
        fusermount_path: Path | None = None,
        timeout: float | None = None,
    ) -> None:
        self._mount_root = mount_root or DEFAULT_MOUNT_ROOT
        self._configured_fuseiso = fuseiso_path
        self._configured_fusermount = fusermount_path
        self._fuseiso_path: Path | None = None
        self._fusermount_path: Path | None = None
        self._timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT

    @property
    def mount_root(self) -> Path:
        """Directory under which mount points are created."""
        return self._mount_root

    @property
    def fuseiso_path(self) -> Path:
        """Path to fuseiso, resolved on first access.

        Raises:
            ToolNotFoundError: If fuseiso is not available.
        """
        if self._fuseiso_path is None:
            self._fuseiso_path = require_tool("fuseiso", self._configured_fuseiso)
        return self._fuseiso_path

    @property
    def fusermount_path(self) -> Path:
        """Path to fusermount, resolved on first access.

        Raises:
            ToolNotFoundError: If fusermount is not available.
        """
        if self._fusermount_path is None:
            self._fusermount_path = require_tool(
                "fusermount", self._configured_fusermount
            )
        return self._fusermount_path

    def can_mount(self, path: Path) -> bool:
        """Accept any .iso file."""
        return path.suffix.lower() == ".iso"

    async def mount(
        self, path: Path, token: CancellationToken | None = None
    ) -> FuseIsoMount:
        """Mount ``path`` under a fresh directory.

        Raises:
            IsoMountError: If fuseiso fails or times out.
            ToolNotFoundError: If fuseiso or fusermount is missing.
            OperationCancelledError: If the token fires while mounting.
        """
        fuseiso = self.fuseiso_path
        fusermount = self.fusermount_path

        mount_point = self._mount_root / f"{path.stem}-{uuid.uuid4().hex[:8]}"
        try:
            mount_point.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise IsoMountError(f"Cannot create mount point {mount_point}: {e}") from e

        try:
            _, stderr, rc = await run_command(
                [fuseiso, path, mount_point], token=token, timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            await self._abandon(mount_point, fusermount)
            raise IsoMountError(
                f"fuseiso timed out after {self._timeout}s mounting {path}"
            ) from e
        except BaseException:
            await self._abandon(mount_point, fusermount)
            raise

        if rc != 0:
            _remove_mount_point(mount_point)
            raise IsoMountError(
                f"fuseiso failed for {path} (rc={rc}): {stderr.strip()}"
            )

        logger.debug("Mounted %s at %s", path, mount_point)
        return FuseIsoMount(path, mount_point, fusermount, self._timeout)

    async def _abandon(self, mount_point: Path, fusermount: Path) -> None:
        """Undo a mount that was interrupted part way through."""
        if mount_point.is_mount():
            await _fusermount(fusermount, mount_point, self._timeout, lazy=True)
        _remove_mount_point(mount_point)


async def _fusermount(
    fusermount: Path, mount_point: Path, timeout: float, lazy: bool = False
) -> bool:
    """Run fusermount -u (-z when lazy). Returns True if it succeeded.

    Timeouts and launch failures are logged and reported as False.
    Cancellation propagates; run_command has already killed the process.
    """
    args: list[str | Path] = [fusermount, "-u"]
    if lazy:
        args.append("-z")
    args.append(mount_point)

    try:
        _, stderr, rc = await run_command(args, timeout=timeout)
    except asyncio.TimeoutError:
        logger.error("fusermount timed out after %ss on %s", timeout, mount_point)
        return False
    except OSError as e:
        logger.error("Could not run fusermount on %s: %s", mount_point, e)
        return False

    if rc != 0:
        logger.error(
            "Failed to unmount %s (rc=%d): %s", mount_point, rc, stderr.strip()
        )
        return False
    return True


def _remove_mount_point(mount_point: Path) -> None:
    """Remove an (unmounted, empty) mount point directory, logging failures."""
    try:
        mount_point.rmdir()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Could not remove mount point %s: %s", mount_point, e)
