"""Optical disc image mounting."""

from stillframe.iso.fuseiso import DEFAULT_MOUNT_ROOT, FuseIsoMount, FuseIsoMounter
from stillframe.iso.interface import IsoMount, IsoMounter, IsoMountError
from stillframe.iso.manager import IsoManager

__all__ = [
    "DEFAULT_MOUNT_ROOT",
    "FuseIsoMount",
    "FuseIsoMounter",
    "IsoManager",
    "IsoMount",
    "IsoMountError",
    "IsoMounter",
]
