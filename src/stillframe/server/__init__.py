"""HTTP daemon serving extracted images."""

from stillframe.server.app import create_app
from stillframe.server.lifecycle import DaemonLifecycle

__all__ = ["DaemonLifecycle", "create_app"]
