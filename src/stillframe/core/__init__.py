"""Core utilities package.

This package contains the cancellation primitives and the subprocess
wrapper shared by every module that drives an external tool.
"""

from stillframe.core.cancellation import (
    CancellationToken,
    OperationCancelledError,
    run_cancellable,
)
from stillframe.core.subprocess_utils import run_command

__all__ = [
    # Cancellation
    "CancellationToken",
    "OperationCancelledError",
    "run_cancellable",
    # Subprocess
    "run_command",
]
