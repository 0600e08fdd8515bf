"""
Runners layer - Execution engines for sync workflows.

Runners execute workflows, handling task orchestration and progress reporting.
They walk each task through download, verify, clean and extract.
"""

from .base import RunnerCallbacks, RunnerProtocol, RunnerResult
from .sequential import SequentialRunner

__all__ = [
    "RunnerCallbacks",
    "RunnerProtocol",
    "RunnerResult",
    "SequentialRunner",
]
