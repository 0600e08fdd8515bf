"""Task definitions for sync workflows."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class TaskStatus(Enum):
    """Status of a sync task as it moves through the pipeline."""

    PENDING = "pending"
    DOWNLOADING = "downloading"
    VERIFYING = "verifying"
    CLEANING = "cleaning"
    EXTRACTING = "extracting"
    DONE = "done"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.DONE, TaskStatus.FAILED, TaskStatus.SKIPPED)


@dataclass(frozen=True)
class SyncTask:
    """
    One download-and-extract unit of work, as configured in the manifest.

    Tasks are data - they describe what to fetch and where to put it.
    The runner reads them and never mutates them.
    """

    name: str
    source_url: str
    destination: Path
    expected_checksum: str | None = None
    auth: str | None = None
    clean: bool = False


@dataclass
class TaskState:
    """Runtime state of one task (set by runner)."""

    task: SyncTask
    status: TaskStatus = TaskStatus.PENDING
    bytes_downloaded: int = 0
    files_extracted: int = 0
    error: str | None = None
