"""Base runner classes and protocols."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from ..exceptions import CodeSyncError
from ..workflow import SyncTask, SyncWorkflow, TaskStatus


@dataclass
class RunnerResult:
    """Result of running a sync workflow."""

    success: bool
    workflow_name: str
    tasks_completed: int = 0
    tasks_failed: int = 0
    tasks_skipped: int = 0
    bytes_downloaded: int = 0
    files_extracted: int = 0
    errors: list[str] = field(default_factory=list)
    # Set when a task fails; the run stops there
    failed_task: str | None = None
    error: CodeSyncError | None = None

    @property
    def tasks_total(self) -> int:
        return self.tasks_completed + self.tasks_failed + self.tasks_skipped


@dataclass
class RunnerCallbacks:
    """
    Callbacks for runner progress reporting.

    Allows CLI to display progress without coupling runner to Rich/UI.
    All callbacks are optional - if None, no callback is made.
    """

    # Workflow lifecycle
    on_workflow_start: Callable[[str, int], None] | None = None  # name, total_tasks
    on_workflow_complete: Callable[[RunnerResult], None] | None = None

    # Task lifecycle
    on_task_start: Callable[[SyncTask, int, int], None] | None = None  # task, index, total
    on_status_change: Callable[[SyncTask, TaskStatus], None] | None = None
    on_task_complete: Callable[[SyncTask, bool, str | None], None] | None = None  # task, success, error

    # Download progress (called per chunk)
    on_download_progress: Callable[[SyncTask, int, int | None], None] | None = None  # task, bytes, total


class RunnerProtocol(Protocol):
    """Protocol for workflow runners."""

    def run(self, workflow: SyncWorkflow, callbacks: RunnerCallbacks | None = None) -> RunnerResult:
        """
        Execute a workflow.

        Args:
            workflow: The workflow to execute
            callbacks: Optional callbacks for progress reporting

        Returns:
            RunnerResult with execution summary
        """
        ...
