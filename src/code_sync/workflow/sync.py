"""
Sync workflow factory - Creates the workflow for one code-sync invocation.

1. Load the task list from the manifest
2. Select all tasks, or only those matching a name
3. Wrap them with per-task runtime state for the runner
"""

from dataclasses import dataclass, field
from pathlib import Path

from ..exceptions import TaskNotFoundError
from .tasks import SyncTask, TaskState


def select_tasks(tasks: list[SyncTask], name: str | None = None) -> list[SyncTask]:
    """
    Filter tasks by name.

    Args:
        tasks: Full task list in manifest order
        name: Task name to keep; None keeps everything

    Returns:
        Matching tasks in original order (every match, duplicates included)

    Raises:
        TaskNotFoundError: name given but nothing matched
    """
    if name is None:
        return list(tasks)

    selected = [t for t in tasks if t.name == name]
    if not selected:
        raise TaskNotFoundError(name)
    return selected


@dataclass
class SyncWorkflow:
    """
    An ordered collection of sync tasks to execute.

    Workflows define WHAT to sync, not HOW to execute it.
    """

    name: str
    manifest: Path | None = None
    states: list[TaskState] = field(default_factory=list)

    @property
    def tasks(self) -> list[SyncTask]:
        return [s.task for s in self.states]

    def add_task(self, task: SyncTask) -> None:
        """Add a task to the workflow."""
        self.states.append(TaskState(task=task))

    def is_complete(self) -> bool:
        """Check if every task reached a terminal status."""
        return all(s.status.is_terminal for s in self.states)


def create_sync_workflow(
    tasks: list[SyncTask],
    task_name: str | None = None,
    manifest: Path | None = None,
) -> SyncWorkflow:
    """
    Create a sync workflow from a loaded task list.

    This is a FACTORY function that creates the workflow data structure.
    Selection happens here, so an unknown task name fails before any
    network or filesystem activity.

    Raises:
        TaskNotFoundError: task_name given but not in the task list
    """
    workflow = SyncWorkflow(name=task_name or "all", manifest=manifest)
    for task in select_tasks(tasks, task_name):
        workflow.add_task(task)
    return workflow
