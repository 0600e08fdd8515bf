"""
Workflow layer - Task and workflow definitions.

Workflows are DATA STRUCTURES that define what to sync.
They do NOT download or extract anything - that's the runner's job.
"""

from .sync import SyncWorkflow, create_sync_workflow, select_tasks
from .tasks import SyncTask, TaskState, TaskStatus

__all__ = [
    "SyncTask",
    "TaskState",
    "TaskStatus",
    "SyncWorkflow",
    "create_sync_workflow",
    "select_tasks",
]
