"""Sequential runner - Executes sync tasks one at a time."""

import logging
import secrets
import time
from pathlib import Path

from ..cleaner import clean_directory, discard_file
from ..config import SyncSettings
from ..constants import TEMP_FILE_PREFIX, TEMP_FILE_SUFFIX
from ..downloader import download_file
from ..exceptions import ChecksumMismatchError, CleanupFailedError, CodeSyncError
from ..extractor import extract_archive
from ..verifier import verify_checksum
from ..workflow import SyncWorkflow, TaskState, TaskStatus
from .base import RunnerCallbacks, RunnerResult

logger = logging.getLogger(__name__)


def make_temp_path(temp_dir: Path) -> Path:
    """
    Generate a collision-resistant temp archive path.

    Examples:
        temp-1718000000000-9f86d081.zip
    """
    stamp = int(time.time() * 1000)
    return temp_dir / f"{TEMP_FILE_PREFIX}{stamp}-{secrets.token_hex(4)}{TEMP_FILE_SUFFIX}"


class SequentialRunner:
    """
    Sequential workflow runner.

    Executes tasks one at a time in manifest order and stops at the first
    failure; tasks after it are marked skipped.
    Uses callbacks for progress reporting without coupling to UI.
    """

    def __init__(self, settings: SyncSettings | None = None, dry_run: bool = False):
        """
        Initialize the runner.

        Args:
            settings: Tool settings (timeouts, temp dir, digest algorithm)
            dry_run: If True, report tasks without downloading anything
        """
        self.settings = settings or SyncSettings()
        self.dry_run = dry_run

    def run(self, workflow: SyncWorkflow, callbacks: RunnerCallbacks | None = None) -> RunnerResult:
        """
        Execute a sync workflow.

        Args:
            workflow: The SyncWorkflow to execute
            callbacks: Optional callbacks for progress reporting

        Returns:
            RunnerResult with execution summary
        """
        cb = callbacks or RunnerCallbacks()
        total = len(workflow.states)

        if cb.on_workflow_start:
            cb.on_workflow_start(workflow.name, total)

        logger.info(f"Running workflow {workflow.name} ({total} tasks) from {workflow.manifest or '<memory>'}")
        result = RunnerResult(success=True, workflow_name=workflow.name)

        for index, state in enumerate(workflow.states, start=1):
            # Fail-fast: nothing runs after a failed task
            if not result.success or self.dry_run:
                if self.dry_run and cb.on_task_start:
                    cb.on_task_start(state.task, index, total)
                state.status = TaskStatus.SKIPPED
                result.tasks_skipped += 1
                continue

            if cb.on_task_start:
                cb.on_task_start(state.task, index, total)

            try:
                self._run_task(state, cb)
            except CodeSyncError as e:
                state.status = TaskStatus.FAILED
                state.error = str(e)
                result.success = False
                result.tasks_failed += 1
                result.failed_task = state.task.name
                result.error = e
                result.errors.append(f"Task {state.task.name}: {e}")
                logger.error(f"Task {state.task.name} failed: {e}")

                if cb.on_task_complete:
                    cb.on_task_complete(state.task, False, str(e))
                continue

            result.tasks_completed += 1
            result.bytes_downloaded += state.bytes_downloaded
            result.files_extracted += state.files_extracted

            if cb.on_task_complete:
                cb.on_task_complete(state.task, True, None)

        if cb.on_workflow_complete:
            cb.on_workflow_complete(result)

        return result

    def _set_status(self, state: TaskState, status: TaskStatus, cb: RunnerCallbacks) -> None:
        state.status = status
        logger.debug(f"Task {state.task.name}: {status.value}")
        if cb.on_status_change:
            cb.on_status_change(state.task, status)

    def _run_task(self, state: TaskState, cb: RunnerCallbacks) -> None:
        """Download, verify, clean and extract one task. Temp file is always removed."""
        task = state.task
        settings = self.settings
        temp_file = make_temp_path(settings.paths.resolve_temp_dir())

        def on_progress(current: int, size: int | None) -> None:
            if cb.on_download_progress:
                cb.on_download_progress(task, current, size)

        try:
            self._set_status(state, TaskStatus.DOWNLOADING, cb)
            temp_file.parent.mkdir(parents=True, exist_ok=True)
            download = download_file(
                task.source_url,
                temp_file,
                auth=task.auth,
                timeout=settings.download.timeout,
                max_redirects=settings.download.max_redirects,
                chunk_size=settings.download.chunk_size,
                progress=on_progress,
            )
            state.bytes_downloaded = download.bytes_written

            if task.expected_checksum:
                self._set_status(state, TaskStatus.VERIFYING, cb)
                check = verify_checksum(temp_file, task.expected_checksum, settings.checksum.algorithm)
                if not check.matches:
                    raise ChecksumMismatchError(check.expected, check.actual, check.algorithm)

            if task.clean:
                self._set_status(state, TaskStatus.CLEANING, cb)
                clean_directory(task.destination)

            self._set_status(state, TaskStatus.EXTRACTING, cb)
            extracted = extract_archive(temp_file, task.destination, timeout=settings.extract.timeout)
            state.files_extracted = extracted.files_written

            self._set_status(state, TaskStatus.DONE, cb)

        except OSError as e:
            raise CodeSyncError(f"Filesystem error in state {state.status.value}", cause=e) from e

        finally:
            try:
                discard_file(temp_file)
            except CleanupFailedError as e:
                logger.warning(str(e))
