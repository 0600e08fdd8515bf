"""
Exception types for code-sync.

Every failure the pipeline can surface derives from CodeSyncError so the CLI
can report it uniformly. CleanupFailedError is the only non-fatal kind: it is
logged by the runner and never replaces the error that triggered cleanup.
"""


class CodeSyncError(Exception):
    """
    Base exception for all code-sync errors.

    Attributes:
        message: Human-readable error description
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message


class ConfigNotFoundError(CodeSyncError):
    """Manifest file does not exist."""

    def __init__(self, path, cause: Exception | None = None):
        self.path = path
        super().__init__(f"Manifest not found: {path}", cause=cause, context={"path": str(path)})


class ConfigInvalidError(CodeSyncError):
    """Manifest or settings file is unreadable or has the wrong shape."""

    def __init__(self, message: str, path=None, cause: Exception | None = None):
        self.path = path
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message, cause=cause, context={"path": str(path) if path else None})


class TaskNotFoundError(CodeSyncError):
    """A task name filter matched nothing in the manifest."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'Task "{name}" not found in configuration', context={"task": name})


class DownloadFailedError(CodeSyncError):
    """Download failed: bad status, transport error, or interrupted stream."""

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.url = url
        self.status_code = status_code
        super().__init__(message, cause=cause, context={"url": url, "status_code": status_code})


class ChecksumMismatchError(CodeSyncError):
    """Downloaded archive digest does not match the expected value."""

    def __init__(self, expected: str, actual: str, algorithm: str | None = None):
        self.expected = expected
        self.actual = actual
        self.algorithm = algorithm
        label = f"{algorithm} " if algorithm else ""
        super().__init__(
            f"Checksum mismatch: expected {label}{expected}, got {actual}",
            context={"expected": expected, "actual": actual, "algorithm": algorithm},
        )


class ExtractionFailedError(CodeSyncError):
    """Archive could not be opened, parsed or written out."""

    def __init__(self, message: str, archive=None, cause: Exception | None = None):
        self.archive = archive
        super().__init__(message, cause=cause, context={"archive": str(archive) if archive else None})


class CleanupFailedError(CodeSyncError):
    """Temporary file could not be removed. Non-fatal."""

    def __init__(self, path, cause: Exception | None = None):
        self.path = path
        super().__init__(f"Failed to remove {path}", cause=cause, context={"path": str(path)})
