"""Destination clearing and temp file removal."""

import logging
import shutil
from pathlib import Path

from .exceptions import CleanupFailedError

logger = logging.getLogger(__name__)


def clean_directory(path: Path) -> bool:
    """
    Remove a directory tree if it exists.

    Returns:
        True if something was removed, False if the path did not exist
    """
    if not path.exists() and not path.is_symlink():
        return False

    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    logger.info(f"Removed {path}")
    return True


def discard_file(path: Path) -> None:
    """
    Delete a file, ignoring absence.

    Raises:
        CleanupFailedError: the file exists but could not be removed
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        raise CleanupFailedError(path, cause=e) from e
