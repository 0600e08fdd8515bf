"""
Task list loading from the project manifest.

The manifest is the project's package.json; the task list is the array
stored under the "code-sync" key:

    {
      "code-sync": [
        {"name": "assets", "zipUrl": "https://host/a.zip", "unzipPath": "vendor/assets",
         "crc64": "<md5 hex>", "auth": "Bearer ${TOKEN}", "clean": true}
      ]
    }

Only "name", "zipUrl" and "unzipPath" are required.
"""

import json
import logging
from pathlib import Path

from .constants import (
    KEY_AUTH,
    KEY_CHECKSUM,
    KEY_CLEAN,
    KEY_DEST,
    KEY_NAME,
    KEY_URL,
    MANIFEST_FILENAME,
    MANIFEST_SECTION,
)
from .exceptions import ConfigInvalidError, ConfigNotFoundError
from .workflow.tasks import SyncTask

logger = logging.getLogger(__name__)


def find_manifest(cwd: Path | None = None, filename: str = MANIFEST_FILENAME) -> Path:
    """Manifest location for a project directory (not checked for existence)."""
    return (cwd or Path.cwd()) / filename


def _require_str(entry: dict, key: str, index: int, path: Path, optional: bool = False) -> str | None:
    value = entry.get(key)
    if value is None and optional:
        return None
    if not isinstance(value, str) or (not optional and not value):
        kind = "a string" if optional else "a non-empty string"
        raise ConfigInvalidError(f"Task #{index}: '{key}' must be {kind}", path=path)
    return value


def parse_task(entry: object, index: int, path: Path) -> SyncTask:
    """
    Build a SyncTask from one manifest entry.

    Relative destinations are resolved against the manifest's directory.
    """
    if not isinstance(entry, dict):
        raise ConfigInvalidError(f"Task #{index} must be an object", path=path)

    name = _require_str(entry, KEY_NAME, index, path)
    url = _require_str(entry, KEY_URL, index, path)
    dest = _require_str(entry, KEY_DEST, index, path)
    checksum = _require_str(entry, KEY_CHECKSUM, index, path, optional=True)
    auth = _require_str(entry, KEY_AUTH, index, path, optional=True)

    clean = entry.get(KEY_CLEAN, False)
    if not isinstance(clean, bool):
        raise ConfigInvalidError(f"Task #{index}: '{KEY_CLEAN}' must be a boolean", path=path)

    destination = Path(dest).expanduser()
    if not destination.is_absolute():
        destination = path.parent / destination

    return SyncTask(
        name=name,
        source_url=url,
        destination=destination,
        expected_checksum=checksum or None,
        auth=auth or None,
        clean=clean,
    )


def load_manifest(path: Path, section: str = MANIFEST_SECTION) -> list[SyncTask]:
    """
    Load the task list from a manifest file.

    Args:
        path: Path to the manifest (package.json)
        section: Top-level key holding the task array

    Returns:
        Tasks in file order

    Raises:
        ConfigNotFoundError: manifest does not exist
        ConfigInvalidError: malformed JSON, missing section, or bad task entry
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigNotFoundError(path, cause=e) from e
    except OSError as e:
        raise ConfigInvalidError("Cannot read manifest", path=path, cause=e) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigInvalidError("Malformed manifest", path=path, cause=e) from e

    entries = data.get(section) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigInvalidError(f"'{section}' configuration not found or not a list", path=path)

    tasks = [parse_task(entry, index, path) for index, entry in enumerate(entries)]
    logger.debug(f"Loaded {len(tasks)} tasks from {path}")
    return tasks
