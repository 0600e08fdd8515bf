"""
Extractor module - Unpack a ZIP archive into a destination directory.

Existing files at an entry's path are overwritten; files not present in
the archive are left alone. Entries that would land outside the destination
(absolute paths, "..") abort extraction before anything is written.
"""

import logging
import shutil
import time
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from .exceptions import ExtractionFailedError

logger = logging.getLogger(__name__)


@dataclass
class ExtractResult:
    """Result of extracting an archive."""

    destination: Path
    files_written: int = 0
    dirs_created: int = 0


def safe_member_path(dest: Path, member_name: str) -> Path:
    """
    Map an archive entry name to a path inside dest.

    Raises:
        ExtractionFailedError: entry is absolute or escapes dest
    """
    normalized = member_name.replace("\\", "/")
    relative = PurePosixPath(normalized)
    if relative.is_absolute() or (relative.parts and relative.parts[0].endswith(":")):
        raise ExtractionFailedError(f"Unsafe absolute path in archive: {member_name}")
    if ".." in relative.parts:
        raise ExtractionFailedError(f"Unsafe path in archive: {member_name}")

    parts = [p for p in relative.parts if p not in ("", ".")]
    target = dest.joinpath(*parts)

    root = dest.resolve()
    if not target.resolve().is_relative_to(root):
        raise ExtractionFailedError(f"Archive entry escapes destination: {member_name}")
    return target


def extract_archive(archive: Path, dest: Path, timeout: float | None = None) -> ExtractResult:
    """
    Extract every entry of a ZIP archive into dest.

    Args:
        archive: ZIP file to read
        dest: Destination directory (created with parents if missing)
        timeout: Optional deadline in seconds for the whole extraction

    Returns:
        ExtractResult with entry counts

    Raises:
        ExtractionFailedError: unreadable archive, unsafe entry, write error or deadline exceeded
    """
    deadline = time.monotonic() + timeout if timeout else None
    result = ExtractResult(destination=dest)

    try:
        dest.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(archive) as zf:
            members = zf.infolist()
            # Validate all entries before touching the filesystem
            targets = [(info, safe_member_path(dest, info.filename)) for info in members]

            for info, target in targets:
                if deadline and time.monotonic() > deadline:
                    raise ExtractionFailedError(f"Extraction exceeded {timeout}s deadline", archive=archive)

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    result.dirs_created += 1
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as out:
                    shutil.copyfileobj(src, out)
                result.files_written += 1

    except ExtractionFailedError as e:
        if e.archive is None:
            e.archive = archive
        raise
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as e:
        raise ExtractionFailedError(f"Cannot read archive {archive}", archive=archive, cause=e) from e
    except (OSError, RuntimeError, EOFError) as e:
        raise ExtractionFailedError(f"Failed to extract {archive} to {dest}", archive=archive, cause=e) from e

    logger.info(f"Extracted {result.files_written} files to {dest}")
    return result
