"""
Downloader module - Fetch a remote archive to a local file.

Handles:
- Authorization header from an env-interpolated template
- Redirects followed manually, with a hop limit
- Streaming the body to disk in chunks
- Removing partially written files when the stream breaks
"""

import http.client
import logging
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from urllib.error import HTTPError, URLError
from urllib.parse import urljoin

from .constants import DEFAULT_CHUNK_SIZE, DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, REDIRECT_STATUSES
from .exceptions import DownloadFailedError
from .interpolate import interpolate_env

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int | None], None]  # bytes_so_far, total (None if unknown)


@dataclass
class DownloadResult:
    """Result of a completed download."""

    url: str  # Final URL after redirects
    path: Path
    bytes_written: int = 0
    redirects: int = 0


class _NoRedirectHandler(urllib.request.HTTPRedirectHandler):
    """Surface 3xx responses as HTTPError so redirects can be counted."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        return None


def _build_opener() -> urllib.request.OpenerDirector:
    return urllib.request.build_opener(_NoRedirectHandler)


def _discard_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove partial download {path}: {e}")


def _stream_to_file(
    response,
    dest: Path,
    url: str,
    chunk_size: int,
    progress: ProgressCallback | None,
) -> int:
    """Copy the response body to dest. Returns bytes written."""
    length = response.headers.get("Content-Length")
    total = int(length) if length and length.isdigit() else None
    written = 0

    try:
        with open(dest, "wb") as f:
            while chunk := response.read(chunk_size):
                f.write(chunk)
                written += len(chunk)
                if progress:
                    progress(written, total)
    except (OSError, http.client.HTTPException) as e:
        _discard_partial(dest)
        raise DownloadFailedError(f"Download interrupted after {written} bytes", url=url, cause=e) from e

    return written


def download_file(
    url: str,
    dest: Path,
    auth: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_redirects: int = DEFAULT_MAX_REDIRECTS,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    progress: ProgressCallback | None = None,
) -> DownloadResult:
    """
    Download a URL to a local file.

    Args:
        url: Resource to fetch
        dest: File to create (overwritten if present)
        auth: Authorization header template; ${VAR}/$VAR are read from the environment
        timeout: Socket timeout per request in seconds
        max_redirects: Maximum redirect hops before giving up
        chunk_size: Read size when streaming the body
        progress: Optional callback (bytes_so_far, total)

    Returns:
        DownloadResult with final URL and size

    Raises:
        DownloadFailedError: non-200 status, too many redirects, transport or write error
    """
    headers = {}
    if auth:
        headers["Authorization"] = interpolate_env(auth)

    opener = _build_opener()
    current = url

    for hop in range(max_redirects + 1):
        try:
            request = urllib.request.Request(current, headers=headers)
            response = opener.open(request, timeout=timeout)
        except HTTPError as e:
            location = e.headers.get("Location") if e.headers else None
            e.close()
            if e.code in REDIRECT_STATUSES and location:
                next_url = urljoin(current, location)
                logger.debug(f"Redirect {e.code}: {current} -> {next_url}")
                current = next_url
                continue
            if e.code in REDIRECT_STATUSES:
                raise DownloadFailedError(
                    f"Redirect ({e.code}) without Location header", url=current, status_code=e.code
                ) from e
            raise DownloadFailedError(
                f"Download failed with status code: {e.code}", url=current, status_code=e.code
            ) from e
        except (URLError, TimeoutError, OSError, ValueError, http.client.HTTPException) as e:
            # ValueError: malformed URL (no scheme); HTTPException: InvalidURL, BadStatusLine
            reason = getattr(e, "reason", e)
            raise DownloadFailedError(f"Download failed: {reason}", url=current, cause=e) from e

        with response:
            status = response.status
            if status != 200:
                raise DownloadFailedError(
                    f"Download failed with status code: {status}", url=current, status_code=status
                )
            written = _stream_to_file(response, dest, current, chunk_size, progress)

        logger.info(f"Downloaded {written} bytes from {current} to {dest}")
        return DownloadResult(url=current, path=dest, bytes_written=written, redirects=hop)

    raise DownloadFailedError(f"Too many redirects (limit {max_redirects})", url=url)
