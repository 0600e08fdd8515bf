"""
Archive integrity verification.

The manifest field is called "crc64" for historical reasons, but its value
is a hex digest produced by a hashlib algorithm, MD5 (128-bit) by default.
Comparison is exact and case-sensitive against lowercase hex output.
"""

import hashlib
from dataclasses import dataclass
from pathlib import Path

from .constants import DEFAULT_CHECKSUM_ALGORITHM, DEFAULT_CHUNK_SIZE


@dataclass
class ChecksumResult:
    """Result of comparing a file digest to an expected value."""

    path: Path
    algorithm: str
    expected: str
    actual: str

    @property
    def matches(self) -> bool:
        return self.expected == self.actual


def file_checksum(path: Path, algorithm: str = DEFAULT_CHECKSUM_ALGORITHM, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Compute the hex digest of a file."""
    digest = hashlib.new(algorithm)
    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            digest.update(chunk)
    return digest.hexdigest()


def verify_checksum(path: Path, expected: str, algorithm: str = DEFAULT_CHECKSUM_ALGORITHM) -> ChecksumResult:
    """Digest a file and compare it to the expected value."""
    return ChecksumResult(
        path=path,
        algorithm=algorithm,
        expected=expected,
        actual=file_checksum(path, algorithm),
    )
