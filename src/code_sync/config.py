"""
Tool settings with YAML loading and environment variable support.

These are settings for code-sync itself (timeouts, temp dir, digest),
not the task list, which lives in the project manifest (see manifest.py).
"""

import hashlib
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import (
    CONFIG_FILENAME,
    DEFAULT_CHECKSUM_ALGORITHM,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_TIMEOUT,
    LOCAL_CONFIG_FILENAME,
    MANIFEST_FILENAME,
    MANIFEST_SECTION,
    TEMP_DIR_NAME,
)
from .exceptions import ConfigInvalidError


def _env_path(env_var: str, default: Path | None = None) -> Path | None:
    """Get path from environment variable or return default."""
    if value := os.environ.get(env_var):
        return Path(value)
    return default


@dataclass
class ManifestConfig:
    filename: str = MANIFEST_FILENAME
    section: str = MANIFEST_SECTION


@dataclass
class DownloadConfig:
    timeout: float = DEFAULT_TIMEOUT
    max_redirects: int = DEFAULT_MAX_REDIRECTS
    chunk_size: int = DEFAULT_CHUNK_SIZE


@dataclass
class ExtractConfig:
    timeout: float | None = None  # None = no deadline


@dataclass
class ChecksumConfig:
    algorithm: str = DEFAULT_CHECKSUM_ALGORITHM


@dataclass
class PathsConfig:
    """Paths configuration - temp_dir can be overridden via CODE_SYNC_TEMP_DIR."""

    temp_dir: Path | None = field(default_factory=lambda: _env_path("CODE_SYNC_TEMP_DIR"))

    def resolve_temp_dir(self) -> Path:
        """Scratch directory for in-flight downloads."""
        return self.temp_dir or Path(tempfile.gettempdir()) / TEMP_DIR_NAME


@dataclass
class LoggingConfig:
    level: str = "WARNING"


_SECTIONS = ["manifest", "download", "extract", "checksum", "paths", "logging"]


@dataclass
class SyncSettings:
    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    checksum: ChecksumConfig = field(default_factory=ChecksumConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "SyncSettings":
        """Load settings from YAML file."""
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigInvalidError("Malformed settings file", path=path, cause=e) from e

        if not isinstance(data, dict):
            raise ConfigInvalidError("Settings file must be a mapping", path=path)

        settings = cls._from_dict(data)
        settings.validate(path)
        return settings

    @classmethod
    def _from_dict(cls, data: dict) -> "SyncSettings":
        """Create settings from dictionary. Unknown keys are ignored."""
        settings = cls()

        for attr in _SECTIONS:
            section = data.get(attr)
            if not isinstance(section, dict):
                continue
            target = getattr(settings, attr)
            for key, value in section.items():
                if hasattr(target, key):
                    if attr == "paths" and isinstance(value, str):
                        value = Path(value).expanduser()
                    setattr(target, key, value)

        return settings

    def validate(self, path: Path | None = None) -> None:
        """Reject settings the pipeline cannot run with."""
        if not isinstance(self.checksum.algorithm, str) or self.checksum.algorithm not in hashlib.algorithms_available:
            raise ConfigInvalidError(f"Unknown checksum algorithm '{self.checksum.algorithm}'", path=path)
        if not _is_number(self.download.timeout) or self.download.timeout <= 0:
            raise ConfigInvalidError("download.timeout must be a positive number", path=path)
        if not _is_int(self.download.max_redirects) or self.download.max_redirects < 0:
            raise ConfigInvalidError("download.max_redirects must be an integer >= 0", path=path)
        if not _is_int(self.download.chunk_size) or self.download.chunk_size <= 0:
            raise ConfigInvalidError("download.chunk_size must be an integer > 0", path=path)
        if self.extract.timeout is not None and (not _is_number(self.extract.timeout) or self.extract.timeout <= 0):
            raise ConfigInvalidError("extract.timeout must be a positive number", path=path)
        level = self.logging.level
        if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
            raise ConfigInvalidError(f"Unknown logging level '{level}'", path=path)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return _is_int(value) or isinstance(value, float)


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    # Check environment variable first
    if config_dir := os.environ.get("CODE_SYNC_CONFIG_DIR"):
        return Path(config_dir)

    # Check XDG config home
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "code-sync"

    # Fall back to ~/.config
    return Path.home() / ".config" / "code-sync"


def load_settings(config_path: Path | None = None, cwd: Path | None = None) -> SyncSettings:
    """
    Load tool settings.

    Args:
        config_path: Explicit settings file (default: searches standard locations)
        cwd: Project directory searched for a local code-sync.yaml

    Returns:
        SyncSettings (defaults when no file is found)
    """
    if config_path is None:
        search_paths = [
            _get_default_config_dir() / CONFIG_FILENAME,
            (cwd or Path.cwd()) / LOCAL_CONFIG_FILENAME,
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return SyncSettings.from_yaml(config_path) if config_path else SyncSettings()
