"""
Centralized constants for Code Sync.

Defaults for the manifest layout, download behaviour and temp files
should be defined here to avoid duplication across modules.
"""

# Project manifest holding the task list
MANIFEST_FILENAME = "package.json"
MANIFEST_SECTION = "code-sync"

# Manifest task keys
KEY_NAME = "name"
KEY_URL = "zipUrl"
KEY_DEST = "unzipPath"
KEY_CHECKSUM = "crc64"
KEY_AUTH = "auth"
KEY_CLEAN = "clean"

# Scratch directory name under the system temp area
TEMP_DIR_NAME = "code-sync"
TEMP_FILE_PREFIX = "temp-"
TEMP_FILE_SUFFIX = ".zip"

# Download defaults
DEFAULT_TIMEOUT = 60.0  # seconds per request
DEFAULT_MAX_REDIRECTS = 10
DEFAULT_CHUNK_SIZE = 64 * 1024
REDIRECT_STATUSES = {301, 302, 303, 307, 308}

# Digest used for the manifest "crc64" field (128-bit MD5, hex)
DEFAULT_CHECKSUM_ALGORITHM = "md5"

# Tool settings file names
CONFIG_FILENAME = "config.yaml"
LOCAL_CONFIG_FILENAME = "code-sync.yaml"
