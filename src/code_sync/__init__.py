"""
Code Sync - Pull prebuilt code and assets into a project

Synchronizes local directories with remote archives:
- Task list read from the project manifest (package.json)
- Downloads with redirect handling and authorization headers
- Checksum verification of downloaded archives
- Optional clean of the destination before extraction
"""

__version__ = "0.1.0"
__package_name__ = "code-sync"
