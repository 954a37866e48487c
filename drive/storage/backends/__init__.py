"""Storage backends for blob I/O."""

from drive.storage.backends.base import StorageBackend
from drive.storage.backends.local import LocalStorageBackend

__all__ = ["StorageBackend", "LocalStorageBackend"]
