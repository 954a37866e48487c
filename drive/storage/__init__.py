"""Blob storage package for Drive.

Stores the raw bytes of files under owner-namespaced storage keys.

Examples:
    >>> from drive.storage import BlobStore, BlobStoreConfig
    >>> blobs = BlobStore(config=BlobStoreConfig(root="./uploads"))
    >>> key = await blobs.put(owner_id, file_id, "a.txt", b"hello")
"""

from drive.storage.config import BlobStoreConfig
from drive.storage.keys import build_storage_key, owner_of_key, sanitize_filename, validate_storage_key
from drive.storage.service import BlobStore

__all__ = [
    "BlobStore",
    "BlobStoreConfig",
    "build_storage_key",
    "owner_of_key",
    "sanitize_filename",
    "validate_storage_key",
]
