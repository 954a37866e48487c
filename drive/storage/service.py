"""Blob store - byte storage keyed by owner-namespaced storage keys.

Handles writing, reading and deleting the raw content of files. Metadata
lives in the catalog; this module only knows keys and bytes.

Examples:
    >>> from drive.storage import BlobStore, BlobStoreConfig
    >>> blobs = BlobStore(config=BlobStoreConfig(root="/srv/drive"))
    >>> key = await blobs.put(user_id, file_id, "a.txt", b"hello")
    >>> await blobs.get(key)
    b'hello'
"""

from __future__ import annotations

import logging

from drive.errors import ContentNotFoundError, InternalError
from drive.storage.backends.base import StorageBackend
from drive.storage.backends.local import LocalStorageBackend
from drive.storage.config import BlobStoreConfig
from drive.storage.keys import build_storage_key, validate_storage_key

logger = logging.getLogger(__name__)


class BlobStore:
    """Owner-namespaced blob storage.

    Attributes:
        config: Blob store configuration (carries the storage root).
        backend: Storage backend for I/O.
    """

    def __init__(self, config: BlobStoreConfig, backend: StorageBackend | None = None) -> None:
        self.config = config
        self.backend = backend or LocalStorageBackend()

    @classmethod
    def from_config(cls, config: BlobStoreConfig) -> "BlobStore":
        """Create a BlobStore from config."""
        return cls(config=config, backend=LocalStorageBackend())

    def _path(self, storage_key: str) -> str:
        validate_storage_key(storage_key)
        return f"{self.config.root.rstrip('/')}/{storage_key}"

    async def put(
        self,
        owner_id: str,
        object_id: str,
        original_name: str,
        data: bytes,
    ) -> str:
        """Store bytes for a new object.

        Args:
            owner_id: Owning user's id.
            object_id: Unique object id (the file id).
            original_name: Client filename, folded into the key.
            data: Full content.

        Returns:
            The storage key to record in the catalog.

        Raises:
            InternalError: If the backend write fails.
        """
        storage_key = build_storage_key(owner_id, object_id, original_name)
        try:
            await self.backend.write_file(self._path(storage_key), data)
        except OSError as e:
            logger.exception("Failed to write blob %s", storage_key)
            raise InternalError(f"Could not store content: {e}") from e
        logger.info("Blob written: %s (%d bytes)", storage_key, len(data))
        return storage_key

    async def get(self, storage_key: str) -> bytes:
        """Read the bytes stored under a key.

        Raises:
            ContentNotFoundError: If the key has no bytes behind it.
            InternalError: If the backend read fails for another reason.
        """
        path = self._path(storage_key)
        try:
            return await self.backend.read_file(path)
        except FileNotFoundError as e:
            logger.error("Blob missing for storage key %s", storage_key)
            raise ContentNotFoundError("File content not found") from e
        except OSError as e:
            logger.exception("Failed to read blob %s", storage_key)
            raise InternalError(f"Could not read content: {e}") from e

    async def delete(self, storage_key: str) -> None:
        """Delete the bytes stored under a key. Deleting a missing blob is a no-op.

        Raises:
            InternalError: If the backend delete fails.
        """
        path = self._path(storage_key)
        try:
            removed = await self.backend.delete_file(path)
        except OSError as e:
            logger.exception("Failed to delete blob %s", storage_key)
            raise InternalError(f"Could not delete content: {e}") from e
        if removed:
            logger.info("Blob deleted: %s", storage_key)
        else:
            logger.debug("Blob already absent: %s", storage_key)

    async def exists(self, storage_key: str) -> bool:
        """Check whether bytes are stored under a key."""
        return await self.backend.exists(self._path(storage_key))
