"""Abstract base class for storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract storage backend for blob I/O.

    Implementations must handle writing, reading and deleting single
    objects, and checking existence.
    """

    @abstractmethod
    async def write_file(self, path: str, data: bytes) -> None:
        """Write binary data to a file, replacing any previous content.

        Args:
            path: Full file path.
            data: Binary data to write.
        """

    @abstractmethod
    async def read_file(self, path: str) -> bytes:
        """Read a file's binary content.

        Args:
            path: Full file path.

        Returns:
            The stored bytes.

        Raises:
            FileNotFoundError: If nothing is stored at ``path``.
        """

    @abstractmethod
    async def delete_file(self, path: str) -> bool:
        """Delete a file. Missing files are not an error.

        Args:
            path: Full file path.

        Returns:
            True if something was removed.
        """

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if a path exists.

        Args:
            path: Path to check.

        Returns:
            True if the path exists.
        """
