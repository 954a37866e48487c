"""Local filesystem storage backend using pathlib."""

from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

from drive.storage.backends.base import StorageBackend


def _write_atomic(p: Path, data: bytes) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=p.parent, prefix=".upload-")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
        os.replace(tmp_name, p)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _unlink(p: Path) -> bool:
    try:
        p.unlink()
    except FileNotFoundError:
        return False
    return True


class LocalStorageBackend(StorageBackend):
    """Pathlib-based local filesystem storage backend.

    Blocking calls run in a worker thread so request handlers stay responsive.
    Writes go through a temporary file and ``os.replace`` so a reader never
    sees a half-written blob.
    """

    async def write_file(self, path: str, data: bytes) -> None:
        """Write binary data to a local file."""
        await asyncio.to_thread(_write_atomic, Path(path), data)

    async def read_file(self, path: str) -> bytes:
        """Read binary data from a local file."""
        return await asyncio.to_thread(Path(path).read_bytes)

    async def delete_file(self, path: str) -> bool:
        """Delete a local file if present."""
        return await asyncio.to_thread(_unlink, Path(path))

    async def exists(self, path: str) -> bool:
        """Check if a local path exists."""
        return await asyncio.to_thread(Path(path).is_file)
