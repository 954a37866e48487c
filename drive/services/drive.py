"""Storage facade - the public contract of the file-storage core.

Combines the metadata catalog, the namespace engine, the blob store and the
content token service into the operations the HTTP layer calls: upload,
list, rename, move, delete, fetch content and issue share links.

Examples:
    >>> service = DriveService(session, blobs)
    >>> record = await service.upload(user_id, "a.txt", "text/plain", b"hi")
    >>> content = await service.get_content_for_owner(user_id, record.id)
    >>> content.data
    b'hi'

Tests:
    - tests/unit/test_drive_service.py
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from drive.auth.tokens import TokenPurpose, issue_content_token, require_content_claims
from drive.config import Settings, get_settings
from drive.errors import InvalidArgumentError, NotFoundError, UnauthorizedError
from drive.models import File, Folder
from drive.services import catalog
from drive.services.namespace import (
    DeleteSummary,
    FolderContents,
    Listing,
    NamespaceEngine,
    clean_name,
)
from drive.storage.service import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass
class FileContent:
    """Bytes of a file plus what a client needs to present them."""

    data: bytes
    mime_type: str
    name: str


@dataclass
class IssuedToken:
    """A freshly minted content token and the file it unlocks."""

    token: str
    expires_at: datetime
    file: File
    purpose: TokenPurpose


class DriveService:
    """Main orchestrator for file and folder operations.

    Attributes:
        session: Database session for the current request.
        blobs: Blob store holding file content.
        settings: Application settings.
        namespace: Folder tree engine bound to the same session and store.
    """

    def __init__(
        self,
        session: AsyncSession,
        blobs: BlobStore,
        settings: Settings | None = None,
    ) -> None:
        self.session = session
        self.blobs = blobs
        self.settings = settings or get_settings()
        self.namespace = NamespaceEngine(
            session, blobs, max_depth=self.settings.MAX_FOLDER_DEPTH
        )

    # ---------- Files ----------

    def check_upload_size(self, size: int | None) -> None:
        """Reject a payload larger than the configured upload limit.

        ``None`` means the size is not known yet and passes.
        """
        if size is not None and size > self.settings.MAX_UPLOAD_BYTES:
            raise InvalidArgumentError(
                f"File exceeds the {self.settings.MAX_UPLOAD_BYTES} byte upload limit"
            )

    async def upload(
        self,
        owner_id: str,
        original_name: str,
        mime_type: str | None,
        data: bytes,
        folder_id: str | None = None,
    ) -> File:
        """Store a new file for ``owner_id``.

        The target folder must belong to the uploader. The blob is written
        first; if recording metadata then fails the blob is removed again
        on a best-effort basis.

        Raises:
            InvalidArgumentError: On an empty name or an oversized payload.
            NotFoundError: If ``folder_id`` is not an owned folder.
        """
        name = clean_name(original_name)
        self.check_upload_size(len(data))
        if folder_id is not None:
            await self.namespace.require_folder(folder_id, owner_id)

        file_id = str(uuid.uuid4())
        storage_key = await self.blobs.put(owner_id, file_id, name, data)

        try:
            record = await catalog.create_file(
                self.session,
                file_id=file_id,
                name=name,
                size=len(data),
                mime_type=mime_type or DEFAULT_MIME_TYPE,
                storage_key=storage_key,
                owner_id=owner_id,
                folder_id=folder_id,
            )
        except Exception:
            logger.warning("Recording metadata failed, removing blob %s", storage_key)
            try:
                await self.blobs.delete(storage_key)
            except Exception:
                logger.exception("Rollback of blob %s failed, blob is orphaned", storage_key)
            raise

        logger.info(
            "File uploaded: %s (%d bytes, owner=%s, folder=%s)",
            record.id,
            record.size,
            owner_id,
            folder_id,
        )
        return record

    async def list(self, owner_id: str, folder_id: str | None = None) -> Listing:
        """Folders and files directly under ``folder_id`` (root when None)."""
        return await self.namespace.list_children(owner_id, folder_id)

    async def get_metadata(self, owner_id: str, file_id: str) -> File:
        return await self.namespace.require_file(file_id, owner_id)

    async def _read(self, record: File) -> FileContent:
        data = await self.blobs.get(record.storage_key)
        return FileContent(data=data, mime_type=record.mime_type, name=record.name)

    async def get_content_for_owner(self, owner_id: str, file_id: str) -> FileContent:
        """Ownership-gated content read.

        Raises:
            NotFoundError: If the file is absent or not owned.
            ContentNotFoundError: If the metadata has no bytes behind it.
        """
        record = await self.namespace.require_file(file_id, owner_id)
        return await self._read(record)

    async def get_content_with_token(
        self, file_id: str, token: str, purpose: TokenPurpose
    ) -> FileContent:
        """Token-gated content read.

        The token must be valid, issued for this file and this purpose, and
        its subject must still own the file.

        Raises:
            UnauthorizedError: If the token does not grant this read.
            NotFoundError: If the file no longer exists for the token's subject.
        """
        claims = require_content_claims(token, file_id, purpose)
        return await self.get_content_for_owner(claims.user_id, file_id)

    async def get_content_public(self, file_id: str) -> FileContent:
        """Content read by bare file id, with no token and no session.

        Only served when PUBLIC_PREVIEW_ENABLED is set; otherwise the caller
        must use a preview or download token.

        Raises:
            UnauthorizedError: If public previews are disabled.
            NotFoundError: If the file does not exist.
        """
        if not self.settings.PUBLIC_PREVIEW_ENABLED:
            raise UnauthorizedError("A session or a content token is required")
        record = await catalog.find_file(self.session, file_id)
        if record is None:
            raise NotFoundError("File not found")
        logger.info("Public content read of file %s", file_id)
        return await self._read(record)

    async def issue_access_token(
        self,
        owner_id: str,
        file_id: str,
        purpose: TokenPurpose = TokenPurpose.FILE_DOWNLOAD,
    ) -> IssuedToken:
        """Mint a short-lived content token for an owned file.

        Raises:
            NotFoundError: If the file is absent or not owned.
        """
        record = await self.namespace.require_file(file_id, owner_id)
        token, expires_at = issue_content_token(owner_id, record.id, purpose)
        return IssuedToken(token=token, expires_at=expires_at, file=record, purpose=purpose)

    async def rename_file(self, owner_id: str, file_id: str, new_name: str) -> File:
        return await self.namespace.rename_file(file_id, owner_id, new_name)

    async def move_file(self, owner_id: str, file_id: str, folder_id: str | None) -> File:
        return await self.namespace.move_file(file_id, owner_id, folder_id)

    async def delete_file(self, owner_id: str, file_id: str) -> None:
        await self.namespace.delete_file(file_id, owner_id)

    # ---------- Folders ----------

    async def create_folder(
        self, owner_id: str, name: str, parent_id: str | None = None
    ) -> Folder:
        return await self.namespace.create_folder(owner_id, name, parent_id)

    async def get_folder_contents(self, owner_id: str, folder_id: str) -> FolderContents:
        return await self.namespace.get_contents(folder_id, owner_id)

    async def get_folder_path(self, owner_id: str, folder_id: str) -> list[Folder]:
        return await self.namespace.get_path(folder_id, owner_id)

    async def rename_folder(self, owner_id: str, folder_id: str, new_name: str) -> Folder:
        return await self.namespace.rename_folder(folder_id, owner_id, new_name)

    async def move_folder(
        self, owner_id: str, folder_id: str, new_parent_id: str | None
    ) -> Folder:
        return await self.namespace.move_folder(folder_id, owner_id, new_parent_id)

    async def delete_folder(self, owner_id: str, folder_id: str) -> DeleteSummary:
        return await self.namespace.delete_folder(folder_id, owner_id)
