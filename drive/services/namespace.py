"""Namespace engine - folder tree semantics.

Owns every rule about the per-user folder tree: one-level listings, folder
contents, breadcrumb paths, renames, moves with cycle prevention, and
cascade deletion of whole subtrees together with their blobs.

Examples:
    >>> engine = NamespaceEngine(session, blobs)
    >>> docs = await engine.create_folder(user_id, "Docs")
    >>> await engine.get_path(docs.id, user_id)
    [<Folder(id=..., name='Docs', parent_id=None)>]

Tests:
    - tests/unit/test_namespace.py
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from drive.errors import InternalError, InvalidArgumentError, NotFoundError, WouldCreateCycleError
from drive.models import File, Folder
from drive.services import catalog
from drive.storage.service import BlobStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 256


@dataclass
class Listing:
    """Direct children of one folder (or of the root)."""

    folders: list[Folder] = field(default_factory=list)
    files: list[File] = field(default_factory=list)


@dataclass
class FolderContents:
    """A folder together with its immediate children."""

    folder: Folder
    files: list[File] = field(default_factory=list)
    subfolders: list[Folder] = field(default_factory=list)


@dataclass
class DeleteSummary:
    """Counts of what a delete removed."""

    folders: int = 0
    files: int = 0


def clean_name(name: str | None) -> str:
    """Strip a user-supplied name, rejecting empty results.

    Raises:
        InvalidArgumentError: If the name is missing or blank.
    """
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidArgumentError("Name is required")
    if "/" in cleaned or "\\" in cleaned:
        raise InvalidArgumentError("Name must not contain path separators")
    if len(cleaned) > 255:
        raise InvalidArgumentError("Name must be at most 255 characters")
    return cleaned


class NamespaceEngine:
    """Folder tree operations scoped to one owner per call.

    Attributes:
        session: Database session (caller commits).
        blobs: Blob store, used when deletes remove content.
        max_depth: Bound for ancestor walks and folder nesting.
    """

    def __init__(
        self,
        session: AsyncSession,
        blobs: BlobStore,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self.session = session
        self.blobs = blobs
        self.max_depth = max_depth

    # ---------- Lookups ----------

    async def require_folder(self, folder_id: str, owner_id: str) -> Folder:
        """Fetch an owned folder.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
        """
        folder = await catalog.find_owned_folder(self.session, folder_id, owner_id)
        if folder is None:
            raise NotFoundError("Folder not found")
        return folder

    async def require_file(self, file_id: str, owner_id: str) -> File:
        """Fetch an owned file.

        Raises:
            NotFoundError: If it does not exist or belongs to someone else.
        """
        record = await catalog.find_owned_file(self.session, file_id, owner_id)
        if record is None:
            raise NotFoundError("File not found")
        return record

    async def list_children(self, owner_id: str, parent_id: str | None = None) -> Listing:
        """List folders and files directly under ``parent_id`` (root when None).

        An unknown or foreign ``parent_id`` yields an empty listing, the same
        as an empty folder.
        """
        folders = await catalog.find_folders_by_owner_and_parent(
            self.session, owner_id, parent_id
        )
        files = await catalog.find_files_by_owner_and_folder(
            self.session, owner_id, parent_id
        )
        return Listing(folders=folders, files=files)

    async def get_contents(self, folder_id: str, owner_id: str) -> FolderContents:
        """Return an owned folder plus its immediate files and subfolders."""
        folder = await self.require_folder(folder_id, owner_id)
        files = await catalog.find_files_by_owner_and_folder(self.session, owner_id, folder.id)
        subfolders = await catalog.find_folders_by_owner_and_parent(
            self.session, owner_id, folder.id
        )
        return FolderContents(folder=folder, files=files, subfolders=subfolders)

    async def get_path(self, folder_id: str, owner_id: str) -> list[Folder]:
        """Breadcrumb chain from the root-level ancestor down to the folder itself.

        The walk stops at a repeated id or after ``max_depth`` steps, so a
        corrupted tree still yields a finite path.
        """
        folder = await self.require_folder(folder_id, owner_id)
        chain = [folder]
        seen = {folder.id}
        parent_id = folder.parent_id

        while parent_id is not None:
            if parent_id in seen or len(chain) >= self.max_depth:
                logger.warning(
                    "Stopped ancestor walk for folder %s at %s (cycle or depth limit)",
                    folder.id,
                    parent_id,
                )
                break
            parent = await catalog.find_owned_folder(self.session, parent_id, owner_id)
            if parent is None:
                break
            seen.add(parent.id)
            chain.append(parent)
            parent_id = parent.parent_id

        chain.reverse()
        return chain

    async def _ancestor_ids(self, folder: Folder) -> list[str]:
        """Ids from ``folder`` up to its root-level ancestor, inclusive.

        Raises:
            WouldCreateCycleError: If the existing chain already loops.
            InvalidArgumentError: If the chain is deeper than ``max_depth``.
        """
        ids = [folder.id]
        parent_id = folder.parent_id
        while parent_id is not None:
            if parent_id in ids:
                raise WouldCreateCycleError("Folder tree already contains a cycle")
            if len(ids) >= self.max_depth:
                raise InvalidArgumentError(
                    f"Folders cannot be nested deeper than {self.max_depth} levels"
                )
            ids.append(parent_id)
            parent = await catalog.find_folder(self.session, parent_id)
            if parent is None:
                break
            parent_id = parent.parent_id
        return ids

    def _check_depth(self, ancestors: list[str]) -> None:
        if len(ancestors) >= self.max_depth:
            raise InvalidArgumentError(
                f"Folders cannot be nested deeper than {self.max_depth} levels"
            )

    # ---------- Mutations ----------

    async def create_folder(
        self, owner_id: str, name: str, parent_id: str | None = None
    ) -> Folder:
        """Create a folder at the root or under an owned parent.

        Raises:
            InvalidArgumentError: If the name is empty or nesting is too deep.
            NotFoundError: If the parent is missing or owned by someone else.
        """
        cleaned = clean_name(name)
        if parent_id is not None:
            parent = await self.require_folder(parent_id, owner_id)
            self._check_depth(await self._ancestor_ids(parent))

        folder = await catalog.create_folder(self.session, cleaned, owner_id, parent_id)
        logger.info("Folder created: %s (owner=%s, parent=%s)", folder.id, owner_id, parent_id)
        return folder

    async def rename_folder(self, folder_id: str, owner_id: str, new_name: str) -> Folder:
        cleaned = clean_name(new_name)
        folder = await self.require_folder(folder_id, owner_id)
        return await catalog.update_name(self.session, folder, cleaned)

    async def rename_file(self, file_id: str, owner_id: str, new_name: str) -> File:
        cleaned = clean_name(new_name)
        record = await self.require_file(file_id, owner_id)
        return await catalog.update_name(self.session, record, cleaned)

    async def move_folder(
        self, folder_id: str, owner_id: str, new_parent_id: str | None
    ) -> Folder:
        """Re-parent an owned folder.

        Raises:
            NotFoundError: If the folder or the new parent is not owned.
            WouldCreateCycleError: If the new parent is the folder or one of its descendants.
        """
        folder = await self.require_folder(folder_id, owner_id)
        if new_parent_id is not None:
            new_parent = await self.require_folder(new_parent_id, owner_id)
            ancestors = await self._ancestor_ids(new_parent)
            if folder.id in ancestors:
                raise WouldCreateCycleError("Cannot move a folder into itself or its descendants")
            self._check_depth(ancestors)

        moved = await catalog.update_parent(self.session, folder, new_parent_id)
        logger.info("Folder moved: %s -> parent %s", folder.id, new_parent_id)
        return moved

    async def move_file(self, file_id: str, owner_id: str, folder_id: str | None) -> File:
        record = await self.require_file(file_id, owner_id)
        if folder_id is not None:
            await self.require_folder(folder_id, owner_id)
        return await catalog.update_folder_id(self.session, record, folder_id)

    async def delete_file(self, file_id: str, owner_id: str) -> None:
        """Delete an owned file: blob first, then the metadata row."""
        record = await self.require_file(file_id, owner_id)
        await self.blobs.delete(record.storage_key)
        await catalog.delete_file(self.session, record.id)
        logger.info("File deleted: %s (owner=%s)", record.id, owner_id)

    async def _collect_subtree(self, root: Folder) -> list[str]:
        """Ids of ``root`` and every descendant, each after its parent.

        Raises:
            InternalError: If the subtree loops back on itself or holds
                another user's folder. Nothing has been deleted at that point.
        """
        order: list[str] = []
        seen = {root.id}
        stack = [root.id]

        while stack:
            current = stack.pop()
            order.append(current)
            for child in await catalog.find_folders_by_parent(self.session, current):
                if child.id in seen:
                    logger.error(
                        "Cycle below folder %s: %s is reached again from %s",
                        root.id,
                        child.id,
                        current,
                    )
                    raise InternalError(f"Folder tree below {root.id} contains a cycle")
                if child.owner_id != root.owner_id:
                    raise InternalError(
                        f"Folder {child.id} is owned by a different user than its parent"
                    )
                seen.add(child.id)
                stack.append(child.id)

        return order

    async def delete_folder(self, folder_id: str, owner_id: str) -> DeleteSummary:
        """Delete an owned folder with its whole subtree.

        The subtree is collected first, then folders are removed deepest
        first. Within each folder the blobs go before the file rows, and the
        file rows before the folder row. Not atomic with respect to the blob
        store; see DeleteSummary for what was removed.
        """
        root = await self.require_folder(folder_id, owner_id)
        order = await self._collect_subtree(root)
        summary = DeleteSummary()

        for current in reversed(order):
            files = await catalog.find_files_by_owner_and_folder(self.session, owner_id, current)
            for record in files:
                await self.blobs.delete(record.storage_key)
            summary.files += await catalog.delete_files_by_folder(self.session, current, owner_id)
            summary.folders += await catalog.delete_folder(self.session, current)

        logger.info(
            "Folder %s deleted with %d folders and %d files (owner=%s)",
            root.id,
            summary.folders,
            summary.files,
            owner_id,
        )
        return summary
