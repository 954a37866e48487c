"""Metadata catalog - persistent records for users, folders and files.

Thin async query layer over the SQLAlchemy models. Caller-facing reads take
an explicit ``owner_id`` so another user's records are never returned.
Writes flush but do not commit; the caller's session decides the
transaction boundary.
"""

from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from drive.models import File, Folder, User

logger = logging.getLogger(__name__)


# ---------- Users ----------


async def find_user(session: AsyncSession, user_id: str) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def find_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession, email: str, name: str, password_hash: str
) -> User:
    user = User(email=email, name=name, password_hash=password_hash)
    session.add(user)
    await session.flush()
    return user


# ---------- Folders ----------


async def find_folder(session: AsyncSession, folder_id: str) -> Folder | None:
    """Fetch a folder by id regardless of owner. Internal use only."""
    result = await session.execute(select(Folder).where(Folder.id == folder_id))
    return result.scalar_one_or_none()


async def find_owned_folder(
    session: AsyncSession, folder_id: str, owner_id: str
) -> Folder | None:
    """Fetch a folder only if ``owner_id`` owns it."""
    result = await session.execute(
        select(Folder).where(Folder.id == folder_id, Folder.owner_id == owner_id)
    )
    return result.scalar_one_or_none()


async def find_folders_by_owner_and_parent(
    session: AsyncSession, owner_id: str, parent_id: str | None
) -> list[Folder]:
    """Direct child folders of ``parent_id`` (root when None) owned by ``owner_id``."""
    stmt = select(Folder).where(Folder.owner_id == owner_id)
    if parent_id is None:
        stmt = stmt.where(Folder.parent_id.is_(None))
    else:
        stmt = stmt.where(Folder.parent_id == parent_id)
    result = await session.execute(stmt.order_by(Folder.name, Folder.id))
    return list(result.scalars().all())


async def find_folders_by_parent(session: AsyncSession, parent_id: str) -> list[Folder]:
    """Direct child folders of ``parent_id`` for any owner.

    Only used while cascading below a folder whose ownership was already
    checked.
    """
    result = await session.execute(
        select(Folder).where(Folder.parent_id == parent_id).order_by(Folder.id)
    )
    return list(result.scalars().all())


async def create_folder(
    session: AsyncSession, name: str, owner_id: str, parent_id: str | None = None
) -> Folder:
    folder = Folder(name=name, owner_id=owner_id, parent_id=parent_id)
    session.add(folder)
    await session.flush()
    return folder


async def delete_folder(session: AsyncSession, folder_id: str) -> int:
    """Delete one folder row. Returns the number of rows removed."""
    result = await session.execute(delete(Folder).where(Folder.id == folder_id))
    return result.rowcount or 0


# ---------- Files ----------


async def find_file(session: AsyncSession, file_id: str) -> File | None:
    """Fetch a file by id regardless of owner."""
    result = await session.execute(select(File).where(File.id == file_id))
    return result.scalar_one_or_none()


async def find_owned_file(
    session: AsyncSession, file_id: str, owner_id: str
) -> File | None:
    """Fetch a file only if ``owner_id`` owns it."""
    result = await session.execute(
        select(File).where(File.id == file_id, File.owner_id == owner_id)
    )
    return result.scalar_one_or_none()


async def find_files_by_owner_and_folder(
    session: AsyncSession, owner_id: str, folder_id: str | None
) -> list[File]:
    """Files directly inside ``folder_id`` (root when None) owned by ``owner_id``."""
    stmt = select(File).where(File.owner_id == owner_id)
    if folder_id is None:
        stmt = stmt.where(File.folder_id.is_(None))
    else:
        stmt = stmt.where(File.folder_id == folder_id)
    result = await session.execute(stmt.order_by(File.name, File.id))
    return list(result.scalars().all())


async def create_file(
    session: AsyncSession,
    *,
    file_id: str,
    name: str,
    size: int,
    mime_type: str,
    storage_key: str,
    owner_id: str,
    folder_id: str | None = None,
) -> File:
    record = File(
        id=file_id,
        name=name,
        size=size,
        mime_type=mime_type,
        storage_key=storage_key,
        owner_id=owner_id,
        folder_id=folder_id,
    )
    session.add(record)
    await session.flush()
    return record


async def delete_file(session: AsyncSession, file_id: str) -> int:
    """Delete one file row. Returns the number of rows removed."""
    result = await session.execute(delete(File).where(File.id == file_id))
    return result.rowcount or 0


async def delete_files_by_folder(
    session: AsyncSession, folder_id: str, owner_id: str
) -> int:
    """Delete every file row directly inside a folder. Returns the count removed."""
    result = await session.execute(
        delete(File).where(File.folder_id == folder_id, File.owner_id == owner_id)
    )
    return result.rowcount or 0


# ---------- Shared updates ----------


async def update_name(session: AsyncSession, record: Folder | File, name: str) -> Folder | File:
    """Rename a folder or file in place."""
    record.name = name
    await session.flush()
    return record


async def update_parent(
    session: AsyncSession, folder: Folder, parent_id: str | None
) -> Folder:
    """Re-attach a folder under another parent (None for root)."""
    folder.parent_id = parent_id
    await session.flush()
    return folder


async def update_folder_id(
    session: AsyncSession, record: File, folder_id: str | None
) -> File:
    """Move a file into another folder (None for root)."""
    record.folder_id = folder_id
    await session.flush()
    return record
