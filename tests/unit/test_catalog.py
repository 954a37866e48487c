"""Tests for drive.services.catalog.

Covers:
    - User creation and lookup
    - Owner-scoped folder and file reads
    - Root-level (NULL parent) listings
    - Bulk and single deletes
"""

import pytest

from drive.services import catalog


async def _file(session, owner_id, name="a.txt", folder_id=None, file_id=None):
    file_id = file_id or f"{owner_id[:8]}-{name}".replace(".", "-")
    return await catalog.create_file(
        session,
        file_id=file_id,
        name=name,
        size=3,
        mime_type="text/plain",
        storage_key=f"{owner_id}/{file_id}-{name}",
        owner_id=owner_id,
        folder_id=folder_id,
    )


@pytest.mark.fast
class TestUsers:
    @pytest.mark.asyncio
    async def test_create_and_find(self, db_session):
        user = await catalog.create_user(db_session, "carol@example.com", "Carol", "hash")

        assert user.id
        assert (await catalog.find_user(db_session, user.id)).email == "carol@example.com"
        assert (await catalog.find_user_by_email(db_session, "carol@example.com")).id == user.id
        assert await catalog.find_user_by_email(db_session, "nobody@example.com") is None


@pytest.mark.fast
class TestFolders:
    @pytest.mark.asyncio
    async def test_owner_scoped_lookup(self, db_session, alice, bob):
        folder = await catalog.create_folder(db_session, "Docs", alice.id)

        assert await catalog.find_owned_folder(db_session, folder.id, alice.id) is folder
        assert await catalog.find_owned_folder(db_session, folder.id, bob.id) is None
        assert await catalog.find_folder(db_session, folder.id) is folder

    @pytest.mark.asyncio
    async def test_root_listing_uses_null_parent(self, db_session, alice, bob):
        docs = await catalog.create_folder(db_session, "Docs", alice.id)
        await catalog.create_folder(db_session, "Archive", alice.id)
        await catalog.create_folder(db_session, "Inner", alice.id, docs.id)
        await catalog.create_folder(db_session, "Bobs", bob.id)

        root = await catalog.find_folders_by_owner_and_parent(db_session, alice.id, None)
        assert [f.name for f in root] == ["Archive", "Docs"]

        inner = await catalog.find_folders_by_owner_and_parent(db_session, alice.id, docs.id)
        assert [f.name for f in inner] == ["Inner"]

    @pytest.mark.asyncio
    async def test_find_by_parent_ignores_owner(self, db_session, alice):
        docs = await catalog.create_folder(db_session, "Docs", alice.id)
        child = await catalog.create_folder(db_session, "Child", alice.id, docs.id)

        assert [f.id for f in await catalog.find_folders_by_parent(db_session, docs.id)] == [child.id]

    @pytest.mark.asyncio
    async def test_update_parent_and_name(self, db_session, alice):
        a = await catalog.create_folder(db_session, "A", alice.id)
        b = await catalog.create_folder(db_session, "B", alice.id)

        await catalog.update_parent(db_session, b, a.id)
        await catalog.update_name(db_session, b, "Renamed")

        reloaded = await catalog.find_folder(db_session, b.id)
        assert reloaded.parent_id == a.id
        assert reloaded.name == "Renamed"

    @pytest.mark.asyncio
    async def test_delete_folder(self, db_session, alice):
        folder = await catalog.create_folder(db_session, "Tmp", alice.id)

        assert await catalog.delete_folder(db_session, folder.id) == 1
        assert await catalog.find_folder(db_session, folder.id) is None
        assert await catalog.delete_folder(db_session, folder.id) == 0


@pytest.mark.fast
class TestFiles:
    @pytest.mark.asyncio
    async def test_owner_scoped_lookup(self, db_session, alice, bob):
        record = await _file(db_session, alice.id)

        assert await catalog.find_owned_file(db_session, record.id, alice.id) is record
        assert await catalog.find_owned_file(db_session, record.id, bob.id) is None
        assert await catalog.find_file(db_session, record.id) is record

    @pytest.mark.asyncio
    async def test_listing_by_folder(self, db_session, alice):
        docs = await catalog.create_folder(db_session, "Docs", alice.id)
        await _file(db_session, alice.id, "root.txt")
        await _file(db_session, alice.id, "b.txt", docs.id)
        await _file(db_session, alice.id, "a.txt", docs.id)

        root = await catalog.find_files_by_owner_and_folder(db_session, alice.id, None)
        assert [f.name for f in root] == ["root.txt"]

        inside = await catalog.find_files_by_owner_and_folder(db_session, alice.id, docs.id)
        assert [f.name for f in inside] == ["a.txt", "b.txt"]

    @pytest.mark.asyncio
    async def test_delete_files_by_folder(self, db_session, alice):
        docs = await catalog.create_folder(db_session, "Docs", alice.id)
        await _file(db_session, alice.id, "a.txt", docs.id)
        await _file(db_session, alice.id, "b.txt", docs.id)
        keep = await _file(db_session, alice.id, "c.txt")

        assert await catalog.delete_files_by_folder(db_session, docs.id, alice.id) == 2
        assert await catalog.find_files_by_owner_and_folder(db_session, alice.id, docs.id) == []
        assert await catalog.find_file(db_session, keep.id) is not None

    @pytest.mark.asyncio
    async def test_move_and_delete(self, db_session, alice):
        docs = await catalog.create_folder(db_session, "Docs", alice.id)
        record = await _file(db_session, alice.id)

        await catalog.update_folder_id(db_session, record, docs.id)
        assert (await catalog.find_file(db_session, record.id)).folder_id == docs.id

        assert await catalog.delete_file(db_session, record.id) == 1
        assert await catalog.find_file(db_session, record.id) is None
