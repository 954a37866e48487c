"""Integration tests for the folders API.

Tests:
    - Create and list
    - Contents and breadcrumb path
    - Rename and move (with cycle rejection)
    - Cascade delete
    - Cross-owner isolation
"""

import pytest


async def _folder(client, account, name, parent_id=None):
    response = await client.post(
        "/api/v1/folders",
        json={"name": name, "parent_id": parent_id},
        headers=account["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.integration
class TestCreateAndRead:
    @pytest.mark.asyncio
    async def test_create_root_and_child(self, async_client, register):
        alice = await register("alice@example.com")
        docs = await _folder(async_client, alice, "Docs")
        child = await _folder(async_client, alice, "2024", docs["id"])

        assert docs["parent_id"] is None
        assert child["parent_id"] == docs["id"]
        assert docs["owner_id"] == alice["user"]["id"]

        root = (await async_client.get("/api/v1/folders", headers=alice["headers"])).json()
        assert [f["name"] for f in root] == ["Docs"]

        inner = (
            await async_client.get(
                "/api/v1/folders", params={"parent_id": docs["id"]}, headers=alice["headers"]
            )
        ).json()
        assert [f["id"] for f in inner] == [child["id"]]

    @pytest.mark.asyncio
    async def test_create_empty_name(self, async_client, register):
        alice = await register("alice@example.com")
        response = await async_client.post(
            "/api/v1/folders", json={"name": "   "}, headers=alice["headers"]
        )
        assert response.status_code == 400
        assert response.json()["code"] == "invalid_argument"

    @pytest.mark.asyncio
    async def test_contents(self, async_client, register):
        alice = await register("alice@example.com")
        docs = await _folder(async_client, alice, "Docs")
        sub = await _folder(async_client, alice, "Sub", docs["id"])
        await async_client.post(
            "/api/v1/files/upload",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"folder_id": docs["id"]},
            headers=alice["headers"],
        )

        response = await async_client.get(
            f"/api/v1/folders/{docs['id']}/contents", headers=alice["headers"]
        )
        assert response.status_code == 200
        data = response.json()
        assert data["folder"]["id"] == docs["id"]
        assert [f["id"] for f in data["subfolders"]] == [sub["id"]]
        assert [f["name"] for f in data["files"]] == ["a.txt"]

    @pytest.mark.asyncio
    async def test_path(self, async_client, register):
        alice = await register("alice@example.com")
        a = await _folder(async_client, alice, "A")
        b = await _folder(async_client, alice, "B", a["id"])
        c = await _folder(async_client, alice, "C", b["id"])

        response = await async_client.get(f"/api/v1/folders/{c['id']}/path", headers=alice["headers"])
        assert [f["name"] for f in response.json()] == ["A", "B", "C"]


@pytest.mark.integration
class TestRenameAndMove:
    @pytest.mark.asyncio
    async def test_rename(self, async_client, register):
        alice = await register("alice@example.com")
        docs = await _folder(async_client, alice, "Docs")

        response = await async_client.patch(
            f"/api/v1/folders/{docs['id']}/rename", json={"name": "Papers"}, headers=alice["headers"]
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Papers"

    @pytest.mark.asyncio
    async def test_move(self, async_client, register):
        alice = await register("alice@example.com")
        a = await _folder(async_client, alice, "A")
        b = await _folder(async_client, alice, "B")

        response = await async_client.patch(
            f"/api/v1/folders/{b['id']}/move", json={"parent_id": a["id"]}, headers=alice["headers"]
        )
        assert response.status_code == 200
        assert response.json()["parent_id"] == a["id"]

        response = await async_client.patch(
            f"/api/v1/folders/{b['id']}/move", json={"parent_id": None}, headers=alice["headers"]
        )
        assert response.json()["parent_id"] is None

    @pytest.mark.asyncio
    async def test_move_into_descendant(self, async_client, register):
        alice = await register("alice@example.com")
        a = await _folder(async_client, alice, "A")
        b = await _folder(async_client, alice, "B", a["id"])

        response = await async_client.patch(
            f"/api/v1/folders/{a['id']}/move", json={"parent_id": b["id"]}, headers=alice["headers"]
        )
        assert response.status_code == 400
        assert response.json()["code"] == "would_create_cycle"

        path = (
            await async_client.get(f"/api/v1/folders/{b['id']}/path", headers=alice["headers"])
        ).json()
        assert [f["name"] for f in path] == ["A", "B"]


@pytest.mark.integration
class TestDelete:
    @pytest.mark.asyncio
    async def test_cascade(self, async_client, register, blobs):
        alice = await register("alice@example.com")
        docs = await _folder(async_client, alice, "Docs")
        y2024 = await _folder(async_client, alice, "2024", docs["id"])
        upload = await async_client.post(
            "/api/v1/files/upload",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"folder_id": y2024["id"]},
            headers=alice["headers"],
        )
        file_id = upload.json()["id"]

        response = await async_client.delete(f"/api/v1/folders/{docs['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json() == {
            "message": "Folder and all contents deleted successfully",
            "folders_deleted": 2,
            "files_deleted": 1,
        }

        root = (await async_client.get("/api/v1/files", headers=alice["headers"])).json()
        assert root == {"folders": [], "files": []}
        assert not await blobs.exists(f"{alice['user']['id']}/{file_id}-a.txt")

        response = await async_client.get(f"/api/v1/files/{file_id}", headers=alice["headers"])
        assert response.status_code == 404


@pytest.mark.integration
class TestIsolation:
    @pytest.mark.asyncio
    async def test_other_owner(self, async_client, register):
        alice = await register("alice@example.com")
        bob = await register("bob@example.com")
        shared = await _folder(async_client, alice, "Shared")

        response = await async_client.patch(
            f"/api/v1/folders/{shared['id']}/rename", json={"name": "Mine"}, headers=bob["headers"]
        )
        assert response.status_code == 404

        for path in (f"/api/v1/folders/{shared['id']}/contents", f"/api/v1/folders/{shared['id']}/path"):
            assert (await async_client.get(path, headers=bob["headers"])).status_code == 404

        response = await async_client.delete(f"/api/v1/folders/{shared['id']}", headers=bob["headers"])
        assert response.status_code == 404

        response = await async_client.post(
            "/api/v1/folders", json={"name": "Inside", "parent_id": shared["id"]}, headers=bob["headers"]
        )
        assert response.status_code == 404

        listing = (await async_client.get("/api/v1/folders", headers=bob["headers"])).json()
        assert listing == []
