"""
RecipeShare Backend - HTTP API Tests
=====================================

What:  End-to-end tests through the FastAPI app: real routing, real SQLite
       file per test, real files in a temporary image root.
How:   httpx AsyncClient over ASGITransport (see conftest.test_client).
"""

import re
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from recipeshare.exceptions import FileError
from recipeshare.services.file_service import file_service
from recipeshare.services.validation import BODY_JSON_MESSAGE, BODY_OBJECT_MESSAGE

GENERATED_JPG = re.compile(r"^\d+-\d+\.jpg$")


async def _add_recipe(client, image_bytes, title="Soup", recipe="Boil water", filename="soup.jpg"):
    return await client.post(
        "/add-recipe",
        data={"title": title, "recipe": recipe},
        files={"thumbnail": (filename, image_bytes, "image/jpeg")},
    )


def _stored_files(temp_storage):
    return sorted(p.name for p in (temp_storage / "thumbnail").iterdir())


class TestAddRecipe:
    """Tests for POST /add-recipe."""

    @pytest.mark.asyncio
    async def test_submit_soup(self, test_client, temp_storage, sample_image_bytes):
        """A valid submission answers 201 and stores the upload under a generated name."""
        response = await _add_recipe(test_client, sample_image_bytes)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Recipe submitted successfully"
        recipe = body["recipe"]
        assert recipe["id"] == 1
        assert recipe["title"] == "Soup"
        assert recipe["recipe"] == "Boil water"
        assert recipe["thumbnail"] != "soup.jpg"
        assert GENERATED_JPG.match(recipe["thumbnail"])
        assert recipe["timestamp"]

        stored = temp_storage / "thumbnail" / recipe["thumbnail"]
        assert stored.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_read_back_matches_submission(self, test_client, sample_image_bytes):
        """The listed recipe equals the one returned on creation."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        response = await test_client.get("/get-recipes")

        assert response.status_code == 200
        assert response.json() == [created]

    @pytest.mark.asyncio
    async def test_missing_title(self, test_client, temp_storage, sample_image_bytes):
        """A missing title is a 400 and nothing is written to disk."""
        response = await test_client.post(
            "/add-recipe",
            data={"recipe": "Boil water"},
            files={"thumbnail": ("soup.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 400
        assert response.json() == {"title": "title is a required field"}
        # Rejected before the upload was written
        assert _stored_files(temp_storage) == []

    @pytest.mark.asyncio
    async def test_missing_thumbnail(self, test_client):
        """No file part means thumbnail is reported missing."""
        response = await test_client.post(
            "/add-recipe", data={"title": "Soup", "recipe": "Boil water"}
        )

        assert response.status_code == 400
        assert response.json() == {"thumbnail": "thumbnail is a required field"}

    @pytest.mark.asyncio
    async def test_disallowed_image_type(self, test_client, temp_storage):
        """A .gif upload is rejected under imgType before it is stored."""
        response = await _add_recipe(test_client, b"GIF89a", filename="soup.gif")

        assert response.status_code == 400
        assert "imgType" in response.json()
        assert _stored_files(temp_storage) == []

    @pytest.mark.asyncio
    async def test_all_fields_missing(self, test_client):
        """An empty form reports every required field."""
        response = await test_client.post("/add-recipe", data={})

        assert response.status_code == 400
        assert set(response.json()) == {"title", "recipe", "thumbnail"}

    @pytest.mark.asyncio
    async def test_thumbnail_sent_as_text(self, test_client, temp_storage):
        """A thumbnail text field instead of a file is a 400 under thumbnail."""
        response = await test_client.post(
            "/add-recipe",
            data={"title": "Soup", "recipe": "Boil water", "thumbnail": "soup.jpg"},
        )

        assert response.status_code == 400
        assert "thumbnail" in response.json()
        assert _stored_files(temp_storage) == []

    @pytest.mark.asyncio
    async def test_reread_failure_after_insert_keeps_file(
        self, test_client, temp_storage, sample_image_bytes
    ):
        """A stored recipe keeps its thumbnail on disk even if re-reading the row fails."""
        failure = OperationalError("SELECT", {}, Exception("disk I/O error"))
        with patch.object(AsyncSession, "refresh", AsyncMock(side_effect=failure)):
            response = await _add_recipe(test_client, sample_image_bytes)

        assert response.status_code == 201
        listed = (await test_client.get("/get-recipes")).json()
        assert [r["title"] for r in listed] == ["Soup"]
        assert _stored_files(temp_storage) == [listed[0]["thumbnail"]]


class TestGetRecipes:
    """Tests for GET /get-recipes."""

    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        """No recipes lists as an empty array."""
        response = await test_client.get("/get-recipes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_insertion_order(self, test_client, sample_image_bytes):
        """Recipes are listed in the order they were added."""
        await _add_recipe(test_client, sample_image_bytes, title="Soup")
        await _add_recipe(test_client, sample_image_bytes, title="Toast")

        response = await test_client.get("/get-recipes")

        assert [r["title"] for r in response.json()] == ["Soup", "Toast"]


class TestDeleteRecipe:
    """Tests for POST /delete-recipe."""

    @pytest.mark.asyncio
    async def test_delete_existing(self, test_client, temp_storage, sample_image_bytes):
        """Deleting removes both the row and the thumbnail file."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        response = await test_client.post("/delete-recipe", json={"id": created["id"]})

        assert response.status_code == 200
        assert response.json() == {"message": "Recipe deleted successfully", "id": created["id"]}
        assert (await test_client.get("/get-recipes")).json() == []
        assert not (temp_storage / "thumbnail" / created["thumbnail"]).exists()

    @pytest.mark.asyncio
    async def test_delete_nonexistent(self, test_client):
        """An unknown id is a 404 and no file is touched."""
        with patch.object(file_service, "delete_file", AsyncMock()) as delete_file:
            response = await test_client.post("/delete-recipe", json={"id": 999})

        assert response.status_code == 404
        assert response.json()["error"] == "Recipe not found"
        delete_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_missing_id(self, test_client):
        """A body without id is a 400."""
        response = await test_client.post("/delete-recipe", json={})

        assert response.status_code == 400
        assert "id" in response.json()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, True, False])
    async def test_delete_falsy_or_boolean_id(self, test_client, sample_image_bytes, value):
        """0 and booleans are not ids, even when recipe 1 exists."""
        await _add_recipe(test_client, sample_image_bytes)

        response = await test_client.post("/delete-recipe", json={"id": value})

        assert response.status_code == 400
        assert response.json() == {"id": "id is a required field"}
        assert len((await test_client.get("/get-recipes")).json()) == 1

    @pytest.mark.asyncio
    async def test_delete_body_not_an_object(self, test_client):
        """A JSON array body is a 400 keyed `body`."""
        response = await test_client.post("/delete-recipe", json=[1])

        assert response.status_code == 400
        assert response.json() == {"body": BODY_OBJECT_MESSAGE}

    @pytest.mark.asyncio
    async def test_delete_malformed_json(self, test_client):
        """A body that is not JSON is a 400 keyed `body`."""
        response = await test_client.post(
            "/delete-recipe",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"body": BODY_JSON_MESSAGE}

    @pytest.mark.asyncio
    async def test_delete_when_file_already_gone(self, test_client, temp_storage, sample_image_bytes):
        """A thumbnail that is already missing does not block the delete."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]
        (temp_storage / "thumbnail" / created["thumbnail"]).unlink()

        response = await test_client.post("/delete-recipe", json={"id": created["id"]})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_delete_file_error_is_500_and_keeps_row(self, test_client, sample_image_bytes):
        """A file that cannot be removed is a 500 and the row stays."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        with patch.object(file_service, "delete_file", AsyncMock(side_effect=FileError())):
            response = await test_client.post("/delete-recipe", json={"id": created["id"]})

        assert response.status_code == 500
        assert "error" in response.json()
        assert len((await test_client.get("/get-recipes")).json()) == 1


class TestUpdateRecipe:
    """Tests for PUT /update-recipe."""

    @pytest.mark.asyncio
    async def test_title_only_keeps_thumbnail(self, test_client, temp_storage, sample_image_bytes):
        """Editing only the title keeps every other stored value and file."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        response = await test_client.put(
            "/update-recipe", data={"id": str(created["id"]), "title": "Stew"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Recipe updated successfully"
        assert body["recipe"]["title"] == "Stew"
        assert body["recipe"]["recipe"] == "Boil water"
        assert body["recipe"]["thumbnail"] == created["thumbnail"]
        assert body["recipe"]["timestamp"] == created["timestamp"]
        assert _stored_files(temp_storage) == [created["thumbnail"]]

    @pytest.mark.asyncio
    async def test_new_thumbnail_replaces_old(self, test_client, temp_storage, sample_image_bytes):
        """A new file replaces the old one on disk and in the row."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        response = await test_client.put(
            "/update-recipe",
            data={"id": str(created["id"]), "recipe": "Simmer for an hour"},
            files={"thumbnail": ("stew.png", b"\x89PNG\r\n\x1a\n", "image/png")},
        )

        assert response.status_code == 200
        updated = response.json()["recipe"]
        assert updated["thumbnail"] != created["thumbnail"]
        assert updated["thumbnail"].endswith(".png")
        assert updated["recipe"] == "Simmer for an hour"
        assert _stored_files(temp_storage) == [updated["thumbnail"]]

    @pytest.mark.asyncio
    async def test_old_thumbnail_already_missing(self, test_client, temp_storage, sample_image_bytes):
        """A missing old thumbnail does not fail the edit."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]
        (temp_storage / "thumbnail" / created["thumbnail"]).unlink()

        response = await test_client.put(
            "/update-recipe",
            data={"id": str(created["id"]), "title": "Stew"},
            files={"thumbnail": ("stew.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 200
        assert _stored_files(temp_storage) == [response.json()["recipe"]["thumbnail"]]

    @pytest.mark.asyncio
    async def test_old_thumbnail_removal_failure_does_not_fail_edit(
        self, test_client, temp_storage, sample_image_bytes
    ):
        """If the old file cannot be removed the edit still succeeds."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        with patch.object(file_service, "delete_file", AsyncMock(side_effect=FileError())):
            response = await test_client.put(
                "/update-recipe",
                data={"id": str(created["id"]), "title": "Stew"},
                files={"thumbnail": ("stew.jpg", sample_image_bytes, "image/jpeg")},
            )

        assert response.status_code == 200
        new_thumbnail = response.json()["recipe"]["thumbnail"]
        # Old file is orphaned, new one recorded
        assert _stored_files(temp_storage) == sorted([created["thumbnail"], new_thumbnail])

    @pytest.mark.asyncio
    async def test_nonexistent_id(self, test_client, temp_storage, sample_image_bytes):
        """An unknown id is a 404 and the new file is never written."""
        response = await test_client.put(
            "/update-recipe",
            data={"id": "999", "title": "Stew"},
            files={"thumbnail": ("stew.jpg", sample_image_bytes, "image/jpeg")},
        )

        assert response.status_code == 404
        assert _stored_files(temp_storage) == []

    @pytest.mark.asyncio
    async def test_neither_title_nor_recipe(self, test_client, sample_image_bytes):
        """An edit with no text fields reports `general`."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        response = await test_client.put("/update-recipe", data={"id": str(created["id"])})

        assert response.status_code == 400
        assert "general" in response.json()

    @pytest.mark.asyncio
    async def test_missing_id(self, test_client):
        """An edit without id is a 400 under id."""
        response = await test_client.put("/update-recipe", data={"title": "Stew"})

        assert response.status_code == 400
        assert response.json() == {"id": "id is a required field"}


class TestAssetsAndHealth:
    """Tests for image serving, the health probe and request ids."""

    @pytest.mark.asyncio
    async def test_serves_stored_thumbnail(self, test_client, sample_image_bytes):
        """Stored thumbnails are served back byte for byte."""
        created = (await _add_recipe(test_client, sample_image_bytes)).json()["recipe"]

        response = await test_client.get(f"/assets/images/thumbnail/{created['thumbnail']}")

        assert response.status_code == 200
        assert response.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_missing_image(self, test_client):
        """Unknown image paths are a 404."""
        response = await test_client.get("/assets/images/thumbnail/nope.jpg")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        """The health probe reports the database as connected."""
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        """An incoming X-Request-ID is echoed back."""
        response = await test_client.get("/get-recipes", headers={"X-Request-ID": "abc12345"})

        assert response.headers["X-Request-ID"] == "abc12345"
