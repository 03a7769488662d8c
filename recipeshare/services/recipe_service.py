"""
RecipeShare Backend - Recipe Service (Request Orchestrator)
============================================================

What:  Runs each recipe operation end to end: validate → file → row → respond.
How:   Composes the validation rules, FileService and RecipeStore.
Who:   Called by the route handlers in routes/recipes.py.

Orchestration Flow:
    ┌──────────┐    ┌────────────┐    ┌─────────────┐    ┌──────────────┐
    │  Route   │───▶│  Validate  │───▶│ Store file  │───▶│  Insert /    │
    │  (HTTP)  │    │  (rules)   │    │ (FileServ)  │    │  update row  │
    └──────────┘    └────────────┘    └─────────────┘    └──────┬───────┘
                                                                │ edit only
                                                         ┌──────▼───────┐
                                                         │ Remove old   │
                                                         │ thumbnail    │
                                                         └──────────────┘

    Validation runs before any file is written, so a rejected request
    leaves nothing on disk. If the row insert/update fails after the new
    file was written, that file is removed again before the error
    propagates. A superseded thumbnail that cannot be removed is logged and
    left behind; the edit still succeeds.

    File and row are two separate resources; there is no shared transaction.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from recipeshare.exceptions import RecipeShareError
from recipeshare.schemas.recipe import (
    RecipeDeleteResponse,
    RecipeMutationResponse,
    RecipeResponse,
)
from recipeshare.services.file_service import file_service
from recipeshare.services.recipe_store import recipe_store
from recipeshare.services.validation import (
    CREATE,
    EDIT,
    validate_recipe,
    validate_recipe_id,
)

logger = logging.getLogger(__name__)


class RecipeService:
    """
    Business logic for recipe submissions.

    Responsibilities:
        - submit_recipe(): validate, store thumbnail, insert row
        - list_recipes(): every stored recipe
        - update_recipe(): validate, optionally swap thumbnail, update row
        - delete_recipe(): remove thumbnail file and row
    """

    async def submit_recipe(
        self,
        db: AsyncSession,
        title: Optional[str],
        recipe: Optional[str],
        filename: Optional[str],
        content: Optional[bytes],
    ) -> RecipeMutationResponse:
        """
        Create a recipe from form fields and an uploaded thumbnail.

        Args:
            db: Async database session (injected by FastAPI)
            title, recipe: Raw form values (None when absent)
            filename: Original name of the uploaded file (None when no file)
            content: Raw file bytes

        Raises:
            ValidationError: a field or the image type was rejected (400)
            FileError: the thumbnail could not be written (500)
            StoreError: the insert failed (500); the new file is removed
        """
        validated = validate_recipe(
            {"title": title, "recipe": recipe, "thumbnail": filename},
            CREATE,
        )

        thumbnail = await file_service.store_upload(content or b"", validated.thumbnail)

        try:
            row = await recipe_store.create(
                db,
                title=validated.title,
                recipe=validated.recipe,
                thumbnail=thumbnail,
            )
        except RecipeShareError:
            await file_service.cleanup_file(file_service.thumbnail_path(thumbnail))
            raise

        return RecipeMutationResponse(
            message="Recipe submitted successfully",
            recipe=RecipeResponse.model_validate(row),
        )

    async def list_recipes(self, db: AsyncSession) -> List[RecipeResponse]:
        rows = await recipe_store.list_all(db)
        return [RecipeResponse.model_validate(row) for row in rows]

    async def update_recipe(
        self,
        db: AsyncSession,
        recipe_id: Any,
        title: Optional[str],
        recipe: Optional[str],
        filename: Optional[str] = None,
        content: Optional[bytes] = None,
    ) -> RecipeMutationResponse:
        """
        Edit a recipe's text and/or replace its thumbnail.

        Fields left out keep their stored values. With a new file:
            1. new file is written
            2. row is updated to point at it
            3. old file is removed (best effort, failure only logged)

        Raises:
            ValidationError (400), NotFoundError (404), FileError / StoreError (500)
        """
        validated = validate_recipe(
            {"id": recipe_id, "title": title, "recipe": recipe, "thumbnail": filename},
            EDIT,
        )

        current = await recipe_store.get_by_id(db, validated.id)
        old_thumbnail = current.thumbnail
        new_title = validated.title if validated.title is not None else current.title
        new_recipe = validated.recipe if validated.recipe is not None else current.recipe

        thumbnail = old_thumbnail
        if validated.thumbnail:
            thumbnail = await file_service.store_upload(content or b"", validated.thumbnail)

        try:
            row = await recipe_store.update(
                db,
                validated.id,
                title=new_title,
                recipe=new_recipe,
                thumbnail=thumbnail,
            )
        except RecipeShareError:
            if thumbnail != old_thumbnail:
                await file_service.cleanup_file(file_service.thumbnail_path(thumbnail))
            raise

        if thumbnail != old_thumbnail:
            await file_service.cleanup_file(file_service.thumbnail_path(old_thumbnail))
            logger.info("Recipe %s thumbnail replaced: %s → %s", validated.id, old_thumbnail, thumbnail)

        return RecipeMutationResponse(
            message="Recipe updated successfully",
            recipe=RecipeResponse.model_validate(row),
        )

    async def delete_recipe(self, db: AsyncSession, recipe_id: Any) -> RecipeDeleteResponse:
        """
        Delete a recipe and its thumbnail file.

        The file goes first; if that fails with anything other than
        "already gone" the row is kept and FileError (500) propagates.
        A missing id raises NotFoundError before any file is touched.
        """
        valid_id = validate_recipe_id(recipe_id)

        row = await recipe_store.get_by_id(db, valid_id)
        await file_service.delete_file(file_service.thumbnail_path(row.thumbnail))
        await recipe_store.delete(db, valid_id)

        return RecipeDeleteResponse(message="Recipe deleted successfully", id=valid_id)


# ── Singleton Instance ────────────────────────────────────────────────────
recipe_service = RecipeService()
