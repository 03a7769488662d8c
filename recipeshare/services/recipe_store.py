"""
RecipeShare Backend - Recipe Store
===================================

What:  Row access for the `recipes` table: create, list, get, update, delete.
How:   Async SQLAlchemy against a session supplied by the caller. Every write
       is committed on its own; nothing is composed into
       a multi-row transaction.
Who:   Called by RecipeService.

Error translation:
    missing row          → NotFoundError (404)
    any SQLAlchemyError  → StoreError (500), cause logged server-side
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipeshare.exceptions import NotFoundError, StoreError
from recipeshare.models.recipe import Recipe

logger = logging.getLogger(__name__)


class RecipeStore:
    """
    Single-table store keyed by the auto-incrementing recipe id.

    Stateless: the session is passed to every call, so one instance
    serves all requests.
    """

    async def create(
        self, db: AsyncSession, title: str, recipe: str, thumbnail: str
    ) -> Recipe:
        """
        Insert a row and return it with `id` and `timestamp` populated.

        Only a failed insert or commit raises StoreError. Once the commit
        has gone through, the row is returned even if re-reading it fails.
        """
        row = Recipe(title=title, recipe=recipe, thumbnail=thumbnail)
        try:
            db.add(row)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error inserting recipe into DB: %s", str(e), exc_info=True)
            raise StoreError(
                message="Error inserting recipe into DB",
                context={"operation": "create", "error_type": type(e).__name__},
            )
        logger.info("Recipe %s created (thumbnail=%s)", row.id, thumbnail)
        stored = {"id": row.id, "title": title, "recipe": recipe,
                  "thumbnail": thumbnail, "timestamp": row.timestamp}

        try:
            # Re-read so the timestamp comes back exactly as the database stores it
            await db.refresh(row)
        except SQLAlchemyError as e:
            logger.warning(
                "Recipe %s stored but could not be re-read: %s", row.id, str(e)
            )
            # A failed refresh can leave `row` expired; hand back a detached copy
            return Recipe(**stored)
        return row

    async def list_all(self, db: AsyncSession) -> List[Recipe]:
        """Every row, in insertion order."""
        try:
            result = await db.execute(select(Recipe).order_by(Recipe.id))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error retrieving recipes: %s", str(e), exc_info=True)
            raise StoreError(
                message="Error retrieving data",
                context={"operation": "list_all", "error_type": type(e).__name__},
            )

    async def get_by_id(self, db: AsyncSession, recipe_id: int) -> Recipe:
        """
        Fetch one row.

        Raises:
            NotFoundError: no row with this id
            StoreError: query failed
        """
        try:
            result = await db.execute(select(Recipe).where(Recipe.id == recipe_id))
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Error retrieving recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise StoreError(
                message="Error retrieving record",
                context={"operation": "get_by_id", "recipe_id": recipe_id,
                         "error_type": type(e).__name__},
            )

        if row is None:
            raise NotFoundError(resource="Recipe", resource_id=recipe_id)
        return row

    async def update(
        self,
        db: AsyncSession,
        recipe_id: int,
        title: str,
        recipe: str,
        thumbnail: str,
    ) -> Recipe:
        """
        Overwrite title, recipe and thumbnail of an existing row.

        The loaded row is changed in place and committed; with
        expire_on_commit=False it already holds the stored values, so
        nothing is read after the commit.

        Raises:
            NotFoundError: no row with this id (nothing was changed)
            StoreError: lookup or commit failed
        """
        row = await self.get_by_id(db, recipe_id)
        try:
            row.title = title
            row.recipe = recipe
            row.thumbnail = thumbnail
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error updating recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise StoreError(
                message="Error updating recipe",
                context={"operation": "update", "recipe_id": recipe_id,
                         "error_type": type(e).__name__},
            )
        logger.info("Recipe %s updated (thumbnail=%s)", recipe_id, thumbnail)
        return row

    async def delete(self, db: AsyncSession, recipe_id: int) -> None:
        """
        Remove a row.

        Raises:
            NotFoundError: no row with this id
            StoreError: statement failed
        """
        try:
            result = await db.execute(delete(Recipe).where(Recipe.id == recipe_id))
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error deleting recipe %s: %s", recipe_id, str(e), exc_info=True)
            raise StoreError(
                message="Error deleting recipe",
                context={"operation": "delete", "recipe_id": recipe_id,
                         "error_type": type(e).__name__},
            )

        if result.rowcount == 0:
            raise NotFoundError(resource="Recipe", resource_id=recipe_id)
        logger.info("Recipe %s deleted", recipe_id)


# ── Singleton Instance ────────────────────────────────────────────────────
recipe_store = RecipeStore()
