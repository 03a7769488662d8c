"""
RecipeShare Backend - Recipe Route Handlers
============================================

What:  The four recipe endpoints used by the frontend.
How:   Pull form/JSON fields out of the request, hand them to RecipeService,
       return its response model. Errors are raised, not returned; the
       global handlers in main.py turn them into status codes.

Route Inventory:
    POST /add-recipe      multipart: title, recipe, thumbnail (file)    → 201
    GET  /get-recipes                                                  → 200
    POST /delete-recipe   JSON: {"id": ...}                            → 200
    PUT  /update-recipe   multipart: id, title, recipe, thumbnail?     → 200

Every form field is optional at this layer so that a missing field reaches
the validation rules and comes back as the 400 field→message mapping
instead of FastAPI's generic 422.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from fastapi import APIRouter, Body, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from recipeshare.database import get_db_session
from recipeshare.schemas.recipe import (
    ErrorResponse,
    RecipeDeleteResponse,
    RecipeMutationResponse,
    RecipeResponse,
    ValidationErrorResponse,
)
from recipeshare.services.recipe_service import recipe_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Recipes"])


async def _read_upload(upload: Optional[UploadFile]) -> Tuple[Optional[str], Optional[bytes]]:
    """
    Return (original filename, bytes) of an uploaded file, or (None, None).

    Browsers submit an empty part with no filename when the file input was
    left blank; that counts as no file.
    """
    if upload is None or not upload.filename:
        return None, None
    try:
        content = await upload.read()
    finally:
        await upload.close()
    logger.debug("Received upload: filename=%s, size=%d bytes", upload.filename, len(content))
    return upload.filename, content


@router.post(
    "/add-recipe",
    status_code=201,
    response_model=RecipeMutationResponse,
    responses={
        400: {"description": "Invalid or missing fields", "model": ValidationErrorResponse},
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="Submit a new recipe",
)
async def add_recipe(
    title: Optional[str] = Form(default=None, description="Recipe title"),
    recipe: Optional[str] = Form(default=None, description="Recipe body text"),
    thumbnail: Optional[UploadFile] = File(
        default=None,
        description="Thumbnail image (jpg, jpeg or png)",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeMutationResponse:
    filename, content = await _read_upload(thumbnail)
    return await recipe_service.submit_recipe(
        db,
        title=title,
        recipe=recipe,
        filename=filename,
        content=content,
    )


@router.get(
    "/get-recipes",
    response_model=List[RecipeResponse],
    responses={
        500: {"description": "Storage error", "model": ErrorResponse},
    },
    summary="List every recipe",
)
async def get_recipes(
    db: AsyncSession = Depends(get_db_session),
) -> List[RecipeResponse]:
    """All recipes in insertion order. No pagination or filtering."""
    return await recipe_service.list_recipes(db)


@router.post(
    "/delete-recipe",
    response_model=RecipeDeleteResponse,
    responses={
        400: {"description": "Missing id", "model": ValidationErrorResponse},
        404: {"description": "Recipe not found", "model": ErrorResponse},
        500: {"description": "File or storage error", "model": ErrorResponse},
    },
    summary="Delete a recipe and its thumbnail",
)
async def delete_recipe(
    payload: Dict[str, Any] = Body(default={}, examples=[{"id": 1}]),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeDeleteResponse:
    """
    Delete by id. The thumbnail file is removed first, then the row.

    A nonexistent id answers 404 without touching the filesystem.
    """
    return await recipe_service.delete_recipe(db, payload.get("id"))


@router.put(
    "/update-recipe",
    response_model=RecipeMutationResponse,
    responses={
        400: {"description": "Invalid or missing fields", "model": ValidationErrorResponse},
        404: {"description": "Recipe not found", "model": ErrorResponse},
        500: {"description": "File or storage error", "model": ErrorResponse},
    },
    summary="Edit a recipe",
)
async def update_recipe(
    recipe_id: Optional[str] = Form(default=None, alias="id", description="Recipe id"),
    title: Optional[str] = Form(default=None, description="New title"),
    recipe: Optional[str] = Form(default=None, description="New recipe body"),
    thumbnail: Optional[UploadFile] = File(
        default=None,
        description="Replacement thumbnail (jpg, jpeg or png)",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> RecipeMutationResponse:
    """
    Edit title and/or recipe text, optionally replacing the thumbnail.

    At least one of title/recipe must be sent; omitted fields keep their
    stored values. The old thumbnail is removed after the row is updated.
    """
    filename, content = await _read_upload(thumbnail)
    return await recipe_service.update_recipe(
        db,
        recipe_id=recipe_id,
        title=title,
        recipe=recipe,
        filename=filename,
        content=content,
    )
