"""
RecipeShare Backend - Image Serving Route
==========================================

What:  Serves stored images under /assets/images/... so the frontend can put
       `/assets/images/thumbnail/<recipe.thumbnail>` straight into an <img>.
How:   Resolves the path below FileService.storage_root and returns a
       FileResponse. Paths that escape the root are rejected.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from recipeshare.exceptions import NotFoundError, ValidationError
from recipeshare.schemas.recipe import ErrorResponse, ValidationErrorResponse
from recipeshare.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assets/images", tags=["Assets"])


@router.get(
    "/{file_path:path}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Invalid path", "model": ValidationErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_image(file_path: str) -> FileResponse:
    try:
        full_path = file_service.resolve_public_path(file_path)
    except ValueError:
        logger.warning("Rejected image path outside storage root: %s", file_path)
        raise ValidationError(errors={"path": "Invalid file path"})

    if not full_path.is_file():
        raise NotFoundError(resource="File", resource_id=file_path)

    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},  # names are never reused
    )
