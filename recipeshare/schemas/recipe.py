"""
RecipeShare Backend - Pydantic Request/Response Schemas
========================================================

What:  Pydantic models for the API contract and the recipe validation rules.
How:   Input schemas (RecipeCreate, RecipeEdit, RecipeIdentifier) describe
       which fields each operation requires; services.validation runs them
       and flattens failures. Response models shape every JSON body.
Who:   Input schemas: services.validation. Response models: routes and services.

Input rules:
    create:  title, recipe, thumbnail all required and non-blank
    edit:    id required; title, recipe, thumbnail optional
             (the "at least one of title/recipe" rule lives in
             services.validation.check_fields)
    delete:  id required

Ids are positive whole numbers; true/false and 0 count as no id at all.

Blank strings (empty or whitespace-only) are treated as absent, so the
failure for `title=""` reads the same as for a missing title.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _id_or_none(value: Any) -> Any:
    """Blank strings, booleans and 0 do not identify a recipe."""
    if isinstance(value, bool) or (isinstance(value, int) and value == 0):
        return None
    return _blank_to_none(value)


# ══════════════════════════════════════════════════════════════════════════
# Input Models - validated before anything touches disk or database
# ══════════════════════════════════════════════════════════════════════════


class RecipeCreate(BaseModel):
    """Fields of a new recipe. `thumbnail` is the uploaded file's original name."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str
    recipe: str
    thumbnail: str

    @field_validator("title", "recipe", "thumbnail", mode="before")
    @classmethod
    def blank_is_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)


class RecipeEdit(BaseModel):
    """Fields of an edit request; anything left out keeps its stored value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(gt=0)
    title: Optional[str] = None
    recipe: Optional[str] = None
    thumbnail: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_is_missing(cls, v: Any) -> Any:
        return _id_or_none(v)

    @field_validator("title", "recipe", "thumbnail", mode="before")
    @classmethod
    def blank_is_missing(cls, v: Any) -> Any:
        return _blank_to_none(v)


class RecipeIdentifier(BaseModel):
    """Body of POST /delete-recipe."""

    id: int = Field(gt=0)

    @field_validator("id", mode="before")
    @classmethod
    def id_is_missing(cls, v: Any) -> Any:
        return _id_or_none(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models - What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class RecipeResponse(BaseModel):
    """
    What:  Full representation of a stored recipe row.
    Who:   Items of GET /get-recipes; nested in create/update responses.

    `thumbnail` is the generated filename; the image is served from
    /assets/images/thumbnail/<thumbnail>.
    """
    id: int = Field(description="Recipe identifier, assigned on creation")
    title: str = Field(description="Recipe title")
    recipe: str = Field(description="Recipe body text")
    thumbnail: str = Field(description="Generated filename of the thumbnail image")
    timestamp: datetime = Field(description="When the recipe was created")

    model_config = {"from_attributes": True}


class RecipeMutationResponse(BaseModel):
    """
    Returned by POST /add-recipe (201) and PUT /update-recipe (200).

    Example:
        {
            "message": "Recipe submitted successfully",
            "recipe": {"id": 1, "title": "Soup", "recipe": "Boil water",
                       "thumbnail": "1718035200000-482913377.jpg",
                       "timestamp": "2024-06-10T16:00:00"}
        }
    """
    message: str = Field(description="Human-readable success message")
    recipe: RecipeResponse = Field(description="The stored recipe after the change")


class RecipeDeleteResponse(BaseModel):
    """Returned by POST /delete-recipe."""
    message: str = Field(default="Recipe deleted successfully")
    id: int = Field(description="Identifier of the deleted recipe")


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class ValidationErrorResponse(RootModel[Dict[str, str]]):
    """
    400 body: one message per failing field.

    Example:
        {"title": "title is a required field", "recipe": "recipe is a required field"}
    """


class ErrorResponse(BaseModel):
    """
    404 and 500 body.

    Fields:
        error: Human-readable description, never containing internals
        request_id: Correlation ID for tracing this error in server logs
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and container health checks."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
