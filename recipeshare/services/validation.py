"""
RecipeShare Backend - Recipe Validation Rules
==============================================

What:  The single place where recipe input is checked, for every operation.
How:   Two layers merged into one result:
       1. A pydantic schema per mode (schemas.recipe) for field presence/type
       2. check_fields() for cross-field and file-type rules
       Both run on every call, so the client sees every violated rule at once.
Who:   Called by RecipeService before any file is written or row is touched.

Error mapping (the only 400 body shape the API produces):
    {
        "<field>": "<one message>",
        ...
    }
    Keys: id, title, recipe, thumbnail, imgType, general, and `body` for a
    request FastAPI could not parse at all (see request_errors_to_mapping).
    When several rules fail for one field, the first one wins.

Modes:
    create  → title, recipe, thumbnail (file) required; image type checked
    edit    → id required; at least one of title/recipe; image type checked
              if a new file is supplied
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from recipeshare.exceptions import ValidationError
from recipeshare.schemas.recipe import RecipeCreate, RecipeEdit, RecipeIdentifier

logger = logging.getLogger(__name__)

CREATE = "create"
EDIT = "edit"

_SCHEMAS = {
    CREATE: RecipeCreate,
    EDIT: RecipeEdit,
}

# Extensions accepted for uploaded images (compared case-insensitively)
ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png"}

REQUIRED_MESSAGE = "{field} is a required field"
INTEGER_MESSAGE = "{field} must be a whole number"
POSITIVE_MESSAGE = "{field} must be a positive whole number"
BODY_JSON_MESSAGE = "Request body must be valid JSON"
BODY_OBJECT_MESSAGE = "Request body must be a JSON object"
IMAGE_TYPE_MESSAGE = "Invalid image type. Only jpg, jpeg, and png are allowed."
AT_LEAST_ONE_MESSAGE = "At least one of title or recipe must be filled."

# pydantic error types that mean "the value is absent"
_PRESENCE_ERRORS = {"missing", "string_type", "int_type"}
_INTEGER_ERRORS = {"int_parsing", "int_from_float"}

# Where FastAPI reports a request error; not field names
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def check_image_type(filename: str) -> bool:
    """True when the filename ends in .jpg, .jpeg or .png (any case)."""
    ext = Path(filename).suffix.lower().lstrip(".")
    return ext in ALLOWED_IMAGE_EXTENSIONS


def check_fields(
    title: Optional[str],
    recipe: Optional[str],
    image_name: Optional[str] = None,
    edit: bool = False,
) -> Dict[str, str]:
    """
    Rules the per-field schemas cannot express.

    - edit: at least one of title/recipe must be non-blank (key `general`)
    - any mode: a supplied image must have an allowed extension (key `imgType`)

    Returns an empty dict when everything passes.
    """
    errors: Dict[str, str] = {}

    if edit and not _filled(title) and not _filled(recipe):
        errors["general"] = AT_LEAST_ONE_MESSAGE

    if _filled(image_name) and not check_image_type(image_name):
        errors["imgType"] = IMAGE_TYPE_MESSAGE

    return errors


def errors_to_mapping(exc: PydanticValidationError) -> Dict[str, str]:
    """
    Flatten a pydantic failure into {field: message}, first violation per field.

    Presence failures (missing, None, blank) read "<field> is a required field".
    """
    mapping: Dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "general"
        mapping.setdefault(field, _message_for(field, error))
    return mapping


def request_errors_to_mapping(errors: Iterable[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Flatten FastAPI's request parsing errors into the same {field: message} shape.

    These come from requests FastAPI cannot bind at all: a body that is not
    JSON, a JSON body that is not an object, a text part where a file belongs.
    Errors about the body as a whole are keyed `body`.
    """
    mapping: Dict[str, str] = {}
    for error in errors:
        if error["type"] == "json_invalid":
            mapping.setdefault("body", BODY_JSON_MESSAGE)
            continue
        names = [str(part) for part in error.get("loc") or ()
                 if part not in _REQUEST_LOCATIONS and not isinstance(part, int)]
        if not names:
            mapping.setdefault("body", BODY_OBJECT_MESSAGE)
            continue
        mapping.setdefault(names[0], _message_for(names[0], error))
    return mapping


def _message_for(field: str, error: Mapping[str, Any]) -> str:
    if error["type"] in _PRESENCE_ERRORS:
        return REQUIRED_MESSAGE.format(field=field)
    if error["type"] in _INTEGER_ERRORS:
        return INTEGER_MESSAGE.format(field=field)
    if error["type"] == "greater_than":
        return POSITIVE_MESSAGE.format(field=field)
    return error["msg"]


def validate_recipe(
    data: Mapping[str, Any], mode: str
) -> Union[RecipeCreate, RecipeEdit]:
    """
    Validate a candidate recipe for the given mode.

    Args:
        data: Raw fields - id, title, recipe, and thumbnail (the uploaded
              file's original name, or None when no file was sent)
        mode: CREATE or EDIT

    Returns:
        The normalized RecipeCreate / RecipeEdit

    Raises:
        ValidationError carrying the complete field→message mapping
    """
    try:
        schema = _SCHEMAS[mode]
    except KeyError:
        raise ValueError(f"Unknown validation mode '{mode}'. Must be one of: {sorted(_SCHEMAS)}")

    errors: Dict[str, str] = {}
    validated = None
    try:
        validated = schema.model_validate(dict(data))
    except PydanticValidationError as exc:
        errors.update(errors_to_mapping(exc))

    extra = check_fields(
        data.get("title"),
        data.get("recipe"),
        data.get("thumbnail"),
        edit=(mode == EDIT),
    )
    for field, message in extra.items():
        errors.setdefault(field, message)

    if errors:
        logger.info("Recipe %s rejected: %s", mode, ", ".join(sorted(errors)))
        raise ValidationError(errors=errors, context={"mode": mode})

    return validated


def validate_recipe_id(value: Any) -> int:
    """Validate the id sent to POST /delete-recipe."""
    try:
        return RecipeIdentifier.model_validate({"id": value}).id
    except PydanticValidationError as exc:
        raise ValidationError(errors=errors_to_mapping(exc), context={"mode": "delete"})
