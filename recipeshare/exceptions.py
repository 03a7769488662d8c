"""
RecipeShare Backend - Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for different error scenarios.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services; caught by global handlers.

Exception Hierarchy:
    RecipeShareError (base)
    ├── ValidationError  → 400 Bad Request (body is the field→message mapping)
    ├── NotFoundError    → 404 Not Found
    ├── StoreError       → 500 Internal Server Error (database)
    └── FileError        → 500 Internal Server Error (filesystem)

The `context` dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class RecipeShareError(Exception):
    """
    Base exception for all RecipeShare application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RecipeShareError):
    """
    Raised when client-supplied data violates one or more validation rules.

    HTTP:    400 Bad Request

    `errors` maps each offending field to exactly one message, e.g.:
        {
            "title": "title is a required field",
            "imgType": "Invalid image type. Only jpg, jpeg, and png are allowed."
        }
    """

    def __init__(
        self,
        errors: Dict[str, str],
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["fields"] = sorted(errors)
        super().__init__(message=message, context=ctx)
        self.errors = dict(errors)


class NotFoundError(RecipeShareError):
    """
    Raised when a referenced recipe id does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; the recipe store converts that
    into this exception so handlers never check for None.
    """

    def __init__(
        self,
        resource: str = "Recipe",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class StoreError(RecipeShareError):
    """
    Raised when a database operation fails.

    HTTP:    500 Internal Server Error

    The message returned to the client is generic. The underlying cause
    (exception type, recipe id, operation) travels in `context` and is
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileError(RecipeShareError):
    """
    Raised when a filesystem operation on an uploaded image fails.

    HTTP:    500 Internal Server Error

    A missing file on delete is NOT an error (deletes are idempotent);
    permission problems, full disks and other OS errors are.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
