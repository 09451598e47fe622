"""
Bird Catalogue — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return the `{statusCode, error, message}` envelope with the matching
       HTTP status code.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    BirdCatalogError (base)
    ├── ValidationError          → 400 Bad Request
    ├── MalformedRequestError    → 400 Bad Request (unparsable JSON body)
    ├── NotFoundError            → 404 Not Found
    ├── ConflictError            → 409 Conflict
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Mapping, Optional, Sequence

_LOCATION_PREFIXES = {"body", "query", "path", "header"}


class BirdCatalogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:      User-facing error description (safe to return in API response)
        context:      Additional debug info (logged but NOT returned to client)
        status_code:  HTTP status the global handler responds with
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BirdCatalogError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, wrong types, length bounds, unknown fields,
             invalid pagination parameters, a speciesId that cannot be a parent.
    HTTP:    400 Bad Request

    Validation always happens before any storage call.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    @classmethod
    def from_pydantic_errors(cls, errors: Sequence[Mapping[str, Any]]) -> "ValidationError":
        """
        Build a ValidationError from pydantic's `errors()` list.

        Location prefixes added by FastAPI ("body", "query", "path") are
        dropped so the message names the wire field, e.g.
        "commonName: Field required".
        """
        reasons = []
        first_field = None
        for error in errors:
            loc = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_PREFIXES]
            field = ".".join(loc)
            if first_field is None and field:
                first_field = field
            reasons.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
        message = "; ".join(reasons) or "Validation failed"
        return cls(
            message=message,
            field=first_field,
            context={"errors": [dict(e) for e in errors]},
        )


class MalformedRequestError(BirdCatalogError):
    """Raised when the request body is not valid JSON (HTTP 400)."""

    status_code = 400

    def __init__(
        self,
        message: str = "Request body is not valid JSON",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(BirdCatalogError):
    """
    Raised when a requested resource does not exist.

    Services signal absence with None; routes turn that into this exception
    so the HTTP concern stays out of the service layer.
    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(BirdCatalogError):
    """
    Raised when a write violates a uniqueness constraint.

    When:    Duplicate scientific name or sort position, duplicate list name,
             a bird added twice to the same list.
    HTTP:    409 Conflict

    The insert is never retried.
    """

    status_code = 409

    def __init__(
        self,
        message: str = "The resource conflicts with an existing one",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(BirdCatalogError):
    """
    Raised when database operations fail unexpectedly.

    When:    Connection lost mid-query, non-unique constraint violation, etc.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. The underlying
    driver error is logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
