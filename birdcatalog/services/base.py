"""
Bird Catalogue — Shared Service Helpers
=========================================

What:  Small helpers used by every service: payload validation, id parsing
       and translation of SQLAlchemy errors into application exceptions.
"""

import logging
import uuid
from typing import Any, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from birdcatalog.exceptions import ConflictError, DatabaseError, ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# SQLSTATE for unique_violation (PostgreSQL)
UNIQUE_VIOLATION = "23505"


def validate_payload(
    schema: Type[SchemaT],
    payload: Union[SchemaT, Mapping[str, Any]],
) -> SchemaT:
    """
    Validate a raw payload against `schema`.

    Already-validated instances pass through unchanged. Raises
    ValidationError (400) without touching storage.
    """
    if isinstance(payload, schema):
        return payload
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic_errors(exc.errors()) from exc


def parse_id(value: Union[str, uuid.UUID, None]) -> Optional[uuid.UUID]:
    """
    Parse a resource id. Returns None for anything that is not a UUID,
    which callers treat the same as an id that does not exist.
    """
    if isinstance(value, uuid.UUID):
        return value
    if value is None:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def is_unique_violation(exc: IntegrityError) -> bool:
    """
    True when an IntegrityError was caused by a unique/primary key constraint.

    asyncpg exposes the SQLSTATE on the wrapped driver error; SQLite only
    reports it in the message ("UNIQUE constraint failed: ...").
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION
    return "unique" in str(orig).lower()


def translate_write_error(
    exc: SQLAlchemyError,
    conflict_message: str,
    context: Optional[Mapping[str, Any]] = None,
) -> Exception:
    """
    Map a failed INSERT to ConflictError (unique violation) or DatabaseError.

    The caller raises the returned exception `from exc`.
    """
    ctx = dict(context or {})
    if isinstance(exc, IntegrityError) and is_unique_violation(exc):
        logger.warning("Unique constraint violated: %s | Context: %s", exc.orig, ctx)
        return ConflictError(message=conflict_message, context=ctx)

    ctx["error_type"] = type(exc).__name__
    logger.error("Database error on write: %s | Context: %s", exc, ctx, exc_info=True)
    return DatabaseError(
        message="Could not save the resource. Please try again.",
        context=ctx,
    )
