"""
Bird Catalogue — Shared Schemas
=================================

What:  Pydantic models shared by every resource: pagination query parameters,
       pagination links, the error envelope and the health response.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# INTEGER column range; also caps page and perPage
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


class PaginationParams(BaseModel):
    """
    Validated `page` / `perPage` query parameters.

    page is 1-based. perPage may be 0, which yields an empty page.
    """

    page: int = Field(default=1, ge=1, le=INT32_MAX)
    per_page: int = Field(default=20, ge=0, le=INT32_MAX, alias="perPage")

    model_config = ConfigDict(populate_by_name=True)


class PaginationLinks(BaseModel):
    """Absolute URLs of the neighbouring pages; null when out of range."""

    next: Optional[str] = None
    previous: Optional[str] = None


class ErrorResponse(BaseModel):
    """
    Error envelope returned for every 4xx/5xx response.

    Example:
        {
            "statusCode": 409,
            "error": "Conflict",
            "message": "bird with scientificName 'Robin Robin' already exists"
        }
    """

    status_code: int = Field(alias="statusCode", description="HTTP status code")
    error: str = Field(description="HTTP reason phrase")
    message: str = Field(description="Human-readable error description")

    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
