"""
Bird Catalogue — Bird Request/Response Schemas
================================================

What:  Pydantic models defining the wire format of the birds resource.
How:   Every field declares its camelCase wire name as an alias, so the
       mapping between storage columns (snake_case attribute names) and
       wire fields is a fixed table per entity. Unknown fields are rejected
       on input.
"""

import uuid
from datetime import datetime
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from birdcatalog.schemas.common import INT32_MAX, INT32_MIN, PaginationLinks

Name = Annotated[str, StringConstraints(min_length=1, max_length=255)]
Sort = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BirdCreate(BaseModel):
    """
    Body of POST /birds.

    Required: commonName, scientificName, familyName, family, order, sort.
    Optional: alternativeNames, speciesId (makes the new bird a subspecies).
    """

    common_name: Name = Field(alias="commonName")
    scientific_name: Name = Field(alias="scientificName")
    family_name: Name = Field(alias="familyName")
    family: Name = Field(alias="family")
    order: Name = Field(alias="order")
    alternative_names: Optional[List[Name]] = Field(default=None, alias="alternativeNames")
    sort: Sort = Field(alias="sort")
    species_id: Optional[uuid.UUID] = Field(default=None, alias="speciesId")

    model_config = ConfigDict(extra="forbid")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BirdResponse(BaseModel):
    """
    Full representation of a bird.

    subspecies is the number of birds whose speciesId references this one;
    always 0 for a subspecies.
    """

    id: uuid.UUID
    common_name: str = Field(alias="commonName")
    scientific_name: str = Field(alias="scientificName")
    family_name: str = Field(alias="familyName")
    family: str
    order: str
    alternative_names: Optional[List[str]] = Field(default=None, alias="alternativeNames")
    sort: int
    species_id: Optional[uuid.UUID] = Field(default=None, alias="speciesId")
    subspecies: int = 0
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    links: Optional[Dict[str, str]] = None

    model_config = ConfigDict(populate_by_name=True)


class BirdPage(BaseModel):
    """Paginated envelope of GET /birds and GET /birds/{id}/subspecies."""

    page: int
    per_page: int = Field(alias="perPage")
    total: int
    links: PaginationLinks
    data: List[BirdResponse]

    model_config = ConfigDict(populate_by_name=True)
