"""
Bird Catalogue — List Request/Response Schemas
================================================

What:  Wire format of lists, list memberships and list members.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from birdcatalog.schemas.bird import Name, Sort
from birdcatalog.schemas.common import PaginationLinks


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ListCreate(BaseModel):
    """Body of POST /lists."""

    name: Name
    description: Name

    model_config = ConfigDict(extra="forbid")


class MembershipCreate(BaseModel):
    """
    Body of POST /lists/{id}/birds.

    localName overrides the bird's common name when the list is displayed.
    sort is the bird's position in the list.
    """

    bird_id: uuid.UUID = Field(alias="birdId")
    local_name: Optional[Name] = Field(default=None, alias="localName")
    sort: Sort = Field(alias="sort")

    model_config = ConfigDict(extra="forbid")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ListResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    links: Optional[Dict[str, str]] = None

    model_config = ConfigDict(populate_by_name=True)


class ListPage(BaseModel):
    """Paginated envelope of GET /lists."""

    page: int
    per_page: int = Field(alias="perPage")
    total: int
    links: PaginationLinks
    data: List[ListResponse]

    model_config = ConfigDict(populate_by_name=True)


class ListMemberResponse(BaseModel):
    """
    A bird as it appears inside a list.

    commonName is the membership's localName when set, otherwise the bird's
    own common name. Timestamps are those of the membership.
    """

    id: uuid.UUID
    common_name: str = Field(alias="commonName")
    scientific_name: str = Field(alias="scientificName")
    family_name: str = Field(alias="familyName")
    family: str
    order: str
    local_name: Optional[str] = Field(default=None, alias="localName")
    sort: int
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")
    links: Optional[Dict[str, str]] = None

    model_config = ConfigDict(populate_by_name=True)


class ListMembersPage(BaseModel):
    """Paginated envelope of GET /lists/{id}/birds, with the list embedded."""

    page: int
    per_page: int = Field(alias="perPage")
    total: int
    bird_list: ListResponse = Field(alias="birdList")
    links: PaginationLinks
    data: List[ListMemberResponse]

    model_config = ConfigDict(populate_by_name=True)
