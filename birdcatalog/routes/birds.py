"""
Bird Catalogue — Birds Route Handlers
=======================================

What:  /birds collection, single bird, subspecies listing, create and delete.
How:   Validates query/body parameters, delegates to BirdService, attaches
       hypermedia links and pagination links to the results.

Endpoints:
    GET    /birds                   paginated, filterable by q / scientificName
    GET    /birds/{id}              single bird
    GET    /birds/{id}/subspecies   paginated subspecies of a species
    POST   /birds                   create (201)
    DELETE /birds/{id}              delete (204)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from birdcatalog.database import get_db_session
from birdcatalog.exceptions import NotFoundError
from birdcatalog.pagination import (
    collection_query,
    decorate,
    link_base,
    pagination_links,
    pagination_params,
)
from birdcatalog.schemas.bird import BirdCreate, BirdPage, BirdResponse
from birdcatalog.schemas.common import ErrorResponse, PaginationParams
from birdcatalog.services.bird_service import bird_service

logger = logging.getLogger(__name__)

KIND = "birds"

# ── Router Configuration ──────────────────────────────────────────────────
router = APIRouter(prefix="/birds", tags=["Birds"])


@router.get(
    "",
    response_model=BirdPage,
    responses={
        400: {"description": "Invalid pagination parameters", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List birds",
    description=(
        "Returns species and subspecies ordered by their sort position. "
        "`q` matches the start of the common name, `scientificName` is a "
        "LIKE pattern on the scientific name (`%` and `_` are wildcards); "
        "both ignore case."
    ),
)
async def list_birds(
    request: Request,
    q: Optional[str] = Query(default=None, description="Common name prefix"),
    scientific_name: Optional[str] = Query(
        default=None,
        alias="scientificName",
        description="Scientific name pattern (case-insensitive, % and _ are wildcards)",
    ),
    pagination: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
) -> BirdPage:
    """
    Example:
        GET /birds?page=2&perPage=1&q=ro
        → links.next     = http://host/birds?page=3&perPage=1&q=ro  (when more remain)
          links.previous = http://host/birds?page=1&perPage=1&q=ro
    """
    birds = await bird_service.all(
        db,
        query=q,
        scientific_name=scientific_name,
        page=pagination.page,
        per_page=pagination.per_page,
    )
    total = await bird_service.count(db, query=q, scientific_name=scientific_name)

    base_url = link_base(request)
    return BirdPage(
        page=pagination.page,
        per_page=pagination.per_page,
        total=total,
        links=pagination_links(base_url, request.url.path, collection_query(request, pagination), total),
        data=[decorate(bird, KIND, base_url) for bird in birds],
    )


@router.get(
    "/{bird_id}",
    response_model=BirdResponse,
    responses={
        404: {"description": "Bird not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single bird",
)
async def get_bird(
    bird_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> BirdResponse:
    bird = await bird_service.find(db, bird_id)
    if bird is None:
        raise NotFoundError(resource="bird", resource_id=bird_id)
    return decorate(bird, KIND, link_base(request))


@router.get(
    "/{bird_id}/subspecies",
    response_model=BirdPage,
    responses={
        404: {"description": "Species not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List the subspecies of a species",
)
async def list_subspecies(
    bird_id: str,
    request: Request,
    pagination: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db_session),
) -> BirdPage:
    """Same envelope as GET /birds, scoped to birds whose speciesId is `bird_id`."""
    if await bird_service.find(db, bird_id) is None:
        raise NotFoundError(resource="bird", resource_id=bird_id)

    birds = await bird_service.subspecies(
        db,
        bird_id,
        page=pagination.page,
        per_page=pagination.per_page,
    )
    total = await bird_service.count_subspecies(db, bird_id)

    base_url = link_base(request)
    return BirdPage(
        page=pagination.page,
        per_page=pagination.per_page,
        total=total,
        links=pagination_links(base_url, request.url.path, collection_query(request, pagination), total),
        data=[decorate(bird, KIND, base_url) for bird in birds],
    )


@router.post(
    "",
    response_model=BirdResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation error or malformed JSON", "model": ErrorResponse},
        409: {"description": "Scientific name or sort already taken", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a bird",
    description=(
        "Creates a species, or a subspecies when `speciesId` references an "
        "existing species. Responds with the stored bird."
    ),
)
async def create_bird(
    payload: BirdCreate,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> BirdResponse:
    bird = await bird_service.create(db, payload)
    return decorate(bird, KIND, link_base(request))


@router.delete(
    "/{bird_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        404: {"description": "Bird not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a bird",
)
async def delete_bird(
    bird_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """Subspecies of a deleted species become species (speciesId set to null)."""
    if await bird_service.delete(db, bird_id) == 0:
        raise NotFoundError(resource="bird", resource_id=bird_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
