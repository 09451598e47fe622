"""
Bird Catalogue — Lists Route Handlers
=======================================

What:  /lists collection, single list, create/delete, and list membership.
How:   build_router() registers the handlers under a prefix so the same
       handlers also serve the /bird-lists alias (see bird_lists.py).

Endpoints (prefix /lists):
    GET    /lists                          paginated, ordered by name
    GET    /lists/{id}                     single list
    POST   /lists                          create (201)
    DELETE /lists/{id}                     delete (204)
    GET    /lists/{id}/birds               paginated members + birdList
    POST   /lists/{id}/birds               add a bird (204)
    DELETE /lists/{listId}/birds/{birdId}  remove a bird (204)
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
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
from birdcatalog.schemas.bird_list import (
    ListCreate,
    ListMembersPage,
    ListPage,
    ListResponse,
    MembershipCreate,
)
from birdcatalog.schemas.common import ErrorResponse, PaginationParams
from birdcatalog.services.list_service import list_service

logger = logging.getLogger(__name__)


def build_router(prefix: str, kind: str, tag: str, with_members: bool = True) -> APIRouter:
    """
    Create a router serving the list endpoints under `prefix`.

    `kind` selects the collection used in `self` links ("lists" or
    "bird-lists"). Membership endpoints are only registered when
    `with_members` is set.
    """
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.get(
        "",
        response_model=ListPage,
        responses={
            400: {"description": "Invalid pagination parameters", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="List bird lists",
    )
    async def list_lists(
        request: Request,
        pagination: PaginationParams = Depends(pagination_params),
        db: AsyncSession = Depends(get_db_session),
    ) -> ListPage:
        lists = await list_service.all(db, page=pagination.page, per_page=pagination.per_page)
        total = await list_service.count(db)

        base_url = link_base(request)
        return ListPage(
            page=pagination.page,
            per_page=pagination.per_page,
            total=total,
            links=pagination_links(base_url, request.url.path, collection_query(request, pagination), total),
            data=[decorate(item, kind, base_url) for item in lists],
        )

    @router.get(
        "/{list_id}",
        response_model=ListResponse,
        responses={
            404: {"description": "List not found", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="Get a single list",
    )
    async def get_list(
        list_id: str,
        request: Request,
        db: AsyncSession = Depends(get_db_session),
    ) -> ListResponse:
        bird_list = await list_service.find(db, list_id)
        if bird_list is None:
            raise NotFoundError(resource="list", resource_id=list_id)
        return decorate(bird_list, kind, link_base(request))

    @router.post(
        "",
        response_model=ListResponse,
        status_code=status.HTTP_201_CREATED,
        responses={
            400: {"description": "Validation error or malformed JSON", "model": ErrorResponse},
            409: {"description": "List name already taken", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="Create a list",
    )
    async def create_list(
        payload: ListCreate,
        request: Request,
        db: AsyncSession = Depends(get_db_session),
    ) -> ListResponse:
        bird_list = await list_service.create(db, payload)
        return decorate(bird_list, kind, link_base(request))

    @router.delete(
        "/{list_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={
            404: {"description": "List not found", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="Delete a list and its memberships",
    )
    async def delete_list(
        list_id: str,
        db: AsyncSession = Depends(get_db_session),
    ) -> Response:
        if await list_service.delete(db, list_id) == 0:
            raise NotFoundError(resource="list", resource_id=list_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    if not with_members:
        return router

    # ── Membership ────────────────────────────────────────────────────────

    @router.get(
        "/{list_id}/birds",
        response_model=ListMembersPage,
        responses={
            404: {"description": "List not found", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="List the birds in a list",
        description=(
            "Birds ordered by their position in the list. `commonName` is the "
            "list's local name for the bird when one was given."
        ),
    )
    async def list_members(
        list_id: str,
        request: Request,
        pagination: PaginationParams = Depends(pagination_params),
        db: AsyncSession = Depends(get_db_session),
    ) -> ListMembersPage:
        bird_list = await list_service.find(db, list_id)
        if bird_list is None:
            raise NotFoundError(resource="list", resource_id=list_id)

        members = await list_service.members(
            db,
            bird_list.id,
            page=pagination.page,
            per_page=pagination.per_page,
        )
        total = await list_service.count_members(db, bird_list.id)

        base_url = link_base(request)
        return ListMembersPage(
            page=pagination.page,
            per_page=pagination.per_page,
            total=total,
            bird_list=decorate(bird_list, kind, base_url),
            links=pagination_links(base_url, request.url.path, collection_query(request, pagination), total),
            data=[decorate(member, "birds", base_url) for member in members],
        )

    @router.post(
        "/{list_id}/birds",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={
            400: {"description": "Validation error or malformed JSON", "model": ErrorResponse},
            404: {"description": "List or bird not found", "model": ErrorResponse},
            409: {"description": "Bird already in the list", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="Add a bird to a list",
    )
    async def add_member(
        list_id: str,
        payload: MembershipCreate,
        db: AsyncSession = Depends(get_db_session),
    ) -> Response:
        await list_service.add_membership(db, list_id, payload)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @router.delete(
        "/{list_id}/birds/{bird_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        responses={
            404: {"description": "Bird is not in the list", "model": ErrorResponse},
            500: {"description": "Server error", "model": ErrorResponse},
        },
        summary="Remove a bird from a list",
    )
    async def remove_member(
        list_id: str,
        bird_id: str,
        db: AsyncSession = Depends(get_db_session),
    ) -> Response:
        if await list_service.remove_membership(db, list_id, bird_id) == 0:
            raise NotFoundError(
                resource="list membership",
                resource_id=f"{list_id}/{bird_id}",
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router


# ── Router Configuration ──────────────────────────────────────────────────
router = build_router("/lists", kind="lists", tag="Lists")
