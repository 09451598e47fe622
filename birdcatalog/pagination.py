"""
Bird Catalogue — Pagination Links and Resource Links
======================================================

What:  Computes next/previous page URLs for collection responses and attaches
       hypermedia `links` to individual resources.
How:   Pure functions over an absolute base URL (scheme://host:port), the
       request path and the validated query parameters. The route layer
       supplies those from the incoming request (see link_base()).

Pagination rules:
    previous  null when page == 1, otherwise the same URL with page - 1
    next      null when page * perPage >= total, otherwise page + 1

    With perPage = 0, page * perPage is always 0, so a next link is offered
    for any positive total even though every page is empty.

    Every other query parameter is kept verbatim and in its original position,
    repeated keys included (?tag=a&tag=b).
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar, Union
from urllib.parse import urlencode

from fastapi import Query, Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from birdcatalog.config import settings
from birdcatalog.exceptions import ValidationError
from birdcatalog.schemas.common import PaginationLinks, PaginationParams

ResourceT = TypeVar("ResourceT", bound=BaseModel)

# Ordered (key, value) pairs; a key may repeat (?tag=a&tag=b)
QueryPairs = List[Tuple[str, Any]]
QueryLike = Union[Mapping[str, Any], Sequence[Tuple[str, Any]]]

# Collection path per resource kind
RESOURCE_PATHS: Dict[str, str] = {
    "birds": "/birds",
    "lists": "/lists",
    "bird-lists": "/bird-lists",
}


def href(base_url: str, path: str) -> str:
    """Append an absolute path to the scheme://host:port prefix."""
    return base_url.rstrip("/") + path


def page_offset(page: int, per_page: int) -> int:
    return (page - 1) * per_page


def query_pairs(query: QueryLike) -> QueryPairs:
    """Normalise a mapping or a sequence of pairs to a list of pairs."""
    if isinstance(query, Mapping):
        return list(query.items())
    return list(query)


def query_value(query: QueryLike, key: str) -> Any:
    """First value of `key`; KeyError when absent."""
    for name, value in query_pairs(query):
        if name == key:
            return value
    raise KeyError(key)


def set_query_param(query: QueryLike, key: str, value: Any) -> QueryPairs:
    """
    Return a copy of `query` with `key` set to `value`.

    The first occurrence is replaced in place and any repeats of the same key
    are dropped; an absent key is appended. Other pairs keep their order.
    """
    result: QueryPairs = []
    replaced = False
    for name, current in query_pairs(query):
        if name != key:
            result.append((name, current))
        elif not replaced:
            result.append((name, value))
            replaced = True
    if not replaced:
        result.append((key, value))
    return result


# ══════════════════════════════════════════════════════════════════════════
# Pagination Calculator
# ══════════════════════════════════════════════════════════════════════════


def pagination_links(
    base_url: str,
    path: str,
    query: QueryLike,
    total: int,
) -> PaginationLinks:
    """
    Compute the next/previous links for a page of a collection.

    Args:
        base_url: scheme://host:port prefix of the links
        path:     request path, e.g. "/birds" or "/birds/{id}/subspecies"
        query:    ordered query parameters (mapping or (key, value) pairs,
                  repeated keys allowed); must hold "page" and "perPage"
        total:    number of items in the whole collection

    Example:
        >>> pagination_links("http://localhost:8080", "/birds",
        ...                  {"page": 2, "perPage": 1}, 9).next
        'http://localhost:8080/birds?page=3&perPage=1'
    """
    page = int(query_value(query, "page"))
    per_page = int(query_value(query, "perPage"))

    next_link: Optional[str] = None
    if page * per_page < total:
        next_link = _page_link(base_url, path, query, page + 1)

    previous_link: Optional[str] = None
    if page != 1:
        previous_link = _page_link(base_url, path, query, page - 1)

    return PaginationLinks(next=next_link, previous=previous_link)


def _page_link(base_url: str, path: str, query: QueryLike, page: int) -> str:
    params = set_query_param(query, "page", page)
    return f"{href(base_url, path)}?{urlencode(params, doseq=True)}"


# ══════════════════════════════════════════════════════════════════════════
# Link Decorator
# ══════════════════════════════════════════════════════════════════════════


def decorate(resource: ResourceT, kind: str, base_url: str) -> ResourceT:
    """
    Return a copy of `resource` with its `links` object set.

    All kinds get a `self` link. Birds additionally get:
        subspecies  when the bird has at least one subspecies
        species     when the bird is itself a subspecies

    The input is not modified; decorating an already-decorated resource
    replaces its links.
    """
    try:
        collection = RESOURCE_PATHS[kind]
    except KeyError:
        raise ValueError(f"Unknown resource kind '{kind}'") from None

    links = {"self": href(base_url, f"{collection}/{resource.id}")}

    if kind == "birds":
        if (getattr(resource, "subspecies", 0) or 0) > 0:
            links["subspecies"] = href(base_url, f"{collection}/{resource.id}/subspecies")
        species_id = getattr(resource, "species_id", None)
        if species_id:
            links["species"] = href(base_url, f"{collection}/{species_id}")

    return resource.model_copy(update={"links": links})


# ══════════════════════════════════════════════════════════════════════════
# Request Helpers
# ══════════════════════════════════════════════════════════════════════════


def link_base(request: Request) -> str:
    """
    Absolute prefix for links: settings.public_url when configured,
    otherwise the scheme and host:port the request was made to.
    """
    if settings.public_url:
        return settings.public_url
    return f"{request.url.scheme}://{request.url.netloc}"


def collection_query(request: Request, pagination: PaginationParams) -> QueryPairs:
    """
    The request's query parameters as ordered pairs, repeated keys included,
    with page/perPage replaced in place by their validated values (appended
    when the request did not send them).
    """
    query = query_pairs(request.query_params.multi_items())
    query = set_query_param(query, "page", pagination.page)
    return set_query_param(query, "perPage", pagination.per_page)


def pagination_params(
    page: int = Query(default=1, description="Page number (1-based)"),
    per_page: Optional[int] = Query(
        default=None,
        alias="perPage",
        description="Items per page (0 allowed; defaults to DEFAULT_PER_PAGE)",
    ),
) -> PaginationParams:
    """
    FastAPI dependency for `page` / `perPage`.

    Range checks go through PaginationParams so an out-of-range value is
    reported as a 400 ValidationError naming the parameter.
    """
    try:
        return PaginationParams(
            page=page,
            per_page=settings.default_per_page if per_page is None else per_page,
        )
    except PydanticValidationError as exc:
        raise ValidationError.from_pydantic_errors(exc.errors()) from exc
