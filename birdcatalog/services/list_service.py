"""
Bird Catalogue — List Service
===============================

What:  Reads, creates and deletes lists, and manages which birds belong to
       a list.
How:   SQLAlchemy statements over `lists` and `list_birds`; membership
       uniqueness is left to the (list_id, bird_id) primary key so adding a
       bird is a single INSERT.
Who:   Called by the /lists and /bird-lists route handlers.

Member projection:
    SELECT birds.*, list_birds.*,
           coalesce(list_birds.local_name, birds.common_name) AS common_name
      FROM list_birds JOIN birds ON birds.id = list_birds.bird_id
     WHERE list_birds.list_id = :list_id
     ORDER BY list_birds.sort, birds.sort
"""

import logging
import uuid
from typing import Any, List, Mapping, Optional, Union

from sqlalchemy import Select, delete, func, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from birdcatalog.exceptions import DatabaseError, NotFoundError
from birdcatalog.models.bird import Bird
from birdcatalog.models.bird_list import BirdList, ListBird
from birdcatalog.pagination import page_offset
from birdcatalog.schemas.bird_list import (
    ListCreate,
    ListMemberResponse,
    ListResponse,
    MembershipCreate,
)
from birdcatalog.services.base import parse_id, translate_write_error, validate_payload

logger = logging.getLogger(__name__)


def to_list_response(bird_list: BirdList) -> ListResponse:
    return ListResponse(
        id=bird_list.id,
        name=bird_list.name,
        description=bird_list.description,
        created_at=bird_list.created_at,
        updated_at=bird_list.updated_at,
    )


def to_member_response(bird: Bird, membership: ListBird, display_name: str) -> ListMemberResponse:
    """Joined bird + membership row → list member. Timestamps are the membership's."""
    return ListMemberResponse(
        id=bird.id,
        common_name=display_name,
        scientific_name=bird.scientific_name,
        family_name=bird.family_name,
        family=bird.family,
        order=bird.order,
        local_name=membership.local_name,
        sort=membership.sort,
        created_at=membership.created_at,
        updated_at=membership.updated_at,
    )


class ListService:
    """
    Business logic layer for lists and list membership.

    Lists:       all(), count(), find(), create(), delete()
    Membership:  members(), count_members(), add_membership(), remove_membership()
    """

    async def _execute(self, db: AsyncSession, stmt: Select, action: str):
        try:
            return await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Database error %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve lists. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

    # ── Lists ─────────────────────────────────────────────────────────────

    async def all(self, db: AsyncSession, page: int = 1, per_page: int = 20) -> List[ListResponse]:
        """Lists ordered by name."""
        stmt = (
            select(BirdList)
            .order_by(BirdList.name.asc())
            .limit(per_page)
            .offset(page_offset(page, per_page))
        )
        result = await self._execute(db, stmt, "listing lists")
        return [to_list_response(row) for row in result.scalars().all()]

    async def count(self, db: AsyncSession) -> int:
        result = await self._execute(db, select(func.count(BirdList.id)), "counting lists")
        return int(result.scalar() or 0)

    async def find(self, db: AsyncSession, list_id: Union[str, uuid.UUID]) -> Optional[ListResponse]:
        """Returns None when the list does not exist."""
        parsed = parse_id(list_id)
        if parsed is None:
            return None
        result = await self._execute(
            db,
            select(BirdList).where(BirdList.id == parsed),
            f"fetching list {parsed}",
        )
        row = result.scalar_one_or_none()
        return to_list_response(row) if row is not None else None

    async def create(
        self,
        db: AsyncSession,
        payload: Union[ListCreate, Mapping[str, Any]],
    ) -> ListResponse:
        """Validate and insert a list; a duplicate name raises ConflictError."""
        data = validate_payload(ListCreate, payload)

        bird_list = BirdList(name=data.name, description=data.description)
        db.add(bird_list)
        try:
            await db.flush()
        except SQLAlchemyError as e:
            raise translate_write_error(
                e,
                conflict_message=f"A list named '{data.name}' already exists",
                context={"name": data.name},
            ) from e

        logger.info("List created: %s (%s)", bird_list.id, bird_list.name)
        return await self.find(db, bird_list.id)

    async def delete(self, db: AsyncSession, list_id: Union[str, uuid.UUID]) -> int:
        """Delete by id, memberships included. Returns 0 or 1."""
        parsed = parse_id(list_id)
        if parsed is None:
            return 0
        result = await self._write(
            db,
            delete(BirdList).where(BirdList.id == parsed),
            f"deleting list {parsed}",
        )
        if result.rowcount:
            logger.info("List deleted: %s", parsed)
        return result.rowcount

    # ── Membership ────────────────────────────────────────────────────────

    async def members(
        self,
        db: AsyncSession,
        list_id: Union[str, uuid.UUID],
        page: int = 1,
        per_page: int = 20,
    ) -> List[ListMemberResponse]:
        """
        Birds in a list, with commonName replaced by the membership's
        localName where one was given.
        """
        parsed = parse_id(list_id)
        if parsed is None:
            return []
        display_name = func.coalesce(ListBird.local_name, Bird.common_name).label("display_name")
        stmt = (
            select(Bird, ListBird, display_name)
            .join(ListBird, ListBird.bird_id == Bird.id)
            .where(ListBird.list_id == parsed)
            .order_by(ListBird.sort.asc(), Bird.sort.asc())
            .limit(per_page)
            .offset(page_offset(page, per_page))
        )
        result = await self._execute(db, stmt, f"listing members of {parsed}")
        return [to_member_response(bird, membership, name) for bird, membership, name in result.all()]

    async def count_members(self, db: AsyncSession, list_id: Union[str, uuid.UUID]) -> int:
        parsed = parse_id(list_id)
        if parsed is None:
            return 0
        result = await self._execute(
            db,
            select(func.count()).select_from(ListBird).where(ListBird.list_id == parsed),
            f"counting members of {parsed}",
        )
        return int(result.scalar() or 0)

    async def add_membership(
        self,
        db: AsyncSession,
        list_id: Union[str, uuid.UUID],
        payload: Union[MembershipCreate, Mapping[str, Any]],
    ) -> None:
        """
        Add a bird to a list.

        Raises:
            ValidationError:  payload does not match MembershipCreate
            NotFoundError:    the list or the bird does not exist
            ConflictError:    the bird is already in the list, or the sort
                              position is taken
        """
        data = validate_payload(MembershipCreate, payload)

        parsed = parse_id(list_id)
        if parsed is None or await self.find(db, parsed) is None:
            raise NotFoundError(resource="list", resource_id=str(list_id))

        bird_exists = await self._execute(
            db,
            select(Bird.id).where(Bird.id == data.bird_id),
            f"checking bird {data.bird_id}",
        )
        if bird_exists.scalar_one_or_none() is None:
            raise NotFoundError(resource="bird", resource_id=str(data.bird_id))

        stmt = insert(ListBird).values(
            list_id=parsed,
            bird_id=data.bird_id,
            local_name=data.local_name,
            sort=data.sort,
        )
        try:
            await db.execute(stmt)
        except SQLAlchemyError as e:
            raise translate_write_error(
                e,
                conflict_message=(
                    f"Bird '{data.bird_id}' is already in list '{parsed}' "
                    f"or sort {data.sort} is taken"
                ),
                context={"list_id": str(parsed), "bird_id": str(data.bird_id)},
            ) from e

        logger.info("Bird %s added to list %s", data.bird_id, parsed)

    async def remove_membership(
        self,
        db: AsyncSession,
        list_id: Union[str, uuid.UUID],
        bird_id: Union[str, uuid.UUID],
    ) -> int:
        """Remove a bird from a list. Returns 0 or 1."""
        parsed_list = parse_id(list_id)
        parsed_bird = parse_id(bird_id)
        if parsed_list is None or parsed_bird is None:
            return 0
        result = await self._write(
            db,
            delete(ListBird).where(
                ListBird.list_id == parsed_list,
                ListBird.bird_id == parsed_bird,
            ),
            f"removing bird {parsed_bird} from list {parsed_list}",
        )
        return result.rowcount

    async def _write(self, db: AsyncSession, stmt, action: str):
        try:
            return await db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error("Database error %s: %s", action, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update lists. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e


# ── Singleton Instance ────────────────────────────────────────────────────
list_service = ListService()
